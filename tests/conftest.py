import pytest

from patchspace.config.loader import reset_config_cache

@pytest.fixture(autouse=True)
def isolated_user_dir(tmp_path_factory, monkeypatch):
    """Keeps config and log files out of the real user profile."""
    home = tmp_path_factory.mktemp("patchspace_home")
    monkeypatch.setenv("PATCHSPACE_HOME", str(home))
    reset_config_cache()
    yield home
    reset_config_cache()

@pytest.fixture
def offline_tokens(mocker):
    """Token counting without loading tiktoken encodings (they are fetched over the network on first use)."""
    from patchspace.core import context_builder, token_counter
    return mocker.patch.object(context_builder, "count_tokens", side_effect=token_counter.estimate_tokens)
