import asyncio
from pathlib import Path

import pytest

from patchspace.config.schema import AppConfig
from patchspace.core import ingestion
from patchspace.core.ingestion import IngestionTask, ingest_entries, is_ignored, load_directory, read_directory, start_ingestion
from patchspace.core.models import BINARY_PLACEHOLDER, IngestEntry

PATTERNS = AppConfig().ignore_patterns

@pytest.mark.parametrize("path", [
    ".git/config",
    "node_modules/pkg/index.js",
    "project/.git/HEAD",
    "project/node_modules/lodash/lodash.js",
    "project/.DS_Store",
    "project/THUMBS.DB",
    "project/src/__pycache__/mod.cpython-311.pyc",
    "project/mod.pyc",
    ".env",
])
def test_ignored_paths(path):
    assert is_ignored(path, PATTERNS)

@pytest.mark.parametrize("path", ["project/src/app.js", "readme.md", "project/Makefile", "project/gitignore.txt"])
def test_kept_paths(path):
    assert not is_ignored(path, PATTERNS)

def test_ingest_entries_filters_and_flags():
    entries = [
        IngestEntry(path=".git/config", content="[core]"),
        IngestEntry(path="node_modules/pkg/index.js", content="module.exports = 1"),
        IngestEntry(path="project/src/app.js", content="console.log(1)", mime_type="text/javascript"),
        IngestEntry(path="project/logo.png", content=None, binary=True, mime_type="image/png"),
        IngestEntry(path="project/broken.txt", content=None),
    ]
    index = ingest_entries(entries, PATTERNS)

    assert sorted(index.paths()) == ["project/logo.png", "project/src/app.js"]
    app = index.get("project/src/app.js")
    assert app.content == "console.log(1)"
    assert app.modified is False
    assert app.binary is False
    logo = index.get("project/logo.png")
    assert logo.binary is True
    assert logo.content == BINARY_PLACEHOLDER

def make_project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "src" / "b").mkdir(parents=True)
    (root / "src" / "a.js").write_text("let a = 1;", encoding="utf-8")
    (root / "src" / "b" / "c.css").write_text("p {}", encoding="utf-8")
    (root / "readme.md").write_text("# Hi", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n")
    (root / "latin.txt").write_bytes(b"caf\xe9")
    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("[core]", encoding="utf-8")
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "node_modules" / "pkg" / "index.js").write_text("x", encoding="utf-8")
    return root

def test_read_directory_prefixes_folder_name_and_skips_ignored(tmp_path):
    root = make_project(tmp_path)
    entries = asyncio.run(read_directory(root, PATTERNS))
    by_path = {e.path: e for e in entries}

    assert set(by_path) == {"project/src/a.js", "project/src/b/c.css", "project/readme.md", "project/logo.png", "project/latin.txt"}
    assert by_path["project/src/a.js"].content == "let a = 1;"
    assert by_path["project/logo.png"].binary is True
    # Not valid UTF-8: unreadable, but the batch still completes
    assert by_path["project/latin.txt"].content is None

def test_load_directory_populates_index_after_all_reads(tmp_path):
    root = make_project(tmp_path)
    index = asyncio.run(load_directory(root, PATTERNS))
    assert sorted(index.paths()) == ["project/logo.png", "project/readme.md", "project/src/a.js", "project/src/b/c.css"]

def test_read_directory_rejects_non_directory(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(ValueError):
        asyncio.run(read_directory(missing, PATTERNS))

def test_failed_read_is_skipped(tmp_path, mocker):
    root = make_project(tmp_path)
    original = Path.read_text

    def flaky_read_text(self, *args, **kwargs):
        if self.name == "a.js":
            raise PermissionError("denied")
        return original(self, *args, **kwargs)

    mocker.patch.object(Path, "read_text", flaky_read_text)
    index = asyncio.run(load_directory(root, PATTERNS))
    assert "project/src/a.js" not in index
    assert "project/readme.md" in index

def test_ingestion_task_emits_entries(tmp_path):
    root = make_project(tmp_path)
    task = IngestionTask(root, PATTERNS)
    received = []
    errors = []
    task.signals.finished.connect(lambda entries: received.append(entries))
    task.signals.error.connect(lambda message: errors.append(message))

    task.run()

    assert errors == []
    assert len(received) == 1
    assert {e.path for e in received[0]} >= {"project/src/a.js", "project/readme.md"}

def test_ingestion_task_reports_bad_folder(tmp_path):
    task = IngestionTask(tmp_path / "missing", PATTERNS)
    errors = []
    task.signals.error.connect(lambda message: errors.append(message))
    task.run()
    assert len(errors) == 1
    assert "not a valid directory" in errors[0]

def test_start_ingestion_submits_to_thread_pool(tmp_path, mocker):
    submitted = mocker.patch.object(ingestion, "run_in_background")
    task = start_ingestion(tmp_path, PATTERNS, on_finished=lambda entries: None)
    submitted.assert_called_once_with(task)
