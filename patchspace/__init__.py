# patchspace/__init__.py
# Library modules log through loguru; the CLI configures sinks via services.logging.setup_logging()

__version__ = "0.1.0"
