import logging

from pingguard.config.settings import get_logging_config, get_settings
from pingguard.core.logging import configure_logging


def test_configure_logging_applies_settings_level(monkeypatch):
    monkeypatch.setenv("PINGGUARD_LOG_LEVEL", "warning")
    get_settings.cache_clear()
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    try:
        configure_logging()
        assert root.level == logging.WARNING
        # The packaged config stays untouched for the next caller.
        assert get_logging_config()["root"]["level"] == "INFO"
    finally:
        get_settings.cache_clear()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
