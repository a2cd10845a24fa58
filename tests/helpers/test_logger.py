import logging

from sledgehammer.helpers.logger import setup_logger


def test_setup_logger_adds_handlers(monkeypatch):
    """Creates handlers and respects stderr routing.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
    """
    monkeypatch.setattr("sys.stdout.isatty", lambda: False)
    logger = setup_logger(name="sledgehammer.test_logger", level=logging.INFO, to_stderr=True)
    assert logger.handlers
    assert any(getattr(h, "level", None) == logging.INFO for h in logger.handlers)


def test_setup_logger_idempotent():
    """Returns existing logger when handlers are already configured."""
    name = "sledgehammer.test_logger.idempotent"
    logger_first = setup_logger(name=name, level=logging.INFO)
    handler_count = len(logger_first.handlers)
    logger_second = setup_logger(name=name, level=logging.DEBUG)
    assert logger_second is logger_first
    assert len(logger_second.handlers) == handler_count


def test_level_defaults_to_settings(monkeypatch):
    monkeypatch.setenv("SLEDGEHAMMER_LOG_LEVEL", "debug")
    logger = setup_logger(name="sledgehammer.test_logger.from_settings")
    assert logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("SLEDGEHAMMER_LOG_LEVEL", "chatty")
    logger = setup_logger(name="sledgehammer.test_logger.bad_level")
    assert logger.level == logging.INFO
