import logging

from filecache.domain.events.cache_events import CacheHit, CacheItemRepaired
from filecache.infrastructure.monitoring.event_log import log_cache_event
from filecache.infrastructure.monitoring.logger_setup import resolve_log_level, setup_logging


def test_resolve_log_level():
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level("INFO") == logging.INFO
    assert resolve_log_level(None) == logging.WARNING
    assert resolve_log_level("nonsense", default=logging.ERROR) == logging.ERROR


def test_setup_logging_replaces_handlers(tmp_path):
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    log_file = tmp_path / "filecache.log"
    try:
        setup_logging(log_level=logging.INFO, log_file=str(log_file))
        logging.getLogger("filecache.test").info("hello from test")

        assert len(root_logger.handlers) == 2
        assert root_logger.level == logging.INFO
        for handler in root_logger.handlers:
            handler.flush()
        assert "hello from test" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


def test_setup_logging_reports_level_source_and_targets(tmp_path):
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    log_file = tmp_path / "filecache.log"
    try:
        setup_logging(log_level=logging.DEBUG, log_file=str(log_file), source="--verbose")
        for handler in root_logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "Logging configured: level=DEBUG (from --verbose)" in text
        assert f"targets=stderr, {log_file}" in text
    finally:
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


def test_log_cache_event_levels(caplog):
    caplog.set_level(logging.DEBUG, logger="filecache.infrastructure.monitoring.event_log")

    log_cache_event(CacheHit(namespace="users", name="jerry"))
    log_cache_event(CacheItemRepaired(namespace="users", name="jerry", reason="corrupt_data", removed=("a",)))

    hit, repaired = caplog.records
    assert hit.levelno == logging.DEBUG
    assert "CacheHit: namespace=users, name=jerry" == hit.getMessage()
    assert repaired.levelno == logging.WARNING
    assert "reason=corrupt_data" in repaired.getMessage()
    assert "timestamp" not in repaired.getMessage()
