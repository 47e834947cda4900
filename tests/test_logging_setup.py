import logging

from registry.logging.logging_setup import ColoredFormatter, ColorLogger, CustomFormatter, get_log_level


def make_record(level: int, msg: str, **extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"msg": msg, "levelno": level, "levelname": logging.getLevelName(level)})
    record.__dict__.update(extra)
    return record


def test_color_keyword_lands_on_the_record(caplog):
    logger = ColorLogger(logging.getLogger("schemactl-color"))
    caplog.set_level(logging.DEBUG, logger="schemactl-color")

    logger.debug("Using %s registry", "docontology", color="cyan")
    logger.info("plain")

    colored, plain = caplog.records
    assert colored.getMessage() == "Using docontology registry"
    assert colored.color == "cyan"
    assert not hasattr(plain, "color")


def test_colored_formatter_wraps_colored_lines():
    formatter = ColoredFormatter("UTC", "%(levelname)s - %(message)s")

    assert formatter.format(make_record(logging.INFO, "hello", color="green")) == "\033[32mINFO - hello\033[0m"
    assert formatter.format(make_record(logging.INFO, "hello")) == "INFO - hello"


def test_error_lines_are_marked():
    formatter = CustomFormatter("UTC", "%(message)s")

    assert formatter.format(make_record(logging.ERROR, "boom")) == "⛔ boom"


def test_log_level_defaults_to_critical(monkeypatch):
    assert get_log_level() == logging.CRITICAL

    monkeypatch.setenv("LOG_LEVEL", " Debug ")
    assert get_log_level() == logging.DEBUG
