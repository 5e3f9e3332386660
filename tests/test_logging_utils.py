import logging

import pytest

from metderive.logging_utils import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_console_logging():
    logger = setup_logging("debug")

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_file_logging(tmp_path):
    log_file = tmp_path / "logs" / "metderive.log"
    logger = setup_logging("INFO", log_file=str(log_file), console_output=False)

    logging.getLogger("metderive.vpd").info("computed")
    for handler in logger.handlers:
        handler.flush()

    assert log_file.exists()
    assert "metderive.vpd - INFO - computed" in log_file.read_text()


def test_repeated_setup_replaces_handlers():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("LOUD")
