import importlib
import logging

import pytest

import salesforce_revoke_session.logger as sf_logger
from salesforce_revoke_session.logger import PACKAGE_LOGGER, log_revocation_action, setup_logging


@pytest.fixture
def host_handler():
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    yield handler
    root.removeHandler(handler)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def test_import_leaves_host_logging_untouched(host_handler):
    root = logging.getLogger()
    root_level = root.level

    importlib.reload(sf_logger)

    assert host_handler in root.handlers
    assert root.level == root_level


def test_import_adds_a_single_null_handler():
    importlib.reload(sf_logger)
    importlib.reload(sf_logger)

    handlers = logging.getLogger(PACKAGE_LOGGER).handlers
    assert sum(isinstance(h, logging.NullHandler) for h in handlers) == 1


def test_setup_logging_only_touches_package_logger(host_handler, package_logger):
    root_handlers = list(logging.getLogger().handlers)

    logger = setup_logging(log_level="DEBUG")

    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert logging.getLogger().handlers == root_handlers


def test_setup_logging_replaces_its_own_handlers(package_logger):
    foreign = logging.NullHandler()
    package_logger.addHandler(foreign)

    setup_logging()
    first = [h for h in package_logger.handlers if isinstance(h, logging.StreamHandler)]
    setup_logging()
    second = [h for h in package_logger.handlers if isinstance(h, logging.StreamHandler)]

    assert len(first) == len(second) == 1
    assert first != second
    assert foreign in package_logger.handlers


def test_setup_logging_writes_log_files(package_logger, tmp_path):
    setup_logging(log_to_file=True, log_dir=str(tmp_path / "logs"))

    logging.getLogger("salesforce_revoke_session.workflows").error("boom")
    for handler in package_logger.handlers:
        handler.flush()

    assert "boom" in (tmp_path / "logs" / "salesforce_revoke_session.log").read_text()
    assert "boom" in (tmp_path / "logs" / "salesforce_revoke_session_errors.log").read_text()


@pytest.mark.parametrize(
    "result,level",
    [("SUCCESS", logging.INFO), ("FAILED", logging.ERROR), ("SKIPPED", logging.WARNING)],
)
def test_log_revocation_action_levels(caplog, result, level):
    with caplog.at_level(logging.DEBUG):
        log_revocation_action("a@b.com", "REVOKE_SESSIONS", result, "2/2 sessions revoked")

    (record,) = [r for r in caplog.records if r.name == "salesforce_revoke_session.logger"]
    assert record.levelno == level
    assert record.getMessage() == f"REVOCATION_ACTION | a@b.com | REVOKE_SESSIONS | {result} | 2/2 sessions revoked"
