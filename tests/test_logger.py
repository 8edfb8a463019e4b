"""Tests for the logger module."""

import logging
from unittest.mock import patch

import pytest

import pgdocstore.logger as logger_module
from pgdocstore.logger import Logger, get_logger, setup_global_logging
from pgdocstore.settings import settings


@pytest.fixture
def unconfigured():
    logger_module._configured = False
    yield
    logger_module._configured = False


class TestSetupGlobalLogging:
    @pytest.mark.parametrize(
        "level,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("NOPE", logging.INFO),
        ],
    )
    def test_level_mapping(self, unconfigured, level, expected):
        with patch("logging.basicConfig") as basic_config:
            setup_global_logging(level=level)
            basic_config.assert_called_once()
            assert basic_config.call_args.kwargs["level"] == expected

    def test_configures_once(self):
        logger_module._configured = True
        with patch("logging.basicConfig") as basic_config:
            setup_global_logging()
            basic_config.assert_not_called()

    def test_logger_triggers_setup(self, unconfigured):
        with patch("pgdocstore.logger.setup_global_logging") as setup:
            Logger("docstore")
            setup.assert_called_once_with(settings.LOG_LEVEL)


class TestLogger:
    @pytest.fixture
    def logger(self, unconfigured):
        with patch("logging.basicConfig"):
            return Logger("docstore.test")

    def test_get_logger(self, unconfigured):
        with patch("logging.basicConfig"):
            assert get_logger("pgdocstore.dbs").name == "pgdocstore.dbs"
            assert get_logger().name == "pgdocstore"

    @pytest.mark.parametrize("method", ["debug", "info", "warning"])
    def test_level_methods_delegate(self, logger, method):
        with patch.object(logger._logger, method) as delegate:
            getattr(logger, method)("Collection '%s' created.", "animals")
            delegate.assert_called_once_with("Collection '%s' created.", "animals")

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_message_follows_configured_level(self, logger, level, expected):
        with patch.object(settings, "LOG_LEVEL", level):
            with patch.object(logger._logger, "log") as log:
                logger.message("Added document '%s'.", "x")
                log.assert_called_once_with(expected, "Added document '%s'.", "x")

    def test_sql_logs_at_debug(self, logger):
        with patch.object(logger._logger, "debug") as debug:
            logger.sql("DROP TABLE em_ds_animals")
            debug.assert_called_once_with("SQL: %s params=%s", "DROP TABLE em_ds_animals", None)


class TestStoreLogging:
    def test_rollback_is_logged(self, store, fake_conn):
        fake_conn.fail_on("INSERT INTO")
        with patch.object(store.logger, "warning") as warning:
            with pytest.raises(Exception):
                store.add_doc("animals", "x", {})
            warning.assert_called_once()

    def test_mutation_is_logged(self, store):
        with patch.object(store.logger, "message") as message:
            store.delete_doc("animals", "x")
            message.assert_called_once_with("Deleted document '%s' from '%s'.", "x", "animals")

    def test_sql_is_logged_at_debug(self, store):
        with patch.object(store.logger, "debug") as debug:
            store.drop_collection("animals")
            debug.assert_called_once_with("SQL: %s params=%s", "DROP TABLE em_ds_animals", None)
