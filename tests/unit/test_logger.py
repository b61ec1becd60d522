import logging
from collections.abc import Generator

import pytest

from voucher_verifier.logging.logger import Log


@pytest.fixture(autouse=True)
def restore_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger("voucher_verifier")
    level, handlers = logger.level, list(logger.handlers)
    logger.handlers = []
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


class TestConfigure:
    def test_sets_level_case_insensitively(self, restore_logger: logging.Logger) -> None:
        Log.configure("debug")
        assert restore_logger.level == logging.DEBUG

    def test_adds_one_handler_even_when_called_twice(
        self, restore_logger: logging.Logger
    ) -> None:
        Log.configure("INFO")
        Log.configure("WARNING")

        assert len(restore_logger.handlers) == 1
        assert restore_logger.level == logging.WARNING


class TestMessages:
    def test_warning_reaches_voucher_verifier_logger(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="voucher_verifier"):
            Log.warning("Text layer unreadable")

        assert [record.getMessage() for record in caplog.records] == ["Text layer unreadable"]
        assert caplog.records[0].name == "voucher_verifier"
