import logging
import sys


class Log:
    """Centralized logging for the verification pipeline."""

    _logger: logging.Logger = logging.getLogger("voucher_verifier")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a single stdout handler.

        Safe to call more than once; later calls only change the level.
        """
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Stage progress: codes extracted, vouchers resolved and verified."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """A verification or batch item that ended in failure."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Non-fatal trouble, such as an unreadable page or a lost audit entry."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Detail that is only useful while diagnosing a document."""
        cls._logger.debug(message, extra=kwargs)
