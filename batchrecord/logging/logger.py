import logging
import sys


class _ContextFormatter(logging.Formatter):
    """Appends the keyword context passed to Log.* as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context: dict[str, object] = getattr(record, "context", {})
        if not context:
            return line
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        return f"{line} | {pairs}"


class Log:
    """Centralized logging for the intake pipeline.

    Keyword arguments are carried as structured context, e.g.
    ``Log.info("Extraction ready", file_id=file.id)``.
    """

    _logger: logging.Logger = logging.getLogger("batchrecord")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stdout handler once."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                _ContextFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(message, extra={"context": context})

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(message, extra={"context": context})

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(message, extra={"context": context})

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(message, extra={"context": context})
