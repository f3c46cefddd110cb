"""Logging configuration for the service process."""

import logging
import sys

# Chatty client libraries: only warnings and above reach the console.
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer", "httpx", "httpcore")


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep taskhub and uvicorn logs, drop low-level chatter from AWS/HTTP clients."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_NOISY_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Install a single stderr handler on the root logger.

    Call this once, before the server starts. Existing root handlers are
    removed so repeated calls (e.g. under reload) do not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
