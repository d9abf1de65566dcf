import logging
import os
import sys

from pythonjsonlogger.json import JsonFormatter

ENGINE_LOGGER = "cmdkit"

_JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_formatter(json_format: bool) -> logging.Formatter:
    if not json_format:
        return logging.Formatter(_PLAIN_FORMAT)
    return JsonFormatter(
        fmt=_JSON_FIELDS,
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
    )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
    engine_level: str | None = None,
) -> None:
    """Route every record to stderr (and ``log_file`` when given).

    ``engine_level`` tunes the engine's own loggers independently of the root,
    e.g. ``"WARNING"`` keeps registration chatter out of a busy host log.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = _build_formatter(json_format)
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    engine = logging.getLogger(ENGINE_LOGGER)
    engine.setLevel(engine_level.upper() if engine_level else logging.NOTSET)
