import logging
from typing import Any

from cmdkit.commands.registry import CommandRegistry
from cmdkit.commands.sink import CommandMap, CommandSink
from cmdkit.config import Settings
from cmdkit.logging_config import configure_logging

logger = logging.getLogger(__name__)


def bootstrap(
    *definitions: Any,
    settings: Settings | None = None,
    sink: CommandSink | None = None,
) -> tuple[CommandRegistry, CommandSink]:
    """Configure logging, register ``definitions`` and return the registry with its sink."""
    settings = settings or Settings()

    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
        engine_level=settings.log_engine_level,
    )

    if sink is None:
        sink = CommandMap()

    registry = CommandRegistry(definitions, sink, settings=settings)
    names = registry.register()
    logger.info("Registered %d command(s): %s", len(names), ", ".join(names) or "none")
    return registry, sink
