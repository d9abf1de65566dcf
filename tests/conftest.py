import logging

import pytest

from cmdkit.commands.caller import BasicCaller, CallerKind
from cmdkit.commands.registry import CommandRegistry
from cmdkit.commands.sink import CommandMap
from cmdkit.config import Settings
from tests.sample_commands import (
    AdminCommand,
    BoomCommand,
    EmptyCommand,
    GiveCommand,
    UnmarkedCommand,
    WarpCommand,
)

TEST_SETTINGS = Settings(_env_file=None, log_json=False)


@pytest.fixture
def settings() -> Settings:
    return TEST_SETTINGS


@pytest.fixture
def player() -> BasicCaller:
    return BasicCaller("Steve")


@pytest.fixture
def console() -> BasicCaller:
    return BasicCaller("CONSOLE", kind=CallerKind.CONSOLE, permissions={"*"})


@pytest.fixture
def command_map() -> CommandMap:
    return CommandMap()


@pytest.fixture
def warp() -> WarpCommand:
    return WarpCommand()


@pytest.fixture
def give() -> GiveCommand:
    return GiveCommand()


@pytest.fixture
def command_registry(settings, command_map, warp, give) -> CommandRegistry:
    AdminCommand.reloads = 0
    registry = CommandRegistry(
        [warp, AdminCommand, give, BoomCommand, EmptyCommand, UnmarkedCommand],
        command_map,
        settings=settings,
    )
    registry.register()
    return registry


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    engine = logging.getLogger("cmdkit")
    handlers, level, engine_level = list(root.handlers), root.level, engine.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    engine.setLevel(engine_level)
