import logging
from unittest.mock import MagicMock

from cmdkit.bootstrap import bootstrap
from cmdkit.commands.caller import BasicCaller
from cmdkit.commands.sink import CommandMap
from cmdkit.config import Settings
from tests.sample_commands import EmptyCommand, GiveCommand, WarpCommand


def test_bootstrap_builds_a_command_map(restore_root_logger):
    settings = Settings(_env_file=None, log_json=False, fallback_prefix="demo")
    registry, sink = bootstrap(WarpCommand, GiveCommand, EmptyCommand, settings=settings)

    assert isinstance(sink, CommandMap)
    assert [d.name for d in registry.list_commands()] == ["warp", "give"]
    assert sink.get("demo:warp") is not None

    player = BasicCaller("Steve")
    assert sink.dispatch("/warp link spawn", player) is True
    assert registry.get("warp").definition.calls == [("link", "Steve", ["spawn"])]


def test_bootstrap_with_host_sink(restore_root_logger):
    host_sink = MagicMock()
    registry, sink = bootstrap(
        WarpCommand, settings=Settings(_env_file=None, log_json=False), sink=host_sink
    )

    assert sink is host_sink
    host_sink.register.assert_called_once()
    assert registry.get("warp") is not None


def test_bootstrap_configures_logging(restore_root_logger, tmp_path):
    log_file = tmp_path / "cmdkit.log"
    settings = Settings(_env_file=None, log_level="warning", log_file=str(log_file))
    bootstrap(settings=settings)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert log_file.exists()


def test_bootstrap_applies_engine_log_level(restore_root_logger):
    settings = Settings(_env_file=None, log_json=False, log_engine_level="ERROR")
    bootstrap(settings=settings)

    assert logging.getLogger("cmdkit").level == logging.ERROR
    assert restore_root_logger.level == logging.INFO
