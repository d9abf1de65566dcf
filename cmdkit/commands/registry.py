from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from typing import Any

from cmdkit.commands.caller import Caller
from cmdkit.commands.completion import Completer, CompletionResolver
from cmdkit.commands.descriptor import CommandDescriptor
from cmdkit.commands.dispatcher import Dispatcher, DispatchResult
from cmdkit.commands.exceptions import RegistrationFailure
from cmdkit.commands.markers import CommandMarker, get_class_permission, get_command_marker
from cmdkit.commands.permissions import PermissionGate
from cmdkit.commands.sink import CommandSink
from cmdkit.commands.table import HandlerTable, build_handler_table
from cmdkit.config import Settings

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Builds handler tables from command definitions and publishes them.

    A definition is either a class decorated with ``@command`` (instantiated
    once, without arguments, at registration) or an already constructed
    instance of such a class. Either way a single instance answers every
    invocation of that command.
    """

    def __init__(
        self,
        definitions: Sequence[Any] = (),
        sink: CommandSink | None = None,
        *,
        fallback_prefix: str | None = None,
        settings: Settings | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._logger = log or logger
        self._pending: list[Any] = list(definitions)
        self._sink = sink
        self._fallback_prefix = fallback_prefix or self._settings.fallback_prefix
        self._tables: dict[str, HandlerTable] = {}

        gate = PermissionGate(self._settings.permission_message)
        self.dispatcher = Dispatcher(
            self._tables,
            gate,
            caller_rejected_message=self._settings.caller_rejected_message,
            invalid_signature_message=self._settings.invalid_signature_message,
            log=self._logger,
        )
        self.completer = CompletionResolver(self._tables, gate, log=self._logger)

    def add(self, definition: Any) -> None:
        self._pending.append(definition)

    def register(self) -> list[str]:
        """Register every pending definition and return the names that made it.

        A definition that fails is logged and skipped; the others proceed.
        """
        if self._sink is None and self._pending:
            self._logger.error("Failed to get command map! Commands will not be published.")

        registered: list[str] = []
        pending, self._pending = self._pending, []
        for definition in pending:
            cls = definition if isinstance(definition, type) else type(definition)
            marker = get_command_marker(cls)
            if marker is None:
                self._logger.debug("%s is not marked with @command; skipping", cls.__name__)
                continue

            try:
                table = self._build(definition, cls, marker)
            except Exception as e:
                failure = e if isinstance(e, RegistrationFailure) else RegistrationFailure(
                    marker.name, str(e)
                )
                self._logger.error("Failed to register command %r!", marker.name)
                self._logger.error("%s", failure.reason)
                continue

            if table is None:
                self._logger.debug("Command %s declares no handlers; skipping", marker.name)
                continue

            self._tables[table.name.lower()] = table
            self._publish(table)
            registered.append(table.name)
            self._logger.info(
                "Registered command: %s (subcommands: %s)",
                table.name,
                ", ".join(table.subcommand_names()) or "none",
            )
        return registered

    def _build(self, definition: Any, cls: type, marker: CommandMarker) -> HandlerTable | None:
        instance = definition() if isinstance(definition, type) else definition
        descriptor = CommandDescriptor(
            name=marker.name,
            description=marker.description,
            usage=marker.usage,
            aliases=marker.aliases,
            permission=get_class_permission(cls),
        )
        if descriptor.name.lower() in self._tables:
            raise RegistrationFailure(descriptor.name, "a command with this name already exists")
        return build_handler_table(
            instance, descriptor, strict=self._settings.strict_subcommands
        )

    def _publish(self, table: HandlerTable) -> None:
        if self._sink is None:
            return
        descriptor = table.descriptor
        try:
            self._sink.register(
                descriptor.name,
                descriptor.description,
                descriptor.usage,
                list(descriptor.aliases),
                functools.partial(self._sink_execute, descriptor.name),
                functools.partial(self._sink_complete, descriptor.name),
                fallback_prefix=self._fallback_prefix,
            )
        except Exception:
            self._logger.exception("Failed to publish command %s", descriptor.name)

    def _sink_execute(self, name: str, caller: Caller, label: str, args: list[str]) -> bool:
        return self.execute(name, caller, args)

    def _sink_complete(
        self, name: str, caller: Caller, label: str, args: list[str], fallback: Completer | None = None
    ) -> list[str]:
        return self.complete(name, caller, args, fallback)

    def dispatch(self, name: str, caller: Caller, args: Sequence[str]) -> DispatchResult:
        return self.dispatcher.dispatch(name, caller, args)

    def execute(self, name: str, caller: Caller, args: Sequence[str]) -> bool:
        return self.dispatcher.dispatch(name, caller, args).handled

    def complete(
        self, name: str, caller: Caller, args: Sequence[str], fallback: Completer | None = None
    ) -> list[str]:
        return self.completer.complete(name, caller, args, fallback)

    def get(self, name: str) -> HandlerTable | None:
        return self._tables.get(name.lower())

    def list_commands(self) -> list[CommandDescriptor]:
        return [table.descriptor for table in self._tables.values()]


class RegisterBuilder:
    def __init__(self) -> None:
        self._definitions: list[Any] = []
        self._sink: CommandSink | None = None
        self._fallback_prefix: str | None = None
        self._settings: Settings | None = None
        self._logger: logging.Logger | None = None

    def add_command(self, definition: Any) -> RegisterBuilder:
        self._definitions.append(definition)
        return self

    def set_sink(self, sink: CommandSink) -> RegisterBuilder:
        self._sink = sink
        return self

    def set_fallback_prefix(self, prefix: str) -> RegisterBuilder:
        self._fallback_prefix = prefix
        return self

    def set_settings(self, settings: Settings) -> RegisterBuilder:
        self._settings = settings
        return self

    def set_logger(self, log: logging.Logger) -> RegisterBuilder:
        self._logger = log
        return self

    def build(self) -> CommandRegistry:
        return CommandRegistry(
            self._definitions,
            self._sink,
            fallback_prefix=self._fallback_prefix,
            settings=self._settings,
            log=self._logger,
        )
