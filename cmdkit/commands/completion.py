from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from cmdkit.commands.caller import Caller
from cmdkit.commands.permissions import PermissionGate
from cmdkit.commands.table import CompletionBinding, HandlerTable, Signature

logger = logging.getLogger(__name__)

Completer = Callable[[Caller, list[str]], Iterable[str]]


class CompletionResolver:
    """Produces tab-completion suggestions for a partially typed invocation.

    Pure query: never sends messages and never raises.
    """

    def __init__(
        self,
        tables: Mapping[str, HandlerTable],
        gate: PermissionGate | None = None,
        fallback: Completer | None = None,
        log: logging.Logger | None = None,
    ):
        self._tables = tables
        self._gate = gate or PermissionGate()
        self._fallback = fallback
        self._logger = log or logger

    def complete(
        self,
        command_name: str,
        caller: Caller,
        partial_args: Sequence[str],
        fallback: Completer | None = None,
    ) -> list[str]:
        args = list(partial_args)
        try:
            table = self._tables.get(command_name.lower())
            if table is None:
                return []

            if table.completion is not None:
                return self._custom(table, table.completion, caller, args, fallback)

            if len(args) == 1:
                return self._subcommands(table, caller, args[0])

            return self._default(caller, args, fallback)
        except Exception as e:
            self._logger.warning("Failed to tab complete command %s: %s", command_name, e)
            return []

    def _custom(
        self,
        table: HandlerTable,
        completion: CompletionBinding,
        caller: Caller,
        args: list[str],
        fallback: Completer | None,
    ) -> list[str]:
        if not completion.accepts(caller):
            return []
        if completion.signature is not Signature.CALLER_AND_ARGS:
            self._logger.warning(
                "Completion handler %s of command %s has an unsupported signature",
                completion.handler_name,
                table.name,
            )
            return self._default(caller, args, fallback)

        try:
            produced = completion.invoke(caller, args)
        except Exception as e:
            self._logger.warning("Failed to tab complete command %s: %s", table.name, e)
            return []
        return self._as_suggestions(table.name, produced)

    def _subcommands(self, table: HandlerTable, caller: Caller, current: str) -> list[str]:
        prefix = current.lower()
        return [
            name
            for name, binding in table.named.items()
            if name.startswith(prefix) and self._gate.check(caller, binding.permission, silent=True)
        ]

    def _default(self, caller: Caller, args: list[str], fallback: Completer | None) -> list[str]:
        completer = fallback or self._fallback
        if completer is None:
            return []
        return self._as_suggestions("<default>", completer(caller, args))

    def _as_suggestions(self, command_name: str, produced: object) -> list[str]:
        if produced is None:
            return []
        if isinstance(produced, str) or not isinstance(produced, Iterable):
            self._logger.warning(
                "Completion for %s returned %s, expected a list of strings",
                command_name,
                type(produced).__name__,
            )
            return []
        suggestions = list(produced)
        if not all(isinstance(s, str) for s in suggestions):
            self._logger.warning("Completion for %s returned non-string items", command_name)
            return []
        return suggestions
