from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from cmdkit.commands.caller import Caller
from cmdkit.commands.exceptions import (
    CommandError,
    HandlerFault,
    InvalidHandlerSignature,
    NoMatchingHandler,
    UnknownCommand,
)
from cmdkit.commands.permissions import PermissionGate
from cmdkit.commands.table import HandlerBinding, HandlerTable, Signature
from cmdkit.config import DEFAULT_CALLER_REJECTED_MESSAGE, DEFAULT_INVALID_SIGNATURE_MESSAGE

logger = logging.getLogger(__name__)


class DispatchStatus(StrEnum):
    HANDLED = "handled"
    DENIED = "denied"
    NOT_MATCHED = "not_matched"
    FAULT = "fault"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    reason: str | None = None
    error: CommandError | None = None

    @property
    def handled(self) -> bool:
        """Whether the invocation was consumed; False lets the host apply its fallback."""
        return self.status != DispatchStatus.NOT_MATCHED

    @property
    def succeeded(self) -> bool:
        return self.status == DispatchStatus.HANDLED


class Dispatcher:
    """Routes an invocation to the handler that answers it.

    Tables are read, never modified, so one dispatcher serves any number of
    concurrent invocations.
    """

    def __init__(
        self,
        tables: Mapping[str, HandlerTable],
        gate: PermissionGate | None = None,
        *,
        caller_rejected_message: str = DEFAULT_CALLER_REJECTED_MESSAGE,
        invalid_signature_message: str = DEFAULT_INVALID_SIGNATURE_MESSAGE,
        log: logging.Logger | None = None,
    ):
        self._tables = tables
        self._gate = gate or PermissionGate()
        self._caller_rejected_message = caller_rejected_message
        self._invalid_signature_message = invalid_signature_message
        self._logger = log or logger

    def resolve(
        self, command_name: str, raw_args: Sequence[str]
    ) -> tuple[HandlerTable, HandlerBinding, list[str]]:
        """Find the table, the binding and the arguments it will receive.

        Raises UnknownCommand or NoMatchingHandler on a routing miss.
        """
        table = self._tables.get(command_name.lower())
        if table is None:
            raise UnknownCommand(command_name)
        return (table, *self._select(table, list(raw_args)))

    def dispatch(
        self, command_name: str, caller: Caller, raw_args: Sequence[str]
    ) -> DispatchResult:
        """Run one invocation. Never raises."""
        try:
            return self._dispatch(command_name, caller, list(raw_args))
        except (UnknownCommand, NoMatchingHandler) as e:
            self._logger.debug("%s", e)
            return DispatchResult(DispatchStatus.NOT_MATCHED, reason="no_match", error=e)
        except InvalidHandlerSignature as e:
            self._logger.error("%s", e)
            self._notify(caller, self._invalid_signature_message)
            return DispatchResult(DispatchStatus.FAULT, reason="signature", error=e)
        except HandlerFault as e:
            self._logger.error(
                "Failed to execute command %s: %s", e.command_name, e.original, exc_info=e.original
            )
            return DispatchResult(DispatchStatus.FAULT, reason="handler", error=e)
        except Exception as e:
            fault = HandlerFault(command_name, e)
            self._logger.exception("Failed to execute command %s: %s", command_name, e)
            return DispatchResult(DispatchStatus.FAULT, reason="engine", error=fault)

    def _dispatch(self, command_name: str, caller: Caller, args: list[str]) -> DispatchResult:
        table = self._tables.get(command_name.lower())
        if table is None:
            raise UnknownCommand(command_name)

        if not self._gate.check(caller, table.descriptor.permission):
            return DispatchResult(DispatchStatus.DENIED, reason="permission")

        binding, handler_args = self._select(table, args)

        if not self._gate.check(caller, binding.permission):
            return DispatchResult(DispatchStatus.DENIED, reason="permission")

        if binding.signature is not Signature.NO_ARGS and not binding.accepts(caller):
            caller.send_message(
                self._caller_rejected_message.replace("{caller}", caller.display_name)
            )
            return DispatchResult(DispatchStatus.DENIED, reason="caller")

        self._invoke(table, binding, caller, handler_args)
        return DispatchResult(DispatchStatus.HANDLED)

    def _select(self, table: HandlerTable, args: list[str]) -> tuple[HandlerBinding, list[str]]:
        binding = table.default
        handler_args = args
        if args:
            named = table.subcommand(args[0])
            if named is not None:
                binding = named
                handler_args = args[1:]
        if binding is None:
            raise NoMatchingHandler(table.name, args)
        return binding, handler_args

    def _invoke(
        self, table: HandlerTable, binding: HandlerBinding, caller: Caller, args: list[str]
    ) -> None:
        if binding.signature is Signature.INVALID:
            raise InvalidHandlerSignature(table.name, binding.handler_name)
        try:
            if binding.signature is Signature.CALLER_AND_ARGS:
                binding.invoke(caller, args)
            elif binding.signature is Signature.CALLER_ONLY:
                binding.invoke(caller)
            else:
                binding.invoke()
        except Exception as e:
            raise HandlerFault(table.name, e) from e

    def _notify(self, caller: Caller, text: str) -> None:
        try:
            caller.send_message(text)
        except Exception:
            self._logger.exception("Failed to send message to %s", caller.display_name)
