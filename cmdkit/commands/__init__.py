"""Command registration and dispatch for cmdkit.

Provides:
- markers: @command, @permission, @execute, @tab_complete for declaring commands
- CommandRegistry / RegisterBuilder: build handler tables and publish them to a sink
- Dispatcher: route an invocation to its handler behind the permission gates
- CompletionResolver: tab-completion suggestions for partial invocations
- CommandMap: in-memory command sink with line parsing
"""

from cmdkit.commands.caller import BasicCaller, Caller, CallerKind
from cmdkit.commands.completion import CompletionResolver
from cmdkit.commands.descriptor import CommandDescriptor, PermissionRequirement
from cmdkit.commands.dispatcher import Dispatcher, DispatchResult, DispatchStatus
from cmdkit.commands.exceptions import (
    CommandError,
    HandlerFault,
    InvalidHandlerSignature,
    NoMatchingHandler,
    RegistrationFailure,
    UnknownCommand,
)
from cmdkit.commands.markers import command, execute, permission, tab_complete
from cmdkit.commands.permissions import PermissionGate
from cmdkit.commands.registry import CommandRegistry, RegisterBuilder
from cmdkit.commands.sink import CommandMap, CommandSink
from cmdkit.commands.table import HandlerBinding, HandlerTable, Signature

__all__ = [
    "BasicCaller",
    "Caller",
    "CallerKind",
    "CommandDescriptor",
    "CommandError",
    "CommandMap",
    "CommandRegistry",
    "CommandSink",
    "CompletionResolver",
    "DispatchResult",
    "DispatchStatus",
    "Dispatcher",
    "HandlerBinding",
    "HandlerFault",
    "HandlerTable",
    "InvalidHandlerSignature",
    "NoMatchingHandler",
    "PermissionGate",
    "PermissionRequirement",
    "RegisterBuilder",
    "RegistrationFailure",
    "Signature",
    "UnknownCommand",
    "command",
    "execute",
    "permission",
    "tab_complete",
]
