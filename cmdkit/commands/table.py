from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from cmdkit.commands.caller import Caller, CallerKind
from cmdkit.commands.descriptor import CommandDescriptor, PermissionRequirement
from cmdkit.commands.exceptions import RegistrationFailure
from cmdkit.commands.markers import get_complete_marker, get_execute_marker, get_permission

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Signature(StrEnum):
    CALLER_AND_ARGS = "caller_and_args"
    CALLER_ONLY = "caller_only"
    NO_ARGS = "no_args"
    INVALID = "invalid"


class BindingKind(StrEnum):
    DEFAULT = "default"
    NAMED = "named"


_SHAPES = {
    2: Signature.CALLER_AND_ARGS,
    1: Signature.CALLER_ONLY,
    0: Signature.NO_ARGS,
}


def derive_signature(handler: Callable[..., Any]) -> Signature:
    """Classify a bound handler by its positional parameters."""
    try:
        params = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return Signature.INVALID

    positional = 0
    for param in params:
        if param.kind in _POSITIONAL:
            positional += 1
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is not param.empty:
            continue
        else:
            return Signature.INVALID
    return _SHAPES.get(positional, Signature.INVALID)


@dataclass(frozen=True)
class HandlerBinding:
    kind: BindingKind
    name: str
    handler_name: str
    signature: Signature
    invoke: Callable[..., Any]
    permission: PermissionRequirement | None = None
    callers: frozenset[CallerKind] | None = None

    def accepts(self, caller: Caller) -> bool:
        return self.callers is None or caller.kind in self.callers


@dataclass(frozen=True)
class CompletionBinding:
    handler_name: str
    signature: Signature
    invoke: Callable[..., Any]
    callers: frozenset[CallerKind] | None = None

    def accepts(self, caller: Caller) -> bool:
        return self.callers is None or caller.kind in self.callers


@dataclass(frozen=True)
class HandlerTable:
    descriptor: CommandDescriptor
    definition: Any
    default: HandlerBinding | None
    named: Mapping[str, HandlerBinding]
    completion: CompletionBinding | None = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    def subcommand(self, token: str) -> HandlerBinding | None:
        return self.named.get(token.lower())

    def subcommand_names(self) -> list[str]:
        return list(self.named)


def build_handler_table(
    definition: Any, descriptor: CommandDescriptor, *, strict: bool = True
) -> HandlerTable | None:
    """Scan the methods declared on ``type(definition)`` and bind them to ``definition``.

    Returns None when the class declares neither a default nor a named handler.
    Raises RegistrationFailure on duplicate handlers when ``strict`` is set;
    otherwise the last one declared wins.
    """
    default: HandlerBinding | None = None
    named: dict[str, HandlerBinding] = {}
    completion: CompletionBinding | None = None

    for attr_name, raw in vars(type(definition)).items():
        func = getattr(raw, "__func__", raw)

        marker = get_execute_marker(func)
        if marker is not None:
            bound = getattr(definition, attr_name)
            key = marker.name.lower()
            binding = HandlerBinding(
                kind=BindingKind.NAMED if key else BindingKind.DEFAULT,
                name=key,
                handler_name=attr_name,
                signature=derive_signature(bound),
                invoke=bound,
                permission=get_permission(func),
                callers=marker.callers,
            )
            if binding.signature is Signature.INVALID:
                logger.warning(
                    "Handler %s of command %s has an unsupported signature",
                    attr_name,
                    descriptor.name,
                )

            if binding.kind is BindingKind.DEFAULT:
                if default is not None:
                    _duplicate(descriptor, "default handler", default.handler_name, attr_name, strict)
                default = binding
            else:
                if key in named:
                    _duplicate(
                        descriptor, f"subcommand '{key}'", named[key].handler_name, attr_name, strict
                    )
                    # Re-insert so discovery order follows the winning declaration.
                    del named[key]
                named[key] = binding

        complete_marker = get_complete_marker(func)
        if complete_marker is not None:
            bound = getattr(definition, attr_name)
            completion = CompletionBinding(
                handler_name=attr_name,
                signature=derive_signature(bound),
                invoke=bound,
                callers=complete_marker.callers,
            )

    if default is None and not named:
        return None

    return HandlerTable(
        descriptor=descriptor,
        definition=definition,
        default=default,
        named=MappingProxyType(named),
        completion=completion,
    )


def _duplicate(
    descriptor: CommandDescriptor, what: str, first: str, second: str, strict: bool
) -> None:
    if strict:
        raise RegistrationFailure(
            descriptor.name, f"{what} declared by both {first} and {second}"
        )
    logger.warning(
        "Command %s: %s declared by both %s and %s; using %s",
        descriptor.name,
        what,
        first,
        second,
        second,
    )
