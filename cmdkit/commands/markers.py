"""Decorators a command author uses to declare commands.

    @command("warp", description="Teleport to a warp", usage="/<command> [name]")
    @permission("warp.use")
    class WarpCommand:
        @execute
        def default(self, caller):
            ...

        @execute("list", callers=CallerKind.PLAYER)
        @permission("warp.list", "You may not list warps.")
        def list_warps(self, caller, args):
            ...

        @tab_complete
        def complete(self, caller, args):
            return ["spawn", "market"]

Markers only attach metadata to the decorated object; nothing is registered
until a ``CommandRegistry`` scans the class.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from cmdkit.commands.caller import CallerKind
from cmdkit.commands.descriptor import PermissionRequirement

T = TypeVar("T")

COMMAND_ATTR = "__cmdkit_command__"
PERMISSION_ATTR = "__cmdkit_permission__"
EXECUTE_ATTR = "__cmdkit_execute__"
COMPLETE_ATTR = "__cmdkit_tab_complete__"

CallerSpec = CallerKind | str | Iterable[CallerKind | str] | None


@dataclass(frozen=True)
class CommandMarker:
    name: str
    description: str = ""
    usage: str = ""
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecuteMarker:
    name: str = ""
    callers: frozenset[CallerKind] | None = None


@dataclass(frozen=True)
class CompleteMarker:
    callers: frozenset[CallerKind] | None = None


def _caller_kinds(callers: CallerSpec) -> frozenset[CallerKind] | None:
    if callers is None:
        return None
    if isinstance(callers, str):
        return frozenset({CallerKind(callers)})
    return frozenset(CallerKind(c) for c in callers)


def _alias_names(aliases: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(aliases, str):
        return tuple(a.strip() for a in aliases.split(",") if a.strip())
    return tuple(aliases)


def command(
    name: str, description: str = "", usage: str = "", aliases: str | Iterable[str] = ()
) -> Callable[[type[T]], type[T]]:
    """Mark a class as a command definition.

    ``aliases`` may be a list or a comma-separated string (``"h, house"``).
    """
    marker = CommandMarker(name, description, usage, _alias_names(aliases))

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, COMMAND_ATTR, marker)
        return cls

    return decorator


def permission(key: str, message: str | None = None) -> Callable[[T], T]:
    """Gate a whole command (on the class) or a single handler (on a method)."""
    requirement = PermissionRequirement(key=key, message=message)

    def decorator(obj: T) -> T:
        setattr(obj, PERMISSION_ATTR, requirement)
        return obj

    return decorator


def execute(name: Any = "", *, callers: CallerSpec = None) -> Any:
    """Mark a method as the default handler or, with a name, a subcommand handler.

    Usable bare (``@execute``) or called (``@execute("list")``).
    """
    if callable(name):
        setattr(name, EXECUTE_ATTR, ExecuteMarker())
        return name

    marker = ExecuteMarker(name=name or "", callers=_caller_kinds(callers))

    def decorator(func: T) -> T:
        setattr(func, EXECUTE_ATTR, marker)
        return func

    return decorator


def tab_complete(func: Any = None, *, callers: CallerSpec = None) -> Any:
    """Mark a method as the command's completion handler: ``(caller, args) -> list[str]``."""
    marker = CompleteMarker(callers=_caller_kinds(callers))

    def decorator(f: T) -> T:
        setattr(f, COMPLETE_ATTR, marker)
        return f

    if func is not None:
        return decorator(func)
    return decorator


def get_command_marker(cls: type) -> CommandMarker | None:
    # Markers are not inherited: a subclass must declare its own @command.
    return vars(cls).get(COMMAND_ATTR)


def get_class_permission(cls: type) -> PermissionRequirement | None:
    return vars(cls).get(PERMISSION_ATTR)


def get_permission(func: Any) -> PermissionRequirement | None:
    return getattr(func, PERMISSION_ATTR, None)


def get_execute_marker(func: Any) -> ExecuteMarker | None:
    return getattr(func, EXECUTE_ATTR, None)


def get_complete_marker(func: Any) -> CompleteMarker | None:
    return getattr(func, COMPLETE_ATTR, None)
