from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

WILDCARD_PERMISSION = "*"


class CallerKind(StrEnum):
    PLAYER = "player"
    CONSOLE = "console"
    REMOTE_CONSOLE = "remote_console"
    COMMAND_BLOCK = "command_block"
    ENTITY = "entity"


class Caller(Protocol):
    """Whoever invoked a command, as seen by the engine."""

    @property
    def kind(self) -> CallerKind: ...

    @property
    def display_name(self) -> str: ...

    def has_permission(self, key: str) -> bool: ...

    def send_message(self, text: str) -> None: ...


@dataclass
class BasicCaller:
    """In-process caller backed by a permission set and a message outbox.

    The ``"*"`` permission grants every key. Messages sent to the caller are
    appended to ``outbox`` in order.
    """

    display_name: str
    kind: CallerKind = CallerKind.PLAYER
    permissions: set[str] = field(default_factory=set)
    outbox: list[str] = field(default_factory=list)

    def has_permission(self, key: str) -> bool:
        return WILDCARD_PERMISSION in self.permissions or key in self.permissions

    def send_message(self, text: str) -> None:
        self.outbox.append(text)

    def grant(self, *keys: str) -> BasicCaller:
        self.permissions.update(keys)
        return self

    def revoke(self, *keys: str) -> BasicCaller:
        self.permissions.difference_update(keys)
        return self
