from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from cmdkit.commands.caller import Caller
from cmdkit.commands.completion import Completer
from cmdkit.commands.parser import parse_command, parse_partial

logger = logging.getLogger(__name__)

ExecuteFn = Callable[[Caller, str, list[str]], bool]
CompleteFn = Callable[..., list[str]]  # (caller, label, args, fallback=None) -> list[str]


class CommandSink(Protocol):
    """Host-side command table the registry publishes into."""

    def register(
        self,
        name: str,
        description: str,
        usage: str,
        aliases: Sequence[str],
        execute: ExecuteFn,
        complete: CompleteFn,
        *,
        fallback_prefix: str | None = None,
    ) -> None: ...


@dataclass
class HostCommand:
    name: str
    description: str
    usage: str
    execute: ExecuteFn = field(repr=False)
    complete: CompleteFn = field(repr=False)
    aliases: list[str] = field(default_factory=list)
    fallback_prefix: str | None = None


class CommandMap:
    """In-memory command table: label lookup, line dispatch and completion.

    Every command is reachable as ``prefix:name``. The bare name and each
    alias are claimed first-come, first-served.
    """

    def __init__(self, default_completer: Completer | None = None) -> None:
        self._labels: dict[str, HostCommand] = {}
        self._commands: list[HostCommand] = []
        self._default_completer = default_completer

    def register(
        self,
        name: str,
        description: str,
        usage: str,
        aliases: Sequence[str],
        execute: ExecuteFn,
        complete: CompleteFn,
        *,
        fallback_prefix: str | None = None,
    ) -> None:
        prefix = (fallback_prefix or "").strip().lower() or None
        entry = HostCommand(
            name=name.lower(),
            description=description,
            usage=usage,
            execute=execute,
            complete=complete,
            aliases=[a.lower() for a in aliases],
            fallback_prefix=prefix,
        )
        self._commands.append(entry)

        if prefix:
            self._labels[f"{prefix}:{entry.name}"] = entry
        self._claim(entry.name, entry)
        for alias in entry.aliases:
            self._claim(alias, entry)
        logger.info("Registered command: %s (prefix: %s)", entry.name, prefix or "none")

    def _claim(self, label: str, entry: HostCommand) -> None:
        owner = self._labels.get(label)
        if owner is not None and owner is not entry:
            logger.warning(
                "Label %s already belongs to %s; %s is only reachable by its other labels",
                label,
                owner.name,
                entry.name,
            )
            return
        self._labels[label] = entry

    def get(self, label: str) -> HostCommand | None:
        return self._labels.get(label.lower())

    def labels(self) -> list[str]:
        return sorted(self._labels)

    def list_commands(self) -> list[HostCommand]:
        return sorted(self._commands, key=lambda c: c.name)

    def dispatch(self, line: str, caller: Caller) -> bool:
        """Run a ``/label args...`` line.

        Returns False for non-commands and unknown labels. When the command
        itself reports the line as not handled, its usage is sent to the caller
        and False is returned.
        """
        parsed = parse_command(line)
        if parsed is None:
            return False
        label, args = parsed

        entry = self.get(label)
        if entry is None:
            return False

        handled = entry.execute(caller, label, args)
        if not handled and entry.usage:
            for usage_line in entry.usage.replace("<command>", label).split("\n"):
                caller.send_message(usage_line)
        return handled

    def complete(self, line: str, caller: Caller) -> list[str]:
        parsed = parse_partial(line)
        if parsed is None:
            return []
        label, args = parsed
        if not args:
            return [lbl for lbl in self.labels() if lbl.startswith(label)]

        entry = self.get(label)
        if entry is None:
            return []
        return entry.complete(caller, label, args, self._default_completer)
