from __future__ import annotations

from cmdkit.commands.caller import Caller
from cmdkit.commands.descriptor import PermissionRequirement
from cmdkit.config import DEFAULT_PERMISSION_MESSAGE


class PermissionGate:
    """Evaluates permission requirements against a caller."""

    def __init__(self, default_message: str = DEFAULT_PERMISSION_MESSAGE):
        self.default_message = default_message

    def check(
        self, caller: Caller, requirement: PermissionRequirement | None, silent: bool = False
    ) -> bool:
        """Return True when the caller satisfies ``requirement``.

        A denied, non-silent check tells the caller why. Silent checks are used
        while enumerating completion candidates and never send anything.
        """
        if requirement is None:
            return True
        if caller.has_permission(requirement.key):
            return True
        if not silent:
            caller.send_message(self.message_for(requirement))
        return False

    def message_for(self, requirement: PermissionRequirement) -> str:
        return requirement.message if requirement.message is not None else self.default_message
