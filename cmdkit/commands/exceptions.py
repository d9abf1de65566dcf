class CommandError(Exception):
    """Base exception for command engine errors."""

    pass


class RegistrationFailure(CommandError):
    """Raised when a command definition cannot be instantiated or scanned."""

    def __init__(self, command_name: str, reason: str):
        self.command_name = command_name
        self.reason = reason
        super().__init__(f"Failed to register command {command_name}: {reason}")


class UnknownCommand(CommandError):
    """Raised when no handler table exists for the requested command name."""

    def __init__(self, command_name: str):
        self.command_name = command_name
        super().__init__(f"Unknown command: {command_name}")


class NoMatchingHandler(CommandError):
    """Raised when neither a subcommand nor a default handler answers an invocation."""

    def __init__(self, command_name: str, args: list[str]):
        self.command_name = command_name
        self.arguments = list(args)
        super().__init__(f"No handler of {command_name} matches {self.arguments!r}")


class InvalidHandlerSignature(CommandError):
    def __init__(self, command_name: str, handler_name: str):
        self.command_name = command_name
        self.handler_name = handler_name
        super().__init__(
            f"Handler {handler_name} of command {command_name} has an unsupported signature"
        )


class HandlerFault(CommandError):
    """Wraps an exception raised by a command definition's own logic."""

    def __init__(self, command_name: str, original: BaseException):
        self.command_name = command_name
        self.original = original
        super().__init__(f"Failed to execute command {command_name}: {original}")
