from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_PERMISSION_MESSAGE = "§cYou do not have permission to execute this command."
DEFAULT_CALLER_REJECTED_MESSAGE = "§cThis command cannot be executed by {caller}!"
DEFAULT_INVALID_SIGNATURE_MESSAGE = "§cError: Invalid command method signature."


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: str | None = None
    log_engine_level: str | None = None  # None = inherit log_level

    # Publication
    fallback_prefix: str = "cmdkit"

    @field_validator("fallback_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # User-facing messages
    permission_message: str = DEFAULT_PERMISSION_MESSAGE
    caller_rejected_message: str = DEFAULT_CALLER_REJECTED_MESSAGE
    invalid_signature_message: str = DEFAULT_INVALID_SIGNATURE_MESSAGE

    # Registration
    strict_subcommands: bool = True  # False = last declared subcommand wins

    model_config = {"env_file": ".env", "env_prefix": "CMDKIT_"}
