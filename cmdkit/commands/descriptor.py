from pydantic import BaseModel, ConfigDict, Field, field_validator


class PermissionRequirement(BaseModel):
    key: str
    message: str | None = None  # None = the gate's default denial message

    model_config = ConfigDict(frozen=True)


class CommandDescriptor(BaseModel):
    name: str
    description: str = ""
    usage: str = ""
    aliases: tuple[str, ...] = Field(default_factory=tuple)
    permission: PermissionRequirement | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command name must not be empty")
        return v

    @field_validator("aliases", mode="before")
    @classmethod
    def parse_aliases(cls, v: object) -> object:
        if isinstance(v, str):
            return tuple(a.strip() for a in v.split(",") if a.strip())
        return v
