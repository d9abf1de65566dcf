from __future__ import annotations


def parse_command(text: str) -> tuple[str, list[str]] | None:
    text = text.strip()
    if not text.startswith("/"):
        return None
    parts = text[1:].split()
    if not parts:
        return None
    return (parts[0].lower(), parts[1:])


def parse_partial(text: str) -> tuple[str, list[str]] | None:
    """Parse a line that is still being typed.

    Splits on single spaces so a trailing space yields an empty last argument:
    ``"/warp "`` -> ``("warp", [""])``.
    """
    text = text.lstrip()
    if not text.startswith("/"):
        return None
    parts = text[1:].split(" ")
    if not parts[0]:
        return None
    return (parts[0].lower(), parts[1:])
