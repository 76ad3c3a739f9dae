"""Terminal message helpers for the NULLGUARD CLI.

Status lines go to stderr so stdout stays free for contract listings. Each
line starts with a glyph; emoji are used when stderr can encode them and an
ASCII token otherwise.
"""

import click

# kind -> (emoji, ascii fallback, color)
_STYLES: dict[str, tuple[str, str, str]] = {
    "warn": ("⚠️", "[!]", "yellow"),  # pragma: no mutate
    "success": ("✅", "[OK]", "green"),  # pragma: no mutate
    "error": ("❌", "[X]", "red"),  # pragma: no mutate
}


def _supports_character(character: str) -> bool:
    """Return True if ``character`` can be encoded by the current stderr stream."""
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """The glyph for a message kind (``"warn"``, ``"success"`` or ``"error"``)."""
    emoji, fallback, _ = _STYLES[kind]
    return emoji if _supports_character(emoji) else fallback


def _emit(kind: str, msg: str) -> None:
    color = _STYLES[kind][2]
    click.secho(f"{glyph(kind)}  {msg}", fg=color, bold=True, err=True)


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr."""
    _emit("warn", msg)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr, e.g. ``✅  pkg:Iface is null safe``."""
    _emit("success", msg)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr."""
    _emit("error", msg)
