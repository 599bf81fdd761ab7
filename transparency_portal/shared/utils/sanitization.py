"""Input sanitization for administrator-entered text and uploaded filenames."""

import html
import re
import unicodedata

import nh3

_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
_FILENAME_MAX_LENGTH = 120


def sanitize_text(value: str | None) -> str | None:
    """Strip all HTML from a free-text value (names, descriptions).

    nh3 removes every tag; the entities it emits are decoded so stored
    values are plain text.
    """
    if value is None:
        return None
    return html.unescape(nh3.clean(value, tags=set(), attributes={})).strip()


def sanitize_filename(filename: str | None) -> str:
    """Return a storage-safe stem for an uploaded file name.

    Accents are folded to ASCII, any path component is dropped and runs of
    unsafe characters collapse to a hyphen. Never returns an empty string.
    """
    if not filename:
        return "file"
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    stem = base.rsplit(".", 1)[0] if "." in base else base
    folded = (
        unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    )
    cleaned = _FILENAME_UNSAFE.sub("-", folded).strip("-._")
    return cleaned[:_FILENAME_MAX_LENGTH] or "file"
