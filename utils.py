# utils.py
import ntpath
import os
import posixpath

MAX_NAME_BYTES = 255


class InvalidFilename(ValueError):
    """Client supplied a file name that is not a single safe path component."""


def validate_filename(name: str) -> str:
    """Return ``name`` unchanged if it can be stored directly under the root.

    Names are taken as the client sent them; nothing is rewritten. Anything
    that could address a different directory is refused instead.
    """
    if not name or name.strip() == "":
        raise InvalidFilename("empty file name")
    if name in (".", ".."):
        raise InvalidFilename(f"reserved file name: {name!r}")
    if "/" in name or "\\" in name:
        raise InvalidFilename(f"path separator in file name: {name!r}")
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
        raise InvalidFilename(f"control character in file name: {name!r}")
    if posixpath.isabs(name) or ntpath.isabs(name) or ntpath.splitdrive(name)[0]:
        raise InvalidFilename(f"absolute file name: {name!r}")
    if os.altsep and os.altsep in name:
        raise InvalidFilename(f"path separator in file name: {name!r}")
    if len(name.encode("utf-8", "surrogateescape")) > MAX_NAME_BYTES:
        raise InvalidFilename("file name too long")
    return name


def numbered_name(name: str, n: int) -> str:
    """``report.pdf`` -> ``report-2.pdf``; dotfiles keep their leading dot.

    The stem is shortened when needed so the result stays within MAX_NAME_BYTES.
    """
    stem, ext = os.path.splitext(name)
    suffix = f"-{n}{ext}"
    room = MAX_NAME_BYTES - len(suffix.encode("utf-8", "surrogateescape"))
    raw = stem.encode("utf-8", "surrogateescape")
    if len(raw) > room:
        # cut on a character boundary
        stem = raw[:max(room, 0)].decode("utf-8", "ignore")
    return f"{stem}{suffix}"
