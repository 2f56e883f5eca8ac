"""Rendering of filesystem paths for terminal output."""

from tmexclude.store import ENCODING, ENCODING_ERRORS


def printable(text: str) -> str:
    """Return ``text`` with undecodable filename bytes shown as backslash escapes.

    Python decodes filenames that are not valid UTF-8 with ``surrogateescape``; printing such a
    string to a strict UTF-8 stream raises UnicodeEncodeError. A name containing the raw byte
    0xE9 is rendered as ``caf\\xe9`` instead.
    """
    return text.encode(ENCODING, ENCODING_ERRORS).decode(ENCODING, "backslashreplace")
