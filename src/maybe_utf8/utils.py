from __future__ import annotations

# Anything exposing the buffer protocol as unsigned bytes.
BytesLike = bytes | bytearray | memoryview

REPLACEMENT_CHARACTER = "\ufffd"


def decode_lossy(data: BytesLike) -> str:
    """Decode bytes as UTF-8, never failing.
    - Each maximal invalid subpart becomes a single U+FFFD.
    - Valid input decodes unchanged, so no replacement characters are introduced.
    """
    return str(data, "utf-8", "replace")


def utf8_error(data: BytesLike) -> UnicodeDecodeError | None:
    """Return the first UTF-8 decoding error in ``data``, or None if it is valid."""
    try:
        str(data, "utf-8")
    except UnicodeDecodeError as e:
        return e
    return None


def is_utf8(data: BytesLike) -> bool:
    return utf8_error(data) is None
