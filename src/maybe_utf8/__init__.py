"""maybe_utf8: Byte container optionally encoded as UTF-8.

A byte sequence type with uncertain character encoding, for when the caller
might be able to determine the actual encoding later.

For example, the ZIP file format originally didn't support UTF-8 file names;
archives assumed the extracting system used the same code page as the
creating one. Newer archives flag UTF-8 names explicitly. A ZIP reader can
hand out a ``MaybeUTF8`` that is text when the flag is set and raw bytes
otherwise, and let its caller decide.

Quick Start:
    >>> from maybe_utf8 import MaybeUTF8
    >>> name = MaybeUTF8.from_bytes(b"caf\\xe9")
    >>> name.is_bytes
    True
    >>> name.try_into_text()
    Traceback (most recent call last):
        ...
    maybe_utf8.core.InvalidEncoding: incomplete UTF-8 byte sequence from index 3

Known Encoding:
    >>> name.map_into_str(lambda b: b.decode("iso-8859-2"))
    'café'
    >>> name.decode("iso-8859-2")
    'café'

Comparison Ignores the Variant:
    >>> MaybeUTF8.from_text("café") == MaybeUTF8.from_bytes(b"caf\\xc3\\xa9")
    True

Borrowing Without Copies:
    >>> from maybe_utf8 import MaybeUTF8Slice
    >>> view = MaybeUTF8Slice.from_bytes_ref(bytearray(b"abc"))
    >>> view.to_owned()
    MaybeUTF8(b'abc')
"""

from .config import configure, get_config, reset_config
from .convert import IntoMaybeUTF8, into_maybe_utf8, register_conversion
from .core import InvalidEncoding, MaybeUTF8, MaybeUTF8Slice, Variant
from .utils import REPLACEMENT_CHARACTER, decode_lossy, is_utf8, utf8_error

__all__ = [
    # Containers
    "MaybeUTF8",
    "MaybeUTF8Slice",
    "Variant",
    # Errors
    "InvalidEncoding",
    # Conversion capability
    "IntoMaybeUTF8",
    "into_maybe_utf8",
    "register_conversion",
    # Lossy decoding helpers
    "decode_lossy",
    "is_utf8",
    "utf8_error",
    "REPLACEMENT_CHARACTER",
    # Configuration
    "configure",
    "get_config",
    "reset_config",
]

__version__ = "0.1.0"
