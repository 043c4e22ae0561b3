"""Byte containers optionally encoded as UTF-8.

This module provides the two container types:
1. ``MaybeUTF8`` owns either validated text (``str``) or raw ``bytes``
2. ``MaybeUTF8Slice`` borrows either a ``str`` or a read-only ``memoryview``

Both record *whether* their content is known to be text in a ``Variant`` tag,
and compare, order and hash by their byte representation only.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from enum import Enum

from .config import get_errors, get_legacy_encoding
from .utils import BytesLike, decode_lossy


class Variant(Enum):
    """Which representation a container holds."""

    # Definitely UTF-8-encoded text
    UTF8 = "utf8"
    # May be UTF-8, another encoding, or simply invalid
    BYTES = "bytes"


class InvalidEncoding(ValueError):
    """Bytes that were expected to be UTF-8 are not.

    Raised by ``MaybeUTF8.try_into_text()``. The original bytes are returned
    to the caller untouched in ``data``.
    """

    def __init__(self, data: bytes, error: UnicodeDecodeError):
        self.data = data
        self.error = error
        self.valid_up_to = error.start
        if error.reason == "unexpected end of data":
            # Input stopped in the middle of a multi-byte sequence
            self.error_len: int | None = None
            self.message = f"incomplete UTF-8 byte sequence from index {error.start}"
        else:
            self.error_len = error.end - error.start
            self.message = (
                f"invalid UTF-8 sequence of {self.error_len} bytes "
                f"from index {error.start}"
            )
        super().__init__(self.message)

    def __reduce__(self):
        return (type(self), (self.data, self.error))


def _reject_non_bytes(data: object, caller: str) -> None:
    # bytes(3) would silently build b"\x00\x00\x00"
    if isinstance(data, (str, int)):
        raise TypeError(
            f"{caller}() expects a bytes-like object, got {type(data).__name__}"
        )


def _encode_text(text: str) -> tuple[Variant, bytes]:
    """Encode ``text`` and tell whether it is real UTF-8.

    Strings carrying lone surrogates (``os.fsdecode`` of an undecodable name)
    are not UTF-8 text. They become raw bytes: ``surrogateescape`` restores
    the original bytes, ``surrogatepass`` covers any other surrogate.
    """
    try:
        return Variant.UTF8, text.encode("utf-8")
    except UnicodeEncodeError:
        pass
    try:
        return Variant.BYTES, text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return Variant.BYTES, text.encode("utf-8", "surrogatepass")


def _byte_key(other: object) -> bytes | None:
    """Return the bytes an operand compares by, or None if it is not comparable."""
    if isinstance(other, (MaybeUTF8, MaybeUTF8Slice)):
        return other._key()
    if isinstance(other, (bytes, bytearray, memoryview)):
        return bytes(other)
    return None


class _ByteOrdered:
    """Equality, ordering and hashing over ``_key()``, ignoring the variant tag."""

    __slots__ = ()

    def _key(self) -> bytes:
        raise NotImplementedError

    def _compare(self, other: object, op: Callable[[bytes, bytes], bool]) -> bool:
        key = _byte_key(other)
        if key is None:
            return NotImplemented
        return op(self._key(), key)

    def __eq__(self, other: object) -> bool:
        return self._compare(other, operator.eq)

    def __ne__(self, other: object) -> bool:
        return self._compare(other, operator.ne)

    def __lt__(self, other: object) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: object) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: object) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: object) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Same as hash(bytes), since containers compare equal to bytes
        return hash(self._key())


class MaybeUTF8(_ByteOrdered):
    """Byte container optionally encoded as UTF-8.

    Holds either validated text (``Variant.UTF8``) or raw bytes of unknown
    encoding (``Variant.BYTES``). Instances are immutable; conversions return
    new containers or plain ``str``/``bytes`` values.

    Example:
        >>> name = MaybeUTF8.from_bytes(b"caf\\xe9")
        >>> str(name) == "caf\\ufffd"
        True
        >>> name.map_into_str(lambda b: b.decode("iso-8859-2"))
        'café'
    """

    __slots__ = ("_variant", "_value", "_encoded")

    def __init__(self) -> None:
        """Create an empty text container."""
        self._variant = Variant.UTF8
        self._value: str | bytes = ""
        # Cached byte form of a UTF8 value
        self._encoded: bytes | None = None

    @classmethod
    def _new(cls, variant: Variant, value: str | bytes) -> MaybeUTF8:
        self = cls.__new__(cls)
        self._variant = variant
        self._value = value
        self._encoded = None
        return self

    # --- construction ---

    @classmethod
    def from_text(cls, text: str) -> MaybeUTF8:
        """Wrap text. Always succeeds.

        A ``str`` holding lone surrogates is not valid UTF-8 and is stored as
        ``Variant.BYTES``; surrogate-escaped bytes are restored.
        """
        if not isinstance(text, str):
            raise TypeError(f"from_text() expects str, got {type(text).__name__}")
        variant, encoded = _encode_text(text)
        if variant is Variant.BYTES:
            return cls._new(Variant.BYTES, encoded)
        self = cls._new(Variant.UTF8, text)
        self._encoded = encoded
        return self

    @classmethod
    def from_bytes(cls, data: BytesLike) -> MaybeUTF8:
        """Wrap raw bytes without validating them.

        A ``bytes`` object is stored as-is. Mutable buffers are copied once so
        the container cannot change underneath its owner.
        """
        _reject_non_bytes(data, "from_bytes")
        return cls._new(Variant.BYTES, bytes(data))

    @classmethod
    def from_chars(cls, chars: Iterable[str]) -> MaybeUTF8:
        return cls.from_text("".join(chars))

    @classmethod
    def from_byte_values(cls, values: Iterable[int]) -> MaybeUTF8:
        # iter() rejects a bare int, which bytes() would treat as a length
        return cls.from_bytes(bytes(iter(values)))

    # --- variant ---

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def is_text(self) -> bool:
        """True if the content is known to be valid UTF-8."""
        return self._variant is Variant.UTF8

    @property
    def is_bytes(self) -> bool:
        """True if the content has not been validated. It may still be UTF-8."""
        return self._variant is Variant.BYTES

    # --- accessors ---

    def as_bytes(self) -> bytes:
        """Return the underlying bytes. They might or might not be UTF-8."""
        if self._variant is Variant.BYTES:
            return self._value
        if self._encoded is None:
            self._encoded = self._value.encode("utf-8")
        return self._encoded

    def as_str(self) -> str | None:
        """Return the content as text if possible.

        Returns None if the underlying bytes are not valid UTF-8. The variant
        is left as it is; see ``validated()`` to keep the result.
        """
        if self._variant is Variant.UTF8:
            return self._value
        try:
            return self._value.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def as_str_lossy(self) -> str:
        """Return the content as text, replacing invalid sequences with U+FFFD."""
        return self.map_as_cow(decode_lossy)

    def map_as_cow(self, decode_fn: Callable[[bytes], str]) -> str:
        """Return the text, calling ``decode_fn`` on the bytes only when needed."""
        return self.map_into_str(decode_fn)

    def to_slice(self) -> MaybeUTF8Slice:
        """Borrow the content as a ``MaybeUTF8Slice`` without copying it."""
        if self._variant is Variant.UTF8:
            return MaybeUTF8Slice._new(Variant.UTF8, self._value)
        return MaybeUTF8Slice._new(Variant.BYTES, memoryview(self._value))

    # --- conversions ---

    def into_bytes(self) -> bytes:
        """Convert into raw bytes, whatever the variant. Never fails."""
        return self.as_bytes()

    def try_into_text(self) -> str:
        """Convert into text, validating raw bytes as UTF-8.

        Raises:
            InvalidEncoding: The bytes are not valid UTF-8. ``exc.data`` is the
                original bytes object.
        """
        if self._variant is Variant.UTF8:
            return self._value
        try:
            return self._value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncoding(self._value, e) from e

    def validated(self) -> MaybeUTF8:
        """Promote raw bytes to the UTF8 variant if they are valid UTF-8.

        Returns self when already text or when validation fails.
        """
        if self._variant is Variant.UTF8:
            return self
        try:
            text = self._value.decode("utf-8")
        except UnicodeDecodeError:
            return self
        promoted = type(self)._new(Variant.UTF8, text)
        # The validated bytes are exactly the encoded form; reuse them
        promoted._encoded = self._value
        return promoted

    def map_into_str(self, decode_fn: Callable[[bytes], str]) -> str:
        """Convert into text, calling ``decode_fn`` on the bytes if not UTF8.

        This is how a caller who knows the real encoding recovers the text:

            >>> MaybeUTF8.from_bytes(b"caf\\xe9").map_into_str(
            ...     lambda b: b.decode("iso-8859-2"))
            'café'
        """
        if self._variant is Variant.UTF8:
            return self._value
        return decode_fn(self._value)

    def decode(self, encoding: str | None = None, errors: str | None = None) -> str:
        """Convert into text, assuming raw bytes are in ``encoding``.

        Args:
            encoding: Codec name. Defaults to the configured legacy encoding.
            errors: Codec error handler. Defaults to the configured handler.
        """
        encoding = get_legacy_encoding(encoding)
        errors = get_errors(errors)
        return self.map_into_str(lambda data: data.decode(encoding, errors))

    def into_maybe_utf8(self) -> MaybeUTF8:
        return self

    # --- protocols ---

    def _key(self) -> bytes:
        return self.as_bytes()

    def __len__(self) -> int:
        """Byte length of the content."""
        return len(self.as_bytes())

    def __bool__(self) -> bool:
        return len(self._value) > 0

    def __bytes__(self) -> bytes:
        return self.as_bytes()

    def __str__(self) -> str:
        return self.as_str_lossy()

    def __format__(self, format_spec: str) -> str:
        return format(self.as_str_lossy(), format_spec)

    def __repr__(self) -> str:
        # bytes repr escapes every non-ASCII byte, so it never reads as text
        return f"{type(self).__name__}({self._value!r})"

    def __copy__(self) -> MaybeUTF8:
        return self

    def __deepcopy__(self, memo: dict) -> MaybeUTF8:
        return self

    def __reduce__(self):
        return (_rebuild, (self._variant, self._value))


def _rebuild(variant: Variant, value: str | bytes) -> MaybeUTF8:
    return MaybeUTF8._new(variant, value)


class MaybeUTF8Slice(_ByteOrdered):
    """Borrowed view of text or bytes, optionally encoded as UTF-8.

    Bytes are held through a read-only ``memoryview``, so no copy is made and
    the source buffer stays alive as long as the view does. While the view is
    held, a borrowed ``bytearray`` cannot be resized; call ``release()`` (or
    use the view as a context manager) to end the borrow early.

    Example:
        >>> buf = bytearray(b"caf\\xc3\\xa9")
        >>> with MaybeUTF8Slice.from_bytes_ref(buf) as name:
        ...     name.as_str()
        'café'
    """

    __slots__ = ("_variant", "_value", "_frozen")

    def __init__(self) -> None:
        self._variant = Variant.UTF8
        self._value: str | memoryview = ""
        # False when the borrowed buffer can still be written by its owner
        self._frozen = True

    @classmethod
    def _new(
        cls, variant: Variant, value: str | memoryview, frozen: bool = True
    ) -> MaybeUTF8Slice:
        self = cls.__new__(cls)
        self._variant = variant
        self._value = value
        self._frozen = frozen
        return self

    @classmethod
    def from_text_ref(cls, text: str) -> MaybeUTF8Slice:
        """Borrow text. Lone surrogates make it raw bytes, as in ``from_text``."""
        if not isinstance(text, str):
            raise TypeError(f"from_text_ref() expects str, got {type(text).__name__}")
        variant, encoded = _encode_text(text)
        if variant is Variant.BYTES:
            return cls._new(Variant.BYTES, memoryview(encoded))
        return cls._new(Variant.UTF8, text)

    @classmethod
    def from_bytes_ref(cls, data: BytesLike) -> MaybeUTF8Slice:
        """Borrow any contiguous buffer as raw bytes, without copying."""
        _reject_non_bytes(data, "from_bytes_ref")
        view = memoryview(data)
        if view.ndim != 1 or view.format != "B":
            view = view.cast("B")
        return cls._new(Variant.BYTES, view.toreadonly(), frozen=view.readonly)

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def is_text(self) -> bool:
        return self._variant is Variant.UTF8

    @property
    def is_bytes(self) -> bool:
        return self._variant is Variant.BYTES

    def as_bytes(self) -> memoryview:
        """Return a read-only view of the underlying bytes."""
        if self._variant is Variant.BYTES:
            return self._value
        return memoryview(self._key())

    def as_str(self) -> str | None:
        if self._variant is Variant.UTF8:
            return self._value
        try:
            return str(self._value, "utf-8")
        except UnicodeDecodeError:
            return None

    def as_str_lossy(self) -> str:
        return self.map_as_cow(decode_lossy)

    def map_as_cow(self, decode_fn: Callable[[memoryview], str]) -> str:
        """Return the text, calling ``decode_fn`` on the bytes only when needed.

        Borrowed text is returned as the same object, never copied.
        """
        if self._variant is Variant.UTF8:
            return self._value
        return decode_fn(self._value)

    def to_owned(self) -> MaybeUTF8:
        """Copy the borrowed content into a new ``MaybeUTF8``."""
        if self._variant is Variant.UTF8:
            return MaybeUTF8.from_text(self._value)
        return MaybeUTF8.from_bytes(self._value.tobytes())

    def into_maybe_utf8(self) -> MaybeUTF8:
        return self.to_owned()

    def release(self) -> None:
        """End the borrow. Further byte access raises ValueError."""
        if self._variant is Variant.BYTES:
            self._value.release()

    def __enter__(self) -> MaybeUTF8Slice:
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def _key(self) -> bytes:
        if self._variant is Variant.BYTES:
            return self._value.tobytes()
        return self._value.encode("utf-8")

    def __hash__(self) -> int:
        # Like memoryview: content that can change must not key a dict
        if not self._frozen:
            raise ValueError("cannot hash a view of a writable buffer")
        return super().__hash__()

    def __len__(self) -> int:
        if self._variant is Variant.BYTES:
            return self._value.nbytes
        return len(self._key())

    def __bool__(self) -> bool:
        if self._variant is Variant.BYTES:
            return self._value.nbytes > 0
        return len(self._value) > 0

    def __bytes__(self) -> bytes:
        return self._key()

    def __str__(self) -> str:
        return self.as_str_lossy()

    def __format__(self, format_spec: str) -> str:
        return format(self.as_str_lossy(), format_spec)

    def __repr__(self) -> str:
        if self._variant is Variant.UTF8:
            body = repr(self._value)
        else:
            try:
                body = repr(self._value.tobytes())
            except ValueError:
                body = "<released>"
        return f"{type(self).__name__}({body})"
