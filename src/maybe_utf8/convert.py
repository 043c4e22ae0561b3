"""Uniform construction of ``MaybeUTF8`` from any string-like source.

Call sites that accept "either text or bytes" can take one argument and run
it through ``into_maybe_utf8()`` instead of branching on the type:

    >>> into_maybe_utf8("café").is_text
    True
    >>> into_maybe_utf8(b"caf\\xe9").is_bytes
    True

Built-in sources:
    - str                      -> UTF8 variant
    - bytes                    -> BYTES variant (no copy)
    - bytearray, memoryview    -> BYTES variant (copied once)
    - MaybeUTF8                -> returned unchanged
    - MaybeUTF8Slice           -> copied with ``to_owned()``
    - anything implementing ``IntoMaybeUTF8``

Extensible via register_conversion().
"""

from __future__ import annotations

from collections.abc import Callable
from functools import singledispatch
from typing import Any, Protocol, runtime_checkable

from .core import MaybeUTF8


@runtime_checkable
class IntoMaybeUTF8(Protocol):
    """Objects that know how to turn themselves into a ``MaybeUTF8``."""

    def into_maybe_utf8(self) -> MaybeUTF8: ...


@singledispatch
def into_maybe_utf8(value: Any) -> MaybeUTF8:
    """Convert a text or byte source into an owned ``MaybeUTF8``.

    Never fails for a supported source.

    Raises:
        TypeError: ``value`` is neither a registered type nor ``IntoMaybeUTF8``.
    """
    if isinstance(value, IntoMaybeUTF8):
        return value.into_maybe_utf8()
    raise TypeError(f"Cannot convert {type(value).__name__} into MaybeUTF8")


@into_maybe_utf8.register(str)
def _from_text(value: str) -> MaybeUTF8:
    return MaybeUTF8.from_text(value)


@into_maybe_utf8.register(bytes)
@into_maybe_utf8.register(bytearray)
@into_maybe_utf8.register(memoryview)
def _from_bytes(value) -> MaybeUTF8:
    return MaybeUTF8.from_bytes(value)


def register_conversion(
    cls: type,
    func: Callable[[Any], MaybeUTF8] | None = None,
) -> Callable:
    """Register how instances of ``cls`` convert into ``MaybeUTF8``.

    Can be used as a function or decorator:

        # As a function
        register_conversion(PurePosixPath, lambda p: MaybeUTF8.from_bytes(bytes(p)))

        # As a decorator
        @register_conversion(PurePosixPath)
        def path_name(path: PurePosixPath) -> MaybeUTF8:
            ...

    Args:
        cls: Source type (subclasses are covered too)
        func: Conversion function (optional if using as decorator)

    Returns:
        The registered function (for decorator use)
    """

    def decorator(fn: Callable[[Any], MaybeUTF8]) -> Callable[[Any], MaybeUTF8]:
        into_maybe_utf8.register(cls, fn)
        return fn

    # Called as @register_conversion(cls) - returns decorator
    if func is None:
        return decorator

    # Called as register_conversion(cls, func) - register directly
    into_maybe_utf8.register(cls, func)
    return func
