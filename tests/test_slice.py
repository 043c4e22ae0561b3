from __future__ import annotations

from array import array

import pytest

from maybe_utf8 import MaybeUTF8, MaybeUTF8Slice, Variant


def test_to_slice_borrows_bytes_without_copy() -> None:
    data = b"caf\xe9"
    buf = MaybeUTF8.from_bytes(data)

    view = buf.to_slice()

    assert view.variant is Variant.BYTES
    assert view.as_bytes().obj is data
    assert view.as_bytes().readonly


def test_to_slice_borrows_same_text_object() -> None:
    text = "café"
    view = MaybeUTF8.from_text(text).to_slice()

    assert view.is_text
    assert view.as_str() is text
    assert view.map_as_cow(lambda v: "unused") is text


def test_reading_slice_leaves_buf_untouched() -> None:
    buf = MaybeUTF8.from_bytes(b"caf\xe9")

    first = buf.to_slice()
    second = buf.to_slice()
    assert str(first) == "caf\ufffd"
    assert first.as_str() is None
    assert second.map_as_cow(lambda v: str(v, "iso-8859-2")) == "café"

    assert buf.is_bytes
    assert buf.into_bytes() == b"caf\xe9"


def test_map_as_cow_decodes_bytes() -> None:
    view = MaybeUTF8Slice.from_bytes_ref(b"caf\xe9")

    assert view.map_as_cow(lambda v: str(v, "iso-8859-2")) == "café"
    assert view.as_str_lossy() == "caf\ufffd"


def test_from_bytes_ref_sees_in_place_changes() -> None:
    data = bytearray(b"abc")
    view = MaybeUTF8Slice.from_bytes_ref(data)

    data[0] = ord("x")

    assert view == b"xbc"
    assert view.as_str() == "xbc"


def test_view_of_writable_buffer_is_unhashable() -> None:
    data = bytearray(b"abc")
    view = MaybeUTF8Slice.from_bytes_ref(data)

    with pytest.raises(ValueError, match="writable buffer"):
        hash(view)
    with pytest.raises(ValueError):
        {view: 1}  # noqa: B018
    # Comparison still works, and a read-only source stays hashable
    assert view == b"abc"
    assert hash(MaybeUTF8Slice.from_bytes_ref(memoryview(b"abc"))) == hash(b"abc")
    assert hash(MaybeUTF8.from_bytes(data).to_slice()) == hash(b"abc")


def test_from_text_ref_with_surrogate_escape_is_bytes() -> None:
    view = MaybeUTF8Slice.from_text_ref("caf\udce9")

    assert view.is_bytes
    assert bytes(view) == b"caf\xe9"
    assert view.to_owned() == MaybeUTF8.from_bytes(b"caf\xe9")
    assert hash(view) == hash(b"caf\xe9")


def test_borrowed_bytearray_cannot_resize_until_released() -> None:
    data = bytearray(b"abc")
    view = MaybeUTF8Slice.from_bytes_ref(data)

    with pytest.raises(BufferError):
        data.extend(b"d")

    view.release()
    data.extend(b"d")
    assert data == b"abcd"


def test_context_manager_releases_view() -> None:
    data = bytearray(b"caf\xc3\xa9")

    with MaybeUTF8Slice.from_bytes_ref(data) as view:
        assert view.as_str() == "café"

    data.extend(b"!")
    with pytest.raises(ValueError):
        bytes(view)
    assert repr(view) == "MaybeUTF8Slice(<released>)"


def test_release_text_view_is_noop() -> None:
    view = MaybeUTF8Slice.from_text_ref("abc")
    view.release()

    assert view.as_str() == "abc"


def test_from_bytes_ref_casts_wide_items() -> None:
    data = array("H", [0x6162])
    view = MaybeUTF8Slice.from_bytes_ref(data)

    assert len(view) == 2
    assert view.as_bytes().format == "B"
    assert bytes(view) == data.tobytes()


@pytest.mark.parametrize("bad", ["text", 3])
def test_from_bytes_ref_rejects_non_bytes(bad: object) -> None:
    with pytest.raises(TypeError):
        MaybeUTF8Slice.from_bytes_ref(bad)  # type: ignore[arg-type]


def test_to_owned_copies_bytes() -> None:
    data = bytearray(b"abc")
    view = MaybeUTF8Slice.from_bytes_ref(data)

    owned = view.to_owned()
    data[0] = ord("x")

    assert isinstance(owned, MaybeUTF8)
    assert owned.is_bytes
    assert owned.into_bytes() == b"abc"
    assert view == b"xbc"


def test_to_owned_keeps_text_variant() -> None:
    text = "café"
    owned = MaybeUTF8Slice.from_text_ref(text).to_owned()

    assert owned.is_text
    assert owned.try_into_text() is text


def test_slice_compares_with_buf() -> None:
    text_view = MaybeUTF8Slice.from_text_ref("café")
    bytes_view = MaybeUTF8Slice.from_bytes_ref(b"caf\xc3\xa9")
    buf = MaybeUTF8.from_bytes(b"caf\xc3\xa9")

    assert text_view == bytes_view == buf
    assert hash(text_view) == hash(bytes_view) == hash(buf) == hash(b"caf\xc3\xa9")
    assert MaybeUTF8Slice.from_text_ref("a") < buf
    assert sorted([bytes_view, MaybeUTF8Slice.from_bytes_ref(b"\xff")])[0] is bytes_view


def test_len_bool_and_bytes() -> None:
    assert len(MaybeUTF8Slice.from_text_ref("é")) == 2
    assert len(MaybeUTF8Slice.from_bytes_ref(b"\xe9")) == 1
    assert not MaybeUTF8Slice.from_bytes_ref(b"")
    assert not MaybeUTF8Slice()
    assert MaybeUTF8Slice.from_text_ref("x")
    assert bytes(MaybeUTF8Slice.from_text_ref("é")) == b"\xc3\xa9"


def test_as_bytes_of_text_view() -> None:
    raw = MaybeUTF8Slice.from_text_ref("é").as_bytes()

    assert isinstance(raw, memoryview)
    assert raw.tobytes() == b"\xc3\xa9"


def test_repr_and_format() -> None:
    assert repr(MaybeUTF8Slice.from_text_ref("é")) == "MaybeUTF8Slice('é')"
    assert repr(MaybeUTF8Slice.from_bytes_ref(b"\xe9")) == "MaybeUTF8Slice(b'\\xe9')"
    assert f"{MaybeUTF8Slice.from_bytes_ref(b'ab'):>3}" == " ab"
