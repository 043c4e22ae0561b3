from __future__ import annotations

import io
import zipfile

from maybe_utf8 import MaybeUTF8

# General purpose bit 11: file name is UTF-8
ZIP_UTF8_FLAG = 0x800


def build_demo_zip() -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        # Non-ASCII names get the UTF-8 flag
        zf.writestr("readme-é.txt", "Hello from a UTF-8 name!\n")
        # Placeholder, patched below into a legacy code page name
        zf.writestr("caf?.txt", "Hello from a legacy name!\n")
    # zipfile only writes ASCII or flagged UTF-8 names. Swap in the cp437 byte
    # for é (0x82) in both headers to mimic an archive from an old tool.
    return buf.getvalue().replace(b"caf?.txt", b"caf\x82.txt")


def member_name(info: zipfile.ZipInfo) -> MaybeUTF8:
    """Return the member name, as text only when the archive says it is UTF-8."""
    if info.flag_bits & ZIP_UTF8_FLAG:
        return MaybeUTF8.from_text(info.filename)
    # zipfile decoded the raw name with cp437; undo that to get the bytes back
    return MaybeUTF8.from_bytes(info.filename.encode("cp437"))


def main() -> None:
    data = build_demo_zip()
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = [member_name(info) for info in zf.infolist()]

    print(f"Found {len(names)} members:\n")
    for name in sorted(names):
        print(f"- {name!r}")
        print(f"    display:     {name}")
        print(f"    as_str:      {name.as_str()!r}")
        print(f"    cp437:       {name.decode()!r}")
        print(f"    iso-8859-2:  {name.decode('iso-8859-2', 'replace')!r}")


if __name__ == "__main__":
    main()
