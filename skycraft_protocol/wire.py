"""Little-endian binary primitives used by the packet payload format.

Integers and floats are fixed width and little-endian, booleans are a
single byte, and strings and byte strings carry a u64 length prefix.
"""

from __future__ import annotations

import struct


class WireError(ValueError):
    """Raised when a value cannot be written or a payload cannot be read."""


_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_I32 = struct.Struct("<i")
_I64 = struct.Struct("<q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")


class Writer:
    """Accumulates an encoded payload. Every write method returns the writer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def _pack(self, packer: struct.Struct, value) -> "Writer":
        try:
            self._buf += packer.pack(value)
        except (struct.error, OverflowError, TypeError) as exc:
            raise WireError(f"cannot encode {value!r} as {packer.format}: {exc}") from exc
        return self

    def u8(self, value: int) -> "Writer":
        return self._pack(_U8, value)

    def u16(self, value: int) -> "Writer":
        return self._pack(_U16, value)

    def u32(self, value: int) -> "Writer":
        return self._pack(_U32, value)

    def u64(self, value: int) -> "Writer":
        return self._pack(_U64, value)

    def i8(self, value: int) -> "Writer":
        return self._pack(_I8, value)

    def i16(self, value: int) -> "Writer":
        return self._pack(_I16, value)

    def i32(self, value: int) -> "Writer":
        return self._pack(_I32, value)

    def i64(self, value: int) -> "Writer":
        return self._pack(_I64, value)

    def f32(self, value: float) -> "Writer":
        return self._pack(_F32, value)

    def f64(self, value: float) -> "Writer":
        return self._pack(_F64, value)

    def bool(self, value: bool) -> "Writer":
        return self.u8(1 if value else 0)

    def string(self, value: str) -> "Writer":
        try:
            data = value.encode("utf-8")
        except (UnicodeEncodeError, AttributeError) as exc:
            raise WireError(f"cannot encode {value!r} as a string: {exc}") from exc
        return self.raw_bytes(data)

    def raw_bytes(self, value: bytes) -> "Writer":
        try:
            data = bytes(value)
        except TypeError as exc:
            raise WireError(f"cannot encode {value!r} as bytes: {exc}") from exc
        self.u64(len(data))
        self._buf += data
        return self

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buf)


class Reader:
    """Reads primitives from an encoded payload, front to back."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._pos

    @property
    def remaining(self) -> int:
        """Number of bytes not yet consumed."""
        return len(self._data) - self._pos

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise WireError(
                f"unexpected end of data: need {size} bytes at offset {self._pos}, "
                f"have {self.remaining}"
            )
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def _unpack(self, packer: struct.Struct):
        return packer.unpack(self._take(packer.size))[0]

    def u8(self) -> int:
        return self._unpack(_U8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def u64(self) -> int:
        return self._unpack(_U64)

    def i8(self) -> int:
        return self._unpack(_I8)

    def i16(self) -> int:
        return self._unpack(_I16)

    def i32(self) -> int:
        return self._unpack(_I32)

    def i64(self) -> int:
        return self._unpack(_I64)

    def f32(self) -> float:
        return self._unpack(_F32)

    def f64(self) -> float:
        return self._unpack(_F64)

    def bool(self) -> bool:
        value = self.u8()
        if value > 1:
            raise WireError(f"invalid bool value {value}")
        return value == 1

    def string(self) -> str:
        data = self.raw_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WireError(f"invalid utf-8 in string: {exc}") from exc

    def raw_bytes(self) -> bytes:
        return self._take(self.u64())

    def finish(self) -> None:
        """Raise WireError if any unread bytes are left."""
        if self.remaining:
            raise WireError(f"{self.remaining} trailing bytes after payload")