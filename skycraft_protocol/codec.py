"""Length-prefixed framing of packets over byte streams.

Each frame is a big-endian u32 payload length followed by the payload, the
serialized client or server packet. Payloads over ``MAX_PACKET_SIZE`` are
rejected on both encode and decode. No compression is applied.
"""

from __future__ import annotations

import struct
from typing import Callable, Optional, Tuple, TypeVar

from .constants import MAX_PACKET_SIZE
from .packets import (
    deserialize_client_packet,
    deserialize_server_packet,
    serialize_client_packet,
    serialize_server_packet,
)

_T = TypeVar("_T")

_HEADER = struct.Struct(">I")


class CodecError(Exception):
    """Base class for packet framing errors."""


class PacketTooLarge(CodecError):
    """The payload exceeds ``MAX_PACKET_SIZE``."""

    def __init__(self, size: int) -> None:
        super().__init__(f"packet too large: {size} bytes (max {MAX_PACKET_SIZE})")
        self.size = size


class SerializeError(CodecError):
    """A packet could not be serialized."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"serialize error: {detail}")
        self.detail = detail


class DeserializeError(CodecError):
    """A payload could not be deserialized."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"deserialize error: {detail}")
        self.detail = detail


class InsufficientData(CodecError):
    """Not enough bytes to read the length header."""

    def __init__(self) -> None:
        super().__init__("insufficient data")


def _encode(packet, serialize: Callable[[object], bytes]) -> bytes:
    try:
        payload = serialize(packet)
    except (ValueError, TypeError, AttributeError) as exc:
        raise SerializeError(str(exc)) from exc
    if len(payload) > MAX_PACKET_SIZE:
        raise PacketTooLarge(len(payload))
    return _HEADER.pack(len(payload)) + payload


def _decode(buf: bytes, deserialize: Callable[[bytes], _T]) -> Optional[Tuple[_T, int]]:
    if len(buf) < _HEADER.size:
        return None
    (length,) = _HEADER.unpack_from(buf)
    if length > MAX_PACKET_SIZE:
        raise PacketTooLarge(length)
    total = _HEADER.size + length
    if len(buf) < total:
        return None
    try:
        packet = deserialize(bytes(buf[_HEADER.size:total]))
    except (ValueError, TypeError) as exc:
        raise DeserializeError(str(exc)) from exc
    return packet, total


def encode_client_packet(packet) -> bytes:
    """Encode a client-to-server packet as a length-prefixed frame."""
    return _encode(packet, serialize_client_packet)


def encode_server_packet(packet) -> bytes:
    """Encode a server-to-client packet as a length-prefixed frame."""
    return _encode(packet, serialize_server_packet)


def decode_client_packet(buf: bytes):
    """Decode one client packet from the front of ``buf``.

    Returns ``(packet, bytes_consumed)``, or None if the frame is not complete yet.
    """
    return _decode(buf, deserialize_client_packet)


def decode_server_packet(buf: bytes):
    """Decode one server packet from the front of ``buf``.

    Returns ``(packet, bytes_consumed)``, or None if the frame is not complete yet.
    """
    return _decode(buf, deserialize_server_packet)