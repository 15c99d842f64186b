"""Packet types, binary encoding and length-prefixed framing for Sky Craft client-server communication."""

__version__ = "0.0.1"
__all__ = ["constants", "wire", "types", "packets", "codec"]