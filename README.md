# skycraft-protocol

Shared packet definitions and wire codec used by the Sky Craft client and server.

Each packet on the wire is a frame: a big-endian `u32` payload length followed
by the payload. The payload starts with the packet's variant index as a
little-endian `u32`, then the packet's fields in declaration order in a fixed
little-endian binary layout. Payloads larger than 1 MiB (`MAX_PACKET_SIZE`) are
refused on both encode and decode. No compression is applied.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `skycraft_protocol.constants`: protocol version, default port, timing and
  length limits.
- `skycraft_protocol.wire`: `Writer` and `Reader` for the little-endian
  primitives (`u8` to `u64`, `i8` to `i64`, `f32`, `f64`, `bool`, `string`,
  `raw_bytes`); errors are raised as `WireError`.
- `skycraft_protocol.types`: positions, item stacks, chunk sections, game enums
  and the Sky Craft specific types, each with `encode(writer)` and
  `decode(reader)`.
- `skycraft_protocol.packets`: the `C2S*` (client to server) and `S2C*`
  (server to client) packet dataclasses, with `serialize_client_packet`,
  `deserialize_client_packet`, `serialize_server_packet` and
  `deserialize_server_packet` for bare payloads.
- `skycraft_protocol.codec`: length-prefixed framing.

## Usage

Encode a packet into a framed byte string and decode it again:

```python
from skycraft_protocol.codec import encode_client_packet, decode_client_packet
from skycraft_protocol.packets import C2SChatMessage

data = encode_client_packet(C2SChatMessage(message="Hello Sky Craft!"))
result = decode_client_packet(data)
if result is not None:
    packet, consumed = result
    print(packet.message, consumed)
```

`decode_client_packet` and `decode_server_packet` return `None` while the buffer
does not yet hold a whole frame, so they fit a streaming read loop: append
incoming bytes to a buffer, decode, and drop the `consumed` bytes from its
front. Errors are subclasses of `CodecError`: encoding raises `SerializeError`
or `PacketTooLarge`, decoding raises `PacketTooLarge` or `DeserializeError`.

Server packets work the same way through `encode_server_packet` and
`decode_server_packet`:

```python
from skycraft_protocol.codec import encode_server_packet, decode_server_packet
from skycraft_protocol.packets import S2CUpdateHealth

data = encode_server_packet(S2CUpdateHealth(health=20.0, food=18, saturation=5.0))
packet, consumed = decode_server_packet(data)
```

Packets without data, such as `C2SUseEmergencyRecall()`, are plain instances
with no fields. Variants that carry data in some cases are modelled with a kind
enum plus fields: `MobDebuff(MobDebuffKind.FEAR, 40)`,
`ClickMode(ClickModeKind.NUMBER_KEY, 3)`,
`DeathCause(DeathKind.PLAYER_KILL, killer="Steve")`. The player-list packet
carries one of `PlayerListAdd`, `PlayerListUpdatePing` or `PlayerListRemove`.

## Shared types

```python
from skycraft_protocol.types import BlockPos, EntityPos, ChunkSection

pos = BlockPos(17, 65, -3)
pos.to_chunk_pos()    # ChunkPos(x=1, y=4, z=-1)
pos.chunk_local()     # (1, 1, 13)

EntityPos(0.0, 0.0, 0.0).distance_to(EntityPos(3.0, 4.0, 0.0))  # 5.0
EntityPos(1500.0, 64.0, 0.0).horizontal_distance_to_origin()     # 1500.0

section = ChunkSection.empty()
section.is_empty()            # True
section.get_block(0, 0, 0)    # 0 (air)
```

`EntityPos.to_block_pos` floors each coordinate, saturating at the 32-bit
integer range. `ChunkSection` stores a palette and YZX-ordered indices
(`y * 256 + z * 16 + x`); a single-entry palette means the whole section is that
block.

## Constants

`skycraft_protocol.constants` holds `PROTOCOL_VERSION`, `DEFAULT_PORT` (35565),
`MAX_PACKET_SIZE`, `TICKS_PER_SECOND` and `MS_PER_TICK`, the view distances,
the keep-alive interval and timeout, and the limits on chat and nickname length.

## What this package does not do

It defines packets and turns them into bytes and back. It opens no connections,
runs no server or client, and does not enforce the constants (such as chat
length or keep-alive timing); that is left to the code that uses it.