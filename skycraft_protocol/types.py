"""Core data types shared between client and server, with their wire encoding."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, ClassVar, Iterable, Optional, TypeVar

from .wire import Reader, WireError, Writer

_T = TypeVar("_T")
_E = TypeVar("_E", bound=IntEnum)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


# ─── Encoding helpers ───────────────────────────────────────────────────────


def _write_option(writer: Writer, value: Optional[_T], write: Callable[[_T], object]) -> None:
    if value is None:
        writer.u8(0)
    else:
        writer.u8(1)
        write(value)


def _read_option(reader: Reader, read: Callable[[], _T]) -> Optional[_T]:
    tag = reader.u8()
    if tag == 0:
        return None
    if tag == 1:
        return read()
    raise WireError(f"invalid option tag {tag}")


def _write_seq(writer: Writer, items: Iterable[_T], write: Callable[[_T], object]) -> None:
    items = list(items)
    writer.u64(len(items))
    for item in items:
        write(item)


def _read_seq(reader: Reader, read: Callable[[], _T]) -> list:
    return [read() for _ in range(reader.u64())]


def _read_enum(reader: Reader, enum_cls: type[_E]) -> _E:
    tag = reader.u32()
    try:
        return enum_cls(tag)
    except ValueError:
        raise WireError(f"invalid {enum_cls.__name__} variant {tag}") from None


def _saturating_i32(value: float) -> int:
    if math.isnan(value):
        return 0
    if value <= _I32_MIN:
        return _I32_MIN
    if value >= _I32_MAX:
        return _I32_MAX
    return math.floor(value)


# ─── Positions ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChunkPos:
    """Chunk coordinates; each chunk covers 16x16x16 blocks."""

    x: int
    y: int
    z: int

    def encode(self, writer: Writer) -> None:
        writer.i32(self.x).i32(self.y).i32(self.z)

    @classmethod
    def decode(cls, reader: Reader) -> "ChunkPos":
        return cls(reader.i32(), reader.i32(), reader.i32())


@dataclass(frozen=True)
class BlockPos:
    """World position of a block (integer coordinates)."""

    x: int
    y: int
    z: int

    def to_chunk_pos(self) -> ChunkPos:
        """The chunk containing this block."""
        return ChunkPos(self.x // 16, self.y // 16, self.z // 16)

    def chunk_local(self) -> tuple[int, int, int]:
        """Position within the chunk, 0-15 on each axis."""
        return (self.x % 16, self.y % 16, self.z % 16)

    def encode(self, writer: Writer) -> None:
        writer.i32(self.x).i32(self.y).i32(self.z)

    @classmethod
    def decode(cls, reader: Reader) -> "BlockPos":
        return cls(reader.i32(), reader.i32(), reader.i32())


@dataclass(frozen=True)
class EntityPos:
    """Precise entity position."""

    x: float
    y: float
    z: float

    def to_block_pos(self) -> BlockPos:
        """Floor each coordinate, saturating at the i32 range (NaN becomes 0)."""
        return BlockPos(_saturating_i32(self.x), _saturating_i32(self.y), _saturating_i32(self.z))

    def distance_to(self, other: "EntityPos") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def horizontal_distance_to_origin(self) -> float:
        """Distance in the XZ plane from the world origin; used for rings."""
        return math.sqrt(self.x * self.x + self.z * self.z)

    def encode(self, writer: Writer) -> None:
        writer.f64(self.x).f64(self.y).f64(self.z)

    @classmethod
    def decode(cls, reader: Reader) -> "EntityPos":
        return cls(reader.f64(), reader.f64(), reader.f64())


@dataclass(frozen=True)
class Rotation:
    """Yaw (horizontal, 0 = south, 90 = west) and pitch (-90 up to 90 down), degrees."""

    yaw: float
    pitch: float

    def encode(self, writer: Writer) -> None:
        writer.f32(self.yaw).f32(self.pitch)

    @classmethod
    def decode(cls, reader: Reader) -> "Rotation":
        return cls(reader.f32(), reader.f32())


@dataclass(frozen=True)
class Velocity:
    x: float
    y: float
    z: float

    def encode(self, writer: Writer) -> None:
        writer.f64(self.x).f64(self.y).f64(self.z)

    @classmethod
    def decode(cls, reader: Reader) -> "Velocity":
        return cls(reader.f64(), reader.f64(), reader.f64())


# ─── Items ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ItemStack:
    """A stack of items in an inventory slot."""

    item_id: int
    count: int
    durability: Optional[int] = None
    enchantments: tuple[tuple[int, int], ...] = ()
    custom_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "enchantments", tuple((int(e), int(lvl)) for e, lvl in self.enchantments)
        )

    def encode(self, writer: Writer) -> None:
        writer.u16(self.item_id).u8(self.count)
        _write_option(writer, self.durability, writer.u16)
        _write_seq(writer, self.enchantments, lambda pair: writer.u16(pair[0]).u8(pair[1]))
        _write_option(writer, self.custom_name, writer.string)

    @classmethod
    def decode(cls, reader: Reader) -> "ItemStack":
        item_id = reader.u16()
        count = reader.u8()
        durability = _read_option(reader, reader.u16)
        enchantments = tuple(_read_seq(reader, lambda: (reader.u16(), reader.u8())))
        custom_name = _read_option(reader, reader.string)
        return cls(item_id, count, durability, enchantments, custom_name)


def encode_slot(writer: Writer, slot: Optional[ItemStack]) -> None:
    """Write an inventory slot: empty (None) or an item stack."""
    _write_option(writer, slot, lambda stack: stack.encode(writer))


def decode_slot(reader: Reader) -> Optional[ItemStack]:
    """Read an inventory slot."""
    return _read_option(reader, lambda: ItemStack.decode(reader))


def encode_player_id(writer: Writer, player_id: uuid.UUID) -> None:
    """Write a player UUID as a length-prefixed 16-byte string."""
    writer.raw_bytes(player_id.bytes)


def decode_player_id(reader: Reader) -> uuid.UUID:
    """Read a player UUID."""
    data = reader.raw_bytes()
    if len(data) != 16:
        raise WireError(f"invalid uuid length {len(data)}, expected 16")
    return uuid.UUID(bytes=data)


# ─── Chunk Data ─────────────────────────────────────────────────────────────


@dataclass
class ChunkSection:
    """A 16x16x16 section: palette, YZX-ordered palette indices and light data.

    A palette with a single entry means the whole section is that block and
    ``blocks`` is empty. Empty light lists mean all 0 (block) or all 15 (sky).
    """

    SIZE: ClassVar[int] = 16
    VOLUME: ClassVar[int] = 16 * 16 * 16

    palette: list[int] = field(default_factory=list)
    blocks: list[int] = field(default_factory=list)
    block_light: list[int] = field(default_factory=list)
    sky_light: list[int] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ChunkSection":
        """An all-air section."""
        return cls(palette=[0])

    def is_empty(self) -> bool:
        return len(self.palette) == 1 and self.palette[0] == 0

    def get_block(self, x: int, y: int, z: int) -> int:
        """Block state at a local position."""
        for coord in (x, y, z):
            if not 0 <= coord <= 255:
                raise ValueError(f"local coordinate {coord} out of range")
        if len(self.palette) == 1:
            return self.palette[0]
        index = y * 256 + z * 16 + x
        return self.palette[self.blocks[index]]

    def encode(self, writer: Writer) -> None:
        _write_seq(writer, self.palette, writer.u16)
        _write_seq(writer, self.blocks, writer.u16)
        _write_seq(writer, self.block_light, writer.u8)
        _write_seq(writer, self.sky_light, writer.u8)

    @classmethod
    def decode(cls, reader: Reader) -> "ChunkSection":
        return cls(
            palette=_read_seq(reader, reader.u16),
            blocks=_read_seq(reader, reader.u16),
            block_light=list(reader.raw_bytes()),
            sky_light=list(reader.raw_bytes()),
        )


# ─── Game State ─────────────────────────────────────────────────────────────


class Difficulty(IntEnum):
    PEACEFUL = 0
    EASY = 1
    NORMAL = 2
    HARD = 3


class GameMode(IntEnum):
    SURVIVAL = 0
    CREATIVE = 1
    SPECTATOR = 2


class BlockFace(IntEnum):
    BOTTOM = 0  # -Y
    TOP = 1  # +Y
    NORTH = 2  # -Z
    SOUTH = 3  # +Z
    WEST = 4  # -X
    EAST = 5  # +X


class Hand(IntEnum):
    MAIN = 0
    OFF = 1


class PlayerAction(IntEnum):
    START_DIGGING = 0
    CANCEL_DIGGING = 1
    FINISH_DIGGING = 2
    DROP_ITEM = 3
    DROP_ITEM_STACK = 4
    USE_ITEM = 5
    SWAP_HANDS = 6


class ChatType(IntEnum):
    PLAYER = 0
    SYSTEM = 1
    WHISPER = 2


# ─── Sky Craft Specific ─────────────────────────────────────────────────────


class MobDebuffKind(IntEnum):
    PLACEMENT_LOCK = 0
    MINING_LOCK = 1
    INVENTORY_LOCK = 2
    GRAVITY_PULL = 3
    FEAR = 4
    VOID_SICKNESS = 5
    SOUL_DRAIN = 6
    ANCHOR_BREAK = 7


@dataclass(frozen=True)
class MobDebuff:
    """A debuff applied by mobs at high rings.

    ``value`` is a duration in ticks, the pull strength for GRAVITY_PULL,
    the levels drained for SOUL_DRAIN, and unused (0) for ANCHOR_BREAK.
    """

    kind: MobDebuffKind
    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MobDebuffKind(self.kind))
        if self.kind is MobDebuffKind.ANCHOR_BREAK and self.value != 0:
            raise ValueError("ANCHOR_BREAK carries no value")

    def encode(self, writer: Writer) -> None:
        writer.u32(self.kind)
        if self.kind is MobDebuffKind.SOUL_DRAIN:
            writer.u8(self.value)
        elif self.kind is not MobDebuffKind.ANCHOR_BREAK:
            writer.u32(self.value)

    @classmethod
    def decode(cls, reader: Reader) -> "MobDebuff":
        kind = _read_enum(reader, MobDebuffKind)
        if kind is MobDebuffKind.SOUL_DRAIN:
            return cls(kind, reader.u8())
        if kind is MobDebuffKind.ANCHOR_BREAK:
            return cls(kind)
        return cls(kind, reader.u32())


@dataclass(frozen=True)
class PotionEffect:
    effect_id: int
    amplifier: int
    duration: int
    show_particles: bool

    def encode(self, writer: Writer) -> None:
        writer.u8(self.effect_id).u8(self.amplifier).u32(self.duration).bool(self.show_particles)

    @classmethod
    def decode(cls, reader: Reader) -> "PotionEffect":
        return cls(reader.u8(), reader.u8(), reader.u32(), reader.bool())


@dataclass(frozen=True)
class WindState:
    """Wind direction in degrees, strength in blocks per second, and gusting flag."""

    direction: float
    strength: float
    gusting: bool

    def encode(self, writer: Writer) -> None:
        writer.f32(self.direction).f32(self.strength).bool(self.gusting)

    @classmethod
    def decode(cls, reader: Reader) -> "WindState":
        return cls(reader.f32(), reader.f32(), reader.bool())


@dataclass(frozen=True)
class IslandInfo:
    name: str
    biome: str
    size_x: int
    size_z: int
    ring: int

    def encode(self, writer: Writer) -> None:
        writer.string(self.name).string(self.biome)
        writer.u16(self.size_x).u16(self.size_z).u32(self.ring)

    @classmethod
    def decode(cls, reader: Reader) -> "IslandInfo":
        return cls(reader.string(), reader.string(), reader.u16(), reader.u16(), reader.u32())


class DeathKind(IntEnum):
    ENTITY_KILL = 0
    VOID_FALL = 1
    WIND_BLOWN = 2
    VOID_LIGHTNING = 3
    FALL_DAMAGE = 4
    DROWNING = 5
    FIRE = 6
    STARVATION = 7
    EXPLOSION = 8
    PLAYER_KILL = 9
    OTHER = 10


_DEATH_FIELDS = {
    DeathKind.ENTITY_KILL: {"entity_name", "ring"},
    DeathKind.PLAYER_KILL: {"killer"},
    DeathKind.OTHER: {"message"},
}


@dataclass(frozen=True)
class DeathCause:
    """Cause of death; only the fields belonging to ``kind`` are set."""

    kind: DeathKind
    entity_name: Optional[str] = None
    ring: Optional[int] = None
    killer: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", DeathKind(self.kind))
        given = {
            name
            for name in ("entity_name", "ring", "killer", "message")
            if getattr(self, name) is not None
        }
        required = _DEATH_FIELDS.get(self.kind, set())
        if given != required:
            raise ValueError(
                f"{self.kind.name} takes fields {sorted(required)}, got {sorted(given)}"
            )

    def encode(self, writer: Writer) -> None:
        writer.u32(self.kind)
        if self.kind is DeathKind.ENTITY_KILL:
            writer.string(self.entity_name).u32(self.ring)
        elif self.kind is DeathKind.PLAYER_KILL:
            writer.string(self.killer)
        elif self.kind is DeathKind.OTHER:
            writer.string(self.message)

    @classmethod
    def decode(cls, reader: Reader) -> "DeathCause":
        kind = _read_enum(reader, DeathKind)
        if kind is DeathKind.ENTITY_KILL:
            name = reader.string()
            return cls(kind, entity_name=name, ring=reader.u32())
        if kind is DeathKind.PLAYER_KILL:
            return cls(kind, killer=reader.string())
        if kind is DeathKind.OTHER:
            return cls(kind, message=reader.string())
        return cls(kind)


@dataclass(frozen=True)
class Achievement:
    title: str
    description: str

    def encode(self, writer: Writer) -> None:
        writer.string(self.title).string(self.description)

    @classmethod
    def decode(cls, reader: Reader) -> "Achievement":
        return cls(reader.string(), reader.string())