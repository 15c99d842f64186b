"""Packet definitions for client-server communication and their payload encoding.

``C2S`` packets travel from client to server, ``S2C`` packets from server to
client. A payload is the variant index of the packet (u32) followed by its
fields in declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Callable, Optional
from uuid import UUID

from .types import (
    Achievement,
    BlockFace,
    BlockPos,
    ChatType,
    ChunkPos,
    ChunkSection,
    DeathCause,
    Difficulty,
    EntityPos,
    GameMode,
    Hand,
    IslandInfo,
    ItemStack,
    MobDebuff,
    PlayerAction,
    PotionEffect,
    Rotation,
    Velocity,
    WindState,
    _read_enum,
    _read_option,
    _read_seq,
    _write_option,
    _write_seq,
    decode_player_id,
    decode_slot,
    encode_player_id,
    encode_slot,
)
from .wire import Reader, WireError, Writer

# ─── Field codecs ───────────────────────────────────────────────────────────


class _Prim:
    def __init__(self, write: Callable[[Writer, object], object], read: Callable[[Reader], object]):
        self._write = write
        self._read = read

    def write(self, writer: Writer, value) -> None:
        self._write(writer, value)

    def read(self, reader: Reader):
        return self._read(reader)


class _Opt:
    def __init__(self, inner) -> None:
        self._inner = inner

    def write(self, writer: Writer, value) -> None:
        _write_option(writer, value, lambda v: self._inner.write(writer, v))

    def read(self, reader: Reader):
        return _read_option(reader, lambda: self._inner.read(reader))


class _Seq:
    def __init__(self, inner) -> None:
        self._inner = inner

    def write(self, writer: Writer, value) -> None:
        _write_seq(writer, value, lambda v: self._inner.write(writer, v))

    def read(self, reader: Reader) -> list:
        return _read_seq(reader, lambda: self._inner.read(reader))


class _Tuple:
    def __init__(self, *parts) -> None:
        self._parts = parts

    def write(self, writer: Writer, value) -> None:
        value = tuple(value)
        if len(value) != len(self._parts):
            raise WireError(f"expected a tuple of {len(self._parts)} items, got {len(value)}")
        for part, item in zip(self._parts, value):
            part.write(writer, item)

    def read(self, reader: Reader) -> tuple:
        return tuple(part.read(reader) for part in self._parts)


class _Union:
    """A closed set of message classes, tagged by their position (u32)."""

    def __init__(self, *classes) -> None:
        self._classes = classes
        self._tags = {cls: tag for tag, cls in enumerate(classes)}

    def write(self, writer: Writer, value) -> None:
        tag = self._tags.get(type(value))
        if tag is None:
            raise WireError(f"{type(value).__name__} is not one of the expected packet types")
        writer.u32(tag)
        value.encode(writer)

    def read(self, reader: Reader):
        tag = reader.u32()
        if tag >= len(self._classes):
            raise WireError(f"invalid variant tag {tag}")
        return self._classes[tag].decode(reader)


def _struct(cls) -> _Prim:
    return _Prim(lambda writer, value: value.encode(writer), cls.decode)


def _enum(cls) -> _Prim:
    def write(writer: Writer, value) -> None:
        try:
            writer.u32(cls(value))
        except ValueError as exc:
            raise WireError(f"invalid {cls.__name__} value {value!r}") from exc

    return _Prim(write, lambda reader: _read_enum(reader, cls))


_U8 = _Prim(Writer.u8, Reader.u8)
_U16 = _Prim(Writer.u16, Reader.u16)
_U32 = _Prim(Writer.u32, Reader.u32)
_U64 = _Prim(Writer.u64, Reader.u64)
_I8 = _Prim(Writer.i8, Reader.i8)
_I16 = _Prim(Writer.i16, Reader.i16)
_I64 = _Prim(Writer.i64, Reader.i64)
_F32 = _Prim(Writer.f32, Reader.f32)
_F64 = _Prim(Writer.f64, Reader.f64)
_BOOL = _Prim(Writer.bool, Reader.bool)
_STR = _Prim(Writer.string, Reader.string)
_UUID = _Prim(encode_player_id, decode_player_id)
_SLOT = _Prim(encode_slot, decode_slot)

_BLOCK_POS = _struct(BlockPos)
_CHUNK_POS = _struct(ChunkPos)
_ENTITY_POS = _struct(EntityPos)
_ROTATION = _struct(Rotation)
_VELOCITY = _struct(Velocity)
_ENTITY_ID = _U32
_BLOCK_STATE = _U16


class _Message:
    """Encodes dataclass fields in order with the codecs listed in ``_wire``."""

    _wire: tuple = ()

    def encode(self, writer: Writer) -> None:
        for f, codec in zip(fields(self), self._wire):
            codec.write(writer, getattr(self, f.name))

    @classmethod
    def decode(cls, reader: Reader):
        return cls(*(codec.read(reader) for codec in cls._wire))


# ─── Enums ──────────────────────────────────────────────────────────────────


class DiggingAction(IntEnum):
    START = 0
    CANCEL = 1
    FINISH = 2


class EntityInteractAction(IntEnum):
    ATTACK = 0
    INTERACT = 1


class ClickModeKind(IntEnum):
    NORMAL = 0
    SHIFT_CLICK = 1
    NUMBER_KEY = 2
    DROP = 3
    DOUBLE_CLICK = 4


@dataclass(frozen=True)
class ClickMode:
    """Inventory click mode; ``key`` is the hotbar key for NUMBER_KEY, else 0."""

    kind: ClickModeKind
    key: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ClickModeKind(self.kind))
        if self.kind is not ClickModeKind.NUMBER_KEY and self.key != 0:
            raise ValueError(f"{self.kind.name} carries no key")

    def encode(self, writer: Writer) -> None:
        writer.u32(self.kind)
        if self.kind is ClickModeKind.NUMBER_KEY:
            writer.u8(self.key)

    @classmethod
    def decode(cls, reader: Reader) -> "ClickMode":
        kind = _read_enum(reader, ClickModeKind)
        if kind is ClickModeKind.NUMBER_KEY:
            return cls(kind, reader.u8())
        return cls(kind)


class AnimationType(IntEnum):
    SWING_MAIN_ARM = 0
    TAKE_DAMAGE = 1
    LEAVE_BED = 2
    SWING_OFFHAND = 3
    CRITICAL_EFFECT = 4


class WindowType(IntEnum):
    CHEST = 0
    DOUBLE_CHEST = 1
    CRAFTING_TABLE = 2
    FURNACE = 3
    BLAST_FURNACE = 4
    SMOKER = 5
    ANVIL = 6
    ENCHANTING_TABLE = 7
    BREWING_STAND = 8
    BARREL = 9
    SHULKER_BOX = 10
    GRINDSTONE = 11
    STONECUTTER = 12
    LOOM = 13
    CARTOGRAPHY_TABLE = 14
    SMITHING_TABLE = 15
    BEACON = 16


class Weather(IntEnum):
    CLEAR = 0
    RAIN = 1
    THUNDER = 2


class DebuffType(IntEnum):
    """Debuff kind without its data, used when a debuff expires."""

    PLACEMENT_LOCK = 0
    MINING_LOCK = 1
    INVENTORY_LOCK = 2
    GRAVITY_PULL = 3
    FEAR = 4
    VOID_SICKNESS = 5
    SOUL_DRAIN = 6
    ANCHOR_BREAK = 7


class HazardType(IntEnum):
    VOID_LIGHTNING = 0
    VOID_FOG = 1
    FALLING_DEBRIS = 2
    ISLAND_TREMOR = 3
    WIND_GUST = 4


# ─── Client -> Server ───────────────────────────────────────────────────────


@dataclass
class C2SLogin(_Message):
    protocol_version: int
    auth_token: str
    _wire = (_U32, _STR)


@dataclass
class C2SPlayerPosition(_Message):
    x: float
    y: float
    z: float
    on_ground: bool
    _wire = (_F64, _F64, _F64, _BOOL)


@dataclass
class C2SPlayerLook(_Message):
    yaw: float
    pitch: float
    on_ground: bool
    _wire = (_F32, _F32, _BOOL)


@dataclass
class C2SPlayerPositionAndLook(_Message):
    x: float
    y: float
    z: float
    yaw: float
    pitch: float
    on_ground: bool
    _wire = (_F64, _F64, _F64, _F32, _F32, _BOOL)


@dataclass
class C2SPlayerAction(_Message):
    action: PlayerAction
    position: BlockPos
    face: BlockFace
    _wire = (_enum(PlayerAction), _BLOCK_POS, _enum(BlockFace))


@dataclass
class C2SBlockPlace(_Message):
    """Place a block; cursor coordinates are on the clicked face, 0.0-1.0."""

    hand: Hand
    position: BlockPos
    face: BlockFace
    cursor_x: float
    cursor_y: float
    cursor_z: float
    _wire = (_enum(Hand), _BLOCK_POS, _enum(BlockFace), _F32, _F32, _F32)


@dataclass
class C2SBlockDig(_Message):
    action: DiggingAction
    position: BlockPos
    face: BlockFace
    _wire = (_enum(DiggingAction), _BLOCK_POS, _enum(BlockFace))


@dataclass
class C2SEntityInteract(_Message):
    entity_id: int
    action: EntityInteractAction
    hand: Hand
    _wire = (_ENTITY_ID, _enum(EntityInteractAction), _enum(Hand))


@dataclass
class C2SUseItem(_Message):
    hand: Hand
    _wire = (_enum(Hand),)


@dataclass
class C2SSwingArm(_Message):
    hand: Hand
    _wire = (_enum(Hand),)


@dataclass
class C2SClickSlot(_Message):
    """Click on a window slot; window 0 is the player inventory."""

    window_id: int
    slot: int
    button: int
    mode: ClickMode
    clicked_item: Optional[ItemStack]
    _wire = (_U8, _I16, _U8, _struct(ClickMode), _SLOT)


@dataclass
class C2SHeldItemChange(_Message):
    slot: int
    _wire = (_U8,)


@dataclass
class C2SCloseWindow(_Message):
    window_id: int
    _wire = (_U8,)


@dataclass
class C2SCreativeSetSlot(_Message):
    slot: int
    item: Optional[ItemStack]
    _wire = (_I16, _SLOT)


@dataclass
class C2SChatMessage(_Message):
    message: str
    _wire = (_STR,)


@dataclass
class C2SKeepAliveResponse(_Message):
    id: int
    _wire = (_U64,)


@dataclass
class C2SClientSettings(_Message):
    view_distance: int
    chat_visible: bool
    _wire = (_U8, _BOOL)


@dataclass
class C2SPlaceMarker(_Message):
    position: BlockPos
    color: int
    _wire = (_BLOCK_POS, _U8)


@dataclass
class C2SRemoveMarker(_Message):
    position: BlockPos
    _wire = (_BLOCK_POS,)


@dataclass
class C2SUseGrapplingHook(_Message):
    target: BlockPos
    _wire = (_BLOCK_POS,)


@dataclass
class C2SUseEmergencyRecall(_Message):
    """Use emergency recall; carries no data."""


# ─── Server -> Client ───────────────────────────────────────────────────────


@dataclass
class S2CLoginSuccess(_Message):
    player_uuid: UUID
    nickname: str
    game_mode: GameMode
    difficulty: Difficulty
    spawn_position: EntityPos
    world_seed: int
    view_distance: int
    _wire = (_UUID, _STR, _enum(GameMode), _enum(Difficulty), _ENTITY_POS, _I64, _U8)


@dataclass
class S2CDisconnect(_Message):
    reason: str
    _wire = (_STR,)


@dataclass
class S2CChunkData(_Message):
    chunk_pos: ChunkPos
    section: ChunkSection
    _wire = (_CHUNK_POS, _struct(ChunkSection))


@dataclass
class S2CUnloadChunk(_Message):
    chunk_pos: ChunkPos
    _wire = (_CHUNK_POS,)


@dataclass
class S2CBlockChange(_Message):
    position: BlockPos
    block_state: int
    _wire = (_BLOCK_POS, _BLOCK_STATE)


@dataclass
class S2CMultiBlockChange(_Message):
    """Batch of (local_x, local_y, local_z, block_state) changes in one chunk."""

    chunk_pos: ChunkPos
    changes: list
    _wire = (_CHUNK_POS, _Seq(_Tuple(_U8, _U8, _U8, _BLOCK_STATE)))


@dataclass
class S2CSpawnEntity(_Message):
    entity_id: int
    entity_type: int
    position: EntityPos
    rotation: Rotation
    velocity: Velocity
    _wire = (_ENTITY_ID, _U16, _ENTITY_POS, _ROTATION, _VELOCITY)


@dataclass
class S2CSpawnPlayer(_Message):
    entity_id: int
    player_uuid: UUID
    nickname: str
    position: EntityPos
    rotation: Rotation
    _wire = (_ENTITY_ID, _UUID, _STR, _ENTITY_POS, _ROTATION)


@dataclass
class S2CEntityMove(_Message):
    """Entity moved; deltas are in 1/4096 of a block."""

    entity_id: int
    dx: int
    dy: int
    dz: int
    on_ground: bool
    _wire = (_ENTITY_ID, _I16, _I16, _I16, _BOOL)


@dataclass
class S2CEntityLook(_Message):
    entity_id: int
    yaw: float
    pitch: float
    on_ground: bool
    _wire = (_ENTITY_ID, _F32, _F32, _BOOL)


@dataclass
class S2CEntityMoveAndLook(_Message):
    entity_id: int
    dx: int
    dy: int
    dz: int
    yaw: float
    pitch: float
    on_ground: bool
    _wire = (_ENTITY_ID, _I16, _I16, _I16, _F32, _F32, _BOOL)


@dataclass
class S2CEntityTeleport(_Message):
    entity_id: int
    position: EntityPos
    rotation: Rotation
    on_ground: bool
    _wire = (_ENTITY_ID, _ENTITY_POS, _ROTATION, _BOOL)


@dataclass
class S2CEntityVelocity(_Message):
    entity_id: int
    velocity: Velocity
    _wire = (_ENTITY_ID, _VELOCITY)


@dataclass
class S2CDestroyEntities(_Message):
    entity_ids: list
    _wire = (_Seq(_ENTITY_ID),)


@dataclass
class S2CEntityMetadata(_Message):
    entity_id: int
    health: Optional[float]
    custom_name: Optional[str]
    is_on_fire: bool
    is_sneaking: bool
    is_sprinting: bool
    _wire = (_ENTITY_ID, _Opt(_F32), _Opt(_STR), _BOOL, _BOOL, _BOOL)


@dataclass
class S2CEntityAnimation(_Message):
    entity_id: int
    animation: AnimationType
    _wire = (_ENTITY_ID, _enum(AnimationType))


@dataclass
class S2CEntityEquipment(_Message):
    """Equipment slot: 0 main hand, 1 off hand, 2 boots, 3 legs, 4 chest, 5 helmet."""

    entity_id: int
    slot: int
    item: Optional[ItemStack]
    _wire = (_ENTITY_ID, _U8, _SLOT)


@dataclass
class S2CUpdateHealth(_Message):
    health: float
    food: int
    saturation: float
    _wire = (_F32, _U8, _F32)


@dataclass
class S2CSetExperience(_Message):
    bar: float
    level: int
    total_xp: int
    _wire = (_F32, _U16, _U32)


@dataclass
class S2CPlayerPositionAndLook(_Message):
    x: float
    y: float
    z: float
    yaw: float
    pitch: float
    _wire = (_F64, _F64, _F64, _F32, _F32)


@dataclass
class S2CRespawn(_Message):
    game_mode: GameMode
    difficulty: Difficulty
    spawn_position: EntityPos
    _wire = (_enum(GameMode), _enum(Difficulty), _ENTITY_POS)


@dataclass
class S2CWindowItems(_Message):
    window_id: int
    slots: list
    _wire = (_U8, _Seq(_SLOT))


@dataclass
class S2CSetSlot(_Message):
    window_id: int
    slot: int
    item: Optional[ItemStack]
    _wire = (_U8, _I16, _SLOT)


@dataclass
class S2COpenWindow(_Message):
    window_id: int
    window_type: WindowType
    title: str
    slot_count: int
    _wire = (_U8, _enum(WindowType), _STR, _U8)


@dataclass
class S2CConfirmTransaction(_Message):
    window_id: int
    accepted: bool
    _wire = (_U8, _BOOL)


@dataclass
class S2CChatMessage(_Message):
    message: str
    sender: Optional[str]
    chat_type: ChatType
    _wire = (_STR, _Opt(_STR), _enum(ChatType))


@dataclass
class S2CTimeUpdate(_Message):
    """World age in ticks and time of day (0 sunrise, 6000 noon, 12000 sunset)."""

    world_age: int
    time_of_day: int
    _wire = (_U64, _U32)


@dataclass
class S2CWeatherChange(_Message):
    weather: Weather
    _wire = (_enum(Weather),)


@dataclass
class S2CSoundEffect(_Message):
    sound_id: int
    position: EntityPos
    volume: float
    pitch: float
    _wire = (_U16, _ENTITY_POS, _F32, _F32)


@dataclass
class S2CParticleEffect(_Message):
    particle_id: int
    position: EntityPos
    offset_x: float
    offset_y: float
    offset_z: float
    count: int
    _wire = (_U16, _ENTITY_POS, _F32, _F32, _F32, _U16)


@dataclass
class S2CExplosion(_Message):
    """Explosion; destroyed blocks are offsets relative to the position."""

    position: EntityPos
    radius: float
    destroyed_blocks: list
    player_velocity: Velocity
    _wire = (_ENTITY_POS, _F32, _Seq(_Tuple(_I8, _I8, _I8)), _VELOCITY)


@dataclass
class PlayerListAdd(_Message):
    uuid: UUID
    nickname: str
    game_mode: GameMode
    ping_ms: int
    _wire = (_UUID, _STR, _enum(GameMode), _U16)


@dataclass
class PlayerListUpdatePing(_Message):
    uuid: UUID
    ping_ms: int
    _wire = (_UUID, _U16)


@dataclass
class PlayerListRemove(_Message):
    uuid: UUID
    _wire = (_UUID,)


@dataclass
class S2CPlayerListUpdate(_Message):
    action: object
    _wire = (_Union(PlayerListAdd, PlayerListUpdatePing, PlayerListRemove),)


@dataclass
class S2CKeepAlive(_Message):
    id: int
    _wire = (_U64,)


@dataclass
class S2CRingUpdate(_Message):
    """Current ring, and the island the player stands on, if any."""

    ring: int
    island: Optional[IslandInfo]
    _wire = (_U32, _Opt(_struct(IslandInfo)))


@dataclass
class S2CWindUpdate(_Message):
    wind: WindState
    _wire = (_struct(WindState),)


@dataclass
class S2CDebuffApplied(_Message):
    debuff: MobDebuff
    _wire = (_struct(MobDebuff),)


@dataclass
class S2CDebuffExpired(_Message):
    debuff_type: DebuffType
    _wire = (_enum(DebuffType),)


@dataclass
class S2CEffectApplied(_Message):
    effect: PotionEffect
    _wire = (_struct(PotionEffect),)


@dataclass
class S2CEffectExpired(_Message):
    effect_id: int
    _wire = (_U8,)


@dataclass
class S2CHazardWarning(_Message):
    hazard: HazardType
    position: Optional[EntityPos]
    _wire = (_enum(HazardType), _Opt(_ENTITY_POS))


@dataclass
class S2CAuroraEvent(_Message):
    active: bool
    remaining_secs: int
    _wire = (_BOOL, _U16)


@dataclass
class S2CDeathInfo(_Message):
    cause: DeathCause
    death_position: EntityPos
    score: int
    _wire = (_struct(DeathCause), _ENTITY_POS, _U32)


@dataclass
class S2CAchievementUnlocked(_Message):
    achievement: Achievement
    _wire = (_struct(Achievement),)


@dataclass
class S2CSkyFishingCatch(_Message):
    item: ItemStack
    _wire = (_struct(ItemStack),)


# ─── Top-level packets ──────────────────────────────────────────────────────

_CLIENT_PACKETS = _Union(
    C2SLogin,
    C2SPlayerPosition,
    C2SPlayerLook,
    C2SPlayerPositionAndLook,
    C2SPlayerAction,
    C2SBlockPlace,
    C2SBlockDig,
    C2SEntityInteract,
    C2SUseItem,
    C2SSwingArm,
    C2SClickSlot,
    C2SHeldItemChange,
    C2SCloseWindow,
    C2SCreativeSetSlot,
    C2SChatMessage,
    C2SKeepAliveResponse,
    C2SClientSettings,
    C2SPlaceMarker,
    C2SRemoveMarker,
    C2SUseGrapplingHook,
    C2SUseEmergencyRecall,
)

_SERVER_PACKETS = _Union(
    S2CLoginSuccess,
    S2CDisconnect,
    S2CChunkData,
    S2CUnloadChunk,
    S2CBlockChange,
    S2CMultiBlockChange,
    S2CSpawnEntity,
    S2CSpawnPlayer,
    S2CEntityMove,
    S2CEntityLook,
    S2CEntityMoveAndLook,
    S2CEntityTeleport,
    S2CEntityVelocity,
    S2CDestroyEntities,
    S2CEntityMetadata,
    S2CEntityAnimation,
    S2CEntityEquipment,
    S2CUpdateHealth,
    S2CSetExperience,
    S2CPlayerPositionAndLook,
    S2CRespawn,
    S2CWindowItems,
    S2CSetSlot,
    S2COpenWindow,
    S2CConfirmTransaction,
    S2CChatMessage,
    S2CTimeUpdate,
    S2CWeatherChange,
    S2CSoundEffect,
    S2CParticleEffect,
    S2CExplosion,
    S2CPlayerListUpdate,
    S2CKeepAlive,
    S2CRingUpdate,
    S2CWindUpdate,
    S2CDebuffApplied,
    S2CDebuffExpired,
    S2CEffectApplied,
    S2CEffectExpired,
    S2CHazardWarning,
    S2CAuroraEvent,
    S2CDeathInfo,
    S2CAchievementUnlocked,
    S2CSkyFishingCatch,
)


def serialize_client_packet(packet) -> bytes:
    """Encode a client-to-server packet payload (no length prefix)."""
    writer = Writer()
    _CLIENT_PACKETS.write(writer, packet)
    return writer.getvalue()


def deserialize_client_packet(data: bytes):
    """Decode a client-to-server packet payload. Trailing bytes are ignored."""
    return _CLIENT_PACKETS.read(Reader(data))


def serialize_server_packet(packet) -> bytes:
    """Encode a server-to-client packet payload (no length prefix)."""
    writer = Writer()
    _SERVER_PACKETS.write(writer, packet)
    return writer.getvalue()


def deserialize_server_packet(data: bytes):
    """Decode a server-to-client packet payload. Trailing bytes are ignored."""
    return _SERVER_PACKETS.read(Reader(data))