import math
import uuid

import pytest
from hypothesis import given, strategies as st

from skycraft_protocol.types import (
    Achievement,
    BlockPos,
    ChunkPos,
    ChunkSection,
    DeathCause,
    DeathKind,
    EntityPos,
    IslandInfo,
    ItemStack,
    MobDebuff,
    MobDebuffKind,
    PotionEffect,
    Rotation,
    Velocity,
    WindState,
    decode_player_id,
    decode_slot,
    encode_player_id,
    encode_slot,
)
from skycraft_protocol.wire import Reader, WireError, Writer

i32 = st.integers(min_value=-(2**31), max_value=2**31 - 1)


def round_trip(value):
    writer = Writer()
    value.encode(writer)
    reader = Reader(writer.getvalue())
    decoded = type(value).decode(reader)
    reader.finish()
    return decoded


# Cases carried over from the source's own tests.


def test_chunk_section_basics():
    section = ChunkSection.empty()
    assert section.is_empty()
    assert section.get_block(0, 0, 0) == 0
    assert section.get_block(15, 15, 15) == 0


def test_block_pos_chunk_conversion():
    pos = BlockPos(17, 65, -3)
    chunk = pos.to_chunk_pos()
    assert chunk.x == 1
    assert chunk.y == 4
    assert chunk.z == -1
    assert pos.chunk_local() == (1, 1, 13)


def test_entity_pos_distance():
    a = EntityPos(0.0, 0.0, 0.0)
    b = EntityPos(3.0, 4.0, 0.0)
    assert abs(a.distance_to(b) - 5.0) < 0.001


def test_ring_calculation():
    origin = EntityPos(0.0, 64.0, 0.0)
    assert int(origin.horizontal_distance_to_origin() / 500.0) == 0
    ring3 = EntityPos(1500.0, 64.0, 0.0)
    assert int(ring3.horizontal_distance_to_origin() / 500.0) == 3


# Further behaviour.


@given(i32, i32, i32)
def test_chunk_conversion_invariant(x, y, z):
    pos = BlockPos(x, y, z)
    chunk = pos.to_chunk_pos()
    lx, ly, lz = pos.chunk_local()
    assert all(0 <= v < 16 for v in (lx, ly, lz))
    assert (chunk.x * 16 + lx, chunk.y * 16 + ly, chunk.z * 16 + lz) == (x, y, z)


@given(i32, i32, i32)
def test_block_pos_round_trip(x, y, z):
    assert round_trip(BlockPos(x, y, z)) == BlockPos(x, y, z)


def test_block_pos_wire_bytes():
    writer = Writer()
    BlockPos(1, -1, 0).encode(writer)
    assert writer.getvalue() == b"\x01\x00\x00\x00\xff\xff\xff\xff\x00\x00\x00\x00"


def test_to_block_pos_floors():
    assert EntityPos(-0.5, 64.9, 3.0).to_block_pos() == BlockPos(-1, 64, 3)


def test_to_block_pos_saturates():
    pos = EntityPos(1e20, math.nan, -math.inf).to_block_pos()
    assert pos == BlockPos(2**31 - 1, 0, -(2**31))


@pytest.mark.parametrize(
    "value",
    [
        EntityPos(1.25, -64.5, 1e9),
        Rotation(90.0, -45.5),
        Velocity(0.1, -0.2, 0.3),
        ChunkPos(-7, 3, 100),
        PotionEffect(5, 1, 600, True),
        WindState(180.0, 2.5, False),
        IslandInfo("Aerie", "Forest", 64, 48, 3),
        Achievement("First Bridge", "Cross the void"),
    ],
)
def test_simple_round_trips(value):
    assert round_trip(value) == value


@pytest.mark.parametrize(
    "stack",
    [
        ItemStack(1, 64),
        ItemStack(276, 1, durability=1561, enchantments=((16, 5), (34, 3)), custom_name="Edge"),
    ],
)
def test_item_stack_round_trip(stack):
    assert round_trip(stack) == stack


@pytest.mark.parametrize("slot", [None, ItemStack(3, 12, custom_name="Dirt")])
def test_slot_round_trip(slot):
    writer = Writer()
    encode_slot(writer, slot)
    reader = Reader(writer.getvalue())
    assert decode_slot(reader) == slot
    assert reader.remaining == 0


def test_empty_slot_is_single_zero_byte():
    writer = Writer()
    encode_slot(writer, None)
    assert writer.getvalue() == b"\x00"


def test_invalid_option_tag_raises():
    with pytest.raises(WireError):
        decode_slot(Reader(b"\x02"))


def test_player_id_round_trip():
    player_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
    writer = Writer()
    encode_player_id(writer, player_id)
    data = writer.getvalue()
    assert data[8:] == player_id.bytes
    assert decode_player_id(Reader(data)) == player_id


def test_player_id_wrong_length_raises():
    data = Writer().raw_bytes(b"\x00" * 15).getvalue()
    with pytest.raises(WireError):
        decode_player_id(Reader(data))


def test_chunk_section_mixed_blocks():
    blocks = [0] * ChunkSection.VOLUME
    blocks[1 * 256 + 2 * 16 + 3] = 1
    section = ChunkSection(palette=[0, 42], blocks=blocks)
    assert not section.is_empty()
    assert section.get_block(3, 1, 2) == 42
    assert section.get_block(2, 1, 3) == 0


def test_uniform_stone_section_not_empty():
    section = ChunkSection(palette=[1])
    assert not section.is_empty()
    assert section.get_block(5, 5, 5) == 1


def test_get_block_rejects_negative():
    with pytest.raises(ValueError):
        ChunkSection.empty().get_block(-1, 0, 0)


def test_chunk_section_round_trip():
    section = ChunkSection(
        palette=[0, 7],
        blocks=[i % 2 for i in range(ChunkSection.VOLUME)],
        block_light=[3] * ChunkSection.VOLUME,
        sky_light=[],
    )
    assert round_trip(section) == section
    assert round_trip(ChunkSection.empty()) == ChunkSection.empty()


@pytest.mark.parametrize(
    "debuff",
    [
        MobDebuff(MobDebuffKind.PLACEMENT_LOCK, 100),
        MobDebuff(MobDebuffKind.GRAVITY_PULL, 2),
        MobDebuff(MobDebuffKind.SOUL_DRAIN, 3),
        MobDebuff(MobDebuffKind.ANCHOR_BREAK),
    ],
)
def test_mob_debuff_round_trip(debuff):
    assert round_trip(debuff) == debuff


def test_anchor_break_encodes_tag_only():
    writer = Writer()
    MobDebuff(MobDebuffKind.ANCHOR_BREAK).encode(writer)
    assert writer.getvalue() == Writer().u32(MobDebuffKind.ANCHOR_BREAK).getvalue()


def test_soul_drain_value_out_of_range():
    with pytest.raises(WireError):
        MobDebuff(MobDebuffKind.SOUL_DRAIN, 300).encode(Writer())


def test_anchor_break_rejects_value():
    with pytest.raises(ValueError):
        MobDebuff(MobDebuffKind.ANCHOR_BREAK, 5)


def test_unknown_debuff_tag_raises():
    with pytest.raises(WireError):
        MobDebuff.decode(Reader(Writer().u32(99).getvalue()))


@pytest.mark.parametrize(
    "cause",
    [
        DeathCause(DeathKind.ENTITY_KILL, entity_name="Zombie", ring=4),
        DeathCause(DeathKind.VOID_FALL),
        DeathCause(DeathKind.PLAYER_KILL, killer="Steve"),
        DeathCause(DeathKind.OTHER, message="mysterious"),
        DeathCause(DeathKind.STARVATION),
    ],
)
def test_death_cause_round_trip(cause):
    assert round_trip(cause) == cause


def test_death_cause_missing_field():
    with pytest.raises(ValueError):
        DeathCause(DeathKind.ENTITY_KILL, entity_name="Zombie")


def test_death_cause_extra_field():
    with pytest.raises(ValueError):
        DeathCause(DeathKind.FIRE, message="hot")


def test_truncated_island_info_raises():
    writer = Writer()
    IslandInfo("Aerie", "Forest", 64, 48, 3).encode(writer)
    with pytest.raises(WireError):
        IslandInfo.decode(Reader(writer.getvalue()[:-1]))