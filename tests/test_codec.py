import pytest
from hypothesis import given
from hypothesis import strategies as st

from skycraft_protocol.codec import (
    CodecError,
    DeserializeError,
    InsufficientData,
    PacketTooLarge,
    SerializeError,
    decode_client_packet,
    decode_server_packet,
    encode_client_packet,
    encode_server_packet,
)
from skycraft_protocol.constants import MAX_PACKET_SIZE
from skycraft_protocol.packets import (
    C2SChatMessage,
    C2SKeepAliveResponse,
    S2CDisconnect,
    S2CUpdateHealth,
)


def test_roundtrip_client_packet():
    packet = C2SChatMessage(message="Hello Sky Craft!")
    data = encode_client_packet(packet)
    decoded, consumed = decode_client_packet(data)
    assert consumed == len(data)
    assert isinstance(decoded, C2SChatMessage)
    assert decoded.message == "Hello Sky Craft!"


def test_roundtrip_server_packet():
    packet = S2CUpdateHealth(health=20.0, food=18, saturation=5.0)
    data = encode_server_packet(packet)
    decoded, consumed = decode_server_packet(data)
    assert consumed == len(data)
    assert isinstance(decoded, S2CUpdateHealth)
    assert decoded.health == 20.0
    assert decoded.food == 18


def test_partial_data_returns_none():
    data = encode_client_packet(C2SKeepAliveResponse(id=42))
    assert decode_client_packet(data[: len(data) // 2]) is None


def test_keep_alive_frame_bytes():
    data = encode_client_packet(C2SKeepAliveResponse(id=42))
    expected = b"\x00\x00\x00\x0c" + (15).to_bytes(4, "little") + (42).to_bytes(8, "little")
    assert data == expected


def test_header_is_big_endian_payload_length():
    data = encode_server_packet(S2CDisconnect(reason="bye"))
    assert int.from_bytes(data[:4], "big") == len(data) - 4


@pytest.mark.parametrize("buf", [b"", b"\x00", b"\x00\x00\x00"])
def test_short_header_returns_none(buf):
    assert decode_client_packet(buf) is None
    assert decode_server_packet(buf) is None


def test_decode_consumes_only_first_frame():
    first = encode_client_packet(C2SKeepAliveResponse(id=1))
    second = encode_client_packet(C2SChatMessage(message="second"))
    packet, consumed = decode_client_packet(first + second)
    assert consumed == len(first)
    assert packet == C2SKeepAliveResponse(id=1)
    packet2, consumed2 = decode_client_packet((first + second)[consumed:])
    assert packet2 == C2SChatMessage(message="second")
    assert consumed2 == len(second)


def test_header_at_max_size_waits_for_more_data():
    assert decode_client_packet(MAX_PACKET_SIZE.to_bytes(4, "big")) is None


def test_header_over_max_size_raises():
    with pytest.raises(PacketTooLarge) as info:
        decode_server_packet((MAX_PACKET_SIZE + 1).to_bytes(4, "big"))
    assert info.value.size == MAX_PACKET_SIZE + 1
    assert str(info.value) == (
        f"packet too large: {MAX_PACKET_SIZE + 1} bytes (max {MAX_PACKET_SIZE})"
    )


def test_encode_oversized_packet_raises():
    with pytest.raises(PacketTooLarge) as info:
        encode_client_packet(C2SChatMessage(message="x" * MAX_PACKET_SIZE))
    assert info.value.size > MAX_PACKET_SIZE


def test_encode_wrong_direction_raises_serialize_error():
    with pytest.raises(SerializeError):
        encode_client_packet(S2CDisconnect(reason="nope"))


def test_encode_out_of_range_value_raises_serialize_error():
    with pytest.raises(SerializeError):
        encode_server_packet(S2CUpdateHealth(health=1.0, food=300, saturation=0.0))


def test_decode_invalid_variant_raises_deserialize_error():
    payload = (999).to_bytes(4, "little")
    frame = len(payload).to_bytes(4, "big") + payload
    with pytest.raises(DeserializeError) as info:
        decode_client_packet(frame)
    assert str(info.value).startswith("deserialize error: ")


def test_decode_truncated_payload_raises_deserialize_error():
    payload = (15).to_bytes(4, "little") + b"\x01\x02"
    frame = len(payload).to_bytes(4, "big") + payload
    with pytest.raises(DeserializeError):
        decode_client_packet(frame)


def test_errors_share_base_class():
    assert isinstance(InsufficientData(), CodecError)
    assert str(InsufficientData()) == "insufficient data"
    assert str(SerializeError("boom")) == "serialize error: boom"


@given(st.text(max_size=200))
def test_chat_roundtrip_property(message):
    data = encode_client_packet(C2SChatMessage(message=message))
    decoded, consumed = decode_client_packet(data)
    assert decoded == C2SChatMessage(message=message)
    assert consumed == len(data)


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_keep_alive_roundtrip_property(value):
    data = encode_client_packet(C2SKeepAliveResponse(id=value))
    decoded, consumed = decode_client_packet(data)
    assert decoded.id == value
    assert consumed == 16