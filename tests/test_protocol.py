import pytest

from mcastxfer.protocol import (
    CHUNK_SIZE,
    HEADER_SIZE,
    MAX_PACKET_SIZE,
    NAK_SIZE,
    ChunkHeader,
    PacketType,
    compute_checksum,
    pack_nak,
    unpack_nak,
)


def test_header_round_trip():
    header = ChunkHeader(3, 7, 12, 1024, 99999)
    assert ChunkHeader.unpack(header.pack()) == header


def test_header_packed_length():
    assert len(ChunkHeader(0, 0, 1, 0, 0).pack()) == HEADER_SIZE
    assert HEADER_SIZE == 20
    assert MAX_PACKET_SIZE == HEADER_SIZE + CHUNK_SIZE


def test_header_wire_bytes_little_endian():
    header = ChunkHeader(1, 2, 3, 4, 5)
    assert header.pack() == (
        b"\x01\x00\x00\x00\x02\x00\x00\x00\x03\x00\x00\x00"
        b"\x04\x00\x00\x00\x05\x00\x00\x00"
    )


def test_header_unpack_ignores_payload():
    header = ChunkHeader(1, 0, 1, 3, compute_checksum(b"xyz"))
    packet = header.pack() + b"xyz"
    assert ChunkHeader.unpack(packet) == header


def test_header_unpack_too_short():
    with pytest.raises(ValueError):
        ChunkHeader.unpack(b"\x00" * (HEADER_SIZE - 1))


@pytest.mark.parametrize("bad", [-1, 1 << 32])
def test_header_rejects_out_of_range(bad):
    with pytest.raises(ValueError):
        ChunkHeader(bad, 0, 1, 0, 0)


def test_for_chunk_describes_data():
    data = b"hello world"
    header = ChunkHeader.for_chunk(2, 5, 9, data)
    assert header.data_size == len(data)
    assert header.checksum == compute_checksum(data)
    assert (header.file_id, header.seq_num, header.total_chunks) == (2, 5, 9)


def test_checksum_empty():
    assert compute_checksum(b"") == 0


def test_checksum_small_value():
    assert compute_checksum(b"abc") == 294


def test_checksum_order_independent():
    assert compute_checksum(b"\x01\x02\x03") == compute_checksum(b"\x03\x02\x01")


def test_checksum_fits_uint32():
    assert 0 <= compute_checksum(b"\xff" * 5000) < (1 << 32)


def test_nak_wire_bytes():
    assert pack_nak(1, 2) == b"\x01\x00\x00\x00\x02\x00\x00\x00"
    assert len(pack_nak(0, 0)) == NAK_SIZE


def test_nak_round_trip():
    assert unpack_nak(pack_nak(42, 1000)) == (42, 1000)


@pytest.mark.parametrize("size", [0, 7, 9, 20])
def test_nak_wrong_size(size):
    with pytest.raises(ValueError):
        unpack_nak(b"\x00" * size)


def test_nak_rejects_negative():
    with pytest.raises(ValueError):
        pack_nak(-1, 0)


def test_packet_type_lookup_by_value():
    assert PacketType(0) is PacketType.DATA
    assert PacketType(1) is PacketType.NAK


def test_packet_type_unknown_value():
    with pytest.raises(ValueError):
        PacketType(5)