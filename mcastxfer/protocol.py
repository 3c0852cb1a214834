"""Wire format shared by the sender and the receiver."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

CHUNK_SIZE = 1024
WINDOW_SIZE = 50

_HEADER = struct.Struct("<5I")
_NAK = struct.Struct("<2I")

HEADER_SIZE = _HEADER.size
NAK_SIZE = _NAK.size
MAX_PACKET_SIZE = HEADER_SIZE + CHUNK_SIZE

_UINT32_LIMIT = 1 << 32


class PacketType(enum.IntEnum):
    """Kinds of control packets."""

    DATA = 0
    NAK = 1


def _check_uint32(name: str, value: int) -> None:
    if not 0 <= value < _UINT32_LIMIT:
        raise ValueError(f"{name} must fit in an unsigned 32-bit integer, got {value}")


@dataclass(frozen=True)
class ChunkHeader:
    """Header that precedes every chunk of file data."""

    file_id: int
    seq_num: int
    total_chunks: int
    data_size: int
    checksum: int

    def __post_init__(self) -> None:
        for name in ("file_id", "seq_num", "total_chunks", "data_size", "checksum"):
            _check_uint32(name, getattr(self, name))

    @classmethod
    def for_chunk(
        cls, file_id: int, seq_num: int, total_chunks: int, data: bytes
    ) -> ChunkHeader:
        """Build the header describing ``data``."""
        return cls(file_id, seq_num, total_chunks, len(data), compute_checksum(data))

    def pack(self) -> bytes:
        """Encode the header into its wire form."""
        return _HEADER.pack(
            self.file_id, self.seq_num, self.total_chunks, self.data_size, self.checksum
        )

    @classmethod
    def unpack(cls, data: bytes) -> ChunkHeader:
        """Decode a header from the start of ``data``."""
        if len(data) < HEADER_SIZE:
            raise ValueError(
                f"need at least {HEADER_SIZE} bytes for a chunk header, got {len(data)}"
            )
        return cls(*_HEADER.unpack_from(data))


def compute_checksum(data: bytes) -> int:
    """Sum of all bytes, wrapped to 32 bits."""
    return sum(data) % _UINT32_LIMIT


def pack_nak(file_id: int, seq_num: int) -> bytes:
    """Encode a request to resend one chunk."""
    _check_uint32("file_id", file_id)
    _check_uint32("seq_num", seq_num)
    return _NAK.pack(file_id, seq_num)


def unpack_nak(data: bytes) -> tuple[int, int]:
    """Decode a NAK into ``(file_id, seq_num)``."""
    if len(data) != NAK_SIZE:
        raise ValueError(f"NAK must be exactly {NAK_SIZE} bytes, got {len(data)}")
    file_id, seq_num = _NAK.unpack(data)
    return file_id, seq_num