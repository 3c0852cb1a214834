"""Receiving side: collects multicast chunks, writes files and requests resends."""

from __future__ import annotations

import argparse
import enum
import sys
import time
from pathlib import Path
from typing import BinaryIO

from .multicast import MulticastChannel
from .protocol import (
    CHUNK_SIZE,
    HEADER_SIZE,
    MAX_PACKET_SIZE,
    ChunkHeader,
    compute_checksum,
    pack_nak,
)

MAX_FILES = 100
CACHE_LIMIT = 10
NAK_INTERVAL = 10
DEFAULT_GROUP = "239.0.0.1"
DEFAULT_PORT = 5000
DEFAULT_OUTPUT_DIR = "received_files"


class ChunkState(enum.Enum):
    """Where a chunk currently lives."""

    MISSING = 0
    BUFFERED = 1
    FLUSHED = 2


class FileBuffer:
    """Chunks of one incoming file, kept in memory until flushed to disk."""

    def __init__(self, file_id: int, total_chunks: int, path: Path | str) -> None:
        self.file_id = file_id
        self.total_chunks = total_chunks
        self.path = Path(path)
        self.chunks_received = 0
        self._states = [ChunkState.MISSING] * total_chunks
        self._buffered: dict[int, bytes] = {}
        self._file: BinaryIO = open(self.path, "wb+")

    @property
    def complete(self) -> bool:
        """Whether every chunk has arrived."""
        return self.chunks_received == self.total_chunks

    @property
    def closed(self) -> bool:
        return self._file.closed

    def pending_flush_count(self) -> int:
        """Number of chunks held in memory and not yet written."""
        return len(self._buffered)

    def flush(self) -> int:
        """Write every buffered chunk at its offset; return how many were written."""
        if self._file.closed:
            return 0
        flushed = 0
        for seq_num in sorted(self._buffered):
            self._file.seek(seq_num * CHUNK_SIZE)
            self._file.write(self._buffered[seq_num])
            self._states[seq_num] = ChunkState.FLUSHED
            flushed += 1
        self._buffered.clear()
        if flushed:
            print(f"Flushed {flushed} non-contiguous chunks for file {self.file_id}")
        self._file.flush()
        return flushed

    def store(self, seq_num: int, data: bytes) -> bool:
        """Buffer a chunk; return False if it had already been received."""
        if not 0 <= seq_num < self.total_chunks:
            raise ValueError(f"Invalid sequence number {seq_num} for file {self.file_id}")
        if self._states[seq_num] is not ChunkState.MISSING:
            return False
        self._buffered[seq_num] = bytes(data)
        self._states[seq_num] = ChunkState.BUFFERED
        self.chunks_received += 1
        return True

    def missing(self) -> list[int]:
        """Sequence numbers of chunks not yet received, in order."""
        return [
            seq_num
            for seq_num, state in enumerate(self._states)
            if state is ChunkState.MISSING
        ]

    def close(self) -> None:
        """Close the output file, dropping anything still buffered."""
        self._buffered.clear()
        self._file.close()


class Receiver:
    """Reassembles files from multicast data packets."""

    def __init__(
        self, channel: MulticastChannel, output_dir: Path | str = DEFAULT_OUTPUT_DIR
    ) -> None:
        self.channel = channel
        self.output_dir = Path(output_dir)
        self.nak_interval = NAK_INTERVAL
        self.buffers: dict[int, FileBuffer] = {}

    def get_file_buffer(self, file_id: int, total_chunks: int) -> FileBuffer:
        """Return the buffer for ``file_id``, creating it and its output file if needed."""
        if not 0 <= file_id < MAX_FILES:
            raise ValueError(f"File id {file_id} out of bounds (max {MAX_FILES}).")
        buffer = self.buffers.get(file_id)
        if buffer is None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            buffer = FileBuffer(file_id, total_chunks, self.output_dir / f"file_{file_id}")
            self.buffers[file_id] = buffer
        return buffer

    def store_chunk(self, header: ChunkHeader, data: bytes) -> bool:
        """Store one chunk; return whether it was new."""
        buffer = self.get_file_buffer(header.file_id, header.total_chunks)
        if not buffer.store(header.seq_num, data):
            return False
        print(
            f"Received file {header.file_id}, chunk {header.seq_num} "
            f"({buffer.chunks_received}/{buffer.total_chunks})"
        )
        if buffer.pending_flush_count() >= CACHE_LIMIT:
            buffer.flush()
        if buffer.complete:
            buffer.flush()
            print(f"File {buffer.file_id} fully received and flushed to disk.")
            buffer.close()
            del self.buffers[header.file_id]
        return True

    def handle_packet(self, packet: bytes) -> bool:
        """Validate and store one received datagram; return whether a new chunk was stored."""
        if len(packet) < HEADER_SIZE:
            return False
        header = ChunkHeader.unpack(packet)
        data = packet[HEADER_SIZE : HEADER_SIZE + header.data_size]
        if len(data) != header.data_size or compute_checksum(data) != header.checksum:
            print(
                f"Checksum mismatch for file {header.file_id}, chunk {header.seq_num}",
                file=sys.stderr,
            )
            return False
        try:
            return self.store_chunk(header, data)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return False

    def send_naks(self) -> int:
        """Request every missing chunk of every incomplete file; return the NAK count."""
        sent = 0
        for buffer in list(self.buffers.values()):
            if buffer.complete:
                continue
            for seq_num in buffer.missing():
                self.channel.send(pack_nak(buffer.file_id, seq_num))
                sent += 1
        return sent

    def run(self) -> None:
        """Receive packets forever, sending NAKs every ``nak_interval`` seconds."""
        last_nak = time.monotonic()
        while True:
            if self.channel.check_receive(1.0):
                self.handle_packet(self.channel.receive(MAX_PACKET_SIZE))
            time.sleep(0.01)
            now = time.monotonic()
            if now - last_nak >= self.nak_interval:
                self.send_naks()
                last_nak = now


def main(argv: list[str] | None = None) -> int:
    """Listen on the multicast group and write received files."""
    parser = argparse.ArgumentParser(description="Receive files over multicast.")
    parser.parse_args(argv)
    with MulticastChannel(DEFAULT_GROUP, DEFAULT_PORT, DEFAULT_PORT) as channel:
        channel.setup_recv()
        print("Receiver started. Listening for multicast data...")
        try:
            Receiver(channel).run()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())