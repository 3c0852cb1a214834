"""Sending side: multicasts files chunk by chunk and answers NAKs."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .multicast import MulticastChannel
from .protocol import CHUNK_SIZE, NAK_SIZE, ChunkHeader, unpack_nak

DEFAULT_GROUP = "239.0.0.1"
DEFAULT_PORT = 5000
DEFAULT_WAIT_SECONDS = 100
NAK_BUFSIZE = 1500


def build_packets(file_id: int, data: bytes) -> list[bytes]:
    """Split ``data`` into data packets, each a header followed by its chunk."""
    pieces = [data[offset : offset + CHUNK_SIZE] for offset in range(0, len(data), CHUNK_SIZE)]
    total = len(pieces)
    return [
        ChunkHeader.for_chunk(file_id, seq_num, total, piece).pack() + piece
        for seq_num, piece in enumerate(pieces)
    ]


class Sender:
    """Sends files to the multicast group and resends chunks on request."""

    def __init__(
        self, channel: MulticastChannel, wait_seconds: float = DEFAULT_WAIT_SECONDS
    ) -> None:
        self.channel = channel
        self.wait_seconds = wait_seconds

    def send_file(self, file_id: int, path: Path | str) -> int:
        """Send a file, then serve NAKs for ``wait_seconds``; return its chunk count."""
        packets = build_packets(file_id, Path(path).read_bytes())
        for packet in packets:
            self.channel.send(packet)
        print(f"Sent all {len(packets)} chunks for file {path}. Waiting for NAKs...")

        deadline = time.monotonic() + self.wait_seconds
        while (remaining := deadline - time.monotonic()) > 0:
            if self.channel.check_receive(min(1.0, remaining)):
                self.handle_nak(file_id, packets, self.channel.receive(NAK_BUFSIZE))
        return len(packets)

    def handle_nak(self, file_id: int, packets: list[bytes], payload: bytes) -> bool:
        """Resend the chunk a NAK asks for; return whether anything was resent."""
        if len(payload) != NAK_SIZE:
            return False
        nak_file_id, seq_num = unpack_nak(payload)
        if nak_file_id != file_id:
            return False
        if seq_num >= len(packets):
            print(
                f"Received NAK for invalid chunk {seq_num} (total_chunks={len(packets)})",
                file=sys.stderr,
            )
            return False
        print(f"Received NAK for file {nak_file_id}, chunk {seq_num}. Resending...")
        self.channel.send(packets[seq_num])
        return True


def main(argv: list[str] | None = None) -> int:
    """Send each named file in turn; file ids follow argument order."""
    parser = argparse.ArgumentParser(description="Send files over multicast.")
    parser.add_argument("files", nargs="+", help="files to send")
    args = parser.parse_args(argv)
    with MulticastChannel(DEFAULT_GROUP, DEFAULT_PORT, DEFAULT_PORT) as channel:
        channel.setup_recv()
        sender = Sender(channel)
        for file_id, path in enumerate(args.files):
            try:
                sender.send_file(file_id, path)
            except OSError as exc:
                print(f"{path}: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())