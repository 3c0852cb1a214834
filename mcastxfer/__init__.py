"""File transfer over IP multicast with per-chunk checksums and NAK-based retransmission."""

__version__ = "0.1.0"
__all__ = ["multicast", "protocol", "receiver", "sender"]