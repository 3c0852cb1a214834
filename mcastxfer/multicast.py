"""UDP multicast channel used for both data and NAK traffic."""

from __future__ import annotations

import selectors
import socket
import struct


class MulticastChannel:
    """A UDP socket that sends to a multicast group and can join it to receive."""

    def __init__(self, group: str, send_port: int, recv_port: int) -> None:
        group_bytes = socket.inet_aton(group)
        self.group = group
        self.send_port = send_port
        self.recv_port = recv_port
        self._membership = struct.pack("4s4s", group_bytes, socket.inet_aton("0.0.0.0"))
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        if hasattr(socket, "SO_REUSEPORT"):
            try:
                self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
            except OSError:
                pass
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._selector = selectors.DefaultSelector()
        self._selector.register(self.sock, selectors.EVENT_READ)

    @property
    def address(self) -> tuple[str, int]:
        """Destination of outgoing datagrams."""
        return (self.group, self.send_port)

    def send(self, data: bytes) -> int:
        """Send one datagram to the group; return the number of bytes sent."""
        return self.sock.sendto(data, self.address)

    def setup_recv(self) -> None:
        """Bind the receive port and join the multicast group."""
        self.sock.bind(("", self.recv_port))
        self.sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, self._membership)

    def receive(self, bufsize: int) -> bytes:
        """Read one datagram of at most ``bufsize`` bytes."""
        data, _ = self.sock.recvfrom(bufsize)
        return data

    def check_receive(self, timeout: float = 1.0) -> bool:
        """Wait up to ``timeout`` seconds; return whether a datagram is ready."""
        return bool(self._selector.select(timeout))

    def close(self) -> None:
        """Release the socket."""
        if self.sock.fileno() != -1:
            self._selector.unregister(self.sock)
            self._selector.close()
            self.sock.close()

    def __enter__(self) -> MulticastChannel:
        return self

    def __exit__(self, *args) -> None:
        self.close()