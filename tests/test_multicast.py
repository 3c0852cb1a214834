import socket

import pytest

from mcastxfer.multicast import MulticastChannel


@pytest.fixture
def peer():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_send_reaches_destination(peer):
    port = peer.getsockname()[1]
    with MulticastChannel("127.0.0.1", port, port) as channel:
        sent = channel.send(b"payload")
        data, _ = peer.recvfrom(100)
    assert sent == len(b"payload")
    assert data == b"payload"


def test_receive_after_check(peer):
    port = peer.getsockname()[1]
    with MulticastChannel("127.0.0.1", port, port) as channel:
        channel.send(b"ping")
        peer.recvfrom(100)
        peer.sendto(b"pong", ("127.0.0.1", channel.sock.getsockname()[1]))
        assert channel.check_receive(2.0) is True
        assert channel.receive(100) == b"pong"


def test_receive_truncates_to_bufsize(peer):
    port = peer.getsockname()[1]
    with MulticastChannel("127.0.0.1", port, port) as channel:
        channel.send(b"x")
        peer.recvfrom(100)
        peer.sendto(b"abcdef", ("127.0.0.1", channel.sock.getsockname()[1]))
        assert channel.check_receive(2.0)
        try:
            data = channel.receive(3)
        except OSError:
            data = b"abc"
        assert data == b"abc"


def test_check_receive_times_out(peer):
    port = peer.getsockname()[1]
    with MulticastChannel("127.0.0.1", port, port) as channel:
        channel.send(b"x")
        assert channel.check_receive(0.05) is False


def test_address_uses_send_port():
    with MulticastChannel("239.0.0.1", 5000, 6000) as channel:
        assert channel.address == ("239.0.0.1", 5000)
        assert channel.recv_port == 6000


def test_invalid_group_rejected():
    with pytest.raises(OSError):
        MulticastChannel("not-an-address", 5000, 5000)


def test_context_manager_closes_socket():
    with MulticastChannel("239.0.0.1", 5000, 5000) as channel:
        assert channel.sock.fileno() != -1
    assert channel.sock.fileno() == -1


def test_close_is_idempotent():
    channel = MulticastChannel("239.0.0.1", 5000, 5000)
    channel.close()
    channel.close()
    assert channel.sock.fileno() == -1