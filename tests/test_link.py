"""Tests for PeerLink connection setup and move exchange."""

import socket
import threading

import pytest

from connect4net.game.board import Move
from connect4net.network.errors import (ConnectionFailure, PeerReadFailure,
                                        PeerWriteFailure)
from connect4net.network.link import PeerLink
from connect4net.utils import Player


def unused_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


class TestPeerLink:
    def test_exchange_over_socketpair(self):
        left, right = socket.socketpair()
        with PeerLink.from_socket(left) as a, PeerLink.from_socket(right) as b:
            a.send_move(Move(0, 2, Player.ONE))
            assert b.receive_move() == Move(0, 2, Player.ONE)
            b.send_move(Move(1, 2, Player.TWO))
            assert a.receive_move() == Move(1, 2, Player.TWO)

    def test_listen_accepts_one_peer(self):
        server = PeerLink()
        thread = threading.Thread(target=server.listen, args=(0, "127.0.0.1"), daemon=True)
        thread.start()
        assert server.listening.wait(5)

        client = PeerLink(connect_timeout=5)
        client.connect("127.0.0.1", server.bound_port)
        thread.join(5)
        try:
            assert server.is_connected and client.is_connected
            client.send_move(Move(0, 0, Player.TWO))
            assert server.receive_move() == Move(0, 0, Player.TWO)
        finally:
            client.close()
            server.close()

    def test_connect_failure(self):
        link = PeerLink(connect_timeout=2)
        with pytest.raises(ConnectionFailure):
            link.connect("127.0.0.1", unused_port())
        assert not link.is_connected

    def test_send_without_connection(self):
        with pytest.raises(PeerWriteFailure):
            PeerLink().send_move(Move(0, 0, Player.ONE))

    def test_receive_without_connection(self):
        with pytest.raises(PeerReadFailure):
            PeerLink().receive_move()

    def test_peer_hangup_is_a_read_failure(self):
        left, right = socket.socketpair()
        link = PeerLink.from_socket(left)
        right.close()
        with pytest.raises(PeerReadFailure):
            link.receive_move()
        link.close()

    def test_close_twice(self):
        left, right = socket.socketpair()
        link = PeerLink.from_socket(left)
        link.close()
        link.close()
        right.close()
        assert not link.is_connected
