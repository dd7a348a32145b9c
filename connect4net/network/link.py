"""
link.py - TCP connection to the remote peer

A PeerLink is established once, either by listening for exactly one peer
(server role) or by connecting to one (client role), and then carries move
records in both directions. Accept, connect and read block without a timeout
unless one is configured for connect.
"""

import socket
import threading
from typing import Optional

from connect4net.debug import debug
from connect4net.game.board import Move
from connect4net.network import protocol
from connect4net.network.errors import (ConnectionFailure, PeerReadFailure,
                                        PeerWriteFailure)


class PeerLink:
    """Ordered, reliable exchange of Move records with one peer."""

    def __init__(self, connect_timeout: Optional[float] = None):
        self.connect_timeout = connect_timeout
        self.sock: Optional[socket.socket] = None
        self.peer_address = None
        self.bound_port: Optional[int] = None
        # Set once the server socket accepts connections
        self.listening = threading.Event()
        self._server_sock: Optional[socket.socket] = None

    @classmethod
    def from_socket(cls, sock: socket.socket) -> 'PeerLink':
        """Wrap an already connected socket."""
        link = cls()
        link.sock = sock
        try:
            link.peer_address = sock.getpeername()
        except OSError:
            link.peer_address = None
        return link

    @property
    def is_connected(self) -> bool:
        return self.sock is not None

    def listen(self, port: int, host: str = "") -> None:
        """
        Wait for exactly one peer to connect on `port`.

        Blocks until the connection arrives. The listening socket is closed
        afterwards, so later peers are refused.

        Raises:
            ConnectionFailure: if binding or accepting fails
        """
        server_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_sock.bind((host, port))
            server_sock.listen(1)
            self.bound_port = server_sock.getsockname()[1]
            self._server_sock = server_sock
            debug.info(f"Listening for a peer on port {self.bound_port}", "link")
            self.listening.set()
            conn, addr = server_sock.accept()
        except OSError as exc:
            raise ConnectionFailure(f"could not accept a peer on port {port}: {exc}") from exc
        finally:
            self._server_sock = None
            server_sock.close()

        conn.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self.sock = conn
        self.peer_address = addr
        debug.info(f"Peer connected from {addr[0]}:{addr[1]}", "link")

    def connect(self, address: str, port: int) -> None:
        """
        Connect to a listening peer.

        Raises:
            ConnectionFailure: if the address cannot be reached
        """
        debug.info(f"Connecting to {address}:{port}", "link")
        try:
            sock = socket.create_connection((address, port), timeout=self.connect_timeout)
        except OSError as exc:
            raise ConnectionFailure(f"could not connect to {address}:{port}: {exc}") from exc

        # Reads block indefinitely once connected
        sock.settimeout(None)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self.sock = sock
        self.peer_address = (address, port)
        debug.info(f"Connected to {address}:{port}", "link")

    def send_move(self, move: Move) -> None:
        """
        Send one move record.

        Raises:
            PeerWriteFailure: if the link is down or the write fails
        """
        if self.sock is None:
            raise PeerWriteFailure("not connected")
        try:
            protocol.send_move(self.sock, move)
        except OSError as exc:
            raise PeerWriteFailure(f"sending {move} failed: {exc}") from exc
        debug.debug(f"Sent {move}", "link")

    def receive_move(self) -> Move:
        """
        Block until the peer's next move arrives.

        Raises:
            PeerReadFailure: on EOF, I/O error or a malformed record
        """
        if self.sock is None:
            raise PeerReadFailure("not connected")
        try:
            move = protocol.recv_move(self.sock)
        except OSError as exc:
            raise PeerReadFailure(f"reading from peer failed: {exc}") from exc
        debug.debug(f"Received {move}", "link")
        return move

    def close(self) -> None:
        """Close the connection (and a pending listener). Safe to call twice."""
        server_sock, self._server_sock = self._server_sock, None
        if server_sock is not None:
            server_sock.close()

        sock, self.sock = self.sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Peer may already be gone
            pass
        sock.close()
        debug.debug("Link closed", "link")

    def __enter__(self) -> 'PeerLink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
