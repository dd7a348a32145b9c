"""
protocol.py - Wire format for move records

Each turn sends exactly one record: a 4-byte big-endian length followed by a
UTF-8 JSON object {"row": r, "column": c, "color": k} where k is 1 or 2.
REJECTED_MOVE never goes on the wire.
"""

import json
import socket
import struct

from connect4net.game.board import Move
from connect4net.network.errors import PeerClosed, ProtocolError
from connect4net.utils import ROWS, COLS, Player

HEADER = struct.Struct('>I')
MAX_RECORD_SIZE = 1024
VALID_COLORS = (Player.ONE.value, Player.TWO.value)


def encode_move(move: Move) -> bytes:
    """
    Serialize a move into one length-prefixed record.

    Raises:
        ValueError: if `move` is REJECTED_MOVE
    """
    if move.is_rejected:
        raise ValueError("rejected moves are never sent to the peer")
    payload = json.dumps({
        "row": move.row,
        "column": move.column,
        "color": move.color_code,
    }).encode('utf-8')
    return HEADER.pack(len(payload)) + payload


def decode_move(payload: bytes) -> Move:
    """
    Parse the JSON body of a record.

    Raises:
        ProtocolError: if the body is not a well-formed move
    """
    try:
        data = json.loads(payload.decode('utf-8'))
        row, column, color = int(data["row"]), int(data["column"]), int(data["color"])
    except (UnicodeDecodeError, ValueError, KeyError, TypeError, OverflowError) as exc:
        raise ProtocolError(f"malformed move record: {payload!r}") from exc

    if color not in VALID_COLORS:
        raise ProtocolError(f"invalid color code {color}")
    if not (0 <= row < ROWS and 0 <= column < COLS):
        raise ProtocolError(f"move outside the board: row {row}, column {column}")
    return Move(row, column, Player(color))


def recv_all(sock: socket.socket, n: int) -> bytes:
    """
    Receive exactly n bytes.

    Raises:
        PeerClosed: if the stream ends first
    """
    data = b''
    while len(data) < n:
        packet = sock.recv(n - len(data))
        if not packet:
            raise PeerClosed(f"connection closed after {len(data)} of {n} bytes")
        data += packet
    return data


def send_move(sock: socket.socket, move: Move) -> None:
    sock.sendall(encode_move(move))


def recv_move(sock: socket.socket) -> Move:
    """Block until one whole record has arrived and decode it."""
    (length,) = HEADER.unpack(recv_all(sock, HEADER.size))
    if length == 0 or length > MAX_RECORD_SIZE:
        raise ProtocolError(f"bad record length {length}")
    return decode_move(recv_all(sock, length))
