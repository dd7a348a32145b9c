"""
errors.py - Failures raised by the peer connection

Rejected moves are not errors: a full column is reported as REJECTED_MOVE.
Everything here concerns the TCP link between the two game processes.
"""


class PeerLinkError(Exception):
    """Base class for failures on the connection to the peer."""


class ConnectionFailure(PeerLinkError):
    """Listening, accepting or connecting failed; the session cannot start."""


class PeerWriteFailure(PeerLinkError):
    """A move could not be written to an established connection."""


class PeerReadFailure(PeerLinkError):
    """A move could not be read from an established connection."""


class ProtocolError(PeerReadFailure):
    """The peer sent bytes that do not decode to a move record."""


class PeerClosed(PeerReadFailure):
    """The peer closed the connection before a whole record arrived."""
