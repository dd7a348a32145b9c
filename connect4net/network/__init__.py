"""
connect4net.network - Peer connection and wire format

PeerLink owns the TCP socket between the two game processes; the protocol
module turns moves into length-prefixed records and back.
"""

from connect4net.network.errors import (ConnectionFailure, PeerClosed, PeerLinkError,
                                        PeerReadFailure, PeerWriteFailure, ProtocolError)
from connect4net.network.link import PeerLink

__all__ = ['PeerLink', 'PeerLinkError', 'ConnectionFailure', 'PeerReadFailure',
           'PeerWriteFailure', 'ProtocolError', 'PeerClosed']
