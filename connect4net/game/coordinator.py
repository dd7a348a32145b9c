"""
coordinator.py - Turn synchronization between the two sides of a game

TurnCoordinator decides when a local move is sent, when to wait for the
peer's reply and when control goes back to the caller. A human side waits on
a dedicated receiver thread; an agent side does the exchange synchronously
on its own thread.

All changes to the session and the turn flags happen under one lock, so a
move arriving on the receiver thread is applied atomically with respect to
caller-triggered moves.

End-of-game reporting follows the `last_move_was_mine` flag: it is set
before every send and cleared only after a reply arrives. A side that sends
the final move therefore reports itself as the loser, and an offline game
always does.
"""

import queue
import threading
from enum import Enum, auto
from typing import Optional

from connect4net.ai.random_agent import RandomAgent
from connect4net.config import GameConfig
from connect4net.debug import debug
from connect4net.game.board import Board, Move
from connect4net.game.session import GameListener, GameSession
from connect4net.network.errors import PeerLinkError, PeerReadFailure, PeerWriteFailure
from connect4net.network.link import PeerLink
from connect4net.utils import Player


class TurnState(Enum):
    IDLE = auto()                  # fresh game, no move and no connection yet
    AWAITING_LOCAL_INPUT = auto()
    SENDING_AND_WAITING = auto()   # local move sent (or client start), peer to reply
    FINISHED = auto()


_STOP = object()


class TurnCoordinator:
    """
    Protocol state machine and caller-facing API for one game.

    A coordinator is single-use: once FINISHED (or after a link failure) a
    new game needs a new coordinator.
    """

    def __init__(self, listener: Optional[GameListener] = None,
                 seed: Optional[int] = None,
                 config: Optional[GameConfig] = None,
                 link: Optional[PeerLink] = None):
        """
        Args:
            listener: Receives move, rejection and game-over notifications
            seed: Seed for the random agent (overrides config.seed)
            config: Settings; defaults are used when omitted
            link: Peer connection to use (a new unconnected one by default)
        """
        self.config = config if config is not None else GameConfig()
        self.session = GameSession(listener)
        self.link = link if link is not None else PeerLink(self.config.connect_timeout)
        self.agent = RandomAgent(seed if seed is not None else self.config.seed)

        self.state = TurnState.IDLE
        self.connected = False
        self.local_turn = True
        self.last_move_was_mine = True
        self.failure: Optional[PeerLinkError] = None

        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._receive_requests: "queue.Queue[object]" = queue.Queue()
        self._receiver: Optional[threading.Thread] = None
        self._closing = False
        self._timer_name = f"peer_wait_{id(self)}"

    # -- queries ------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self.session.board

    @property
    def current_player(self) -> Player:
        return self.session.current_player

    def is_game_over(self) -> bool:
        with self._lock:
            return self.session.is_over()

    def is_loser(self) -> bool:
        """True unless the last thing this side did was receive a peer move."""
        return self.last_move_was_mine

    def wait_for_local_turn(self, timeout: Optional[float] = None) -> bool:
        """
        Block until it is this side's turn, the game ends or the link fails.

        Returns:
            True if a local move can be made now
        """
        with self._changed:
            self._changed.wait_for(
                lambda: self._can_move_locally() or self._is_settled(), timeout)
            return self._can_move_locally()

    def wait_until_finished(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the game is over or the link has failed.

        Returns:
            True if the game reached FINISHED
        """
        with self._changed:
            self._changed.wait_for(self._is_settled, timeout)
            return self.state == TurnState.FINISHED

    # -- connection setup ---------------------------------------------------

    def start_server(self, port: int, host: str = "") -> None:
        """
        Wait for one peer on `port`; the server moves first.

        Raises:
            ConnectionFailure: if no peer could be accepted
        """
        self._require_fresh_game()
        self.link.listen(port, host)
        with self._changed:
            self.connected = True
            self.local_turn = True
            self.state = TurnState.AWAITING_LOCAL_INPUT
            self._changed.notify_all()
        debug.info("Server ready, local side moves first", "coordinator")

    def start_client(self, address: str, port: int, as_human: bool = True) -> None:
        """
        Connect to a server; the client moves second.

        A human client immediately starts waiting for the first remote move
        in the background. An agent client should call
        start_agent_receive_loop() next.

        Raises:
            ConnectionFailure: if the server cannot be reached
        """
        self._require_fresh_game()
        self.link.connect(address, port)
        with self._changed:
            self.connected = True
            self.local_turn = False
            self.state = TurnState.SENDING_AND_WAITING
            self._changed.notify_all()
        debug.info(f"Client connected as {'human' if as_human else 'agent'}", "coordinator")
        if as_human:
            self._request_receive()

    # -- local moves --------------------------------------------------------

    def human_move(self, column: int) -> Optional[Move]:
        """
        Play `column` for the local side if it is the local turn.

        Returns:
            The Move or REJECTED_MOVE, or None if it was not the local turn
        """
        with self._lock:
            if not self._can_move_locally():
                debug.debug(f"Ignoring column {column}: not the local turn ({self.state.name})",
                            "coordinator")
                return None

            move = self.session.apply_local_move(column)
            if move.is_rejected:
                return move

            if not self.connected:
                self._after_offline_move()
                return move

            must_wait = self._send_local_move(move)

        if must_wait:
            self._request_receive()
        return move

    def start_agent_turn_loop(self) -> None:
        """
        Play random columns until the game ends.

        Full columns are retried immediately with a new random column, which
        spins rather than blocks. Offline the agent plays both colors. When
        connected, each sent move is followed by a synchronous wait for the
        reply. Returns early if the link fails.
        """
        debug.info("Agent turn loop started", "coordinator")
        while not self.is_game_over():
            if self.failure is not None:
                debug.warning("Agent loop stopping: peer link failed", "coordinator")
                return
            if not self._can_move_locally():
                debug.warning(f"Agent loop stopping: not the local turn ({self.state.name})",
                              "coordinator")
                return

            column = self.agent.choose_column()
            with self._lock:
                move = self.session.apply_local_move(column)
                if move.is_rejected:
                    continue
                if not self.connected:
                    self._after_offline_move()
                    continue
                must_wait = self._send_local_move(move)

            if must_wait:
                self._receive_and_apply()
        debug.info(f"Agent turn loop finished, loser={self.is_loser()}", "coordinator")

    def start_agent_receive_loop(self) -> None:
        """Wait for the peer's first move, then run the agent turn loop."""
        if not self.connected:
            debug.warning("Agent receive loop needs a connected client", "coordinator")
            return
        debug.info("Agent waiting for the first remote move", "coordinator")
        self._receive_and_apply()
        if self.failure is not None:
            return
        self.start_agent_turn_loop()

    # -- teardown -----------------------------------------------------------

    def close(self) -> None:
        """Stop the receiver thread and close the link."""
        self._closing = True
        if self._receiver is not None:
            self._receive_requests.put(_STOP)
        self.link.close()
        receiver = self._receiver
        if receiver is not None and receiver is not threading.current_thread():
            receiver.join(timeout=1.0)
        with self._changed:
            self._changed.notify_all()

    def __enter__(self) -> 'TurnCoordinator':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # -- internals (callers hold self._lock unless noted) -------------------

    def _can_move_locally(self) -> bool:
        return self.local_turn and self.state in (TurnState.IDLE,
                                                  TurnState.AWAITING_LOCAL_INPUT)

    def _is_settled(self) -> bool:
        return self.state == TurnState.FINISHED or self.failure is not None or self._closing

    def _require_fresh_game(self) -> None:
        with self._lock:
            if self.state != TurnState.IDLE or self.connected:
                raise RuntimeError("network play must start from a fresh game")

    def _after_offline_move(self) -> None:
        self.state = TurnState.AWAITING_LOCAL_INPUT
        if self.session.is_over():
            self._finish()

    def _send_local_move(self, move: Move) -> bool:
        """
        Send a move that has already been applied locally.

        Returns:
            True if a reply from the peer must now be awaited
        """
        self.last_move_was_mine = True
        self.local_turn = False
        self.state = TurnState.SENDING_AND_WAITING
        try:
            self.link.send_move(move)
        except PeerWriteFailure as exc:
            self._record_failure(exc)
            return False

        if self.session.is_over():
            self._finish()
            return False
        return True

    def _apply_remote_move(self, move: Move) -> None:
        """Replay the peer's column on the local board; takes the lock itself."""
        with self._changed:
            if self.state == TurnState.FINISHED:
                debug.warning(f"Dropping {move}: game already finished", "coordinator")
                return

            applied = self.session.apply_local_move(move.column)
            if applied.is_rejected:
                debug.error(f"Peer played full column {move.column}; boards have diverged",
                            "coordinator")
            elif applied != move:
                debug.warning(f"Peer reported {move} but replay gave {applied}", "coordinator")

            self.last_move_was_mine = False
            self.local_turn = True
            self.state = TurnState.AWAITING_LOCAL_INPUT
            if self.session.is_over():
                self._finish()
            self._changed.notify_all()

    def _receive_and_apply(self) -> None:
        """Read one move and apply it. Called without the lock held."""
        debug.start_timer(self._timer_name)
        try:
            move = self.link.receive_move()
        except PeerReadFailure as exc:
            debug.end_timer(self._timer_name, "coordinator")
            with self._changed:
                self._record_failure(exc)
            return
        debug.end_timer(self._timer_name, "coordinator")
        self._apply_remote_move(move)

    def _request_receive(self) -> None:
        if self._receiver is None:
            self._receiver = threading.Thread(target=self._receive_loop,
                                              name="peer-receiver", daemon=True)
            self._receiver.start()
        self._receive_requests.put(True)

    def _receive_loop(self) -> None:
        """Body of the receiver thread: one blocking read per request."""
        while True:
            request = self._receive_requests.get()
            if request is _STOP or self._closing:
                return
            if self.is_game_over():
                continue
            self._receive_and_apply()
            if self.failure is not None:
                return

    def _record_failure(self, exc: PeerLinkError) -> None:
        self.failure = exc
        if self._closing:
            debug.debug(f"Link closed during exchange: {exc}", "coordinator")
        else:
            debug.error(f"Peer link failure, turn loop stalled: {exc}", "coordinator")
        self._changed.notify_all()

    def _finish(self) -> None:
        if self.state == TurnState.FINISHED:
            return
        self.state = TurnState.FINISHED
        self.local_turn = False
        won = not self.last_move_was_mine
        winner = self.session.board.winner()
        debug.info(f"Game over (winner on board: {winner.name if winner else 'draw'}), "
                   f"reporting {'won' if won else 'lost'}", "coordinator")
        self._changed.notify_all()
        self.session.listener.on_game_over(won)


def new_game(listener: Optional[GameListener] = None,
             seed: Optional[int] = None,
             config: Optional[GameConfig] = None) -> TurnCoordinator:
    """Create a fresh game ready for offline play or a network start."""
    return TurnCoordinator(listener=listener, seed=seed, config=config)
