"""Core game abstractions: players, game caches and the game definition."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class GamePlayer(Protocol):
    """A hashable player identity that knows who moves after it."""

    def next(self) -> "GamePlayer":
        """Return the player who moves after this one."""
        ...


class TwoPlayer(Enum):
    """The two players of a two-player game; FIRST is the default."""

    FIRST = "first"
    SECOND = "second"

    def next(self) -> "TwoPlayer":
        """Return the other player."""
        return TwoPlayer.SECOND if self is TwoPlayer.FIRST else TwoPlayer.FIRST

    def next_player(self) -> "TwoPlayer":
        """Return the other player."""
        return self.next()


class GameCache:
    """Cache of applied states and terminal values.

    By default nothing is stored and every lookup misses. Created with
    ``enabled=True`` the cache keeps its entries in memory; states and moves
    must then be hashable.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self.enabled = enabled
        self._applied: Dict[Tuple[Any, Any], Any] = {}
        self._terminal: Dict[Any, Optional[float]] = {}

    def get_applied_state(self, state: Any, mv: Any) -> Optional[Any]:
        """Return the cached state that results from applying ``mv``, if any."""
        if not self.enabled:
            return None
        return self._applied.get((state, mv))

    def insert_applied_state(self, state: Any, mv: Any, result: Any) -> None:
        """Remember the state that results from applying ``mv`` to ``state``."""
        if self.enabled:
            self._applied[(state, mv)] = result

    def get_terminal_value(self, state: Any) -> Optional[Tuple[Optional[float]]]:
        """Return the cached terminal value of ``state``.

        ``None`` means nothing is cached. A cached entry is a one-element tuple
        holding the terminal score, or ``None`` if the state is not terminal.
        """
        if not self.enabled or state not in self._terminal:
            return None
        return (self._terminal[state],)

    def insert_terminal_value(self, state: Any, value: Optional[float]) -> None:
        """Remember the terminal value of ``state`` (``None`` if not terminal)."""
        if self.enabled:
            self._terminal[state] = value


class NoGameCache(GameCache):
    """Game cache for games where caching is not worthwhile; it stores nothing."""


class MCTSGame(ABC):
    """Definition of a game: its moves, transitions, scores and players."""

    @abstractmethod
    def available_moves(self, state: Any) -> Iterable[Any]:
        """Return the moves available in ``state``."""

    @abstractmethod
    def apply_move(self, state: Any, mv: Any, game_cache: GameCache) -> Any:
        """Return the state that results from playing ``mv`` in ``state``."""

    @abstractmethod
    def evaluate(self, state: Any, game_cache: GameCache) -> Optional[float]:
        """Return the final score of a terminal state, or ``None`` if not terminal.

        Scores are 1.0 for a win of the perspective player, 0.5 for a tie and
        0.0 for a loss.
        """

    @abstractmethod
    def current_player(self, state: Any) -> GamePlayer:
        """Return the player who moves next in ``state``."""

    @abstractmethod
    def last_player(self, state: Any) -> GamePlayer:
        """Return the player whose move produced ``state``."""

    @abstractmethod
    def perspective_player(self) -> GamePlayer:
        """Return the player from whose point of view scores are given."""

    def new_cache(self) -> GameCache:
        """Create an empty game cache for this game."""
        return NoGameCache()