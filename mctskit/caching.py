"""Transposition tables and caches of UCT scores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Optional

from mctskit.config import MCTSConfig
from mctskit.game import GamePlayer
from mctskit.policies import StaticC, UCTPolicy


class TranspositionTable:
    """Maps game states to the ids of the tree nodes that hold them.

    The base table stores nothing: lookups always miss.
    """

    def __init__(self, expected_num_nodes: int = 0) -> None:
        self.expected_num_nodes = expected_num_nodes

    def get(self, state: Any) -> Optional[Any]:
        """Return the node id stored for ``state``, or ``None``."""
        return None

    def insert(self, state: Any, node_id: Any) -> None:
        """Store ``node_id`` for ``state``."""

    def clear(self) -> None:
        """Forget every stored state."""


class NoTranspositionTable(TranspositionTable):
    """Transposition table for searches that do without one."""


class TranspositionHashMap(TranspositionTable):
    """Dictionary-backed transposition table; states must be hashable."""

    def __init__(self, expected_num_nodes: int = 0) -> None:
        super().__init__(expected_num_nodes)
        self.table: Dict[Hashable, Any] = {}

    def get(self, state: Any) -> Optional[Any]:
        return self.table.get(state)

    def insert(self, state: Any, node_id: Any) -> None:
        """Store ``node_id`` for ``state``; a state may be stored only once."""
        if state in self.table:
            raise ValueError("state is already present in the transposition table")
        self.table[state] = node_id

    def clear(self) -> None:
        self.table.clear()


class UTCCache(ABC):
    """Provides the exploitation and exploration terms of a node's UCT score."""

    def __init__(self, policy: Optional[UCTPolicy] = None) -> None:
        self.policy: UCTPolicy = policy if policy is not None else StaticC()

    @abstractmethod
    def update_exploitation(
        self,
        visits: int,
        accumulated_value: float,
        last_player: GamePlayer,
        perspective_player: GamePlayer,
    ) -> None:
        """Called after the node's statistics have changed."""

    @abstractmethod
    def get_exploitation(
        self,
        visits: int,
        accumulated_value: float,
        last_player: GamePlayer,
        perspective_player: GamePlayer,
    ) -> float:
        """Return the exploitation term."""

    @abstractmethod
    def update_exploration(
        self,
        visits: int,
        parent_visits: int,
        mcts_config: MCTSConfig,
        last_player: GamePlayer,
    ) -> None:
        """Called before the exploration term is read."""

    @abstractmethod
    def get_exploration(
        self,
        visits: int,
        parent_visits: int,
        mcts_config: MCTSConfig,
        last_player: GamePlayer,
    ) -> float:
        """Return the exploration term."""


class NoUTCCache(UTCCache):
    """Computes both terms afresh every time they are read."""

    def update_exploitation(self, visits, accumulated_value, last_player, perspective_player):
        pass

    def get_exploitation(self, visits, accumulated_value, last_player, perspective_player):
        return self.policy.exploitation_score(
            accumulated_value, visits, last_player, perspective_player
        )

    def update_exploration(self, visits, parent_visits, mcts_config, last_player):
        pass

    def get_exploration(self, visits, parent_visits, mcts_config, last_player):
        return self.policy.exploration_score(visits, parent_visits, mcts_config, last_player)


class CachedUTC(UTCCache):
    """Stores both terms; exploration is recomputed only when parent visits change."""

    def __init__(self, policy: Optional[UCTPolicy] = None) -> None:
        super().__init__(policy)
        self.exploitation = 0.0
        self.exploration = 0.0
        self.last_parent_visits = 0

    def update_exploitation(self, visits, accumulated_value, last_player, perspective_player):
        self.exploitation = self.policy.exploitation_score(
            accumulated_value, visits, last_player, perspective_player
        )

    def get_exploitation(self, visits, accumulated_value, last_player, perspective_player):
        return self.exploitation

    def update_exploration(self, visits, parent_visits, mcts_config, last_player):
        if self.last_parent_visits != parent_visits:
            self.exploration = self.policy.exploration_score(
                visits, parent_visits, mcts_config, last_player
            )
            self.last_parent_visits = parent_visits

    def get_exploration(self, visits, parent_visits, mcts_config, last_player):
        return self.exploration