"""Search tree nodes and the list-backed search tree."""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence, Tuple

from mctskit.caching import NoUTCCache, UTCCache
from mctskit.config import MCTSConfig
from mctskit.game import MCTSGame
from mctskit.heuristic import HeuristicConfig
from mctskit.policies import ExpansionPolicy


class PlainNode:
    """A tree node holding a game state, its visit statistics and its policies."""

    def __init__(
        self,
        game: MCTSGame,
        state: Any,
        expansion_policy: ExpansionPolicy,
        utc_cache: Optional[UTCCache] = None,
    ) -> None:
        self.game = game
        self.state = state
        self.visits = 0
        self.accumulated_value = 0.0
        self.utc_cache: UTCCache = utc_cache if utc_cache is not None else NoUTCCache()
        self.expansion_policy = expansion_policy

    def update_stats(self, result: float) -> None:
        """Record one more visit whose simulation ended with ``result``."""
        self.visits += 1
        self.accumulated_value += result
        self.utc_cache.update_exploitation(
            self.visits,
            self.accumulated_value,
            self.game.last_player(self.state),
            self.game.perspective_player(),
        )

    def calc_utc(self, parent_visits: int, mcts_config: MCTSConfig) -> float:
        """Return the UCT score of this node; unvisited nodes score infinity."""
        if self.visits == 0:
            return math.inf
        last_player = self.game.last_player(self.state)
        exploitation = self.utc_cache.get_exploitation(
            self.visits,
            self.accumulated_value,
            last_player,
            self.game.perspective_player(),
        )
        self.utc_cache.update_exploration(
            self.visits, parent_visits, mcts_config, last_player
        )
        exploration = self.utc_cache.get_exploration(
            self.visits, parent_visits, mcts_config, last_player
        )
        return exploitation + exploration

    def should_expand(
        self,
        visits: int,
        num_parent_children: int,
        mcts_config: MCTSConfig,
        heuristic_config: HeuristicConfig,
    ) -> bool:
        """Ask the expansion policy whether this node should get more children."""
        return self.expansion_policy.should_expand(
            visits, num_parent_children, mcts_config, heuristic_config
        )

    def expandable_moves(
        self,
        num_parent_children: int,
        mcts_config: MCTSConfig,
        heuristic_config: HeuristicConfig,
    ) -> List[Any]:
        """Return the moves the expansion policy wants to add as children now."""
        return self.expansion_policy.expandable_moves(
            self.visits,
            num_parent_children,
            self.state,
            mcts_config,
            heuristic_config,
        )


class PlainTree:
    """Search tree storing nodes in a list; node ids are list indices.

    Each node has a list of edges ``(child_id, move)``. A child may be linked
    from several parents when a transposition table is in use.
    """

    def __init__(self, expected_num_nodes: int = 0) -> None:
        self.expected_num_nodes = expected_num_nodes
        self.nodes: List[Any] = []
        self.edges: List[List[Tuple[int, Any]]] = []
        self._root = 0

    def _check_id(self, node_id: int) -> None:
        if not 0 <= node_id < len(self.nodes):
            raise IndexError(f"node id {node_id} is not in the tree")

    def init_root(self, node: Any) -> int:
        """Discard the whole tree and start a new one with ``node`` as root."""
        self.nodes.clear()
        self.edges.clear()
        self.nodes.append(node)
        self.edges.append([])
        self._root = 0
        return self._root

    def set_root(self, node_id: int) -> None:
        """Make an existing node the root."""
        self._check_id(node_id)
        self._root = node_id

    def root_id(self) -> Optional[int]:
        """Return the root id, or ``None`` if the tree is empty."""
        return self._root if self.nodes else None

    def get_node(self, node_id: int) -> Any:
        """Return the node with ``node_id``."""
        self._check_id(node_id)
        return self.nodes[node_id]

    def add_child(self, parent_id: int, mv: Any, node: Any) -> int:
        """Add ``node`` as a child reached from ``parent_id`` by ``mv``; return its id."""
        self._check_id(parent_id)
        child_id = len(self.nodes)
        self.nodes.append(node)
        self.edges.append([])
        self.link_child(parent_id, mv, child_id)
        return child_id

    def link_child(self, parent_id: int, mv: Any, child_id: int) -> None:
        """Link an existing node as a child of ``parent_id`` reached by ``mv``."""
        self._check_id(parent_id)
        self._check_id(child_id)
        self.edges[parent_id].append((child_id, mv))

    def get_children(self, node_id: int) -> Sequence[Tuple[int, Any]]:
        """Return the ``(child_id, move)`` edges of ``node_id``."""
        self._check_id(node_id)
        return tuple(self.edges[node_id])

    def prune_to_root(self) -> None:
        """Drop every node stored before the root and renumber the rest.

        Only valid when no node after the root links back to one before it,
        which holds when no transposition table is used.
        """
        root = self.root_id()
        if root is None or root == 0:
            return
        remaining = self.edges[root:]
        if any(child_id < root for edge in remaining for child_id, _ in edge):
            raise ValueError("a kept node links to a node before the root")
        del self.nodes[:root]
        self.edges = [[(child_id - root, mv) for child_id, mv in edge] for edge in remaining]
        self._root = 0