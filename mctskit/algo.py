"""Monte Carlo tree search over a list-backed tree."""

from __future__ import annotations

import math
import random
from typing import Any, List, Optional, Sequence, Type

from mctskit.caching import (
    NoTranspositionTable,
    NoUTCCache,
    TranspositionHashMap,
    TranspositionTable,
    UTCCache,
)
from mctskit.config import BaseConfig, MCTSConfig
from mctskit.game import MCTSGame
from mctskit.heuristic import (
    BaseHeuristicConfig,
    Heuristic,
    HeuristicConfig,
    NoHeuristic,
)
from mctskit.policies import (
    DefaultSimulationPolicy,
    ExpandAll,
    ExpansionPolicy,
    SimulationPolicy,
    StaticC,
    UCTPolicy,
)
from mctskit.tree import PlainNode, PlainTree


class PlainMCTS:
    """Monte Carlo tree search assembled from a game, a heuristic and policies.

    ``expansion`` and ``utc_cache`` are classes; a fresh instance of each is
    made for every node. Simulation results are scores from the view of the
    game's perspective player: 1.0 win, 0.5 tie, 0.0 loss, or a heuristic
    value in between.
    """

    def __init__(
        self,
        game: MCTSGame,
        heuristic: Optional[Heuristic] = None,
        mcts_config: Optional[MCTSConfig] = None,
        heuristic_config: Optional[HeuristicConfig] = None,
        *,
        expected_num_nodes: int = 0,
        expansion: Type[ExpansionPolicy] = ExpandAll,
        simulation: Optional[SimulationPolicy] = None,
        uct_policy: Optional[UCTPolicy] = None,
        utc_cache: Type[UTCCache] = NoUTCCache,
        transposition_table: Optional[TranspositionTable] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.game = game
        self.heuristic: Heuristic = heuristic if heuristic is not None else NoHeuristic()
        self.mcts_config: MCTSConfig = mcts_config if mcts_config is not None else BaseConfig()
        if heuristic_config is None:
            heuristic_config = (
                self.heuristic
                if isinstance(self.heuristic, HeuristicConfig)
                else BaseHeuristicConfig()
            )
        self.heuristic_config: HeuristicConfig = heuristic_config
        self.expansion = expansion
        self.simulation: SimulationPolicy = (
            simulation if simulation is not None else DefaultSimulationPolicy()
        )
        self.uct_policy: UCTPolicy = uct_policy if uct_policy is not None else StaticC()
        self.utc_cache = utc_cache
        self.transposition_table: TranspositionTable = (
            transposition_table
            if transposition_table is not None
            else TranspositionHashMap(expected_num_nodes)
        )
        self.tree = PlainTree(expected_num_nodes)
        self.game_cache = game.new_cache()
        self.heuristic_cache = self.heuristic.new_cache()
        self._rng = rng if rng is not None else random.Random()

    def _new_node(self, state: Any) -> PlainNode:
        policy = self.expansion(
            self.game,
            self.heuristic,
            state,
            self.game_cache,
            self.heuristic_cache,
            self.heuristic_config,
        )
        return PlainNode(self.game, state, policy, self.utc_cache(self.uct_policy))

    def _require_root(self) -> int:
        root_id = self.tree.root_id()
        if root_id is None:
            raise RuntimeError("the tree root must be set first")
        return root_id

    def set_root(self, state: Any) -> bool:
        """Move the root to the node holding ``state``.

        Returns True if such a node was found in the transposition table or
        among the children and grandchildren of the root; otherwise the tree
        is reset to a single root for ``state`` and False is returned.
        """
        root_id = self.tree.root_id()
        if root_id is not None:
            cached = self.transposition_table.get(state)
            if cached is not None:
                self.tree.set_root(cached)
                return True
            children = [child_id for child_id, _ in self.tree.get_children(root_id)]
            grandchildren = [
                grandchild_id
                for child_id in children
                for grandchild_id, _ in self.tree.get_children(child_id)
            ]
            for node_id in children + grandchildren:
                if self.tree.get_node(node_id).state == state:
                    self.tree.set_root(node_id)
                    return True
        self.reset_root(state)
        return False

    def reset_root(self, state: Any) -> None:
        """Discard the tree and start afresh with ``state`` as root."""
        root_id = self.tree.init_root(self._new_node(state))
        self.transposition_table.clear()
        self.transposition_table.insert(state, root_id)

    def _back_propagate(self, path: Sequence[int], result: float) -> None:
        for node_id in reversed(path):
            self.tree.get_node(node_id).update_stats(result)

    def iterate(self) -> None:
        """Run one round of selection, expansion, simulation and back propagation."""
        tree = self.tree
        game = self.game
        root_id = self._require_root()
        path: List[int] = [root_id]
        current_id = root_id
        new_children: List[int] = []

        while True:
            # selection
            while tree.get_children(current_id):
                node = tree.get_node(current_id)
                parent_visits = node.visits
                children = tree.get_children(current_id)
                if node.should_expand(
                    parent_visits, len(children), self.mcts_config, self.heuristic_config
                ):
                    break
                best_child: Optional[int] = None
                best_utc = -math.inf
                for child_id, _ in children:
                    utc = tree.get_node(child_id).calc_utc(parent_visits, self.mcts_config)
                    if utc > best_utc:
                        best_utc = utc
                        best_child = child_id
                if best_child is None:
                    raise RuntimeError("could not find a best child")
                path.append(best_child)
                current_id = best_child

            # expansion; the root is always expanded
            node = tree.get_node(current_id)
            if (node.visits == 0 and current_id != root_id) or game.evaluate(
                node.state, self.game_cache
            ) is not None:
                break
            moves = node.expandable_moves(
                len(tree.get_children(current_id)), self.mcts_config, self.heuristic_config
            )
            if not moves:
                raise RuntimeError("expandable moves should never be empty")
            for mv in moves:
                new_state = game.apply_move(node.state, mv, self.game_cache)
                cached_id = self.transposition_table.get(new_state)
                if cached_id is not None:
                    tree.link_child(current_id, mv, cached_id)
                    cached = tree.get_node(cached_id)
                    if cached.visits == 0:
                        new_children.append(cached_id)
                    else:
                        self._back_propagate(path, cached.accumulated_value / cached.visits)
                    continue
                child_id = tree.add_child(current_id, mv, self._new_node(new_state))
                self.transposition_table.insert(new_state, child_id)
                new_children.append(child_id)
            if not new_children:
                continue
            current_id = new_children[0]
            path.append(current_id)
            break

        # simulation
        state = tree.get_node(current_id).state
        depth = 0
        while True:
            score = game.evaluate(state, self.game_cache)
            if score is not None:
                break
            score = self.simulation.should_cutoff(
                game,
                self.heuristic,
                state,
                depth,
                self.game_cache,
                self.heuristic_cache,
                game.perspective_player(),
                self.mcts_config,
                self.heuristic_config,
            )
            if score is not None:
                break
            moves = list(game.available_moves(state))
            if not moves:
                raise RuntimeError("no available moves")
            state = game.apply_move(state, self._rng.choice(moves), self.game_cache)
            depth += 1

        self._back_propagate(path, score)

    def select_move(self) -> Any:
        """Return the move leading to the most visited child of the root.

        Among equally visited children the last one wins.
        """
        root_id = self._require_root()
        best_move: Any = None
        best_visits = -1
        for child_id, mv in self.tree.get_children(root_id):
            visits = self.tree.get_node(child_id).visits
            if visits >= best_visits:
                best_visits = visits
                best_move = mv
        if best_visits < 0:
            raise RuntimeError("the root has no children to choose from")
        return best_move

    def prune_to_root(self) -> None:
        """Drop the nodes stored before the root; needs a table that stores nothing."""
        if not isinstance(self.transposition_table, NoTranspositionTable):
            raise TypeError("pruning requires a NoTranspositionTable")
        self.tree.prune_to_root()