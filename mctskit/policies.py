"""Selection (UCT), expansion and simulation policies."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from mctskit.config import MCTSConfig
from mctskit.game import GameCache, GamePlayer, MCTSGame
from mctskit.heuristic import Heuristic, HeuristicCache, HeuristicConfig


class UCTPolicy:
    """Scores a child node for selection; the default is plain UCT."""

    def exploitation_score(
        self,
        accumulated_value: float,
        visits: int,
        last_player: GamePlayer,
        perspective_player: GamePlayer,
    ) -> float:
        """Mean value of the node as seen by the perspective player (two players)."""
        raw = accumulated_value / visits
        return raw if last_player == perspective_player else 1.0 - raw

    def exploration_score(
        self,
        visits: int,
        parent_visits: int,
        mcts_config: MCTSConfig,
        last_player: GamePlayer,
    ) -> float:
        """Exploration bonus ``C * sqrt(ln(parent_visits) / visits)``."""
        return mcts_config.exploration_constant * _exploration_root(visits, parent_visits)


def _exploration_root(visits: int, parent_visits: int) -> float:
    return math.sqrt(math.log(parent_visits) / visits)


class StaticC(UCTPolicy):
    """UCT with a constant exploration factor."""


class StaticCWithExplorationBoost(UCTPolicy):
    """UCT whose exploration factor is scaled by a per-player boost."""

    def exploration_score(self, visits, parent_visits, mcts_config, last_player):
        factor = mcts_config.exploration_boost_for(last_player)
        return (
            mcts_config.exploration_constant
            * factor
            * _exploration_root(visits, parent_visits)
        )


class DynamicC(UCTPolicy):
    """UCT whose exploration factor shrinks as the node gets visited."""

    def exploration_score(self, visits, parent_visits, mcts_config, last_player):
        dynamic_c = mcts_config.exploration_constant / (1.0 + math.sqrt(visits))
        return dynamic_c * _exploration_root(visits, parent_visits)


class DynamicCWithExplorationBoost(UCTPolicy):
    """Shrinking exploration factor, scaled by a per-player boost."""

    def exploration_score(self, visits, parent_visits, mcts_config, last_player):
        factor = mcts_config.exploration_boost_for(last_player)
        dynamic_c = mcts_config.exploration_constant * factor / (1.0 + math.sqrt(visits))
        return dynamic_c * _exploration_root(visits, parent_visits)


class ExpansionPolicy(ABC):
    """Decides which moves of a node become children, and when."""

    def __init__(
        self,
        game: MCTSGame,
        heuristic: Heuristic,
        state: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        heuristic_config: HeuristicConfig,
    ) -> None:
        self.game = game
        self.heuristic = heuristic

    def should_expand(
        self,
        visits: int,
        num_parent_children: int,
        mcts_config: MCTSConfig,
        heuristic_config: HeuristicConfig,
    ) -> bool:
        """Whether a node that already has children should get more."""
        return False

    @abstractmethod
    def expandable_moves(
        self,
        visits: int,
        num_parent_children: int,
        state: Any,
        mcts_config: MCTSConfig,
        heuristic_config: HeuristicConfig,
    ) -> List[Any]:
        """Return the moves to add as children now."""


def _is_terminal(game: MCTSGame, state: Any, game_cache: GameCache) -> bool:
    cached = game_cache.get_terminal_value(state)
    if cached is not None:
        return cached[0] is not None
    return game.evaluate(state, game_cache) is not None


def _allowed_children(visits: int, mcts_config: MCTSConfig) -> int:
    if visits == 0:
        return 1
    return math.floor(
        mcts_config.progressive_widening_constant
        * visits ** mcts_config.progressive_widening_exponent
    )


class ExpandAll(ExpansionPolicy):
    """Expands every available move at once, in random order."""

    def expandable_moves(self, visits, num_parent_children, state, mcts_config, heuristic_config):
        moves = list(self.game.available_moves(state))
        random.shuffle(moves)
        return moves


class ProgressiveWidening(ExpansionPolicy):
    """Allows ``floor(C * visits ** alpha)`` children, taken in random order."""

    def __init__(self, game, heuristic, state, game_cache, heuristic_cache, heuristic_config):
        super().__init__(game, heuristic, state, game_cache, heuristic_cache, heuristic_config)
        self.unexpanded_moves: List[Any] = []
        if not _is_terminal(game, state, game_cache):
            self.unexpanded_moves = list(game.available_moves(state))
            random.shuffle(self.unexpanded_moves)

    def should_expand(self, visits, num_parent_children, mcts_config, heuristic_config):
        return (
            num_parent_children < _allowed_children(visits, mcts_config)
            and bool(self.unexpanded_moves)
        )

    def expandable_moves(self, visits, num_parent_children, state, mcts_config, heuristic_config):
        allowed = _allowed_children(visits, mcts_config)
        if allowed <= num_parent_children or not self.unexpanded_moves:
            return []
        count = min(len(self.unexpanded_moves), allowed - num_parent_children)
        taken = self.unexpanded_moves[:count]
        del self.unexpanded_moves[:count]
        return taken


class HeuristicProgressiveWidening(ExpansionPolicy):
    """Progressive widening that prefers moves the heuristic scores highly.

    Only moves scoring at least a threshold that decays with visits are
    expanded, except that at least one move is always taken.
    """

    def __init__(self, game, heuristic, state, game_cache, heuristic_cache, heuristic_config):
        super().__init__(game, heuristic, state, game_cache, heuristic_cache, heuristic_config)
        self.unexpanded_moves: List[Tuple[float, Any]] = []
        if not _is_terminal(game, state, game_cache):
            self.unexpanded_moves = heuristic.sort_moves(
                game,
                state,
                list(game.available_moves(state)),
                game_cache,
                heuristic_cache,
                heuristic_config,
            )

    @staticmethod
    def _threshold(visits: int, heuristic_config: HeuristicConfig) -> float:
        return (
            heuristic_config.progressive_widening_initial_threshold
            * heuristic_config.progressive_widening_decay_rate ** visits
        )

    def should_expand(self, visits, num_parent_children, mcts_config, heuristic_config):
        threshold = self._threshold(visits, heuristic_config)
        return num_parent_children < _allowed_children(visits, mcts_config) and any(
            score >= threshold for score, _ in self.unexpanded_moves
        )

    def expandable_moves(self, visits, num_parent_children, state, mcts_config, heuristic_config):
        allowed = _allowed_children(visits, mcts_config)
        if num_parent_children >= allowed or not self.unexpanded_moves:
            return []
        num_expandable = min(len(self.unexpanded_moves), allowed - num_parent_children)
        threshold = self._threshold(visits, heuristic_config)
        cutoff = next(
            (i for i, (score, _) in enumerate(self.unexpanded_moves) if score < threshold),
            len(self.unexpanded_moves),
        )
        # a leaf whose moves all score below the threshold still gets one child
        selected = max(min(cutoff, num_expandable), 1)
        taken = [mv for _, mv in self.unexpanded_moves[:selected]]
        del self.unexpanded_moves[:selected]
        return taken


class SimulationPolicy:
    """Decides whether a random playout stops early; never by default."""

    def should_cutoff(
        self,
        game: MCTSGame,
        heuristic: Heuristic,
        state: Any,
        depth: int,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        perspective_player: Optional[GamePlayer],
        mcts_config: MCTSConfig,
        heuristic_config: HeuristicConfig,
    ) -> Optional[float]:
        """Return the heuristic value to stop with, or ``None`` to continue."""
        return None


class DefaultSimulationPolicy(SimulationPolicy):
    """Plays every simulation to the end of the game."""


class EarlyCutoff(SimulationPolicy):
    """Stops a playout once it reaches the configured depth."""

    def should_cutoff(
        self, game, heuristic, state, depth, game_cache, heuristic_cache,
        perspective_player, mcts_config, heuristic_config,
    ):
        value = heuristic.evaluate_state(
            game, state, game_cache, heuristic_cache, perspective_player, heuristic_config
        )
        return value if depth >= mcts_config.early_cut_off_depth else None


class HeuristicCutoff(SimulationPolicy):
    """Stops at the configured depth or when the heuristic is decisive."""

    def should_cutoff(
        self, game, heuristic, state, depth, game_cache, heuristic_cache,
        perspective_player, mcts_config, heuristic_config,
    ):
        value = heuristic.evaluate_state(
            game, state, game_cache, heuristic_cache, perspective_player, heuristic_config
        )
        if (
            depth >= mcts_config.early_cut_off_depth
            or value <= heuristic_config.early_cut_off_lower_bound
            or value >= heuristic_config.early_cut_off_upper_bound
        ):
            return value
        return None