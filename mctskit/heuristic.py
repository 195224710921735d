"""Heuristics for game states and moves, their caches and configurations."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from mctskit.game import GameCache, GamePlayer, MCTSGame


class HeuristicCache:
    """Cache of heuristic scores.

    By default nothing is stored and every lookup misses. Created with
    ``enabled=True`` the cache keeps its scores in memory; states and moves
    must then be hashable.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self.enabled = enabled
        self._state_scores: Dict[Any, float] = {}
        self._move_scores: Dict[Tuple[Any, Any], float] = {}

    def get_intermediate_score(self, state: Any) -> Optional[float]:
        """Return the cached heuristic score of ``state``, if any."""
        if not self.enabled:
            return None
        return self._state_scores.get(state)

    def insert_intermediate_score(self, state: Any, score: float) -> None:
        """Remember the heuristic score of ``state``."""
        if self.enabled:
            self._state_scores[state] = score

    def get_move_score(self, state: Any, mv: Any) -> Optional[float]:
        """Return the cached heuristic score of ``mv`` in ``state``, if any."""
        if not self.enabled:
            return None
        return self._move_scores.get((state, mv))

    def insert_move_score(self, state: Any, mv: Any, score: float) -> None:
        """Remember the heuristic score of ``mv`` in ``state``."""
        if self.enabled:
            self._move_scores[(state, mv)] = score


class NoHeuristicCache(HeuristicCache):
    """Heuristic cache for heuristics where caching is not worthwhile; it stores nothing."""


class HeuristicConfig:
    """Parameters used by heuristic expansion and cut-off policies."""

    progressive_widening_initial_threshold: float = 0.8
    progressive_widening_decay_rate: float = 0.95
    early_cut_off_upper_bound: float = 0.05
    early_cut_off_lower_bound: float = 0.95


class RecursiveHeuristicConfig(HeuristicConfig):
    """Additional parameters of a recursively evaluated heuristic."""

    max_depth: int = 0
    alpha: float = 0.0
    alpha_reduction_factor: float = 0.0
    target_alpha: float = 0.0
    early_exit_threshold: float = 0.0


@dataclass
class BaseHeuristicConfig(HeuristicConfig):
    """Configuration for heuristic progressive widening and heuristic cut-off."""

    progressive_widening_initial_threshold: float = 0.8
    progressive_widening_decay_rate: float = 0.95
    early_cut_off_lower_bound: float = 0.05
    early_cut_off_upper_bound: float = 0.95


@dataclass
class BaseRecursiveConfig(RecursiveHeuristicConfig):
    """Recursive heuristic configuration extending a base heuristic configuration."""

    base_config: BaseHeuristicConfig = field(default_factory=BaseHeuristicConfig)
    max_depth: int = 0
    alpha: float = 0.7
    alpha_reduction_factor: float = 0.9
    target_alpha: float = 0.5
    early_exit_threshold: float = 0.95

    @property
    def progressive_widening_initial_threshold(self) -> float:
        return self.base_config.progressive_widening_initial_threshold

    @property
    def progressive_widening_decay_rate(self) -> float:
        return self.base_config.progressive_widening_decay_rate

    @property
    def early_cut_off_lower_bound(self) -> float:
        return self.base_config.early_cut_off_lower_bound

    @property
    def early_cut_off_upper_bound(self) -> float:
        return self.base_config.early_cut_off_upper_bound


class Heuristic(ABC):
    """Heuristic evaluation of states and moves of a game."""

    def new_cache(self) -> HeuristicCache:
        """Create an empty heuristic cache."""
        return NoHeuristicCache()

    @abstractmethod
    def evaluate_state(
        self,
        game: MCTSGame,
        state: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        perspective_player: Optional[GamePlayer],
        heuristic_config: HeuristicConfig,
    ) -> float:
        """Return a heuristic score of ``state`` between 0.0 and 1.0."""

    @abstractmethod
    def evaluate_move(
        self,
        game: MCTSGame,
        state: Any,
        mv: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        heuristic_config: HeuristicConfig,
    ) -> float:
        """Return a heuristic score of playing ``mv`` in ``state``."""

    def sort_moves(
        self,
        game: MCTSGame,
        state: Any,
        moves: List[Any],
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        heuristic_config: HeuristicConfig,
    ) -> List[Tuple[float, Any]]:
        """Score ``moves`` and return ``(score, move)`` pairs, best first.

        Moves with equal scores come in random order.
        """
        scored = [
            (
                self.evaluate_move(
                    game, state, mv, game_cache, heuristic_cache, heuristic_config
                ),
                mv,
            )
            for mv in moves
        ]
        random.shuffle(scored)
        scored.sort(key=lambda item: item[0], reverse=True)
        return scored


class RecursiveHeuristic(Heuristic):
    """Heuristic that looks ahead at the best responses of the next player."""

    def evaluate_state_recursive(
        self,
        game: MCTSGame,
        state: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        heuristic_config: RecursiveHeuristicConfig,
        depth: int,
        alpha: float,
    ) -> float:
        """Blend the heuristic of ``state`` with the strongest reply, ``depth`` plies deep."""
        base_heuristic = self.evaluate_state(
            game, state, game_cache, heuristic_cache, None, heuristic_config
        )
        if depth == 0 or game.evaluate(state, game_cache) is not None:
            return base_heuristic

        worst_response = float("-inf")
        next_player_alpha = (
            alpha
            - (alpha - heuristic_config.target_alpha)
            * heuristic_config.alpha_reduction_factor
        )
        for next_move in game.available_moves(state):
            next_state = game.apply_move(state, next_move, game_cache)
            response = self.evaluate_state_recursive(
                game,
                next_state,
                game_cache,
                heuristic_cache,
                heuristic_config,
                depth - 1,
                next_player_alpha,
            )
            if response > worst_response:
                worst_response = response
                # the next player already has a near-certain win
                if worst_response >= heuristic_config.early_exit_threshold:
                    break

        return alpha * base_heuristic + (1.0 - alpha) * (1.0 - worst_response)


class NoHeuristic(Heuristic, HeuristicConfig):
    """Heuristic for games without one; it also serves as its own configuration."""

    def evaluate_state(
        self,
        game: MCTSGame,
        state: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        perspective_player: Optional[GamePlayer],
        heuristic_config: HeuristicConfig,
    ) -> float:
        """Return the terminal score of ``state``, or 0.5 if it is not terminal."""
        score = game.evaluate(state, game_cache)
        return 0.5 if score is None else score

    def evaluate_move(
        self,
        game: MCTSGame,
        state: Any,
        mv: Any,
        game_cache: GameCache,
        heuristic_cache: HeuristicCache,
        heuristic_config: HeuristicConfig,
    ) -> float:
        """Return a cached move score if there is one; otherwise every move scores 0.0."""
        cached = heuristic_cache.get_move_score(state, mv)
        return 0.0 if cached is None else cached