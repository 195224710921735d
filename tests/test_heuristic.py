import math

import pytest

from mctskit.game import MCTSGame, TwoPlayer
from mctskit.heuristic import (
    BaseHeuristicConfig,
    BaseRecursiveConfig,
    Heuristic,
    HeuristicCache,
    HeuristicConfig,
    NoHeuristic,
    NoHeuristicCache,
    RecursiveHeuristic,
    RecursiveHeuristicConfig,
)


class TakeAwayGame(MCTSGame):
    """Players remove one or two tokens; whoever takes the last one wins."""

    def __init__(self):
        self.applied = 0

    def available_moves(self, state):
        tokens, _ = state
        return [mv for mv in (1, 2) if mv <= tokens]

    def apply_move(self, state, mv, game_cache):
        self.applied += 1
        tokens, last = state
        return (tokens - mv, last.next())

    def evaluate(self, state, game_cache):
        tokens, last = state
        if tokens:
            return None
        return 1.0 if last == self.perspective_player() else 0.0

    def current_player(self, state):
        return state[1].next()

    def last_player(self, state):
        return state[1]

    def perspective_player(self):
        return TwoPlayer.FIRST


class TokenHeuristic(RecursiveHeuristic):
    def evaluate_state(
        self, game, state, game_cache, heuristic_cache, perspective_player, heuristic_config
    ):
        score = game.evaluate(state, game_cache)
        if score is not None:
            return score
        return state[0] / 10

    def evaluate_move(self, game, state, mv, game_cache, heuristic_cache, heuristic_config):
        return mv / 4


@pytest.fixture
def game():
    return TakeAwayGame()


def test_no_heuristic_scores_non_terminal_as_half(game):
    heuristic = NoHeuristic()
    state = (5, TwoPlayer.SECOND)
    score = heuristic.evaluate_state(
        game, state, game.new_cache(), heuristic.new_cache(), None, heuristic
    )
    assert score == 0.5


def test_no_heuristic_uses_terminal_score(game):
    heuristic = NoHeuristic()
    cache = game.new_cache()
    win = heuristic.evaluate_state(
        game, (0, TwoPlayer.FIRST), cache, heuristic.new_cache(), None, heuristic
    )
    loss = heuristic.evaluate_state(
        game, (0, TwoPlayer.SECOND), cache, heuristic.new_cache(), None, heuristic
    )
    assert win == 1.0
    assert loss == 0.0


def test_no_heuristic_move_score_is_zero(game):
    heuristic = NoHeuristic()
    assert (
        heuristic.evaluate_move(
            game, (5, TwoPlayer.FIRST), 2, game.new_cache(), heuristic.new_cache(), heuristic
        )
        == 0.0
    )


def test_no_heuristic_is_its_own_config():
    heuristic = NoHeuristic()
    assert heuristic.progressive_widening_initial_threshold == 0.8
    assert heuristic.progressive_widening_decay_rate == 0.95


def test_default_heuristic_cache_caches_nothing():
    cache = NoHeuristic().new_cache()
    assert isinstance(cache, NoHeuristicCache)
    cache.insert_intermediate_score("s", 0.7)
    cache.insert_move_score("s", "m", 0.3)
    assert cache.get_intermediate_score("s") is None
    assert cache.get_move_score("s", "m") is None


def test_base_heuristic_cache_caches_nothing():
    cache = HeuristicCache()
    cache.insert_intermediate_score(1, 0.2)
    assert cache.get_intermediate_score(1) is None


def test_sort_moves_descending_and_complete(game):
    heuristic = TokenHeuristic()
    moves = [1, 2, 1, 2, 2]
    result = heuristic.sort_moves(
        game, (9, TwoPlayer.FIRST), moves, game.new_cache(), heuristic.new_cache(),
        BaseRecursiveConfig(),
    )
    scores = [score for score, _ in result]
    assert scores == sorted(scores, reverse=True)
    assert sorted(mv for _, mv in result) == sorted(moves)
    assert result[0] == (0.5, 2)


def test_sort_moves_with_no_heuristic_keeps_all_moves(game):
    heuristic = NoHeuristic()
    moves = ["a", "b", "c", "d"]
    result = heuristic.sort_moves(
        game, (4, TwoPlayer.FIRST), moves, game.new_cache(), heuristic.new_cache(), heuristic
    )
    assert sorted(mv for _, mv in result) == moves
    assert all(score == 0.0 for score, _ in result)


def test_sort_moves_empty(game):
    heuristic = TokenHeuristic()
    assert heuristic.sort_moves(
        game, (0, TwoPlayer.FIRST), [], game.new_cache(), heuristic.new_cache(),
        BaseRecursiveConfig(),
    ) == []


def test_recursive_depth_zero_is_base_heuristic(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig()
    state = (7, TwoPlayer.FIRST)
    cache = game.new_cache()
    hcache = heuristic.new_cache()
    base = heuristic.evaluate_state(game, state, cache, hcache, None, config)
    assert heuristic.evaluate_state_recursive(game, state, cache, hcache, config, 0, 0.7) == base
    assert game.applied == 0


def test_recursive_terminal_state_is_base_heuristic(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig()
    value = heuristic.evaluate_state_recursive(
        game, (0, TwoPlayer.FIRST), game.new_cache(), heuristic.new_cache(), config, 3, 0.7
    )
    assert value == 1.0
    assert game.applied == 0


def test_recursive_alpha_one_keeps_base_heuristic(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig(early_exit_threshold=2.0)
    state = (6, TwoPlayer.FIRST)
    cache = game.new_cache()
    hcache = heuristic.new_cache()
    base = heuristic.evaluate_state(game, state, cache, hcache, None, config)
    value = heuristic.evaluate_state_recursive(game, state, cache, hcache, config, 2, 1.0)
    assert math.isclose(value, base)
    assert game.applied > 0


def test_recursive_alpha_zero_uses_best_reply(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig(early_exit_threshold=2.0)
    state = (6, TwoPlayer.FIRST)
    cache = game.new_cache()
    hcache = heuristic.new_cache()
    replies = [
        heuristic.evaluate_state(
            game, game.apply_move(state, mv, cache), cache, hcache, None, config
        )
        for mv in game.available_moves(state)
    ]
    value = heuristic.evaluate_state_recursive(game, state, cache, hcache, config, 1, 0.0)
    assert math.isclose(value, 1.0 - max(replies))


def test_recursive_early_exit_stops_after_first_strong_reply(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig(early_exit_threshold=0.0)
    heuristic.evaluate_state_recursive(
        game, (6, TwoPlayer.FIRST), game.new_cache(), heuristic.new_cache(), config, 1, 0.5
    )
    assert game.applied == 1


def test_recursive_without_early_exit_visits_all_replies(game):
    heuristic = TokenHeuristic()
    config = BaseRecursiveConfig(early_exit_threshold=2.0)
    heuristic.evaluate_state_recursive(
        game, (6, TwoPlayer.FIRST), game.new_cache(), heuristic.new_cache(), config, 1, 0.5
    )
    assert game.applied == 2


def test_heuristic_is_abstract():
    with pytest.raises(TypeError):
        Heuristic()


def test_heuristic_config_trait_defaults():
    config = HeuristicConfig()
    assert config.progressive_widening_initial_threshold == 0.8
    assert config.progressive_widening_decay_rate == 0.95
    assert config.early_cut_off_upper_bound == 0.05
    assert config.early_cut_off_lower_bound == 0.95


def test_recursive_heuristic_config_trait_defaults():
    config = RecursiveHeuristicConfig()
    assert config.max_depth == 0
    assert config.alpha == 0.0
    assert config.alpha_reduction_factor == 0.0
    assert config.target_alpha == 0.0
    assert config.early_exit_threshold == 0.0


def test_base_heuristic_config_defaults():
    config = BaseHeuristicConfig()
    assert config.progressive_widening_initial_threshold == 0.8
    assert config.progressive_widening_decay_rate == 0.95
    assert config.early_cut_off_lower_bound == 0.05
    assert config.early_cut_off_upper_bound == 0.95
    assert config == BaseHeuristicConfig()


def test_base_recursive_config_defaults():
    config = BaseRecursiveConfig()
    assert config.max_depth == 0
    assert config.alpha == 0.7
    assert config.alpha_reduction_factor == 0.9
    assert config.target_alpha == 0.5
    assert config.early_exit_threshold == 0.95


def test_base_recursive_config_delegates_to_base_config():
    base = BaseHeuristicConfig(
        progressive_widening_initial_threshold=0.6,
        progressive_widening_decay_rate=0.9,
        early_cut_off_lower_bound=0.1,
        early_cut_off_upper_bound=0.8,
    )
    config = BaseRecursiveConfig(base_config=base)
    assert config.progressive_widening_initial_threshold == 0.6
    assert config.progressive_widening_decay_rate == 0.9
    assert config.early_cut_off_lower_bound == 0.1
    assert config.early_cut_off_upper_bound == 0.8