import pytest

from mctskit.caching import (
    CachedUTC,
    NoTranspositionTable,
    NoUTCCache,
    TranspositionHashMap,
)
from mctskit.config import BaseConfig
from mctskit.game import TwoPlayer
from mctskit.policies import DynamicC, StaticC


def test_hash_map_insert_and_get():
    table = TranspositionHashMap(16)
    table.insert("a", 3)
    table.insert("b", 7)
    assert table.get("a") == 3
    assert table.get("b") == 7
    assert table.get("c") is None


def test_hash_map_rejects_duplicate_state():
    table = TranspositionHashMap()
    table.insert("a", 1)
    with pytest.raises(ValueError):
        table.insert("a", 2)
    assert table.get("a") == 1


def test_hash_map_clear():
    table = TranspositionHashMap()
    table.insert((1, 2), 0)
    table.clear()
    assert table.get((1, 2)) is None
    table.insert((1, 2), 5)
    assert table.get((1, 2)) == 5


def test_no_transposition_table_never_finds():
    table = NoTranspositionTable(10)
    table.insert("a", 1)
    assert table.get("a") is None


def test_no_utc_cache_delegates_to_policy():
    config = BaseConfig()
    cache = NoUTCCache(DynamicC())
    policy = DynamicC()
    first = TwoPlayer.FIRST
    assert cache.get_exploitation(4, 3.0, first, first) == policy.exploitation_score(
        3.0, 4, first, first
    )
    assert cache.get_exploration(3, 20, config, first) == policy.exploration_score(
        3, 20, config, first
    )


def test_cached_utc_starts_at_zero():
    cache = CachedUTC()
    first = TwoPlayer.FIRST
    assert cache.get_exploitation(1, 1.0, first, first) == 0.0
    assert cache.get_exploration(1, 5, BaseConfig(), first) == 0.0


def test_cached_utc_exploitation_is_stored():
    cache = CachedUTC(StaticC())
    first, second = TwoPlayer.FIRST, TwoPlayer.SECOND
    cache.update_exploitation(4, 1.0, first, second)
    expected = StaticC().exploitation_score(1.0, 4, first, second)
    # arguments to get are ignored; the stored value is returned
    assert cache.get_exploitation(99, 50.0, first, first) == expected


def test_cached_utc_exploration_recomputed_only_on_new_parent_visits():
    config = BaseConfig()
    policy = StaticC()
    first = TwoPlayer.FIRST
    cache = CachedUTC(policy)
    cache.update_exploration(2, 10, config, first)
    at_two = policy.exploration_score(2, 10, config, first)
    assert cache.get_exploration(2, 10, config, first) == at_two
    cache.update_exploration(5, 10, config, first)
    assert cache.get_exploration(5, 10, config, first) == at_two
    cache.update_exploration(5, 20, config, first)
    assert cache.get_exploration(5, 20, config, first) == policy.exploration_score(
        5, 20, config, first
    )