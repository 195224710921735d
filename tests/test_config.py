from mctskit.config import BaseConfig, MCTSConfig
from mctskit.game import TwoPlayer


def test_mcts_config_defaults():
    config = MCTSConfig()
    assert config.exploration_constant == 1.4
    assert config.progressive_widening_constant == 2.0
    assert config.progressive_widening_exponent == 0.5
    assert config.early_cut_off_depth == 20


def test_mcts_config_boost_is_neutral():
    config = MCTSConfig()
    assert config.exploration_boost_for(TwoPlayer.FIRST) == 1.0
    assert config.exploration_boost_for(TwoPlayer.SECOND) == 1.0


def test_base_config_defaults():
    config = BaseConfig()
    assert config.exploration_constant == 1.40
    assert config.exploration_boost == {}
    assert config.progressive_widening_constant == 2.0
    assert config.progressive_widening_exponent == 0.5
    assert config.early_cut_off_depth == 20


def test_base_config_boost_lookup():
    config = BaseConfig(exploration_boost={TwoPlayer.SECOND: 1.5})
    assert config.exploration_boost_for(TwoPlayer.SECOND) == 1.5
    assert config.exploration_boost_for(TwoPlayer.FIRST) == 1.0


def test_base_config_instances_do_not_share_boosts():
    first = BaseConfig()
    second = BaseConfig()
    first.exploration_boost[TwoPlayer.FIRST] = 3.0
    assert second.exploration_boost_for(TwoPlayer.FIRST) == 1.0
    assert first.exploration_boost_for(TwoPlayer.FIRST) == 3.0


def test_base_config_equality():
    assert BaseConfig() == BaseConfig()
    assert BaseConfig(early_cut_off_depth=5) != BaseConfig()
    assert BaseConfig(early_cut_off_depth=5).early_cut_off_depth == 5


def test_base_config_custom_widening():
    config = BaseConfig(progressive_widening_constant=4.0, progressive_widening_exponent=1 / 3)
    assert config.progressive_widening_constant == 4.0
    assert config.progressive_widening_exponent == 1 / 3