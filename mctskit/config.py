"""Search configuration for selection, widening and simulation cut-off."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable


class MCTSConfig:
    """Parameters used by the selection, expansion and simulation policies."""

    exploration_constant: float = 1.4
    progressive_widening_constant: float = 2.0
    progressive_widening_exponent: float = 0.5
    early_cut_off_depth: int = 20

    def exploration_boost_for(self, player: Hashable) -> float:
        """Return the exploration multiplier for ``player``."""
        return 1.0


@dataclass
class BaseConfig(MCTSConfig):
    """Configuration with per-player exploration boosts.

    Progressive widening presets: default C = 2, alpha = 1/2; fast C = 4,
    alpha = 1/3; slow C = 1, alpha = 2/3.
    """

    exploration_constant: float = 1.40
    exploration_boost: Dict[Hashable, float] = field(default_factory=dict)
    progressive_widening_constant: float = 2.0
    progressive_widening_exponent: float = 0.5
    early_cut_off_depth: int = 20

    def exploration_boost_for(self, player: Hashable) -> float:
        """Return the configured boost for ``player``, or 1.0 if none is set."""
        return self.exploration_boost.get(player, 1.0)