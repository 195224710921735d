"""Monte Carlo tree search with pluggable games, heuristics, policies, trees and tree walks."""

__version__ = "0.8.3"

__all__ = ["algo", "caching", "config", "game", "heuristic", "policies", "tree", "walk"]