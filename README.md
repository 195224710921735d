# mctskit

A small, configurable Monte Carlo tree search (MCTS) toolkit. You describe your
game once by subclassing `MCTSGame`. Then you build a search from parts you can
swap:

- the UCT formula
- the expansion policy
- the simulation cut-off
- an optional heuristic
- a UCT score cache
- a transposition table

It uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `mctskit.game`

- `MCTSGame` is the abstract game definition you implement: `available_moves`,
  `apply_move`, `evaluate`, `current_player`, `last_player` and
  `perspective_player`. Its `new_cache` returns a `NoGameCache` unless you
  override it.
- `GamePlayer` is the protocol for a player: an object that is hashable and has
  a `next()` method.
- `TwoPlayer` is an enum with the members `FIRST` and `SECOND`. Its `next()` and
  `next_player()` both return the other player.
- `GameCache` caches applied states and terminal values. It only stores entries
  when it is created with `enabled=True`, and then states and moves must be
  hashable. `NoGameCache` never stores anything.

### `mctskit.heuristic`

- `Heuristic` is the abstract class with `evaluate_state` and `evaluate_move`.
  - `sort_moves` scores moves and returns `(score, move)` pairs, best first.
    Moves with equal scores come out in random order.
- `RecursiveHeuristic` adds `evaluate_state_recursive`. It blends the heuristic
  of a state with the strongest reply of the next player, up to a given depth.
- `NoHeuristic` is for games without a heuristic. It also serves as its own
  configuration.
  - States: it returns the terminal score, or 0.5 for a state that is not
    terminal.
  - Moves: it returns a cached move score if there is one, and 0.0 otherwise.
- `HeuristicCache` and `NoHeuristicCache` cache scores. `HeuristicCache` only
  stores when it is created with `enabled=True`.
- `HeuristicConfig` and `RecursiveHeuristicConfig` are the configuration
  classes, with the dataclasses `BaseHeuristicConfig` and `BaseRecursiveConfig`.
  - `BaseHeuristicConfig` defaults: initial threshold 0.8, decay 0.95, cut-off
    bounds 0.05 and 0.95.
  - `BaseRecursiveConfig` defaults: alpha 0.7, reduction 0.9, target alpha 0.5,
    early exit 0.95, max depth 0.

### `mctskit.config`

- `MCTSConfig` holds the exploration constant (1.4), the progressive widening
  constant (2.0) and exponent (0.5), and the early cut-off depth (20).
- `BaseConfig` is a dataclass with the same fields. It adds an
  `exploration_boost` dictionary with a multiplier per player, read through
  `exploration_boost_for(player)`, which defaults to 1.0.

### `mctskit.caching`

- `TranspositionHashMap` maps states to node ids with a dictionary. Inserting a
  state twice raises `ValueError`.
- `NoTranspositionTable` stores nothing.
- `NoUTCCache` computes the UCT terms every time they are read.
- `CachedUTC` stores the UCT terms. It recomputes the exploration term only
  when the parent's visit count has changed.

### `mctskit.policies`

- UCT policies:
  - `StaticC`: `C * sqrt(ln(parent_visits) / visits)`.
  - `StaticCWithExplorationBoost`: scales that bonus by the last player's boost.
  - `DynamicC`: divides `C` by `1 + sqrt(visits)`.
  - `DynamicCWithExplorationBoost`: combines the two.
- Expansion policies:
  - `ExpandAll`: every move at once, shuffled.
  - `ProgressiveWidening`: at most `floor(C * visits ** alpha)` children.
  - `HeuristicProgressiveWidening`: like `ProgressiveWidening`, but takes the
    best-scored moves that reach a threshold which decays with visits. It
    always takes at least one move.
- Simulation policies:
  - `DefaultSimulationPolicy`: never stops early.
  - `EarlyCutoff`: stops at the configured depth.
  - `HeuristicCutoff`: stops at that depth, or when the heuristic reaches one
    of the cut-off bounds.

### `mctskit.tree`

- `PlainNode` holds a state, visit statistics, a UCT cache and an expansion
  policy.
- `PlainTree` is a list-backed tree.
  - Node ids are list indices. Each node has `(child_id, move)` edges.
  - An unknown id raises `IndexError`.
  - `prune_to_root()` drops the nodes stored before the root and renumbers the
    rest.

### `mctskit.walk`

- `BfsWalker` and `DfsWalker` walk node ids breadth-first or depth-first.
  - You pass the tree to each `step(tree)`, or use `iterate(tree)` for a
    generator.
  - Nodes given in `skip` are never entered.
  - Nodes linked from several parents are visited once.

### `mctskit.algo`

`PlainMCTS` is the search driver. Its constructor takes:

- the game
- an optional heuristic (default `NoHeuristic`)
- `mcts_config` (default `BaseConfig`)
- `heuristic_config`
- the keyword options `expected_num_nodes`, `expansion`, `simulation`,
  `uct_policy`, `utc_cache`, `transposition_table` and `rng`

`expansion` and `utc_cache` are classes, and the search makes one instance of
each per node. Their defaults are `ExpandAll` and `NoUTCCache`. The default
transposition table is a `TranspositionHashMap`, so states must be hashable
unless you pass a `NoTranspositionTable`.

## Usage

```python
import random

from mctskit.algo import PlainMCTS
from mctskit.game import MCTSGame, TwoPlayer


class Nim(MCTSGame):
    """Take 1 to 3 stones; whoever takes the last stone wins."""

    def available_moves(self, state):
        stones, _ = state
        return [n for n in (1, 2, 3) if n <= stones]

    def apply_move(self, state, mv, game_cache):
        stones, to_move = state
        return (stones - mv, to_move.next())

    def evaluate(self, state, game_cache):
        stones, _ = state
        if stones:
            return None
        return 1.0 if self.last_player(state) is TwoPlayer.FIRST else 0.0

    def current_player(self, state):
        return state[1]

    def last_player(self, state):
        return state[1].next()

    def perspective_player(self):
        return TwoPlayer.FIRST


search = PlainMCTS(Nim(), rng=random.Random(7))
search.set_root((10, TwoPlayer.FIRST))
for _ in range(2000):
    search.iterate()
print(search.select_move())
```

### Setting the root

`set_root(state)` looks for the state in three places: the transposition table,
the children of the root and the grandchildren of the root. If it finds the
state, it moves the root there and returns `True`. Otherwise it resets the tree
with `state` as the root and returns `False`. `reset_root(state)` always starts
afresh.

### Scores

`evaluate` returns `None` for a state that is not terminal. For a terminal state
it returns a score from the perspective player's view: 1.0 for a win, 0.5 for a
tie and 0.0 for a loss.

### Choosing a move

`select_move()` returns the move of the most visited child of the root. When
several children have the same number of visits, the last one wins. Calling
`iterate()` or `select_move()` before a root is set raises `RuntimeError`.

### Pruning

`PlainMCTS.prune_to_root()` drops the nodes stored before the current root. It
raises `TypeError` unless the search uses a `NoTranspositionTable`.

## What it does not do

- It has no command-line tool and ships no ready-made games.
- It runs no time-budgeted search loop. You call `iterate()` yourself.
- It searches on a single thread.
- It does not save trees or caches to disk.