"""longdiv - Long-division engine for the dinosaur division game.

Main namespace package containing the engine submodules:
- longdiv.division: difficulty tiers, problem generation, solving, step validation
- longdiv.rewards: dinosaur roster, reward milestones, artwork prefetch decisions
- longdiv.game: game loop that chains the above for one player
- longdiv.errors: exception hierarchy shared by every submodule
"""

__version__ = "0.1.0"

__all__ = []
