"""
Soul Reaper package root.

An incremental game engine: souls are reaped by clicking and by passive
production, spent on upgrades with exponentially growing prices, and
milestones unlock achievements. Rendering (Arcade) stays outside the engine
modules so the rules can be driven headless.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
