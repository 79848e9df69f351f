"""Game rules, player state, console helpers and broker messaging for the Peril war game."""

__version__ = "0.1.0"

__all__ = ["__version__"]