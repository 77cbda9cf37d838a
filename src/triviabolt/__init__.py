"""TriviaBolt - live camera trivia question scanner."""

__version__ = "1.0.4"
