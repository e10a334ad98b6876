"""Recoverable generation errors.

All of these are caught by the generation driver, which substitutes a curated
fallback set. Callers using the engines directly must handle them.
"""

from typing import Optional, Sequence


class GenerationError(Exception):
    """Base exception for recoverable generation failures."""
    pass


class NoEligibleTemplates(GenerationError):
    """Raised when no template fits the requested shape and restrictions."""

    def __init__(self, word_count: int, genre: Optional[str] = None, mood: Optional[str] = None):
        self.word_count = word_count
        self.genre = genre
        self.mood = mood
        detail = f"word_count={word_count}"
        if genre:
            detail += f", genre={genre}"
        if mood:
            detail += f", mood={mood}"
        super().__init__(f"No eligible templates for {detail}")


class IncompatibleGenres(GenerationError):
    """Raised when a genre pair is absent from the compatibility model."""

    def __init__(self, primary: str, secondary: str):
        self.genres = (primary, secondary)
        super().__init__(f"No compatibility data for {primary} and {secondary}")


class FusionExhausted(GenerationError):
    """Raised when no fusion candidate survives validation."""

    def __init__(self, primary: str, secondary: str, attempts: int):
        self.genres = (primary, secondary)
        self.attempts = attempts
        super().__init__(
            f"Fusion of {primary} and {secondary} produced no valid names after {attempts} attempts"
        )


class MalformedWordSource(GenerationError):
    """Raised when a word source category is not a list of strings."""

    def __init__(self, category: str, reason: str, offending: Optional[Sequence] = None):
        self.category = category
        self.reason = reason
        self.offending = offending
        super().__init__(f"Malformed word source category '{category}': {reason}")
