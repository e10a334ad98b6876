"""Template catalog, generators and library."""

from .catalog import (
    Template,
    ALL_TEMPLATES,
    SINGLE_WORD_TEMPLATES,
    TWO_WORD_TEMPLATES,
    THREE_WORD_TEMPLATES,
    FOUR_PLUS_WORD_TEMPLATES,
    GENRE_MODIFIERS,
)
from .generators import generate, fit_to_length, third_person, Vocabulary
from .library import TemplateLibrary

__all__ = [
    "Template",
    "ALL_TEMPLATES",
    "SINGLE_WORD_TEMPLATES",
    "TWO_WORD_TEMPLATES",
    "THREE_WORD_TEMPLATES",
    "FOUR_PLUS_WORD_TEMPLATES",
    "GENRE_MODIFIERS",
    "generate",
    "fit_to_length",
    "third_person",
    "Vocabulary",
    "TemplateLibrary",
]
