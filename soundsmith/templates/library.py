"""Template library: lookup, filtering and generation over the catalog."""

import random
from collections import Counter
from typing import Dict, Iterable, List, Optional

from ..models import GenerationContext
from ..utils.logging import get_logger
from ..vocabulary.word_source import WordSource
from .catalog import ALL_TEMPLATES, GENRE_MODIFIERS, Template
from .generators import generate as _generate
from .generators import has_generator

logger = get_logger(__name__)


class TemplateLibrary:
    """Fixed catalog of phrase templates.

    Templates are grouped by exact word count for 1-3 words and by inclusive
    ranges for 4 or more. The library is read-only after construction and can
    be shared across sessions.
    """

    def __init__(self, templates: Optional[Iterable[Template]] = None):
        """Initialize the library.

        Args:
            templates: Templates to serve. Defaults to the built-in catalog.

        Raises:
            ValueError: On duplicate ids, bad word-count ranges or templates
                without a registered generator.
        """
        self._templates = tuple(templates if templates is not None else ALL_TEMPLATES)
        self._by_id: Dict[str, Template] = {}

        for template in self._templates:
            if template.id in self._by_id:
                raise ValueError(f"Duplicate template id: {template.id}")
            if template.min_word_count < 1 or template.max_word_count < template.min_word_count:
                raise ValueError(f"Invalid word count range for template {template.id}")
            if not has_generator(template.id):
                raise ValueError(f"No generator registered for template {template.id}")
            self._by_id[template.id] = template

        logger.debug(f"Template library loaded with {len(self._templates)} templates")

    @property
    def templates(self) -> List[Template]:
        return list(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._by_id

    def get(self, template_id: str) -> Template:
        """Look up a template by id.

        Raises:
            KeyError: If the id is unknown.
        """
        return self._by_id[template_id]

    def get_templates(self, word_count: int) -> List[Template]:
        """Every template whose word-count range contains ``word_count``."""
        return [t for t in self._templates if t.covers(word_count)]

    def get_templates_by_category(self, category: str, word_count: Optional[int] = None) -> List[Template]:
        """Templates in a category, optionally narrowed to a word count."""
        pool = self._templates if word_count is None else self.get_templates(word_count)
        return [t for t in pool if t.category == category]

    def get_random_template(
        self,
        word_count: int,
        genre: Optional[str] = None,
        mood: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[Template]:
        """Pick a template by prior weight.

        Genre and mood restrictions are applied leniently: if a restriction
        would leave nothing, it is ignored.

        Returns:
            A template, or None if none covers ``word_count``.
        """
        rng = rng or random.Random()
        pool = self.get_templates(word_count)

        if genre:
            narrowed = [t for t in pool if t.allows_genre(genre)]
            if narrowed:
                pool = narrowed
        if mood:
            narrowed = [t for t in pool if t.allows_mood(mood)]
            if narrowed:
                pool = narrowed

        if not pool:
            return None
        weights = [max(t.weight, 0.0) for t in pool]
        if sum(weights) <= 0:
            return rng.choice(pool)
        return rng.choices(pool, weights=weights, k=1)[0]

    def get_all_categories(self) -> List[str]:
        """Distinct categories in catalog order."""
        seen: List[str] = []
        for template in self._templates:
            if template.category not in seen:
                seen.append(template.category)
        return seen

    def get_stats(self) -> Dict:
        """Totals by word-count key and by category."""
        by_word_count = Counter(t.word_count_key for t in self._templates)
        by_category = Counter(t.category for t in self._templates)
        return {
            "total_templates": len(self._templates),
            "by_word_count": dict(by_word_count),
            "by_category": dict(by_category),
        }

    def get_genre_modifiers(self, genre: Optional[str]) -> Optional[Dict[str, List[str]]]:
        """Genre-flavoured adjectives, nouns, verbs and themes, if defined."""
        if not genre:
            return None
        modifiers = GENRE_MODIFIERS.get(genre.lower())
        if modifiers is None:
            return None
        return {key: list(values) for key, values in modifiers.items()}

    def generate(
        self,
        template: Template,
        word_source: WordSource,
        context: GenerationContext,
        rng: random.Random,
    ) -> str:
        """Run a template's generator. See ``generators.generate``."""
        return _generate(template, word_source, context, rng)
