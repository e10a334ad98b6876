"""Template selection engine.

Scores eligible templates on context match, intrinsic quality, freshness
and prior weight, optionally replacing part of the context weight with mood
alignment, then draws by weighted random sampling.

Usage:
    engine = SelectionEngine()
    session = SelectionSession.create(seed=7)
    criteria = SelectionCriteria(word_count=3, genre="rock")

    template = engine.select(criteria, word_source, session)
    batch = engine.select_many(criteria, word_source, 4, session)
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import Config
from ..errors import NoEligibleTemplates
from ..mood.atmosphere import AtmosphereModel
from ..mood.inference import infer_mood
from ..mood.pattern_mapper import MoodAlignment, PatternMoodMapper
from ..mood.profiles import is_known_mood
from ..templates.catalog import Template
from ..templates.library import TemplateLibrary
from ..utils.logging import get_logger
from ..vocabulary.word_source import WordSource, default_word_source
from .scoring import (
    MODE_MOOD,
    MODE_TRADITIONAL,
    SelectionCriteria,
    TemplateScore,
    combine_mood,
    combine_traditional,
    context_match,
    diversity_bonus,
    freshness_score,
    quality_score,
    score_reasons,
)
from .session import SelectionSession

logger = get_logger(__name__)


class SelectionEngine:
    """Score and draw templates from a library.

    The engine holds only read-only collaborators; all mutable state lives in
    the ``SelectionSession`` passed to each call.
    """

    def __init__(
        self,
        library: Optional[TemplateLibrary] = None,
        config: Optional[Config] = None,
        mood_mapper: Optional[PatternMoodMapper] = None,
    ):
        """Initialize the engine.

        Args:
            library: Template library. Defaults to the built-in catalog.
            config: Configuration; only the selection and mood sections are used.
            mood_mapper: Template mood scorer.
        """
        self.config = config or Config()
        self.library = library or TemplateLibrary()
        self.mood_mapper = mood_mapper or PatternMoodMapper(AtmosphereModel(self.config.mood))
        logger.debug(f"Selection engine ready over {len(self.library)} templates")

    # Eligibility

    def eligible(self, criteria: SelectionCriteria) -> List[Template]:
        """Templates that may be drawn for ``criteria``.

        Word count is applied first, then genre and mood restrictions, then
        the avoid list. The prefer list narrows the pool only when at least
        one preferred template remains.
        """
        pool = [
            t for t in self.library.get_templates(criteria.word_count)
            if t.allows_genre(criteria.genre) and t.allows_mood(criteria.mood)
        ]
        if criteria.avoid_categories:
            pool = [t for t in pool if t.category not in criteria.avoid_categories]
        if criteria.prefer_categories:
            preferred = [t for t in pool if t.category in criteria.prefer_categories]
            if preferred:
                pool = preferred
        return pool

    # Scoring

    def _target_mood(self, criteria: SelectionCriteria) -> Tuple[Optional[str], List[str]]:
        modifiers: List[str] = []
        atmosphere = criteria.atmosphere
        if atmosphere is not None and not atmosphere.is_empty():
            reading = self.mood_mapper.atmosphere_model.analyze(atmosphere)
            modifiers = reading.recommendations.get("mood_modifiers", [])

        if criteria.mood and is_known_mood(criteria.mood):
            return criteria.mood, modifiers
        if criteria.mood_driven and atmosphere is not None and not atmosphere.is_empty():
            inferred = infer_mood(
                genre=criteria.genre,
                keywords=[criteria.theme] if criteria.theme else [],
                time_of_day=atmosphere.time_of_day,
                season=atmosphere.season,
            )
            if inferred:
                logger.debug(f"Scoring against inferred mood '{inferred}'")
            return inferred, modifiers
        return None, modifiers

    def _mood_alignments(
        self,
        criteria: SelectionCriteria,
        pool: Sequence[Template],
    ) -> Optional[Dict[str, MoodAlignment]]:
        mood, modifiers = self._target_mood(criteria)
        if not mood:
            return None

        alignments = {
            t.id: self.mood_mapper.score(t, mood, criteria.atmosphere, criteria.genre, modifiers)
            for t in pool
        }
        mean_confidence = float(np.mean([a.confidence for a in alignments.values()]))
        if mean_confidence < self.config.mood.confidence_threshold:
            logger.debug(
                f"Mood confidence {mean_confidence:.2f} below threshold, using traditional scoring",
                extra_data={"mood": mood, "threshold": self.config.mood.confidence_threshold},
            )
            return None
        return alignments

    def score_pool(
        self,
        criteria: SelectionCriteria,
        word_source: WordSource,
        session: SelectionSession,
        pool: Optional[Sequence[Template]] = None,
    ) -> List[TemplateScore]:
        """Score every eligible template without drawing or recording anything."""
        pool = self.eligible(criteria) if pool is None else list(pool)
        if not pool:
            return []

        selection = self.config.selection
        alignments = self._mood_alignments(criteria, pool)

        scores = []
        for template in pool:
            context = context_match(template, criteria)
            quality = quality_score(template, word_source)
            freshness = freshness_score(template, session.guard, selection)
            prior = template.weight

            if alignments is not None:
                alignment = alignments[template.id]
                total = combine_mood(context, alignment.score, quality, freshness, prior, selection.mood_driven)
                mode = MODE_MOOD
            else:
                alignment = None
                total = combine_traditional(context, quality, freshness, prior, selection.traditional)
                mode = MODE_TRADITIONAL

            entry = TemplateScore(
                template=template,
                score=total,
                context_match=context,
                quality=quality,
                freshness=freshness,
                prior=prior,
                mode=mode,
                mood_alignment=alignment,
            )
            entry.reasons = score_reasons(entry)
            scores.append(entry)
        return scores

    # Drawing

    def _draw_index(self, weights: List[float], session: SelectionSession) -> int:
        if all(w <= 0 for w in weights):
            return session.rng.randrange(len(weights))
        floor = self.config.selection.score_floor
        floored = [max(w, floor) for w in weights]
        return session.rng.choices(range(len(floored)), weights=floored, k=1)[0]

    def select(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        session: Optional[SelectionSession] = None,
    ) -> Optional[Template]:
        """Draw one template.

        Returns:
            The drawn template, or None if no template is eligible.
        """
        scored = self.select_scored(criteria, word_source, session)
        return scored.template if scored else None

    def select_scored(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        session: Optional[SelectionSession] = None,
        record: bool = True,
    ) -> Optional[TemplateScore]:
        """Like ``select`` but returns the drawn template's score.

        Args:
            record: Record the draw in the session. Callers that may discard
                the template pass False and record it themselves once used.
        """
        word_source = word_source or default_word_source()
        session = session or SelectionSession()

        scores = self.score_pool(criteria, word_source, session)
        if not scores:
            logger.debug(
                f"No eligible templates for {criteria.word_count} words",
                extra_data={"genre": criteria.genre, "mood": criteria.mood},
            )
            return None

        chosen = scores[self._draw_index([s.score for s in scores], session)]
        if record:
            session.record(chosen.template, chosen.score, chosen.context_match, chosen.mode)
        logger.debug(f"Selected template {chosen.template.id} ({chosen.score:.2f}, {chosen.mode})")
        return chosen

    def select_many(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        n: int = 1,
        session: Optional[SelectionSession] = None,
    ) -> List[Template]:
        """Draw ``n`` templates, favouring unused categories and subcategories."""
        return [s.template for s in self.select_many_scored(criteria, word_source, n, session)]

    def select_many_scored(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        n: int = 1,
        session: Optional[SelectionSession] = None,
        record: bool = True,
    ) -> List[TemplateScore]:
        """Draw ``n`` scored templates for a diverse batch.

        Each pick leaves the pool. When the pool runs dry before ``n`` picks,
        a new pass starts over the full scored pool.

        With ``record`` False the picks are left for the caller to record.
        """
        word_source = word_source or default_word_source()
        session = session or SelectionSession()

        scores = self.score_pool(criteria, word_source, session)
        if not scores or n <= 0:
            return []

        selection = self.config.selection
        picks: List[TemplateScore] = []
        remaining: List[TemplateScore] = []
        used_categories: set = set()
        used_subcategories: set = set()

        while len(picks) < n:
            if not remaining:
                remaining = list(scores)
                used_categories.clear()
                used_subcategories.clear()

            weights = [
                s.score + diversity_bonus(s.template, used_categories, used_subcategories, selection)
                for s in remaining
            ]
            chosen = remaining.pop(self._draw_index(weights, session))
            picks.append(chosen)
            used_categories.add(chosen.template.category)
            used_subcategories.add(chosen.template.subcategory)
            if record:
                session.record(chosen.template, chosen.score, chosen.context_match, chosen.mode)

        logger.debug(
            f"Selected {len(picks)} templates",
            extra_data={"templates": [p.template.id for p in picks]},
        )
        return picks

    # Reporting

    def rank(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        session: Optional[SelectionSession] = None,
    ) -> List[TemplateScore]:
        """Eligible templates, best score first.

        Raises:
            NoEligibleTemplates: If nothing is eligible.
        """
        scores = self.score_pool(criteria, word_source or default_word_source(), session or SelectionSession())
        if not scores:
            raise NoEligibleTemplates(criteria.word_count, criteria.genre, criteria.mood)
        return sorted(scores, key=lambda s: s.score, reverse=True)

    def get_recommendations(
        self,
        criteria: SelectionCriteria,
        word_source: Optional[WordSource] = None,
        session: Optional[SelectionSession] = None,
    ) -> Dict:
        """Top three templates plus the next five as alternatives, with reasoning."""
        scores = self.score_pool(criteria, word_source or default_word_source(), session or SelectionSession())
        ranked = sorted(scores, key=lambda s: s.score, reverse=True)
        top = ranked[:3]
        return {
            "recommended": [s.to_dict() for s in top],
            "alternatives": [s.to_dict() for s in ranked[3:8]],
            "reasoning": [
                f"{s.template.id}: {', '.join(s.reasons) or 'Eligible'} (score: {s.score:.2f})"
                for s in top
            ],
            "mode": ranked[0].mode if ranked else MODE_TRADITIONAL,
        }

    def get_stats(self, session: SelectionSession) -> Dict:
        """Draw statistics for a session."""
        modes: Dict[str, int] = {}
        for record in session.history:
            modes[record.mode] = modes.get(record.mode, 0) + 1
        return {
            "total_templates": len(self.library),
            "selections": session.selections,
            "distinct_templates": session.distinct_templates(),
            "category_distribution": session.category_distribution(),
            "average_context_match": round(session.average_context_match(), 4),
            "modes": modes,
            "guard": session.guard.get_stats(),
        }
