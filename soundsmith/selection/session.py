"""Selection session: the mutable state one series of draws works against."""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..config import RepetitionConfig
from ..templates.catalog import Template
from ..vocabulary.repetition_guard import RepetitionGuard


@dataclass
class SelectionRecord:
    """One template drawn during a session."""
    template_id: str
    category: str
    score: float
    context_match: float
    mode: str


@dataclass
class SelectionSession:
    """Random source, repetition guard and draw history for a series of selections.

    The guard may be shared with other sessions; the history belongs to this
    session only. Tests pass a seeded ``random.Random`` for reproducible draws.
    """
    rng: random.Random = field(default_factory=random.Random)
    guard: RepetitionGuard = field(default_factory=RepetitionGuard)
    history: List[SelectionRecord] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        seed: Optional[int] = None,
        guard: Optional[RepetitionGuard] = None,
        repetition_config: Optional[RepetitionConfig] = None,
    ) -> "SelectionSession":
        """Build a session with a seeded random source and a fresh or shared guard."""
        return cls(
            rng=random.Random(seed),
            guard=guard or RepetitionGuard(repetition_config),
        )

    def record(self, template: Template, score: float = 0.0, context_match: float = 0.0,
               mode: str = "traditional") -> None:
        """Record a drawn template here and in the guard."""
        self.guard.record_template(template)
        self.history.append(SelectionRecord(
            template_id=template.id,
            category=template.category,
            score=score,
            context_match=context_match,
            mode=mode,
        ))

    @property
    def selections(self) -> int:
        return len(self.history)

    def distinct_templates(self) -> int:
        return len({r.template_id for r in self.history})

    def category_distribution(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in self.history:
            counts[record.category] = counts.get(record.category, 0) + 1
        return counts

    def average_context_match(self) -> float:
        if not self.history:
            return 0.0
        return float(np.mean([r.context_match for r in self.history]))
