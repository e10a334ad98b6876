"""Repetition guard for generated names.

Session-scoped tracker that:
- Rejects exact duplicates of names accepted within its name memory
- Rejects names whose significant words recur across recent names
- Tracks recently used templates and category usage for selection freshness
- Halves usage counters after a period without decay

Usage:
    guard = RepetitionGuard()

    if not guard.should_reject(name):
        guard.accept(name)

    guard.record_template(template)
"""

import threading
import time
from collections import Counter, deque
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..config import RepetitionConfig
from ..utils.logging import get_logger
from ..utils.text import significant_words, stem

logger = get_logger(__name__)


@dataclass
class GuardStats:
    """Statistics from repetition checks."""
    names_checked: int = 0
    names_accepted: int = 0
    rejected_duplicate: int = 0
    rejected_overlap: int = 0
    templates_recorded: int = 0
    decay_passes: int = 0


class RepetitionGuard:
    """Track recently emitted names, words and templates.

    All public methods take an internal lock, so one guard may be shared by
    threads. Recent-word, recent-template and accepted-name memories are
    bounded and evict the oldest entry first. Usage counters are halved
    (floor) whenever more than
    ``decay_interval_seconds`` have passed since the previous decay pass;
    counters that reach zero are removed.
    """

    def __init__(
        self,
        config: Optional[RepetitionConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the guard.

        Args:
            config: Capacities and thresholds. Defaults to RepetitionConfig().
            clock: Monotonic time source in seconds; injectable for tests.
        """
        self.config = config or RepetitionConfig()
        self._clock = clock
        self._lock = threading.RLock()

        self.recent_words: deque = deque(maxlen=self.config.word_capacity)
        self.recent_names: deque = deque(maxlen=self.config.name_window)
        self.recent_templates: deque = deque(maxlen=self.config.template_capacity)
        self.category_counts: Counter = Counter()
        self.subcategory_counts: Counter = Counter()
        self.accepted_names: set = set()
        self._accepted_order: deque = deque()
        self.stats = GuardStats()
        self._last_decay = self._clock()

    def _stems(self, name: str) -> List[str]:
        return [stem(w) for w in significant_words(name, self.config.min_significant_length)]

    def should_reject(self, name: str) -> bool:
        """Check whether a candidate repeats recent output.

        Args:
            name: Candidate name.

        Returns:
            True if the name is an exact (case-insensitive) duplicate, or if one
            of its significant words appears in more than ``overlap_fraction``
            of the recent names.
        """
        with self._lock:
            self._maybe_decay_locked()
            self.stats.names_checked += 1

            key = name.strip().lower()
            if key in self.accepted_names:
                self.stats.rejected_duplicate += 1
                logger.debug(f"Rejected '{name}': exact duplicate")
                return True

            if not self.recent_names:
                return False

            window = len(self.recent_names)
            for word_stem in set(self._stems(name)):
                hits = sum(1 for stems in self.recent_names if word_stem in stems)
                if hits / window > self.config.overlap_fraction:
                    self.stats.rejected_overlap += 1
                    logger.debug(
                        f"Rejected '{name}': '{word_stem}' in {hits}/{window} recent names",
                        extra_data={"stem": word_stem, "hits": hits},
                    )
                    return True
            return False

    def is_duplicate(self, name: str) -> bool:
        """True if ``name`` was accepted before, ignoring case and surrounding spaces."""
        with self._lock:
            return name.strip().lower() in self.accepted_names

    def accept(self, name: str, template=None) -> None:
        """Record an accepted name and, optionally, the template that built it.

        Args:
            name: Accepted name.
            template: Template used; its usage counters are updated when given.
        """
        with self._lock:
            self._maybe_decay_locked()
            self._remember_locked(name.strip().lower())
            stems = frozenset(self._stems(name))
            self.recent_names.append(stems)
            for word in significant_words(name, self.config.min_significant_length):
                self.recent_words.append(word)
            self.stats.names_accepted += 1
            if template is not None:
                self._record_template_locked(template.id, template.category, template.subcategory)

    def _remember_locked(self, key: str) -> None:
        if key in self.accepted_names:
            return
        self.accepted_names.add(key)
        self._accepted_order.append(key)
        while len(self._accepted_order) > self.config.name_memory:
            self.accepted_names.discard(self._accepted_order.popleft())

    def record_template(self, template) -> None:
        """Record a template draw: recent queue plus category counters."""
        with self._lock:
            self._maybe_decay_locked()
            self._record_template_locked(template.id, template.category, template.subcategory)

    def _record_template_locked(self, template_id: str, category: str, subcategory: str) -> None:
        self.recent_templates.append(template_id)
        self.category_counts[category] += 1
        self.subcategory_counts[subcategory] += 1
        self.stats.templates_recorded += 1

    def is_recent_template(self, template_id: str) -> bool:
        with self._lock:
            return template_id in self.recent_templates

    def category_count(self, category: str) -> int:
        with self._lock:
            return self.category_counts.get(category, 0)

    def subcategory_count(self, subcategory: str) -> int:
        with self._lock:
            return self.subcategory_counts.get(subcategory, 0)

    def maybe_decay(self) -> bool:
        """Run a decay pass if the interval has elapsed.

        Returns:
            True if counters were decayed.
        """
        with self._lock:
            return self._maybe_decay_locked()

    def _maybe_decay_locked(self) -> bool:
        now = self._clock()
        if now - self._last_decay <= self.config.decay_interval_seconds:
            return False
        self._decay_locked()
        self._last_decay = now
        return True

    def decay(self) -> None:
        """Halve all usage counters now, dropping any that reach zero."""
        with self._lock:
            self._decay_locked()
            self._last_decay = self._clock()

    def _decay_locked(self) -> None:
        for counter in (self.category_counts, self.subcategory_counts):
            for key in list(counter):
                halved = counter[key] // 2
                if halved <= 0:
                    del counter[key]
                else:
                    counter[key] = halved
        # Keep the newer half of the template queue
        keep = len(self.recent_templates) // 2
        while len(self.recent_templates) > keep:
            self.recent_templates.popleft()
        self.stats.decay_passes += 1
        logger.debug(
            "Decayed usage counters",
            extra_data={"categories": dict(self.category_counts)},
        )

    def variety_score(self, name: str) -> float:
        """Share of a name's significant words not in the recent-word queue, 0-100."""
        words = significant_words(name, self.config.min_significant_length)
        if not words:
            return 100.0
        with self._lock:
            recent = {stem(w) for w in self.recent_words}
        fresh = sum(1 for w in words if stem(w) not in recent)
        return 100.0 * fresh / len(words)

    def reset(self) -> None:
        """Clear all tracked state."""
        with self._lock:
            self.recent_words.clear()
            self.recent_names.clear()
            self.recent_templates.clear()
            self.category_counts.clear()
            self.subcategory_counts.clear()
            self.accepted_names.clear()
            self._accepted_order.clear()
            self.stats = GuardStats()
            self._last_decay = self._clock()

    def get_stats(self) -> Dict:
        """Snapshot of guard state for reporting."""
        with self._lock:
            return {
                "names_checked": self.stats.names_checked,
                "names_accepted": self.stats.names_accepted,
                "rejected_duplicate": self.stats.rejected_duplicate,
                "rejected_overlap": self.stats.rejected_overlap,
                "templates_recorded": self.stats.templates_recorded,
                "decay_passes": self.stats.decay_passes,
                "recent_words": len(self.recent_words),
                "recent_templates": len(self.recent_templates),
                "category_counts": dict(self.category_counts),
                "subcategory_counts": dict(self.subcategory_counts),
            }
