"""Tests for the repetition guard."""

import threading

from soundsmith.config import RepetitionConfig
from soundsmith.templates.catalog import ALL_TEMPLATES
from soundsmith.vocabulary.repetition_guard import RepetitionGuard


def _template(template_id):
    return next(t for t in ALL_TEMPLATES if t.id == template_id)


class TestRejection:
    """Tests for duplicate and overlap rejection."""

    def test_exact_duplicate_rejected(self, guard):
        """A name accepted once is rejected the second time, case-insensitively."""
        assert not guard.should_reject("Velvet Thunder")
        guard.accept("Velvet Thunder")
        assert guard.should_reject("Velvet Thunder")
        assert guard.should_reject("velvet thunder ")
        assert guard.stats.rejected_duplicate == 2

    def test_overlap_rejected(self, guard):
        """A significant word shared with too many recent names is rejected."""
        guard.accept("Crimson Harbor")
        assert guard.should_reject("Harbor Lights")
        assert guard.stats.rejected_overlap == 1

    def test_overlap_ignores_short_and_function_words(self, guard):
        """Words below the significance length never trigger overlap."""
        guard.accept("The Red Sky")
        assert not guard.should_reject("The Red Sea")

    def test_overlap_fraction_respected(self, guard):
        """A word in only a small share of recent names passes."""
        for name in ("Crimson Harbor", "Golden Comet", "Silent Engine", "Frozen Canyon"):
            guard.accept(name)
        # 1 of 4 recent names is 0.25, below the 0.3 threshold
        assert not guard.should_reject("Harbor Wolves")

    def test_overlap_matches_inflections(self, guard):
        """Overlap compares stems, so plurals collide."""
        guard.accept("Electric Storm")
        assert guard.should_reject("Storms Rising")


class TestCapacities:
    """Tests for bounded queues."""

    def test_word_queue_bounded(self, clock):
        """The recent-word queue evicts oldest words beyond capacity."""
        guard = RepetitionGuard(RepetitionConfig(word_capacity=4), clock=clock)
        guard.accept("Crimson Harbor")
        guard.accept("Golden Comet")
        guard.accept("Silent Engine")
        assert len(guard.recent_words) == 4
        assert "crimson" not in guard.recent_words
        assert list(guard.recent_words)[-1] == "engine"

    def test_template_queue_bounded(self, clock):
        """The recent-template queue never exceeds its capacity."""
        guard = RepetitionGuard(RepetitionConfig(template_capacity=3), clock=clock)
        for template in ALL_TEMPLATES[:6]:
            guard.record_template(template)
        assert len(guard.recent_templates) == 3
        assert guard.is_recent_template(ALL_TEMPLATES[5].id)
        assert not guard.is_recent_template(ALL_TEMPLATES[0].id)

    def test_accept_with_template_updates_counters(self, guard):
        """Accepting with a template records its category usage."""
        template = _template("dynamic_adjective_noun")
        guard.accept("Wild Engine", template)
        assert guard.category_count(template.category) == 1
        assert guard.subcategory_count(template.subcategory) == 1
        assert guard.is_recent_template(template.id)

    def test_name_memory_bounded(self, clock):
        """Accepted names beyond the memory are forgotten oldest first."""
        guard = RepetitionGuard(RepetitionConfig(name_memory=3), clock=clock)
        for name in ("Crimson Harbor", "Golden Comet", "Silent Engine", "Frozen Lantern"):
            guard.accept(name)
        assert len(guard.accepted_names) == 3
        assert not guard.is_duplicate("Crimson Harbor")
        assert guard.is_duplicate("Frozen Lantern")
        assert guard.is_duplicate("golden comet")

    def test_name_memory_ignores_repeat_accepts(self, clock):
        """Accepting a remembered name again does not evict another."""
        guard = RepetitionGuard(RepetitionConfig(name_memory=2), clock=clock)
        guard.accept("Crimson Harbor")
        guard.accept("Golden Comet")
        guard.accept("crimson harbor")
        assert guard.is_duplicate("Crimson Harbor")
        assert guard.is_duplicate("Golden Comet")


class TestDecay:
    """Tests for time-based decay."""

    def test_no_decay_before_interval(self, guard, clock):
        """Counters are untouched inside the decay interval."""
        template = _template("dynamic_adjective_noun")
        for _ in range(4):
            guard.record_template(template)
        clock.advance(299)
        assert not guard.maybe_decay()
        assert guard.category_count(template.category) == 4

    def test_decay_halves_counts(self, guard, clock):
        """After the interval counters are halved with floor."""
        template = _template("dynamic_adjective_noun")
        for _ in range(5):
            guard.record_template(template)
        clock.advance(301)
        assert guard.maybe_decay()
        assert guard.category_count(template.category) == 2

    def test_decay_is_monotonic_and_non_negative(self, guard, clock):
        """Repeated passes never increase a count and drop it at zero."""
        template = _template("contrasting_elements")
        for _ in range(3):
            guard.record_template(template)
        previous = guard.category_count(template.category)
        for _ in range(4):
            clock.advance(301)
            guard.maybe_decay()
            current = guard.category_count(template.category)
            assert 0 <= current <= previous
            previous = current
        assert template.category not in guard.category_counts

    def test_decay_runs_lazily_on_check(self, guard, clock):
        """should_reject triggers a pending decay pass."""
        guard.record_template(_template("action_object"))
        clock.advance(600)
        guard.should_reject("Anything")
        assert guard.stats.decay_passes == 1


class TestVarietyAndState:
    """Tests for variety score, reset and stats."""

    def test_variety_score(self, guard):
        """Variety is the share of fresh significant words."""
        assert guard.variety_score("Lunar Tide") == 100.0
        guard.accept("Lunar Engine")
        assert guard.variety_score("Engine Lunar") == 0.0
        assert guard.variety_score("Lunar Canyon") == 50.0

    def test_is_duplicate(self, guard):
        """Duplicate checks ignore case and do not touch the stats."""
        guard.accept("Velvet Thunder")
        assert guard.is_duplicate(" velvet thunder")
        assert not guard.is_duplicate("Velvet Harbor")
        assert guard.stats.names_checked == 0

    def test_reset(self, guard):
        """Reset clears names, words and counters."""
        guard.accept("Velvet Thunder", _template("dynamic_adjective_noun"))
        guard.reset()
        assert not guard.should_reject("Velvet Thunder")
        assert guard.get_stats()["recent_words"] == 0
        assert guard.get_stats()["category_counts"] == {}

    def test_concurrent_accepts(self, clock):
        """Concurrent accepts do not lose updates."""
        guard = RepetitionGuard(RepetitionConfig(word_capacity=1000, name_window=1000), clock=clock)

        def worker(offset):
            for i in range(50):
                guard.accept(f"Name{offset}x{i} Signal{offset}x{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert guard.stats.names_accepted == 200
        assert len(guard.accepted_names) == 200
