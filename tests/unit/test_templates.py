"""Tests for the template catalog, generators and library."""

import random

import pytest

from soundsmith.models import GenerationContext, NameType
from soundsmith.templates import ALL_TEMPLATES, TemplateLibrary, fit_to_length, generate, third_person
from soundsmith.templates.catalog import Template


@pytest.fixture
def library():
    return TemplateLibrary()


class TestCatalog:
    """Tests for the catalog contents."""

    def test_catalog_size_and_unique_ids(self):
        """24 templates with unique ids."""
        ids = [t.id for t in ALL_TEMPLATES]
        assert len(ids) == 24
        assert len(set(ids)) == len(ids)

    def test_exact_counts_up_to_three(self):
        """1-3 word templates have a single length; longer ones have ranges."""
        for template in ALL_TEMPLATES:
            if template.min_word_count <= 3:
                assert not template.is_range
            else:
                assert template.max_word_count >= template.min_word_count

    def test_restrictions(self):
        """Restricted templates only allow their genres or moods."""
        techno = next(t for t in ALL_TEMPLATES if t.id == "techno_organic")
        assert techno.allows_genre("electronic")
        assert not techno.allows_genre("classical")
        assert techno.allows_genre(None)
        conditional = next(t for t in ALL_TEMPLATES if t.id == "conditional_narrative")
        assert conditional.allows_mood("melancholic")
        assert not conditional.allows_mood("energetic")

    def test_word_count_key(self):
        """Range templates report their range as key."""
        narrative = next(t for t in ALL_TEMPLATES if t.id == "complete_narrative")
        assert narrative.word_count_key == "4-8"


class TestTemplateLibrary:
    """Tests for TemplateLibrary lookups."""

    def test_get_templates_by_word_count(self, library):
        """Every returned template covers the requested count."""
        assert {t.id for t in library.get_templates(1)} == {
            "abstract_concept", "compound_creation", "suffix_evolution", "numeric_mystique", "rare_singular",
        }
        assert len(library.get_templates(2)) == 7
        assert len(library.get_templates(3)) == 7
        for template in library.get_templates(6):
            assert template.covers(6)

    def test_get_templates_idempotent(self, library):
        """Repeated calls return the same set."""
        first = library.get_templates(5)
        for _ in range(5):
            assert library.get_templates(5) == first

    def test_no_templates_beyond_range(self, library):
        """Lengths nothing covers return an empty list."""
        assert library.get_templates(11) == []

    def test_get_templates_by_category(self, library):
        """Category lookups narrow by word count when given."""
        narrative = library.get_templates_by_category("narrative")
        assert {t.id for t in narrative} == {"action_object", "narrative_sequence", "complete_narrative"}
        assert [t.id for t in library.get_templates_by_category("narrative", 2)] == ["action_object"]

    def test_get_unknown_raises(self, library):
        """Unknown ids raise KeyError."""
        with pytest.raises(KeyError):
            library.get("missing")
        assert "action_object" in library

    def test_random_template_lenient(self, library, rng):
        """Restrictions that would empty the pool are ignored."""
        for _ in range(20):
            template = library.get_random_template(2, genre="classical", rng=rng)
            assert template is not None
            assert template.id != "techno_organic"
        assert library.get_random_template(12, rng=rng) is None

    def test_stats_and_categories(self, library):
        """Stats total matches the catalog and categories are distinct."""
        stats = library.get_stats()
        assert stats["total_templates"] == 24
        assert stats["by_word_count"]["1"] == 5
        assert sum(stats["by_category"].values()) == 24
        categories = library.get_all_categories()
        assert len(categories) == len(set(categories))

    def test_genre_modifiers(self, library):
        """Known genres have modifiers; unknown return None."""
        modifiers = library.get_genre_modifiers("Rock")
        assert modifiers and modifiers["adjectives"]
        assert library.get_genre_modifiers("polka-step") is None
        assert library.get_genre_modifiers(None) is None

    def test_duplicate_ids_rejected(self):
        """Construction validates unique ids."""
        template = ALL_TEMPLATES[0]
        with pytest.raises(ValueError):
            TemplateLibrary([template, template])

    def test_missing_generator_rejected(self):
        """Construction validates that every template has a generator."""
        orphan = Template("orphan", "x", "y", 0.1, 1, 1, "{x}", "no generator")
        with pytest.raises(ValueError):
            TemplateLibrary([orphan])


class TestGeneration:
    """Tests for generator dispatch."""

    def test_shape_invariant(self, library, word_source):
        """Every template emits exactly the requested word count."""
        rng = random.Random(7)
        for template in library.templates:
            for word_count in range(template.min_word_count, template.max_word_count + 1):
                for name_type in (NameType.BAND, NameType.SONG):
                    context = GenerationContext(word_count=word_count, name_type=name_type, genre="rock")
                    for _ in range(5):
                        phrase = library.generate(template, word_source, context, rng)
                        assert len(phrase.split()) == word_count, (template.id, phrase)

    def test_generation_reproducible(self, library, word_source):
        """The same seed gives the same phrase."""
        template = library.get("classic_the_adjective_noun")
        context = GenerationContext(word_count=3)
        first = generate(template, word_source, context, random.Random(3))
        second = generate(template, word_source, context, random.Random(3))
        assert first == second
        assert first.startswith("The ")

    def test_empty_word_source_uses_defaults(self, library):
        """An empty source still produces phrases."""
        from soundsmith.vocabulary.word_source import normalize_word_source

        empty, _ = normalize_word_source({})
        context = GenerationContext(word_count=2)
        phrase = library.generate(library.get("dynamic_adjective_noun"), empty, context, random.Random(1))
        assert len(phrase.split()) == 2

    def test_word_source_not_mutated(self, library, word_source, rng):
        """Generation leaves the word source untouched."""
        before = word_source.to_dict()
        for template in library.get_templates(3):
            library.generate(template, word_source, GenerationContext(word_count=3), rng)
        assert word_source.to_dict() == before

    def test_unknown_template_raises(self, word_source, rng):
        """Unknown ids raise KeyError at dispatch."""
        orphan = Template("orphan", "x", "y", 0.1, 1, 1, "{x}", "no generator")
        with pytest.raises(KeyError):
            generate(orphan, word_source, GenerationContext(word_count=1), rng)


class TestHelpers:
    """Tests for generator helpers."""

    def test_fit_to_length_trims_and_pads(self, rng):
        """Lists are trimmed or padded to the exact target."""
        assert len(fit_to_length(["a", "b", "c", "d", "e"], 3, rng)) == 3
        padded = fit_to_length(["Wild", "Heart"], 7, rng)
        assert len(padded) == 7
        assert padded[:2] == ["Wild", "Heart"]

    def test_fit_to_length_drops_droppable_first(self, rng):
        """Droppable positions go first when trimming."""
        assert fit_to_length(["The", "Wild", "Heart", "Beats"], 3, rng, droppable=[0]) == ["Wild", "Heart", "Beats"]

    def test_third_person(self):
        """Third-person verb forms."""
        assert third_person("burn") == "burns"
        assert third_person("fly") == "flies"
        assert third_person("reach") == "reaches"
