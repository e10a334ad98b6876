"""Generation driver: request parsing, candidate generation and fallbacks.

Orchestrates one request end to end:

1. Parse and validate the request (``GenerationRequest.from_dict``)
2. Normalize the word source
3. Plain path: draw diverse templates, generate, screen with the repetition
   guard and keep the best; fusion path: delegate to the fusion engine
4. Fill any gap with dynamically assembled phrases, then with curated names
   when the vocabulary is too small to stay varied
5. On a recoverable generation error, return curated fallback names

Usage:
    driver = GenerationDriver()
    request = GenerationRequest.from_dict({"type": "band", "genre": "rock", "count": 4})
    for name in driver.generate(request):
        print(name.name, name.quality_score)
"""

import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..config import Config
from ..errors import GenerationError, NoEligibleTemplates
from ..fusion.engine import FusionEngine, FusionRequest, normalize_fusion_creativity, normalize_fusion_intensity
from ..models import GeneratedName, GenerationContext, NameType
from ..mood.atmosphere import AtmosphericContext
from ..selection.context_maps import normalize_creativity, normalize_intensity
from ..selection.engine import SelectionEngine
from ..selection.scoring import SelectionCriteria, TemplateScore
from ..selection.session import SelectionSession
from ..utils.logging import get_logger, log_generation, set_request_id
from ..utils.text import count_words, title_case
from ..vocabulary.repetition_guard import RepetitionGuard
from ..vocabulary.word_source import WordSource, default_word_source, normalize_word_source
from .fallback import DYNAMIC_QUALITY, FALLBACK_NAMES, curated_names, dynamic_phrase

logger = get_logger(__name__)

DEFAULT_WORD_COUNT = 2
OPEN_WORD_COUNT = "4+"
DYNAMIC_ATTEMPTS_PER_SLOT = 5


def _parse_word_count(value: Any, config: Config) -> Tuple[int, int]:
    """Resolve a word_count field into an inclusive (low, high) range."""
    if value is None or value == "":
        return DEFAULT_WORD_COUNT, DEFAULT_WORD_COUNT
    if isinstance(value, str) and value.strip() == OPEN_WORD_COUNT:
        low, high = config.generation.open_word_count_range
        return int(low), int(high)
    if isinstance(value, bool):
        raise ValueError(f"Invalid word_count: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid word_count: {value!r} (expected an integer or '4+')")
    if number < 1:
        raise ValueError(f"word_count must be at least 1, got {number}")
    return number, number



def _check_label(value: Optional[str], normalize, field_name: str) -> Optional[str]:
    if value is not None and normalize(value) is None:
        raise ValueError(f"Unknown {field_name}: {value!r}")
    return value


def _parse_categories(value: Any) -> Tuple[str, ...]:
    """Resolve avoid_categories into a tuple; a bare string names one category."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"Invalid avoid_categories: {value!r} (expected a list of names)")
    categories = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Invalid category in avoid_categories: {item!r}")
        if item.strip():
            categories.append(item.strip().lower())
    return tuple(categories)


@dataclass
class GenerationRequest:
    """A validated generation request.

    ``word_count_range`` is inclusive; a single requested length gives a
    range with equal bounds. A secondary genre switches to the fusion path.
    """
    name_type: NameType = NameType.BAND
    genre: Optional[str] = None
    secondary_genre: Optional[str] = None
    mood: Optional[str] = None
    word_count_range: Tuple[int, int] = (DEFAULT_WORD_COUNT, DEFAULT_WORD_COUNT)
    count: int = 4
    intensity: Optional[str] = None
    creativity_level: Optional[str] = None
    preserve_authenticity: bool = True
    cultural_sensitivity: bool = False
    theme: Optional[str] = None
    atmosphere: Optional[AtmosphericContext] = None
    avoid_categories: Tuple[str, ...] = ()
    seed: Optional[int] = None

    @property
    def is_fusion(self) -> bool:
        return bool(self.genre and self.secondary_genre)

    @property
    def is_open_length(self) -> bool:
        return self.word_count_range[0] != self.word_count_range[1]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], config: Optional[Config] = None) -> "GenerationRequest":
        """Parse a request mapping.

        Raises:
            ValueError: On an unknown type, a non-positive count, an
                unparsable word_count, malformed avoid_categories, or an
                intensity or creativity_level label the chosen path does not
                know. Fusion requests take the fusion labels; plain requests
                take the selection labels and their aliases.
        """
        config = config or Config()
        name_type = NameType.parse(data.get("type") or "band")

        count = data.get("count")
        if count is None:
            count = config.generation.default_count
        if isinstance(count, bool) or not isinstance(count, (int, str)):
            raise ValueError(f"Invalid count: {count!r}")
        try:
            count = int(count)
        except ValueError:
            raise ValueError(f"Invalid count: {count!r}")
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        genre = _clean(data.get("genre"))
        secondary_genre = _clean(data.get("secondary_genre"))
        if genre and secondary_genre:
            intensity_of, creativity_of = normalize_fusion_intensity, normalize_fusion_creativity
        else:
            intensity_of, creativity_of = normalize_intensity, normalize_creativity
        intensity = _check_label(_clean(data.get("intensity")), intensity_of, "intensity")
        creativity_level = _check_label(_clean(data.get("creativity_level")), creativity_of, "creativity_level")

        return cls(
            name_type=name_type,
            genre=genre,
            secondary_genre=secondary_genre,
            mood=_clean(data.get("mood")),
            word_count_range=_parse_word_count(data.get("word_count"), config),
            count=count,
            intensity=intensity,
            creativity_level=creativity_level,
            preserve_authenticity=bool(data.get("preserve_authenticity", True)),
            cultural_sensitivity=bool(data.get("cultural_sensitivity", False)),
            theme=_clean(data.get("theme")),
            atmosphere=AtmosphericContext.from_dict(data.get("atmosphere")),
            avoid_categories=_parse_categories(data.get("avoid_categories")),
            seed=data.get("seed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        low, high = self.word_count_range
        return {
            "type": self.name_type.value,
            "genre": self.genre,
            "secondary_genre": self.secondary_genre,
            "mood": self.mood,
            "word_count": low if low == high else OPEN_WORD_COUNT,
            "count": self.count,
            "intensity": self.intensity,
            "creativity_level": self.creativity_level,
        }


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


@dataclass
class GenerationSession:
    """Request-scoped state: the request, a random source, accepted outputs
    and a reference to the repetition guard (possibly shared)."""
    request: GenerationRequest
    rng: random.Random
    guard: RepetitionGuard
    accepted: List[GeneratedName] = field(default_factory=list)
    selection: Optional[SelectionSession] = None

    def __post_init__(self):
        if self.selection is None:
            self.selection = SelectionSession(rng=self.rng, guard=self.guard)

    @classmethod
    def create(
        cls,
        request: GenerationRequest,
        guard: Optional[RepetitionGuard] = None,
        seed: Optional[int] = None,
        config: Optional[Config] = None,
    ) -> "GenerationSession":
        config = config or Config()
        if seed is None:
            seed = request.seed if request.seed is not None else config.generation.seed
        return cls(
            request=request,
            rng=random.Random(seed),
            guard=guard or RepetitionGuard(config.repetition),
        )

    @property
    def remaining(self) -> int:
        return max(0, self.request.count - len(self.accepted))

    @property
    def names(self) -> List[str]:
        return [n.name for n in self.accepted]

    def next_word_count(self) -> int:
        low, high = self.request.word_count_range
        return low if low == high else self.rng.randint(low, high)

    def accept(self, result: GeneratedName) -> None:
        self.accepted.append(result)


class GenerationDriver:
    """Turn generation requests into ranked names.

    The driver owns a process-wide repetition guard shared by the sessions
    it creates; pass a session explicitly to isolate state (tests do).
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        selection: Optional[SelectionEngine] = None,
        fusion: Optional[FusionEngine] = None,
    ):
        self.config = config or Config()
        self.selection = selection or SelectionEngine(config=self.config)
        self.fusion = fusion or FusionEngine(config=self.config, selection=self.selection)
        self.guard = RepetitionGuard(self.config.repetition)
        logger.info("Generation driver initialized")

    def new_session(self, request: GenerationRequest, seed: Optional[int] = None) -> GenerationSession:
        """Session bound to the driver's shared guard."""
        return GenerationSession.create(request, guard=self.guard, seed=seed, config=self.config)

    def generate(
        self,
        request: GenerationRequest,
        word_source: Union[WordSource, Mapping[str, Any], None] = None,
        session: Optional[GenerationSession] = None,
    ) -> List[GeneratedName]:
        """Generate up to ``request.count`` names, best first.

        Args:
            request: Parsed request.
            word_source: A WordSource or a raw ``category -> words`` mapping;
                built-in pools are used when omitted.
            session: Request session; a new one on the shared guard by default.

        Returns:
            At least min(count, curated pool size) names. Recoverable errors produce curated
            fallback names tagged with ``fallback_reason``.
        """
        set_request_id()
        session = session or self.new_session(request)
        path = "fusion" if request.is_fusion else "template"
        start = time.perf_counter()
        error = None

        try:
            source = self._word_source(word_source)
            if request.is_fusion:
                results = self._generate_fusion(request, source, session)
            else:
                results = self._generate_plain(request, source, session)
            if session.remaining:
                self._top_up(request, session)
                results = list(session.accepted)
        except GenerationError as e:
            error = type(e).__name__
            logger.warning(f"Generation failed, using curated fallback: {e}", extra_data={"error": error})
            results = curated_names(request.name_type, request.count, session.rng, reason=error)
            path = "fallback"

        duration_ms = int((time.perf_counter() - start) * 1000)
        log_generation(logger, path, request.count, len(results), duration_ms, error is None, error)
        return results

    def _word_source(self, word_source: Union[WordSource, Mapping[str, Any], None]) -> WordSource:
        if word_source is None:
            return default_word_source()
        if isinstance(word_source, WordSource):
            return word_source
        source, stats = normalize_word_source(word_source, name="request")
        logger.debug("Normalized request word source", extra_data=stats.to_dict())
        return source

    # Plain path

    def _criteria(self, request: GenerationRequest, word_count: int) -> SelectionCriteria:
        return SelectionCriteria(
            word_count=word_count,
            name_type=request.name_type,
            genre=request.genre,
            mood=request.mood,
            intensity=request.intensity,
            creativity=request.creativity_level,
            avoid_categories=request.avoid_categories,
            atmosphere=request.atmosphere,
            mood_driven=request.atmosphere is not None or request.theme is not None,
            theme=request.theme,
        )

    def _generate_plain(self, request: GenerationRequest, source: WordSource,
                        session: GenerationSession) -> List[GeneratedName]:
        gen_cfg = self.config.generation
        seen = {name.lower() for name in session.names}
        starved = False

        for round_no in range(gen_cfg.max_rounds):
            if not session.remaining:
                break
            word_count = session.next_word_count()
            criteria = self._criteria(request, word_count)
            scored = self.selection.select_many_scored(
                criteria, source, n=session.remaining * gen_cfg.candidate_multiplier,
                session=session.selection, record=False,
            )
            if not scored:
                logger.debug(f"No eligible templates for {word_count} words in round {round_no + 1}")
                starved = True
                continue

            candidates = self._candidates(scored, request, word_count, source, session, seen)
            for candidate, entry in sorted(candidates, key=lambda c: c[0].quality_score, reverse=True):
                if not session.remaining:
                    break
                if session.guard.should_reject(candidate.name):
                    continue
                session.guard.accept(candidate.name)
                session.selection.record(entry.template, entry.score, entry.context_match, entry.mode)
                session.accept(candidate)

        if session.remaining:
            self._fill_dynamic(request, source, session, seen)
        if not session.accepted:
            low, _ = request.word_count_range
            raise NoEligibleTemplates(low, request.genre, request.mood)
        if starved:
            logger.info("Template pool was empty for at least one round; dynamic phrases filled the gap")

        return list(session.accepted)

    def _candidates(self, scored: List[TemplateScore], request: GenerationRequest, word_count: int,
                    source: WordSource, session: GenerationSession,
                    seen: set) -> List[Tuple[GeneratedName, TemplateScore]]:
        context = GenerationContext(
            word_count=word_count,
            name_type=request.name_type,
            genre=request.genre,
            mood=request.mood,
            theme=request.theme,
            intensity=request.intensity,
        )
        candidates = []
        for entry in scored:
            name = title_case(self.selection.library.generate(entry.template, source, context, session.rng))
            key = name.lower()
            if not name or key in seen:
                continue
            if count_words(name) != word_count:
                logger.debug(f"Dropped '{name}': expected {word_count} words")
                continue
            seen.add(key)
            if session.guard.should_reject(name):
                continue
            variety = session.guard.variety_score(name)
            quality = 0.7 * min(1.0, max(0.0, entry.score)) + 0.3 * (variety / 100.0)
            candidates.append((GeneratedName(
                name=name,
                metadata={
                    "path": "template",
                    "template_id": entry.template_id,
                    "category": entry.template.category,
                    "subcategory": entry.template.subcategory,
                    "word_count": word_count,
                    "selection_score": round(entry.score, 4),
                    "selection_mode": entry.mode,
                    "variety": round(variety, 2),
                    "quality_score": round(min(1.0, quality), 4),
                    "genre": request.genre,
                    "mood": request.mood,
                },
            ), entry))
        return candidates

    def _fill_dynamic(self, request: GenerationRequest, source: WordSource,
                      session: GenerationSession, seen: set) -> None:
        # Second pass only screens exact duplicates so small vocabularies still fill every slot
        for strict in (True, False):
            attempts = session.remaining * DYNAMIC_ATTEMPTS_PER_SLOT
            while session.remaining and attempts > 0:
                attempts -= 1
                word_count = session.next_word_count()
                name = dynamic_phrase(source, word_count, session.rng, request.name_type)
                rejected = session.guard.should_reject(name) if strict else session.guard.is_duplicate(name)
                if name.lower() in seen or rejected:
                    continue
                seen.add(name.lower())
                session.guard.accept(name)
                session.accept(GeneratedName(
                    name=name,
                    metadata={
                        "path": "dynamic",
                        "word_count": count_words(name),
                        "quality_score": DYNAMIC_QUALITY,
                        "genre": request.genre,
                        "mood": request.mood,
                    },
                ))
                logger.debug(f"Filled slot with dynamic phrase '{name}'")

    def _top_up(self, request: GenerationRequest, session: GenerationSession) -> None:
        """Pad a short result list with curated names not already returned."""
        taken = {name.lower() for name in session.names}
        for fallback in curated_names(request.name_type, len(FALLBACK_NAMES[request.name_type]), session.rng,
                                      reason="insufficient_variety"):
            if not session.remaining:
                break
            if fallback.name.lower() not in taken and not session.guard.is_duplicate(fallback.name):
                session.accept(fallback)

    # Fusion path

    def _generate_fusion(self, request: GenerationRequest, source: WordSource,
                         session: GenerationSession) -> List[GeneratedName]:
        fusion_request = FusionRequest(
            primary_genre=request.genre,
            secondary_genre=request.secondary_genre,
            mood=request.mood,
            word_count=session.next_word_count(),
            count=request.count,
            intensity=request.intensity or "moderate",
            creativity_level=request.creativity_level or "balanced",
            preserve_authenticity=request.preserve_authenticity,
            cultural_sensitivity=request.cultural_sensitivity,
            name_type=request.name_type,
        )
        results = self.fusion.fuse(fusion_request, source, session.selection)
        for result in results:
            metadata = dict(result.fusion_metadata)
            metadata.update({
                "path": "fusion",
                "quality_score": round(result.quality_score, 4),
                "explanations": result.explanations,
            })
            session.accept(GeneratedName(name=result.name, metadata=metadata))
        return list(session.accepted)
