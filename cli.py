#!/usr/bin/env python3
"""Command-line interface for band and song name generation."""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def _load_app_config(path):
    """Load config.json if present, otherwise defaults."""
    from soundsmith.config import Config, load_config

    if path is None and not Path("config.json").exists():
        return Config()
    try:
        return load_config(path or "config.json")
    except FileNotFoundError:
        print(f"Error: Config file not found: {path}")
        print("Copy config.json.sample to config.json to customize settings")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def cmd_generate(args):
    """Generate band or song names."""
    from soundsmith.generation import GenerationDriver, GenerationRequest
    from soundsmith.utils.logging import setup_logging

    config = _load_app_config(args.config)
    setup_logging(args.log_level or config.log_level, json_format=config.log_json)

    data = {
        "type": args.type,
        "genre": args.genre,
        "secondary_genre": args.secondary_genre,
        "mood": args.mood,
        "word_count": args.words,
        "count": args.count,
        "intensity": args.intensity,
        "creativity_level": args.creativity,
        "theme": args.theme,
        "seed": args.seed,
    }
    if args.time_of_day or args.season:
        data["atmosphere"] = {"time_of_day": args.time_of_day, "season": args.season}

    try:
        request = GenerationRequest.from_dict(data, config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    word_source = None
    if args.words_file:
        words_path = Path(args.words_file)
        if not words_path.exists():
            print(f"Error: Word source file not found: {args.words_file}")
            sys.exit(1)
        word_source = json.loads(words_path.read_text())

    driver = GenerationDriver(config)
    try:
        results = driver.generate(request, word_source)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return

    label = "Fusion" if request.is_fusion else request.name_type.value.capitalize()
    print(f"{label} names:")
    for result in results:
        meta = result.metadata
        source = meta.get("template_id") or meta.get("fusion_method") or meta.get("path")
        print(f"  {result.name:<40} {result.quality_score:.2f}  ({source})")

    reason = results[0].metadata.get("fallback_reason") if results else None
    if reason:
        print(f"\nNote: used curated fallback names ({reason})")


def cmd_templates(args):
    """Show template library statistics."""
    from soundsmith.templates import TemplateLibrary

    library = TemplateLibrary()
    stats = library.get_stats()

    print(f"Templates: {stats['total_templates']}")
    print("\nBy word count:")
    for key, total in sorted(stats["by_word_count"].items()):
        print(f"  {key}: {total}")
    print("\nBy category:")
    for category, total in sorted(stats["by_category"].items()):
        print(f"  {category}: {total}")

    if args.words:
        print(f"\nTemplates for {args.words} words:")
        for template in library.get_templates(args.words):
            print(f"  {template.id} [{template.category}/{template.subcategory}] weight={template.weight}")


def cmd_genres(args):
    """Show compatibility for a genre."""
    import numpy as np
    from soundsmith.genre import GenreCompatibilityModel

    model = GenreCompatibilityModel()
    if not args.genre:
        print("Known genres:")
        for genre in model.genres:
            print(f"  {genre}")
        return

    if model.get_profile(args.genre) is None:
        print(f"Error: Unknown genre: {args.genre}")
        sys.exit(1)

    ranked = model.most_compatible(args.genre, limit=args.limit)
    print(f"Most compatible with {args.genre}:")
    for other, score in ranked:
        entry = model.get_compatibility(args.genre, other)
        rule = model.get_fusion_rule(args.genre, other)
        suffix = f"  [{rule.name}]" if rule else ""
        print(f"  {other:<12} {score:.2f}  {entry.fusion_style}{suffix}")

    scores = [score for _, score in model.most_compatible(args.genre, limit=len(model.genres))]
    if scores:
        print(f"\nMean compatibility: {np.mean(scores):.2f} (std {np.std(scores):.2f})")


def cmd_moods(args):
    """List moods and complex moods."""
    from soundsmith.mood import COMPLEX_MOODS, PRIMARY_MOODS

    print("Moods:")
    for name, profile in PRIMARY_MOODS.items():
        keywords = ", ".join(profile.keywords[:4])
        print(f"  {name:<14} {keywords}")
    print("\nComplex moods:")
    for name, mood in COMPLEX_MOODS.items():
        parts = " + ".join(f"{m} {ratio:.0%}" for m, ratio in mood.components)
        print(f"  {name:<22} {parts}")


def main():
    parser = argparse.ArgumentParser(
        description="Soundsmith - Generate band and song names"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate band or song names"
    )
    generate_parser.add_argument(
        "--type",
        choices=["band", "song"],
        default="band",
        help="Kind of name (default: band)"
    )
    generate_parser.add_argument(
        "--genre", "-g",
        help="Genre to steer selection"
    )
    generate_parser.add_argument(
        "--secondary-genre", "-s",
        help="Second genre; enables fusion"
    )
    generate_parser.add_argument(
        "--mood", "-m",
        help="Mood to steer selection"
    )
    generate_parser.add_argument(
        "--words", "-w",
        help="Word count: an integer or 4+ (default: 2)"
    )
    generate_parser.add_argument(
        "--count", "-n",
        type=int,
        default=None,
        help="Number of names (default: from config)"
    )
    generate_parser.add_argument(
        "--intensity",
        help="Intensity: low, medium, high (fusion also accepts subtle, moderate, bold, experimental)"
    )
    generate_parser.add_argument(
        "--creativity",
        help="Creativity: conservative, balanced, experimental (fusion also accepts innovative, revolutionary)"
    )
    generate_parser.add_argument(
        "--theme",
        help="Free-text theme used for mood inference"
    )
    generate_parser.add_argument(
        "--time-of-day",
        help="Atmosphere: time of day (e.g. midnight, dawn)"
    )
    generate_parser.add_argument(
        "--season",
        help="Atmosphere: season (e.g. winter, spring)"
    )
    generate_parser.add_argument(
        "--words-file",
        help="JSON file mapping word categories to word lists"
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible output"
    )
    generate_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to config file (default: config.json if present)"
    )
    generate_parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: from config)"
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )
    generate_parser.set_defaults(func=cmd_generate)

    # Templates command
    templates_parser = subparsers.add_parser(
        "templates",
        help="Show template library statistics"
    )
    templates_parser.add_argument(
        "--words", "-w",
        type=int,
        default=None,
        help="Also list templates for this word count"
    )
    templates_parser.set_defaults(func=cmd_templates)

    # Genres command
    genres_parser = subparsers.add_parser(
        "genres",
        help="Show genre compatibility"
    )
    genres_parser.add_argument(
        "genre",
        nargs="?",
        help="Genre to rank partners for (lists genres if omitted)"
    )
    genres_parser.add_argument(
        "--limit", "-l",
        type=int,
        default=5,
        help="Number of partners to show (default: 5)"
    )
    genres_parser.set_defaults(func=cmd_genres)

    # Moods command
    moods_parser = subparsers.add_parser(
        "moods",
        help="List moods and complex moods"
    )
    moods_parser.set_defaults(func=cmd_moods)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
