#!/usr/bin/env python3
"""
RPG Event Generator

Generates narrative events (title, description and choices with effects)
tailored to a player's state.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from event_generators import CorpusLoader, EventOrchestrator, GeneratorOptions


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate RPG events adapted to a player context"
    )
    parser.add_argument(
        "--context",
        "-c",
        help="Player context as a JSON object, or a path to a JSON file"
    )
    parser.add_argument(
        "--set",
        "-s",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a single context attribute (repeatable, e.g. -s gold=500 -s career=merchant)"
    )
    parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=1,
        help="Number of events to generate (default: 1)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible output"
    )
    parser.add_argument(
        "--corpus",
        "-d",
        help="Directory of .txt/.md files to train the text engine (one theme per file)"
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write events to this JSON file instead of printing them"
    )
    parser.add_argument(
        "--ai",
        action="store_true",
        help="Polish events with an OpenAI model (requires OPENAI_API_KEY)"
    )
    return parser.parse_args(argv)


def parse_value(raw: str) -> Any:
    """Interpret a --set value as JSON when possible, otherwise as a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def build_context(context_arg, assignments: List[str]) -> Dict[str, Any]:
    context: Dict[str, Any] = {}

    if context_arg:
        path = Path(context_arg)
        if path.is_file():
            with open(path, 'r', encoding='utf-8') as f:
                context = json.load(f)
        else:
            context = json.loads(context_arg)
        if not isinstance(context, dict):
            raise ValueError("Context must be a JSON object")

    for assignment in assignments:
        if "=" not in assignment:
            raise ValueError(f"Expected KEY=VALUE, got '{assignment}'")
        key, raw = assignment.split("=", 1)
        context[key.strip()] = parse_value(raw.strip())

    return context


def main(argv=None):
    args = parse_arguments(argv)

    try:
        context = build_context(args.context, args.set)
    except (ValueError, OSError) as e:
        print(f"Error: invalid context: {e}")
        sys.exit(1)

    overrides: Dict[str, Any] = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    options = GeneratorOptions.from_env(**overrides)
    if args.ai:
        options.ai_enhancement.enabled = True

    orchestrator = EventOrchestrator(options=options)

    print("=== RPG Event Generator ===")

    if args.corpus:
        corpus_path = Path(args.corpus)
        if not corpus_path.is_dir():
            print(f"Error: Corpus directory '{args.corpus}' does not exist")
            sys.exit(1)
        print(f"Loading corpus from {corpus_path}...")
        loaded = CorpusLoader(corpus_path).load_into(orchestrator)
        print(f"  Added {loaded} sentences.")

    validation = orchestrator.validate_context(context)
    for error in validation.errors:
        print(f"  Warning: {error}")
    for warning in validation.warnings:
        print(f"  Warning: {warning}")

    analysis = orchestrator.analyze_difficulty(context)
    print(f"Power level: {analysis.power_level} ({analysis.recommended_tier.name})")
    print()

    events = orchestrator.generate_events(context, args.count)
    data = [event.model_dump() for event in events]

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        print(f"Saved {len(events)} event(s) to {output_path}")
        return

    for event in events:
        print(f"[{event.type} / {event.difficulty}] {event.title}")
        print(f"  {event.description}")
        for i, choice in enumerate(event.choices, 1):
            effects = ", ".join(f"{stat} {value}" for stat, value in choice.effect.items())
            print(f"  {i}. {choice.text} ({effects})")
        if event.tags:
            print(f"  Tags: {', '.join(event.tags)}")
        print()


if __name__ == "__main__":
    main()
