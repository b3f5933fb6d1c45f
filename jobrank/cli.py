"""
Command line interface for jobrank.

Subcommands run the ranking pipeline against a fixture file, print the
fallback catalog, and render a saved result as a human-readable report.
The CLI is intentionally lightweight and delegates the work to
`jobrank.pipeline` and the `rank` package.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Dict, List

from .config import load_settings
from .errors import InvalidInput
from .ingest.stores import InMemoryStore
from .normalize.schema import NormalizedProfile
from .pipeline import RankingPipeline
from .rank.aggregate import select_top_matches
from .rank.fallback import FallbackCatalog

logger = logging.getLogger("jobrank.cli")


def cmd_recommend(args: argparse.Namespace) -> int:
    """Rank the fixture's postings for one user and write the JSON result."""
    settings = load_settings(args.config)
    if args.refine:
        settings = replace(settings, refine_enabled=True)
    if args.suggest_titles:
        settings = replace(settings, suggest_titles=True)
    if args.timeout is not None:
        settings = replace(settings, pipeline_timeout=args.timeout)
    store = InMemoryStore.from_file(args.data)
    pipeline = RankingPipeline(store, settings=settings)
    try:
        result = pipeline.get_recommendations(args.user, is_employer=args.employer)
    except InvalidInput as exc:
        logger.error("%s", exc)
        return 2
    payload = result.to_dict()
    if args.top:
        top = select_top_matches(result.candidates, limit=args.top)
        payload["topMatches"] = [c.id for c in top]
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("Wrote %d recommendations to %s", len(result.candidates), args.out)
    else:
        print(text)
    if result.soft_error:
        logger.warning("%s", result.soft_error)
    return 0


def cmd_catalog(args: argparse.Namespace) -> int:
    """Print the fallback catalog for the healthcare or general category."""
    catalog = FallbackCatalog.from_yaml(args.catalog)
    keywords = ("healthcare",) if args.healthcare else ()
    for entry in catalog.entries(NormalizedProfile(education_keywords=keywords)):
        job = entry.candidate
        print(f"{job.id}: {job.title} at {job.company} ({job.location})")
        print(f"   {entry.reason}")
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Print a ranked text report from a saved `recommend` result."""
    with open(args.matches, "r", encoding="utf-8") as f:
        data: Dict[str, object] = json.load(f)
    rows: List[Dict[str, object]] = list(data.get("candidates") or [])  # type: ignore[arg-type]
    limit = args.limit or len(rows)
    for i, row in enumerate(rows[:limit]):
        print(f"{i+1:02d}. {row['title']} at {row['company']} – score {row['score']}")
        print(f"   Reason: {row['primaryReason']}")
        if row.get("aiScore") is not None:
            print(f"   AI score: {row['aiScore']}")
        print()
    if data.get("softError"):
        print(f"Note: {data['softError']}")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jobrank", description="Job recommendation ranking CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rec_cmd = subparsers.add_parser("recommend", help="Rank postings for a user")
    rec_cmd.add_argument("--data", required=True, help="YAML/JSON fixture with profiles and postings")
    rec_cmd.add_argument("--user", required=True, help="User id to rank for")
    rec_cmd.add_argument("--employer", action="store_true", help="Rank as an employer")
    rec_cmd.add_argument("--refine", action="store_true", help="Refine the top results with an LLM")
    rec_cmd.add_argument("--suggest-titles", dest="suggest_titles", action="store_true",
                         help="Ask the LLM for job titles to report")
    rec_cmd.add_argument("--config", help="YAML settings file")
    rec_cmd.add_argument("--timeout", type=float, help="Whole-run deadline in seconds")
    rec_cmd.add_argument("--top", type=int, default=0, help="Also list this many top matches")
    rec_cmd.add_argument("--out", help="Output JSON path (default: stdout)")
    rec_cmd.set_defaults(func=cmd_recommend)

    cat_cmd = subparsers.add_parser("catalog", help="Print the fallback catalog")
    cat_cmd.add_argument("--healthcare", action="store_true", help="Show the healthcare list")
    cat_cmd.add_argument("--catalog", help="Alternative catalog YAML")
    cat_cmd.set_defaults(func=cmd_catalog)

    report_cmd = subparsers.add_parser("report", help="Generate a text report from a recommend result")
    report_cmd.add_argument("--matches", required=True, help="Path to recommend JSON output")
    report_cmd.add_argument("--limit", type=int, default=20, help="Number of results to display")
    report_cmd.set_defaults(func=cmd_report)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
