"""
CLI Entry Point: Extract candidate profiles from LinkedIn search results

Usage:
    python scripts/extract_profiles.py --query "Account Executive" --query "Stockholm"
    python scripts/extract_profiles.py --input results.json --output-csv profiles.csv
    python scripts/extract_profiles.py --input results.json --no-llm --criteria "saas, klarna"
    python scripts/extract_profiles.py --input results.json --reextract

``--input`` takes either a Custom Search response (``{"items": [...]}``) or a
plain list of ``{title, snippet, link}`` objects.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.common.config import Config
from src.common.logger import set_global_debug_mode, setup_logging
from src.common.rate_limiter import Provider, get_rate_limiter
from src.extraction.export import profiles_to_csv, profiles_to_json
from src.extraction.pipeline import ExtractionPipeline, default_strategies
from src.extraction.scoring import process_criteria_items, score_profile, sort_profiles_by_relevance
from src.extraction.store import get_profile_store
from src.extraction.types import SearchResultItem
from src.services.google_search import GoogleCustomSearchClient, build_query


def load_items(input_path: str) -> List[SearchResultItem]:
    """Load search items from a JSON file."""
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Search results not found: {input_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    raw_items = data.get("items", []) if isinstance(data, dict) else data
    if not isinstance(raw_items, list):
        raise ValueError(f"Expected a list of search items in {input_path}")
    return [SearchResultItem.from_api(raw) for raw in raw_items if isinstance(raw, dict)]


def write_output(path: str, content: str) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    print(f"  ✓ Wrote {output}")


def main():
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Extract name, title and company from LinkedIn search results"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        help="JSON file with search results"
    )
    source.add_argument(
        "--query",
        action="append",
        help="Requirement phrase for a site:linkedin.com/in search (repeatable, joined with AND)"
    )
    parser.add_argument("--output-csv", help="Write profiles as CSV")
    parser.add_argument("--output-json", help="Write profiles as JSON")
    parser.add_argument(
        "--cache",
        default=Config.PROFILE_CACHE_PATH,
        help="Profile cache file (empty string for no cache)"
    )
    parser.add_argument("--no-llm", action="store_true", help="Heuristics only, no LLM fallback")
    parser.add_argument("--no-placeholders", action="store_true", help="Leave unnamed profiles blank")
    parser.add_argument("--force", action="store_true", help="Ignore cached profiles")
    parser.add_argument("--clear-cache", action="store_true", help="Empty the profile cache first")
    parser.add_argument("--reextract", action="store_true", help="Re-run only the LLM tier on every item")
    parser.add_argument("--criteria", help="Comma-separated criteria to rank profiles by")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    set_global_debug_mode(args.debug)
    setup_logging("DEBUG" if args.debug else "INFO")

    if args.no_llm:
        Config.ENABLE_LLM_FALLBACK = False

    try:
        print("🔍 Validating configuration...")
        Config.validate(require_search=bool(args.query))
        print("✅ Configuration valid\n")

        if args.query:
            query = build_query(args.query)
            print(f"Searching: {query}")
            run = GoogleCustomSearchClient().search([query])
            items = run.items
            for message in run.errors.get_error_messages():
                print(f"  ⚠️  {message}")
            remaining = get_rate_limiter(Provider.GOOGLE_CSE).remaining_today()
            if remaining is not None:
                print(f"  Custom Search queries left today: {remaining}")
        else:
            items = load_items(args.input)
        print(f"✓ {len(items)} search item(s)\n")

        store = get_profile_store(args.cache)
        if args.clear_cache:
            store.clear()
            print("✓ Profile cache cleared\n")

        pipeline = ExtractionPipeline(
            strategies=default_strategies(use_llm=not args.no_llm),
            store=store,
            use_placeholders=not args.no_placeholders,
        )
        if args.reextract:
            result = pipeline.reextract_with_llm(items)
        else:
            result = pipeline.extract_all(items, force_refresh=args.force)

        profiles = result.profiles
        criteria = process_criteria_items(args.criteria or "")
        if criteria:
            profiles = sort_profiles_by_relevance(profiles, criteria)

        print("\n" + "=" * 70)
        print("📊 EXTRACTED PROFILES")
        print("=" * 70)
        for i, profile in enumerate(profiles, 1):
            marker = " (placeholder)" if profile.is_synthetic else ""
            score = f" score={score_profile(criteria, profile):.2f}" if criteria else ""
            print(f"  {i}. {profile.name}{marker} | {profile.title or '-'} | {profile.company or '-'}{score}")
            print(f"     {profile.url}")

        summary = result.summary()
        print(f"\nBy source: {summary['by_source']}")
        if result.rate_limited:
            print("⚠️  LLM rate limit hit: some profiles kept heuristic results only")
        if result.errors:
            print("\n⚠️  Warnings:")
            for message in result.errors.get_error_messages():
                print(f"  - {message}")

        if args.output_csv:
            write_output(args.output_csv, profiles_to_csv(profiles))
        if args.output_json:
            write_output(args.output_json, profiles_to_json(profiles))

        print("=" * 70)
        print("\n✅ Extraction complete!")

    except Exception as e:
        print(f"\n❌ ERROR: {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
