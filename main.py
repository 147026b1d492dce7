"""CLI entry point for TalentScope."""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from talentscope.core.config import Settings
from talentscope.core.errors import TalentScopeError
from talentscope.github.client import GitHubClient
from talentscope.llm import build_provider
from talentscope.llm.base import LLMProvider
from talentscope.matching.scorer import CompatibilityScorer
from talentscope.pipeline.search import export_report_json, run_search
from talentscope.profile.aggregator import ProfileAggregator
from talentscope.profile.summary import summarize_profile
from talentscope.requirements.interpreter import RequirementInterpreter

_TEXT_SUFFIXES = {".txt", ".md", ""}


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def _add_requirement_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Job requirements as free text")
    source.add_argument(
        "--file",
        help="Job description file (.txt/.md, or PDF/image for document extraction)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="TalentScope - rank GitHub developers against job requirements",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- interpret subcommand ---
    interpret_parser = subparsers.add_parser(
        "interpret",
        help="Interpret job requirements into structured JSON",
    )
    _add_requirement_source(interpret_parser)
    _add_common(interpret_parser)

    # --- profile subcommand ---
    profile_parser = subparsers.add_parser(
        "profile",
        help="Aggregate a GitHub user's public activity into a profile",
    )
    profile_parser.add_argument("handle", help="GitHub username")
    profile_parser.add_argument(
        "--summary",
        action="store_true",
        help="Also generate an LLM-written profile summary",
    )
    _add_common(profile_parser)

    # --- search subcommand ---
    search_parser = subparsers.add_parser(
        "search",
        help="Rank candidates against job requirements",
    )
    _add_requirement_source(search_parser)
    candidates = search_parser.add_mutually_exclusive_group(required=True)
    candidates.add_argument("--handles", nargs="+", help="GitHub usernames to evaluate")
    candidates.add_argument("--query", help="GitHub user-search query to find candidates")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum candidates taken from --query (default: 10)",
    )
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_common(search_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str | None) -> Settings:
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def _require_provider(settings: Settings) -> LLMProvider:
    provider = build_provider(settings.reasoning)
    if provider is None:
        msg = "reasoning.enabled is false; requirement interpretation needs an LLM provider"
        raise ValueError(msg)
    return provider


async def _requirement_text(args: argparse.Namespace, interpreter: RequirementInterpreter) -> str:
    """Resolve --text/--file into requirement text, extracting documents when needed."""
    if args.text is not None:
        return str(args.text)
    path = Path(args.file)
    if not path.exists():
        msg = f"Requirements file not found: {path}"
        raise FileNotFoundError(msg)
    if path.suffix.lower() in _TEXT_SUFFIXES:
        return path.read_text()
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    extraction = await interpreter.interpret_document(path.read_bytes(), media_type)
    lines = [extraction.summary, "Skills: " + ", ".join(extraction.skills)]
    lines.extend(f"- {req}" for req in extraction.requirements)
    return "\n".join(lines)


async def cmd_interpret(args: argparse.Namespace, settings: Settings) -> None:
    """Handle interpret subcommand."""
    interpreter = RequirementInterpreter(_require_provider(settings))
    text = await _requirement_text(args, interpreter)
    requirement = await interpreter.interpret_requirements(text)
    print(requirement.model_dump_json(indent=2))


async def cmd_profile(args: argparse.Namespace, settings: Settings) -> None:
    """Handle profile subcommand."""
    async with GitHubClient(settings.github) as client:
        profile = await ProfileAggregator(client, settings.github).build_profile(args.handle)

    print(profile.model_dump_json(indent=2, exclude={"readme"}))
    if args.summary:
        print(f"\nSummary: {await summarize_profile(profile, _require_provider(settings))}")


async def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search subcommand."""
    provider = _require_provider(settings)
    interpreter = RequirementInterpreter(provider)
    scorer = CompatibilityScorer(settings.scoring, provider)
    text = await _requirement_text(args, interpreter)

    async with GitHubClient(settings.github) as client:
        handles = args.handles or await client.search_users(args.query, per_page=args.limit)
        print(f"Evaluating {len(handles)} candidates...")
        aggregator = ProfileAggregator(client, settings.github)
        report = await run_search(text, handles, interpreter, aggregator, scorer)

    if args.export == "json":
        print(export_report_json(report))
        return

    req = report.requirement
    print(f"\nRequirement: {req.experience_level} | {', '.join(req.skills) or 'no skills'}")
    print(f"Scoring mode: {report.scoring_mode}\n")
    for rank, match in enumerate(report.matches, start=1):
        print(f"{rank:>2}. {match.handle:<24} {match.score:>5.1f}  {match.reasoning}")
    for handle, reason in report.profile_errors.items():
        print(f"  skipped {handle}: {reason}")


_COMMANDS = {
    "interpret": cmd_interpret,
    "profile": cmd_profile,
    "search": cmd_search,
}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(_COMMANDS[args.command](args, settings))
    except (TalentScopeError, FileNotFoundError, ImportError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
