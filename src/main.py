# src/main.py — v2
"""CLI entry point — ask, research, analyze-contract, status, clear-cache.

Usage:
    lexassist ask "<question>"
    lexassist research "<query>" [--jurisdiction ontario] [--practice-area family]
    lexassist analyze-contract <file> [--jurisdiction Canada] [--type lease]
    lexassist status
    lexassist clear-cache
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from lexassist.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="lexassist",
        description=f"lexassist v{__version__} — Canadian legal information assistant",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- ask ---
    p_ask = subparsers.add_parser("ask", help="Ask the chat assistant a question")
    p_ask.add_argument("message", help="Question to ask")
    p_ask.set_defaults(func=_cmd_ask)

    # --- research ---
    p_research = subparsers.add_parser("research", help="Run a legal research query")
    p_research.add_argument("query", help="Research question")
    p_research.add_argument(
        "--jurisdiction", default="canada",
        help="Jurisdiction code, e.g. canada, ontario, bc (default: canada)",
    )
    p_research.add_argument(
        "--practice-area", default="all",
        help="Practice area, e.g. family, criminal (default: all)",
    )
    p_research.set_defaults(func=_cmd_research)

    # --- analyze-contract ---
    p_contract = subparsers.add_parser(
        "analyze-contract", help="Analyze a contract file (.txt, .md, .pdf)",
    )
    p_contract.add_argument("file", type=Path, help="Path to contract")
    p_contract.add_argument(
        "--jurisdiction", default="Canada",
        help="Governing jurisdiction (default: Canada)",
    )
    p_contract.add_argument(
        "-t", "--type", dest="contract_type", default="general",
        help="Contract type, e.g. lease, employment (default: general)",
    )
    p_contract.set_defaults(func=_cmd_analyze_contract)

    # --- status ---
    p_status = subparsers.add_parser("status", help="Show flags and cache statistics")
    p_status.set_defaults(func=_cmd_status)

    # --- clear-cache ---
    p_clear = subparsers.add_parser("clear-cache", help="Empty the response caches")
    p_clear.set_defaults(func=_cmd_clear_cache)

    return parser


async def _cmd_ask(args: argparse.Namespace) -> int:
    from lexassist.api.facade import LegalAIService

    async with LegalAIService() as service:
        print(await service.generate_chat_response(args.message))
    return 0


async def _cmd_research(args: argparse.Namespace) -> int:
    from lexassist.api.facade import LegalAIService

    async with LegalAIService() as service:
        result = await service.enhanced_legal_research(
            args.query, args.jurisdiction, args.practice_area,
        )
    _print_json(result.to_wire())
    return 0


async def _cmd_analyze_contract(args: argparse.Namespace) -> int:
    """Extract and analyze a single contract."""
    from lexassist.api.facade import LegalAIService

    file_path: Path = args.file
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        return 1

    logger.info("Analyzing %s (%s)", file_path.name, args.contract_type)
    async with LegalAIService() as service:
        result = await service.analyze_contract_file(
            file_path, args.jurisdiction, args.contract_type,
        )
    _print_json(result.to_wire())
    return 0


async def _cmd_status(args: argparse.Namespace) -> int:
    from lexassist.api.facade import LegalAIService

    async with LegalAIService() as service:
        status = await service.status()
    _print_json(status.model_dump(by_alias=True))
    return 0


async def _cmd_clear_cache(args: argparse.Namespace) -> int:
    from lexassist.api.facade import LegalAIService

    async with LegalAIService() as service:
        result = await service.clear_cache()
    print(result.message)
    return 0


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
