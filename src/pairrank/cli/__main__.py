"""Command line interface for pairrank.

Items come from a file (one per line), from repeated ``--item`` options or,
failing both, are typed in at the terminal.  By default you are the
comparator: every question shows two items and you pick one.  With ``--llm``
a language model answers instead.  The final ranking is printed as a
numbered list, with tied items grouped together.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from pairrank import __version__
from pairrank.core.errors import PairRankError
from pairrank.tasks.compare import CompareConfig, LLMComparator
from pairrank.tasks.merge_insertion import merge_insertion_max_comparisons
from pairrank.tasks.rank import Rank, RankConfig
from pairrank.tasks.scores import ensure_unique
from pairrank.utils.combinatorics import compare_all_comparisons
from pairrank.utils.formatting import format_results_text
from pairrank.utils.logging import set_log_level
from .interactive import ConsoleComparator, ask_yes_no, parse_items


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairrank",
        description=(
            "Rank a list of items by answering which of two is better. "
            "Use the Python API for full control."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show the installed pairrank version and exit.",
    )
    parser.add_argument(
        "items_file",
        nargs="?",
        help="File with one item per line. Blank lines are ignored.",
    )
    parser.add_argument(
        "-i",
        "--item",
        action="append",
        default=[],
        help="An item to rank; may be repeated.",
    )
    parser.add_argument(
        "--method",
        choices=["compare-all", "merge-insertion"],
        default="compare-all",
        help=(
            "compare-all asks about every pair and can report ties; "
            "merge-insertion asks far fewer questions."
        ),
    )
    parser.add_argument(
        "--no-break-ties",
        action="store_true",
        help="Report ties instead of offering to break them.",
    )
    parser.add_argument(
        "--max-tie-rounds",
        type=int,
        default=3,
        help="Maximum number of tie-breaking rounds (default: 3).",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Break ties without asking first.",
    )
    parser.add_argument("--llm", action="store_true", help="Let a language model decide.")
    parser.add_argument("--model", default="gpt-5-mini", help="Model used with --llm.")
    parser.add_argument("--criterion", help="What 'better' means, used with --llm.")
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="With --llm, answer with a deterministic stand-in instead of the API.",
    )
    parser.add_argument("-o", "--output", help="Also write the rankings to this CSV file.")
    parser.add_argument("--log-level", help="Logging level, e.g. INFO or DEBUG.")
    return parser


def _collect_items(args: argparse.Namespace) -> List[str]:
    items: List[str] = []
    if args.items_file:
        if args.items_file == "-":
            items.extend(parse_items(sys.stdin))
        else:
            text = Path(args.items_file).read_text(encoding="utf-8")
            items.extend(parse_items(text.splitlines()))
    items.extend(parse_items(args.item))
    if items:
        return items
    if args.llm and not sys.stdin.isatty():
        return parse_items(sys.stdin)
    print("Enter the items to compare, one per line; finish with an empty line.")
    while True:
        line = input("> ").strip()
        if not line:
            return items
        items.append(line)


async def _run(args: argparse.Namespace, items: List[str]) -> int:
    method = args.method.replace("-", "_")
    if args.llm:
        comparator = LLMComparator(
            CompareConfig(model=args.model, criterion=args.criterion, use_dummy=args.dummy)
        )
        confirm = None
    else:
        comparator = ConsoleComparator()
        confirm = None if args.yes else (lambda _results: ask_yes_no("Break ties?"))

    if method == "merge_insertion":
        estimate = merge_insertion_max_comparisons(len(items))
        print(f"Ranking {len(items)} items; at most {estimate} comparisons.")
    else:
        estimate = compare_all_comparisons(len(items))
        print(f"Ranking {len(items)} items; {estimate} comparisons.")

    def _confirm_with_listing(results):
        print("\nResults so far:")
        print(format_results_text(results), end="")
        return confirm(results) if confirm is not None else True

    output = Path(args.output) if args.output else None
    cfg = RankConfig(
        method=method,
        break_ties=not args.no_break_ties,
        max_tie_rounds=args.max_tie_rounds,
        save_dir=str(output.parent) if output else None,
        file_name=output.name if output else "rankings.csv",
        show_progress=args.llm,
    )
    ranker = Rank(cfg)
    await ranker.run(items, comparator, confirm_tie_break=_confirm_with_listing)
    results = ranker.last_results
    print("\nResults:")
    print(format_results_text(results), end="")
    print(f"({ranker.last_comparisons} comparisons)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    try:
        items = _collect_items(args)
        if len(items) < 2:
            print("Please enter at least two items.", file=sys.stderr)
            return 2
        ensure_unique(items)
        return asyncio.run(_run(args, items))
    except PairRankError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (KeyboardInterrupt, EOFError):
        print("\nAborted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
