"""
Interactive terminal front end.

Usage:
    tiersort rank items.txt [--name NAME] [--tiers tiers.yaml] [--store DIR --owner USER]
    tiersort rank new_items.txt --from-list ID --store DIR --owner USER
    tiersort lists --store DIR --owner USER
    tiersort show ID --store DIR [--tiers tiers.yaml]

`rank` asks one comparison at a time ("a", "b", "=" for a tie, "q" to quit),
then prints the ranked list split into tiers. With `--from-list` the saved
list's sorted items are the base and only the new labels are inserted.
"""

from __future__ import annotations

import argparse
import asyncio
import datetime as _dt
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt
from rich.table import Table

from tiersort.config import TierConfig, default_tier_config, load_tier_config
from tiersort.datasets import read_items, unique_labels
from tiersort.engine import Decision, SortEngine, run_with_oracle
from tiersort.store import ListStore, SortedList
from tiersort.tiers import TierGroup, partition

log = logging.getLogger(__name__)

_console = Console()

_CHOICES = {"a": Decision.A, "b": Decision.B, "=": Decision.EQUAL}


class _Quit(Exception):
    """Raised by the prompt oracle when the user types 'q'."""


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True)],
    )


def _prompt_oracle(engine: SortEngine, console: Console) -> Callable[[str, str], Decision]:
    def _ask(item_a: str, item_b: str) -> Decision:
        st = engine.state
        console.print(
            f"[dim]{st.completed_comparisons}/{st.total_comparisons} "
            f"({min(st.progress, 100)}%)[/]"
        )
        console.print(f"  [bold cyan]a[/] {item_a}")
        console.print(f"  [bold magenta]b[/] {item_b}")
        choice = Prompt.ask("Which ranks higher?", choices=["a", "b", "=", "q"], console=console)
        if choice == "q":
            raise _Quit()
        return _CHOICES[choice]

    return _ask


def _load_tiers(path: Optional[str]) -> TierConfig:
    return load_tier_config(Path(path)) if path else default_tier_config()


def _print_tiers(groups: Sequence[TierGroup], title: str) -> None:
    table = Table(title=title)
    table.add_column("Tier", style="bold")
    table.add_column("Items")
    for g in groups:
        table.add_row(g.tier, ", ".join(g.items) if g.items else "[dim]-[/]")
    _console.print(table)


def _format_ms(ms: int) -> str:
    return _dt.datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


# ------------------------- commands ------------------------- #

def cmd_rank(args: argparse.Namespace) -> int:
    tiers = _load_tiers(args.tiers)
    new_items = read_items(Path(args.items))

    store = ListStore(Path(args.store)) if args.store else None
    doc: Optional[SortedList] = None
    base: List[str] = []
    if args.from_list:
        if store is None:
            raise SystemExit("--from-list requires --store")
        doc = store.get(args.from_list)
        base = list(doc.sorted_items or [])
        items = unique_labels(list(doc.items) + new_items)
    else:
        items = new_items
    if store is not None and doc is None and not args.owner:
        raise SystemExit("--store requires --owner to save")

    if len(items) < 2:
        raise SystemExit("Need at least two unique items to rank")

    log.debug("ranking %d items, %d already sorted", len(items), len(base))
    engine = SortEngine()
    try:
        ordered = asyncio.run(run_with_oracle(engine, items, _prompt_oracle(engine, _console), base))
    except _Quit:
        _console.print("[yellow]Sort cancelled.[/yellow]")
        return 1

    groups = partition(ordered, tiers.percentages, tiers.names)
    name = args.name or (doc.list_name if doc else Path(args.items).stem)
    _print_tiers(groups, title=name)

    if store is not None:
        if doc is not None:
            doc.items = items
            doc.sorted_items = ordered
            doc.tiered_items = groups
            doc.completed = True
            saved = store.update(doc)
        else:
            saved = store.create(
                SortedList(
                    list_name=name,
                    items=items,
                    user_id=args.owner,
                    sorted_items=ordered,
                    tiered_items=groups,
                    completed=True,
                )
            )
        _console.print(f"[bold green]Saved[/bold green] {saved.id}")
    return 0


def cmd_lists(args: argparse.Namespace) -> int:
    store = ListStore(Path(args.store))
    table = Table(title=f"Lists owned by {args.owner}")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Items", justify="right")
    table.add_column("Created")
    for doc in store.list_by_owner(args.owner):
        table.add_row(doc.id, doc.list_name, str(len(doc.items)), _format_ms(doc.created_at))
    _console.print(table)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    doc = ListStore(Path(args.store)).get(args.list_id)
    if args.tiers or doc.tiered_items is None:
        tiers = _load_tiers(args.tiers)
        groups = partition(doc.sorted_items or [], tiers.percentages, tiers.names)
    else:
        groups = doc.tiered_items
    _print_tiers(groups, title=doc.list_name)
    return 0


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tiersort", description="Rank a list by pairwise comparisons and split it into tiers.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("rank", help="Rank items from a text file (one per line)")
    r.add_argument("items", type=str, help="Path to a text file of items")
    r.add_argument("--name", type=str, default=None, help="List name (default: file stem)")
    r.add_argument("--tiers", type=str, default=None, help="Path to a YAML tier config")
    r.add_argument("--store", type=str, default=None, help="Directory of saved lists")
    r.add_argument("--owner", type=str, default=None, help="Owner id for saved lists")
    r.add_argument("--from-list", type=str, default=None, help="Insert items into a saved list")
    r.set_defaults(func=cmd_rank)

    ls = sub.add_parser("lists", help="List saved lists for an owner")
    ls.add_argument("--store", type=str, required=True)
    ls.add_argument("--owner", type=str, required=True)
    ls.set_defaults(func=cmd_lists)

    s = sub.add_parser("show", help="Show a saved list as tiers")
    s.add_argument("list_id", type=str)
    s.add_argument("--store", type=str, required=True)
    s.add_argument("--tiers", type=str, default=None, help="Recompute tiers with this config")
    s.set_defaults(func=cmd_show)

    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.func(args)
    except (KeyError, ValueError, OSError) as e:
        _console.print(f"[bold red]tiersort failed:[/bold red] {e!r}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
