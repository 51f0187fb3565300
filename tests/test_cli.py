"""
End-to-end tests for the terminal front end, with the interactive prompt
replaced by an automated oracle or by scripted answers to the terminal prompt.
"""

from __future__ import annotations

import pathlib
import sys

import pytest

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from tiersort import cli
from tiersort.store import ListStore
from tiersort.validate import make_oracle


@pytest.fixture
def auto_answer(monkeypatch):
    monkeypatch.setattr(cli, "_prompt_oracle", lambda engine, console: make_oracle())


def _write(path: pathlib.Path, lines) -> pathlib.Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_rank_saves_sorted_list_with_tiers(tmp_path: pathlib.Path, auto_answer) -> None:
    items = _write(tmp_path / "snacks.txt", ["pretzel", "apple", "crisps", "banana"])
    store_dir = tmp_path / "store"

    code = cli.main(["rank", str(items), "--store", str(store_dir), "--owner", "u1"])
    assert code == 0

    [doc] = ListStore(store_dir).list_by_owner("u1")
    assert doc.list_name == "snacks"
    assert doc.sorted_items == ["apple", "banana", "crisps", "pretzel"]
    assert [g.tier for g in doc.tiered_items] == ["S", "A", "B", "C", "D", "F"]
    assert sum(len(g.items) for g in doc.tiered_items) == 4
    assert doc.completed is True


def test_rank_from_saved_list_inserts_new_items(tmp_path: pathlib.Path, auto_answer) -> None:
    store_dir = tmp_path / "store"
    first = _write(tmp_path / "first.txt", ["c", "a", "e"])
    assert cli.main(["rank", str(first), "--store", str(store_dir), "--owner", "u1", "--name", "letters"]) == 0
    [doc] = ListStore(store_dir).list_by_owner("u1")

    more = _write(tmp_path / "more.txt", ["d", "b", "a"])
    assert cli.main(["rank", str(more), "--store", str(store_dir), "--from-list", doc.id]) == 0

    updated = ListStore(store_dir).get(doc.id)
    assert updated.items == ["c", "a", "e", "d", "b"]
    assert updated.sorted_items == ["a", "b", "c", "d", "e"]


def _scripted_answers(monkeypatch, answers):
    """Feed `answers` to the real prompt oracle in order; return the questions it asked."""
    queue = list(answers)
    asked = []

    def _ask(prompt, *args, **kwargs):
        asked.append(kwargs.get("choices"))
        return queue.pop(0)

    monkeypatch.setattr(cli.Prompt, "ask", _ask)
    return asked


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("a", ["pear", "fig"]),
        ("b", ["fig", "pear"]),
        ("=", ["pear", "fig"]),
    ],
)
def test_prompt_answers_map_to_decisions(tmp_path: pathlib.Path, monkeypatch, answer, expected) -> None:
    asked = _scripted_answers(monkeypatch, [answer])
    items = _write(tmp_path / "fruit.txt", ["pear", "fig"])
    store_dir = tmp_path / "store"

    assert cli.main(["rank", str(items), "--store", str(store_dir), "--owner", "u1"]) == 0
    assert asked == [["a", "b", "=", "q"]]
    [doc] = ListStore(store_dir).list_by_owner("u1")
    assert doc.sorted_items == expected


def test_quit_cancels_without_saving(tmp_path: pathlib.Path, monkeypatch) -> None:
    asked = _scripted_answers(monkeypatch, ["a", "q"])
    items = _write(tmp_path / "x.txt", ["c", "b", "a"])
    store_dir = tmp_path / "store"

    assert cli.main(["rank", str(items), "--store", str(store_dir), "--owner", "u1"]) == 1
    assert len(asked) == 2
    assert ListStore(store_dir).list_by_owner("u1") == []


def test_rank_needs_two_items(tmp_path: pathlib.Path, auto_answer) -> None:
    items = _write(tmp_path / "one.txt", ["solo", "solo"])
    with pytest.raises(SystemExit):
        cli.main(["rank", str(items)])


def test_show_and_lists(tmp_path: pathlib.Path, auto_answer, capsys) -> None:
    store_dir = tmp_path / "store"
    items = _write(tmp_path / "abc.txt", ["b", "c", "a"])
    assert cli.main(["rank", str(items), "--store", str(store_dir), "--owner", "u1"]) == 0
    [doc] = ListStore(store_dir).list_by_owner("u1")

    assert cli.main(["lists", "--store", str(store_dir), "--owner", "u1"]) == 0
    assert cli.main(["show", doc.id, "--store", str(store_dir)]) == 0
    assert cli.main(["show", "missing", "--store", str(store_dir)]) == 2
