import asyncio

import pandas as pd
import pytest

import pairrank.cli.__main__ as cli
from pairrank.cli.interactive import ConsoleComparator, ask_yes_no, parse_items


class ScriptedPerson:
    """Answers every question by preferring the alphabetically later item."""

    def __init__(self, replies_before_valid=()):
        self.lines = []
        self.prompts = []
        self.pending = list(replies_before_valid)

    def output(self, text):
        self.lines.append(text)

    def input_func(self, prompt):
        self.prompts.append(prompt)
        if self.pending:
            return self.pending.pop(0)
        options = [line[len("  [1] "):] for line in self.lines if line.startswith("  [")][-2:]
        return "2" if options[1] > options[0] else "1"


def test_parse_items():
    assert parse_items(["  a ", "", "b", "   ", "c\n"]) == ["a", "b", "c"]


def test_console_comparator_reprompts_on_bad_answer():
    person = ScriptedPerson(replies_before_valid=["maybe", ""])
    comp = ConsoleComparator(input_func=person.input_func, output=person.output)
    assert asyncio.run(comp(("pear", "apple"))) == 0
    assert comp.asked == 1
    assert "Make your choice (1):" in person.lines[0]
    assert person.lines[1:3] == ["  [1] pear", "  [2] apple"]
    assert person.lines.count("Please answer 1 (or a) or 2 (or b).") == 2
    assert len(person.prompts) == 3


@pytest.mark.parametrize(
    "answers, expected",
    [(["y"], True), (["YES"], True), ([""], False), (["n"], False), (["what", "y"], True)],
)
def test_ask_yes_no(answers, expected):
    replies = iter(answers)
    said = []
    assert asyncio.run(ask_yes_no("Break ties?", lambda prompt: next(replies), said.append)) is expected
    assert len(said) == len(answers) - 1


def test_cli_with_a_person(monkeypatch, capsys):
    person = ScriptedPerson()
    monkeypatch.setattr(
        cli,
        "ConsoleComparator",
        lambda: ConsoleComparator(input_func=person.input_func, output=person.output),
    )
    assert cli.main(["-i", "kiwi", "-i", "apple", "-i", "mango"]) == 0
    out = capsys.readouterr().out
    assert "Ranking 3 items; 3 comparisons." in out
    assert out.endswith("Results:\n1. mango\n2. kiwi\n3. apple\n(3 comparisons)\n")


def test_cli_merge_insertion_from_file(monkeypatch, capsys, tmp_path):
    person = ScriptedPerson()
    monkeypatch.setattr(
        cli,
        "ConsoleComparator",
        lambda: ConsoleComparator(input_func=person.input_func, output=person.output),
    )
    items = tmp_path / "items.txt"
    items.write_text("d\n\nb\na\n  e  \nc\n", encoding="utf-8")
    assert cli.main([str(items), "--method", "merge-insertion"]) == 0
    out = capsys.readouterr().out
    assert "at most 7 comparisons" in out
    assert "Results:\n1. e\n2. d\n3. c\n4. b\n5. a\n" in out


def test_cli_llm_dummy_writes_csv(capsys, tmp_path):
    target = tmp_path / "nested" / "ranks.csv"
    code = cli.main(
        ["-i", "one", "-i", "two", "-i", "three", "--llm", "--dummy", "-o", str(target)]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "(3 comparisons)" in out
    saved = pd.read_csv(target)
    assert sorted(saved["identifier"]) == ["one", "three", "two"]
    assert saved["rank"].tolist() == [1, 2, 3]


def test_cli_rejects_duplicates(capsys):
    assert cli.main(["-i", "A", "-i", "B", "-i", "A", "--llm", "--dummy"]) == 2
    assert "duplicates" in capsys.readouterr().err


def test_cli_needs_two_items(capsys):
    assert cli.main(["-i", "A", "--llm", "--dummy"]) == 2
    assert "at least two items" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as info:
        cli.main(["--version"])
    assert info.value.code == 0
    assert "pairrank" in capsys.readouterr().out
