import pytest

from pairrank.tasks.scores import as_ranked
from pairrank.utils.formatting import format_results_text, results_to_frame
from pairrank.utils.logging import get_logger, set_log_level


def test_format_results_text_groups_ties():
    results = as_ranked([("Alice", 0), ("Bob", 0), ("Carol", 1), ("Dave", 2)])
    assert format_results_text(results) == (
        "1. Dave\n"
        "2. Carol\n"
        "3. Tied:\n"
        "   - Alice\n"
        "   - Bob\n"
    )
    assert format_results_text([]) == ""


def test_results_to_frame_dense_ranks():
    df = results_to_frame(as_ranked([("a", 0), ("b", 1), ("c", 1), ("d", 2)]))
    assert df["identifier"].tolist() == ["d", "b", "c", "a"]
    assert df["rank"].tolist() == [1, 2, 2, 3]
    assert df["tied"].tolist() == [False, True, True, False]
    assert str(df["score"].dtype) == "int64"


def test_results_to_frame_leaves_input_alone():
    results = as_ranked([("b", 1), ("a", 0)])
    results_to_frame(results)
    assert [e.item for e in results] == ["b", "a"]
    assert results_to_frame([]).empty


def test_logging_helpers():
    logger = get_logger("tests")
    assert logger.name == "pairrank.tests"
    assert get_logger("pairrank.tasks").name == "pairrank.tasks"
    set_log_level("debug")
    assert get_logger("pairrank").level == 10
    set_log_level("WARNING")
    with pytest.raises(ValueError):
        set_log_level("chatty")
