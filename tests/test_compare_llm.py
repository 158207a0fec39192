import asyncio

import pytest

import pairrank.tasks.compare as compare
from pairrank.core.prompt_template import PromptTemplate, resolve_template
from pairrank.tasks.compare import CompareConfig, LLMComparator
from pairrank.tasks.merge_insertion import merge_insertion_sort
from pairrank.utils import openai_utils
from pairrank.utils.comparators import CheckedComparator
from pairrank.utils.parsing import safe_json


def test_prompt_template_renders_both_entries():
    tmpl = PromptTemplate.from_package("comparison_prompt.jinja2")
    text = tmpl.render(
        entry_circle="apples",
        entry_square="pears",
        criterion="tastiness",
        additional_instructions="",
        circle_first=False,
    )
    assert "apples" in text and "pears" in text
    assert "tastiness" in text
    assert text.index("pears") < text.index("apples")


def test_resolve_template_rejects_both_sources(tmp_path):
    path = tmp_path / "custom.jinja2"
    path.write_text("{{ entry_circle }} {{ entry_square }}", encoding="utf-8")
    with pytest.raises(ValueError):
        resolve_template(
            template=PromptTemplate("x"),
            template_path=str(path),
            reference_filename="comparison_prompt.jinja2",
        )


def test_custom_template_missing_entry_is_rejected(tmp_path):
    path = tmp_path / "custom.jinja2"
    path.write_text("Which is better? {{ entry_circle }}", encoding="utf-8")
    with pytest.raises(ValueError):
        LLMComparator(CompareConfig(use_dummy=True), template_path=str(path))


def test_custom_template_with_fewer_options_warns(tmp_path):
    path = tmp_path / "custom.jinja2"
    path.write_text("Pick one: {{ entry_circle }} or {{ entry_square }}", encoding="utf-8")
    with pytest.warns(UserWarning):
        comp = LLMComparator(CompareConfig(use_dummy=True), template_path=str(path))
    assert comp.build_prompt("x", "y", True) == "Pick one: x or y"


def test_safe_json_variants():
    assert safe_json('{"winner": "circle"}') == {"winner": "circle"}
    assert safe_json('```json\n{"winner": "square"}\n```') == {"winner": "square"}
    assert safe_json('Sure! {"winner": "square", "explanation": "x"} Done.')["winner"] == "square"
    assert safe_json("no json here") is None
    assert safe_json("") is None
    assert safe_json({"a": 1}) == {"a": 1}


def test_dummy_comparator_is_a_consistent_total_order():
    comp = LLMComparator(CompareConfig(use_dummy=True, seed=0))
    items = [f"passage {i}" for i in range(9)]
    checked = CheckedComparator(comp)
    first = asyncio.run(merge_insertion_sort(items, checked))
    second = asyncio.run(merge_insertion_sort(list(reversed(items)), LLMComparator(CompareConfig(use_dummy=True))))
    assert first == second
    assert sorted(first) == sorted(items)
    a, b = first[0], first[-1]
    assert asyncio.run(comp((a, b))) == 1
    assert asyncio.run(comp((b, a))) == 0


def test_llm_comparator_maps_verdicts(monkeypatch):
    prompts = []
    answers = iter(['{"winner": "circle"}', '{"winner": "Square", "explanation": "better"}'])

    async def fake_get_response(prompt, **kwargs):
        prompts.append((prompt, kwargs))
        return next(answers)

    monkeypatch.setattr(compare, "get_response", fake_get_response)
    comp = LLMComparator(CompareConfig(model="test-model", criterion="clarity", circle_first=True))
    assert asyncio.run(comp(("first", "second"))) == 0
    assert asyncio.run(comp(("third", "fourth"))) == 1
    assert prompts[0][1]["model"] == "test-model"
    assert "clarity" in prompts[0][0]
    assert prompts[0][0].index("first") < prompts[0][0].index("second")
    assert comp.history[("third", "fourth")]["winner"] == "fourth"
    assert comp.history[("third", "fourth")]["explanation"] == "better"


@pytest.mark.parametrize("raw", ['{"winner": "draw"}', "I cannot decide", '{"verdict": 1}'])
def test_llm_comparator_rejects_unusable_answers(monkeypatch, raw):
    async def fake_get_response(prompt, **kwargs):
        return raw

    monkeypatch.setattr(compare, "get_response", fake_get_response)
    comp = LLMComparator(CompareConfig())
    with pytest.raises(ValueError):
        asyncio.run(comp(("a", "b")))


def test_compare_config_cleans_text():
    cfg = CompareConfig(criterion="  ", additional_instructions="  be brief  ")
    assert cfg.criterion is None
    assert cfg.additional_instructions == "be brief"
    with pytest.raises(ValueError):
        CompareConfig(max_retries=-1)


def test_get_response_dummy():
    text = asyncio.run(openai_utils.get_response("hi", use_dummy=True))
    assert text.startswith("DUMMY")


def test_get_response_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        asyncio.run(openai_utils.get_response("hi"))


def test_get_response_retries_transient_errors(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    calls = []

    class DummyResponse:
        output_text = '{"winner": "circle"}'

    class DummyResponses:
        async def create(self, **params):
            calls.append(params)
            if len(calls) == 1:
                raise asyncio.TimeoutError()
            return DummyResponse()

    class DummyClient:
        responses = DummyResponses()

    async def no_sleep(delay):
        return None

    monkeypatch.setattr(openai_utils, "_get_client", lambda base_url=None: DummyClient())
    monkeypatch.setattr(openai_utils.asyncio, "sleep", no_sleep)
    text = asyncio.run(openai_utils.get_response("hi", model="m", max_retries=2))
    assert text == '{"winner": "circle"}'
    assert len(calls) == 2
    assert calls[0]["model"] == "m"
    assert calls[0]["text"] == {"format": {"type": "json_object"}}


def test_get_response_gives_up_after_retries(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    class DummyResponses:
        async def create(self, **params):
            raise asyncio.TimeoutError()

    class DummyClient:
        responses = DummyResponses()

    async def no_sleep(delay):
        return None

    monkeypatch.setattr(openai_utils, "_get_client", lambda base_url=None: DummyClient())
    monkeypatch.setattr(openai_utils.asyncio, "sleep", no_sleep)
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(openai_utils.get_response("hi", max_retries=1))
