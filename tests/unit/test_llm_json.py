"""Tests for JSON array extraction from LLM responses."""

import pytest

from utils.errors import GenerationError
from utils.llm_json import extract_json_array


def test_bare_array():
    assert extract_json_array('[{"id": "q1"}]') == [{"id": "q1"}]


def test_fenced_json_block():
    text = 'Here you go:\n```json\n[{"id": "q1"}, {"id": "q2"}]\n```\nGood luck!'
    assert extract_json_array(text) == [{"id": "q1"}, {"id": "q2"}]


def test_plain_fence_without_language():
    text = '```\n[1, 2, 3]\n```'
    assert extract_json_array(text) == [1, 2, 3]


def test_array_surrounded_by_prose():
    text = 'Sure! Here are the questions: [{"id": "q1", "text": "hi"}] Let me know if you need more.'
    assert extract_json_array(text) == [{"id": "q1", "text": "hi"}]


def test_brackets_inside_strings_do_not_end_the_array():
    text = 'Output: [{"text": "Return arr[i] where ] is not special"}] trailing ] text'
    assert extract_json_array(text) == [{"text": "Return arr[i] where ] is not special"}]


def test_escaped_quotes_inside_strings():
    text = '[{"text": "Say \\"hello]\\" twice"}]'
    assert extract_json_array(text) == [{"text": 'Say "hello]" twice'}]


def test_fence_containing_prose_falls_back_to_inner_array():
    text = '```json\nQuestions follow: [{"id": "q1"}]\n```'
    assert extract_json_array(text) == [{"id": "q1"}]


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "I cannot help with that.",
    "[not, valid, json",
    '{"questions": "none"}',
    "```json\n{broken\n```",
])
def test_unusable_responses_raise(text):
    with pytest.raises(GenerationError):
        extract_json_array(text)


def test_array_nested_in_object_is_found():
    assert extract_json_array('{"questions": [{"id": "q1"}]}') == [{"id": "q1"}]
