from __future__ import annotations

from autotag.core.vision.extract import completion_text, extract_json_object, parse_tagging_result
from tests.utils import DOG_REPLY, completion


def test_extracts_alt_and_tags_from_prose():
    r = parse_tagging_result(DOG_REPLY)
    assert r.ok
    assert r.value.alt_text == "a dog"
    assert r.value.tags == ("dog", "park")


def test_extracts_from_code_fence():
    text = 'Here you go:\n```json\n{"alt": "red barn", "tags": ["barn", "farm", "red"]}\n```\n'
    r = parse_tagging_result(text)
    assert r.ok
    assert r.value.tags == ("barn", "farm", "red")


def test_no_brace_pair_fails():
    r = parse_tagging_result("I cannot describe this image.")
    assert not r.ok
    assert r.status == "error"
    assert "no JSON object" in r.reason


def test_reversed_braces_fail():
    assert not extract_json_object("} nothing here {").ok


def test_missing_tags_property_fails():
    r = parse_tagging_result('{"alt": "a cat"}')
    assert not r.ok
    assert "tags" in r.reason


def test_non_string_alt_fails():
    assert not parse_tagging_result('{"alt": 3, "tags": []}').ok


def test_nested_object_inside_span_is_fine():
    r = parse_tagging_result('ok {"alt":"x","tags":["a"],"meta":{"k":1}} done')
    assert r.ok
    assert r.value.alt_text == "x"


def test_two_objects_are_not_supported():
    # brace span covers both objects, which is not valid JSON
    r = parse_tagging_result('A {"alt":"x","tags":[]} and then {"b":1}')
    assert not r.ok


def test_tags_are_trimmed_and_blank_dropped():
    r = parse_tagging_result('{"alt":" a dog ","tags":[" dog ", "", null]}')
    assert r.ok
    assert r.value.alt_text == "a dog"
    assert r.value.tags == ("dog",)


def test_non_string_tag_items_are_skipped():
    r = parse_tagging_result('{"alt":"a dog","tags":["dog", 7, {"a": 1}, ["park"], true, "grass"]}')
    assert r.ok
    assert r.value.tags == ("dog", "grass")


def test_completion_text_reads_first_choice():
    r = completion_text(completion(DOG_REPLY))
    assert r.ok
    assert r.value == DOG_REPLY


def test_completion_text_bad_shapes():
    assert not completion_text({}).ok
    assert not completion_text({"choices": []}).ok
    assert not completion_text({"choices": [{"message": {"content": None}}]}).ok
