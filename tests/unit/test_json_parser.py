"""Tests for JSON parser."""

from src.utils.json_parser import JSONParser


def test_extract_json_simple():
    """Test extracting simple JSON."""
    text = '{"key": "value"}'
    result = JSONParser.extract_json(text)
    assert result == {"key": "value"}


def test_extract_json_in_code_block():
    """Test extracting JSON from code block."""
    text = 'Here is the analysis:\n```json\n{"key": "value"}\n```'
    result = JSONParser.extract_json(text)
    assert result == {"key": "value"}


def test_extract_json_in_answer_tags():
    """Test extracting JSON from answer tags."""
    text = '<answer>{"key": "value"}</answer>'
    result = JSONParser.extract_json(text)
    assert result == {"key": "value"}


def test_extract_json_with_surrounding_prose():
    text = 'Sure. {"domainAnalysis": {"partnerships": {"confidence": 0.7}}} Let me know.'
    result = JSONParser.extract_json(text)
    assert result == {"domainAnalysis": {"partnerships": {"confidence": 0.7}}}


def test_extract_json_invalid():
    """Test extracting invalid JSON returns None."""
    assert JSONParser.extract_json("not json at all") is None
    assert JSONParser.extract_json("") is None
    assert JSONParser.extract_json(None) is None


def test_extract_json_rejects_non_objects():
    assert JSONParser.extract_json("[1, 2, 3]") is None
