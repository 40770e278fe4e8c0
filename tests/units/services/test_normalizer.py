"""Unit tests for the AnalysisResponseNormalizer."""

from pathlib import Path

import pytest
from licitasaas.exceptions.analysis import MalformedResponseError
from licitasaas.services.normalizer import (
    AnalysisResponseNormalizer,
    closing_suffix,
    repair_json_text,
    slice_object_span,
    strip_code_fences,
)


@pytest.fixture
def dump_path(tmp_path: Path) -> Path:
    return tmp_path / "uploads" / "failed-json-dump.txt"


@pytest.fixture
def normalizer(dump_path: Path) -> AnalysisResponseNormalizer:
    return AnalysisResponseNormalizer(dump_path)


def test_strip_code_fences_is_case_insensitive() -> None:
    """Tests that every fence marker is removed."""
    assert strip_code_fences('```JSON\n{"a": 1}\n```') == '{"a": 1}'


def test_slice_object_span_variants() -> None:
    """Tests slicing with both braces, an open brace only, and no brace."""
    assert slice_object_span('Segue: {"a": {"b": 1}} fim.') == '{"a": {"b": 1}}'
    assert slice_object_span('Segue: {"a": [1, 2') == '{"a": [1, 2'
    assert slice_object_span("sem objeto") == "sem objeto"


def test_closing_suffix_ignores_braces_in_strings() -> None:
    """Tests that brackets inside string literals are not counted."""
    assert closing_suffix('{"a": "}{", "b": {') == "}}"
    assert closing_suffix('{"a": [1, "x') == '"]}'
    assert closing_suffix('{"a": "esc\\"aped"}') == ""


def test_repair_closes_truncated_object() -> None:
    """Tests that trailing commas go away and missing braces are appended."""
    assert repair_json_text('{"a": {"b": 1,}') == '{"a": {"b": 1}}'


def test_normalize_fenced_response(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests a response wrapped in a Markdown code block."""
    document = normalizer.normalize('```json\n{"process": {"title": "Pregão 12/2024"}}\n```')

    assert document == {"process": {"title": "Pregão 12/2024"}}


def test_normalize_response_with_prose(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests a response with explanations around the object."""
    raw = 'Claro! Aqui está a análise:\n{"analysis": {"deadlines": ["10/03"]}}\nEspero ter ajudado.'

    assert normalizer.normalize(raw) == {"analysis": {"deadlines": ["10/03"]}}


def test_normalize_trailing_commas(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests that trailing commas in arrays and objects are tolerated."""
    assert normalizer.normalize('{"a": [1, 2,], "b": {"c": 3,},}') == {"a": [1, 2], "b": {"c": 3}}


def test_normalize_truncated_response(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests that an answer cut after a complete value is recovered."""
    document = normalizer.normalize('{"process": {"title": "Pregão", "risk": "Alto"')

    assert document == {"process": {"title": "Pregão", "risk": "Alto"}}


def test_normalize_control_characters(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests that raw control characters inside strings are neutralized."""
    assert normalizer.normalize('{"summary": "linha\x01um"}') == {"summary": "linha um"}


def test_normalize_lenient_syntax(normalizer: AnalysisResponseNormalizer) -> None:
    """Tests that unquoted keys and single quotes are accepted."""
    assert normalizer.normalize("{risk: 'Baixo'}") == {"risk": "Baixo"}


def test_unparsable_response_is_dumped(normalizer: AnalysisResponseNormalizer, dump_path: Path) -> None:
    """Tests that prose without JSON raises and is written to the dump file."""
    with pytest.raises(MalformedResponseError) as exc_info:
        normalizer.normalize("not json at all")

    assert exc_info.value.raw_text == "not json at all"
    assert dump_path.read_text(encoding="utf-8") == "not json at all"


def test_dump_is_overwritten(normalizer: AnalysisResponseNormalizer, dump_path: Path) -> None:
    """Tests that the dump keeps only the latest failure."""
    for raw in ("first failure", "second failure"):
        with pytest.raises(MalformedResponseError):
            normalizer.normalize(raw)

    assert dump_path.read_text(encoding="utf-8") == "second failure"


@pytest.mark.parametrize("raw", ["{}", "[1, 2, 3]", '"texto"'])
def test_non_object_or_empty_result_is_rejected(normalizer: AnalysisResponseNormalizer, raw: str) -> None:
    """Tests that only a non-empty top-level object is accepted."""
    with pytest.raises(MalformedResponseError):
        normalizer.normalize(raw)


def test_dump_can_be_disabled() -> None:
    """Tests that a normalizer without dump path still raises."""
    with pytest.raises(MalformedResponseError):
        AnalysisResponseNormalizer(None).normalize("nada")
