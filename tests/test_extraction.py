"""Unit tests for the extraction module."""
import json

import pytest
from pydantic import ValidationError

from thinkchat.config import ModelConfig
from thinkchat.errors import StreamFailedError
from thinkchat.extraction import (
    EXTRACTION_FAILED,
    EXTRACTION_SUCCEEDED,
    ExtractedRecord,
    build_extraction_messages,
    extract_record,
    finalize_extraction,
    locate_json_block,
    parse_record,
)
from thinkchat.llm import StreamIncrement
from thinkchat.prompts import THINK_FIRST_CLAUSE, get_extraction_prompt
from thinkchat.stream import FragmentKind


class TestLocateJsonBlock:
    """Tests for locate_json_block."""

    def test_fenced_block_wins(self):
        text = 'Sure {"x": 0}\n```json\n{"a": 1}\n```\ntrailing {"y": 2}'
        assert locate_json_block(text).strip() == '{"a": 1}'

    def test_fence_without_newline(self):
        assert locate_json_block('```json{"a": 1}```') == '{"a": 1}'

    def test_widest_brace_span(self):
        text = 'Here: {"a": {"b": 1}} and {"c": 2} done'
        assert locate_json_block(text) == '{"a": {"b": 1}} and {"c": 2}'

    def test_no_braces_returns_text(self):
        assert locate_json_block("no json here") == "no json here"


class TestParseRecord:
    """Tests for schema validation of extracted payloads."""

    def test_fenced_round_trip(self, record_json):
        record = parse_record(f"```json\n{record_json}\n```")

        assert record is not None
        assert record.name == "Li"
        assert record.age == 30
        assert record.occupation is None
        assert "occupation" not in record.model_dump(exclude_none=True)

    def test_bare_object_with_prose(self, record_json):
        record = parse_record(f"I found this:\n{record_json}\nHope it helps.")
        assert record is not None
        assert record.address.city == "X"
        assert record.hobbies == ["a"]

    def test_optional_occupation(self, record_json):
        payload = record_json[:-1] + ',"occupation":"Engineer"}'
        record = parse_record(payload)
        assert record is not None
        assert record.occupation == "Engineer"

    def test_integral_float_age(self, record_json):
        data = json.loads(record_json)
        data["age"] = 30.0
        record = parse_record(json.dumps(data))
        assert record is not None
        assert record.age == 30

    def test_unknown_keys_are_ignored(self, record_json):
        payload = record_json[:-1] + ',"nickname":"L"}'
        assert parse_record(payload) is not None

    def test_no_json(self):
        assert parse_record("no json here") is None

    def test_malformed_json(self):
        assert parse_record('```json\n{"name": "Li",\n```') is None

    @pytest.mark.parametrize("field,value", [
        ("phone", '"12800000000"'),
        ("phone", '"1380000000"'),
        ("age", "151"),
        ("age", "-1"),
        ("age", '"30"'),
        ("age", "30.5"),
        ("age", "true"),
        ("occupation", "null"),
        ("hobbies", "[1]"),
        ("email", '"not-an-email"'),
        ("name", '""'),
    ])
    def test_schema_violations(self, record_json, field, value):
        """Test that any invalid field discards the whole record."""
        data = json.loads(record_json)
        data[field] = json.loads(value)
        assert parse_record(json.dumps(data)) is None

    def test_empty_address_part(self, record_json):
        payload = record_json.replace('"district":"Y"', '"district":""')
        assert parse_record(payload) is None

    def test_missing_hobbies(self, record_json):
        payload = record_json.replace(',"hobbies":["a"]', "")
        assert parse_record(payload) is None

    def test_record_is_frozen(self, record_json):
        record = parse_record(record_json)
        with pytest.raises(ValidationError):
            record.name = "Wang"

    def test_direct_validation(self):
        with pytest.raises(ValidationError):
            ExtractedRecord.model_validate({"name": "Li"})


class TestFinalizeExtraction:
    """Tests for the completion signal."""

    def test_success_marker(self, record_json):
        result = finalize_extraction(record_json, thinking="t")
        assert result.succeeded
        assert result.message == EXTRACTION_SUCCEEDED
        assert result.thinking == "t"

    def test_failure_marker(self):
        result = finalize_extraction("no json here")
        assert not result.succeeded
        assert result.record is None
        assert result.message == EXTRACTION_FAILED

    def test_over_long_integer_is_a_failure(self):
        result = finalize_extraction('```json\n{"age": ' + "1" * 5000 + "}\n```")
        assert result.record is None
        assert result.message == EXTRACTION_FAILED


class TestExtractionPrompt:
    """Tests for the extraction prompt."""

    def test_prompt_lists_all_fields(self):
        prompt = get_extraction_prompt()
        for field in ("name", "age", "email", "phone", "address", "occupation", "hobbies"):
            assert f"({field})" in prompt
        assert THINK_FIRST_CLAUSE not in prompt

    def test_think_clause_only_when_enabled(self):
        assert get_extraction_prompt(show_thinking=True).endswith(THINK_FIRST_CLAUSE)

    def test_messages(self):
        messages = build_extraction_messages("I am Li", show_thinking=True)
        assert [m.role for m in messages] == ["system", "human"]
        assert THINK_FIRST_CLAUSE in messages[0].content
        assert messages[1].content == "I am Li"


class TestExtractRecord:
    """Tests for the streaming extraction run."""

    @pytest.mark.asyncio
    async def test_streamed_record(self, make_provider, model_config, record_json):
        half = len(record_json) // 2
        provider = make_provider(increments=[
            StreamIncrement(content="", reasoning="The user is Li."),
            StreamIncrement(content="```json\n" + record_json[:half]),
            StreamIncrement(content=record_json[half:] + "\n```"),
        ])
        updates: list[tuple[FragmentKind, str]] = []

        result = await extract_record(
            provider, model_config, "I am Li",
            on_update=lambda kind, value: updates.append((kind, value))
        )

        assert result.succeeded
        assert result.record.name == "Li"
        assert result.thinking == "The user is Li."
        assert [kind for kind, _ in updates] == [
            FragmentKind.THINKING, FragmentKind.CONTENT, FragmentKind.CONTENT
        ]

    @pytest.mark.asyncio
    async def test_thinking_is_not_searched(self, make_provider, model_config, record_json):
        """Test that a record present only in the reasoning trace is not used."""
        provider = make_provider(increments=[
            StreamIncrement(content="", reasoning=record_json),
            StreamIncrement(content="I could not find anything."),
        ])
        result = await extract_record(provider, model_config, "hello")

        assert not result.succeeded
        assert result.message == EXTRACTION_FAILED

    @pytest.mark.asyncio
    async def test_invalid_output_does_not_raise(self, make_provider, model_config, increments):
        provider = make_provider(increments=increments("no json here"))
        result = await extract_record(provider, model_config, "hello")
        assert result.record is None

    @pytest.mark.asyncio
    async def test_over_long_integer_reports_failure(self, make_provider, model_config, increments):
        provider = make_provider(increments=increments('{"name":"Li","age":', "1" * 5000, "}"))
        result = await extract_record(provider, model_config, "hello")
        assert result.message == EXTRACTION_FAILED

    @pytest.mark.asyncio
    async def test_prompt_follows_show_thinking(self, make_provider):
        provider = make_provider(increments=[])
        await extract_record(provider, ModelConfig(show_thinking=True), "hello")
        assert THINK_FIRST_CLAUSE in provider.calls[0][0].content

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self, make_provider, model_config):
        provider = make_provider(error=ConnectionError("refused"))
        with pytest.raises(StreamFailedError):
            await extract_record(provider, model_config, "hello")
