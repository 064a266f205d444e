"""Tests for the note generation pipeline."""

import json

import pytest

from soap_scribe.llm import LLMConnectionError, LLMResponse
from soap_scribe.notes import NoteGenerator, empty_note, resolve_template
from soap_scribe.templates import (
    Profession,
    TemplateNotFoundError,
    TemplateProfessionError,
    build_custom_template,
    get_template,
)


def _response(payload):
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMResponse(content=content, model="test-model", usage={"input_tokens": 10, "output_tokens": 5})


@pytest.fixture
def generator(mock_llm_router):
    return NoteGenerator(llm=mock_llm_router, temperature=0.3, max_tokens=2000)


class TestResolveTemplate:
    """Tests for resolve_template."""

    def test_defaults_to_knee(self):
        """Test no key and no template resolves to the knee template."""
        assert resolve_template().key == "knee"

    def test_key_with_matching_profession(self):
        """Test a key is checked against the profession."""
        assert resolve_template("neck", profession="physical_therapy").key == "neck"

    def test_key_with_other_profession(self):
        """Test a chiropractor cannot resolve a PT template."""
        with pytest.raises(TemplateProfessionError):
            resolve_template("knee", profession=Profession.CHIROPRACTIC)

    def test_template_takes_precedence(self):
        """Test an explicit template wins over the key."""
        custom = build_custom_template({"key": "mine"}, Profession.CHIROPRACTIC)

        assert resolve_template("knee", custom, Profession.CHIROPRACTIC) is custom

    def test_custom_template_profession_checked(self):
        """Test custom templates are also checked against the profession."""
        custom = build_custom_template({}, Profession.CHIROPRACTIC)

        with pytest.raises(TemplateProfessionError):
            resolve_template(template=custom, profession="physical_therapy")


class TestEmptyNote:
    """Tests for empty_note."""

    def test_matches_schema(self):
        """Test the blank note equals the template's schema defaults."""
        assert empty_note("hip") == get_template("hip").build_schema()

    def test_unknown_key(self):
        """Test unknown keys raise."""
        with pytest.raises(TemplateNotFoundError):
            empty_note("elbow")


class TestNoteGenerator:
    """Tests for NoteGenerator.generate."""

    @pytest.mark.asyncio
    async def test_successful_generation(self, generator, mock_llm_router, knee_transcript):
        """Test a well-formed response becomes a filled, valid note."""
        mock_llm_router.complete.return_value = _response(
            {
                "subjective": {"content": "Right knee pain for three weeks after a fall, 6/10 on stairs."},
                "objective": {
                    "categories": [
                        {
                            "name": "Special Tests",
                            "rows": [{"test": "McMurray's Test", "result": "Positive", "notes": "Right"}],
                        }
                    ]
                },
                "assessment": {
                    "clinical_impression": "Findings consistent with medial meniscus involvement.",
                    "short_term_goals": ["Ascend stairs with pain below 3/10 in 3 weeks"],
                },
                "plan": {"interventions": ["Therapeutic exercise", "Manual therapy"]},
            }
        )

        result = await generator.generate(knee_transcript, "knee")

        assert result.success
        assert result.error is None
        assert result.template_key == "knee"
        assert result.model == "test-model"
        assert list(result.data) == ["subjective", "objective", "assessment", "plan", "billing"]
        assert result.data["objective"]["categories"][0]["rows"][0]["result"] == "Positive"
        assert result.data["billing"] == get_template("knee").build_schema()["billing"]
        assert result.validation.is_valid
        assert 0.1 <= result.confidence.overall <= 1.0

    @pytest.mark.asyncio
    async def test_llm_called_with_prompt(self, generator, mock_llm_router, knee_transcript):
        """Test the router receives the built messages and parameters."""
        mock_llm_router.complete.return_value = _response({})

        await generator.generate(knee_transcript, "knee", request_id="req-42")

        call = mock_llm_router.complete.call_args
        messages = call.args[0]
        assert knee_transcript in messages[1].content
        assert call.kwargs["temperature"] == 0.3
        assert call.kwargs["max_tokens"] == 2000
        assert call.kwargs["request_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_defaults_to_knee(self, generator, mock_llm_router, knee_transcript):
        """Test generation without a key uses the knee template."""
        mock_llm_router.complete.return_value = _response({})

        result = await generator.generate(knee_transcript)

        assert result.template_key == "knee"

    @pytest.mark.asyncio
    async def test_fenced_json_accepted(self, generator, mock_llm_router, knee_transcript):
        """Test markdown-fenced JSON is parsed."""
        mock_llm_router.complete.return_value = _response(
            '```json\n{"plan": "Continue twice weekly"}\n```'
        )

        result = await generator.generate(knee_transcript, "ankle_foot")

        assert result.success
        assert result.data["plan"]["content"] == "Continue twice weekly"

    @pytest.mark.asyncio
    async def test_invalid_json_returns_defaults(self, generator, mock_llm_router, knee_transcript):
        """Test unparseable output yields the defaults and an error."""
        mock_llm_router.complete.return_value = _response("I could not produce a note.")

        result = await generator.generate(knee_transcript, "knee")

        assert not result.success
        assert result.error == "AI returned invalid JSON"
        assert result.data == empty_note("knee")
        assert result.confidence.overall == 0.0
        assert set(result.confidence.sections) == set(result.data)

    @pytest.mark.asyncio
    async def test_non_object_json_returns_defaults(self, generator, mock_llm_router, knee_transcript):
        """Test a JSON array is treated as invalid output."""
        mock_llm_router.complete.return_value = _response([{"subjective": "x"}])

        result = await generator.generate(knee_transcript, "neck")

        assert not result.success
        assert result.error == "AI returned invalid JSON"
        assert result.data == empty_note("neck")

    @pytest.mark.asyncio
    async def test_llm_error_returns_defaults(self, generator, mock_llm_router, knee_transcript):
        """Test provider failures yield the defaults and an error."""
        mock_llm_router.complete.side_effect = LLMConnectionError("Connection refused")

        result = await generator.generate(knee_transcript, "shoulder")

        assert not result.success
        assert result.error == "AI generation failed: Connection refused"
        assert result.data == empty_note("shoulder")

    @pytest.mark.asyncio
    async def test_blank_transcript(self, generator, mock_llm_router):
        """Test a blank transcript never reaches the LLM."""
        result = await generator.generate("   ", "knee")

        assert not result.success
        assert result.error == "Transcript is required"
        mock_llm_router.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_profession_mismatch_raises(self, generator, mock_llm_router, knee_transcript):
        """Test template/profession mismatches raise before any LLM call."""
        with pytest.raises(TemplateProfessionError):
            await generator.generate(knee_transcript, "cervical-adjustment", profession="physical_therapy")

        mock_llm_router.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_template_raises(self, generator, knee_transcript):
        """Test unknown template keys raise."""
        with pytest.raises(TemplateNotFoundError):
            await generator.generate(knee_transcript, "elbow")

    @pytest.mark.asyncio
    async def test_custom_template(self, generator, mock_llm_router, knee_transcript):
        """Test custom templates generate in their own shape."""
        template = build_custom_template(
            {"key": "tmj", "objective": {"measurements": ["Jaw Opening"]}},
            Profession.PHYSICAL_THERAPY,
        )
        mock_llm_router.complete.return_value = _response(
            {"objective": {"rows": [{"test": "Jaw Opening", "result": "32 mm"}]}}
        )

        result = await generator.generate(knee_transcript, template=template)

        assert result.template_key == "tmj"
        assert result.data["objective"]["rows"] == [
            {"test": "Jaw Opening", "result": "32 mm", "notes": ""}
        ]

    @pytest.mark.asyncio
    async def test_logs_generation_event(self, generator, mock_llm_router, knee_transcript, obs_logger):
        """Test a generation writes one event with its outcome."""
        mock_llm_router.complete.return_value = _response({"subjective": "Knee pain"})

        await generator.generate(knee_transcript, "knee", request_id="req-7")

        events = obs_logger.get_recent_events("generation")
        assert len(events) == 1
        assert events[0]["event_type"] == "generation_success"
        assert events[0]["request_id"] == "req-7"
        assert events[0]["sections_from_llm"] == ["subjective"]
        assert events[0]["json_parsed"] is True

    @pytest.mark.asyncio
    async def test_logs_degraded_event(self, generator, mock_llm_router, knee_transcript, obs_logger):
        """Test a fallback to defaults is logged as degraded."""
        mock_llm_router.complete.return_value = _response("not json")

        await generator.generate(knee_transcript, "knee")

        events = obs_logger.get_recent_events("generation")
        assert events[0]["event_type"] == "generation_degraded"
        assert events[0]["error_message"]
