"""
Tests for the individual agents against a fake chat model.

These tests verify:
1. Language detection never fails a request
2. Criterion agents tag their results and wrap failures in AgentError
3. The single-call evaluator handles structured and text answers
4. Customization agents sort projects and pass documents to the model
"""

import json

import pytest

from cvhjelper.agents.analysis import (
    generate_overall_summary,
    run_language_detection_agent,
    run_language_quality_agent,
    run_summary_quality_agent,
)
from cvhjelper.agents.customization import (
    run_projects_customization_agent,
    run_requirements_analysis_agent,
)
from cvhjelper.agents.evaluation import (
    clamp_ratings,
    run_checklist_analysis,
    run_cv_evaluation_agent,
    stream_summary_analysis,
)
from cvhjelper.agents.schemas import (
    CriterionRating,
    CustomerRequirements,
    FinalEvaluation,
    LanguageDetection,
    ProjectValidation,
    Rating,
)
from cvhjelper.agents.validation import match_project_validation
from cvhjelper.exceptions import AgentError

from fakes import CUSTOMER_TEXT, CV_TEXT, FakeChatModel, customization_objects, make_project


def prompt_of(model: FakeChatModel, index: int = -1) -> str:
    """User message text of a recorded call."""
    return model.calls[index][1][-1].content


class TestLanguageDetection:
    """Tests for run_language_detection_agent."""

    @pytest.mark.asyncio
    async def test_detected_language(self, analysis_model):
        result = await run_language_detection_agent(analysis_model, CV_TEXT)
        assert result == LanguageDetection(language="Norwegian", language_code="no", confidence=0.95)

    @pytest.mark.asyncio
    async def test_failure_defaults_to_english(self):
        model = FakeChatModel({LanguageDetection: RuntimeError("model down")})
        result = await run_language_detection_agent(model, CV_TEXT)
        assert (result.language, result.language_code, result.confidence) == ("English", "en", 0.5)

    @pytest.mark.asyncio
    async def test_blank_fields_are_filled(self):
        model = FakeChatModel(
            {LanguageDetection: LanguageDetection(language="", language_code="", confidence=0)}
        )
        result = await run_language_detection_agent(model, CV_TEXT)
        assert (result.language, result.language_code, result.confidence) == ("English", "en", 0.8)


class TestCriterionAgents:
    """Tests for the analysis criterion agents."""

    @pytest.mark.asyncio
    async def test_result_is_tagged(self, analysis_model):
        result = await run_language_quality_agent(analysis_model, CV_TEXT, "Answer in Norwegian")

        assert result["criterion_id"] == "language_quality"
        assert result["criterion_name"] == "Language Quality"
        assert result["score"] == 8
        system, user = analysis_model.calls[-1][1]
        assert "Answer in Norwegian" in system.content
        assert CV_TEXT in user.content

    @pytest.mark.asyncio
    async def test_checklist_reaches_prompt(self, analysis_model):
        await run_summary_quality_agent(analysis_model, CV_TEXT, "", "Keep it under 150 words")
        system = analysis_model.calls[-1][1][0].content
        assert "Keep it under 150 words" in system

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self):
        model = FakeChatModel({Rating: RuntimeError("rate limited")})
        with pytest.raises(AgentError, match="Language Quality agent failed: rate limited"):
            await run_language_quality_agent(model, CV_TEXT, "")

    @pytest.mark.asyncio
    async def test_summary_falls_back_on_failure(self):
        model = FakeChatModel(text=RuntimeError("timeout"))
        summary = await generate_overall_summary(model, [], 6.24, "")
        assert summary.startswith("CV evaluated with overall score 6.2/10.")


class TestCvEvaluation:
    """Tests for the single-call evaluator."""

    def test_ratings_are_clamped(self):
        evaluation = FinalEvaluation(
            overall_rating=14,
            criterion_ratings=[
                CriterionRating(criterion_id="a", criterion_name="A", rating=0),
                CriterionRating(criterion_id="b", criterion_name="B", rating=None),
                CriterionRating(criterion_id="c", criterion_name="C", rating=7.5),
            ],
        )
        clamped = clamp_ratings(evaluation)
        assert clamped.overall_rating == 10
        assert [r.rating for r in clamped.criterion_ratings] == [1, 5, 7.5]

    @pytest.mark.asyncio
    async def test_structured_evaluation(self):
        model = FakeChatModel({FinalEvaluation: FinalEvaluation(overall_rating=8, summary="Good")})
        evaluation, is_structured = await run_cv_evaluation_agent(model, CV_TEXT, "Checklist")
        assert is_structured
        assert evaluation.summary == "Good"

    @pytest.mark.asyncio
    async def test_text_evaluation_is_parsed(self):
        answer = json.dumps(
            {
                "overall_rating": 11,
                "summary": "Well structured",
                "key_strengths": ["Layout"],
                "key_improvement_areas": [],
                "criterion_ratings": [{"criterion_id": "summary_quality", "criterion_name": "Summary", "rating": 6}],
            }
        )
        model = FakeChatModel(text=f"```json\n{answer}\n```")
        evaluation, is_structured = await run_cv_evaluation_agent(model, CV_TEXT, "Checklist", structured=False)

        assert is_structured
        assert evaluation.overall_rating == 10
        assert evaluation.criterion_ratings[0].rating == 6
        assert model.called("text") == 1

    @pytest.mark.asyncio
    async def test_unparseable_text_is_returned(self):
        model = FakeChatModel(text="The CV is fine overall.")
        evaluation, is_structured = await run_cv_evaluation_agent(model, CV_TEXT, "Checklist", structured=False)
        assert not is_structured
        assert evaluation == "The CV is fine overall."

    @pytest.mark.asyncio
    async def test_checklist_analysis_returns_text(self):
        model = FakeChatModel(text="## Analysis")
        assert await run_checklist_analysis(model, CV_TEXT, "Rule 1", "summary") == "## Analysis"
        assert "Rule 1" in prompt_of(model)

    @pytest.mark.asyncio
    async def test_stream_yields_chunks(self):
        model = FakeChatModel(chunks=['{"original_summary": ', '"x"}'])
        chunks = [c async for c in stream_summary_analysis(model, CV_TEXT, "Checklist")]
        assert "".join(chunks) == '{"original_summary": "x"}'


class TestCustomizationAgents:
    """Tests for requirements analysis and projects customization."""

    @pytest.mark.asyncio
    async def test_requirements_include_every_document(self, customization_model):
        documents = [("rfp.pdf", CUSTOMER_TEXT), ("appendix.pdf", "Security clearance required")]
        requirements = await run_requirements_analysis_agent(customization_model, documents)

        assert isinstance(requirements, CustomerRequirements)
        prompt = prompt_of(customization_model)
        assert "CUSTOMER DOCUMENT: rfp.pdf" in prompt
        assert "Security clearance required" in prompt

    @pytest.mark.asyncio
    async def test_requirements_failure(self):
        model = FakeChatModel({CustomerRequirements: ValueError("bad json")})
        with pytest.raises(AgentError, match="Failed to analyze customer requirements"):
            await run_requirements_analysis_agent(model, [("rfp.pdf", CUSTOMER_TEXT)])

    @pytest.mark.asyncio
    async def test_projects_sorted_by_relevance(self, customization_model):
        requirements = customization_objects()[CustomerRequirements]
        projects = await run_projects_customization_agent(customization_model, CV_TEXT, requirements)
        assert [p.project_name for p in projects] == ["Payments platform", "Data pipeline"]


def test_project_validation_matching():
    projects = [make_project("A", 9), make_project("B", 8), make_project("C", 7)]
    validations = [
        ProjectValidation(
            project_name=name,
            is_factually_accurate=False,
            fabricated_details=[],
            unsupported_claims=[],
            reasoning=name,
            corrected_description="",
        )
        for name in ("B", "renamed")
    ]

    matched = match_project_validation(projects, validations)

    # B by name, A by position, C has no validation
    assert [v.reasoning for v in matched] == ["B", "B", "No validation issues found"]
    assert matched[2].is_factually_accurate
