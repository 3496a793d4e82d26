"""
Single-call CV evaluation, checklist analysis and streamed summary analysis.
"""

import logging
from typing import Any, AsyncIterator

from langchain_core.language_models.chat_models import BaseChatModel
from pydantic import ValidationError

from cvhjelper.agents.llm import generate_object, generate_text, stream_text, with_document
from cvhjelper.agents.schemas import EVALUATION_CRITERIA, FinalEvaluation
from cvhjelper.exceptions import AgentError
from cvhjelper.utils import parse_evaluation_response

logger = logging.getLogger(__name__)

DEFAULT_RATING = 5

_CRITERIA_LIST = "\n".join(
    f"{i}. {c['name']} (criterion_id: {c['id']}): {c['description']}"
    for i, c in enumerate(EVALUATION_CRITERIA, start=1)
)

EVALUATOR_PROMPT = f"""You are an expert CV Evaluator Agent. Your task is to thoroughly analyze a CV and provide detailed feedback.

STEP-BY-STEP PROCESS:
1. Read and understand the CV contents completely
2. Evaluate the CV across these 5 criteria:
{_CRITERIA_LIST}
3. After evaluating all criteria, provide a comprehensive evaluation

For each criterion:
- Provide a rating from 1-10
- Give detailed reasoning
- Offer specific suggestions for improvement

Then provide an overall evaluation with:
- An overall rating from 1-10
- A summary of your evaluation
- Key strengths
- Key areas for improvement

RATING GUIDELINES:
- All ratings must be integers between 1 and 10, where:
  - 1-3: Poor (significant improvement needed)
  - 4-5: Below average (several improvements needed)
  - 6-7: Average (some improvements possible)
  - 8-9: Good (minor improvements possible)
  - 10: Excellent (meets all best practices)

EVALUATION CRITERIA CHECKLIST:
{{checklist}}

Be specific, detailed, and constructive in your feedback. Provide actionable suggestions that would help improve the CV."""

TEXT_FORMAT_INSTRUCTION = """
Respond with a single JSON object with the keys overall_rating, summary,
key_strengths, key_improvement_areas and criterion_ratings (a list of objects
with criterion_id, criterion_name, rating, reasoning, suggestions)."""

SUMMARY_ANALYSIS_PROMPT = """Analyze the CV summary in this CV and evaluate it against the CV writing recommendations in the checklist below:

Checklist:
{checklist}

Focus on the Summary checklist section in the checklist document. Evaluate the CV summary (the top-most paragraph in the CV) against these recommendations and provide an overview of strengths and weaknesses.

Then, provide a rephrased version of the summary that follows all the recommendations in the checklist. Use all information from the CV, especially the project experience information (recent assignments are more important) and the existing summary.

Format your response as follows:

## Summary Analysis
[Your analysis of the summary here, highlighting strengths and weaknesses]

## Improved Version:
[Your improved version of the summary]"""

ASSIGNMENTS_ANALYSIS_PROMPT = """Analyze the Key Assignments descriptions in this CV and evaluate them against the CV writing recommendations in the checklist below:

Checklist:
{checklist}

Focus on the "Key assignments" section in the checklist document. Process all Key Assignments in the CV content, do not skip any of them. Evaluate each Key Assignment section against the recommendations and provide an overview of issues found.

Format your response as follows:

## Overall Issues
[Provide an overview of the biggest issues found across all assignments]

For each assignment, include:

## [Assignment Title]
### Original:
[Original text]

### Issues:
[Brief overview of issues found]

### Improved Version:
[Improved version that follows all the recommendations]"""

ANALYSIS_PROMPTS = {
    "summary": SUMMARY_ANALYSIS_PROMPT,
    "assignments": ASSIGNMENTS_ANALYSIS_PROMPT,
}

# Sampling for the free-text checklist analysis
CHECKLIST_ANALYSIS_OPTIONS = {"temperature": 0.7, "max_tokens": 4000}

STREAMING_SUMMARY_PROMPT = """You are an expert CV evaluator focused on analyzing and improving CV summaries.
Your task is to analyze the CV summary (the top-most paragraph in the CV) and evaluate it against these recommendations:

{checklist}

Provide a detailed evaluation of the summary's strengths and weaknesses, and then create an improved version that follows all the recommendations.

Write your answer as a single JSON object with exactly these string fields, in this order:
"original_summary", "analysis", "improved_summary".
Output only the JSON object, without markdown fences."""


def _clamp_rating(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_RATING
    return max(1, min(10, value))


def clamp_ratings(evaluation: FinalEvaluation) -> FinalEvaluation:
    """Keep every rating within 1-10; missing or non-numeric ratings become 5."""
    return evaluation.model_copy(
        update={
            "overall_rating": _clamp_rating(evaluation.overall_rating),
            "criterion_ratings": [
                r.model_copy(update={"rating": _clamp_rating(r.rating)})
                for r in evaluation.criterion_ratings
            ],
        }
    )


async def run_cv_evaluation_agent(
    model: BaseChatModel,
    cv_text: str,
    checklist: str,
    structured: bool = True,
) -> tuple[FinalEvaluation | str, bool]:
    """
    Evaluate a CV against the five evaluation criteria in one call.

    Args:
        model: Chat model to use
        cv_text: Extracted CV text
        checklist: Evaluation checklist supplied by the user
        structured: Use structured output; when False the model answers in
            text that is parsed afterwards

    Returns:
        (evaluation, is_structured). When a text answer cannot be parsed the
        raw text is returned with is_structured False.
    """
    system = EVALUATOR_PROMPT.format(checklist=checklist)
    prompt = with_document(
        "Please evaluate this CV thoroughly. Analyze each evaluation criterion and provide "
        "a comprehensive assessment with specific feedback.",
        cv_text,
    )

    if structured:
        try:
            evaluation = await generate_object(model, FinalEvaluation, system, prompt)
        except Exception as e:
            logger.error(f"CV evaluation failed: {e}")
            raise AgentError(f"Error communicating with AI model API: {e}") from e
        return clamp_ratings(evaluation), True

    try:
        text = await generate_text(model, system + TEXT_FORMAT_INSTRUCTION, prompt)
    except Exception as e:
        logger.error(f"CV evaluation failed: {e}")
        raise AgentError(f"Error processing CV evaluation: {e}") from e

    parsed = parse_evaluation_response(text)
    if parsed is None:
        logger.info("Evaluation text is not JSON, returning it unstructured")
        return text, False
    try:
        return clamp_ratings(FinalEvaluation.model_validate(parsed)), True
    except ValidationError as e:
        logger.info(f"Evaluation JSON did not validate, returning text: {e}")
        return text, False


async def run_checklist_analysis(
    model: BaseChatModel,
    cv_text: str,
    checklist: str,
    analysis_type: str,
) -> str:
    """Markdown analysis of the summary or the key assignments."""
    template = ANALYSIS_PROMPTS.get(analysis_type, ASSIGNMENTS_ANALYSIS_PROMPT)
    prompt = with_document(template.format(checklist=checklist), cv_text)
    try:
        return await generate_text(model, "You are an expert CV reviewer.", prompt)
    except Exception as e:
        logger.error(f"Checklist analysis failed: {e}")
        raise AgentError(f"Error processing CV analysis: {e}") from e


async def stream_summary_analysis(
    model: BaseChatModel,
    cv_text: str,
    checklist: str,
) -> AsyncIterator[str]:
    """Yield raw text chunks of the summary-analysis JSON object."""
    system = STREAMING_SUMMARY_PROMPT.format(checklist=checklist)
    prompt = with_document(
        "Please analyze the summary in this CV. Extract the original summary, provide an "
        "analysis of its strengths and weaknesses, and create an improved version following "
        "all the recommendations in the checklist.",
        cv_text,
    )
    async for chunk in stream_text(model, system, prompt):
        yield chunk
