"""
CV analysis agents.

Five criterion agents score the CV independently; language detection runs
first so every agent answers in the CV's own language.
"""

import json
import logging
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.agents.llm import generate_object, generate_text, with_document
from cvhjelper.agents.schemas import (
    ANALYSIS_CRITERIA,
    CompetenceVerification,
    ContentCompleteness,
    LanguageDetection,
    ProjectDescriptions,
    Rating,
    SummaryEvaluation,
)
from cvhjelper.exceptions import AgentError

logger = logging.getLogger(__name__)

CRITERION_NAMES = {c["id"]: c["name"] for c in ANALYSIS_CRITERIA}

NUANCED_SCORING = """Be nuanced in your scoring, using the full range from 0-10 rather than just a few discrete values.
For example, use scores like 3.5, 5.7, 8.2 to precisely reflect the {aspect} level."""

LANGUAGE_QUALITY_PROMPT = """You are an expert language quality evaluator for CVs.
Analyze the CV's language quality including:
- Grammar and spelling correctness
- Professional tone and language
- Use of third-person perspective
- Action-oriented language and good flow
- Conciseness and clarity

Rate on a scale from 0-10 where:
0-3: Poor quality with many issues
4-6: Average quality with some issues
7-10: Good to excellent quality with minimal or no issues

{scoring}

Provide detailed reasoning for your rating and specific suggestions for improvement.
Where applicable, provide an improved version of problematic text.

{language_instruction}"""

CONTENT_COMPLETENESS_PROMPT = """You are an expert CV structure and content evaluator.
Analyze the CV's completeness and verify it contains all standard elements:
- Summary/Profile
- Projects/Experience
- Technology/Technical Skills
- Competencies/Skills
- Roles
- Education
- Courses/Training
- Certifications
- Languages

Rate on a scale from 0-10 where:
0-3: Many required elements missing
4-6: Some elements missing or incomplete
7-10: Most or all elements present with varying degrees of completeness

{scoring}

Provide detailed reasoning for your rating, specific suggestions for improvement,
and a verification table of all elements indicating whether each is present.

{language_instruction}"""

SUMMARY_QUALITY_PROMPT = """You are an expert CV summary evaluator.
Analyze the CV's summary/profile section based on these criteria:
- Strong opening that clearly describes the person's profession and experience level
- Inclusion of key skills and experiences relevant to their field
- Demonstration of value using concrete examples where possible
- Overall impact and clarity

Rate on a scale from 0-10 where:
0-3: Poor summary lacking key elements and impact
4-6: Average summary with some strengths but room for improvement
7-10: Good to excellent summary that effectively showcases the candidate

{scoring}

First, extract and include the exact original summary text from the CV.
Then, provide detailed reasoning for your rating, specific suggestions for improvement,
and create an improved version of the summary that maintains the person's experience
and skills but enhances the presentation.

Use these guidelines for summary evaluation:
{checklist}

{language_instruction}"""

PROJECT_DESCRIPTIONS_PROMPT = """You are an expert CV project descriptions evaluator.
Analyze each project/experience description based on these criteria:
- Proper structure with clear beginning and end
- Action-oriented language focusing on deliverables, impact, and results
- Clear indication of responsibility and role
- Demonstration of value contribution
- Following the PARK methodology:
  * Problem statement
  * Areas of responsibility
  * Results achieved
  * Knowledge/competencies utilized

Rate each project on a scale from 0-10 where:
0-3: Poor description lacking most elements
4-6: Average description with some strengths but room for improvement
7-10: Good to excellent description that effectively showcases the experience

{scoring}

Provide an overall rating, detailed reasoning, specific suggestions for improvement,
and individual evaluations for each project including strengths and weaknesses.
For the most problematic project descriptions, provide improved versions.

Use these guidelines for project description evaluation:
{checklist}

{language_instruction}"""

COMPETENCE_VERIFICATION_PROMPT = """You are an expert CV competence verification specialist.
Your task is to verify consistency between listed competencies/roles and project descriptions.

Specifically:
- For all competencies listed in the CV, verify they are demonstrated in at least one project
- For all roles listed in the CV, verify they are described in at least one project

Rate on a scale from 0-10 where:
0-3: Many competencies/roles not verified in projects
4-6: Some competencies/roles not verified in projects
7-10: Most or all competencies/roles properly verified in projects

{scoring}

Provide detailed reasoning for your rating, specific suggestions for improvement,
and lists of any unverified competencies and roles.

{language_instruction}"""

LANGUAGE_DETECTION_PROMPT = (
    "You are a language detection specialist. "
    "Analyze the document and identify the primary language used."
)

OVERALL_SUMMARY_PROMPT = """You are a CV evaluation coordinator summarizing detailed analysis results.
Create a concise, professional summary of the CV evaluation that highlights:
1. The overall quality level (based on score of {score:.1f} out of 10)
2. Key strengths identified
3. Priority areas for improvement
4. Most important action steps

Keep your summary {length}. Focus on the most important findings.

{language_instruction}"""


async def _run_criterion_agent(
    model: BaseChatModel,
    schema,
    system: str,
    prompt: str,
    cv_text: str,
    criterion_id: str,
) -> dict[str, Any]:
    criterion_name = CRITERION_NAMES[criterion_id]
    try:
        result = await generate_object(model, schema, system, with_document(prompt, cv_text))
    except Exception as e:
        logger.error(f"Error in {criterion_name.lower()} evaluation: {e}")
        raise AgentError(f"{criterion_name} agent failed: {e}") from e

    return {
        **result.model_dump(),
        "criterion_id": criterion_id,
        "criterion_name": criterion_name,
    }


async def run_language_quality_agent(
    model: BaseChatModel, cv_text: str, language_instruction: str
) -> dict[str, Any]:
    """Grammar, spelling, tone and writing style."""
    system = LANGUAGE_QUALITY_PROMPT.format(
        scoring=NUANCED_SCORING.format(aspect="quality"),
        language_instruction=language_instruction,
    )
    return await _run_criterion_agent(
        model,
        Rating,
        system,
        "Please evaluate the language quality of this CV. Focus on grammar, spelling, flow, "
        "professional tone, third-person perspective, and action-oriented language.",
        cv_text,
        "language_quality",
    )


async def run_content_completeness_agent(
    model: BaseChatModel, cv_text: str, language_instruction: str
) -> dict[str, Any]:
    """Checks the CV for every standard section."""
    system = CONTENT_COMPLETENESS_PROMPT.format(
        scoring=NUANCED_SCORING.format(aspect="completeness"),
        language_instruction=language_instruction,
    )
    return await _run_criterion_agent(
        model,
        ContentCompleteness,
        system,
        "Please evaluate the content completeness of this CV. Check if it contains all "
        "standard elements and identify any missing components.",
        cv_text,
        "content_completeness",
    )


async def run_summary_quality_agent(
    model: BaseChatModel, cv_text: str, language_instruction: str, summary_checklist: str
) -> dict[str, Any]:
    """Evaluates the summary section and proposes a rewrite."""
    system = SUMMARY_QUALITY_PROMPT.format(
        scoring=NUANCED_SCORING.format(aspect="quality"),
        checklist=summary_checklist,
        language_instruction=language_instruction,
    )
    return await _run_criterion_agent(
        model,
        SummaryEvaluation,
        system,
        "Please evaluate the summary/profile section of this CV and create an improved version.",
        cv_text,
        "summary_quality",
    )


async def run_project_descriptions_agent(
    model: BaseChatModel, cv_text: str, language_instruction: str, assignments_checklist: str
) -> dict[str, Any]:
    """Scores each project description against the PARK structure."""
    system = PROJECT_DESCRIPTIONS_PROMPT.format(
        scoring=NUANCED_SCORING.format(aspect="quality"),
        checklist=assignments_checklist,
        language_instruction=language_instruction,
    )
    return await _run_criterion_agent(
        model,
        ProjectDescriptions,
        system,
        "Please evaluate all project/experience descriptions in this CV. Analyze their "
        "structure, language, and effectiveness.",
        cv_text,
        "project_descriptions",
    )


async def run_competence_verification_agent(
    model: BaseChatModel, cv_text: str, language_instruction: str
) -> dict[str, Any]:
    """Checks that listed competencies and roles appear in the projects."""
    system = COMPETENCE_VERIFICATION_PROMPT.format(
        scoring=NUANCED_SCORING.format(aspect="verification"),
        language_instruction=language_instruction,
    )
    return await _run_criterion_agent(
        model,
        CompetenceVerification,
        system,
        "Please verify the consistency between competencies/roles and project descriptions "
        "in this CV. Identify any competencies or roles that are not properly demonstrated "
        "in the projects.",
        cv_text,
        "competence_verification",
    )


async def run_language_detection_agent(model: BaseChatModel, text: str) -> LanguageDetection:
    """Detect the document language. Falls back to English, never raises."""
    try:
        detected = await generate_object(
            model,
            LanguageDetection,
            LANGUAGE_DETECTION_PROMPT,
            with_document(
                "What language is this document written in? Provide the language name, "
                "ISO code, and your confidence level.",
                text,
                title="DOCUMENT",
            ),
        )
    except Exception as e:
        logger.warning(f"Error in language detection, defaulting to English: {e}")
        return LanguageDetection(language="English", language_code="en", confidence=0.5)

    result = LanguageDetection(
        language=detected.language or "English",
        language_code=detected.language_code or "en",
        confidence=detected.confidence or 0.8,
    )
    logger.info(
        f"Language detected: {result.language} ({result.language_code}) "
        f"with {result.confidence * 100:.0f}% confidence"
    )
    return result


async def generate_overall_summary(
    model: BaseChatModel,
    criterion_evaluations: list[dict[str, Any]],
    overall_score: float,
    language_instruction: str,
    concise: bool = False,
) -> str:
    """Synthesize criterion results into a short summary; falls back to a fixed sentence."""
    system = OVERALL_SUMMARY_PROMPT.format(
        score=overall_score,
        length="under 100 words" if concise else "concise and actionable",
        language_instruction=language_instruction,
    )
    prompt = (
        "Synthesize these CV evaluation results into a concise summary with key actions:\n"
        + json.dumps(criterion_evaluations, indent=2, ensure_ascii=False)
    )
    try:
        return await generate_text(model, system, prompt)
    except Exception as e:
        logger.error(f"Error generating overall summary: {e}")
        return (
            f"CV evaluated with overall score {overall_score:.1f}/10. "
            "Review detailed feedback for specific improvement areas."
        )
