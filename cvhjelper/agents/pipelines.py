"""
Agent pipelines.

Each pipeline detects the document language, fans independent agents out
with asyncio.gather and merges their results. Progress is reported through
an optional async callback so the same pipeline backs JSON endpoints, the
SSE stream and the CLI.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.agents.analysis import (
    generate_overall_summary,
    run_competence_verification_agent,
    run_content_completeness_agent,
    run_language_detection_agent,
    run_language_quality_agent,
    run_project_descriptions_agent,
    run_summary_quality_agent,
)
from cvhjelper.agents.customization import (
    run_competencies_customization_agent,
    run_evaluation_agent,
    run_profile_customization_agent,
    run_projects_customization_agent,
    run_requirements_analysis_agent,
)
from cvhjelper.agents.llm import language_instruction
from cvhjelper.agents.result_processing import (
    build_analysis_result,
    calculate_overall_score,
    fix_project_descriptions_score,
    merge_corrections,
)
from cvhjelper.agents.schemas import CustomizationResult, ProgressStatus, ProgressUpdate
from cvhjelper.agents.validation import (
    run_competencies_correction_agent,
    run_profile_correction_agent,
    run_projects_correction_agent,
    run_validation_agent,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], Awaitable[None]]


class ProgressReporter:
    """Sends ProgressUpdate objects to an optional async callback."""

    def __init__(self, callback: ProgressCallback | None = None):
        self.callback = callback

    async def __call__(
        self,
        step: str,
        status: ProgressStatus,
        message: str,
        data: Any = None,
        progress: int = 0,
    ) -> None:
        logger.debug(f"[{step}] {status}: {message}")
        if self.callback is not None:
            await self.callback(
                ProgressUpdate(step=step, status=status, message=message, data=data, progress=progress)
            )


async def run_cv_analysis(
    model: BaseChatModel,
    cv_text: str,
    summary_checklist: str,
    assignments_checklist: str,
) -> dict[str, Any]:
    """
    Full multi-agent CV analysis.

    Returns:
        dict with overall_score, summary, key_strengths,
        key_improvement_areas, criterion_evaluations, detailed_analysis
    """
    detection = await run_language_detection_agent(model, cv_text)
    instruction = language_instruction(detection.language)

    logger.info("Running analysis agents in parallel")
    results = await asyncio.gather(
        run_language_quality_agent(model, cv_text, instruction),
        run_content_completeness_agent(model, cv_text, instruction),
        run_summary_quality_agent(model, cv_text, instruction, summary_checklist),
        run_project_descriptions_agent(model, cv_text, instruction, assignments_checklist),
        run_competence_verification_agent(model, cv_text, instruction),
    )
    language_quality, completeness, summary_quality, projects, competence = results
    projects = fix_project_descriptions_score(projects)

    criterion_evaluations = [language_quality, completeness, summary_quality, projects, competence]
    overall_score = calculate_overall_score(criterion_evaluations)
    logger.info(f"Overall score: {overall_score:.1f}")

    summary = await generate_overall_summary(model, criterion_evaluations, overall_score, instruction)
    result = build_analysis_result(criterion_evaluations, overall_score, summary)
    result["language"] = detection.model_dump()
    return result


async def run_quick_analysis(model: BaseChatModel, cv_text: str) -> dict[str, Any]:
    """Language quality only, with a short summary."""
    detection = await run_language_detection_agent(model, cv_text)
    instruction = language_instruction(detection.language)

    language_quality = await run_language_quality_agent(model, cv_text, instruction)
    criterion_evaluations = [language_quality]
    overall_score = calculate_overall_score(criterion_evaluations)

    summary = await generate_overall_summary(
        model, criterion_evaluations, overall_score, instruction, concise=True
    )
    result = build_analysis_result(criterion_evaluations, overall_score, summary)
    result["language"] = detection.model_dump()
    return result


async def run_customization(
    model: BaseChatModel,
    cv_text: str,
    customer_documents: list[tuple[str, str]],
    on_progress: ProgressCallback | None = None,
    validate: bool = False,
) -> CustomizationResult:
    """
    Tailor a CV to the customer documents.

    Args:
        model: Chat model to use
        cv_text: Extracted CV text
        customer_documents: (file name, extracted text) pairs
        on_progress: Async callback receiving ProgressUpdate objects
        validate: Fact-check the customized content and correct it when
            validation fails

    Returns:
        The validated CustomizationResult
    """
    report = ProgressReporter(on_progress)

    await report("language_detection", "starting", "Detecting document language...", progress=25)
    detection = await run_language_detection_agent(model, cv_text)
    instruction = language_instruction(detection.language)
    await report(
        "language_detection",
        "completed",
        f"Detected language: {detection.language} ({detection.confidence * 100:.0f}% confidence)",
        {"language": detection.language, "confidence": detection.confidence},
        30,
    )

    await report("requirements_analysis", "starting", "Analyzing customer requirements...", progress=35)
    requirements = await run_requirements_analysis_agent(model, customer_documents, instruction)
    await report(
        "requirements_analysis",
        "completed",
        f"Found {len(requirements.must_have_requirements)} must-have and "
        f"{len(requirements.should_have_requirements)} should-have requirements",
        {
            "mustHaveCount": len(requirements.must_have_requirements),
            "shouldHaveCount": len(requirements.should_have_requirements),
        },
        45,
    )

    await report(
        "customization", "starting", "Customizing CV profile, competencies, and projects...", progress=50
    )

    async def customize_profile():
        result = await run_profile_customization_agent(model, cv_text, requirements, instruction)
        await report("profile_customization", "completed", "CV profile customization completed", progress=60)
        return result

    async def customize_competencies():
        result = await run_competencies_customization_agent(model, cv_text, requirements, instruction)
        await report(
            "competencies_customization",
            "completed",
            f"Identified {len(result.relevant_competencies)} relevant competencies",
            {"relevantCount": len(result.relevant_competencies)},
            65,
        )
        return result

    async def customize_projects():
        result = await run_projects_customization_agent(model, cv_text, requirements, instruction)
        await report(
            "projects_customization",
            "completed",
            f"Customized {len(result)} project descriptions",
            {"projectsCount": len(result)},
            70,
        )
        return result

    profile, competencies, projects = await asyncio.gather(
        customize_profile(), customize_competencies(), customize_projects()
    )
    await report("customization", "completed", "All customization tasks completed successfully", progress=75)

    await report("evaluation", "starting", "Evaluating customized CV against requirements...", progress=80)
    evaluation = await run_evaluation_agent(model, profile, competencies, projects, requirements, instruction)
    await report(
        "evaluation",
        "completed",
        f"Evaluation completed with overall score: {evaluation.overall_score}/10",
        {"overallScore": evaluation.overall_score},
        85,
    )

    result = CustomizationResult(
        customer_requirements=requirements,
        profile_customization=profile,
        key_competencies=competencies,
        customized_projects=projects,
        evaluation=evaluation,
        language_code=detection.language_code,
    )

    if validate:
        result = await _validate_and_correct(model, cv_text, result, instruction, report)

    await report("complete", "completed", "CV customization completed successfully!", result.model_dump(), 100)
    return result


async def _validate_and_correct(
    model: BaseChatModel,
    cv_text: str,
    result: CustomizationResult,
    instruction: str,
    report: ProgressReporter,
) -> CustomizationResult:
    await report("content_validation", "starting", "Validating content for factual accuracy...", progress=90)
    validation = await run_validation_agent(
        model,
        cv_text,
        result.profile_customization.original_profile,
        result.profile_customization.customized_profile,
        result.key_competencies.original_competencies,
        result.key_competencies.relevant_competencies,
        result.customized_projects,
        instruction,
    )
    overall = validation.overall_validation
    status = "passed" if overall.passes_validation else "failed"
    await report(
        "content_validation",
        "completed",
        f"Content validation {status} (confidence: {overall.confidence_score}/10)",
        {"passesValidation": overall.passes_validation, "confidenceScore": overall.confidence_score},
        90,
    )
    result = result.model_copy(update={"validation": validation})

    if overall.passes_validation:
        await report("correction_check", "completed", "No correction needed - validation passed", progress=97)
        return result

    requirements = result.customer_requirements

    async def correct_profile():
        await report("profile_correction", "starting", "Correcting profile validation issues...", progress=92)
        correction = await run_profile_correction_agent(
            model,
            cv_text,
            result.profile_customization.original_profile,
            result.profile_customization.customized_profile,
            validation.profile_validation,
            requirements,
            instruction,
        )
        await report(
            "profile_correction",
            "completed",
            f"Profile corrected - {len(correction.changes_made)} changes made",
            {"changesMade": len(correction.changes_made), "confidence": correction.confidence_score},
            94,
        )
        return correction

    async def correct_competencies():
        await report(
            "competencies_correction", "starting", "Correcting competencies validation issues...", progress=93
        )
        correction = await run_competencies_correction_agent(
            model,
            cv_text,
            result.key_competencies.original_competencies,
            result.key_competencies.relevant_competencies,
            validation.competencies_validation,
            requirements,
            instruction,
        )
        await report(
            "competencies_correction",
            "completed",
            f"Competencies corrected - {len(correction.removed_competencies)} unsupported items removed",
            {"removedCount": len(correction.removed_competencies), "confidence": correction.confidence_score},
            95,
        )
        return correction

    async def correct_projects():
        await report("projects_correction", "starting", "Correcting projects validation issues...", progress=94)
        correction = await run_projects_correction_agent(
            model,
            cv_text,
            result.customized_projects,
            validation.projects_validation,
            requirements,
            instruction,
        )
        summary = correction.correction_summary
        await report(
            "projects_correction",
            "completed",
            f"Projects corrected - {summary.total_projects_corrected} projects updated",
            {"projectsCorrected": summary.total_projects_corrected, "confidence": summary.confidence_score},
            96,
        )
        return correction

    async def skipped():
        return None

    needs_profile = not validation.profile_validation.is_factually_accurate
    needs_competencies = bool(validation.competencies_validation.unsupported_competencies)
    needs_projects = any(not p.is_factually_accurate for p in validation.projects_validation)

    profile_fix, competencies_fix, projects_fix = await asyncio.gather(
        correct_profile() if needs_profile else skipped(),
        correct_competencies() if needs_competencies else skipped(),
        correct_projects() if needs_projects else skipped(),
    )

    result = merge_corrections(result, profile_fix, competencies_fix, projects_fix)
    summary = result.correction.correction_summary
    await report(
        "content_correction",
        "completed",
        f"Content correction completed - {summary.total_issues_fixed} issues fixed",
        {"issuesFixed": summary.total_issues_fixed, "confidence": summary.confidence_score},
        95,
    )
    return result
