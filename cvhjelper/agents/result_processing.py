"""Post-processing of agent results: scores, strengths and merged corrections."""

from typing import Any

from cvhjelper.agents.schemas import (
    CompetenciesCorrection,
    CorrectedCompetenciesSection,
    CorrectedProfileSection,
    CorrectedProjectSection,
    CorrectionReport,
    CorrectionSummary,
    CustomizationResult,
    ProfileCorrection,
    ProjectsCorrection,
)

STRENGTH_THRESHOLD = 7
DEFAULT_CONFIDENCE = 10

NO_STRENGTHS = "No specific strengths identified"
NO_IMPROVEMENT_AREAS = "No specific improvement areas identified"


def fix_project_descriptions_score(result: dict[str, Any]) -> dict[str, Any]:
    """Replace a zero overall score with the mean of the per-project scores."""
    evaluations = result.get("project_evaluations") or []
    if result.get("score") == 0 and evaluations:
        mean = sum(e["score"] for e in evaluations) / len(evaluations)
        return {**result, "score": round(mean, 1)}
    return result


def calculate_overall_score(criterion_evaluations: list[dict[str, Any]]) -> float:
    if not criterion_evaluations:
        return 0.0
    return sum(c["score"] for c in criterion_evaluations) / len(criterion_evaluations)


def extract_strengths(criterion_evaluations: list[dict[str, Any]]) -> list[str]:
    return [
        f"Strong {c['criterion_name'].lower()} (scored {c['score']:.1f}/10)"
        for c in criterion_evaluations
        if c["score"] >= STRENGTH_THRESHOLD
    ]


def extract_improvement_areas(criterion_evaluations: list[dict[str, Any]]) -> list[str]:
    """Criteria below the threshold, worst first."""
    weak = sorted(
        (c for c in criterion_evaluations if c["score"] < STRENGTH_THRESHOLD),
        key=lambda c: c["score"],
    )
    return [f"Improve {c['criterion_name'].lower()} (scored {c['score']:.1f}/10)" for c in weak]


def build_analysis_result(
    criterion_evaluations: list[dict[str, Any]],
    overall_score: float,
    summary: str,
) -> dict[str, Any]:
    """Assemble the analysis response, with defaults for empty lists."""
    return {
        "overall_score": round(overall_score, 1),
        "summary": summary,
        "key_strengths": extract_strengths(criterion_evaluations) or [NO_STRENGTHS],
        "key_improvement_areas": extract_improvement_areas(criterion_evaluations) or [NO_IMPROVEMENT_AREAS],
        "criterion_evaluations": criterion_evaluations,
        "detailed_analysis": {c["criterion_id"]: c for c in criterion_evaluations},
    }


def build_correction_report(
    result: CustomizationResult,
    profile: ProfileCorrection | None,
    competencies: CompetenciesCorrection | None,
    projects: ProjectsCorrection | None,
) -> CorrectionReport:
    """Combine the section corrections; sections without one keep their customized content."""
    total_issues_fixed = (
        (1 if profile else 0)
        + (len(competencies.removed_competencies) if competencies else 0)
        + (projects.correction_summary.total_projects_corrected if projects else 0)
    )

    major_changes = []
    quality_improvements = []
    if profile:
        major_changes.extend(profile.changes_made)
        quality_improvements.extend(profile.preserved_customizations)
    if competencies:
        major_changes.append(f"Removed {len(competencies.removed_competencies)} unsupported competencies")
        quality_improvements.extend(
            f"Preserved relevant competency: {c}" for c in competencies.preserved_competencies
        )
    if projects:
        major_changes.extend(projects.correction_summary.major_corrections)
        quality_improvements.extend(
            f"Preserved in {p.project_name}: {e}"
            for p in projects.corrected_projects
            for e in p.preserved_elements
        )

    if profile:
        profile_section = CorrectedProfileSection(
            profile=profile.corrected_profile,
            changes_made=profile.changes_made,
            reasoning=profile.reasoning,
        )
    else:
        profile_section = CorrectedProfileSection(
            profile=result.profile_customization.customized_profile,
            changes_made=[],
            reasoning="No profile correction needed",
        )

    if competencies:
        competencies_section = CorrectedCompetenciesSection(
            competencies=competencies.corrected_competencies,
            removed_competencies=competencies.removed_competencies,
            reasoning=competencies.reasoning,
        )
    else:
        competencies_section = CorrectedCompetenciesSection(
            competencies=result.key_competencies.relevant_competencies,
            removed_competencies=[],
            reasoning="No competencies correction needed",
        )

    if projects:
        project_sections = [
            CorrectedProjectSection(
                project_name=p.project_name,
                corrected_description=p.corrected_description,
                parc_analysis=p.parc_analysis,
                changes_made=p.changes_made,
                reasoning=p.reasoning,
            )
            for p in projects.corrected_projects
        ]
    else:
        project_sections = [
            CorrectedProjectSection(
                project_name=p.project_name,
                corrected_description=p.customized_description,
                parc_analysis=p.parc_analysis,
                changes_made=[],
                reasoning="No project correction needed",
            )
            for p in result.customized_projects
        ]

    confidences = [
        profile.confidence_score if profile else DEFAULT_CONFIDENCE,
        competencies.confidence_score if competencies else DEFAULT_CONFIDENCE,
        projects.correction_summary.confidence_score if projects else DEFAULT_CONFIDENCE,
    ]

    return CorrectionReport(
        corrected_profile=profile_section,
        corrected_competencies=competencies_section,
        corrected_projects=project_sections,
        correction_summary=CorrectionSummary(
            total_issues_fixed=total_issues_fixed,
            major_changes=major_changes,
            quality_improvements=quality_improvements,
            confidence_score=min(confidences),
        ),
    )


def merge_corrections(
    result: CustomizationResult,
    profile: ProfileCorrection | None = None,
    competencies: CompetenciesCorrection | None = None,
    projects: ProjectsCorrection | None = None,
) -> CustomizationResult:
    """
    Apply corrections to a customization result.

    Corrected projects replace customized ones index by index; projects
    beyond the corrected list are kept unchanged.
    """
    report = build_correction_report(result, profile, competencies, projects)

    customized_projects = list(result.customized_projects)
    for index, corrected in enumerate(report.corrected_projects[: len(customized_projects)]):
        customized_projects[index] = customized_projects[index].model_copy(
            update={
                "customized_description": corrected.corrected_description,
                "parc_analysis": corrected.parc_analysis,
            }
        )

    return result.model_copy(
        update={
            "profile_customization": result.profile_customization.model_copy(
                update={"customized_profile": report.corrected_profile.profile}
            ),
            "key_competencies": result.key_competencies.model_copy(
                update={"relevant_competencies": report.corrected_competencies.competencies}
            ),
            "customized_projects": customized_projects,
            "correction": report,
        }
    )
