"""Structured-output schemas for every agent, and the criteria tables."""

from typing import Any, Literal

from pydantic import BaseModel, Field

Score = float


# Evaluation criteria for the multi-agent CV analysis
ANALYSIS_CRITERIA = [
    {
        "id": "language_quality",
        "name": "Language Quality",
        "description": "Evaluate grammar, spelling, flow, and professional tone. Check if it uses third-person perspective and action-oriented language.",
    },
    {
        "id": "content_completeness",
        "name": "Content Completeness",
        "description": "Check if the CV contains all required elements: summary, projects, technology, competencies, roles, education, courses, certifications, and languages.",
    },
    {
        "id": "summary_quality",
        "name": "Summary Quality",
        "description": "Evaluate the CV summary for strong opening, key skills/experiences, and demonstrated value.",
    },
    {
        "id": "project_descriptions",
        "name": "Project Descriptions",
        "description": "Evaluate project descriptions for proper structure, action-oriented language, role clarity, value contribution, and PARK methodology compliance.",
    },
    {
        "id": "competence_verification",
        "name": "Competence Verification",
        "description": "Verify that all listed competencies and roles are demonstrated in project descriptions.",
    },
]

# Criteria for the single-call evaluator
EVALUATION_CRITERIA = [
    {
        "id": "overall_structure",
        "name": "Overall Structure and Layout",
        "description": "Evaluate the CV structure, organization, and visual layout.",
    },
    {
        "id": "summary_quality",
        "name": "Summary Quality",
        "description": "Evaluate the CV summary (personal statement) for clarity, relevance, and impact.",
    },
    {
        "id": "experience_description",
        "name": "Experience Description",
        "description": "Evaluate how work experiences are described, focusing on clarity, achievement orientation, and quantification.",
    },
    {
        "id": "relevance_tailoring",
        "name": "Relevance and Tailoring",
        "description": "Evaluate how well the CV is tailored to the industry or specific roles.",
    },
    {
        "id": "skills_presentation",
        "name": "Skills Presentation",
        "description": "Evaluate how technical and soft skills are presented and substantiated.",
    },
]


# Analysis agents
class Rating(BaseModel):
    score: Score = Field(ge=0, le=10)
    reasoning: str
    suggestions: list[str]
    improved_version: str | None = None


class ElementVerification(BaseModel):
    element: str
    present: bool
    comment: str | None = None


class ContentCompleteness(BaseModel):
    score: Score = Field(ge=0, le=10)
    reasoning: str
    suggestions: list[str]
    element_verification: list[ElementVerification]


class ProjectEvaluation(BaseModel):
    project_name: str
    score: Score = Field(ge=0, le=10)
    strengths: list[str]
    weaknesses: list[str]
    improved_version: str | None = None


class ProjectDescriptions(BaseModel):
    score: Score = Field(ge=0, le=10)
    reasoning: str
    suggestions: list[str]
    project_evaluations: list[ProjectEvaluation]


class CompetenceVerification(BaseModel):
    score: Score = Field(ge=0, le=10)
    reasoning: str
    suggestions: list[str]
    unverified_competencies: list[str] | None = None
    unverified_roles: list[str] | None = None


class SummaryEvaluation(BaseModel):
    score: Score = Field(ge=0, le=10)
    reasoning: str
    suggestions: list[str]
    improved_version: str
    original_summary: str | None = None


class LanguageDetection(BaseModel):
    language: str = Field(description="The detected language name (e.g., English, Norwegian, German)")
    language_code: str = Field(description="The ISO language code (e.g., en, no, de)")
    confidence: float = Field(ge=0, le=1, description="Confidence level of detection")


# Single-call evaluator
class CriterionRating(BaseModel):
    criterion_id: str = Field(description="The ID of the criterion being evaluated")
    criterion_name: str = Field(description="The name of the criterion being evaluated")
    rating: float | None = Field(default=None, description="Rating from 1-10, where 1 is poor and 10 is excellent")
    reasoning: str = Field(default="", description="Detailed reasoning for the evaluation")
    suggestions: list[str] = Field(default_factory=list, description="Specific suggestions for improvement")


class FinalEvaluation(BaseModel):
    overall_rating: float | None = Field(default=None, description="Overall CV rating from 1-10")
    summary: str = Field(default="", description="Summary of the CV evaluation")
    key_strengths: list[str] = Field(default_factory=list)
    key_improvement_areas: list[str] = Field(default_factory=list)
    criterion_ratings: list[CriterionRating] = Field(default_factory=list)


# Customization agents
class Requirement(BaseModel):
    requirement: str
    description: str
    priority: str


class CustomerRequirements(BaseModel):
    must_have_requirements: list[Requirement]
    should_have_requirements: list[Requirement]
    context_summary: str


class ProfileCustomization(BaseModel):
    original_profile: str
    customized_profile: str
    reasoning: str


class KeyCompetencies(BaseModel):
    original_competencies: list[str]
    relevant_competencies: list[str]
    additional_suggested_competencies: list[str]
    reasoning: str


class ParcAnalysis(BaseModel):
    problem: str
    accountability: str
    role: str
    result: str


class ProjectCustomization(BaseModel):
    project_name: str
    original_description: str
    customized_description: str
    relevance_score: Score = Field(ge=0, le=10)
    parc_analysis: ParcAnalysis
    reasoning: str


class ProjectCustomizationList(BaseModel):
    """Wrapper object; OpenAI structured output needs an object at the top level."""

    projects: list[ProjectCustomization]


class RequirementCoverage(BaseModel):
    requirement: str
    covered: bool
    coverage_details: str
    improvement_suggestions: str


class CustomizationEvaluation(BaseModel):
    requirement_coverage: list[RequirementCoverage]
    overall_score: Score = Field(ge=0, le=10)
    overall_comments: str
    improvement_suggestions: list[str]


# Validation
class ProfileValidation(BaseModel):
    is_factually_accurate: bool
    fabricated_claims: list[str]
    unsupported_claims: list[str]
    reasoning: str
    corrected_profile: str


class CompetenciesValidation(BaseModel):
    unsupported_competencies: list[str]
    reasoning: str


class ProjectValidation(BaseModel):
    project_name: str
    is_factually_accurate: bool
    fabricated_details: list[str]
    unsupported_claims: list[str]
    reasoning: str
    corrected_description: str


class OverallValidation(BaseModel):
    passes_validation: bool
    confidence_score: Score = Field(ge=0, le=10)
    summary: str
    recommendations: list[str]


class ValidationReport(BaseModel):
    profile_validation: ProfileValidation
    competencies_validation: CompetenciesValidation
    projects_validation: list[ProjectValidation]
    overall_validation: OverallValidation


# Correction
class ProfileCorrection(BaseModel):
    corrected_profile: str
    changes_made: list[str]
    preserved_customizations: list[str]
    reasoning: str
    confidence_score: Score = Field(ge=0, le=10)


class CompetenciesCorrection(BaseModel):
    corrected_competencies: list[str]
    removed_competencies: list[str]
    preserved_competencies: list[str]
    reasoning: str
    confidence_score: Score = Field(ge=0, le=10)


class CorrectedProject(BaseModel):
    project_name: str
    corrected_description: str
    parc_analysis: ParcAnalysis
    changes_made: list[str]
    preserved_elements: list[str]
    reasoning: str


class ProjectsCorrectionSummary(BaseModel):
    total_projects_corrected: int
    major_corrections: list[str]
    confidence_score: Score = Field(ge=0, le=10)


class ProjectsCorrection(BaseModel):
    corrected_projects: list[CorrectedProject]
    correction_summary: ProjectsCorrectionSummary


class CorrectedProfileSection(BaseModel):
    profile: str
    changes_made: list[str]
    reasoning: str


class CorrectedCompetenciesSection(BaseModel):
    competencies: list[str]
    removed_competencies: list[str]
    reasoning: str


class CorrectedProjectSection(BaseModel):
    project_name: str
    corrected_description: str
    parc_analysis: ParcAnalysis
    changes_made: list[str]
    reasoning: str


class CorrectionSummary(BaseModel):
    total_issues_fixed: int
    major_changes: list[str]
    quality_improvements: list[str]
    confidence_score: Score


class CorrectionReport(BaseModel):
    corrected_profile: CorrectedProfileSection
    corrected_competencies: CorrectedCompetenciesSection
    corrected_projects: list[CorrectedProjectSection]
    correction_summary: CorrectionSummary


class CustomizationResult(BaseModel):
    customer_requirements: CustomerRequirements
    profile_customization: ProfileCustomization
    key_competencies: KeyCompetencies
    customized_projects: list[ProjectCustomization]
    evaluation: CustomizationEvaluation
    language_code: str
    validation: ValidationReport | None = None
    correction: CorrectionReport | None = None


# Progress reporting
ProgressStatus = Literal["starting", "running", "completed", "error"]


class ProgressUpdate(BaseModel):
    step: str
    status: ProgressStatus
    message: str
    data: Any = None
    progress: int = 0
