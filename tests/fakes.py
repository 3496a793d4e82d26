"""Fake chat model and sample agent outputs shared by the tests."""

from typing import Any

from langchain_core.messages import AIMessage, AIMessageChunk

from cvhjelper.agents.schemas import (
    CompetenceVerification,
    CompetenciesCorrection,
    CompetenciesValidation,
    ContentCompleteness,
    CorrectedProject,
    CustomerRequirements,
    CustomizationEvaluation,
    ElementVerification,
    KeyCompetencies,
    LanguageDetection,
    OverallValidation,
    ParcAnalysis,
    ProfileCorrection,
    ProfileCustomization,
    ProfileValidation,
    ProjectCustomization,
    ProjectCustomizationList,
    ProjectDescriptions,
    ProjectEvaluation,
    ProjectsCorrection,
    ProjectsCorrectionSummary,
    ProjectValidation,
    Rating,
    Requirement,
    RequirementCoverage,
    SummaryEvaluation,
    ValidationReport,
)
from cvhjelper.exceptions import PDFParseError

CV_TEXT = """Senior backend developer with 8 years of experience in Python and cloud platforms.

Projects
Payments platform: Built a FastAPI service handling card payments for a Nordic bank.
Data pipeline: Migrated nightly batch jobs to event-driven processing on AWS.

Competencies: Python, FastAPI, PostgreSQL, AWS, Docker"""

CUSTOMER_TEXT = "We need a Python developer with AWS and payments experience. Kubernetes is a plus."

EMPTY_PDF = b"%PDF-1.4 empty"
BROKEN_PDF = b"not really a pdf"


class StructuredFake:
    """Result of FakeChatModel.with_structured_output(schema)."""

    def __init__(self, model: "FakeChatModel", schema: type):
        self.model = model
        self.schema = schema

    async def ainvoke(self, messages, *args, **kwargs):
        self.model.calls.append((self.schema.__name__, messages))
        if self.schema not in self.model.objects:
            raise RuntimeError(f"No fake response for {self.schema.__name__}")
        value = self.model.objects[self.schema]
        if isinstance(value, Exception):
            raise value
        if callable(value) and not isinstance(value, type):
            value = value(messages)
        return value


class FakeChatModel:
    """
    Stands in for a LangChain chat model.

    ``objects`` maps a schema class to the instance (or exception, or
    callable taking the messages) returned by structured-output calls.
    ``text`` answers plain ainvoke calls and ``chunks`` feed astream.
    """

    def __init__(
        self,
        objects: dict[type, Any] | None = None,
        text: str | Exception = "Fake model response",
        chunks: list[str] | None = None,
    ):
        self.objects = dict(objects or {})
        self.text = text
        self.chunks = chunks if chunks is not None else ["Fake ", "stream"]
        self.calls: list[tuple[str, Any]] = []

    def with_structured_output(self, schema, **kwargs):
        return StructuredFake(self, schema)

    async def ainvoke(self, messages, *args, **kwargs):
        self.calls.append(("text", messages))
        if isinstance(self.text, Exception):
            raise self.text
        return AIMessage(content=self.text)

    async def astream(self, messages, *args, **kwargs):
        self.calls.append(("stream", messages))
        for chunk in self.chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield AIMessageChunk(content=chunk)

    def called(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


def parc(prefix: str = "") -> ParcAnalysis:
    return ParcAnalysis(
        problem=f"{prefix}Legacy system",
        accountability=f"{prefix}Delivery",
        role=f"{prefix}Lead developer",
        result=f"{prefix}Faster releases",
    )


def make_project(name: str, relevance: float) -> ProjectCustomization:
    return ProjectCustomization(
        project_name=name,
        original_description=f"{name} original",
        customized_description=f"{name} customized",
        relevance_score=relevance,
        parc_analysis=parc(),
        reasoning="Matches the requirements",
    )


def analysis_objects() -> dict[type, Any]:
    return {
        LanguageDetection: LanguageDetection(language="Norwegian", language_code="no", confidence=0.95),
        Rating: Rating(score=8, reasoning="Clear writing", suggestions=["Use more active verbs"]),
        ContentCompleteness: ContentCompleteness(
            score=6,
            reasoning="Education missing",
            suggestions=["Add education"],
            element_verification=[
                ElementVerification(element="Summary/Profile", present=True),
                ElementVerification(element="Education", present=False, comment="Not found"),
            ],
        ),
        SummaryEvaluation: SummaryEvaluation(
            score=7.5,
            reasoning="Strong opening",
            suggestions=["Mention certifications"],
            improved_version="Experienced backend developer...",
            original_summary="Senior backend developer with 8 years of experience",
        ),
        ProjectDescriptions: ProjectDescriptions(
            score=0,
            reasoning="Per project",
            suggestions=["Quantify results"],
            project_evaluations=[
                ProjectEvaluation(project_name="Payments platform", score=6, strengths=["Clear"], weaknesses=[]),
                ProjectEvaluation(project_name="Data pipeline", score=5, strengths=[], weaknesses=["Vague"]),
            ],
        ),
        CompetenceVerification: CompetenceVerification(
            score=4,
            reasoning="Docker never used in projects",
            suggestions=["Show Docker in a project"],
            unverified_competencies=["Docker"],
            unverified_roles=[],
        ),
    }


def customization_objects(passes_validation: bool = True) -> dict[type, Any]:
    requirements = CustomerRequirements(
        must_have_requirements=[
            Requirement(requirement="Python", description="Backend development", priority="High"),
            Requirement(requirement="AWS", description="Cloud hosting", priority="High"),
        ],
        should_have_requirements=[
            Requirement(requirement="Kubernetes", description="Container orchestration", priority="Medium"),
        ],
        context_summary="Bank modernizing its payments stack",
    )
    validation = ValidationReport(
        profile_validation=ProfileValidation(
            is_factually_accurate=passes_validation,
            fabricated_claims=[] if passes_validation else ["Kubernetes expert"],
            unsupported_claims=[],
            reasoning="Checked against the CV",
            corrected_profile="",
        ),
        competencies_validation=CompetenciesValidation(
            unsupported_competencies=[] if passes_validation else ["Kubernetes"],
            reasoning="Checked against the CV",
        ),
        projects_validation=[
            ProjectValidation(
                project_name="Payments platform",
                is_factually_accurate=passes_validation,
                fabricated_details=[] if passes_validation else ["Led 40 developers"],
                unsupported_claims=[],
                reasoning="Team size not in CV",
                corrected_description="",
            ),
        ],
        overall_validation=OverallValidation(
            passes_validation=passes_validation,
            confidence_score=9 if passes_validation else 6,
            summary="Validation summary",
            recommendations=[],
        ),
    )
    return {
        LanguageDetection: LanguageDetection(language="English", language_code="en", confidence=0.9),
        CustomerRequirements: requirements,
        ProfileCustomization: ProfileCustomization(
            original_profile="Senior backend developer with 8 years of experience",
            customized_profile="Python and AWS backend developer, Kubernetes expert",
            reasoning="Emphasized cloud",
        ),
        KeyCompetencies: KeyCompetencies(
            original_competencies=["Python", "FastAPI", "PostgreSQL", "AWS", "Docker"],
            relevant_competencies=["Python", "AWS", "Kubernetes"],
            additional_suggested_competencies=["Payments"],
            reasoning="Matched to requirements",
        ),
        ProjectCustomizationList: ProjectCustomizationList(
            projects=[make_project("Data pipeline", 6), make_project("Payments platform", 9)]
        ),
        CustomizationEvaluation: CustomizationEvaluation(
            requirement_coverage=[
                RequirementCoverage(
                    requirement="Python",
                    covered=True,
                    coverage_details="Profile and projects",
                    improvement_suggestions="",
                ),
            ],
            overall_score=8,
            overall_comments="Good match",
            improvement_suggestions=["Mention Kubernetes only if used"],
        ),
        ValidationReport: validation,
        ProfileCorrection: ProfileCorrection(
            corrected_profile="Python and AWS backend developer",
            changes_made=["Removed Kubernetes claim"],
            preserved_customizations=["Cloud emphasis"],
            reasoning="Kubernetes not in CV",
            confidence_score=8,
        ),
        CompetenciesCorrection: CompetenciesCorrection(
            corrected_competencies=["Python", "AWS"],
            removed_competencies=["Kubernetes"],
            preserved_competencies=["Python", "AWS"],
            reasoning="Kubernetes not in CV",
            confidence_score=9,
        ),
        ProjectsCorrection: ProjectsCorrection(
            corrected_projects=[
                CorrectedProject(
                    project_name="Payments platform",
                    corrected_description="Payments platform corrected",
                    parc_analysis=parc("Corrected "),
                    changes_made=["Removed team size"],
                    preserved_elements=["Bank context"],
                    reasoning="Team size not in CV",
                ),
            ],
            correction_summary=ProjectsCorrectionSummary(
                total_projects_corrected=1,
                major_corrections=["Removed team size"],
                confidence_score=7,
            ),
        ),
    }


def fake_parse_pdf(content: bytes) -> str:
    """Treat uploaded bytes as the document text."""
    if content == BROKEN_PDF:
        raise PDFParseError("Error parsing PDF: EOF marker not found")
    if content == EMPTY_PDF:
        return ""
    return content.decode("utf-8")


def pdf_upload(name: str = "cv.pdf", content: str | bytes = CV_TEXT) -> tuple[str, bytes, str]:
    if isinstance(content, str):
        content = content.encode("utf-8")
    return (name, content, "application/pdf")
