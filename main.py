"""
CV Hjelper - CLI Entry Point.

Usage:
    python main.py analyze <cv.pdf>
    python main.py customize <cv.pdf> <customer.pdf> [<customer.pdf> ...]
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from cvhjelper.agents.checklists import DEFAULT_ASSIGNMENTS_CHECKLIST, DEFAULT_SUMMARY_CHECKLIST
from cvhjelper.agents.models import create_chat_model
from cvhjelper.agents.pipelines import run_customization, run_cv_analysis
from cvhjelper.agents.schemas import CustomizationResult, ProgressUpdate
from cvhjelper.exceptions import AgentError, PDFParseError, ProviderError
from cvhjelper.logging_config import configure_logging
from cvhjelper.tools.pdf_parser import parse_pdf_from_path

USAGE = __doc__.split("Usage:")[1].rstrip()


def load_pdf(path: str) -> str:
    """Extract text from a PDF path, exiting with a message on failure."""
    pdf_path = Path(path)
    if not pdf_path.exists() or pdf_path.suffix.lower() != ".pdf":
        sys.exit(f"Error: {pdf_path} is not a valid PDF")

    try:
        text = parse_pdf_from_path(str(pdf_path))
    except PDFParseError as e:
        sys.exit(f"Error: {e}")
    if not text.strip():
        sys.exit(f"Error: {pdf_path} has no extractable text")

    print(f"Loaded {pdf_path.name} ({len(text)} chars)")
    return text


def print_analysis(result: dict) -> None:
    print("\n" + "=" * 40)
    print(f"Overall score: {result['overall_score']}/10")
    print(f"Language: {result['language']['language']}")
    print("=" * 40)
    print(f"\n{result['summary']}\n")

    print("Strengths:")
    for strength in result["key_strengths"]:
        print(f"  + {strength}")
    print("\nImprovement areas:")
    for area in result["key_improvement_areas"]:
        print(f"  - {area}")

    print("\nCriteria:")
    for criterion in result["criterion_evaluations"]:
        print(f"\n[{criterion['score']:.1f}] {criterion['criterion_name']}")
        for suggestion in criterion.get("suggestions", []):
            print(f"    * {suggestion}")


def print_customization(result: CustomizationResult) -> None:
    print("\n" + "=" * 40)
    print(f"Match score: {result.evaluation.overall_score}/10")
    print("=" * 40)

    print("\nProfile:")
    print(result.profile_customization.customized_profile)

    print("\nKey competencies:")
    print(", ".join(result.key_competencies.relevant_competencies))

    print("\nProjects:")
    for project in result.customized_projects:
        print(f"\n[{project.relevance_score}/10] {project.project_name}")
        print(project.customized_description)

    if result.correction:
        summary = result.correction.correction_summary
        print(f"\nCorrections applied: {summary.total_issues_fixed} issues fixed")


async def print_progress(update: ProgressUpdate) -> None:
    print(f"[{update.progress:3d}%] {update.step}: {update.message}")


async def analyze(cv_path: str) -> None:
    cv_text = load_pdf(cv_path)
    model = create_chat_model()
    print("Running analysis agents...")
    result = await run_cv_analysis(
        model, cv_text, DEFAULT_SUMMARY_CHECKLIST, DEFAULT_ASSIGNMENTS_CHECKLIST
    )
    print_analysis(result)


async def customize(cv_path: str, customer_paths: list[str]) -> None:
    cv_text = load_pdf(cv_path)
    customer_documents = [(Path(p).name, load_pdf(p)) for p in customer_paths]
    model = create_chat_model()
    result = await run_customization(
        model, cv_text, customer_documents, on_progress=print_progress, validate=True
    )
    print_customization(result)


def main():
    """Run the CV Hjelper CLI."""
    print("CV Hjelper")
    print("=" * 40)

    args = sys.argv[1:]
    if len(args) == 2 and args[0] == "analyze":
        command = analyze(args[1])
    elif len(args) >= 3 and args[0] == "customize":
        command = customize(args[1], args[2:])
    else:
        print(f"Usage:{USAGE}")
        sys.exit(2)

    configure_logging("WARNING")
    try:
        asyncio.run(command)
    except (ProviderError, AgentError) as e:
        sys.exit(f"Error: {e}")
    except KeyboardInterrupt:
        print("\nCancelled")


if __name__ == "__main__":
    main()
