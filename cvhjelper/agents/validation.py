"""
Fact-checking of customized CV content and targeted corrections.

The validation agent compares customized sections with the original CV; the
correction agents then fix only what validation flagged.
"""

import logging

from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.agents.llm import generate_object, with_document
from cvhjelper.agents.schemas import (
    CompetenciesCorrection,
    CompetenciesValidation,
    CustomerRequirements,
    ProfileCorrection,
    ProfileValidation,
    ProjectCustomization,
    ProjectsCorrection,
    ProjectValidation,
    ValidationReport,
)
from cvhjelper.exceptions import AgentError

logger = logging.getLogger(__name__)

VALIDATION_PROMPT = """You are an expert fact-checker specializing in CV content validation.
Your critical task is to ensure that all customized CV content is FACTUALLY ACCURATE and GROUNDED in the original CV.

{language_instruction}

STRICT VALIDATION RULES:
1. NO FABRICATION: Never allow any information that is not present or directly supported by the original CV
2. NO EXAGGERATION: Don't allow overstated claims about skills, experience, or achievements
3. NO INVENTION: Don't allow new technologies, projects, or experiences not mentioned in the original CV
4. VERIFY EVERYTHING: Cross-check every claim in the customized content against the original CV
5. BE CONSERVATIVE: When in doubt, flag as potentially fabricated
6. QUOTE EXACTLY: When identifying fabricated or unsupported claims, provide the EXACT text from the customized content
7. DISTINGUISH REORGANIZATION FROM FABRICATION: Reorganizing or rephrasing existing information is acceptable; adding new information is not

CRITICAL VALIDATION PROCESS:
For each customized section:
1. Read through the ENTIRE original CV document to establish the factual baseline
2. Compare the customized content word-by-word with ALL content in the original CV
3. Only flag as fabricated/unsupported if the information is definitively NOT present in the original CV
4. Allow reasonable interpretation and rephrasing of existing information
5. Focus on substance, not style or presentation changes

WHEN IDENTIFYING ISSUES:
- Quote the EXACT text from the customized content that is problematic
- Be specific about which words or phrases are not supported by the original CV
- Explain WHY you consider something fabricated (what specific information is missing from the original)
- Do not flag reorganization or rephrasing unless new facts are added

OUTPUT REQUIREMENTS:
- corrected_profile: Only provide if corrections are needed, otherwise use empty string ""
- corrected_description: Only provide if corrections are needed, otherwise use empty string ""
- When corrections are provided, they should maintain the customization intent while ensuring factual accuracy
- If no fabricated content is found, clearly state this in your reasoning

Your validation should be thorough but fair - don't penalize good customization that stays within factual bounds."""

PROFILE_CORRECTION_PROMPT = """You are an expert CV profile correction specialist. Your task is to fix only the specific validation issues identified while preserving valuable customizations that are factually accurate.

{language_instruction}

CORRECTION PRINCIPLES:
1. VERIFY VALIDATION ACCURACY: First, re-examine the original CV to confirm if the flagged issues are actually problems
2. TARGETED FIXES: Only fix issues that are genuinely fabricated or unsupported by the original CV
3. PRESERVE CUSTOMIZATIONS: Keep all valid customizations that improve relevance to customer requirements
4. MAINTAIN OPTIMIZATION: The corrected profile should still be optimized for the customer requirements
5. FACTUAL ACCURACY: Ensure all information is grounded in the original CV
6. BALANCED APPROACH: Don't revert to the original - improve the customized version
7. QUESTION FALSE POSITIVES: If validation flagged something that IS in the original CV, preserve it

Sometimes validation agents incorrectly flag reorganized or rephrased content as fabricated.
Make the final determination based on what's actually in the original CV."""

COMPETENCIES_CORRECTION_PROMPT = """You are an expert CV competencies correction specialist. Your task is to fix competency validation issues while preserving relevant selections.

{language_instruction}

CORRECTION PRINCIPLES:
1. REMOVE FABRICATED: Remove only competencies that are not supported by the original CV
2. PRESERVE RELEVANT: Keep all competencies that are both in the original CV and relevant to customer requirements
3. MAINTAIN OPTIMIZATION: Ensure the final list is still optimized for customer requirements
4. FACTUAL GROUNDING: Only include competencies that are clearly demonstrated in the original CV"""

PROJECTS_CORRECTION_PROMPT = """You are an expert CV projects correction specialist. Your task is to fix project validation issues while preserving valuable customizations.

{language_instruction}

CORRECTION PRINCIPLES:
1. TARGETED FIXES: Only fix the specific fabricated or unsupported claims identified
2. PRESERVE CUSTOMIZATIONS: Keep all valid improvements in presentation and relevance
3. MAINTAIN PARC STRUCTURE: Preserve the Problem-Accountability-Role-Result analysis where factual
4. FACTUAL GROUNDING: Ensure all details are supported by the original CV
5. OPTIMIZE FOR REQUIREMENTS: Keep customizations that improve relevance to customer requirements

IMPORTANT: You must return corrections for ALL {count} projects, not just some of them."""


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _requirements_context(requirements: CustomerRequirements) -> str:
    reqs = requirements.must_have_requirements + requirements.should_have_requirements
    return "CUSTOMER REQUIREMENTS:\n" + "\n".join(f"- {r.requirement} ({r.priority})" for r in reqs)


def _project_block(project: ProjectCustomization) -> str:
    parc = project.parc_analysis
    return (
        f"PROJECT: {project.project_name}\n"
        f"ORIGINAL DESCRIPTION: {project.original_description}\n"
        f"CUSTOMIZED DESCRIPTION: {project.customized_description}\n"
        f"PARC ANALYSIS:\n"
        f"- Problem: {parc.problem}\n"
        f"- Accountability: {parc.accountability}\n"
        f"- Role: {parc.role}\n"
        f"- Result: {parc.result}"
    )


def _joined(items: list[str]) -> str:
    return ", ".join(items) or "None"


async def run_validation_agent(
    model: BaseChatModel,
    cv_text: str,
    original_profile: str,
    customized_profile: str,
    original_competencies: list[str],
    customized_competencies: list[str],
    customized_projects: list[ProjectCustomization],
    language_instruction: str = "",
) -> ValidationReport:
    """Flag fabricated or unsupported claims in the customized content."""
    projects_text = "\n\n".join(_project_block(p) for p in customized_projects)
    prompt = f"""Please validate the following customized CV content against the original CV to ensure no fabrication or unsupported claims:

ORIGINAL PROFILE:
{original_profile}

CUSTOMIZED PROFILE:
{customized_profile}

ORIGINAL COMPETENCIES:
{_bullets(original_competencies)}

RELEVANT CUSTOMIZED COMPETENCIES:
{_bullets(customized_competencies)}

CUSTOMIZED PROJECTS:
{projects_text}

VALIDATION INSTRUCTIONS:
1. Read through the ENTIRE CV text below to understand all available information
2. Compare each piece of customized content against the complete original CV
3. Focus on identifying genuinely fabricated information (not just reorganized or rephrased content)
4. The original profile above was extracted from the CV, so check against the full CV text
5. Only flag content as fabricated if you cannot find supporting information anywhere in the original CV
6. Provide corrected versions only if actual fabrication is found"""

    try:
        return await generate_object(
            model,
            ValidationReport,
            VALIDATION_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in CV validation: {e}")
        raise AgentError("Failed to validate customized CV content") from e


async def run_profile_correction_agent(
    model: BaseChatModel,
    cv_text: str,
    original_profile: str,
    customized_profile: str,
    profile_validation: ProfileValidation,
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> ProfileCorrection:
    prompt = f"""Please correct the specific validation issues in the customized profile while preserving valid customizations.

VALIDATION ISSUES TO FIX:
- Factually Accurate: {profile_validation.is_factually_accurate}
- Fabricated Claims: {_joined(profile_validation.fabricated_claims)}
- Unsupported Claims: {_joined(profile_validation.unsupported_claims)}
- Validation Reasoning: {profile_validation.reasoning}

{_requirements_context(requirements)}

ORIGINAL PROFILE:
{original_profile}

CUSTOMIZED PROFILE (to be corrected):
{customized_profile}

INSTRUCTIONS:
1. Fix only the specific fabricated or unsupported claims identified
2. Preserve all valid customizations that improve relevance to customer requirements
3. Maintain the enhanced presentation style from the customized version
4. Do NOT simply revert to the original profile"""

    try:
        return await generate_object(
            model,
            ProfileCorrection,
            PROFILE_CORRECTION_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in profile correction: {e}")
        raise AgentError("Failed to correct profile content") from e


async def run_competencies_correction_agent(
    model: BaseChatModel,
    cv_text: str,
    original_competencies: list[str],
    customized_competencies: list[str],
    competencies_validation: CompetenciesValidation,
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> CompetenciesCorrection:
    prompt = f"""Please correct the competencies list by removing only the unsupported ones while preserving valid selections.

VALIDATION ISSUES TO FIX:
- Unsupported Competencies: {_joined(competencies_validation.unsupported_competencies)}
- Validation Reasoning: {competencies_validation.reasoning}

{_requirements_context(requirements)}

ORIGINAL COMPETENCIES (available in CV):
{_bullets(original_competencies)}

CURRENT CUSTOMIZED COMPETENCIES (to be corrected):
{_bullets(customized_competencies)}

INSTRUCTIONS:
1. Remove only the competencies identified as unsupported by the validation
2. Keep all competencies that are both in the original CV and relevant to customer requirements
3. Ensure the final list is well-optimized for the customer requirements"""

    try:
        return await generate_object(
            model,
            CompetenciesCorrection,
            COMPETENCIES_CORRECTION_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in competencies correction: {e}")
        raise AgentError("Failed to correct competencies") from e


def match_project_validation(
    projects: list[ProjectCustomization],
    validations: list[ProjectValidation],
) -> list[ProjectValidation]:
    """Pair each project with its validation: by name, then by position, else a clean default."""
    by_name = {v.project_name: v for v in validations}
    matched = []
    for index, project in enumerate(projects):
        validation = by_name.get(project.project_name)
        if validation is None and index < len(validations):
            validation = validations[index]
        if validation is None:
            validation = ProjectValidation(
                project_name=project.project_name,
                is_factually_accurate=True,
                fabricated_details=[],
                unsupported_claims=[],
                reasoning="No validation issues found",
                corrected_description="",
            )
        matched.append(validation)
    return matched


async def run_projects_correction_agent(
    model: BaseChatModel,
    cv_text: str,
    customized_projects: list[ProjectCustomization],
    projects_validation: list[ProjectValidation],
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> ProjectsCorrection:
    """Correct every project, in the same order as given."""
    count = len(customized_projects)
    blocks = []
    pairs = zip(customized_projects, match_project_validation(customized_projects, projects_validation))
    for index, (project, validation) in enumerate(pairs, start=1):
        blocks.append(
            f"{index}. {_project_block(project)}\n"
            f"VALIDATION ISSUES:\n"
            f"- Factually Accurate: {validation.is_factually_accurate}\n"
            f"- Fabricated Details: {_joined(validation.fabricated_details)}\n"
            f"- Unsupported Claims: {_joined(validation.unsupported_claims)}\n"
            f"- Reasoning: {validation.reasoning}"
        )
    projects_text = "\n\n".join(blocks)

    prompt = f"""Please correct validation issues in ALL {count} project descriptions while preserving valid customizations.

{_requirements_context(requirements)}

PROJECTS TO CORRECT:
{projects_text}

INSTRUCTIONS:
1. Provide corrections for ALL {count} projects in the same order
2. Fix only the specific fabricated or unsupported claims identified for each project
3. Preserve all valid customizations that improve relevance to customer requirements
4. Maintain the enhanced presentation style and PARC structure where factual
5. Ensure each corrected description is grounded in the original project description"""

    try:
        return await generate_object(
            model,
            ProjectsCorrection,
            PROJECTS_CORRECTION_PROMPT.format(language_instruction=language_instruction, count=count),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in projects correction: {e}")
        raise AgentError("Failed to correct project descriptions") from e
