"""
CV customization agents.

Requirements are extracted from the customer documents first; the profile,
competencies and projects agents then tailor the CV to them, and the
evaluation agent scores the result.
"""

import logging

from langchain_core.language_models.chat_models import BaseChatModel

from cvhjelper.agents.llm import generate_object, with_document
from cvhjelper.agents.schemas import (
    CustomerRequirements,
    CustomizationEvaluation,
    KeyCompetencies,
    ProfileCustomization,
    ProjectCustomization,
    ProjectCustomizationList,
)
from cvhjelper.exceptions import AgentError

logger = logging.getLogger(__name__)

REQUIREMENTS_PROMPT = """You are an expert CV analyst specializing in analyzing job requirements and customer specifications.
Your task is to analyze the provided customer documents and extract all requirements.

{language_instruction}

Follow these steps:
1. Identify all requirements in the customer documents
2. Categorize them as "must have" (essential) or "should have" (desired but not essential)
3. For each requirement, provide a brief description
4. Assign a priority level (High, Medium, Low) to each requirement
5. Provide a brief context summary of the customer and project

Be thorough but concise. Focus on technical skills, domain knowledge, experience levels,
and any specific qualifications mentioned."""

PROFILE_PROMPT = """You are an expert CV writer specializing in tailoring professional profiles to specific job requirements.
Your task is to extract the complete original profile summary section and create a customized version that better matches customer requirements.

{language_instruction}

Follow these steps:
1. EXTRACT THE COMPLETE ORIGINAL PROFILE: Find and extract the ENTIRE personal profile/summary section from the CV exactly as written - do not abbreviate, summarize, or modify it in any way
2. Analyze the customer requirements to understand what should be emphasized
3. CREATE A COMPREHENSIVE CUSTOMIZED VERSION: Write a new profile that:
   - Maintains substantial detail from the original profile
   - Emphasizes relevant skills and experiences that match customer requirements
   - Preserves important background information and specific details
   - Reorganizes content to highlight the most relevant aspects first
   - Should be comprehensive (similar length to original or slightly shorter, but NOT drastically shortened)
4. Ensure the customized profile highlights how the candidate meets the must-have requirements
5. Include relevant soft skills that would be valuable for the role
6. Keep the professional tone and style consistent with the original
7. Explain your reasoning for the changes

CRITICAL INSTRUCTIONS:
- original_profile: Must contain the COMPLETE, UNMODIFIED original profile text from the CV
- customized_profile: Should be a comprehensive, tailored version that preserves important details while emphasizing relevance
- reasoning: Explain what changes you made and why

IMPORTANT: Do NOT create a short summary or drastically reduce the content. The customized profile should be substantial and detailed, just reorganized and emphasized differently to match the customer requirements. Only remove or de-emphasize content that is clearly irrelevant to the customer's needs."""

COMPETENCIES_PROMPT = """You are an expert CV consultant specializing in tailoring professional competencies to match job requirements.
Your task is to identify and prioritize competencies in a CV based on customer requirements.

{language_instruction}

Follow these steps:
1. Extract all competencies/skills mentioned in the CV
2. Identify which of these competencies are most relevant to the customer requirements
3. Suggest additional competencies that should be highlighted based on the CV content and requirements
4. Provide reasoning for your selections

Focus on both technical skills and domain knowledge that align with the customer's needs."""

PROJECTS_PROMPT = """You are an expert CV consultant specializing in tailoring project descriptions to match job requirements.
Your task is to extract projects from the CV and customize their descriptions to highlight experiences relevant to the customer requirements.

{language_instruction}

Follow these steps:
1. Identify key projects/assignments from the CV
2. For each identified project, extract its original description
3. Customize each project description to highlight aspects relevant to the customer requirements

CRITICAL: Write project descriptions in natural, flowing narrative language that seamlessly incorporates the PARC method:
- Problem: What was the challenge or situation?
- Accountability: What responsibilities did the consultant have?
- Role: What was the consultant's specific role?
- Result: What outcomes were achieved?

DO NOT write the description as a list or separate sections. Instead, craft a compelling narrative paragraph that naturally weaves together the context and challenges faced, the consultant's responsibilities and ownership, their particular contributions and the concrete outcomes.

Example style: "Led the digital transformation initiative for a legacy banking system facing critical performance issues and regulatory compliance gaps. Took full accountability for architecting and implementing a modern microservices solution, coordinating cross-functional teams of 12 developers and business analysts. Delivered a scalable platform that improved transaction processing speed by 65% and achieved full regulatory compliance, resulting in $2.3M annual cost savings."

When customizing project descriptions:
1. Highlight aspects that align with customer requirements
2. Use action-oriented language and strong verbs
3. Quantify achievements when possible from the original CV
4. Focus on the consultant's personal contribution and impact
5. Ensure the customized description accurately reflects the original project
6. Provide a relevance score (0-10) for each project based on how well it matches the requirements
7. Write in third-person objective form (avoid "I" statements)
8. Keep descriptions between 75-150 words as a single, flowing paragraph

For each project, provide the project name, the original description, the customized description, a PARC analysis breakdown (for validation purposes), the relevance score and the reasoning for the customization.

Return at least 3-5 most relevant projects. Sort them by relevance to the customer requirements."""

EVALUATION_PROMPT = """You are an expert CV evaluator specializing in assessing how well a CV meets specific job requirements.
Your task is to evaluate the customized CV against the customer requirements.

{language_instruction}

Follow these steps:
1. Assess how well each customer requirement is covered in the customized CV
2. For each requirement, provide details on where and how it is covered
3. Suggest improvements for requirements that are not well covered
4. Provide an overall score (0-10) for how well the CV matches the requirements
5. Provide overall comments and improvement suggestions

Be thorough but fair in your assessment. Focus on concrete evidence in the CV."""


def format_requirements(requirements: CustomerRequirements, with_description: bool = True) -> str:
    """Render must-have and should-have requirements as a bullet list."""
    lines = []
    for label, items in (
        ("Must-have", requirements.must_have_requirements),
        ("Should-have", requirements.should_have_requirements),
    ):
        for req in items:
            text = f"- {req.requirement}: {req.description}" if with_description else f"- {req.requirement}"
            lines.append(f"{text} ({label}, Priority: {req.priority})")
    return "\n".join(lines)


def format_projects(projects: list[ProjectCustomization]) -> str:
    return "\n\n".join(
        f"PROJECT: {p.project_name}\n"
        f"RELEVANCE SCORE: {p.relevance_score}/10\n"
        f"CUSTOMIZED DESCRIPTION:\n{p.customized_description}\n"
        f"PARC ANALYSIS:\n"
        f"- Problem: {p.parc_analysis.problem}\n"
        f"- Accountability: {p.parc_analysis.accountability}\n"
        f"- Role: {p.parc_analysis.role}\n"
        f"- Result: {p.parc_analysis.result}"
        for p in projects
    )


async def run_requirements_analysis_agent(
    model: BaseChatModel,
    customer_documents: list[tuple[str, str]],
    language_instruction: str = "",
) -> CustomerRequirements:
    """Extract requirements from (file name, text) customer documents."""
    prompt = "Please analyze the following customer documents and extract all requirements."
    for name, text in customer_documents:
        prompt = with_document(prompt, text, title=f"CUSTOMER DOCUMENT: {name}")

    try:
        return await generate_object(
            model,
            CustomerRequirements,
            REQUIREMENTS_PROMPT.format(language_instruction=language_instruction),
            prompt,
        )
    except Exception as e:
        logger.error(f"Error in requirements analysis: {e}")
        raise AgentError("Failed to analyze customer requirements") from e


async def run_profile_customization_agent(
    model: BaseChatModel,
    cv_text: str,
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> ProfileCustomization:
    must_have = "\n".join(
        f"- {r.requirement}: {r.description} (Priority: {r.priority})"
        for r in requirements.must_have_requirements
    )
    should_have = "\n".join(
        f"- {r.requirement}: {r.description} (Priority: {r.priority})"
        for r in requirements.should_have_requirements
    )
    prompt = f"""Here are the customer requirements:

CONTEXT SUMMARY:
{requirements.context_summary}

MUST-HAVE REQUIREMENTS:
{must_have}

SHOULD-HAVE REQUIREMENTS:
{should_have}

INSTRUCTIONS:
1. Extract the COMPLETE original profile/summary section from the CV exactly as written (do not shorten or modify it)
2. Create a customized version that better aligns with these customer requirements
3. Provide detailed reasoning for your changes

CRITICAL: The original_profile field must contain the ENTIRE original profile summary text from the CV, word-for-word, without any modifications, abbreviations, or summarization."""

    try:
        return await generate_object(
            model,
            ProfileCustomization,
            PROFILE_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in profile customization: {e}")
        raise AgentError("Failed to customize CV profile") from e


async def run_competencies_customization_agent(
    model: BaseChatModel,
    cv_text: str,
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> KeyCompetencies:
    prompt = f"""Here are the customer requirements:

CONTEXT SUMMARY:
{requirements.context_summary}

REQUIREMENTS:
{format_requirements(requirements, with_description=False)}

Please analyze the CV. Extract all competencies from it, identify which ones are most relevant to the
customer requirements, and suggest any additional competencies that should be highlighted
based on the CV content. Provide your reasoning for the selections."""

    try:
        return await generate_object(
            model,
            KeyCompetencies,
            COMPETENCIES_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in competencies customization: {e}")
        raise AgentError("Failed to customize competencies") from e


async def run_projects_customization_agent(
    model: BaseChatModel,
    cv_text: str,
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> list[ProjectCustomization]:
    """Tailored project descriptions, most relevant first."""
    prompt = f"""Please analyze the CV and extract key projects. Then customize each project description to better match these customer requirements:

CONTEXT SUMMARY:
{requirements.context_summary}

REQUIREMENTS:
{format_requirements(requirements)}

For each project:
1. Extract the original description
2. Create a customized version that highlights aspects relevant to the requirements
3. Use the PARC method (Problem, Accountability, Role, Result)
4. Rate the relevance of each project to the requirements (0-10)
5. Provide reasoning for your customization

Return the projects sorted by relevance score (highest first)."""

    try:
        response = await generate_object(
            model,
            ProjectCustomizationList,
            PROJECTS_PROMPT.format(language_instruction=language_instruction),
            with_document(prompt, cv_text),
        )
    except Exception as e:
        logger.error(f"Error in projects customization: {e}")
        raise AgentError("Failed to customize project descriptions") from e

    return sorted(response.projects, key=lambda p: p.relevance_score, reverse=True)


async def run_evaluation_agent(
    model: BaseChatModel,
    profile: ProfileCustomization,
    competencies: KeyCompetencies,
    projects: list[ProjectCustomization],
    requirements: CustomerRequirements,
    language_instruction: str = "",
) -> CustomizationEvaluation:
    """Score how well the customized CV covers each requirement."""
    key_competencies = "\n".join(f"- {c}" for c in competencies.relevant_competencies)
    prompt = f"""Please evaluate the following customized CV against the customer requirements:

CUSTOMER REQUIREMENTS:
{format_requirements(requirements)}

CUSTOMIZED PROFILE:
{profile.customized_profile}

KEY COMPETENCIES:
{key_competencies}

CUSTOMIZED PROJECTS:
{format_projects(projects)}

For each requirement, evaluate if it is covered in the CV, provide details on the coverage,
and suggest improvements if needed. Then provide an overall score and comments."""

    try:
        return await generate_object(
            model,
            CustomizationEvaluation,
            EVALUATION_PROMPT.format(language_instruction=language_instruction),
            prompt,
        )
    except Exception as e:
        logger.error(f"Error in CV evaluation: {e}")
        raise AgentError("Failed to evaluate customized CV") from e
