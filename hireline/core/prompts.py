"""
Centralized AI Prompt Repository
- Keeps the resume-analysis instructions in one place
- Decouples prompts from the analysis pipeline
"""

from typing import Optional, Tuple

# --- RESUME ANALYSIS PROMPTS ---
FEEDBACK_SCHEMA_DESCRIPTION = """{
    "summary": {
        "overallMatch": "%(overall_match)s",
        "briefAssessment": "2-3 sentence overall assessment of the candidate"
    },
    "keySkills": {
        "present": ["skills demonstrated in the resume"],
        "missing": ["%(missing_skills)s"]
    },
    "experienceAnalysis": {
        "relevantExperience": ["experience entries relevant to %(experience_target)s"],
        "gaps": ["gaps or weak areas in the experience"]
    },
    "educationFit": {
        "match": "%(education_match)s",
        "details": "short explanation of the education assessment"
    },
    "strengths": ["3 to 5 items"],
    "weaknesses": ["3 to 5 items"],
    "improvementSuggestions": ["3 to 5 concrete, actionable items"],
    "keywordMatch": {
        "score": "%(keyword_score)s",
        "missingKeywords": ["%(missing_keywords)s"]
    },
    "formattingFeedback": "feedback on layout, structure and readability"
}"""

RESUME_ANALYSIS_SYSTEM_WITH_JOB = (
    "You are an Applicant Tracking System (ATS) evaluator and expert technical recruiter. "
    "Compare the candidate's resume against the job description and evaluate how well they match.\n"
    "Respond with STRICT JSON only: no markdown, no code fences, no commentary. "
    "The JSON must match this exact structure:\n"
    + FEEDBACK_SCHEMA_DESCRIPTION % {
        "overall_match": "match percentage from 0 to 100, as a string",
        "missing_skills": "skills required by the job but absent from the resume",
        "experience_target": "the job",
        "education_match": "Strong, Moderate, Weak or Not evaluated",
        "keyword_score": "keyword match percentage from 0 to 100, as a string",
        "missing_keywords": "important job-description keywords absent from the resume",
    }
    + "\nstrengths, weaknesses and improvementSuggestions must each contain 3 to 5 items."
)

RESUME_ANALYSIS_SYSTEM_GENERAL = (
    "You are an expert career coach and resume reviewer. "
    "Give a general assessment of the candidate's resume: its content, impact and presentation.\n"
    "Respond with STRICT JSON only: no markdown, no code fences, no commentary. "
    "The JSON must match this exact structure:\n"
    + FEEDBACK_SCHEMA_DESCRIPTION % {
        "overall_match": "N/A",
        "missing_skills": "skills commonly expected for the candidate's apparent role",
        "experience_target": "the candidate's apparent career direction",
        "education_match": "Strong, Moderate, Weak or Not evaluated",
        "keyword_score": "N/A",
        "missing_keywords": "industry keywords the resume would benefit from",
    }
    + "\nThere is no job description, so do not score a match: "
    "use \"N/A\" for summary.overallMatch and keywordMatch.score.\n"
    "strengths, weaknesses and improvementSuggestions must each contain 3 to 5 items."
)

RESUME_ANALYSIS_USER_WITH_JOB_TEMPLATE = "JOB DESCRIPTION:\n{job_description}\n\nRESUME:\n{resume_text}"

RESUME_ANALYSIS_USER_GENERAL_TEMPLATE = "RESUME:\n{resume_text}"

# helper to build prompts
def get_prompt(template: str, **kwargs) -> str:
    return template.format(**kwargs)

def compose_analysis_prompts(resume_text: str, job_description: Optional[str] = None) -> Tuple[str, str]:
    """
    Build the (system instruction, user payload) pair for a resume analysis.

    A blank job description counts as absent and selects the general assessment.
    """
    resume_text = resume_text or ""
    if job_description and job_description.strip():
        return (
            RESUME_ANALYSIS_SYSTEM_WITH_JOB,
            get_prompt(
                RESUME_ANALYSIS_USER_WITH_JOB_TEMPLATE,
                job_description=job_description.strip(),
                resume_text=resume_text,
            ),
        )
    return (
        RESUME_ANALYSIS_SYSTEM_GENERAL,
        get_prompt(RESUME_ANALYSIS_USER_GENERAL_TEMPLATE, resume_text=resume_text),
    )
