from hireline.core import prompts
from hireline.core.prompts import compose_analysis_prompts

def test_job_prompt_is_ats_evaluation():
    system, user = compose_analysis_prompts("Jane Doe, Python", "Backend role, Python required")
    assert system == prompts.RESUME_ANALYSIS_SYSTEM_WITH_JOB
    assert "Applicant Tracking System" in system
    assert "STRICT JSON" in system
    assert "3 to 5 items" in system
    assert user == "JOB DESCRIPTION:\nBackend role, Python required\n\nRESUME:\nJane Doe, Python"

def test_general_prompt_without_job_description():
    system, user = compose_analysis_prompts("Jane Doe, Python")
    assert system == prompts.RESUME_ANALYSIS_SYSTEM_GENERAL
    assert "Applicant Tracking System" not in system
    assert "N/A" in system
    assert user == "RESUME:\nJane Doe, Python"
    assert "JOB DESCRIPTION" not in user

def test_blank_job_description_counts_as_absent():
    system, user = compose_analysis_prompts("resume", "   \n")
    assert system == prompts.RESUME_ANALYSIS_SYSTEM_GENERAL
    assert user == "RESUME:\nresume"

def test_every_canonical_field_is_described():
    for field in (
        "summary", "overallMatch", "briefAssessment", "keySkills", "experienceAnalysis",
        "educationFit", "strengths", "weaknesses", "improvementSuggestions",
        "keywordMatch", "missingKeywords", "formattingFeedback",
    ):
        assert f'"{field}"' in prompts.RESUME_ANALYSIS_SYSTEM_WITH_JOB
        assert f'"{field}"' in prompts.RESUME_ANALYSIS_SYSTEM_GENERAL

def test_long_resume_keeps_its_tail():
    resume = "A" * 20000 + "TAIL"
    _, user = compose_analysis_prompts(resume, "j" * 9000 + "END")
    assert user.endswith(resume)
    assert "j" * 9000 + "END\n\nRESUME:" in user

def test_braces_in_resume_are_kept_verbatim():
    _, user = compose_analysis_prompts("skills: {python}")
    assert user.endswith("skills: {python}")
