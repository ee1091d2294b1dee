"""
Feedback normalization.

Maps whatever the model returned onto the canonical feedback object that is
persisted with every analysis. Shapes are recognised by an ordered list of
detectors (predicate + mapper); the default object closes the list, so
`normalize_feedback` always returns a fully populated feedback.

Supporting another provider convention means registering one more detector.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from hireline.schemas.analysis import Feedback

logger = logging.getLogger(__name__)

DEFAULT_OVERALL_MATCH = "N/A"
DEFAULT_KEYWORD_SCORE = "0"
DEFAULT_EDUCATION_MATCH = "Not evaluated"
NO_ASSESSMENT_MESSAGE = "No assessment provided."
NORMALIZATION_FAILED_MESSAGE = (
    "Feedback normalization failed: the AI response could not be mapped "
    "to the expected feedback format."
)

SCORE_KEYS = ("match_score", "matchScore", "overall_score", "overallScore", "ats_score", "score")
OVERALL_FEEDBACK_KEYS = ("overall_feedback", "areas_for_improvement", "action_items")
# Alternate-convention fields that carry actual feedback next to a score
MATCH_FEEDBACK_KEYS = (
    "matched_skills", "matchedSkills", "skills_present", "skills", "missing_skills",
    "missingSkills", "missing_requirements", "relevant_experience", "experience",
    "strengths", "weaknesses", "concerns", "recommendations", "suggestions",
    "summary", "assessment", "overall_assessment", "feedback",
)

# Keys tried, in order, when a list item arrives as an object instead of a string
ITEM_TEXT_KEYS = (
    "text", "name", "skill", "requirement", "signal", "title",
    "suggestion", "action", "area", "item", "description",
)


@dataclass(frozen=True)
class ShapeDetector:
    name: str
    matches: Callable[[Any], bool]
    mapper: Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class NormalizationResult:
    feedback: Dict[str, Any]
    shape: str
    degraded: bool


# --- coercion helpers ---

def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first(obj: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


def _item_text(item: Any) -> Optional[str]:
    if item is None:
        return None
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        text = _first(item, ITEM_TEXT_KEYS)
        if isinstance(text, str):
            return text
        return json.dumps(item, sort_keys=True)
    return str(item)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [text for text in (_item_text(v) for v in value) if text is not None]
    if isinstance(value, str):
        return [value] if value.strip() else []
    text = _item_text(value)
    return [text] if text else []


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "; ".join(_as_list(value)) or default
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _as_score(value: Any, default: str) -> str:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or default
    return default


def default_feedback(brief_assessment: str = NORMALIZATION_FAILED_MESSAGE) -> Dict[str, Any]:
    return {
        "summary": {"overallMatch": DEFAULT_OVERALL_MATCH, "briefAssessment": brief_assessment},
        "keySkills": {"present": [], "missing": []},
        "experienceAnalysis": {"relevantExperience": [], "gaps": []},
        "educationFit": {"match": DEFAULT_EDUCATION_MATCH, "details": ""},
        "strengths": [],
        "weaknesses": [],
        "improvementSuggestions": [],
        "keywordMatch": {"score": DEFAULT_KEYWORD_SCORE, "missingKeywords": []},
        "formattingFeedback": "",
    }


# --- detectors ---

def _is_canonical(obj: Any) -> bool:
    return isinstance(obj, dict) and isinstance(obj.get("summary"), dict)


def _map_canonical(obj: Dict[str, Any]) -> Dict[str, Any]:
    # Identity for a complete canonical object; gaps get defaults
    summary = obj["summary"]
    key_skills = _mapping(obj.get("keySkills"))
    experience = _mapping(obj.get("experienceAnalysis"))
    education = _mapping(obj.get("educationFit"))
    keywords = _mapping(obj.get("keywordMatch"))
    return {
        "summary": {
            "overallMatch": _as_score(summary.get("overallMatch"), DEFAULT_OVERALL_MATCH),
            "briefAssessment": _as_text(summary.get("briefAssessment"), NO_ASSESSMENT_MESSAGE),
        },
        "keySkills": {
            "present": _as_list(key_skills.get("present")),
            "missing": _as_list(key_skills.get("missing")),
        },
        "experienceAnalysis": {
            "relevantExperience": _as_list(experience.get("relevantExperience")),
            "gaps": _as_list(experience.get("gaps")),
        },
        "educationFit": {
            "match": _as_text(education.get("match"), DEFAULT_EDUCATION_MATCH),
            "details": _as_text(education.get("details")),
        },
        "strengths": _as_list(obj.get("strengths")),
        "weaknesses": _as_list(obj.get("weaknesses")),
        "improvementSuggestions": _as_list(obj.get("improvementSuggestions")),
        "keywordMatch": {
            "score": _as_score(keywords.get("score"), DEFAULT_KEYWORD_SCORE),
            "missingKeywords": _as_list(keywords.get("missingKeywords")),
        },
        "formattingFeedback": _as_text(obj.get("formattingFeedback")),
    }


def _is_error_marker(obj: Dict[str, Any]) -> bool:
    """Provider or parse error payload with nothing to map besides a score."""
    return bool(obj.get("error")) and not any(key in obj for key in MATCH_FEEDBACK_KEYS)


def _has_match_score(obj: Any) -> bool:
    return (
        isinstance(obj, dict)
        and any(key in obj for key in SCORE_KEYS)
        and not _is_error_marker(obj)
    )


def _map_match_score(obj: Dict[str, Any]) -> Dict[str, Any]:
    """`{"match_score": 72, "matched_skills": [...], "missing_skills": [...], ...}`"""
    return {
        "summary": {
            "overallMatch": _as_score(_first(obj, SCORE_KEYS), DEFAULT_OVERALL_MATCH),
            "briefAssessment": _as_text(
                _first(obj, ("summary", "assessment", "overall_assessment", "feedback")),
                NO_ASSESSMENT_MESSAGE,
            ),
        },
        "keySkills": {
            "present": _as_list(_first(obj, ("matched_skills", "matchedSkills", "skills_present", "skills"))),
            "missing": _as_list(_first(obj, ("missing_skills", "missingSkills", "missing_requirements"))),
        },
        "experienceAnalysis": {
            "relevantExperience": _as_list(_first(obj, ("relevant_experience", "experience", "evidence"))),
            "gaps": _as_list(_first(obj, ("experience_gaps", "gaps"))),
        },
        "educationFit": {
            "match": _as_text(_first(obj, ("education_match", "education")), DEFAULT_EDUCATION_MATCH),
            "details": _as_text(obj.get("education_details")),
        },
        "strengths": _as_list(obj.get("strengths")),
        "weaknesses": _as_list(_first(obj, ("weaknesses", "concerns"))),
        "improvementSuggestions": _as_list(_first(obj, ("recommendations", "suggestions", "improvements"))),
        "keywordMatch": {
            "score": _as_score(_first(obj, ("keyword_score", "keyword_match_score")), DEFAULT_KEYWORD_SCORE),
            "missingKeywords": _as_list(_first(obj, ("missing_keywords", "missingKeywords"))),
        },
        "formattingFeedback": _as_text(_first(obj, ("formatting_feedback", "formatting"))),
    }


def _has_overall_feedback(obj: Any) -> bool:
    return isinstance(obj, dict) and any(key in obj for key in OVERALL_FEEDBACK_KEYS)


def _map_overall_feedback(obj: Dict[str, Any]) -> Dict[str, Any]:
    """`{"overall_feedback": "...", "strengths": [...], "areas_for_improvement": [...], "action_items": [...]}`"""
    feedback = default_feedback(_as_text(obj.get("overall_feedback"), NO_ASSESSMENT_MESSAGE))
    feedback["keySkills"]["present"] = _as_list(_first(obj, ("key_skills", "skills")))
    feedback["keySkills"]["missing"] = _as_list(obj.get("missing_skills"))
    feedback["strengths"] = _as_list(obj.get("strengths"))
    feedback["weaknesses"] = _as_list(_first(obj, ("areas_for_improvement", "weaknesses")))
    feedback["improvementSuggestions"] = _as_list(_first(obj, ("action_items", "suggestions")))
    feedback["formattingFeedback"] = _as_text(_first(obj, ("formatting_feedback", "formatting")))
    return feedback


_DETECTORS: List[ShapeDetector] = [
    ShapeDetector("canonical", _is_canonical, _map_canonical),
    ShapeDetector("match_score", _has_match_score, _map_match_score),
    ShapeDetector("overall_feedback", _has_overall_feedback, _map_overall_feedback),
]


def register_detector(detector: ShapeDetector, position: Optional[int] = None) -> None:
    """Add a provider convention. Appended after the built-ins unless a position is given."""
    if position is None:
        _DETECTORS.append(detector)
    else:
        _DETECTORS.insert(position, detector)


def registered_detectors() -> List[str]:
    return [detector.name for detector in _DETECTORS]


def normalize_feedback(obj: Any) -> NormalizationResult:
    """
    Map an arbitrary parsed response onto the canonical feedback object.

    Never raises: unknown shapes and mapper failures both produce the
    default object, flagged as degraded.
    """
    for detector in _DETECTORS:
        try:
            if not detector.matches(obj):
                continue
            feedback = detector.mapper(obj)
            Feedback.model_validate(feedback, strict=True)
        except Exception as e:
            logger.warning(f"Feedback detector '{detector.name}' failed: {e}")
            break
        return NormalizationResult(feedback=feedback, shape=detector.name, degraded=False)

    return NormalizationResult(feedback=default_feedback(), shape="default", degraded=True)


def extract_match_score(feedback: Dict[str, Any]) -> Optional[float]:
    """Numeric value of summary.overallMatch clamped to 0-100; None when not numeric."""
    value = _mapping(feedback.get("summary")).get("overallMatch")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        score = float(value)
    else:
        match = re.search(r"-?\d+(?:\.\d+)?", str(value or ""))
        if not match:
            return None
        score = float(match.group())
    return max(0.0, min(100.0, score))
