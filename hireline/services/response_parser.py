import json
import logging
import re
from typing import Any

from hireline.core.exceptions import ParseError

logger = logging.getLogger(__name__)

FENCE = "```"
_FENCED_BLOCK = re.compile(r"```(?:json)?[ \t]*\n?(.*?)```", re.DOTALL | re.IGNORECASE)
_FENCE_MARKER = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _candidate_text(text: str) -> str:
    if FENCE not in text:
        return text
    match = _FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    # Unterminated fence: drop every marker and keep the rest
    return _FENCE_MARKER.sub("", text).strip()


def parse_model_response(raw: Any) -> Any:
    """
    Turn the provider's message content into a parsed JSON value.

    Structured input (dict/list) is returned unchanged. Strings may wrap the
    JSON in a markdown fence or in surrounding prose.

    Raises:
        ParseError: Non-JSON text (raw text attached) or an unusable input type.
    """
    if isinstance(raw, (dict, list)):
        return raw

    if not isinstance(raw, str):
        raise ParseError(
            f"Invalid response type: {type(raw).__name__}",
            raw_text=None if raw is None else repr(raw),
            reason="invalid_response_type",
        )

    candidate = _candidate_text(raw.strip())
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    # Basic JSON extraction if model returns text around it
    json_match = _JSON_OBJECT.search(candidate)
    if json_match:
        try:
            return json.loads(json_match.group())
        except json.JSONDecodeError:
            pass

    logger.warning(f"Failed to decode AI JSON response ({len(raw)} chars)")
    raise ParseError("Failed to parse AI response as JSON.", raw_text=raw)
