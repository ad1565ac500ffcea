"""
Parsing and minimum-shape validation of model output.

Every validator takes the raw response text and either returns the typed
artifact or raises `ResponseValidationError`. Nothing downstream ever sees an
unvalidated payload.
"""
import json
import logging
import re
from itertools import chain
from typing import Any, Iterator, Literal, TypeVar

from pydantic import BaseModel, ValidationError

from app.agent.artifacts import (
    ContentBrief,
    OutreachEmail,
    SerpSimulationResult,
    SiteAuditResult,
    TechnicalAuditResult,
)
from app.agent.exceptions import INVALID_RESPONSE_MESSAGE, ResponseValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

Requirement = tuple[str, Literal["present", "array"]]


def _strip_code_fences(text: str) -> str:
    if not text:
        return ""
    fenced = re.match(r"^\s*```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```\s*$", text)
    if fenced:
        return fenced.group(1).strip()
    return text.strip()


def _balanced_span_from(text: str, start_idx: int) -> str | None:
    """Balanced JSON object starting at `text[start_idx] == "{"`, string-literal aware."""
    depth = 0
    in_string = False
    escape = False
    for i in range(start_idx, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]
    return None


def _balanced_object_spans(text: str) -> Iterator[str]:
    """Balanced object spans, one per `{` in `text`, in order of position."""
    start_idx = text.find("{")
    while start_idx != -1:
        span = _balanced_span_from(text, start_idx)
        if span:
            yield span
        start_idx = text.find("{", start_idx + 1)


def _json_candidates(raw_text: str) -> Iterator[str]:
    text = (raw_text or "").strip()
    if not text:
        return

    seen: set[str] = set()
    # Prose before the payload may itself contain braces, so every "{" is a possible start.
    for candidate in chain((text, _strip_code_fences(text)), _balanced_object_spans(text)):
        candidate = candidate.strip()
        if candidate and candidate not in seen:
            seen.add(candidate)
            yield candidate


def parse_json_object(raw_text: str) -> dict[str, Any]:
    """Parse model output as a JSON object, tolerating fences and surrounding prose."""
    errors: list[str] = []
    for candidate in _json_candidates(raw_text):
        try:
            parsed = json.loads(candidate, strict=False)
        except json.JSONDecodeError as e:
            errors.append(str(e))
            continue
        if isinstance(parsed, dict):
            return parsed
        errors.append(f"expected a JSON object, got {type(parsed).__name__}")

    logger.error("Unable to parse model output as JSON: %s", " | ".join(errors[:3]) or "empty response")
    raise ResponseValidationError(INVALID_RESPONSE_MESSAGE)


def check_required(payload: dict[str, Any], requirements: list[Requirement]) -> None:
    for field_name, rule in requirements:
        value = payload.get(field_name)
        if rule == "array" and not isinstance(value, list):
            logger.error("Model output field %r is not an array", field_name)
            raise ResponseValidationError(INVALID_RESPONSE_MESSAGE)
        if rule == "present" and not value:
            logger.error("Model output is missing required field %r", field_name)
            raise ResponseValidationError(INVALID_RESPONSE_MESSAGE)


def decode_report(raw_text: str, model: type[T], requirements: list[Requirement]) -> T:
    payload = parse_json_object(raw_text)
    check_required(payload, requirements)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.error("Model output does not match %s: %s", model.__name__, e)
        raise ResponseValidationError(INVALID_RESPONSE_MESSAGE) from e


def validate_technical_audit(raw_text: str) -> TechnicalAuditResult:
    return decode_report(raw_text, TechnicalAuditResult, [("audit_results", "array")])


def validate_site_audit(raw_text: str) -> SiteAuditResult:
    return decode_report(
        raw_text, SiteAuditResult, [("audit_summary", "present"), ("findings", "array")]
    )


def validate_serp_simulation(raw_text: str) -> SerpSimulationResult:
    return decode_report(
        raw_text,
        SerpSimulationResult,
        [("predicted_rank", "present"), ("recommendations", "array")],
    )


def validate_content_brief(raw_text: str) -> ContentBrief:
    return decode_report(
        raw_text,
        ContentBrief,
        [("target_keyword", "present"), ("recommended_structure", "array")],
    )


def validate_outreach_email(raw_text: str) -> OutreachEmail:
    body = _strip_code_fences(raw_text or "")
    if not body:
        logger.error("Model returned an empty outreach email")
        raise ResponseValidationError("Model returned an empty email.")
    return OutreachEmail(body=body)
