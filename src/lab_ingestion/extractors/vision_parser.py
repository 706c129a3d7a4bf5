# src/lab_ingestion/extractors/vision_parser.py
"""
Parse the vision model's reply into an ExtractionResult.

The reply is free text that should embed one JSON object; models like to
wrap it in prose or markdown fences, and occasionally emit trailing commas
or unquoted keys. The payload is cut from the first '{' to the last '}',
parsed strictly, and repaired with json_repair only when strict parsing
fails.
"""

from typing import Any, Dict, List, Optional
import json
import logging

from json_repair import repair_json

from ..constants import IN_PROGRESS_MARKER
from ..core.context import ExtractionResult
from ..processors.lab.field_matcher import FieldMatcher
from ..processors.lab.utils.parsing import parse_decimal, parse_date
from ..utils.exceptions import VisionResponseError
from ..utils.logging import shorten
from ..validators import RangeValidator

logger = logging.getLogger(__name__)


def extract_json_payload(text: str) -> Dict[str, Any]:
    """
    Decode the JSON object embedded in a model reply.

    Raises:
        VisionResponseError: no object found, or it cannot be decoded
    """
    if not text:
        raise VisionResponseError("empty vision reply")

    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        raise VisionResponseError(f"no JSON object in reply: '{shorten(text, 80)}'")

    candidate = text[start:end + 1]
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        logger.debug("Strict JSON decode failed, attempting repair")
        data = repair_json(candidate, return_objects=True)

    if not isinstance(data, dict):
        raise VisionResponseError("vision reply is not a JSON object")
    return data


def _rows(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    rows = data.get("rows")
    if rows is None:
        raise VisionResponseError("vision reply has no 'rows'")
    if not isinstance(rows, list):
        raise VisionResponseError("'rows' is not a list")
    return [row for row in rows if isinstance(row, dict)]


def parse_vision_response(
    text: str,
    result: ExtractionResult,
    matcher: Optional[FieldMatcher] = None,
    validator: Optional[RangeValidator] = None
) -> int:
    """
    Apply the rows of a vision reply to result.

    Each row's name goes through the same field matcher as OCR lines and
    its result through the same range gate.

    Returns:
        Number of values accepted

    Raises:
        VisionResponseError: malformed payload
    """
    matcher = matcher or FieldMatcher()
    validator = validator or RangeValidator()

    data = extract_json_payload(text)
    rows = _rows(data)

    report_date = parse_date(str(data.get("date") or ""))
    if report_date is not None:
        result.report_date = report_date

    accepted = 0
    for row in rows:
        name = str(row.get("name") or "").strip()
        if not name:
            continue
        raw = str(row.get("result") or "").strip()

        if IN_PROGRESS_MARKER.lower() in raw.lower():
            pending_key = matcher.match(name)
            if pending_key is not None and result.is_resolved(pending_key):
                logger.debug(f"Row '{shorten(name)}' pending, {pending_key} already found")
                continue
            result.add_pending(name, pending_key)
            continue
        if not raw:
            continue

        value = parse_decimal(raw)
        if value is None:
            logger.debug(f"Row '{shorten(name)}': non-numeric result '{shorten(raw, 20)}'")
            continue

        key = matcher.match(name, result.values)
        if key is None:
            logger.debug(f"Row '{shorten(name)}' matched no field")
            continue

        valid, reason = validator.check(key, value)
        if not valid:
            logger.warning(f"{key}: {reason} (row '{shorten(name)}')")
            continue

        if result.accept(key, value):
            accepted += 1
            logger.info(f"Found {key} = {value} from vision row '{shorten(name)}'")

    logger.info(f"Vision reply: {len(rows)} rows, {accepted} values accepted")
    return accepted
