from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Sequence

from openai import OpenAI, OpenAIError

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_datetime
from ..core.constants import DEFAULT_SUMMARY_MODEL, DEFAULT_SUMMARY_TIMEOUT_SECONDS, SUMMARY_RECORD_LIMIT

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "AI summary is unavailable: missing API key configuration."
FAILURE_MESSAGE = "Unable to generate AI summary at this time."
EMPTY_MESSAGE = "Could not generate summary."
NO_RECORDS_MESSAGE = "No attendance records to summarize yet."

PROMPT_TEMPLATE = """Analyze these time attendance records:
{records}

Please provide a brief, professional summary (max 100 words) for the user.
1. Calculate estimated total hours worked based on the pairs of check-in/check-out.
2. If there are missing pairs (e.g. checked in but not out), mention it.
3. Summarize any notes provided by the user.
4. Add a short motivational quote at the end.
Return plain text."""


class SummaryGenerator(Protocol):
    def summarize(self, records: Sequence[AttendanceRecord]) -> str:
        """Free-text report of the newest records; must not raise."""

        raise NotImplementedError


def build_prompt(records: Sequence[AttendanceRecord], *, limit: int = SUMMARY_RECORD_LIMIT) -> str:
    rows = [
        {
            "type": r.type.value,
            "time": format_datetime(r.timestamp),
            "location": f"{r.location.latitude}, {r.location.longitude}" if r.location else "Unknown",
            "note": r.note or "No note",
        }
        for r in list(records)[:limit]
    ]
    return PROMPT_TEMPLATE.format(records=json.dumps(rows, ensure_ascii=False))


class NullSummaryGenerator(SummaryGenerator):
    """Used when the AI integration is disabled."""

    def __init__(self, message: str = MISSING_KEY_MESSAGE):
        self._message = message

    def summarize(self, records: Sequence[AttendanceRecord]) -> str:
        return self._message


class OpenAISummaryGenerator(SummaryGenerator):
    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = DEFAULT_SUMMARY_MODEL,
        timeout: float = DEFAULT_SUMMARY_TIMEOUT_SECONDS,
        max_retries: int = 1,
        client: Any = None,
    ):
        self._model = model
        self._client = client
        if self._client is None and api_key:
            self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)

    def summarize(self, records: Sequence[AttendanceRecord]) -> str:
        if self._client is None:
            logger.warning("[summary] OpenAI API key is missing, summary disabled")
            return MISSING_KEY_MESSAGE
        if not records:
            return NO_RECORDS_MESSAGE

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": build_prompt(records)}],
            )
        except OpenAIError as e:
            logger.error("[summary] OpenAI API error: %s", e)
            return FAILURE_MESSAGE

        choices = getattr(response, "choices", None) or []
        text = choices[0].message.content if choices else None
        return (text or "").strip() or EMPTY_MESSAGE


def build_summary_generator(settings: Any) -> SummaryGenerator:
    api_key = getattr(settings, "OPENAI_API_KEY", None)
    if not api_key:
        return NullSummaryGenerator()
    return OpenAISummaryGenerator(
        api_key,
        model=getattr(settings, "SUMMARY_MODEL", DEFAULT_SUMMARY_MODEL),
        timeout=float(getattr(settings, "SUMMARY_TIMEOUT_SECONDS", DEFAULT_SUMMARY_TIMEOUT_SECONDS)),
        max_retries=int(getattr(settings, "SUMMARY_MAX_RETRIES", 1)),
    )
