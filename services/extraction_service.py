"""ExtractionService for turning meeting transcripts into task candidates.

This service sends the transcript to OpenAI in JSON-object mode and validates
every returned record on its own, so one malformed record never spoils the
rest of the batch.
"""
import os
import json
import logging
from typing import Any, List, Tuple

from openai import AsyncOpenAI
from pydantic import ValidationError

from models.extraction_models import ExtractedTaskCandidate, ExtractionResult


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


class EmptyTranscriptError(ValueError):
    """Raised when extraction is requested for an empty transcript."""


class ExtractionError(Exception):
    """Opaque failure of the upstream model call or its response.

    The underlying cause is chained and logged, never shown to the caller.
    """


class ExtractionService:
    """Service for extracting actionable tasks from transcripts using OpenAI.

    Stateless: each call to extract() is an independent request. No retries
    are attempted here; retry policy belongs to the caller.
    """

    def __init__(self):
        """Initialize the ExtractionService with OpenAI client."""
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")

        self.model = os.getenv("OPENAI_MODEL", "gpt-4o")
        self.timeout = float(os.getenv("OPENAI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self.client = AsyncOpenAI(api_key=api_key, max_retries=0, timeout=self.timeout)
        logger.info(f"ExtractionService initialized with model: {self.model}")

    async def extract(self, transcript: str, trace_id: str = "-") -> ExtractionResult:
        """Extract task candidates from a meeting transcript.

        Args:
            transcript: The meeting transcript text
            trace_id: Trace identifier for logging

        Returns:
            ExtractionResult; an empty candidate list means no tasks were found

        Raises:
            EmptyTranscriptError: If the transcript is empty or whitespace-only
            ExtractionError: If the model call fails or returns non-JSON content
        """
        if not transcript or not transcript.strip():
            logger.warning(f"Empty transcript rejected: trace_id={trace_id}")
            raise EmptyTranscriptError("Transcript is required")

        logger.info(
            f"Extracting tasks: trace_id={trace_id}, "
            f"length={len(transcript)} chars"
        )

        content = await self._request_completion(transcript, trace_id)
        records = self._parse_records(content, trace_id)
        candidates, dropped = self._validate_records(records)

        if dropped:
            logger.warning(
                f"Dropped invalid task records: trace_id={trace_id}, "
                f"dropped={dropped}, kept={len(candidates)}"
            )

        logger.info(
            f"Task extraction complete: trace_id={trace_id}, "
            f"tasks={len(candidates)}"
        )

        return ExtractionResult(candidates=candidates, dropped_count=dropped)

    async def _request_completion(self, transcript: str, trace_id: str) -> str:
        """Call the chat completion endpoint and return the raw message content."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._get_system_prompt()},
                    {"role": "user", "content": transcript}
                ],
                response_format={"type": "json_object"},
                timeout=self.timeout
            )
            content = completion.choices[0].message.content
        except Exception as e:
            logger.error(
                f"Task extraction request failed: trace_id={trace_id}, "
                f"error={type(e).__name__}: {str(e)}",
                exc_info=True
            )
            raise ExtractionError("Failed to extract tasks") from e

        return content or "{}"

    def _parse_records(self, content: str, trace_id: str) -> List[Any]:
        """Decode the JSON object and return its `tasks` array.

        A missing or non-list `tasks` value is treated as no tasks.
        """
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Model returned non-JSON content: trace_id={trace_id}")
            raise ExtractionError("Failed to extract tasks") from e

        if not isinstance(payload, dict):
            logger.error(
                f"Model returned JSON {type(payload).__name__}, expected object: "
                f"trace_id={trace_id}"
            )
            raise ExtractionError("Failed to extract tasks")

        records = payload.get("tasks") or []
        if not isinstance(records, list):
            logger.warning(f"'tasks' is not an array, treating as empty: trace_id={trace_id}")
            return []
        return records

    def _validate_records(self, records: List[Any]) -> Tuple[List[ExtractedTaskCandidate], int]:
        """Validate each record, keeping the valid ones in order.

        Returns:
            Tuple of (valid candidates, number of dropped records)
        """
        candidates = []
        dropped = 0
        for record in records:
            try:
                candidates.append(ExtractedTaskCandidate.model_validate(record))
            except ValidationError as e:
                dropped += 1
                logger.debug(f"Skipping invalid task record: {e.error_count()} errors")
        return candidates, dropped

    def _get_system_prompt(self) -> str:
        """System prompt for task extraction."""
        return """You extract action items from meeting transcripts.

Extract ALL actionable tasks. Be thorough and don't miss any: look for follow-ups,
deliverables, action items, and commitments.

Return a JSON object with a "tasks" array. Each element must contain:
- task_description: what needs to be done
- assignee: who is responsible
- due_date: when it is due. Remove leading words like "by", "before", "until" and keep
  the actual date/time phrase as spoken, e.g. "Tomorrow at 5pm", "Friday afternoon",
  "end of week", "June 20th"
- priority: one of P1, P2, P3, P4. Use P3 when no priority is stated.

If there are no tasks, return {"tasks": []}."""
