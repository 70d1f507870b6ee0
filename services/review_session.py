"""Review session for editing extracted tasks before approval.

A ReviewSession is an owned working set scoped to one review: seed it from an
extraction result, let the user edit, remove and append candidates, then
submit everything in one bulk-create call. Nothing is validated until the
server sees the bulk-create request.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from models.extraction_models import ExtractedTaskCandidate
from utils.date_utils import DEFAULT_TIMEZONE, to_datetime_input

logger = logging.getLogger(__name__)

SubmitFn = Callable[[List[Dict[str, Any]]], Awaitable[List[Dict[str, Any]]]]

# Wire names accepted by edit() alongside the Python attribute names
FIELD_ALIASES = {
    "task_description": "description",
    "due_date": "due_date_text",
}
EDITABLE_FIELDS = {"description", "assignee", "due_date_text", "priority"}


class EmptyReviewError(Exception):
    """Raised when approving a review that has no tasks."""


class ReviewSession:
    """Mutable, ordered working set of task candidates."""

    def __init__(
        self,
        candidates: Optional[List[ExtractedTaskCandidate]] = None,
        on_approved: Optional[Callable[[List[Dict[str, Any]]], None]] = None
    ):
        self.candidates: List[ExtractedTaskCandidate] = [
            c.model_copy() for c in (candidates or [])
        ]
        self.on_approved = on_approved

    def __len__(self) -> int:
        return len(self.candidates)

    def edit(self, index: int, field: str, value: Any) -> ExtractedTaskCandidate:
        """Replace one field of one candidate.

        Values are stored as given; an invalid priority is only rejected when
        the server validates the bulk-create request.

        Raises:
            IndexError: If index is out of range
            KeyError: If field is not an editable candidate field
        """
        name = FIELD_ALIASES.get(field, field)
        if name not in EDITABLE_FIELDS:
            raise KeyError(field)

        current = self.candidates[index]
        # model_copy(update=...) skips validation
        self.candidates[index] = current.model_copy(update={name: value})
        return self.candidates[index]

    def remove(self, index: int) -> ExtractedTaskCandidate:
        """Delete one candidate; later candidates move up by one."""
        return self.candidates.pop(index)

    def append(self) -> ExtractedTaskCandidate:
        """Add a blank candidate at the end for a hand-written task."""
        candidate = ExtractedTaskCandidate.blank()
        self.candidates.append(candidate)
        return candidate

    def cancel(self) -> None:
        """Discard the working set without submitting."""
        logger.info(f"Review cancelled: discarded={len(self.candidates)}")
        self.candidates = []

    def due_date_input(self, index: int, timezone_name: str = DEFAULT_TIMEZONE) -> str:
        """Widget value for a candidate's due date, "" when unparseable."""
        return to_datetime_input(self.candidates[index].due_date_text, timezone_name)

    def to_payload(self) -> Dict[str, Any]:
        """Bulk-create request body for the current working set."""
        return {"tasks": [self._to_wire(c) for c in self.candidates]}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], **kwargs) -> "ReviewSession":
        """Rebuild a session from a payload produced by to_payload().

        Items are restored without validation so that unvalidated edits
        survive the round trip, as they would in the live session.
        """
        candidates = []
        for item in payload.get("tasks", []):
            values = {FIELD_ALIASES.get(key, key): value for key, value in item.items()}
            candidates.append(ExtractedTaskCandidate.model_construct(**values))
        return cls(candidates, **kwargs)

    async def approve_all(self, submit: SubmitFn) -> List[Dict[str, Any]]:
        """Submit every candidate in a single bulk-create call.

        On success the working set is cleared and on_approved is notified.
        On failure the working set is kept so the user can correct and retry.

        Args:
            submit: Async callable that sends the task list and returns the
                created tasks.

        Returns:
            Created tasks as returned by submit.

        Raises:
            EmptyReviewError: If there is nothing to approve; submit is not called.
        """
        if not self.candidates:
            raise EmptyReviewError("No tasks to approve. Add at least one task before approving.")

        payload = self.to_payload()["tasks"]
        logger.info(f"Approving tasks: count={len(payload)}")

        try:
            created = await submit(payload)
        except Exception as e:
            logger.warning(
                f"Approval failed, keeping working set: count={len(payload)}, "
                f"error={type(e).__name__}"
            )
            raise

        self.candidates = []
        if self.on_approved is not None:
            self.on_approved(created)

        logger.info(f"Tasks approved: submitted={len(payload)}, created={len(created)}")
        return created

    @staticmethod
    def _to_wire(candidate: ExtractedTaskCandidate) -> Dict[str, Any]:
        # Edits may leave non-enum priority values, which are sent as-is
        priority = candidate.priority
        return {
            "task_description": candidate.description,
            "assignee": candidate.assignee,
            "due_date": candidate.due_date_text,
            "priority": getattr(priority, "value", priority),
        }
