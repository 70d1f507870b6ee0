"""
Unit Tests for ReviewSession

Tests editing, removing, appending and approving extracted tasks.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from models.extraction_models import ExtractedTaskCandidate, PriorityEnum
from services.review_session import EmptyReviewError, ReviewSession


def candidate(description, assignee="Ana", due="Friday", priority=PriorityEnum.P3):
    return ExtractedTaskCandidate(
        description=description, assignee=assignee, due_date_text=due, priority=priority
    )


@pytest.fixture
def session():
    return ReviewSession([candidate("A"), candidate("B"), candidate("C")])


class TestEditing:
    """Tests for edit, remove and append."""

    def test_edit_replaces_one_field(self, session):
        session.edit(1, "assignee", "Raj")

        assert session.candidates[1].assignee == "Raj"
        assert session.candidates[1].description == "B"
        assert session.candidates[0].assignee == "Ana"

    def test_edit_accepts_wire_field_names(self, session):
        session.edit(0, "task_description", "A2")
        session.edit(0, "due_date", "2026-06-20T17:00")

        assert session.candidates[0].description == "A2"
        assert session.candidates[0].due_date_text == "2026-06-20T17:00"

    def test_edit_does_not_validate(self, session):
        """Invalid values are only rejected by the server on approval."""
        session.edit(0, "priority", "P9")

        assert session.candidates[0].priority == "P9"
        assert session.to_payload()["tasks"][0]["priority"] == "P9"

    def test_edit_unknown_field_raises(self, session):
        with pytest.raises(KeyError):
            session.edit(0, "owner", "someone")

    def test_edit_out_of_range_raises(self, session):
        with pytest.raises(IndexError):
            session.edit(3, "assignee", "Raj")

    def test_seeding_copies_candidates(self):
        original = candidate("A")
        session = ReviewSession([original])

        session.edit(0, "assignee", "Raj")

        assert original.assignee == "Ana"

    def test_remove_shifts_later_candidates(self, session):
        removed = session.remove(0)

        assert removed.description == "A"
        assert [c.description for c in session.candidates] == ["B", "C"]

    def test_remove_all_is_legal(self, session):
        for _ in range(3):
            session.remove(0)

        assert len(session) == 0

    def test_append_adds_blank_candidate_last(self, session):
        session.remove(1)
        added = session.append()

        assert [c.description for c in session.candidates] == ["A", "C", ""]
        assert added == ExtractedTaskCandidate.blank()
        assert session.candidates[-1].priority == PriorityEnum.P3

    def test_cancel_discards_working_set(self, session):
        session.cancel()

        assert len(session) == 0


class TestPayload:
    """Tests for serializing the working set."""

    def test_to_payload_uses_wire_names(self, session):
        payload = session.to_payload()

        assert payload["tasks"][0] == {
            "task_description": "A",
            "assignee": "Ana",
            "due_date": "Friday",
            "priority": "P3",
        }
        assert len(payload["tasks"]) == 3

    def test_from_payload_round_trips(self, session):
        rebuilt = ReviewSession.from_payload(session.to_payload())

        assert rebuilt.candidates == session.candidates

    def test_from_payload_keeps_unvalidated_edits(self, session):
        session.edit(0, "priority", "P9")
        session.edit(1, "assignee", None)

        rebuilt = ReviewSession.from_payload(session.to_payload())

        assert rebuilt.candidates[0].priority == "P9"
        assert rebuilt.candidates[1].assignee is None
        assert rebuilt.to_payload() == session.to_payload()


class TestDueDateInput:
    """Tests for the datetime widget conversion."""

    def test_parseable_phrase_becomes_widget_value(self):
        session = ReviewSession([candidate("A", due="2026-06-20 17:00")])

        assert session.due_date_input(0) == "2026-06-20T17:00"

    def test_unparseable_phrase_becomes_empty(self):
        session = ReviewSession([candidate("A", due="when the vendor replies")])

        with patch("utils.date_utils.parse_due_date", return_value=None):
            assert session.due_date_input(0) == ""


class TestApproveAll:
    """Tests for approve_all."""

    @pytest.mark.asyncio
    async def test_empty_set_is_rejected_without_request(self):
        session = ReviewSession([])
        submit = AsyncMock()

        with pytest.raises(EmptyReviewError):
            await session.approve_all(submit)

        submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_after_removals_is_rejected(self, session):
        submit = AsyncMock()
        for _ in range(3):
            session.remove(0)

        with pytest.raises(EmptyReviewError):
            await session.approve_all(submit)

        submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_submits_once_and_clears(self, session):
        created = [{"id": "1"}, {"id": "2"}, {"id": "3"}]
        submit = AsyncMock(return_value=created)
        on_approved = MagicMock()
        session.on_approved = on_approved
        session.edit(2, "assignee", "Raj")

        result = await session.approve_all(submit)

        submit.assert_awaited_once()
        sent = submit.call_args.args[0]
        assert [t["task_description"] for t in sent] == ["A", "B", "C"]
        assert sent[2]["assignee"] == "Raj"
        assert result == created
        assert len(session) == 0
        on_approved.assert_called_once_with(created)

    @pytest.mark.asyncio
    async def test_failure_keeps_working_set(self, session):
        submit = AsyncMock(side_effect=RuntimeError("server down"))
        on_approved = MagicMock()
        session.on_approved = on_approved

        with pytest.raises(RuntimeError):
            await session.approve_all(submit)

        assert [c.description for c in session.candidates] == ["A", "B", "C"]
        on_approved.assert_not_called()
