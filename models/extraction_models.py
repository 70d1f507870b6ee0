"""Pydantic models for LLM task extraction.

These models define the structure of the task candidates the model returns.
Field aliases match the JSON keys requested in the extraction prompt, so a
raw record from the model can be validated directly.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from enum import Enum


class PriorityEnum(str, Enum):
    """Task priority levels, P1 being the most urgent."""
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


PRIORITY_LABELS = {
    PriorityEnum.P1: "Critical",
    PriorityEnum.P2: "High",
    PriorityEnum.P3: "Medium",
    PriorityEnum.P4: "Low",
}


class ExtractedTaskCandidate(BaseModel):
    """An unpersisted task proposal extracted from a transcript."""
    model_config = ConfigDict(populate_by_name=True)

    description: str = Field(
        alias="task_description",
        description="What needs to be done"
    )
    assignee: str = Field(
        description="Person responsible for the task"
    )
    due_date_text: str = Field(
        alias="due_date",
        description="Natural-language due date with leading 'by', 'before', 'until' removed"
    )
    priority: PriorityEnum = Field(
        default=PriorityEnum.P3,
        description="Priority from P1 (critical) to P4 (low); P3 when not specified"
    )

    @classmethod
    def blank(cls) -> "ExtractedTaskCandidate":
        """Empty candidate for hand-authored tasks."""
        return cls(description="", assignee="", due_date_text="", priority=PriorityEnum.P3)


class ExtractionResult(BaseModel):
    """Outcome of one extraction call.

    An empty candidate list is the "no tasks found" signal; hard failures are
    raised as ExtractionError instead.
    """
    candidates: List[ExtractedTaskCandidate] = Field(default_factory=list)
    dropped_count: int = Field(
        default=0,
        description="Records returned by the model that failed validation"
    )

    @property
    def is_empty(self) -> bool:
        return len(self.candidates) == 0
