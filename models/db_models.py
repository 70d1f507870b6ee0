"""SQLModel table definitions for persisted tasks.

Timestamps are stored as naive UTC datetimes in explicit
`timestamp without time zone` columns.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text
from datetime import datetime
from uuid import UUID, uuid4


class TaskModel(SQLModel, table=True):
    """A persisted, owned action item.

    `user_id` is the owning user and is never changed after creation.
    `due_date_original` keeps the phrase the model or user supplied even when
    `due_date_utc` holds a fallback value.
    """
    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True, sa_column_kwargs={"name": "user_id"})
    description: str = Field(sa_column=Column(Text, nullable=False))
    assignee: str = Field(sa_column=Column(Text, nullable=False))
    due_date_utc: datetime = Field(
        sa_column=Column(DateTime(timezone=False), name="due_date_utc", nullable=False)
    )
    due_date_original: str = Field(sa_column=Column(Text, name="due_date_original", nullable=False))
    priority: str = Field(default="P3")
    completed: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), name="created_at", nullable=False)
    )
