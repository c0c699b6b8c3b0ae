from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Request body for creating or replacing a Todo item.

    `id`, `createdAt` and `updatedAt` are server-assigned; if a client sends
    them they are dropped along with any other unknown field. `completed` is
    optional so that an omitted flag can be told apart from an explicit false.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
            }
        },
    )

    title: str = Field(..., description="Title of the todo item")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: Optional[bool] = Field(default=None, description="Completion status flag; false when omitted on create")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Reject blank titles. The value is stored exactly as sent, with no
        trimming and no upper length bound.
        """
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item. Serialized with camelCase keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "createdAt": "2024-01-15T10:30:00",
                "updatedAt": "2024-01-15T10:30:00",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp (local time, no offset)")
    updated_at: datetime = Field(..., description="Last update timestamp (local time, no offset)")


class ErrorOut(BaseModel):
    """Error body returned for not-found and storage failures."""

    error: str
    message: str
