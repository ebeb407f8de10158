from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new Task.

    Only title and description are accepted; new tasks always start as not
    completed, so a client-supplied 'completed' key is ignored.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2%",
            }
        }
    )

    title: str = Field(..., description="Title of the task", min_length=1)
    description: str = Field(..., description="Detailed description of the task", min_length=1)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for replacing an existing Task.

    All three fields are required. 'completed' must be present in the body;
    an explicit false is a valid value.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2%",
                "completed": True,
            }
        }
    )

    title: str = Field(..., description="Title of the task", min_length=1)
    description: str = Field(..., description="Detailed description of the task", min_length=1)
    completed: bool = Field(..., description="Completion status flag (JSON true or false only)", strict=True)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "description": "2%",
                "completed": False,
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Title of the task")
    description: str = Field(..., description="Detailed description of the task")
    completed: bool = Field(..., description="Completion status flag")


class ErrorOut(BaseModel):
    """Error body returned for every non-2xx response."""

    error: str = Field(..., description="Human-readable error message")
