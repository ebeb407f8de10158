"""
Exception taxonomy for the Task API.

Every error carries the HTTP status code it maps to and a message that is safe
to return to the client. The handlers registered in main turn them into
``{"error": message}`` bodies.
"""
from __future__ import annotations

from fastapi import status

NOT_FOUND_MESSAGE = "Tarea no encontrada"
INVALID_JSON_MESSAGE = "Cuerpo de solicitud JSON inválido"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class TaskApiError(Exception):
    """Base class for errors surfaced by the Task API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskApiError):
    """Malformed JSON body or missing/empty required fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Solicitud inválida"


class NotFoundError(TaskApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


class TaskNotFoundError(NotFoundError):
    """No Task exists for the requested id."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(NOT_FOUND_MESSAGE)


class StoreError(TaskApiError):
    """
    The storage backend failed. The client only ever sees the generic message;
    the underlying exception is chained for the server-side log.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = INTERNAL_ERROR_MESSAGE
