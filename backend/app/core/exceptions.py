"""Domain errors raised by services and mapped to HTTP responses in main.py.

Services never import FastAPI to signal failures; each error carries the
status code the transport layer should answer with.
"""

from typing import Optional

from fastapi import status


class SchoolError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"detail": self.message}


class NotFoundError(SchoolError):
    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def for_entity(cls, entity: str, entity_id) -> "NotFoundError":
        return cls(f"{entity} not found with id: {entity_id}")


class ConflictError(SchoolError):
    status_code = status.HTTP_409_CONFLICT


class ValidationError(SchoolError):
    status_code = status.HTTP_400_BAD_REQUEST


class EnrollmentError(ValidationError):
    def __init__(self, module_name: str):
        super().__init__(f"Student is not enrolled in module: {module_name}")
        self.module_name = module_name


class BulkMarksError(ValidationError):
    """Every item of a bulk mark submission failed."""

    def __init__(self, errors: list[str]):
        super().__init__("Failed to add any marks. Errors: " + "; ".join(errors))
        self.errors = list(errors)

    def to_body(self) -> dict:
        return {"detail": self.message, "errors": self.errors}


class PermissionDeniedError(SchoolError):
    status_code = status.HTTP_403_FORBIDDEN


class RenderingError(SchoolError):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
