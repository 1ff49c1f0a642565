from __future__ import annotations

from typing import Any, List, Sequence

from fastapi import HTTPException, status


class ConfigurationError(ValueError):
    """Raised at startup when the environment is incomplete or malformed."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        lines = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Invalid environment configuration:\n{lines}")


class DuplicateResourceError(HTTPException):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class ForbiddenError(HTTPException):
    def __init__(self, message: str = "You have no permission to access those sources") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class EntityNotFoundError(HTTPException):
    def __init__(self, entity_id: Any, entity: type | str) -> None:
        self.entity_id = entity_id
        self.entity_name = entity if isinstance(entity, str) else entity.__name__
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"The entity identified by '{entity_id}' of type '{self.entity_name}' does not exist",
        )


class AuthenticationError(HTTPException):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Basic"},
        )


class InvalidQueryError(HTTPException):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DuplicateResourceError",
    "EntityNotFoundError",
    "ForbiddenError",
    "InvalidQueryError",
]
