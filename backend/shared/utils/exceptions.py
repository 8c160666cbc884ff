"""
Centralized HTTP exceptions for consistent error handling.

Every exception logs itself once, when it is constructed, so callers raise
without logging separately.

Usage:
    from shared.utils.exceptions import NotFoundError, UnauthorizedError, ConflictError

    raise NotFoundError("Product", product_id)
    raise UnauthorizedError("DELETE", "product", actor_id=actor.id)
    raise ConflictError("Another active category already uses this name", field="name")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import StructuredLogger, get_logger, security_audit_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        log: StructuredLogger | None = None,
        **log_context: Any,
    ):
        target_logger = log or logger
        log_fn = getattr(target_logger, log_level, target_logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Product", 123)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with id {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 403 Authorization Errors
# =============================================================================


class UnauthorizedError(AppException):
    """
    The acting user lacks the capability for an action (403).

    Logged to the security audit logger with the actor and target.

    Usage:
        raise UnauthorizedError("UPDATE", "user", actor_id=7, target_id=9)
    """

    def __init__(
        self,
        action: str | None = None,
        resource: str | None = None,
        actor_id: int | None = None,
        target_id: int | None = None,
        reason: str | None = None,
        **log_context: Any,
    ):
        if reason:
            detail = reason
        elif action and resource:
            detail = f"Not authorized to {action.lower().replace('_', ' ')} {resource}"
        else:
            detail = "Access denied"

        self.actor_id = actor_id
        self.target_id = target_id

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            log=security_audit_logger,
            action=action,
            resource=resource,
            actor_id=actor_id,
            target_id=target_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    ``errors`` lists each offending field as ``{"path": ..., "message": ...}``
    and the detail names them all.

    Usage:
        raise ValidationError([{"path": "price", "message": "must be positive"}])
        raise ValidationError.for_field("parent_id", "Parent category does not exist")
    """

    def __init__(self, errors: list[dict[str, str]], **log_context: Any):
        self.errors = errors
        fields = ", ".join(error["path"] or "<root>" for error in errors)
        detail = f"Invalid input for: {fields}" if errors else "Invalid input"

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            errors=errors,
            **log_context,
        )

    @classmethod
    def for_field(cls, path: str, message: str, **log_context: Any) -> "ValidationError":
        return cls([{"path": path, "message": message}], **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    ``field`` names the uniqueness-bearing field that collided, when known.

    Usage:
        raise ConflictError("Category still has assigned products", category_id=3)
    """

    def __init__(self, detail: str, field: str | None = None, **log_context: Any):
        self.field = field

        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            field=field,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    The detail stays generic; pass the underlying error as log context.

    Usage:
        raise InternalError(operation="restore", error=str(exc))
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
