"""
Standardized exception hierarchy for mindwell
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import date, datetime
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class MindwellError(Exception):
    """
    Base exception for all mindwell errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise MindwellError(
            message="Failed to apply exercise completion",
            user_id="42",
            operation="complete_exercise",
            context={"exercise_id": "breathing"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.utcnow()

        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by logging
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.warning(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(MindwellError):
    """
    Raised when user input fails validation

    Examples:
    - Completion event for a different user than the state
    - Intensity outside 1-5

    Example:
        raise ValidationError(
            message="Event belongs to another user",
            field="user_id",
            value="99",
            user_id="42"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


class UnknownExerciseError(MindwellError):
    """Completion event references an exercise missing from the catalog"""

    def __init__(self, exercise_id: str, **kwargs):
        self.exercise_id = exercise_id
        super().__init__(
            message=f"Unknown exercise: {exercise_id}",
            user_message="That exercise doesn't exist. Please pick one from the list.",
            context={"exercise_id": exercise_id},
            **kwargs
        )


class InvalidActivityDateError(MindwellError):
    """
    Activity date outside the accepted range

    Rejects far-future dates (clock skew, malformed input) and dates before
    the earliest supported day so they never reach the streak history.
    """

    def __init__(
        self,
        activity_date: date,
        reason: str,
        **kwargs
    ):
        self.activity_date = activity_date
        self.reason = reason
        super().__init__(
            message=f"Invalid activity date {activity_date.isoformat()}: {reason}",
            user_message="The activity date looks wrong. Please check your device clock.",
            context={"activity_date": activity_date.isoformat(), "reason": reason},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(MindwellError):
    """
    Base class for progress store errors
    """
    pass


class RecordNotFoundError(StorageError):
    """Requested record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(MindwellError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> MindwellError:
    """
    Wrap low-level storage exceptions (OSError, JSON decoding) into our hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        StorageError carrying the original exception as cause

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_progress") from e
    """
    return StorageError(
        message=f"{operation} failed: {error}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error,
        user_message="We couldn't save your progress. Please try again."
    )
