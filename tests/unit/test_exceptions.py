"""Unit tests for custom exception hierarchy"""
import pytest
from datetime import date, datetime
from mindwell.exceptions import (
    MindwellError,
    ValidationError,
    UnknownExerciseError,
    InvalidActivityDateError,
    StorageError,
    RecordNotFoundError,
    ConfigurationError,
    wrap_storage_exception
)


class TestMindwellError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = MindwellError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = MindwellError(
            message="Progress save failed",
            user_id="123456",
            operation="complete_exercise",
            context={"exercise_id": "breathing"},
            user_message="Could not save your progress"
        )
        assert error.user_id == "123456"
        assert error.operation == "complete_exercise"
        assert error.context["exercise_id"] == "breathing"
        assert error.user_message == "Could not save your progress"

    def test_to_dict(self):
        """Test exception serialization for API responses"""
        error = MindwellError("Test error", request_id="req-1")
        data = error.to_dict()

        assert data["error"] == "MindwellError"
        assert data["message"] == "Test error"
        assert data["request_id"] == "req-1"
        assert "timestamp" in data


class TestDomainErrors:
    """Test domain-specific errors"""

    def test_validation_error(self):
        error = ValidationError("must be between 1 and 5", field="intensity", value=9)

        assert error.field == "intensity"
        assert error.value == 9
        assert error.context == {"field": "intensity", "value": 9}
        assert "Invalid intensity" in error.user_message

    def test_unknown_exercise(self):
        error = UnknownExerciseError("yoga", user_id="123")

        assert error.exercise_id == "yoga"
        assert error.message == "Unknown exercise: yoga"
        assert error.user_id == "123"
        assert error.to_dict()["error"] == "UnknownExerciseError"

    def test_invalid_activity_date(self):
        error = InvalidActivityDateError(date(2099, 1, 1), reason="too far ahead")

        assert error.activity_date == date(2099, 1, 1)
        assert "2099-01-01" in error.message
        assert error.context["reason"] == "too far ahead"

    def test_record_not_found_is_storage_error(self):
        error = RecordNotFoundError("No mood entries", record_type="Mood entry", record_id="123")

        assert isinstance(error, StorageError)
        assert error.user_message == "Mood entry not found."

    def test_configuration_error(self):
        error = ConfigurationError("bad level", config_key="LOG_LEVEL")
        assert error.config_key == "LOG_LEVEL"

    def test_all_inherit_from_base(self):
        for cls in (ValidationError, UnknownExerciseError, InvalidActivityDateError,
                    StorageError, RecordNotFoundError, ConfigurationError):
            assert issubclass(cls, MindwellError)


def test_wrap_storage_exception():
    original = OSError("disk full")

    error = wrap_storage_exception(original, operation="write progress.json", user_id="123")

    assert isinstance(error, StorageError)
    assert error.cause is original
    assert "disk full" in error.message
    assert error.operation == "write progress.json"


def test_exceptions_can_be_raised_and_caught():
    with pytest.raises(MindwellError):
        raise UnknownExerciseError("yoga")
