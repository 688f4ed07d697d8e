"""Failure classification for elements that fell back."""

from __future__ import annotations

from enum import Enum

from pydantic import ValidationError


class FailureType(str, Enum):
    VALIDATION_ERROR = "validation_error"
    INVALID_VALUE = "invalid_value"
    ARITHMETIC_ERROR = "arithmetic_error"
    RENDER_ERROR = "render_error"
    RUNTIME_ERROR = "runtime_error"
    OTHER = "other"


class FailureAnalyzer:
    def __init__(self) -> None:
        self.failures: dict[FailureType, int] = {ft: 0 for ft in FailureType}

    def classify(self, error: BaseException) -> FailureType:
        if isinstance(error, ValidationError):
            return FailureType.VALIDATION_ERROR
        if isinstance(error, ArithmeticError):
            return FailureType.ARITHMETIC_ERROR
        if isinstance(error, (ValueError, TypeError)):
            return FailureType.INVALID_VALUE
        if isinstance(error, (KeyError, AttributeError, IndexError)):
            return FailureType.RENDER_ERROR
        return self.classify_error(str(error))

    def classify_error(self, error_msg: str) -> FailureType:
        error_lower = error_msg.lower()

        if "validation error" in error_lower:
            return FailureType.VALIDATION_ERROR
        elif "overflow" in error_lower or "division" in error_lower:
            return FailureType.ARITHMETIC_ERROR
        elif "render" in error_lower:
            return FailureType.RENDER_ERROR
        elif any(err in error_lower for err in ["error", "exception", "failed"]):
            return FailureType.RUNTIME_ERROR
        else:
            return FailureType.OTHER

    def record_failure(self, error: BaseException) -> FailureType:
        failure_type = self.classify(error)
        self.failures[failure_type] += 1
        return failure_type

    def get_failure_stats(self) -> dict[str, int]:
        return {ft.value: count for ft, count in self.failures.items() if count}
