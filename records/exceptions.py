"""
Exception classes for the student records application.
Validation failures are raised by the Student entity; persistence failures
by the StudentManager after its transaction has been rolled back.
"""

import logging

logger = logging.getLogger(__name__)


class StudentRecordsException(Exception):
    """Base exception for the student records application"""

    def __init__(self, message=None, details=None):
        self.message = message or "An error occurred in the student records application"
        self.details = details
        super().__init__(self.message)


class StudentValidationError(StudentRecordsException):
    """Raised when a Student field fails its invariant"""

    def __init__(self, message="Student validation failed", field_errors=None, **kwargs):
        self.field_errors = field_errors or {}
        super().__init__(message, **kwargs)

        logger.debug(
            f"StudentValidationError: {message} - "
            f"Field Errors: {self.field_errors}"
        )


class PersistenceError(StudentRecordsException):
    """Raised when a store write fails; the store is left unchanged"""

    def __init__(self, message="Database operation failed", student_id=None, **kwargs):
        self.student_id = student_id
        super().__init__(message, **kwargs)

        logger.error(
            f"PersistenceError: {message} - "
            f"Student: {student_id}, Details: {self.details}"
        )
