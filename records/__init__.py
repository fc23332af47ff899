"""
Student records application: student entities, course enrollments,
and the transactional manager that persists them.
"""

from .exceptions import (
    StudentRecordsException,
    StudentValidationError,
    PersistenceError,
)
