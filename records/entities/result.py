# records/entities/result.py
"""
Result value returned by the non-raising Student factory and mutators.
"""
from dataclasses import dataclass
from typing import Any, Optional

from records.exceptions import StudentRecordsException


@dataclass(frozen=True)
class Result:
    """Either a success value or the typed error that prevented it"""

    value: Any = None
    error: Optional[StudentRecordsException] = None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error: StudentRecordsException):
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        """Return the value, raising the carried error on failure"""
        if self.error is not None:
            raise self.error
        return self.value
