from .result import Result
from .student import Student

__all__ = ['Result', 'Student']
