"""
Persistence models for the student records application.
"""
from .student import StudentRecord
from .course import Course, Enrollment

__all__ = ['StudentRecord', 'Course', 'Enrollment']
