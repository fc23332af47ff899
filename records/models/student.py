# records/models/student.py
"""
Student persistence model: one row per student in the ``students`` table.
"""
from decimal import Decimal
from django.db import models
from django.db.models import Q
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from records.constants import (
    MAX_STUDENT_AGE,
    MIN_STUDENT_AGE,
    STUDENT_ID_MAX_LENGTH,
    STUDENT_NAME_MAX_LENGTH,
)


class StudentRecord(models.Model):
    student_id = models.CharField(
        max_length=STUDENT_ID_MAX_LENGTH,
        primary_key=True,
        db_column='studentID',
        verbose_name="Student ID"
    )
    name = models.CharField(max_length=STUDENT_NAME_MAX_LENGTH)
    age = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(MIN_STUDENT_AGE),
            MaxValueValidator(MAX_STUDENT_AGE)
        ]
    )
    grade = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[
            MinValueValidator(Decimal('0.00'), 'Grade cannot be negative'),
            MaxValueValidator(Decimal('100.00'), 'Grade cannot exceed 100')
        ]
    )
    enrollment_date = models.DateField(
        default=timezone.localdate,
        db_column='enrollmentDate'
    )

    class Meta:
        db_table = 'students'
        ordering = ['name']
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        indexes = [
            models.Index(fields=['name'], name='students_name_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(age__gte=MIN_STUDENT_AGE) & Q(age__lte=MAX_STUDENT_AGE),
                name='students_age_range'
            ),
            models.CheckConstraint(
                condition=Q(grade__gte=0) & Q(grade__lte=100),
                name='students_grade_range'
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.student_id})"

    def get_course_codes(self):
        """Enrolled course codes in enrollment order"""
        return [enrollment.course_id for enrollment in self.enrollments.all()]


__all__ = ['StudentRecord']
