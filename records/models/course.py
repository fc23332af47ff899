# records/models/course.py
"""
Course catalog and enrollment models.
"""
from django.db import models
from django.db.models import Q
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal

from records.constants import COURSE_CODE_MAX_LENGTH, COURSE_NAME_MAX_LENGTH
from records.models.student import StudentRecord


class Course(models.Model):
    code = models.CharField(
        max_length=COURSE_CODE_MAX_LENGTH,
        primary_key=True,
        db_column='courseCode',
        verbose_name="Course Code"
    )
    name = models.CharField(
        max_length=COURSE_NAME_MAX_LENGTH,
        db_column='courseName',
        verbose_name="Course Name"
    )
    credits = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )

    class Meta:
        db_table = 'courses'
        ordering = ['code']
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'
        constraints = [
            models.CheckConstraint(condition=Q(credits__gte=1), name='courses_credits_positive'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"


class Enrollment(models.Model):
    student = models.ForeignKey(
        StudentRecord,
        on_delete=models.CASCADE,
        related_name='enrollments',
        db_column='studentID'
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name='enrollments',
        db_column='courseCode'
    )
    enrollment_grade = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        db_column='enrollmentGrade',
        validators=[
            MinValueValidator(Decimal('0.00'), 'Score cannot be negative'),
            MaxValueValidator(Decimal('100.00'), 'Score cannot exceed 100%')
        ]
    )

    class Meta:
        db_table = 'enrollments'
        ordering = ['id']
        verbose_name = 'Enrollment'
        verbose_name_plural = 'Enrollments'
        constraints = [
            models.UniqueConstraint(fields=['student', 'course'], name='enrollments_unique_pair'),
        ]

    def __str__(self):
        return f"{self.student_id} -> {self.course_id}"


__all__ = ['Course', 'Enrollment']
