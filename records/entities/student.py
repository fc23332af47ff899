# records/entities/student.py
"""
Student entity: a validated value object for one student record
and the course codes the student is enrolled in.

Every field goes through the same cleaners on construction and on
assignment, so an instance is never observable in an invalid state.
"""
import math
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.utils import timezone

from records.constants import (
    COURSE_CODE_MAX_LENGTH,
    GRADE_DECIMAL_PLACES,
    GRADE_PRECISION_TOLERANCE,
    MAX_GRADE,
    MAX_STUDENT_AGE,
    MIN_GRADE,
    MIN_STUDENT_AGE,
    STUDENT_ID_MAX_LENGTH,
    STUDENT_NAME_MAX_LENGTH,
    STUDENT_NAME_PATTERN,
)
from records.entities.result import Result
from records.exceptions import StudentValidationError


AGE_RANGE_MESSAGE = f"Student age must be between {MIN_STUDENT_AGE} and {MAX_STUDENT_AGE}."
GRADE_RANGE_MESSAGE = f"Grade must be between {MIN_GRADE} and {MAX_GRADE}."

name_validator = RegexValidator(
    STUDENT_NAME_PATTERN,
    message="Name contains invalid characters. Only letters, spaces, periods and hyphens are allowed.",
    code='invalid_name',
)
age_validators = [
    MinValueValidator(MIN_STUDENT_AGE, AGE_RANGE_MESSAGE),
    MaxValueValidator(MAX_STUDENT_AGE, AGE_RANGE_MESSAGE),
]
grade_validators = [
    MinValueValidator(MIN_GRADE, GRADE_RANGE_MESSAGE),
    MaxValueValidator(MAX_GRADE, GRADE_RANGE_MESSAGE),
]


# ===========================
# FIELD CLEANERS
# ===========================

def clean_student_id(value):
    """Return a usable identifier, generating a new UUID when none is given"""
    if value is None:
        return str(uuid.uuid4())
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError("Student ID must be a string.", code='invalid')

    student_id = value.strip()
    if not student_id:
        return str(uuid.uuid4())
    if len(student_id) > STUDENT_ID_MAX_LENGTH:
        raise ValidationError(
            f"Student ID cannot exceed {STUDENT_ID_MAX_LENGTH} characters.",
            code='max_length',
        )
    return student_id


def clean_name(value):
    if not isinstance(value, str):
        raise ValidationError("Name must be a string.", code='invalid')

    name = value.strip()
    if not name:
        raise ValidationError("Name cannot be empty.", code='required')
    if len(name) > STUDENT_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Name cannot exceed {STUDENT_NAME_MAX_LENGTH} characters.",
            code='max_length',
        )
    name_validator(name)
    return name


def clean_age(value):
    # bool is an int subclass but never a meaningful age
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Age must be a whole number.", code='invalid')
    for validator in age_validators:
        validator(value)
    return value


def clean_grade(value):
    """
    Validate the overall grade: a finite number in [0, 100]
    with no more than two decimal places.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError("Grade must be a number.", code='invalid')

    grade = float(value)
    if not math.isfinite(grade):
        raise ValidationError(GRADE_RANGE_MESSAGE, code='invalid')
    for validator in grade_validators:
        validator(grade)

    scaled = grade * 10 ** GRADE_DECIMAL_PLACES
    if abs(scaled - round(scaled)) > GRADE_PRECISION_TOLERANCE:
        raise ValidationError(
            f"Grade must have no more than {GRADE_DECIMAL_PLACES} decimal places.",
            code='precision',
        )
    return grade


def clean_enrollment_date(value):
    if value is None:
        return timezone.localdate()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError("Enrollment date must be a date.", code='invalid')


def clean_course_code(value):
    if not isinstance(value, str):
        raise ValidationError("Course code must be a string.", code='invalid')

    code = value.strip()
    if not code:
        raise ValidationError("Course code cannot be empty.", code='required')
    if len(code) > COURSE_CODE_MAX_LENGTH:
        raise ValidationError(
            f"Course code cannot exceed {COURSE_CODE_MAX_LENGTH} characters.",
            code='max_length',
        )
    return code


def clean_courses(value):
    """Clean a collection of course codes, dropping repeats but keeping order"""
    if value is None:
        return []
    if isinstance(value, str):
        raise ValidationError("Courses must be a collection of course codes.", code='invalid')

    courses = []
    for code in value:
        code = clean_course_code(code)
        if code not in courses:
            courses.append(code)
    return courses


FIELD_CLEANERS = {
    'student_id': clean_student_id,
    'name': clean_name,
    'age': clean_age,
    'grade': clean_grade,
    'enrollment_date': clean_enrollment_date,
    'courses': clean_courses,
}

MUTABLE_FIELDS = ('name', 'age', 'grade', 'enrollment_date', 'courses')


def clean_fields(values: Dict[str, object]) -> Dict[str, object]:
    """
    Run the cleaner of every supplied field before anything is assigned.
    Raises StudentValidationError listing every failing field.
    """
    cleaned = {}
    field_errors = {}

    for field, value in values.items():
        cleaner = FIELD_CLEANERS.get(field)
        if cleaner is None:
            field_errors[field] = [f"Unknown student field: {field}"]
            continue
        try:
            cleaned[field] = cleaner(value)
        except ValidationError as e:
            field_errors[field] = e.messages

    if field_errors:
        first_field = next(iter(field_errors))
        raise StudentValidationError(
            field_errors[first_field][0],
            field_errors=field_errors,
        )
    return cleaned


class Student:
    """A student record with its validated personal fields and course codes"""

    def __init__(self, name, age, grade, student_id=None,
                 enrollment_date=None, courses: Optional[Iterable[str]] = None):
        cleaned = clean_fields({
            'student_id': student_id,
            'name': name,
            'age': age,
            'grade': grade,
            'enrollment_date': enrollment_date,
            'courses': courses,
        })

        self._student_id = cleaned['student_id']
        self._name = cleaned['name']
        self._age = cleaned['age']
        self._grade = cleaned['grade']
        self._enrollment_date = cleaned['enrollment_date']
        self._courses: List[str] = cleaned['courses']

    @classmethod
    def build(cls, name, age, grade, student_id=None, enrollment_date=None, courses=None) -> Result:
        """Construct a Student without raising; the Result carries the error instead"""
        try:
            return Result.success(cls(
                name, age, grade,
                student_id=student_id,
                enrollment_date=enrollment_date,
                courses=courses,
            ))
        except StudentValidationError as e:
            return Result.failure(e)

    # ===========================
    # FIELD ACCESS
    # ===========================

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value):
        self._name = clean_fields({'name': value})['name']

    @property
    def age(self) -> int:
        return self._age

    @age.setter
    def age(self, value):
        self._age = clean_fields({'age': value})['age']

    @property
    def grade(self) -> float:
        return self._grade

    @grade.setter
    def grade(self, value):
        self._grade = clean_fields({'grade': value})['grade']

    @property
    def enrollment_date(self) -> date:
        return self._enrollment_date

    @enrollment_date.setter
    def enrollment_date(self, value):
        self._enrollment_date = clean_fields({'enrollment_date': value})['enrollment_date']

    @property
    def courses(self) -> tuple:
        """Read-only snapshot of the enrolled course codes"""
        return tuple(self._courses)

    def apply_changes(self, **fields) -> Result:
        """
        Validate every supplied field, then assign them all together.
        Nothing is changed when any field fails.
        """
        protected = [field for field in fields if field not in MUTABLE_FIELDS]
        if protected:
            return Result.failure(StudentValidationError(
                f"Cannot change field(s): {', '.join(protected)}",
                field_errors={field: ["This field cannot be changed."] for field in protected},
            ))

        try:
            cleaned = clean_fields(fields)
        except StudentValidationError as e:
            return Result.failure(e)

        for field, value in cleaned.items():
            setattr(self, f'_{field}', value)
        return Result.success(self)

    # ===========================
    # COURSE MANAGEMENT
    # ===========================

    def add_course(self, course_code):
        code = clean_fields({'courses': [course_code]})['courses'][0]
        if code not in self._courses:
            self._courses.append(code)

    def remove_course(self, course_code):
        if isinstance(course_code, str):
            course_code = course_code.strip()
        if course_code in self._courses:
            self._courses.remove(course_code)

    # ===========================
    # BUSINESS LOGIC
    # ===========================

    def compute_gpa(self, credits_by_course: Optional[Dict[str, int]]) -> float:
        """
        Credit-weighted GPA on a 4.0 scale.

        Only the overall grade is recorded, so every course carries the same
        point value ``max(0, grade / 20 - 1)``; courses missing from the
        credit table weigh 1.
        """
        if not self._courses or not credits_by_course:
            return 0.0

        points = max(0.0, self._grade / 20.0 - 1.0)
        total_weight = 0
        weighted_points = 0.0
        for code in self._courses:
            weight = credits_by_course.get(code, 1)
            total_weight += weight
            weighted_points += points * weight

        if total_weight <= 0:
            return 0.0
        return weighted_points / total_weight

    def display_info(self) -> str:
        courses = ', '.join(code.upper() for code in self._courses)
        return (
            "Student Details:\n"
            "----------------\n"
            f"ID: {self._student_id}\n"
            f"Name: {self._name}\n"
            f"Age: {self._age}\n"
            f"Average Grade: {self._grade:.2f}\n"
            f"Enrolled: {self._enrollment_date.isoformat()}\n"
            f"Courses: [{courses}]"
        )

    def copy(self):
        return Student(
            self._name,
            self._age,
            self._grade,
            student_id=self._student_id,
            enrollment_date=self._enrollment_date,
            courses=list(self._courses),
        )

    def __eq__(self, other):
        if not isinstance(other, Student):
            return NotImplemented
        return self._student_id == other._student_id

    def __hash__(self):
        return hash(self._student_id)

    def __str__(self):
        return f"{self._name} ({self._student_id})"

    def __repr__(self):
        return (
            f"Student(student_id={self._student_id!r}, name={self._name!r}, "
            f"age={self._age!r}, grade={self._grade!r})"
        )
