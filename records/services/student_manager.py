# records/services/student_manager.py
"""
StudentManager: the single entry point for reading and writing student records.

Writes (add/update/remove) run inside one transaction each and raise
PersistenceError after rolling back. Reads (list/search/aggregate) degrade
to empty results and log the failure, since callers only display them.
"""
import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional

from django.conf import settings
from django.core.management import call_command
from django.db import DatabaseError, IntegrityError, connections, transaction
from django.db.models import Avg, Q

from records.constants import DEFAULT_COURSE_CATALOG
from records.entities import Student
from records.exceptions import PersistenceError, StudentValidationError
from records.models import Course, Enrollment, StudentRecord
from records.utils.export_utils import (
    format_grade,
    parse_student_row,
    read_student_rows,
    write_students_csv,
)

logger = logging.getLogger(__name__)

_manager = None
_manager_lock = threading.Lock()


def get_student_manager():
    """Return the process-wide StudentManager, creating and initializing it on first use"""
    global _manager
    with _manager_lock:
        if _manager is None:
            _manager = StudentManager()
        manager = _manager

    manager.initialize()
    return manager


class StudentManager:
    """Transactional façade over the students, courses and enrollments tables"""

    def __init__(self, using='default'):
        self.using = using
        self._init_lock = threading.Lock()
        self._initialized = False

    # ===========================
    # INITIALIZATION
    # ===========================

    def initialize(self):
        """
        Create the schema if it is missing and seed the course catalog if it
        is empty. Runs once per manager, however many threads call it.

        Returns the number of catalog courses this call created; 0 when the
        catalog already had rows or the manager was already initialized.
        """
        with self._init_lock:
            if self._initialized:
                return 0

            try:
                self._ensure_schema()
                created_count = self._seed_course_catalog()
            except DatabaseError as e:
                raise PersistenceError(
                    "Could not initialize the student records store",
                    details=str(e)
                ) from e

            self._initialized = True
            logger.info("Student records store initialized")
            return created_count

    def seed_course_catalog(self):
        """Insert the default course catalog when it is empty; returns the number of courses created"""
        self.initialize()
        try:
            return self._seed_course_catalog()
        except DatabaseError as e:
            raise PersistenceError("Could not seed the course catalog", details=str(e)) from e

    def _ensure_schema(self):
        connection = connections[self.using]
        existing_tables = set(connection.introspection.table_names())
        required_tables = {model._meta.db_table for model in (StudentRecord, Course, Enrollment)}

        missing = required_tables - existing_tables
        if missing:
            logger.info(f"Creating student records schema, missing tables: {', '.join(sorted(missing))}")
            call_command('migrate', 'records', database=self.using, interactive=False, verbosity=0)

    def _seed_course_catalog(self):
        with transaction.atomic(using=self.using):
            courses = Course.objects.using(self.using)
            if courses.exists():
                return 0
            courses.bulk_create([Course(**entry) for entry in DEFAULT_COURSE_CATALOG])

        logger.info(f"Course catalog populated with {len(DEFAULT_COURSE_CATALOG)} default courses")
        return len(DEFAULT_COURSE_CATALOG)

    # ===========================
    # WRITE OPERATIONS
    # ===========================

    def add_student(self, student: Student):
        """Insert the student row and its enrollments as one atomic unit"""
        self.initialize()

        try:
            with transaction.atomic(using=self.using):
                StudentRecord.objects.using(self.using).create(
                    student_id=student.student_id,
                    enrollment_date=student.enrollment_date,
                    **self._personal_fields(student)
                )
                self._insert_enrollments(student.student_id, student.courses)
        except IntegrityError as e:
            raise PersistenceError(
                f"Student {student.student_id} could not be added: duplicate ID or constraint violation",
                student_id=student.student_id,
                details=str(e)
            ) from e
        except DatabaseError as e:
            raise PersistenceError(
                f"Database error while adding student {student.student_id}",
                student_id=student.student_id,
                details=str(e)
            ) from e

        logger.info(f"Student added: {student.name} ({student.student_id})")

    def update_student(self, student_id: str, updated: Student) -> bool:
        """
        Overwrite name, age and grade and replace the enrollment list.

        An unknown ID is a silent no-op and returns False; the store is not
        read beforehand.
        """
        self.initialize()

        try:
            with transaction.atomic(using=self.using):
                matched = StudentRecord.objects.using(self.using).filter(
                    pk=student_id
                ).update(**self._personal_fields(updated))

                if not matched:
                    logger.info(f"Update skipped, no student with ID {student_id}")
                    return False

                # Full replacement, never a merge with the old course list
                Enrollment.objects.using(self.using).filter(student_id=student_id).delete()
                self._insert_enrollments(student_id, updated.courses)
        except DatabaseError as e:
            raise PersistenceError(
                f"Database error while updating student {student_id}",
                student_id=student_id,
                details=str(e)
            ) from e

        logger.info(f"Student updated: {student_id}")
        return True

    def remove_student(self, student_id: str) -> bool:
        """Delete the student; its enrollments are removed by the cascade"""
        self.initialize()

        try:
            with transaction.atomic(using=self.using):
                _, deleted = StudentRecord.objects.using(self.using).filter(pk=student_id).delete()
        except DatabaseError as e:
            raise PersistenceError(
                f"Database error while removing student {student_id}",
                student_id=student_id,
                details=str(e)
            ) from e

        removed = deleted.get(StudentRecord._meta.label, 0)
        if removed:
            logger.info(f"Student removed: {student_id}")
        else:
            logger.debug(f"Remove skipped, no student with ID {student_id}")
        return bool(removed)

    def _insert_enrollments(self, student_id, course_codes):
        if not course_codes:
            return

        known = set(
            Course.objects.using(self.using)
            .filter(code__in=course_codes)
            .values_list('code', flat=True)
        )
        unknown = [code for code in course_codes if code not in known]
        if unknown:
            raise PersistenceError(
                f"Unknown course code(s) for student {student_id}: {', '.join(unknown)}",
                student_id=student_id
            )

        Enrollment.objects.using(self.using).bulk_create([
            Enrollment(student_id=student_id, course_id=code) for code in course_codes
        ])

    @staticmethod
    def _personal_fields(student):
        return {
            'name': student.name,
            'age': student.age,
            'grade': Decimal(format_grade(student.grade)),
        }

    # ===========================
    # READ OPERATIONS
    # ===========================

    def display_all_students(self) -> List[Student]:
        """All students ordered by name, each with its enrollments"""
        return self._fetch_students(
            lambda: StudentRecord.objects.using(self.using).order_by('name'),
            "student list"
        )

    def search_students(self, query: str) -> List[Student]:
        """Students whose name or ID contains ``query``"""
        query = query or ''
        return self._fetch_students(
            lambda: StudentRecord.objects.using(self.using).filter(
                Q(name__contains=query) | Q(student_id__contains=query)
            ).order_by('name'),
            f"students matching '{query}'"
        )

    def get_student(self, student_id: str) -> Optional[Student]:
        students = self._fetch_students(
            lambda: StudentRecord.objects.using(self.using).filter(pk=student_id),
            f"student {student_id}"
        )
        return students[0] if students else None

    def _fetch_students(self, build_queryset, description):
        try:
            self.initialize()
            records = list(build_queryset().prefetch_related('enrollments'))
        except (DatabaseError, PersistenceError) as e:
            logger.error(f"Error retrieving {description}: {e}", exc_info=True)
            return []

        students = []
        for record in records:
            try:
                students.append(self._to_entity(record))
            except StudentValidationError as e:
                logger.warning(f"Skipping stored student {record.student_id} with invalid data: {e.message}")
        return students

    @staticmethod
    def _to_entity(record):
        return Student(
            record.name,
            record.age,
            float(record.grade),
            student_id=record.student_id,
            enrollment_date=record.enrollment_date,
            courses=record.get_course_codes(),
        )

    # ===========================
    # AGGREGATES & CATALOG
    # ===========================

    def calculate_average_grade(self) -> float:
        """Mean grade over students with a grade above zero; a zero grade counts as no data"""
        try:
            self.initialize()
            average = StudentRecord.objects.using(self.using).filter(
                grade__gt=0
            ).aggregate(average=Avg('grade'))['average']
        except (DatabaseError, PersistenceError) as e:
            logger.error(f"Error calculating average grade: {e}", exc_info=True)
            return 0.0

        return float(average) if average is not None else 0.0

    def get_all_courses(self) -> Dict[str, str]:
        return self._course_mapping('name')

    def get_course_credits(self) -> Dict[str, int]:
        return self._course_mapping('credits')

    def _course_mapping(self, field):
        try:
            self.initialize()
            return dict(Course.objects.using(self.using).values_list('code', field))
        except (DatabaseError, PersistenceError) as e:
            logger.error(f"Error loading course catalog: {e}", exc_info=True)
            return {}

    def calculate_student_gpa(self, student_id: str) -> float:
        student = self.get_student(student_id)
        if student is None:
            return 0.0
        return student.compute_gpa(self.get_course_credits())

    # ===========================
    # CSV IMPORT / EXPORT
    # ===========================

    def export_students_to_csv(self, path) -> int:
        """Write every student to ``path``; returns the number of rows written"""
        students = self.display_all_students()
        encoding = getattr(settings, 'RECORDS_CSV_ENCODING', 'utf-8')

        try:
            with open(path, 'w', newline='', encoding=encoding) as stream:
                count = write_students_csv(stream, students)
        except OSError as e:
            logger.error(f"Export to {path} failed: {e}")
            raise

        logger.info(f"Exported {count} students to {path}")
        return count

    def import_students_from_csv(self, path):
        """
        Insert every valid row of ``path`` as a new student, honoring the IDs
        in the file. Bad rows are skipped and reported; only a file-level
        failure raises, as OSError (including a file that cannot be decoded).

        Returns: {
            'imported': int,
            'skipped': int,
            'row_errors': [{'line': int, 'row': list, 'error': str}],
        }
        """
        self.initialize()
        encoding = getattr(settings, 'RECORDS_CSV_ENCODING', 'utf-8')
        report = {'imported': 0, 'skipped': 0, 'row_errors': []}

        try:
            with open(path, newline='', encoding=encoding) as stream:
                for line_number, row, read_error in read_student_rows(stream):
                    try:
                        if read_error:
                            raise ValueError(f"Unreadable CSV line: {read_error}")
                        self.add_student(parse_student_row(row))
                    except (ValueError, StudentValidationError, PersistenceError) as e:
                        error = getattr(e, 'message', str(e))
                        report['skipped'] += 1
                        report['row_errors'].append({'line': line_number, 'row': row, 'error': error})
                        logger.warning(f"Skipping CSV line {line_number} ({','.join(row)}): {error}")
                    else:
                        report['imported'] += 1
        except UnicodeDecodeError as e:
            logger.error(f"Import from {path} failed: file is not valid {encoding} text ({e.reason})")
            raise OSError(f"{path} is not valid {encoding} text: {e}") from e
        except OSError as e:
            logger.error(f"Import from {path} failed: {e}")
            raise

        logger.info(
            f"Import from {path} finished: {report['imported']} imported, "
            f"{report['skipped']} skipped"
        )
        return report
