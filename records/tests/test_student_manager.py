# records/tests/test_student_manager.py
import threading
import time
from unittest import mock

from django.db import DatabaseError
from django.db.models.query import QuerySet
from django.test import SimpleTestCase

from records.constants import DEFAULT_COURSE_CATALOG
from records.entities import Student
from records.exceptions import PersistenceError
from records.models import Course, Enrollment, StudentRecord
from records.services import StudentManager, student_manager as manager_module
from records.services import get_student_manager
from records.tests.factories import StudentRecordFactory
from records.tests.test_utils import BaseTestCase


class StudentManagerInitializationTest(BaseTestCase):
    def test_catalog_is_seeded(self):
        courses = self.manager.get_all_courses()
        self.assertEqual(
            courses,
            {entry['code']: entry['name'] for entry in DEFAULT_COURSE_CATALOG}
        )

    def test_initialize_is_idempotent(self):
        self.manager.initialize()
        StudentManager().initialize()
        self.assertEqual(Course.objects.count(), len(DEFAULT_COURSE_CATALOG))

    def test_seed_only_fills_an_empty_catalog(self):
        self.assertEqual(self.manager.seed_course_catalog(), 0)

        Course.objects.all().delete()
        self.assertEqual(self.manager.seed_course_catalog(), len(DEFAULT_COURSE_CATALOG))
        self.assertEqual(Course.objects.count(), len(DEFAULT_COURSE_CATALOG))

    def test_initialize_reports_seeded_courses(self):
        Course.objects.all().delete()
        manager = StudentManager()

        self.assertEqual(manager.initialize(), len(DEFAULT_COURSE_CATALOG))
        self.assertEqual(manager.initialize(), 0)

    def test_missing_schema_is_migrated(self):
        manager = StudentManager()
        with mock.patch.object(manager_module, 'connections') as connections, \
                mock.patch.object(manager_module, 'call_command') as call_command, \
                mock.patch.object(StudentManager, '_seed_course_catalog', return_value=0):
            connections.__getitem__.return_value.introspection.table_names.return_value = []
            manager.initialize()

        call_command.assert_called_once_with(
            'migrate', 'records', database='default', interactive=False, verbosity=0
        )

    def test_existing_schema_is_not_migrated(self):
        manager = StudentManager()
        with mock.patch.object(manager_module, 'call_command') as call_command:
            manager.initialize()
        call_command.assert_not_called()

    def test_store_failure_during_initialize(self):
        manager = StudentManager()
        with mock.patch.object(StudentManager, '_ensure_schema', side_effect=DatabaseError("unable to open database file")):
            with self.assertRaises(PersistenceError):
                manager.initialize()


class StudentManagerConcurrencyTest(SimpleTestCase):
    def test_initialize_runs_once_under_concurrent_access(self):
        manager = StudentManager()
        calls = []

        def slow_schema(*args):
            calls.append(threading.get_ident())
            time.sleep(0.05)

        with mock.patch.object(StudentManager, '_ensure_schema', side_effect=slow_schema), \
                mock.patch.object(StudentManager, '_seed_course_catalog', return_value=0):
            threads = [threading.Thread(target=manager.initialize) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(len(calls), 1)

    def test_shared_manager_is_created_once(self):
        results = []

        with mock.patch.object(manager_module, '_manager', None), \
                mock.patch.object(StudentManager, 'initialize') as initialize:
            threads = [
                threading.Thread(target=lambda: results.append(get_student_manager()))
                for _ in range(8)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(len(results), 8)
        self.assertEqual(len({id(manager) for manager in results}), 1)
        self.assertEqual(initialize.call_count, 8)


class AddStudentTest(BaseTestCase):
    def test_add_student_with_courses(self):
        student = self.create_student(courses=["CS101", "MATH101"])

        record = StudentRecord.objects.get(pk=student.student_id)
        self.assertEqual(record.name, "Ada Lovelace")
        self.assertEqual(record.age, 30)
        self.assertEqual(float(record.grade), 92.5)
        self.assertEqual(record.enrollment_date, student.enrollment_date)
        self.assertEqual(self.enrolled_codes(student.student_id), ["CS101", "MATH101"])

    def test_duplicate_id_is_rejected(self):
        student = self.create_student()
        clone = Student("Someone Else", 40, 50, student_id=student.student_id)

        with self.assertRaises(PersistenceError) as ctx:
            self.manager.add_student(clone)

        self.assertEqual(ctx.exception.student_id, student.student_id)
        self.assertEqual(StudentRecord.objects.get(pk=student.student_id).name, "Ada Lovelace")

    def test_unknown_course_rolls_back_student_row(self):
        student = Student("Ada Lovelace", 30, 92.5, courses=["CS101", "NOPE999"])

        with self.assertRaises(PersistenceError):
            self.manager.add_student(student)

        self.assertNotIn(student, self.manager.display_all_students())
        self.assertFalse(StudentRecord.objects.filter(pk=student.student_id).exists())
        self.assertFalse(Enrollment.objects.filter(student_id=student.student_id).exists())

    def test_enrollment_failure_rolls_back_student_row(self):
        student = Student("Ada Lovelace", 30, 92.5, courses=["CS101"])

        with mock.patch.object(QuerySet, 'bulk_create', side_effect=DatabaseError("disk I/O error")):
            with self.assertRaises(PersistenceError):
                self.manager.add_student(student)

        self.assertEqual(self.manager.display_all_students(), [])
        self.assertFalse(Enrollment.objects.exists())


class UpdateStudentTest(BaseTestCase):
    def test_enrollments_are_replaced_not_merged(self):
        student = self.create_student(courses=["MATH101"])
        updated = Student("Ada King", 31, 95.0, courses=["CS101"])

        self.assertTrue(self.manager.update_student(student.student_id, updated))

        self.assertEqual(self.enrolled_codes(student.student_id), ["CS101"])
        stored = self.manager.get_student(student.student_id)
        self.assertEqual(stored.name, "Ada King")
        self.assertEqual(stored.age, 31)
        self.assertEqual(stored.grade, 95.0)
        self.assertEqual(stored.enrollment_date, student.enrollment_date)
        self.assertEqual(stored.courses, ("CS101",))

    def test_update_can_clear_enrollments(self):
        student = self.create_student(courses=["MATH101", "CS101"])
        updated = Student(student.name, student.age, student.grade)

        self.manager.update_student(student.student_id, updated)
        self.assertEqual(self.enrolled_codes(student.student_id), [])

    def test_unknown_id_is_silent_noop(self):
        updated = Student("Nobody Here", 30, 50, courses=["CS101"])

        self.assertFalse(self.manager.update_student("missing-id", updated))
        self.assertFalse(StudentRecord.objects.exists())
        self.assertFalse(Enrollment.objects.exists())

    def test_failed_update_rolls_back_everything(self):
        student = self.create_student(courses=["MATH101"])
        updated = Student("Ada King", 31, 95.0, courses=["NOPE999"])

        with self.assertRaises(PersistenceError):
            self.manager.update_student(student.student_id, updated)

        stored = self.manager.get_student(student.student_id)
        self.assertEqual(stored.name, "Ada Lovelace")
        self.assertEqual(stored.courses, ("MATH101",))


class RemoveStudentTest(BaseTestCase):
    def test_remove_cascades_enrollments(self):
        student = self.create_student(courses=["CS101", "HIST101"])

        self.assertTrue(self.manager.remove_student(student.student_id))

        self.assertNotIn(student, self.manager.display_all_students())
        self.assertFalse(Enrollment.objects.filter(student_id=student.student_id).exists())

    def test_remove_missing_is_noop(self):
        self.create_student()
        self.assertFalse(self.manager.remove_student("missing-id"))
        self.assertEqual(StudentRecord.objects.count(), 1)


class ReadStudentsTest(BaseTestCase):
    def test_display_all_orders_by_name(self):
        for name in ["Charlie Brown", "Ada Lovelace", "Bob Smith"]:
            self.create_student(name=name)

        names = [student.name for student in self.manager.display_all_students()]
        self.assertEqual(names, ["Ada Lovelace", "Bob Smith", "Charlie Brown"])

    def test_display_all_includes_courses(self):
        student = self.create_student(courses=["PHYS101", "CS101"])
        listed = self.manager.display_all_students()

        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0].courses, ("PHYS101", "CS101"))

    def test_returned_students_are_copies(self):
        student = self.create_student(courses=["CS101"])
        listed = self.manager.display_all_students()[0]
        listed.add_course("MATH101")

        self.assertEqual(self.enrolled_codes(student.student_id), ["CS101"])

    def test_search_lovelace_scenario(self):
        ada = self.create_student(name="Ada Lovelace", age=30, grade=92.50)
        self.create_student(name="Alan Turing", age=41, grade=88.0)

        self.assertEqual(self.manager.search_students("Lovelace"), [ada])

        self.manager.remove_student(ada.student_id)
        self.assertNotIn(ada, self.manager.display_all_students())
        self.assertEqual(self.enrolled_codes(ada.student_id), [])

    def test_search_matches_id_substring(self):
        student = self.create_student(student_id="STUD2024001")
        self.create_student(name="Alan Turing")

        self.assertEqual(self.manager.search_students("STUD2024"), [student])

    def test_search_binds_query_as_parameter(self):
        self.create_student()

        self.assertEqual(self.manager.search_students("' OR '1'='1"), [])
        self.assertEqual(self.manager.search_students("%'; DROP TABLE students; --"), [])
        self.assertEqual(StudentRecord.objects.count(), 1)

    def test_get_student(self):
        student = self.create_student()
        self.assertEqual(self.manager.get_student(student.student_id), student)
        self.assertIsNone(self.manager.get_student("missing-id"))

    def test_read_failure_returns_empty_list(self):
        self.create_student()

        with mock.patch.object(StudentRecord.objects, 'using', side_effect=DatabaseError("no such table: students")):
            self.assertEqual(self.manager.display_all_students(), [])
            self.assertEqual(self.manager.search_students("Ada"), [])
            self.assertIsNone(self.manager.get_student("anything"))

    def test_invalid_stored_row_is_skipped(self):
        StudentRecordFactory(name="Robot 9000")
        valid = self.create_student()

        self.assertEqual(self.manager.display_all_students(), [valid])


class AggregateTest(BaseTestCase):
    def test_average_excludes_zero_grades(self):
        for name, grade in [("Zero Student", 0), ("Eighty Student", 80), ("Ninety Student", 90)]:
            self.create_student(name=name, grade=grade)

        self.assertAlmostEqual(self.manager.calculate_average_grade(), 85.0)

    def test_average_of_no_students(self):
        self.assertEqual(self.manager.calculate_average_grade(), 0.0)

    def test_average_never_fails(self):
        with mock.patch.object(StudentRecord.objects, 'using', side_effect=DatabaseError("database is locked")):
            self.assertEqual(self.manager.calculate_average_grade(), 0.0)

    def test_course_credits(self):
        self.assertEqual(
            self.manager.get_course_credits(),
            {entry['code']: entry['credits'] for entry in DEFAULT_COURSE_CATALOG}
        )

    def test_course_read_failure(self):
        with mock.patch.object(Course.objects, 'using', side_effect=DatabaseError("database is locked")):
            self.assertEqual(self.manager.get_all_courses(), {})

    def test_student_gpa(self):
        student = self.create_student(grade=92.5, courses=["CS101", "MATH101"])

        self.assertAlmostEqual(self.manager.calculate_student_gpa(student.student_id), 3.625)
        self.assertEqual(self.manager.calculate_student_gpa("missing-id"), 0.0)
