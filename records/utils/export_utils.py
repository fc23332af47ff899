# records/utils/export_utils.py
"""
CSV exchange format for student records.

    ID,Name,Age,Grade,Date,Courses
    <id>,<name>,<age>,<grade:2dp>,<ISO date>,<code1;code2;...>

Grades are always written with two decimals and a '.' decimal point,
whatever the process locale.
"""
import csv
from datetime import date

from records.constants import CSV_COURSE_SEPARATOR, CSV_HEADER
from records.entities import Student


def format_grade(grade):
    return f"{grade:.2f}"


def student_to_row(student):
    """Convert a Student to its list of CSV cells"""
    return [
        student.student_id,
        student.name,
        str(student.age),
        format_grade(student.grade),
        student.enrollment_date.isoformat(),
        CSV_COURSE_SEPARATOR.join(student.courses),
    ]


def is_header_row(row):
    return [cell.strip() for cell in row] == CSV_HEADER


def parse_student_row(row):
    """
    Build a Student from one CSV row.

    Raises ValueError for a malformed row (wrong field count, unparseable
    number or date) and StudentValidationError when the values break a
    Student invariant.
    """
    if len(row) != len(CSV_HEADER):
        raise ValueError(f"Expected {len(CSV_HEADER)} fields, found {len(row)}")

    student_id, name, age, grade, enrolled, courses = (cell.strip() for cell in row)
    if not enrolled:
        raise ValueError("Enrollment date is missing")

    return Student(
        name,
        int(age),
        float(grade),
        student_id=student_id or None,
        enrollment_date=date.fromisoformat(enrolled),
        courses=[code for code in courses.split(CSV_COURSE_SEPARATOR) if code.strip()],
    )


def write_students_csv(stream, students):
    """Write the header and one row per student; returns the number of rows written"""
    writer = csv.writer(stream, lineterminator='\n')
    writer.writerow(CSV_HEADER)

    count = 0
    for student in students:
        writer.writerow(student_to_row(student))
        count += 1
    return count


def read_student_rows(stream):
    """
    Yield ``(line_number, row, error)`` for every non-blank data row,
    skipping the header.

    A line the csv parser rejects (e.g. a field over ``csv.field_size_limit()``)
    comes back as ``(line_number, [], message)`` and reading resumes on the
    next line.
    """
    reader = csv.reader(stream)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            yield reader.line_num, [], str(e)
            continue

        if not any(cell.strip() for cell in row):
            continue
        if reader.line_num == 1 and is_header_row(row):
            continue
        yield reader.line_num, row, None


__all__ = [
    'format_grade',
    'student_to_row',
    'is_header_row',
    'parse_student_row',
    'write_students_csv',
    'read_student_rows',
]
