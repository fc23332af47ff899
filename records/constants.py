# records/constants.py
"""
Constants for the student records application.
Kept in one place so entities, models and services agree on the same limits.
"""

# ========== STUDENT FIELD LIMITS ==========
# Letters (any script), spaces, periods and hyphens
STUDENT_NAME_PATTERN = r'^(?:[^\W\d_]|[ .\-])+$'
STUDENT_NAME_MAX_LENGTH = 150
STUDENT_ID_MAX_LENGTH = 64

MIN_STUDENT_AGE = 18
MAX_STUDENT_AGE = 100

MIN_GRADE = 0.0
MAX_GRADE = 100.0
GRADE_DECIMAL_PLACES = 2
GRADE_PRECISION_TOLERANCE = 1e-4

# ========== COURSE CATALOG ==========
COURSE_CODE_MAX_LENGTH = 20
COURSE_NAME_MAX_LENGTH = 150

DEFAULT_COURSE_CATALOG = [
    {'code': 'CS101', 'name': 'Intro to Java', 'credits': 5},
    {'code': 'MATH101', 'name': 'Calculus I', 'credits': 4},
    {'code': 'HIST101', 'name': 'World History', 'credits': 3},
    {'code': 'PHYS101', 'name': 'Physics', 'credits': 4},
]

# ========== CSV EXCHANGE FORMAT ==========
CSV_HEADER = ['ID', 'Name', 'Age', 'Grade', 'Date', 'Courses']
CSV_COURSE_SEPARATOR = ';'
