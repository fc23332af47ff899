from .student_manager import StudentManager, get_student_manager

__all__ = ['StudentManager', 'get_student_manager']
