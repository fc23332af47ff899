"""
Project package for the student records application.
"""
