# records/management/commands/import_students.py
from django.core.management.base import BaseCommand, CommandError

from records.services import get_student_manager


class Command(BaseCommand):
    help = 'Import students from a CSV file, skipping rows that are malformed or invalid'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Source CSV file')

    def handle(self, *args, **options):
        path = options['path']
        try:
            report = get_student_manager().import_students_from_csv(path)
        except OSError as e:
            raise CommandError(f"Could not read {path}: {e}")

        for row_error in report['row_errors']:
            self.stdout.write(self.style.WARNING(f"Line {row_error['line']}: {row_error['error']}"))

        self.stdout.write(self.style.SUCCESS(
            f"Imported {report['imported']} students, skipped {report['skipped']}"
        ))
