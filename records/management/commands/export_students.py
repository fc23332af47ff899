# records/management/commands/export_students.py
from django.core.management.base import BaseCommand, CommandError

from records.services import get_student_manager


class Command(BaseCommand):
    help = 'Export all students to a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Destination CSV file')

    def handle(self, *args, **options):
        path = options['path']
        try:
            count = get_student_manager().export_students_to_csv(path)
        except OSError as e:
            raise CommandError(f"Could not write {path}: {e}")

        self.stdout.write(self.style.SUCCESS(f'Exported {count} students to {path}'))
