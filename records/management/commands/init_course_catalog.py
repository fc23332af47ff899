# records/management/commands/init_course_catalog.py
from django.core.management.base import BaseCommand, CommandError
from django.db import DEFAULT_DB_ALIAS

from records.exceptions import PersistenceError
from records.services import StudentManager


class Command(BaseCommand):
    help = 'Create the student records schema if needed and seed the default course catalog'

    def add_arguments(self, parser):
        parser.add_argument(
            '--database',
            default=DEFAULT_DB_ALIAS,
            help='Database alias to initialize'
        )

    def handle(self, *args, **options):
        # A fresh manager, so seeding done by initialize() is counted here
        manager = StudentManager(using=options['database'])
        try:
            created_count = manager.initialize()
        except PersistenceError as e:
            raise CommandError(e.message)

        courses = manager.get_all_courses()
        for code, name in courses.items():
            self.stdout.write(f"{code}: {name}")

        self.stdout.write(self.style.SUCCESS(
            f'Course catalog ready with {len(courses)} courses ({created_count} created)'
        ))
