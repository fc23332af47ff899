# records/migrations/0001_initial.py
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Course',
            fields=[
                ('code', models.CharField(db_column='courseCode', max_length=20, primary_key=True, serialize=False, verbose_name='Course Code')),
                ('name', models.CharField(db_column='courseName', max_length=150, verbose_name='Course Name')),
                ('credits', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
            ],
            options={
                'verbose_name': 'Course',
                'verbose_name_plural': 'Courses',
                'db_table': 'courses',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='StudentRecord',
            fields=[
                ('student_id', models.CharField(db_column='studentID', max_length=64, primary_key=True, serialize=False, verbose_name='Student ID')),
                ('name', models.CharField(max_length=150)),
                ('age', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(18), django.core.validators.MaxValueValidator(100)])),
                ('grade', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0.00'), 'Grade cannot be negative'), django.core.validators.MaxValueValidator(Decimal('100.00'), 'Grade cannot exceed 100')])),
                ('enrollment_date', models.DateField(db_column='enrollmentDate', default=django.utils.timezone.localdate)),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'db_table': 'students',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enrollment_grade', models.DecimalField(blank=True, db_column='enrollmentGrade', decimal_places=2, max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'), 'Score cannot be negative'), django.core.validators.MaxValueValidator(Decimal('100.00'), 'Score cannot exceed 100%')])),
                ('course', models.ForeignKey(db_column='courseCode', on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='records.course')),
                ('student', models.ForeignKey(db_column='studentID', on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='records.studentrecord')),
            ],
            options={
                'verbose_name': 'Enrollment',
                'verbose_name_plural': 'Enrollments',
                'db_table': 'enrollments',
                'ordering': ['id'],
            },
        ),
        migrations.AddIndex(
            model_name='studentrecord',
            index=models.Index(fields=['name'], name='students_name_idx'),
        ),
        migrations.AddConstraint(
            model_name='course',
            constraint=models.CheckConstraint(condition=models.Q(credits__gte=1), name='courses_credits_positive'),
        ),
        migrations.AddConstraint(
            model_name='studentrecord',
            constraint=models.CheckConstraint(condition=models.Q(('age__gte', 18), ('age__lte', 100)), name='students_age_range'),
        ),
        migrations.AddConstraint(
            model_name='studentrecord',
            constraint=models.CheckConstraint(condition=models.Q(('grade__gte', 0), ('grade__lte', 100)), name='students_grade_range'),
        ),
        migrations.AddConstraint(
            model_name='enrollment',
            constraint=models.UniqueConstraint(fields=('student', 'course'), name='enrollments_unique_pair'),
        ),
    ]
