"""
Django settings for the student_records project.

Configuration is read from the environment (or a .env file) through
python-decouple. The relational store defaults to a local SQLite file.
"""

import sys
from pathlib import Path
from django.core.management.utils import get_random_secret_key
from decouple import config

# ==================== BASE CONFIGURATION ====================
BASE_DIR = Path(__file__).resolve().parent.parent

# ==================== ENVIRONMENT DETECTION ====================
ENVIRONMENT = config('DJANGO_ENVIRONMENT', default='development')
IS_PRODUCTION = ENVIRONMENT == 'production'
IS_DEVELOPMENT = ENVIRONMENT == 'development'
IS_TESTING = 'test' in sys.argv or 'pytest' in sys.modules

# ==================== SECURITY SETTINGS ====================
SECRET_KEY = config('SECRET_KEY', default=get_random_secret_key())
DEBUG = config('DEBUG', default=not IS_PRODUCTION, cast=bool)
ALLOWED_HOSTS = []

# ==================== APPLICATION DEFINITION ====================
DJANGO_APPS = [
    'django.contrib.contenttypes',
]

LOCAL_APPS = [
    'records',
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==================== DATABASE CONFIGURATION ====================
DB_ENGINE = config('DB_ENGINE', default='sqlite').lower()

if DB_ENGINE == 'mysql':
    import pymysql
    pymysql.install_as_MySQLdb()

    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.mysql',
            'NAME': config('DB_NAME', default='student_records'),
            'USER': config('DB_USER', default='records_user'),
            'PASSWORD': config('DB_PASSWORD', default=''),
            'HOST': config('DB_HOST', default='localhost'),
            'PORT': config('DB_PORT', default='3306'),
            'OPTIONS': {
                'charset': 'utf8mb4',
                'init_command': "SET sql_mode='STRICT_TRANS_TABLES'",
            },
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': config('DB_NAME', default=str(BASE_DIR / 'student_management.sqlite3')),
            'OPTIONS': {
                'timeout': config('DB_TIMEOUT', default=30, cast=int),
            },
        }
    }

# ==================== INTERNATIONALIZATION ====================
LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

# ==================== LOGGING CONFIGURATION ====================
LOGS_DIR = BASE_DIR / 'logs'
LOG_LEVEL = config('LOG_LEVEL', default='DEBUG' if DEBUG else 'INFO')
LOG_TO_FILE = config('LOG_TO_FILE', default=not IS_TESTING, cast=bool)

if LOG_TO_FILE:
    LOGS_DIR.mkdir(exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'records': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}

if LOG_TO_FILE:
    LOGGING['handlers'].update({
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOGS_DIR / 'records.log',
            'maxBytes': 1024 * 1024 * 10,
            'backupCount': 5,
            'formatter': 'verbose',
        },
        'error_file': {
            'level': 'ERROR',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOGS_DIR / 'errors.log',
            'maxBytes': 1024 * 1024 * 10,
            'backupCount': 5,
            'formatter': 'verbose',
        },
    })
    LOGGING['loggers']['django']['handlers'].append('file')
    LOGGING['loggers']['records']['handlers'] += ['file', 'error_file']

# ==================== STUDENT RECORDS ====================
# CSV files are always written with this encoding, independent of the platform locale
RECORDS_CSV_ENCODING = config('RECORDS_CSV_ENCODING', default='utf-8')
