"""
Django settings for the Mamuju Tengah Animal Health Service Reports project.

For more information on this file, see
https://docs.djangoproject.com/en/5.2/topics/settings/

For the full list of settings and their values, see
https://docs.djangoproject.com/en/5.2/ref/settings/
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
env_file = os.path.join(BASE_DIR, '.env.development')
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    load_dotenv()  # Try default .env


# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv('DEBUG', 'True') == 'True'

# SECURITY WARNING: keep the secret key used in production secret!
# Required when DEBUG is off
SECRET_KEY = os.getenv('SECRET_KEY')
if not SECRET_KEY:
    if not DEBUG:
        raise ValueError(
            "SECRET_KEY environment variable is not set. "
            "Please add SECRET_KEY to your .env file."
        )
    SECRET_KEY = 'django-insecure-local-development-key'

ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')


# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',

    # Third-party apps
    'rest_framework',

    # Local apps
    'service_records',
    'reports',
]


# Database
# https://docs.djangoproject.com/en/5.2/ref/settings/#databases
# Service records are fetched by the caller; the engine itself never queries.

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / os.getenv('DB_NAME', 'db.sqlite3'),
    }
}


# Internationalization
# https://docs.djangoproject.com/en/5.2/topics/i18n/

LANGUAGE_CODE = os.getenv('LANGUAGE_CODE', 'id')

TIME_ZONE = os.getenv('TIME_ZONE', 'Asia/Makassar')  # WITA, Sulawesi Barat

USE_I18N = True

USE_TZ = True

# Default primary key field type
# https://docs.djangoproject.com/en/5.2/ref/settings/#default-auto-field

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# =============================================================================
# REPORT SETTINGS
# =============================================================================

REPORTS = {
    # Language used for month names, date strings and number grouping
    'LOCALE': os.getenv('REPORT_LOCALE', 'id'),
    # Outcome assumed for legacy records stored without a case breakdown
    'DEFAULT_CASE_STATUS': os.getenv('REPORT_DEFAULT_CASE_STATUS', 'Sembuh'),
    'UNKNOWN_VILLAGE': os.getenv('REPORT_UNKNOWN_VILLAGE', 'Tidak Diketahui'),
    # Header block of the per-officer workbook sheets
    'REGENCY_NAME': os.getenv('REPORT_REGENCY_NAME', 'PEMERINTAHAN KABUPATEN MAMUJU TENGAH'),
    'AGENCY_NAME': os.getenv('REPORT_AGENCY_NAME', 'DINAS KETAHANAN PANGAN DAN PERTANIAN'),
    'REPORT_TITLE': os.getenv('REPORT_TITLE', 'LAPORAN PELAYANAN KESEHATAN HEWAN'),
}


# =============================================================================
# LOGGING SETTINGS
# =============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'False') == 'True'
LOG_FILE_PATH = os.getenv('LOG_FILE_PATH', 'logs/reports.log')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024 * 1024 * 10,  # 10MB
            'backupCount': 5,
            'formatter': 'verbose',
        } if LOG_TO_FILE else {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['console', 'file'] if LOG_TO_FILE else ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'] if LOG_TO_FILE else ['console'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'service_records': {
            'level': os.getenv('RECORDS_LOG_LEVEL', LOG_LEVEL),
        },
        'reports': {
            'level': os.getenv('REPORTS_LOG_LEVEL', LOG_LEVEL),
        },
    },
}
