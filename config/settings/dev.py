"""Development settings for housnkuh project.

Debug on, mails printed to the console and Celery tasks optionally run
inline so the trial and contract jobs can be tried without a broker. Do not
use these settings in production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

# Mails (welcome, booking confirmation, trial reminders) go to stdout
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# The React dev server runs on another port
CORS_ALLOW_ALL_ORIGINS = True

# CELERY_TASK_ALWAYS_EAGER=true runs tasks without a worker
CELERY_TASK_ALWAYS_EAGER = os.environ.get('CELERY_TASK_ALWAYS_EAGER', 'false').lower() == 'true'

LOGGING['loggers']['apps']['level'] = os.environ.get('LOG_LEVEL', 'DEBUG')  # noqa: F405
