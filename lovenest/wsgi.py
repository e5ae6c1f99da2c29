"""
WSGI config for the Love Nest project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lovenest.settings')

application = get_wsgi_application()
