"""
WSGI config for the Sharples menu site.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sharples_site.settings')

application = get_wsgi_application()
