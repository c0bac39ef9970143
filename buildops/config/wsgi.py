"""
WSGI config for the BuildOps ERP project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'buildops.config.settings')

application = get_wsgi_application()
