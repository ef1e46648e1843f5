"""
WSGI config for the chs_backend project.

It exposes the WSGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

# Deployments should set DJANGO_SETTINGS_MODULE=chs_backend.settings_prod.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "chs_backend.settings")

application = get_wsgi_application()
