"""
ASGI config for the ClickEats API.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clickeats.settings')

application = get_asgi_application()
