# backend/asgi.py
"""
ASGI entrypoint. All ledger work is synchronous inside a request; this only
exists for ASGI servers.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
