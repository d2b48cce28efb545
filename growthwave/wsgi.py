"""WSGI entry point, e.g. ``gunicorn growthwave.wsgi:app``."""
try:
    from . import create_app
except ImportError:  # pragma: no cover - fallback when running from growthwave/ cwd
    from __init__ import create_app

app = create_app()
