"""Serverless catch-all: every request on every brand domain is routed here."""
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from growthwave import create_app  # noqa: E402

app = create_app()
