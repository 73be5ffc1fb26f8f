"""ASGI entrypoint for the glycemic tracker API."""

from glycemic_tracker.api.app import create_app
from glycemic_tracker.containers import build_container

app = create_app(build_container())
