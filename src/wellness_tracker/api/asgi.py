"""ASGI entrypoint for the wellness API."""

from wellness_tracker.api.app import create_app
from wellness_tracker.containers import build_service_container

app = create_app(build_service_container())
