"""ASGI entrypoint for the feed tracker API."""

from feed_tracker.api.app import create_app
from feed_tracker.containers import build_container

app = create_app(build_container())
