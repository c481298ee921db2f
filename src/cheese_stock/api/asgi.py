"""ASGI entrypoint for the cheese stock API."""

from cheese_stock.api.app import create_app
from cheese_stock.containers import build_container

app = create_app(build_container())
