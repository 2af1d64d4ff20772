"""ASGI entrypoint for the shop finder bot."""

from shop_finder.api.app import create_app
from shop_finder.containers import build_container

app = create_app(build_container())
