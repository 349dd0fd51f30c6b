"""ASGI entrypoint for the SportsTribe admin API."""

from sportstribe_admin.api.app import create_app
from sportstribe_admin.containers import build_container

app = create_app(build_container())
