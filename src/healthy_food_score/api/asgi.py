"""ASGI entrypoint for the Healthy Food Score API."""

from healthy_food_score.api.app import create_app
from healthy_food_score.containers import build_container

app = create_app(build_container())
