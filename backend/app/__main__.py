"""Invoice Actions API: `python -m app` serves the API."""

from app.main import run

run()
