"""Allow ``python -m portability_insight``."""

from .cli import app

app()
