"""Allow running as python -m verbi."""

from verbi.cli import app

app()
