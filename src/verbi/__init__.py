"""verbi: extract, translate and validate UI message catalogs."""

__version__ = "0.3.0"
