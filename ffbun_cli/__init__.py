"""ffbun-cli -- bootstrap ffbun projects and generate their API modules."""

__version__ = "0.1.0"
