"""create-seneca-service — bootstrap a new Seneca service project."""

__version__ = "0.1.0"
