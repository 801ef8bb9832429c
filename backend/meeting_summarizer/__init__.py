"""Meeting transcript summarization and slide generation service."""

__version__ = "0.1.0"
