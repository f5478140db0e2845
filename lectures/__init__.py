"""Markdown AST, citations, pandoc export, media probing and chat provider routing for lecture material."""

__version__ = "0.1.0"