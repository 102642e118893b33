"""Core pagination engine, database helpers, settings and exceptions."""
