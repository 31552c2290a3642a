"""Chaos Manager: a small to-do list REST API and task list client."""

__version__ = "1.0.0"
