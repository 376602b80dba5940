"""Composition resolver for declarative infrastructure stacks."""

__version__ = "0.1.0"
