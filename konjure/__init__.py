# konjure/__init__.py
"""Konjure Toolkit platform core: DI container, hook manager and plugin loader."""

__version__ = "1.0.0"
