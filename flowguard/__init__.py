"""Flowguard - validation, scoring and auto-fix for generated automation workflows"""

__version__ = "1.0.0"
