"""
Test Suite

This module contains all tests for the Flowguard workflow quality engine.

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Pytest fixtures (fake and built-in registries)
    ├── factories.py        # Graph builders
    ├── unit/               # Engine, registry, codec and service tests
    └── integration/        # API endpoint tests

To run tests:
    pytest tests/
    pytest tests/unit/
    pytest tests/integration/
"""
