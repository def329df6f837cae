"""Utility modules"""
from .logger import get_logger, setup_logging
from .idgen import generate_correlation_id, next_free_suffixed_id

__all__ = [
    "get_logger",
    "setup_logging",
    "generate_correlation_id",
    "next_free_suffixed_id",
]
