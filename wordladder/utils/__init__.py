"""
Utilities Package

Contains utility functions and helper modules.
"""

from .helpers import get_user_identity, get_services, serialize_document, error_response
from .game_logger import game_logger

__all__ = ['get_user_identity', 'get_services', 'serialize_document', 'error_response', 'game_logger']
