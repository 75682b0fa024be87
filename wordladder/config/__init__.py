"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Puzzle rules, search guards and batch budgets (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    WORD_LENGTHS, DEFAULT_MAX_MOVES, load_word_source,
    validate_word_source_integrity, get_word_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_LENGTHS', 'DEFAULT_MAX_MOVES', 'load_word_source',
    'validate_word_source_integrity', 'get_word_statistics'
]
