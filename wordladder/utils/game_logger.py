"""
Game Logger Module for the Word Ladder Server

This module provides structured logging for player requests, server
responses, puzzle events and the offline schedule jobs.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the word ladder server.

    Features:
    - Player action tracking with IP identification
    - Server response logging
    - Puzzle event logging (wins, losses, hints)
    - Batch job logging (pair generation, schedule population)
    - JSON structured entries for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file and console handlers."""
        logger = logging.getLogger('word_ladder')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console only shows warnings and errors
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _get_user_identity(self, request) -> Dict[str, Optional[str]]:
        """Extract user identity information from request."""
        return {
            'user_ip': getattr(request, 'remote_addr', None) or 'unknown',
            'session_id': None,
            'username': None
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self, request, action: str, **kwargs):
        """
        Log player actions with request context.

        Args:
            request: Flask request object
            action: Type of action (e.g., 'get_puzzles', 'submit_word', 'hint')
            **kwargs: Additional details to log
        """
        details = {
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, self._get_user_identity(request), details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            **kwargs):
        """
        Log server responses with request context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            **kwargs: Additional details to log
        """
        details = {
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, self._get_user_identity(request), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self, event: str, user_ip: str, **kwargs):
        """
        Log puzzle events (wins, losses, hints).

        Args:
            event: Type of event (e.g., 'puzzle_won', 'puzzle_lost', 'hint_given')
            user_ip: Player's IP address
            **kwargs: Additional puzzle details
        """
        user_info = {'user_ip': user_ip, 'session_id': None, 'username': None}
        log_message = self._create_log_entry('GAME_EVENT', event, user_info, kwargs)
        self.logger.info(log_message)

    def log_job_event(self, job: str, **kwargs):
        """Log progress and summaries of the offline schedule jobs."""
        user_info = {'user_ip': 'system', 'session_id': None, 'username': None}
        log_message = self._create_log_entry('JOB_EVENT', job, user_info, kwargs)
        self.logger.info(log_message)

    def log_error(self, request, error: Exception, action: str):
        """
        Log errors with request context.

        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
        """
        details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, self._get_user_identity(request), details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Trim bulky payloads down to what is useful in a log line."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()

        if 'state' in sanitized and isinstance(sanitized['state'], dict):
            state = sanitized['state']
            sanitized['state'] = {
                'length': state.get('length'),
                'moves': state.get('moves'),
                'max_moves': state.get('max_moves'),
                'status': state.get('status'),
                'chain_length': len(state.get('word_chain', [])),
            }

        if 'puzzles' in sanitized and isinstance(sanitized['puzzles'], list):
            sanitized['puzzles'] = {'count': len(sanitized['puzzles'])}

        if 'data' in sanitized and isinstance(sanitized['data'], list):
            sanitized['data'] = {'count': len(sanitized['data'])}

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about today's logged events (used by the health check)."""
        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        stats = {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': 0,
            'user_actions': 0,
            'server_responses': 0,
            'game_events': 0,
            'job_events': 0,
            'errors': 0
        }

        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    stats['total_entries'] += 1
                    if 'USER_ACTION' in line:
                        stats['user_actions'] += 1
                    elif 'SERVER_RESPONSE' in line:
                        stats['server_responses'] += 1
                    elif 'GAME_EVENT' in line:
                        stats['game_events'] += 1
                    elif 'JOB_EVENT' in line:
                        stats['job_events'] += 1
                    elif 'ERROR' in line:
                        stats['errors'] += 1
        except OSError as e:
            return {'error': f'Failed to get stats: {e}'}

        return stats


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
