"""
Helper Functions

Contains utility functions used by the controllers.
"""

import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from flask import current_app, request


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    return {
        'user_ip': request_obj.remote_addr or 'unknown',
        'session_id': None,
        'username': None
    }


def get_services():
    """The service container attached to the running app by create_app()."""
    return current_app.extensions['word_ladder']


def serialize_document(value: Any) -> Any:
    """Make MongoDB documents JSON friendly (ObjectId and datetime to strings)."""
    if isinstance(value, dict):
        return {
            ('id' if key == '_id' else key): serialize_document(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return value


def error_response(message: str, status_code: int = 400):
    """Standard failure envelope used by every endpoint."""
    return {'success': False, 'error': message}, status_code
