"""Error handling utilities for the latency query API."""

import logging
import traceback
from functools import wraps
from flask import jsonify

logger = logging.getLogger(__name__)

class ApiError(Exception):
    """Base class for query API errors."""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

class InvalidRequest(ApiError):
    """Invalid request parameters."""
    status_code = 400

class MissingParameter(InvalidRequest):
    """Required parameter was not supplied."""
    def __init__(self, message="from and to parameters required"):
        super().__init__(message)

def format_error_response(message, status_code):
    """Format an error response as JSON."""
    return jsonify({'error': message}), status_code

def handle_api_errors(f):
    """Decorator to handle query API errors consistently."""
    @wraps(f)
    def wrapped(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ApiError as e:
            logger.error(f"API error in {f.__name__}: {e.message}")
            return format_error_response(e.message, e.status_code)
        except Exception as e:
            logger.error(f"Unexpected error in {f.__name__}: {str(e)}\n{traceback.format_exc()}")
            return format_error_response("Internal server error", 500)
    return wrapped
