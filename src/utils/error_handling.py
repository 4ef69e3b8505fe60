"""
Standardized Error Handling Utilities

This module provides consistent error response formats and error handling
functions across all API endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from flask import jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from src.services.sequence_graph import DiagramError

logger = logging.getLogger(__name__)

# Standard error codes
ERROR_CODES = {
    # Client errors (4xx)
    'VALIDATION_ERROR': 'VALIDATION_ERROR',
    'NOT_FOUND': 'NOT_FOUND',
    'CONFLICT': 'CONFLICT',
    'UNAUTHORIZED': 'UNAUTHORIZED',
    'FORBIDDEN': 'FORBIDDEN',
    'BAD_REQUEST': 'BAD_REQUEST',

    # Server errors (5xx)
    'INTERNAL_ERROR': 'INTERNAL_ERROR',
    'DATABASE_ERROR': 'DATABASE_ERROR',
    'EXTERNAL_API_ERROR': 'EXTERNAL_API_ERROR',

    # Sequence builder errors
    'INVALID_SEQUENCE': 'INVALID_SEQUENCE',
    'INVALID_DIAGRAM': 'INVALID_DIAGRAM',
    'ACTION_NOT_ALLOWED': 'ACTION_NOT_ALLOWED',
}

# HTTP status code mapping
STATUS_CODES = {
    'VALIDATION_ERROR': 400,
    'NOT_FOUND': 404,
    'CONFLICT': 409,
    'UNAUTHORIZED': 401,
    'FORBIDDEN': 403,
    'BAD_REQUEST': 400,
    'INTERNAL_ERROR': 500,
    'DATABASE_ERROR': 500,
    'EXTERNAL_API_ERROR': 502,
    'INVALID_SEQUENCE': 400,
    'INVALID_DIAGRAM': 400,
    'ACTION_NOT_ALLOWED': 400,
}

def create_error_response(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        code: Error code from ERROR_CODES
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code (optional, defaults to code mapping)

    Returns:
        Tuple of (json_response, status_code)
    """
    if code not in ERROR_CODES:
        logger.warning(f"Unknown error code used: {code}, defaulting to INTERNAL_ERROR")
        code = 'INTERNAL_ERROR'

    http_status = status_code or STATUS_CODES.get(code, 500)

    error_response = {
        'error': {
            'code': code,
            'message': message,
            'timestamp': datetime.now(timezone.utc).isoformat()
        }
    }

    if details:
        error_response['error']['details'] = details

    return jsonify(error_response), http_status

def handle_validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> tuple:
    """Handle validation errors (400)."""
    return create_error_response('VALIDATION_ERROR', message, details)

def handle_not_found_error(resource: str, resource_id: Optional[str] = None) -> tuple:
    """Handle not found errors (404)."""
    message = f"{resource} not found"
    if resource_id:
        message += f" with id: {resource_id}"
    return create_error_response('NOT_FOUND', message)

def handle_unauthorized_error(message: str = "Authentication required") -> tuple:
    """Handle unauthorized errors (401)."""
    return create_error_response('UNAUTHORIZED', message)

def handle_invalid_sequence(validation) -> tuple:
    """Turn a failed ValidationResult into a 400 naming the offending nodes."""
    return create_error_response(
        'INVALID_SEQUENCE',
        validation.error_message or "Invalid sequence",
        {'error_node_ids': list(validation.error_node_ids)}
    )

def handle_diagram_error(error: DiagramError) -> tuple:
    """Handle malformed diagram or sequence JSON (400)."""
    return create_error_response('INVALID_DIAGRAM', str(error))

def handle_database_error(error: Exception, operation: str = "database operation") -> tuple:
    """Handle database errors (500)."""
    logger.error(f"Database error during {operation}: {str(error)}")

    if isinstance(error, IntegrityError):
        return create_error_response('CONFLICT', f"Database constraint violation during {operation}")
    return create_error_response('DATABASE_ERROR', f"Database error during {operation}")

def handle_external_api_error(error: Exception, service: str = "external service") -> tuple:
    """Handle external API errors (502)."""
    logger.error(f"External API error with {service}: {str(error)}")
    details = None
    status_code = getattr(error, 'status_code', None)
    if status_code:
        details = {'upstream_status': status_code}
    return create_error_response('EXTERNAL_API_ERROR', f"Error communicating with {service}", details)

def handle_internal_error(error: Exception, operation: str = "operation") -> tuple:
    """Handle internal server errors (500)."""
    logger.error(f"Internal error during {operation}: {str(error)}")
    return create_error_response('INTERNAL_ERROR', f"An unexpected error occurred during {operation}")

def handle_exception(error: Exception, operation: str = "operation") -> tuple:
    """
    Generic exception handler that categorizes errors and returns appropriate responses.

    Args:
        error: The exception that occurred
        operation: Description of the operation being performed

    Returns:
        Tuple of (json_response, status_code)
    """
    if isinstance(error, HTTPException):
        return create_error_response('BAD_REQUEST', error.description, status_code=error.code)
    elif isinstance(error, DiagramError):
        return handle_diagram_error(error)
    elif isinstance(error, SQLAlchemyError):
        return handle_database_error(error, operation)
    elif isinstance(error, ValueError):
        return handle_validation_error(str(error))
    elif isinstance(error, KeyError):
        return handle_validation_error(f"Missing required field: {str(error)}")
    elif isinstance(error, TypeError):
        return handle_validation_error(f"Invalid data type: {str(error)}")
    else:
        return handle_internal_error(error, operation)

def validate_required_fields(data: Dict[str, Any], required_fields: list) -> Optional[tuple]:
    """
    Validate that required fields are present in request data.

    Args:
        data: Request data dictionary
        required_fields: List of required field names

    Returns:
        Error response tuple if validation fails, None if validation passes
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None]

    if missing_fields:
        details = {
            'missing_fields': missing_fields,
            'required_fields': required_fields
        }
        return handle_validation_error(
            f"Missing required fields: {', '.join(missing_fields)}",
            details
        )

    return None
