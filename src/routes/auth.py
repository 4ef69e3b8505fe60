import hmac
from datetime import timedelta
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity

from src.utils.error_handling import handle_unauthorized_error, handle_validation_error

auth_bp = Blueprint('auth', __name__)

TOKEN_LIFETIME = timedelta(hours=24)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Generate JWT token for API access."""
    data = request.get_json(silent=True) or {}

    if not data.get('api_key'):
        return handle_validation_error("API key is required")

    expected = current_app.config.get('API_ACCESS_KEY') or ''
    if not expected or not hmac.compare_digest(str(data['api_key']), expected):
        return handle_unauthorized_error("Invalid API key")

    access_token = create_access_token(
        identity=data.get('user') or 'api-user',
        expires_delta=TOKEN_LIFETIME
    )

    return jsonify({
        'access_token': access_token,
        'token_type': 'Bearer',
        'expires_in': int(TOKEN_LIFETIME.total_seconds())
    }), 200


@auth_bp.route('/verify', methods=['GET'])
@jwt_required()
def verify_token():
    """Verify JWT token validity."""
    return jsonify({
        'message': 'Token is valid',
        'user': get_jwt_identity()
    }), 200
