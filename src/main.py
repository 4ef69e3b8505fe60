import os
import sys
import logging
from flask import Flask, jsonify
from flask_cors import CORS

# Add src directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from src.config import config
from src.extensions import db, jwt


def create_app(config_name=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app.config.from_object(config[config_name])

    # Validate production configuration if needed
    if config_name == 'production':
        config[config_name].validate_config()

    # Configure CORS
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)

    # Configure logging first so we can see route registration errors
    log_level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    if not app.debug:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        file_handler = logging.FileHandler('logs/sequence_builder.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(log_level)
        app.logger.addHandler(file_handler)
        app.logger.setLevel(log_level)
        app.logger.info('Sequence Builder API startup')

    # Register blueprints with error handling
    try:
        from src.routes.auth import auth_bp
        app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')
        app.logger.info("Registered auth blueprint")
    except Exception as e:
        app.logger.error(f"Failed to register auth blueprint: {str(e)}")
        import traceback
        app.logger.error(f"Auth blueprint error traceback: {traceback.format_exc()}")

    try:
        from src.routes.sequence import sequence_bp
        app.register_blueprint(sequence_bp, url_prefix='/api/v1')
        app.logger.info("Registered sequence blueprint")
    except Exception as e:
        app.logger.error(f"Failed to register sequence blueprint: {str(e)}")
        import traceback
        app.logger.error(f"Sequence blueprint error traceback: {traceback.format_exc()}")

    try:
        from src.routes.template import template_bp
        app.register_blueprint(template_bp, url_prefix='/api/v1')
        app.logger.info("Registered template blueprint")
    except Exception as e:
        app.logger.error(f"Failed to register template blueprint: {str(e)}")

    try:
        from src.routes.campaign import campaign_bp
        app.register_blueprint(campaign_bp, url_prefix='/api/v1')
        app.logger.info("Registered campaign blueprint")
    except Exception as e:
        app.logger.error(f"Failed to register campaign blueprint: {str(e)}")

    # Create database tables (avoid fatal boot failures in production)
    try:
        with app.app_context():
            # In production, only run if explicitly enabled
            if config_name != 'production' or os.environ.get('STARTUP_DB_CREATE_ALL', 'false').lower() == 'true':
                db.create_all()
                app.logger.info("Database tables created/verified")
            else:
                app.logger.info("Skipping db.create_all() on startup in production")
    except Exception as e:
        app.logger.error(f"Failed to create/verify database tables on startup: {str(e)}")

    # Register global error handlers
    try:
        from src.utils.error_handlers import register_error_handlers
        register_error_handlers(app)
        app.logger.info("Registered global error handlers")
    except Exception as e:
        app.logger.error(f"Failed to register error handlers: {str(e)}")

    # Simple health check endpoint
    @app.route('/')
    def index():
        return jsonify({'status': 'ok', 'message': 'Sequence Builder API is running'})

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5001, debug=True)
