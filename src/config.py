import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration class."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = 86400  # 24 hours

    # API key exchanged for a JWT at /auth/login
    API_ACCESS_KEY = os.environ.get('API_ACCESS_KEY') or 'sequence-builder-api-key'

    # External sequence runner; campaign sequences are only saved locally when unset
    SEQUENCE_RUNNER_API_URL = os.environ.get('SEQUENCE_RUNNER_API_URL')
    SEQUENCE_RUNNER_API_KEY = os.environ.get('SEQUENCE_RUNNER_API_KEY')
    SEQUENCE_RUNNER_TIMEOUT = int(os.environ.get('SEQUENCE_RUNNER_TIMEOUT', '30'))

    DEFAULT_SEQUENCE_TYPE = os.environ.get('DEFAULT_SEQUENCE_TYPE', 'LINKEDIN')

    # CORS configuration
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///sequence_builder.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = True

    TESTING = False


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False

    # Production database (PostgreSQL)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Production security settings
    SECRET_KEY = os.environ.get('SECRET_KEY')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    API_ACCESS_KEY = os.environ.get('API_ACCESS_KEY')

    # Production CORS (more restrictive)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '').split(',')

    @classmethod
    def validate_config(cls):
        """Validate production configuration."""
        if not cls.SQLALCHEMY_DATABASE_URI:
            raise ValueError("DATABASE_URL environment variable is required for production")

        if not cls.SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable is required for production")

        if not cls.JWT_SECRET_KEY:
            raise ValueError("JWT_SECRET_KEY environment variable is required for production")

        if not cls.API_ACCESS_KEY:
            raise ValueError("API_ACCESS_KEY environment variable is required for production")

        if cls.SEQUENCE_RUNNER_API_URL and not cls.SEQUENCE_RUNNER_API_KEY:
            raise ValueError("SEQUENCE_RUNNER_API_KEY is required when SEQUENCE_RUNNER_API_URL is set")

        if not cls.CORS_ORIGINS or cls.CORS_ORIGINS == ['']:
            raise ValueError("CORS_ORIGINS environment variable is required for production")


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SEQUENCE_RUNNER_API_URL = None
    SEQUENCE_RUNNER_API_KEY = None


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
