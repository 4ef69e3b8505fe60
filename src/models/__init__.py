# Import db from extensions to use the same instance
from src.extensions import db

# Import all models to ensure they are registered with SQLAlchemy
from src.models.sequence_template import SequenceTemplate
from src.models.campaign import Campaign

__all__ = ['db', 'SequenceTemplate', 'Campaign']
