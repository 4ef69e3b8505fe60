"""
Sequence routes package.

This package contains the stateless sequence builder endpoints. Each request
carries the full diagram and gets the next diagram back:
- editor.py: Attach, detach, configure and END toggling
- legality.py: Action catalog and per-node legality checks
- validation.py: Validation, linearization and END terminals
- payloads.py: Request parsing shared by the route modules
"""

from flask import Blueprint

# Create the main sequence blueprint
sequence_bp = Blueprint('sequence', __name__)

# Import all route modules to register them
from . import editor
from . import legality
from . import validation

# Export the blueprint
__all__ = ['sequence_bp']
