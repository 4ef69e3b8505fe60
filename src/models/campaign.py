import uuid
from datetime import datetime, timezone
from src.models import db
from sqlalchemy import JSON


class Campaign(db.Model):
    __tablename__ = 'campaigns'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(50), nullable=False, default='draft')  # draft, active, paused, completed
    sequence_type = db.Column(db.String(50), nullable=False, default='LINKEDIN')
    sequence_json = db.Column(JSON, nullable=True)  # Linearized runner steps
    diagram_json = db.Column(JSON, nullable=True)  # Canvas {nodes, edges}
    template_id = db.Column(db.String(36), db.ForeignKey('sequence_templates.id'), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def sequence(self):
        """Get the sequence as a list of steps."""
        return self.sequence_json or []

    @property
    def has_sequence(self):
        return bool(self.sequence_json)

    def to_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'status': self.status,
            'sequence_type': self.sequence_type,
            'sequence': self.sequence,
            'diagram': self.diagram_json,
            'has_sequence': self.has_sequence,
            'template_id': self.template_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Campaign {self.name}>'
