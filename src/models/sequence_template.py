import uuid
from datetime import datetime, timezone
from src.models import db
from sqlalchemy import JSON


class SequenceTemplate(db.Model):
    __tablename__ = 'sequence_templates'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    sequence_type = db.Column(db.String(50), nullable=False, default='LINKEDIN')
    sequence_json = db.Column(JSON, nullable=False)  # Linearized runner steps
    diagram_json = db.Column(JSON, nullable=False)  # Canvas {nodes, edges}
    created_by = db.Column(db.String(255), nullable=True)  # JWT identity of the author
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    campaigns = db.relationship('Campaign', backref='template', lazy=True)

    @property
    def step_count(self):
        return len(self.sequence_json or [])

    def apply_payload(self, payload):
        """Copy a submission payload onto the template."""
        self.name = payload['name']
        self.sequence_type = payload['sequence_type']
        self.sequence_json = payload['sequence']
        self.diagram_json = payload['diagram']

    def to_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'sequence_type': self.sequence_type,
            'sequence': self.sequence_json,
            'diagram': self.diagram_json,
            'step_count': self.step_count,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<SequenceTemplate {self.name}>'
