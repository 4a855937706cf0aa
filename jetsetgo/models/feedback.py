import uuid
from jetsetgo.extensions import db
from jetsetgo.models.user import utcnow


class Feedback(db.Model):
    __tablename__ = 'feedback'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    subject = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=False)

    # Set when an authenticated user submitted it
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship('User', backref='feedback')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
            'rating': self.rating,
            'userId': self.user_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
