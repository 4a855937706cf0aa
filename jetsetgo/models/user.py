from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timezone
import uuid
from jetsetgo.extensions import db
from jetsetgo.models.enums import UserRole


def utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.USER, nullable=False)

    # Profile
    phone = db.Column(db.String(20))
    address = db.Column(db.String(255))
    preferences = db.Column(db.JSON, default=dict)  # seatType, mealPreference, preferredAirlines, preferredClass

    # Account status
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    last_login = db.Column(db.DateTime)

    # Relationships
    bookings = db.relationship('Booking', backref='customer', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def is_admin(self):
        return self.role == UserRole.ADMIN

    def is_editor(self):
        return self.role in (UserRole.EDITOR, UserRole.ADMIN)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def to_profile_dict(self):
        data = self.to_dict()
        data.update({
            'phone': self.phone,
            'address': self.address,
            'preferences': self.preferences or {},
            'lastLogin': self.last_login.isoformat() if self.last_login else None,
        })
        return data
