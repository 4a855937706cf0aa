import re
import uuid
from jetsetgo.extensions import db
from jetsetgo.models.enums import ContentType, ContentStatus
from jetsetgo.models.user import utcnow


def slugify(value: str) -> str:
    """Lower-case, trim and collapse anything non-alphanumeric into single hyphens"""
    value = value.strip().lower()
    value = re.sub(r'[^a-z0-9]+', '-', value)
    return value.strip('-')


class Content(db.Model):
    __tablename__ = 'content'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False, index=True)
    body = db.Column(db.Text, nullable=False)
    content_type = db.Column(db.Enum(ContentType), default=ContentType.ABOUT, nullable=False)
    status = db.Column(db.Enum(ContentStatus), default=ContentStatus.DRAFT, nullable=False, index=True)

    created_by = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    updated_by = db.Column(db.String(36), db.ForeignKey('users.id'))

    featured_image = db.Column(db.String(500), default='')
    meta_title = db.Column(db.String(200), default='')
    meta_description = db.Column(db.String(500), default='')

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    author = db.relationship('User', foreign_keys=[created_by])
    editor = db.relationship('User', foreign_keys=[updated_by])

    def is_published(self):
        return self.status == ContentStatus.PUBLISHED

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'content': self.body,
            'contentType': self.content_type.value,
            'status': self.status.value,
            'featuredImage': self.featured_image or '',
            'metaTitle': self.meta_title or '',
            'metaDescription': self.meta_description or '',
            'createdBy': self.created_by,
            'updatedBy': self.updated_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
