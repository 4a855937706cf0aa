"""
Database Initialization
Creates tables, the first admin account and starter CMS pages
"""
import logging

from jetsetgo.extensions import db
from jetsetgo.models import User, Content
from jetsetgo.models.enums import UserRole, ContentStatus
from .sample_content import SAMPLE_CONTENT

logger = logging.getLogger(__name__)


def init_database():
    """Create all tables"""
    db.create_all()
    logger.info("Database tables created")


def reset_database():
    """Drop and recreate all tables"""
    db.drop_all()
    db.create_all()
    logger.info("Database reset")


def create_admin(name, email, password):
    """
    Create an admin account, or promote an existing user with that email.

    Returns:
        (user, created) tuple
    """
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    created = user is None
    if created:
        user = User(name=name, email=email, preferences={})
        user.set_password(password)
        db.session.add(user)
    user.role = UserRole.ADMIN
    user.is_active = True
    db.session.commit()
    logger.info(f"Admin account {'created' if created else 'promoted'}: {email}")
    return user, created


def seed_content(author, publish=True):
    """
    Load starter pages, skipping slugs that already exist

    Returns:
        Number of pages created
    """
    created = 0
    for page in SAMPLE_CONTENT:
        if Content.query.filter_by(slug=page['slug']).first():
            continue
        db.session.add(Content(
            title=page['title'],
            slug=page['slug'],
            body=page['content'],
            content_type=page['content_type'],
            status=ContentStatus.PUBLISHED if publish else ContentStatus.DRAFT,
            meta_title=page['title'],
            meta_description=page.get('meta_description', ''),
            created_by=author.id,
            updated_by=author.id
        ))
        created += 1
    db.session.commit()
    logger.info(f"Seeded {created} content page(s)")
    return created
