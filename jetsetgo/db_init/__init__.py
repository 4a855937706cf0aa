"""
Database Initialization Package
Provides CLI commands and helpers for creating tables, the admin account and starter content
"""

from .init_db import init_database, reset_database, create_admin, seed_content

__all__ = [
    'init_database',
    'reset_database',
    'create_admin',
    'seed_content',
]
