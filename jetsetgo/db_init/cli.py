"""
Flask CLI Commands for Database Management
Run with: flask db-manage init, flask db-manage create-admin, etc.
"""

import click
from flask.cli import with_appcontext
from jetsetgo.db_init.init_db import init_database, reset_database, create_admin, seed_content
from jetsetgo.models import User
from jetsetgo.models.enums import UserRole


@click.group()
def db_commands():
    """Database management commands"""
    pass


@db_commands.command('init')
@with_appcontext
def init_db_command():
    """Create all database tables"""
    init_database()
    click.echo('✅ Database initialized successfully!')


@db_commands.command('reset')
@click.confirmation_option(prompt='⚠️  This will delete all data. Are you sure?')
@with_appcontext
def reset_db_command():
    """Drop all tables and recreate them"""
    reset_database()
    click.echo('✅ Database reset successfully!')


@db_commands.command('create-admin')
@click.option('--email', prompt=True, help='Admin email address')
@click.option('--name', default='Administrator', show_default=True, help='Display name')
@click.password_option(help='Admin password')
@with_appcontext
def create_admin_command(email, name, password):
    """Create an admin account (or promote an existing user)"""
    user, created = create_admin(name, email, password)
    verb = 'Created' if created else 'Promoted'
    click.echo(f'✅ {verb} admin {user.email}')


@db_commands.command('seed-content')
@click.option('--draft', is_flag=True, help='Load pages as drafts instead of published')
@with_appcontext
def seed_content_command(draft):
    """Load starter CMS pages (about, faq, terms, privacy, contact)"""
    author = User.query.filter_by(role=UserRole.ADMIN).first()
    if not author:
        raise click.ClickException('Create an admin first: flask db-manage create-admin')
    created = seed_content(author, publish=not draft)
    click.echo(f'✅ Loaded {created} page(s)')


def register_commands(app):
    """Register CLI commands with the Flask app"""
    app.cli.add_command(db_commands, name='db-manage')
