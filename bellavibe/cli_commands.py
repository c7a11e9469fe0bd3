"""
Flask CLI commands for database setup and local data.

Commands:
- flask init-db: Create all tables
- flask create-user: Register an API user
- flask seed-demo: Insert a demo session, category and products
"""

import click
from decimal import Decimal
from bellavibe.database import get_session, create_tables
from bellavibe.exceptions import ApiError
from bellavibe.models import Category, Product
from bellavibe.services.auth_service import register_user


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all database tables."""
        create_tables()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-user')
    @click.option('--name', prompt=True, help='Display name')
    @click.option('--email', prompt=True, help='User email address')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='User password')
    def create_user(name, email, password):
        """Register a new API user."""
        try:
            user = register_user(get_session(), name, email, password)
        except ApiError as e:
            click.echo(click.style(f'Could not create user: {e.message}', fg='red'))
            return

        click.echo(click.style('User created successfully!', fg='green', bold=True))
        click.echo(f'   Email: {user.email}')
        click.echo(f'   ID: {user.id}')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Insert a demo session, category and products."""
        session = get_session()
        if session.query(Category).first():
            click.echo(click.style('Catalog is not empty, skipping seed.', fg='yellow'))
            return

        beauty = Category(name='Beauty')
        session.add(beauty)
        session.flush()

        skincare = Category(name='Skincare', parent_id=beauty.id)
        session.add(skincare)
        session.flush()

        session.add_all([
            Product(name='Moisturizer', description='Daily face cream',
                    price=Decimal('19.99'), stock=50, category_id=skincare.id),
            Product(name='Sunscreen SPF 50', description='Broad spectrum',
                    price=Decimal('24.90'), stock=30, category_id=skincare.id),
            Product(name='Gift card', description='Store credit',
                    price=Decimal('50.00'), stock=100, category_id=beauty.id),
        ])
        session.commit()
        click.echo(click.style('Demo catalog created.', fg='green'))
