"""
Flask CLI commands for database setup.

Commands:
- flask init-db: Create all tables
- flask create-tenant: Register a tenant (business)
"""

import click
import re
from app.database import create_schema, get_session
from app.models import Tenant


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table that does not exist yet."""
        create_schema()
        click.echo(click.style('✅ Esquema de base de datos creado.', fg='green'))

    @app.cli.command('create-tenant')
    @click.option('--slug', prompt=True, help='URL-safe identifier')
    @click.option('--name', prompt=True, help='Business name')
    def create_tenant(slug, name):
        """Register a new tenant."""
        slug = slug.strip().lower()
        if not re.match(r'^[a-z0-9-]+$', slug):
            click.echo(click.style('❌ Slug inválido. Use minúsculas, números y guiones.', fg='red'))
            return

        db_session = get_session()
        if db_session.query(Tenant).filter_by(slug=slug).first():
            click.echo(click.style(f'❌ Ya existe un negocio con el slug: {slug}', fg='red'))
            return

        try:
            tenant = Tenant(slug=slug, name=name.strip())
            db_session.add(tenant)
            db_session.commit()
            click.echo(click.style('\n✅ Negocio creado exitosamente!', fg='green', bold=True))
            click.echo(f'   ID: {tenant.id}')
        except Exception as e:
            db_session.rollback()
            click.echo(click.style(f'❌ Error al crear negocio: {str(e)}', fg='red'))
