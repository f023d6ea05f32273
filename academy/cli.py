# academy/cli.py
from decimal import Decimal, InvalidOperation

import click
from .extensions import db
from .model import Course, User


@click.command("init-db")
def init_db():
    """Create all tables (local development; use `flask db upgrade` elsewhere)."""
    db.create_all()
    click.echo("Database initialised")


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--name", required=True)
def create_admin(email, name):
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        click.echo("Email already exists"); return
    u = User(email=email, name=name, role="admin")
    db.session.add(u); db.session.commit()
    click.echo(f"Admin created: {u.id} {u.email}")


@click.command("create-course")
@click.option("--title", required=True)
@click.option("--slug", required=True)
@click.option("--price", required=True)
@click.option("--image", default=None)
@click.option("--published/--draft", default=True)
def create_course(title, slug, price, image, published):
    """Seed a catalog row; the catalog service owns courses in production."""
    try:
        price = Decimal(price)
    except InvalidOperation:
        raise click.BadParameter("price must be a number", param_hint="--price")
    if Course.query.filter_by(slug=slug).first():
        click.echo("Slug already exists"); return
    c = Course(title=title, slug=slug, price=price, image=image, is_published=published)
    db.session.add(c); db.session.commit()
    click.echo(f"Course created: {c.id} {c.slug} {c.price}")


def register_cli(app):
    app.cli.add_command(init_db)
    app.cli.add_command(create_admin)
    app.cli.add_command(create_course)
