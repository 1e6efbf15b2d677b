# Overview: Flask CLI command groups for bootstrap, inspection and repair.

# backend/navguard/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init [--admin-email admin@hms.local] [--admin-password ...]
#   Idempotent: permissions, default roles, default grants and an admin user.
#
# Permissions:
# - python -m flask perms list [--module Billing] [--role doctor]
# - python -m flask perms grant receptionist view-bills
# - python -m flask perms revoke receptionist view-bills
#
# Roles and users:
# - python -m flask roles list
# - python -m flask users create --name "Front Desk" --email desk@hms.local --password ... --role receptionist
#
# Navigation:
# - python -m flask nav validate
#   Check the route table against the stored permission catalog.
# - python -m flask nav landing desk@hms.local
#   Show the menu and landing page a user would get.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import NavguardError, RouteTableError
from .extensions import db
from .models import Permission, User
from .navigation import filter_routes, landing_url, validate_route_table
from .services import auth_service, identity_service, permission_service, role_service


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@click.option('--admin-name', default='Administrator', help='Display name of the admin user')
@click.option('--admin-email', default='admin@hms.local', help='Email of the admin user')
@click.option('--admin-password', default='Password123!', help='Password of the admin user')
@with_appcontext
def init_system(admin_name, admin_email, admin_password):
    """
    Create tables, catalog permissions, default roles, default grants and an admin user.

    SECURITY: Change the admin password immediately in production!
    """
    click.echo("START Initializing navguard...")
    db.create_all()

    perm_count = permission_service.initialize_permissions()
    click.echo(f"PASS Permissions created: {perm_count}")

    role_count = role_service.create_default_roles()
    click.echo(f"PASS Roles created: {role_count}")

    grant_count = role_service.assign_default_role_permissions()
    click.echo(f"PASS Default grants created: {grant_count}")

    if db.session.query(User).filter_by(email=admin_email.lower()).first():
        click.echo(f"PASS Using existing admin user: {admin_email}")
    else:
        auth_service.create_user(admin_name, admin_email, admin_password, role_name="admin")
        click.echo(f"PASS Created admin user: {admin_email}")

    click.echo("DONE")


@click.group('perms')
def perms_group():
    """Permission catalog inspection and grants."""


@perms_group.command('list')
@click.option('--module', help='Filter by module')
@click.option('--role', help='Only permissions granted to this role')
@with_appcontext
def list_permissions_cli(module, role):
    """List catalog permissions, optionally filtered by module or role."""
    if role:
        role_obj = role_service.get_role_by_name(role)
        if not role_obj:
            click.echo(f"FAIL Role '{role}' not found")
            return
        perms = role_obj.to_dict()["permissions"]
        if module:
            perms = [p for p in perms if p["module"] == module]
    else:
        perms = permission_service.list_permissions(module=module)["items"]

    click.echo(f"{'Slug':<28} {'Name':<32} {'Module'}")
    click.echo("-" * 80)
    for perm in perms:
        click.echo(f"{perm['slug']:<28} {perm['name']:<32} {perm['module']}")
    click.echo(f"\n Total: {len(perms)} permissions\n")


def _replace_role_slugs(role_name: str, change) -> None:
    role = role_service.get_role_by_name(role_name)
    if not role:
        raise click.ClickException(f"Role '{role_name}' not found")

    ids = {p.id for p in role.permissions}
    try:
        role_service.assign_permissions(role.id, change(ids))
    except NavguardError as e:
        raise click.ClickException(str(e))


def _permission_id(slug: str) -> int:
    permission = db.session.query(Permission).filter_by(slug=slug).first()
    if not permission:
        raise click.ClickException(f"Permission '{slug}' not found")
    return permission.id


@perms_group.command('grant')
@click.argument('role_name')
@click.argument('slug')
@with_appcontext
def grant_permission_cli(role_name, slug):
    """Add one permission to a role (full-set replacement under the hood)."""
    pid = _permission_id(slug)
    _replace_role_slugs(role_name, lambda ids: ids | {pid})
    click.echo(f"PASS Granted {slug} to {role_name}")


@perms_group.command('revoke')
@click.argument('role_name')
@click.argument('slug')
@with_appcontext
def revoke_permission_cli(role_name, slug):
    """Remove one permission from a role."""
    pid = _permission_id(slug)
    _replace_role_slugs(role_name, lambda ids: ids - {pid})
    click.echo(f"PASS Revoked {slug} from {role_name}")


@click.group('roles')
def roles_group():
    """Role inspection."""


@roles_group.command('list')
@with_appcontext
def list_roles_cli():
    """List roles with permission counts and holders."""
    click.echo(f"{'Role':<20} {'System':<8} {'Perms':<6} {'Users'}")
    click.echo("-" * 50)
    for item in role_service.list_roles()["items"]:
        holders = len(role_service.list_role_users(item["id"]))
        system = "yes" if item["is_system"] else ""
        click.echo(f"{item['name']:<20} {system:<8} {item['permission_count']:<6} {holders}")


@click.group('users')
def users_group():
    """User bootstrap."""


@users_group.command('create')
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', 'role_name', default=None, help='Role to hold')
@with_appcontext
def create_user_cli(name, email, password, role_name):
    try:
        user = auth_service.create_user(name, email, password, role_name=role_name)
    except NavguardError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user {user.email} (ID: {user.id})")


@click.group('nav')
def nav_group():
    """Navigation table checks."""


@nav_group.command('validate')
@with_appcontext
def validate_nav_cli():
    """Check every route permission against the stored catalog."""
    try:
        validate_route_table(current_app.config["ROUTE_TABLE"], permission_service.get_catalog_slugs())
    except RouteTableError as e:
        for problem in e.problems:
            click.echo(f"FAIL {problem}")
        raise SystemExit(1)
    click.echo("PASS Route table matches the permission catalog")


@nav_group.command('landing')
@click.argument('email')
@with_appcontext
def landing_cli(email):
    """Show the visible menu and the landing URL for a user."""
    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user:
        raise click.ClickException(f"User '{email}' not found")

    identity = identity_service.resolve_identity(user)
    table = current_app.config["ROUTE_TABLE"]

    for route in filter_routes(table, identity):
        click.echo((route.title or "(untitled)").upper())
        for page in route.pages:
            click.echo(f"  {route.url_for(page)}")
    click.echo(
        "Landing: "
        + landing_url(table, identity.permission_slugs, default=current_app.config["DEFAULT_LANDING_PATH"])
    )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(perms_group)
    app.cli.add_command(roles_group)
    app.cli.add_command(users_group)
    app.cli.add_command(nav_group)
