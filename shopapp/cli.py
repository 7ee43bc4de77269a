"""
Operator command line for the shop service.

Usage:
    # Create missing tables
    python -m shopapp.cli init-db

    # Create an administrator (prompts for the password when omitted)
    python -m shopapp.cli create-admin --username root --email root@example.com

    # Run the API
    python -m shopapp.cli serve --host 0.0.0.0 --port 8000
"""

import argparse
import getpass
import logging
import sys
from functools import partial
from typing import Optional

from shopapp.core.config import settings
from shopapp.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create every table that does not exist yet."""
    from shopapp.infrastructure.shop.database import build_engine, create_schema

    engine = build_engine(settings)
    try:
        create_schema(engine)
    finally:
        engine.dispose()


def cmd_create_admin(args: argparse.Namespace) -> None:
    """Register a user holding the admin role.

    The HTTP signup never grants the role, so this is how the first
    operator account comes into existence.
    """
    from shopapp.application.shop.dtos import RegisterUserCommand
    from shopapp.application.shop.register_user import RegisterUserUseCase
    from shopapp.domain.shop.errors import ConflictError, ValidationError
    from shopapp.infrastructure.shop.database import build_engine
    from shopapp.infrastructure.shop.password_hasher import PasslibPasswordHasher
    from shopapp.infrastructure.shop.unit_of_work import SqlAlchemyUnitOfWork

    password = args.password or getpass.getpass("Password: ")
    engine = build_engine(settings)
    use_case = RegisterUserUseCase(
        uow_factory=partial(SqlAlchemyUnitOfWork, engine),
        hasher=PasslibPasswordHasher(),
    )
    try:
        user = use_case.execute(
            RegisterUserCommand(
                username=args.username, email=args.email, password=password
            ),
            is_admin=True,
        )
    except (ConflictError, ValidationError) as exc:
        logger.error("Could not create admin: %s", exc.message)
        sys.exit(1)
    finally:
        engine.dispose()

    logger.info("Admin '%s' created with id=%s", user.username, user.id)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "shopapp.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shop API operator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Schema
    init_parser = subparsers.add_parser("init-db", help="Create missing tables")
    init_parser.set_defaults(func=cmd_init_db)

    # Admin account
    admin_parser = subparsers.add_parser(
        "create-admin", help="Register a user with the admin role"
    )
    admin_parser.add_argument("--username", required=True, help="Login name")
    admin_parser.add_argument("--email", required=True, help="Contact address")
    admin_parser.add_argument(
        "--password", default=None,
        help="Password (prompted for when omitted)",
    )
    admin_parser.set_defaults(func=cmd_create_admin)

    # Server
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument(
        "--port", type=int, default=8000, help="Port (default 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes"
    )
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    configure_logging(level=settings.log_level, show_sql=settings.db_show_sql)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
