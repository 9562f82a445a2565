"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [level] [--name NAME] [--inactive]
Example:
  python -m app.scripts.create_user admin your-secure-password admin --name "Admin User"
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import Conflict, ValidationFailed
from app.models import UserLevel
from app.schemas.user import UserWrite
from app.services import users as user_service

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user outside the HTTP API (seeding).")
    parser.add_argument("username", help="Username (1-100 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument(
        "level",
        nargs="?",
        default=UserLevel.BASIC.value,
        choices=[lvl.value for lvl in UserLevel],
    )
    parser.add_argument("--name", default=None, help="Display name (max 100 chars)")
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Create the account disabled (it cannot log in until activated)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    args = build_parser().parse_args(argv)
    payload = UserWrite(
        name=args.name,
        username=args.username.strip(),
        password=args.password,
        level=args.level,
        active=not args.inactive,
    )

    db = SessionLocal()
    try:
        user = user_service.create_user(db, payload)
    except Conflict:
        print(f"User '{payload.username}' already exists.", file=sys.stderr)
        return 1
    except ValidationFailed as e:
        print("; ".join(e.errors), file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' (id={user.id}) with level '{user.level.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
