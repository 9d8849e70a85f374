"""
Create a profile and assign a role directly in the store (e.g. the first admin,
which the privileged update-user-role function cannot create). Run from project root:
  python -m app.scripts.seed_user USER_ID NAME EMAIL [role]
Example:
  python -m app.scripts.seed_user 3f1c...-uuid "Plant Admin" admin@example.com admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.models import AppRole, Profile
from app.services.role_store import (
    RoleWriteError,
    get_profile,
    get_role,
    insert_role,
    update_role,
)

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a user profile and role (no sign-up UI).")
    parser.add_argument("user_id", help="Identity provider user id (uuid)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email")
    parser.add_argument("role", nargs="?", default=AppRole.PLANT_MANAGER.value, choices=AppRole.values())
    args = parser.parse_args()

    configure_logging()
    user_id = args.user_id.strip()
    if not user_id or len(user_id) > 36:
        print("Invalid user id length.", file=sys.stderr)
        return 1
    role = AppRole(args.role)

    db = SessionLocal()
    try:
        if get_profile(db, user_id) is None:
            db.add(Profile(user_id=user_id, name=args.name.strip(), email=args.email.strip()))
            db.commit()
            logger.info("Created profile for %s", user_id)

        existing = get_role(db, user_id, for_update=True)
        previous = AppRole(existing.role).value if existing is not None else "none"
        if existing is not None:
            update_role(db, existing, role)
        else:
            insert_role(db, user_id, role)
        print(f"User '{user_id}' role: {previous} -> {role.value}.")
        return 0
    except RoleWriteError as e:
        print(f"{e.message} ({e.cause})", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
