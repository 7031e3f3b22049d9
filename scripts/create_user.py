"""Utility script to register a customer, caregiver or admin account."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from carelink.application.use_cases.users import create_caregiver_profile, create_user
from carelink.domain.entities import ROLE_ADMIN, ROLE_CAREGIVER, ROLE_CUSTOMER
from carelink.domain.exceptions import BadRequestError, NotFoundError
from carelink.infrastructure.database import SessionLocal, initialize_database
from carelink.infrastructure.repositories import RoleRepository

DEFAULT_ROLES = {
    ROLE_CUSTOMER: "Customer",
    ROLE_CAREGIVER: "Caregiver",
    ROLE_ADMIN: "Administrator",
}


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a CareLink user, seeding the default roles when needed.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument("--email", default="admin@example.com", help="Login email address")
    parser.add_argument(
        "--role",
        choices=sorted(DEFAULT_ROLES),
        default=ROLE_ADMIN,
        help="Role assigned to the user (default: admin)",
    )
    parser.add_argument("--phone", default=None, help="Contact phone number")
    parser.add_argument(
        "--password",
        default=None,
        help="Password for the account. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--hourly-rate-cents",
        type=int,
        default=0,
        help="Hourly rate for caregivers, in cents",
    )
    parser.add_argument(
        "--verified",
        action="store_true",
        help="Mark the caregiver profile as verified so it receives emergency alerts",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        roles = RoleRepository(session)
        for alias, name in DEFAULT_ROLES.items():
            roles.ensure(alias, name)

        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role_alias=args.role,
            phone=args.phone,
        )
        profile = None
        if args.role == ROLE_CAREGIVER:
            profile = create_caregiver_profile(
                session,
                user_id=user.id,
                hourly_rate_cents=args.hourly_rate_cents,
                verified=args.verified,
            )
    except (BadRequestError, NotFoundError) as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Error saving the user to the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role.alias}"
        )
        if profile is not None:
            print(f"  Caregiver profile: {profile.id} (verified: {profile.verified})")
    finally:
        session.close()


if __name__ == "__main__":
    main()
