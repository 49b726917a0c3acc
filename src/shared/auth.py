"""Request authentication for the HTTP layer.

The storefront runs behind an auth proxy that verifies the visitor's session
and forwards the identity in ``X-User-Id`` / ``X-User-Email`` (and optionally
``X-User-Name``). Admin access is limited to an allow-list of email addresses
configured through the ``ADMIN_EMAILS`` environment variable.
"""

import os
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException


@dataclass(frozen=True)
class AuthenticatedUser:
    """The identity attached to a request by the auth proxy."""

    user_id: str
    email: str
    full_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.email)

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return self.email.split("@")[0] if self.email else "Anonymous"


def admin_emails() -> set[str]:
    """Return the configured admin allow-list (lower-cased)."""
    raw = os.environ.get("ADMIN_EMAILS", "")
    return {email.strip().lower() for email in raw.split(",") if email.strip()}


def is_admin(email: str | None) -> bool:
    if not email:
        return False
    return email.strip().lower() in admin_emails()


def optional_user(
    x_user_id: str = Header(default=""),
    x_user_email: str = Header(default=""),
    x_user_name: str = Header(default=""),
) -> AuthenticatedUser | None:
    """Resolve the forwarded identity, or None for anonymous visitors."""
    if not x_user_id:
        return None
    return AuthenticatedUser(
        user_id=x_user_id,
        email=x_user_email,
        full_name=x_user_name or None,
    )


def current_user(user: AuthenticatedUser | None = Depends(optional_user)) -> AuthenticatedUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def admin_user(user: AuthenticatedUser = Depends(current_user)) -> AuthenticatedUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied: Admin privileges required")
    return user
