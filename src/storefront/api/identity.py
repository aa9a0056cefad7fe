"""Caller identity, as forwarded by the upstream auth middleware in headers."""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from storefront.shared.roles import Role
from storefront.utils.logging import add_context


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: Role
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default=Role.CUSTOMER.value),
    x_user_email: str | None = Header(default=None),
) -> Caller:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=403, detail=f"Unknown role: {x_user_role}") from None

    add_context(user_id=x_user_id, role=role.value)
    return Caller(user_id=x_user_id, role=role, email=x_user_email)


def require_admin(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
