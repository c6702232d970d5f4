"""Resolves the caller behind a request and the rows they may see.

Authentication itself happens upstream: the gateway verifies the bearer token
and forwards the caller's identity in ``X-User-Id`` / ``X-User-Role``. This
module turns those headers into a ``Caller`` and resolves a
``VisibilityScope`` once per request, so read paths never branch on role
strings themselves.
"""

from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Header

from storefront.shared.errors import Forbidden, Unauthenticated


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class VisibilityScope:
    """Read boundary for a request: one customer's rows, or every row."""

    customer_id: str | None = None

    @classmethod
    def own(cls, customer_id) -> "VisibilityScope":
        return cls(customer_id=str(customer_id))

    @classmethod
    def all(cls) -> "VisibilityScope":
        return cls(customer_id=None)

    @property
    def is_unrestricted(self) -> bool:
        return self.customer_id is None

    def permits(self, owner_id) -> bool:
        return self.is_unrestricted or str(owner_id) == self.customer_id


@dataclass(frozen=True)
class Caller:
    id: str
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def scope(self) -> VisibilityScope:
        return VisibilityScope.all() if self.is_admin else VisibilityScope.own(self.id)


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    """FastAPI dependency: the authenticated caller for this request."""
    if not x_user_id:
        raise Unauthenticated()

    try:
        role = Role((x_user_role or Role.CUSTOMER.value).lower())
    except ValueError:
        # Unknown roles get no privileges
        role = Role.CUSTOMER

    return Caller(id=x_user_id, role=role)


def require_admin(caller: Caller = Depends(current_caller)) -> Caller:
    """FastAPI dependency: the caller, who must hold the admin role."""
    if not caller.is_admin:
        raise Forbidden()
    return caller
