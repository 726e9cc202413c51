"""Domain entity representing a user role."""

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"


@dataclass
class Role:
    """Core attributes describing a role that can be assigned to a user."""

    id: int
    name: str
    alias: str


__all__ = ["ROLE_ADMIN", "ROLE_CUSTOMER", "Role"]
