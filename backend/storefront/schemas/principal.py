"""
storefront/schemas/principal.py
The authenticated caller, as resolved from a Firebase ID token.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

# guest: anonymous Firebase sign-in; admin: custom claim admin=True
Role = Literal["guest", "user", "admin"]


class Principal(BaseModel):
    uid: str = Field(..., description="Firebase UID; owner key for carts and orders")
    role: Role = "user"
    email: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
