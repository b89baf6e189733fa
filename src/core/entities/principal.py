"""Authenticated caller identity."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Principal(BaseModel):
    """The authenticated principal behind a request."""

    id: str
    role: Role = Role.USER
