"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import CredentialsSchema, LoginResponseSchema, TokenResponseSchema, UserSchema
from .save import SaveInSchema, SaveSchema

__all__ = [
    "CredentialsSchema",
    "LoginResponseSchema",
    "TokenResponseSchema",
    "UserSchema",
    "SaveInSchema",
    "SaveSchema",
]
