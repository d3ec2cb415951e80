"""Request payloads for the auth endpoints.

Only shape is checked here; content rules (blank fields, duplicates,
password strength) live in the identity directory so that every caller
gets the same messages.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(max_length=100)
    email: str = Field(max_length=255)
    password: str
    full_name: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    username_or_email: str = Field(max_length=255)
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class ThemeRequest(BaseModel):
    theme: str
