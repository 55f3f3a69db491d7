"""Pydantic schemas for the account endpoints."""

from pydantic import BaseModel


class Credentials(BaseModel):
    """Email and password; presence is checked by the route to answer 400."""

    email: str | None = None
    password: str | None = None


class RegisterResponse(BaseModel):
    """Schema for a created account."""

    message: str = "Account created successfully. Please verify your email."
    uid: str
    verification_link: str | None = None


class LoginResponse(BaseModel):
    """Schema for a successful sign-in."""

    message: str = "Login successful!"
    uid: str
    email: str
