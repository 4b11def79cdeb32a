"""Login request schema for user authentication."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    phone: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
