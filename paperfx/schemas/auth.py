"""Pydantic schemas for registration and login."""

from decimal import Decimal

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request schema for registering an account."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=320, description="Login email")
    password: str = Field(..., min_length=1, description="Account password")


class LoginRequest(BaseModel):
    """Request schema for logging in."""

    email: str = Field(..., min_length=1, description="Login email")
    password: str = Field(..., min_length=1, description="Account password")


class UserSummary(BaseModel):
    """Account identity and balances returned with a token."""

    id: str
    name: str
    email: str
    cash_balance: Decimal
    equity: Decimal


class AuthResponse(BaseModel):
    """Response for register and login."""

    token: str = Field(..., description="Bearer token for the Authorization header")
    user: UserSummary


class RegisterResponse(AuthResponse):
    """Response for register (includes the fixed starting balance)."""

    account_id: str
    starting_balance: Decimal
