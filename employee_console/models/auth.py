"""Authentication models for the bearer-token session."""

from __future__ import annotations

from pydantic import BaseModel


class Session(BaseModel):
    token: str
    username: str = ""


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    username: str
    password: str
    sno: int
