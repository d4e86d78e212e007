from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class APIMessage(BaseModel):
    message: str = Field(..., description="Human readable message")


class HealthResponse(BaseModel):
    status: str = Field("OK", description="Fixed status token")
    timestamp: str = Field(..., description="Current server time, ISO-8601 UTC")


# =========================
# Identity service
# =========================

# Request bodies accept missing fields so the handlers can answer 400 with
# their own message instead of a schema error.
class SignupRequest(BaseModel):
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="Plaintext password")


class LoginRequest(BaseModel):
    username: Optional[str] = Field(None, description="Email (identity service) or admin username (task service)")
    password: Optional[str] = Field(None, description="Plaintext password")


class User(BaseModel):
    id: int
    email: str


class SignupResponse(BaseModel):
    success: bool = True
    user: User


class LoginResponse(BaseModel):
    success: bool = True
    userId: int
    email: str


# =========================
# Task service
# =========================

class AdminLoginResponse(BaseModel):
    success: bool = True
    token: str = Field(..., description="Signed JWT; send as `Authorization: Bearer <token>`")


class Task(BaseModel):
    id: int
    text: str
    completed: bool
    created_at: datetime


class TaskCreate(BaseModel):
    text: Optional[str] = Field(None, description="Task text; trimmed, must not be empty")


class TaskUpdate(BaseModel):
    text: Optional[str] = Field(None, description="New text; left unchanged when omitted")
    completed: Optional[bool] = Field(None, description="New completion flag; left unchanged when omitted")


class TaskDeleted(APIMessage):
    task: Task
