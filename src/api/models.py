"""Pydantic models for API request/response.

Field names on the wire are camelCase (``phoneNumber``, ``isEmailVerified``,
``dueDate``) to match the web client; Python attributes stay snake_case.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.model.todo import Priority, Todo
from domain.model.user import User


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes from clients as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── auth requests ────────────────────────────────────────────


class RegisterRequest(CamelModel):
    """Request model for user registration."""
    name: str
    email: EmailStr
    password: str
    phone_number: Optional[str] = None


class LoginRequest(CamelModel):
    """Request model for user login."""
    email: EmailStr
    password: str


class VerifyEmailRequest(CamelModel):
    token: str


class SendVerificationRequest(CamelModel):
    email: EmailStr


class SendPhoneVerificationRequest(CamelModel):
    phone_number: Optional[str] = None
    user_id: Optional[str] = None


class VerifyPhoneRequest(CamelModel):
    code: str
    phone_number: Optional[str] = None
    user_id: Optional[str] = None


class GoogleLoginRequest(CamelModel):
    token_id: str


# ── auth responses ───────────────────────────────────────────


class UserResponse(CamelModel):
    """Public view of a user. Never carries password hashes or pending secrets."""
    id: str = Field(..., description="User ID")
    name: str
    email: str
    phone_number: Optional[str] = None
    is_email_verified: bool = False
    is_phone_verified: bool = False
    provider: str = Field("email", description="Authentication provider")
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone_number=user.phone_number,
            is_email_verified=user.email_verified,
            is_phone_verified=user.phone_verified,
            provider=user.provider,
            avatar=user.avatar,
            created_at=user.created_at,
        )


class AuthResponse(CamelModel):
    """Response model for login paths."""
    user: UserResponse
    token: str


class RegisterResponse(AuthResponse):
    message: str


class MessageResponse(CamelModel):
    message: str


class UserEnvelope(CamelModel):
    user: UserResponse


class VerifyPhoneResponse(CamelModel):
    message: str
    user: UserResponse


class SendPhoneVerificationResponse(CamelModel):
    message: str
    code: Optional[str] = Field(None, description="Only populated when EXPOSE_PHONE_CODE is enabled")


# ── todos ────────────────────────────────────────────────────


class TodoCreateRequest(CamelModel):
    title: str = Field("", max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return _as_utc(v)


class TodoUpdateRequest(CamelModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return _as_utc(v)


class TodoResponse(CamelModel):
    """Todo as the web client expects it (``_id`` and ``user`` keys)."""
    id: str = Field(..., alias="_id")
    title: str
    description: Optional[str] = None
    completed: bool
    priority: Priority
    due_date: Optional[datetime] = None
    owner_id: str = Field(..., alias="user")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, todo: Todo) -> "TodoResponse":
        return cls(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            priority=todo.priority,
            due_date=todo.due_date,
            owner_id=todo.owner_id,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )
