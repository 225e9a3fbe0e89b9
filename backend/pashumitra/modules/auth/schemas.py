from pydantic import BaseModel, EmailStr, Field

from pashumitra.modules.user.schemas import UserPublic

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    phone: str | None = Field(default=None, max_length=32)
    role: str = Field(default="user", pattern="^(user|farmer|veterinarian)$")
    location: str | None = Field(default=None, max_length=255)


class RegisterResponse(BaseModel):
    message: str
    requires_verification: bool = True
    user: UserPublic


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class TokenResponse(BaseModel):
    """Ответ с access token: вход, подтверждение email, сброс пароля."""
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserPublic | None = None


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class VerifyResponse(BaseModel):
    message: str
    access_token: str | None = None
    token_type: str | None = None
    user: UserPublic | None = None


class EmailRequest(BaseModel):
    """Тело запросов resend-verification и forgot-password."""
    email: EmailStr


class ResendVerificationResponse(BaseModel):
    message: str
    email_sent: bool


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class MessageResponse(BaseModel):
    message: str
