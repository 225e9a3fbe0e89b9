import logging
import uuid
from datetime import timedelta

import jwt
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from pashumitra.core.config import get_settings
from pashumitra.db.session import get_db
from pashumitra.integrations.email import AuthEmailService, deliver_in_background, get_auth_email_service
from pashumitra.modules.auth.jwt import ACCESS_TOKEN_TYPE, create_access_token, decode_access_token
from pashumitra.modules.auth.schemas import (
    EmailRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationResponse,
    ResetPasswordRequest,
    TokenResponse,
    VerifyEmailRequest,
    VerifyResponse,
)
from pashumitra.modules.auth_token.model import PURPOSE_RESET_PASSWORD, PURPOSE_VERIFY_EMAIL
from pashumitra.modules.auth_token.service import (
    TokenStatus,
    consume_token,
    hash_token,
    issue_token,
    lookup_token,
)
from pashumitra.modules.user.model import User
from pashumitra.modules.user.schemas import UserPublic
from pashumitra.modules.user.service import (
    confirm_email,
    create_user,
    get_by_email,
    get_by_id,
    hash_password,
    is_locked,
    register_failed_login,
    register_successful_login,
    set_password,
    to_profile,
    verify_password,
)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent."


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Извлечь текущего пользователя из Authorization: Bearer <token>. 401 при отсутствии или невалидном токене."""
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    token = auth[7:].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        payload = decode_access_token(token, get_settings())
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )
    try:
        user_id = uuid.UUID(payload["sub"])
    except (ValueError, KeyError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    user = await get_by_id(db, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Только для role=admin, иначе 403."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def _issue_access_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role, get_settings())


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> RegisterResponse:
    """
    Регистрация нового пользователя.

    Создаёт пользователя с неподтверждённым email и ставит в фон письмо
    с одноразовой ссылкой подтверждения. Access token не выдаётся до подтверждения.
    Ошибка отправки письма регистрацию не ломает: пользователь может запросить письмо повторно.
    """
    existing_user = await get_by_email(db, body.email)
    if existing_user:
        logger.warning("Registration attempt with existing email: %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )

    settings = get_settings()
    try:
        user = await create_user(
            session=db,
            name=body.name,
            email=body.email,
            hashed_password=hash_password(body.password),
            phone=body.phone,
            role=body.role,
            location=body.location,
        )
        _, raw_token = await issue_token(
            session=db,
            user_id=user.id,
            purpose=PURPOSE_VERIFY_EMAIL,
            ttl=timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS),
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.error("Integrity error during registration for email: %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )
    except Exception:
        await db.rollback()
        logger.exception("Registration failed for email %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed. Please try again.",
        )

    logger.info("New user registered: %s (user_id: %s, role: %s)", user.email, user.id, user.role)

    deliver_in_background(
        background_tasks,
        auth_email_service.send_verification_email,
        to_profile(user),
        raw_token,
        description=f"verification email to {user.email}",
    )

    return RegisterResponse(
        message="Registration successful! Please check your email to verify your account before logging in.",
        requires_verification=True,
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """
    Вход по email и паролю.
    Возвращает access_token (JWT) и пользователя. Подтверждение email для входа не требуется:
    письмо уходит в фоне и его недоставка не должна закрывать доступ.
    После MAX_LOGIN_ATTEMPTS неудачных попыток аккаунт временно блокируется (423).
    """
    settings = get_settings()
    user = await get_by_email(db, body.email)
    if not user:
        logger.warning("Login attempt with non-existent email: %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    if is_locked(user):
        logger.warning("Login attempt on locked account: %s (user_id: %s)", user.email, user.id)
        raise HTTPException(
            status_code=status.HTTP_423_LOCKED,
            detail="Account is temporarily locked due to multiple failed login attempts",
        )
    if not user.is_active:
        logger.warning("Login attempt on inactive account: %s (user_id: %s)", user.email, user.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account has been deactivated",
        )
    if not verify_password(body.password, user.hashed_password):
        logger.warning("Failed login attempt: %s (user_id: %s)", user.email, user.id)
        await register_failed_login(
            db,
            user,
            max_attempts=settings.MAX_LOGIN_ATTEMPTS,
            lock_minutes=settings.ACCOUNT_LOCK_MINUTES,
        )
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    await register_successful_login(db, user)
    await db.commit()
    logger.info("Successful login: %s (user_id: %s)", user.email, user.id)
    return TokenResponse(
        message="Login successful",
        access_token=_issue_access_token(user),
        user=UserPublic.model_validate(user),
    )


@router.get("/me", response_model=UserPublic)
async def me(
    current_user: User = Depends(get_current_user),
) -> UserPublic:
    """Текущий пользователь по JWT."""
    return UserPublic.model_validate(current_user)


@router.post("/verify-email", response_model=VerifyResponse)
async def verify_email(
    body: VerifyEmailRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> VerifyResponse:
    """
    Подтверждение email по одноразовой ссылке из письма.

    Токен ищется один раз; «не найден», «истёк» и «уже использован»
    различаются по самой записи токена. Повторный переход по ссылке после
    успешного подтверждения отвечает 200 "Email already verified".
    При успехе пользователь сразу получает access token и приветственное письмо.
    """
    lookup = await lookup_token(db, body.token.strip(), PURPOSE_VERIFY_EMAIL, for_update=True)

    if lookup.status is TokenStatus.NOT_FOUND:
        # В лог только префикс хеша: сам токен остаётся секретом
        logger.info(
            "Verification attempt with unknown token (sha256 %s...)",
            hash_token(body.token.strip())[:12],
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid verification token",
        )

    user = await get_by_id(db, lookup.token.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid verification token",
        )

    if lookup.status is TokenStatus.USED or user.email_verified:
        logger.info("Attempt to verify already-verified email: %s (user_id: %s)", user.email, user.id)
        return VerifyResponse(message="Email already verified")

    if lookup.status is TokenStatus.EXPIRED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Verification token has expired",
        )

    await consume_token(db, lookup.token)
    await confirm_email(db, user)
    await db.commit()
    logger.info("Email verified: %s (user_id: %s)", user.email, user.id)

    deliver_in_background(
        background_tasks,
        auth_email_service.send_welcome_email,
        to_profile(user),
        description=f"welcome email to {user.email}",
    )

    return VerifyResponse(
        message="Email verified successfully",
        access_token=_issue_access_token(user),
        token_type="bearer",
        user=UserPublic.model_validate(user),
    )


@router.post("/resend-verification", response_model=ResendVerificationResponse)
async def resend_verification(
    body: EmailRequest,
    db: AsyncSession = Depends(get_db),
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> ResendVerificationResponse:
    """
    Повторная отправка письма подтверждения.

    В отличие от регистрации, результат попытки отправки ждём и возвращаем
    (email_sent): это результат передачи провайдеру, не факт доставки.
    """
    user = await get_by_email(db, body.email)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    if user.email_verified:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is already verified",
        )

    settings = get_settings()
    _, raw_token = await issue_token(
        session=db,
        user_id=user.id,
        purpose=PURPOSE_VERIFY_EMAIL,
        ttl=timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS),
    )
    await db.commit()

    result = await auth_email_service.send_verification_email(to_profile(user), raw_token)
    if result.success:
        logger.info("Verification email resent: %s (service: %s)", user.email, result.service_used)
        return ResendVerificationResponse(message="Verification email sent", email_sent=True)

    logger.warning("Verification email resend failed for %s: %s", user.email, result.error_detail)
    return ResendVerificationResponse(
        message="Verification email could not be sent. Please try again later.",
        email_sent=False,
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: EmailRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> MessageResponse:
    """
    Запрос на сброс пароля.
    Ответ одинаковый независимо от того, существует ли аккаунт.
    """
    user = await get_by_email(db, body.email)
    if not user:
        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    settings = get_settings()
    _, raw_token = await issue_token(
        session=db,
        user_id=user.id,
        purpose=PURPOSE_RESET_PASSWORD,
        ttl=timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
    )
    await db.commit()
    logger.info("Password reset requested: %s (user_id: %s)", user.email, user.id)

    deliver_in_background(
        background_tasks,
        auth_email_service.send_password_reset_email,
        to_profile(user),
        raw_token,
        description=f"password reset email to {user.email}",
    )
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=TokenResponse)
async def reset_password(
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Сброс пароля по токену из письма. Возвращает новый access token."""
    lookup = await lookup_token(db, body.token.strip(), PURPOSE_RESET_PASSWORD, for_update=True)
    if lookup.status is not TokenStatus.VALID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired token",
        )
    user = await get_by_id(db, lookup.token.user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired token",
        )

    await set_password(db, user, body.password)
    await consume_token(db, lookup.token)
    await db.commit()
    logger.info("Password reset completed: %s (user_id: %s)", user.email, user.id)

    return TokenResponse(
        message="Password reset successful",
        access_token=_issue_access_token(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Выход. JWT stateless: клиент удаляет токен, сервер только логирует."""
    logger.info("User logged out: %s (user_id: %s)", current_user.email, current_user.id)
    return MessageResponse(message="Logged out successfully")
