import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from pashumitra.core.config import get_settings
from pashumitra.core.logging_config import setup_logging
from pashumitra.integrations.email import AuthEmailService, get_email_manager
from pashumitra.integrations.email.router import router as email_router
from pashumitra.modules.auth.router import router as auth_router
from pashumitra.modules.user.router import router as user_router

# Настраиваем логирование при старте приложения
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Инициализация при старте: конфиг, HTTP-клиент, EmailManager и AuthEmailService (один раз на процесс)."""
    settings = get_settings()
    # Клиент закрывается и при ошибке конфигурации email на старте
    async with httpx.AsyncClient() as http_client:
        email_manager = get_email_manager(http_client, settings)
        app.state.auth_email_service = AuthEmailService(
            email_manager,
            settings.email_branding,
            verification_expiry_hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS,
            reset_expiry_minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES,
        )
        yield


app = FastAPI(
    title="PashuMitra Portal API",
    description="Authentication and transactional email API",
    version="1.0.0",
    lifespan=lifespan,
)

# Настройка CORS
# Читаем разрешённые origins из переменной окружения
cors_origins_str = os.getenv(
    "CORS_ALLOW_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000"  # Дефолт для локальной разработки
)

# Разбиваем строку на список origins
allowed_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

# Добавляем CORS middleware ДО подключения роутеров
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,  # Список конкретных origins (не ["*"])
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(email_router)


@app.get("/api", response_class=PlainTextResponse)
def health() -> str:
    return "PashuMitra Portal"
