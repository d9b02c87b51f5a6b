#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Web configuration
Settings of the FastAPI application, read from the environment or .env
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class WebSettings(BaseSettings):
    """Settings of the DearSelf web application"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ===== BASICS =====

    APP_NAME: str = Field(default="DearSelf", description="Application name")
    VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="development/testing/staging/production")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # ===== NETWORK =====

    HOST: str = Field(default="127.0.0.1", description="Bind host")
    PORT: int = Field(default=8000, description="Bind port")

    # ===== CORS =====

    ALLOWED_ORIGINS: str = Field(default="*", description="Comma-separated CORS origins")

    # ===== SESSION COOKIE =====

    SESSION_COOKIE: str = Field(default="dearself_session", description="Cookie carrying the access token")
    SESSION_TIMEOUT: int = Field(default=7 * 24 * 3600, description="Cookie lifetime in seconds")
    COOKIE_SECURE: bool = Field(default=False, description="Send the cookie over HTTPS only")

    # ===== BREATHING =====

    BREATHING_IDLE_TIMEOUT: int = Field(default=120, ge=5, description="Drop timers unpolled for this many seconds")
    BREATHING_EVICT_INTERVAL: int = Field(default=60, ge=1, description="Seconds between idle timer sweeps")

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(default="INFO", description="DEBUG/INFO/WARNING/ERROR/CRITICAL")

    # ===== API DOCS =====

    DOCS_URL: Optional[str] = Field(default="/api/docs", description="Swagger UI (debug only)")
    OPENAPI_URL: Optional[str] = Field(default="/api/openapi.json", description="OpenAPI schema (debug only)")

    # ===== VALIDATORS =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        allowed_envs = ['development', 'testing', 'staging', 'production']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('PORT')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',') if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == 'production'
