#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Configuration
Centralised configuration loaded from the environment, with validation
"""

import os
import logging
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv

from dearself.core.exceptions import ConfigError

class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class Backend(Enum):
    """Where rows and accounts live"""
    SUPABASE = "supabase"
    LOCAL = "local"

@dataclass
class SupabaseConfig:
    """Hosted backend connection"""
    url: Optional[str] = None
    anon_key: Optional[str] = None

@dataclass
class StorageConfig:
    """Local JSON backend"""
    data_dir: Path = Path("data")
    store_file: str = "store.json"
    accounts_file: str = "accounts.json"

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file

    @property
    def accounts_path(self) -> Path:
        return self.data_dir / self.accounts_file

@dataclass
class GoalsConfig:
    """Daily goals shown by the panels"""
    hydration_ml: int = 2000
    steps: int = 10000
    quick_amounts_ml: List[int] = field(default_factory=lambda: [250, 500, 750, 1000])

@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    to_file: bool = True
    log_dir: Path = Path("logs")
    file_name: str = "dearself.log"
    format: str = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

    @property
    def file_path(self) -> Path:
        return self.log_dir / self.file_name

class AppConfig:
    """Main configuration object"""

    def __init__(self, env_file: Optional[str] = None):
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development').lower())
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Read everything from environment variables"""
        self.backend = Backend(os.getenv('DEARSELF_BACKEND', 'local').lower())

        self.supabase = SupabaseConfig(
            url=os.getenv('SUPABASE_URL'),
            anon_key=os.getenv('SUPABASE_ANON_KEY'),
        )

        self.storage = StorageConfig(
            data_dir=Path(os.getenv('DATA_DIR', 'data')),
        )

        self.goals = GoalsConfig(
            hydration_ml=int(os.getenv('HYDRATION_GOAL_ML', 2000)),
            steps=int(os.getenv('STEPS_GOAL', 10000)),
        )

        self.logging = LoggingConfig(
            level=LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper()),
            to_file=os.getenv('LOG_TO_FILE', 'true').lower() == 'true',
            log_dir=Path(os.getenv('LOG_DIR', 'logs')),
        )

        # Dates are computed in this timezone
        self.timezone = os.getenv('DEARSELF_TIMEZONE', 'UTC')

    def _validate_config(self):
        errors = []

        if self.backend is Backend.SUPABASE:
            if not self.supabase.url:
                errors.append("SUPABASE_URL is required for the supabase backend")
            elif not self.supabase.url.startswith(('http://', 'https://')):
                errors.append("SUPABASE_URL must be an http(s) URL")
            if not self.supabase.anon_key:
                errors.append("SUPABASE_ANON_KEY is required for the supabase backend")

        if self.goals.hydration_ml <= 0:
            errors.append("HYDRATION_GOAL_ML must be positive")
        if self.goals.steps <= 0:
            errors.append("STEPS_GOAL must be positive")

        if self.backend is Backend.LOCAL and self.is_production():
            logging.warning("⚠️ Local JSON backend selected in production")

        if errors:
            raise ConfigError("Configuration errors: " + "; ".join(errors))

    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    def get_summary(self) -> dict:
        """Safe summary for startup logs"""
        return {
            'environment': self.environment.value,
            'backend': self.backend.value,
            'supabase_url': self.supabase.url,
            'data_dir': str(self.storage.data_dir),
            'timezone': self.timezone,
            'goals': {
                'hydration_ml': self.goals.hydration_ml,
                'steps': self.goals.steps,
            },
            'log_level': self.logging.level.value,
        }
