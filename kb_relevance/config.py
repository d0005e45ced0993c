"""
Configuration from environment variables.

Loads .env.local (local dev, highest priority) or .env, then validates
values into a Settings model. Invalid values raise ValueError
(pydantic ValidationError subclasses it).

Variables:
    RAG_TOP_K: Articles fed into the assistant prompt (default: 5)
    RAG_SCORE_THRESHOLD: Minimum score for RAG context (default: 0.3)
    RAG_CONTEXT_CHAR_LIMIT: Per-article content budget in the prompt (default: 1500)
    SEARCH_PAGE_SIZE: Default free-text search page size (default: 20)
    SCORING_MAX_WORKERS: Process pool size (default: CPU count)
    SCORING_PARALLEL_THRESHOLD: Candidate count that switches scoring to the pool (default: 500)
    LOG_LEVEL: Console log level (default: INFO)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_environment(project_root: Path = PROJECT_ROOT) -> Optional[Path]:
    """
    Load .env.local or .env into os.environ.
    
    Returns:
        Path of the loaded file, or None if neither exists
    """
    env_local = project_root / ".env.local"
    env_file = project_root / ".env"
    
    for path in (env_local, env_file):
        if path.exists():
            logger.info(f"Loading environment from: {path}")
            load_dotenv(path, override=True)
            return path
    
    logger.warning("No .env.local or .env file found - using system environment variables only")
    return None


class Settings(BaseModel):
    """Validated runtime settings"""
    model_config = ConfigDict(frozen=True)
    
    rag_top_k: int = Field(default=5, ge=1, le=50, description="Articles fed into the assistant prompt")
    rag_score_threshold: float = Field(default=0.3, ge=0.0, le=1.0, description="Minimum score for RAG context")
    rag_context_char_limit: int = Field(default=1500, ge=1, description="Per-article content budget in the prompt")
    search_page_size: int = Field(default=20, ge=1, le=100, description="Default search page size")
    scoring_max_workers: Optional[int] = Field(default=None, ge=1, description="Process pool size (None = CPU count)")
    scoring_parallel_threshold: int = Field(default=500, ge=1, description="Candidate count that enables the process pool")
    log_level: str = "INFO"
    
    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level
    
    @property
    def console_level(self) -> int:
        """Numeric logging level for setup_logging()"""
        return getattr(logging, self.log_level)
    
    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ; unset variables keep defaults."""
        env_vars = {
            "rag_top_k": "RAG_TOP_K",
            "rag_score_threshold": "RAG_SCORE_THRESHOLD",
            "rag_context_char_limit": "RAG_CONTEXT_CHAR_LIMIT",
            "search_page_size": "SEARCH_PAGE_SIZE",
            "scoring_max_workers": "SCORING_MAX_WORKERS",
            "scoring_parallel_threshold": "SCORING_PARALLEL_THRESHOLD",
            "log_level": "LOG_LEVEL",
        }
        values = {}
        for field_name, env_name in env_vars.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                values[field_name] = value.strip()
        
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the environment, built once per process (cache_clear() to reload)."""
    settings = Settings.from_env()
    logger.debug(f"Settings loaded: {settings.model_dump()}")
    return settings
