"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FLOWGUARD_",
        case_sensitive=False,
        extra="ignore"
    )

    # Node type catalogue (JSON file); built-in n8n catalogue when empty
    registry_path: Optional[str] = None

    # Engine
    auto_fix_enabled: bool = True
    max_graph_nodes: int = Field(default=500, ge=1)

    # Improvement suggestions
    max_set_nodes: int = Field(default=3, ge=0)

    # Quality score penalties per issue
    error_penalty: float = Field(default=15.0, ge=0)
    warning_penalty: float = Field(default=5.0, ge=0)
    suggestion_penalty: float = Field(default=1.0, ge=0)

    # Complexity score weights
    complexity_node_weight: float = Field(default=0.5, ge=0)
    complexity_connection_weight: float = Field(default=0.3, ge=0)
    complexity_type_weight: float = Field(default=0.4, ge=0)
    complexity_branching_weight: float = Field(default=0.6, ge=0)

    # Server
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"
    log_to_file: bool = False

    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    @property
    def docs_enabled(self) -> bool:
        """Interactive API docs are served in debug mode outside production"""
        return self.debug and not self.is_production


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
