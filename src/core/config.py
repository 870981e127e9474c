import os
from typing import Optional, Self

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


class RedisSettings(BaseModel):
    url: str = Field(default_factory=lambda: os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0").strip())
    max_connections: int = Field(default_factory=lambda: int(os.getenv("REDIS_MAX_CONNECTIONS", "50")))
    # None means callers wait for a free connection indefinitely
    pool_timeout: Optional[float] = Field(default_factory=lambda: _optional_float("REDIS_POOL_TIMEOUT"))

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if not self.url:
            raise ValueError("REDIS_URL environment variable must not be empty.")
        if self.max_connections <= 0:
            raise ValueError("REDIS_MAX_CONNECTIONS must be greater than zero.")
        return self


class JwtSettings(BaseModel):
    secret_key: str = Field(default_factory=lambda: os.getenv("JWT_SECRET", "").strip())
    algorithm: str = Field(default_factory=lambda: os.getenv("JWT_ALGORITHM", "HS256").strip() or "HS256")
    expire_minutes: int = Field(default_factory=lambda: int(os.getenv("JWT_EXPIRE_MINUTES", "60")))

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if not self.secret_key:
            raise ValueError("JWT_SECRET environment variable must be set.")
        if not self.algorithm.upper().startswith("HS"):
            raise ValueError("JWT_ALGORITHM must be an HMAC algorithm (HS256, HS384, HS512).")
        if self.expire_minutes <= 0:
            raise ValueError("JWT_EXPIRE_MINUTES must be greater than zero.")
        return self


class RelaxedEnvSettingsSource(EnvSettingsSource):
    def decode_complex_value(self, field_name, field, value):
        try:
            return super().decode_complex_value(field_name, field, value)
        except Exception:
            return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")
    api_v1_prefix: str = "/api/v1"
    host: str = Field(default_factory=lambda: os.getenv("HOST", "127.0.0.1").strip())
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "6767")))
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=False)
    redis: RedisSettings = RedisSettings()
    jwt: JwtSettings = JwtSettings()

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value):
        if value is None:
            return ["*"]
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped or stripped == "*":
                return ["*"]
            return [item.strip() for item in stripped.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            origins = [str(item).strip() for item in value if str(item).strip()]
            return origins or ["*"]
        raise ValueError("Invalid cors_allowed_origins format; provide comma-separated string or list.")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            RelaxedEnvSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


settings = Settings()
