from typing import Literal

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables.

    Loaded once at startup and immutable afterwards.
    """

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5001
    debug: bool = False
    environment: Literal["development", "production"] = "production"
    jwt_secret: str | None = None  # Required in production; see TokenService.from_config
    jwt_algorithm: str = "HS256"
    token_validity_days: int = 7
    bcrypt_rounds: int = 10  # bcrypt work factor (log2 of iterations)
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "BOXINGCOACH_",
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def is_development(self) -> bool:
        return self.environment == "development"
