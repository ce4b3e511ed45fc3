from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="APP_",
        env_file=".env",
        extra="ignore",
    )

    SECRET_KEY: str
    HOST: str = "0.0.0.0"
    WORKERS: int = 1
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: list[str] | str = "*"
    APP_VERSION: str = "1.0"

    DATABASE_URL: str
    SQL_ECHO: bool = False
    CREATE_TABLES: bool = True

    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    DISCORD_ERROR_WEBHOOK: str | None = None

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [
                origin.strip()
                for origin in self.CORS_ORIGINS.split(",")
                if origin.strip()
            ]
        return self.CORS_ORIGINS


settings = AppConfig()
