from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="APP_",
    )

    SECRET_KEY: str
    WORKERS: int = 1
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    SQL_LOG: bool = False
    CORS_ORIGINS: list[str] | str = "*"
    APP_VERSION: str = "1.0"

    DATABASE_URL: str

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    PASSWORD_RESET_EXPIRE_MINUTES: int = 10
    BCRYPT_ROUNDS: int = 12

    FRONTEND_URL: str = "http://localhost:3000"

    SES_ACCESS_KEY: str = ""
    SES_SECRET_KEY: str = ""
    SES_REGION: str = "us-east-1"
    SES_DEFAULT_SENDER: str = "RallyPoint <noreply@rallypoint.org>"

    S3_BUCKET: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_REGION: str = "us-east-1"
    S3_BASE_PATH: str = "rallypoint"
    S3_PUBLIC_URL: str = ""

    DISCORD_ERROR_WEBHOOK: str = ""

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    AI_TIMEOUT_SECONDS: float = 30.0

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [
                origin.strip()
                for origin in self.CORS_ORIGINS.split(",")
                if origin.strip()
            ]
        return self.CORS_ORIGINS

    @property
    def email_enabled(self) -> bool:
        return bool(self.SES_ACCESS_KEY and self.SES_SECRET_KEY)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.S3_BUCKET and self.S3_ACCESS_KEY and self.S3_SECRET_KEY)


settings = AppConfig()
