from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "dev"
    API_VERSION: str = "v1.4.0"
    DATABASE_URL: str = "sqlite:///./mindbot.db"
    LOG_LEVEL: str = "INFO"

    # comma-separated; "*" allows everything (dev only)
    ALLOWED_ORIGINS: str = "https://mindfitness.co,https://www.mindfitness.co,https://mindfitness.com,https://www.mindfitness.com"

    # "anthropic" or "openai"
    LLM_PROVIDER: str = "anthropic"
    LLM_TIMEOUT_SECONDS: int = 25

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"

    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION: str = "2023-06-01"

    # per caller (client IP), process-local
    RATE_LIMIT_MAX_REQUESTS: int = 40
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    # comma-separated peer addresses whose X-Forwarded-For is honored
    TRUSTED_PROXIES: str = ""

    LINE_CHANNEL_ACCESS_TOKEN: str = ""
    LINE_CHANNEL_SECRET: str = ""
    LINE_API_BASE_URL: str = "https://api.line.me/v2/bot"

    # listener session tokens
    TOKEN_SECRET: str = "change_me_super_secret"
    TOKEN_ISSUER: str = "mindbot"
    LISTENER_TOKEN_TTL_DAYS: int = 30
    OTP_TTL_SECONDS: int = 600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if self.APP_ENV == "dev":
            origins += ["http://localhost:3000", "http://localhost:5173"]
        return origins

    @property
    def trusted_proxies(self) -> set[str]:
        return {p.strip() for p in self.TRUSTED_PROXIES.split(",") if p.strip()}

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


settings = Settings()
