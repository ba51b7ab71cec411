from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    database_url: str = "postgresql+psycopg://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "workspace-access-api"
    jwt_audience: str = "workspace-access-api"
    jwt_expires_minutes: int = 60

    # one-time login codes (redis, explicit ttl)
    verification_code_ttl_seconds: int = 300
    verification_code_length: int = 6
    verification_code_pepper: str = "dev-pepper-change-me"

    # rate limiting (redis)
    rate_limit_enabled: bool = True
    rate_limit_auth_request_code_per_min: int = 20
    rate_limit_auth_verify_code_per_min: int = 30

settings = Settings()
