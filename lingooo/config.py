from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGODB_URI: str = "mongodb://localhost:27017"
    MDB_USER: str | None = None
    MDB_PASSWORD: str | None = None
    MDB_CLUSTER: str = "cluster0.9wh3o6k.mongodb.net"
    DATABASE_NAME: str = "lingooo"
    REDIS_URL: str = "redis://localhost:6379/0"
    ACCESS_TOKEN_SECRET: str = "dev-secret-lingooo"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PAYMENT_SECRET_KEY: str = ""
    LOG_LEVEL: str = "INFO"
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    CACHE_TTL: int = 300  # 5 minutes
    CORS_ORIGINS: list[str] = ["*"]
    PORT: int = 5000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def mongodb_uri(self) -> str:
        # Atlas credentials win over a plain URI
        if self.MDB_USER and self.MDB_PASSWORD:
            return (
                f"mongodb+srv://{self.MDB_USER}:{self.MDB_PASSWORD}@{self.MDB_CLUSTER}"
                "/?retryWrites=true&w=majority"
            )
        return self.MONGODB_URI


settings = Settings()
