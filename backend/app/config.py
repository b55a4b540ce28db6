from pydantic import Field
from pydantic_settings import BaseSettings

# Width of chat_messages.content. Raising it needs a migration.
MESSAGE_COLUMN_LENGTH = 1024


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server identity — qualifies user identities inside issued tokens.
    # Each independent deployment should have a unique value.
    SERVER_DOMAIN: str = "localhost"

    # Chat
    CHAT_MESSAGE_MAX_LENGTH: int = Field(default=MESSAGE_COLUMN_LENGTH, ge=1, le=MESSAGE_COLUMN_LENGTH)
    CHAT_UPDATES_LIMIT: int = 50  # messages per /chat/updates response
    CHAT_HISTORY_LIMIT: int = 50  # default page size for channel history

    model_config = {"env_file": ".env"}


settings = Settings()
