from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "interview_reviews"
    schema_name: Optional[str] = Field(default=None, validation_alias="DB_SCHEMA")
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class MediaConfig(BaseSettings):
    """Upload storage and ffmpeg settings for the transcription pipeline."""

    upload_dir: str = "uploads"
    temp_dir: Optional[str] = None
    allowed_extensions: list[str] = [".webm", ".wav", ".mp3", ".m4a", ".ogg"]
    canonical_extension: str = ".wav"
    sample_rate: int = Field(default=16000, ge=8000)
    channels: int = Field(default=1, ge=1, le=2)
    segment_threshold_mb: float = Field(
        default=25.0,
        gt=0,
        description="Converted audio above this size (MB) is split into segments.",
    )
    segment_seconds: int = Field(
        default=480,
        ge=1,
        description="Duration of each segment when splitting is required.",
    )
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe streaming configuration."""

    region: str = "us-east-1"
    language_code: str = "pt-BR"
    chunk_size: int = Field(default=8192, ge=1024)
    stream_speedup: float = Field(
        default=1.0,
        gt=0,
        description="How much faster than real time audio chunks are sent.",
    )
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-pro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=3000,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=8192,
    )
    temperature: float = Field(
        default=0.7,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class ReviewConfig(BaseSettings):
    """Limits for review generation and the recruiter job chat."""

    max_strengths: int = Field(default=5, ge=1)
    max_concerns: int = Field(default=5, ge=1)
    max_development: int = Field(default=3, ge=1)
    max_tokens: Optional[int] = Field(
        default=None,
        ge=1,
        description="Overrides the Bedrock token budget for reviews only.",
    )
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    chat_interview_limit: int = Field(default=50, ge=1)
    chat_summary_threshold: int = Field(
        default=500,
        ge=0,
        description="Transcripts longer than this are summarised before the chat prompt.",
    )
    chat_transcript_cut: int = Field(default=8000, ge=1)
    chat_temperature: float = Field(default=0.2, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Interview Review Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/transcription_pipeline.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Media / ffmpeg
    media: MediaConfig = Field(default_factory=MediaConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Review generation
    review: ReviewConfig = Field(default_factory=ReviewConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
