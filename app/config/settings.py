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
    database: str = "emergency_intake"
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )
    url_override: Optional[str] = Field(
        default=None,
        validation_alias="DB_URL",
        description="Full SQLAlchemy URL; wins over the host/port fields when set.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.url_override:
            return self.url_override
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
    """Local media root for uploaded recordings."""

    root: str = "uploads"
    audio_dir: str = "audio"
    video_dir: str = "video"
    default_extension: str = "webm"
    delete_on_case_delete: bool = Field(
        default=False,
        description="Remove referenced media files when a case is deleted by id.",
    )

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class AwsConfig(BaseSettings):
    """Shared AWS credentials"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe streaming configuration."""

    region: str = "us-east-1"
    language_code: str = "en-US"
    media_sample_rate_hz: int = 16000
    media_encoding: str = "pcm"
    chunk_size: int = Field(default=8192, ge=1024)
    realtime_pacing: bool = Field(
        default=True,
        description="Sleep between chunks so the stream is sent at playback speed.",
    )

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
        default="amazon.nova-micro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=100,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=0.3,
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


class PipelineConfig(BaseSettings):
    """Timeouts and limits for the intake inference stages."""

    transcription_timeout_seconds: float = Field(default=120.0, gt=0)
    completion_timeout_seconds: float = Field(default=30.0, gt=0)
    max_prompt_chars: int = Field(default=2000, ge=50)
    concurrent_stages: bool = True

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Emergency Intake Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3002
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/intake_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"
    enable_bulk_delete: bool = True

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Media
    media: MediaConfig = Field(default_factory=MediaConfig)

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Pipeline
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

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
