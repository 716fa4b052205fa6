from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required by the privileged functions and user listing

    # Privileged functions (create/update/delete entity procedures)
    functions_base_url: str = ""  # Defaults to <supabase_url>/functions/v1
    functions_timeout: Optional[float] = None  # None keeps the transport default

    # Document storage
    documents_bucket: str = "service-provider-files"
    max_document_files: int = 3
    max_document_size_mb: int = 10

    # AWS S3 (optional; Supabase Storage is used when not configured)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # App
    app_name: str = "backoffice-admin"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    page_size: int = 10

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def s3_configured(self) -> bool:
        return all([self.aws_access_key_id, self.aws_secret_access_key, self.s3_bucket_name])

    def get_functions_base_url(self) -> str:
        if self.functions_base_url:
            return self.functions_base_url.rstrip("/")
        return f"{self.supabase_url.rstrip('/')}/functions/v1"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
