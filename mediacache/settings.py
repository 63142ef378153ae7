import os
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    public_name: str = "http://localhost:8100"
    log_level: str = "INFO"

    # image derivatives
    default_image_width: int = 640
    max_image_width: int = 4096
    jpeg_quality: int = 85
    asset_suffixes: List[str] = [".jpg"]
    cache_control_value: str = "public, max-age=31536000, immutable"

    # object storage
    storage_backend: Literal["s3", "local"] = "s3"
    storage_path: str = "./data/content"
    content_bucket: str = "content"
    aws_region: Optional[str] = None
    s3_endpoint_url: Optional[str] = None

    # article metadata
    articles_table: str = "articles"
    article_key_field: str = "id"
    image_field: str = "image"
    dynamodb_endpoint_url: Optional[str] = None
    metadata_file: Optional[str] = None

    # ranked listings
    redis_url: str = "redis://localhost:6379/0"
    redis_cluster: bool = False
    latest_content_key: str = "articles:latest"
    popular_content_key: str = "articles:popular"
    article_count_key: str = "articles:count"
    listing_max_items: int = 50

    model_config = SettingsConfigDict(
        env_prefix="mediacache_",
        env_file=os.getenv("DOTENV_PATH", ".env"),
        frozen=True,
    )


settings = Settings()
