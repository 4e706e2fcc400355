from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  persistence_backend: str = Field(default="file", alias="PERSISTENCE_BACKEND")
  data_dir: str = Field(default="backend_data", alias="DATA_DIR")
  supabase_url: str = Field(default="", alias="SUPABASE_URL")
  supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")

  storage_backend: str = Field(default="local", alias="STORAGE_BACKEND")
  cloudinary_cloud_name: str = Field(default="", alias="CLOUDINARY_CLOUD_NAME")
  cloudinary_api_key: str = Field(default="", alias="CLOUDINARY_API_KEY")
  cloudinary_api_secret: str = Field(default="", alias="CLOUDINARY_API_SECRET")
  cloudinary_folder: str = Field(default="pdfs", alias="CLOUDINARY_FOLDER")

  ilovepdf_public_key: str | None = Field(default=None, alias="ILOVEPDF_PUBLIC_KEY")
  ilovepdf_secret_key: str | None = Field(default=None, alias="ILOVEPDF_SECRET_KEY")
  ilovepdf_region: str = Field(default="us", alias="ILOVEPDF_REGION")
  ilovepdf_ocr_languages: str = Field(default="eng", alias="ILOVEPDF_OCR_LANGUAGES")
  ilovepdf_compress_level: str = Field(default="recommended", alias="ILOVEPDF_COMPRESS_LEVEL")
  ilovepdf_compress_fallback_level: str = Field(default="extreme", alias="ILOVEPDF_COMPRESS_FALLBACK_LEVEL")
  ilovepdf_compress_max_attempts: int = Field(default=3, alias="ILOVEPDF_COMPRESS_MAX_ATTEMPTS")

  ocr_extract_max_pages: int = Field(default=5, alias="OCR_EXTRACT_MAX_PAGES")
  ocr_extract_min_chars: int = Field(default=30, alias="OCR_EXTRACT_MIN_CHARS")

  site_url: str = Field(default="http://localhost:8000", alias="SITE_URL")
  records_cache_ttl_seconds: float = Field(default=300.0, alias="RECORDS_CACHE_TTL_SECONDS")
  cron_secret: str | None = Field(default=None, alias="CRON_SECRET")

  azure_openai_api_key: str | None = Field(default=None, alias="AZURE_OPENAI_API_KEY")
  azure_openai_endpoint: str = Field(default="", alias="AZURE_OPENAI_ENDPOINT")
  azure_openai_api_version: str = Field(default="2024-12-01-preview", alias="AZURE_OPENAI_API_VERSION")
  azure_openai_deployment_name: str | None = Field(default=None, alias="AZURE_OPENAI_DEPLOYMENT_NAME")
  azure_openai_text_model: str | None = Field(default=None, alias="AZURE_OPENAI_TEXT_MODEL")

  def ensure_endpoint(self) -> str:
    endpoint = (self.azure_openai_endpoint or "").strip()
    if not endpoint:
      return ""
    return endpoint.rstrip("/") + "/"

  def ocr_languages(self) -> List[str]:
    return [lang.strip() for lang in self.ilovepdf_ocr_languages.split(",") if lang.strip()]

  def compress_max_attempts(self) -> int:
    attempts = self.ilovepdf_compress_max_attempts
    if attempts <= 0:
      return 3
    return min(10, attempts)

  class Config:
    case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
