"""Shared FastAPI dependencies for v1 API routers.

These factories centralize construction of repositories, storage and external
clients so routers can depend on simple callables. The persistence and
storage backends are picked from settings once per process; tests replace the
public ``get_*`` callables through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from magazine_backend.application.commands.author_commands import (
    CreateAuthorHandler,
    ImportAuthorsHandler,
    UpdateAuthorHandler,
)
from magazine_backend.application.commands.catalog_commands import DeleteCatalogEntryHandler, RecordLinksHandler
from magazine_backend.application.commands.create_record import CreateRecordHandler
from magazine_backend.application.commands.delete_record import DeleteRecordHandler
from magazine_backend.application.commands.extract_record_text import (
    ExtractRecordTextHandler,
    ExtractTextFromUploadHandler,
)
from magazine_backend.application.commands.generate_text import (
    BackfillSummariesHandler,
    DraftSplitFieldHandler,
    GenerateRecordFieldHandler,
)
from magazine_backend.application.commands.run_record_ocr import OcrPipelineOptions, RunRecordOcrHandler
from magazine_backend.application.commands.split_pdf import EditSplitLayoutHandler, SplitPdfHandler
from magazine_backend.application.commands.tag_commands import CreateTagHandler, ImportTagsHandler, UpdateTagHandler
from magazine_backend.application.commands.update_record import UpdateRecordHandler
from magazine_backend.application.commands.user_access import (
    ConfirmUserHandler,
    ListUsersHandler,
    LoginHandler,
    SignupHandler,
)
from magazine_backend.application.queries.catalog_queries import (
    AUTHOR_EXPORT_COLUMNS,
    TAG_EXPORT_COLUMNS,
    AuthorStatsHandler,
    ExportCatalogHandler,
    LinkedRecordsHandler,
    ListCatalogHandler,
    SearchCatalogHandler,
    TagStatsHandler,
    ValidateAuthorDeletionHandler,
)
from magazine_backend.application.queries.dashboard import (
    GetInsightsHandler,
    GetUserActivityHandler,
    ListMagazineNamesHandler,
)
from magazine_backend.application.queries.export_records import ExportRecordsHandler
from magazine_backend.application.queries.get_record import GetRecordHandler
from magazine_backend.application.queries.get_record_history import GetRecordHistoryHandler
from magazine_backend.application.queries.list_records import ListRecordsHandler
from magazine_backend.application.queries.pdf_queries import ParsePageTextHandler, ViewPdfHandler
from magazine_backend.application.services.pdf_source import PdfSourceResolver
from magazine_backend.application.services.text_extraction import TextExtractionService
from magazine_backend.config import Settings, get_settings
from magazine_backend.domain.repositories import (
    AuthorRepository,
    BlobStorage,
    EditHistoryRepository,
    RecordRepository,
    TagRepository,
    UserRepository,
)
from magazine_backend.infrastructure.ai.azure_text_client import AzureTextClient
from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.ocr.ilovepdf_client import IlovePdfClient
from magazine_backend.infrastructure.persistence.file_catalog_repository import (
    FileAuthorRepository,
    FileTagRepository,
)
from magazine_backend.infrastructure.persistence.file_edit_history_repository import FileEditHistoryRepository
from magazine_backend.infrastructure.persistence.file_record_repository import FileRecordRepository
from magazine_backend.infrastructure.persistence.file_user_repository import FileUserRepository
from magazine_backend.infrastructure.persistence.json_table_store import JsonTableStore
from magazine_backend.infrastructure.persistence.supabase import (
    SupabaseAuthorRepository,
    SupabaseEditHistoryRepository,
    SupabaseRecordRepository,
    SupabaseTagRepository,
    SupabaseUserRepository,
    create_supabase_client,
)
from magazine_backend.infrastructure.storage import CloudinaryStorage, LocalBlobStorage


def _settings() -> Settings:
    return get_settings()


def _uses_supabase() -> bool:
    return _settings().persistence_backend.lower() == "supabase"


# ------------------------------------------------------------------
# Persistence
# ------------------------------------------------------------------
@lru_cache()
def _table_store() -> JsonTableStore:
    return JsonTableStore(_settings().data_dir)


@lru_cache()
def _supabase_client():
    return create_supabase_client(_settings())


@lru_cache()
def _record_repository() -> RecordRepository:
    if _uses_supabase():
        return SupabaseRecordRepository(_supabase_client())
    return FileRecordRepository(_table_store())


def get_record_repository() -> RecordRepository:
    """Provide a singleton record repository instance."""
    return _record_repository()


@lru_cache()
def _tag_repository() -> TagRepository:
    if _uses_supabase():
        return SupabaseTagRepository(_supabase_client())
    return FileTagRepository(_table_store())


def get_tag_repository() -> TagRepository:
    """Provide a singleton tag repository instance."""
    return _tag_repository()


@lru_cache()
def _author_repository() -> AuthorRepository:
    if _uses_supabase():
        return SupabaseAuthorRepository(_supabase_client())
    return FileAuthorRepository(_table_store())


def get_author_repository() -> AuthorRepository:
    """Provide a singleton author repository instance."""
    return _author_repository()


@lru_cache()
def _history_repository() -> EditHistoryRepository:
    if _uses_supabase():
        return SupabaseEditHistoryRepository(_supabase_client())
    return FileEditHistoryRepository(_table_store())


def get_history_repository() -> EditHistoryRepository:
    """Provide a singleton summaries/conclusions history repository."""
    return _history_repository()


@lru_cache()
def _user_repository() -> UserRepository:
    if _uses_supabase():
        return SupabaseUserRepository(_supabase_client())
    return FileUserRepository(_table_store())


def get_user_repository() -> UserRepository:
    """Provide a singleton user repository instance."""
    return _user_repository()


# ------------------------------------------------------------------
# Storage, cache and external services
# ------------------------------------------------------------------
@lru_cache()
def _blob_storage() -> BlobStorage:
    settings = _settings()
    if settings.storage_backend.lower() == "cloudinary":
        return CloudinaryStorage(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
        )
    return LocalBlobStorage(str(Path(settings.data_dir) / "blobs"))


def get_blob_storage() -> BlobStorage:
    """Provide the configured blob storage backend."""
    return _blob_storage()


@lru_cache()
def _records_cache() -> RecordsCache:
    return RecordsCache(ttl_seconds=_settings().records_cache_ttl_seconds)


def get_records_cache() -> RecordsCache:
    """Provide the process-wide records list cache."""
    return _records_cache()


@lru_cache()
def _pdf_source_resolver() -> PdfSourceResolver:
    return PdfSourceResolver(_blob_storage(), _settings().site_url)


@lru_cache()
def _text_extraction_service() -> TextExtractionService:
    return TextExtractionService()


@lru_cache()
def _text_client() -> AzureTextClient:
    return AzureTextClient(settings=_settings())


def _folder() -> str:
    return _settings().cloudinary_folder


# ------------------------------------------------------------------
# Records
# ------------------------------------------------------------------
def get_list_records_handler() -> ListRecordsHandler:
    return ListRecordsHandler(
        _record_repository(), _tag_repository(), _author_repository(), _history_repository(), _records_cache()
    )


def get_record_handler() -> GetRecordHandler:
    return GetRecordHandler(_record_repository(), _tag_repository(), _author_repository(), _history_repository())


def get_record_history_handler() -> GetRecordHistoryHandler:
    return GetRecordHistoryHandler(_record_repository(), _history_repository())


def get_export_records_handler() -> ExportRecordsHandler:
    return ExportRecordsHandler(_record_repository(), _tag_repository(), _author_repository(), _history_repository())


def get_create_record_handler() -> CreateRecordHandler:
    return CreateRecordHandler(
        _record_repository(),
        _blob_storage(),
        _tag_repository(),
        _author_repository(),
        _records_cache(),
        folder=_folder(),
    )


def get_update_record_handler() -> UpdateRecordHandler:
    return UpdateRecordHandler(
        _record_repository(), _history_repository(), _blob_storage(), _records_cache(), folder=_folder()
    )


def get_delete_record_handler() -> DeleteRecordHandler:
    return DeleteRecordHandler(
        _record_repository(),
        _history_repository(),
        _tag_repository(),
        _author_repository(),
        _blob_storage(),
        _records_cache(),
    )


def get_run_record_ocr_handler() -> RunRecordOcrHandler:
    """Build the OCR pipeline; iLovePDF credentials are checked when it runs."""
    settings = _settings()
    options = OcrPipelineOptions(
        folder=_folder(),
        languages=tuple(settings.ocr_languages()) or ("eng",),
        compress_level=settings.ilovepdf_compress_level,
        compress_fallback_level=settings.ilovepdf_compress_fallback_level,
        compress_max_attempts=settings.compress_max_attempts(),
        extract_max_pages=settings.ocr_extract_max_pages,
        extract_min_chars=settings.ocr_extract_min_chars,
    )
    ilovepdf = IlovePdfClient(
        settings.ilovepdf_public_key,
        settings.ilovepdf_secret_key,
        region=settings.ilovepdf_region,
    )
    return RunRecordOcrHandler(
        _record_repository(),
        _blob_storage(),
        ilovepdf,
        _pdf_source_resolver(),
        _records_cache(),
        options=options,
    )


def get_extract_record_text_handler() -> ExtractRecordTextHandler:
    return ExtractRecordTextHandler(
        _record_repository(), _pdf_source_resolver(), _text_extraction_service(), _records_cache()
    )


def get_extract_upload_text_handler() -> ExtractTextFromUploadHandler:
    return ExtractTextFromUploadHandler(_text_extraction_service())


def get_backfill_handler() -> BackfillSummariesHandler:
    return BackfillSummariesHandler(
        _record_repository(), _pdf_source_resolver(), _text_client(), _records_cache()
    )


def get_cron_secret() -> str | None:
    return _settings().cron_secret


# ------------------------------------------------------------------
# Tags and authors
# ------------------------------------------------------------------
def get_search_tags_handler() -> SearchCatalogHandler:
    return SearchCatalogHandler(_tag_repository())


def get_list_tags_handler() -> ListCatalogHandler:
    return ListCatalogHandler(_tag_repository())


def get_export_tags_handler() -> ExportCatalogHandler:
    return ExportCatalogHandler(_tag_repository(), TAG_EXPORT_COLUMNS)


def get_tag_stats_handler() -> TagStatsHandler:
    return TagStatsHandler(_tag_repository())


def get_create_tag_handler() -> CreateTagHandler:
    return CreateTagHandler(_tag_repository(), _records_cache())


def get_update_tag_handler() -> UpdateTagHandler:
    return UpdateTagHandler(_tag_repository(), _records_cache())


def get_import_tags_handler() -> ImportTagsHandler:
    return ImportTagsHandler(_tag_repository(), _records_cache())


def get_delete_tag_handler() -> DeleteCatalogEntryHandler:
    return DeleteCatalogEntryHandler(_tag_repository(), _records_cache(), entity_type="Tag")


def get_tag_records_handler() -> LinkedRecordsHandler:
    return LinkedRecordsHandler(_tag_repository(), _record_repository(), entity_type="Tag")


def get_record_tags_handler() -> RecordLinksHandler:
    return RecordLinksHandler(_tag_repository(), _record_repository(), _records_cache(), entity_label="tags")


def get_search_authors_handler() -> SearchCatalogHandler:
    return SearchCatalogHandler(_author_repository())


def get_list_authors_handler() -> ListCatalogHandler:
    return ListCatalogHandler(_author_repository())


def get_export_authors_handler() -> ExportCatalogHandler:
    return ExportCatalogHandler(_author_repository(), AUTHOR_EXPORT_COLUMNS)


def get_author_stats_handler() -> AuthorStatsHandler:
    return AuthorStatsHandler(_author_repository())


def get_create_author_handler() -> CreateAuthorHandler:
    return CreateAuthorHandler(_author_repository(), _records_cache())


def get_update_author_handler() -> UpdateAuthorHandler:
    return UpdateAuthorHandler(_author_repository(), _records_cache())


def get_import_authors_handler() -> ImportAuthorsHandler:
    return ImportAuthorsHandler(_author_repository(), _records_cache())


def get_delete_author_handler() -> DeleteCatalogEntryHandler:
    return DeleteCatalogEntryHandler(_author_repository(), _records_cache(), entity_type="Author")


def get_author_records_handler() -> LinkedRecordsHandler:
    return LinkedRecordsHandler(_author_repository(), _record_repository(), entity_type="Author")


def get_validate_author_deletion_handler() -> ValidateAuthorDeletionHandler:
    return ValidateAuthorDeletionHandler(_author_repository())


def get_record_authors_handler() -> RecordLinksHandler:
    return RecordLinksHandler(_author_repository(), _record_repository(), _records_cache(), entity_label="authors")


# ------------------------------------------------------------------
# Users, dashboard, AI and PDF tools
# ------------------------------------------------------------------
def get_signup_handler() -> SignupHandler:
    return SignupHandler(_user_repository())


def get_login_handler() -> LoginHandler:
    return LoginHandler(_user_repository())


def get_confirm_user_handler() -> ConfirmUserHandler:
    return ConfirmUserHandler(_user_repository())


def get_list_users_handler() -> ListUsersHandler:
    return ListUsersHandler(_user_repository())


def get_insights_handler() -> GetInsightsHandler:
    return GetInsightsHandler(_record_repository())


def get_user_activity_handler() -> GetUserActivityHandler:
    return GetUserActivityHandler(_record_repository(), _history_repository())


def get_magazine_names_handler() -> ListMagazineNamesHandler:
    return ListMagazineNamesHandler(_record_repository())


def get_generate_record_field_handler() -> GenerateRecordFieldHandler:
    return GenerateRecordFieldHandler(_record_repository(), _text_client())


def get_draft_split_field_handler() -> DraftSplitFieldHandler:
    return DraftSplitFieldHandler(_text_client())


@lru_cache()
def _split_pdf_handler() -> SplitPdfHandler:
    return SplitPdfHandler()


def get_split_pdf_handler() -> SplitPdfHandler:
    return _split_pdf_handler()


def get_edit_layout_handler() -> EditSplitLayoutHandler:
    return EditSplitLayoutHandler()


def get_parse_page_text_handler() -> ParsePageTextHandler:
    return ParsePageTextHandler()


def get_view_pdf_handler() -> ViewPdfHandler:
    return ViewPdfHandler(_blob_storage(), _pdf_source_resolver())
