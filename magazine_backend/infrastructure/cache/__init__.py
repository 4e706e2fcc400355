from .records_cache import RecordsCache

__all__ = ["RecordsCache"]
