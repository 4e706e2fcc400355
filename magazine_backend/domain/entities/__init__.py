"""Domain entities package"""

from .author import Author
from .edit_entry import EditEntry, EditKind
from .record import EDITABLE_RECORD_FIELDS, RECORD_FIELDS, MagazineRecord
from .tag import Tag
from .user import User, to_legacy_list

__all__ = [
    "Author",
    "EditEntry",
    "EditKind",
    "EDITABLE_RECORD_FIELDS",
    "RECORD_FIELDS",
    "MagazineRecord",
    "Tag",
    "User",
    "to_legacy_list",
]
