"""Per-resource method groups exposed on :class:`momo_sdk.MomoClient`."""

from .admin import AdminGroup
from .conversations import ConversationsGroup
from .documents import DocumentsGroup
from .graph import GraphGroup
from .health import HealthGroup
from .memories import MemoriesGroup
from .profile import ProfileGroup
from .search import SearchGroup

__all__ = [
    "AdminGroup",
    "ConversationsGroup",
    "DocumentsGroup",
    "GraphGroup",
    "HealthGroup",
    "MemoriesGroup",
    "ProfileGroup",
    "SearchGroup",
]
