"""
qBittorrent SDK - Typed client for the qBittorrent Web API.

Provides validated request builders, queryable collections of torrents,
search results and RSS feeds, and response wrappers over the raw API data.
"""

from .client import QBittorrentClient
from .collection import Collection
from .config import Config
from .enums import SearchStatus, TorrentFilter, TorrentSortField, TorrentState
from .exceptions import (
    ApiError,
    AuthenticationError,
    HydrationError,
    InvalidArgumentError,
    MissingParameterError,
    NetworkError,
    QBittorrentError,
    ReadOnlyCollectionError,
    RequestValidationError,
    TransportError,
)
from .models import RSSArticle, RSSFeed, SearchResult, TorrentInfo
from .request import (
    AddTorrentRequest,
    AddTrackersRequest,
    DeleteTorrentsRequest,
    GetRSSItemsRequest,
    GetSearchResultsRequest,
    GetTorrentsRequest,
    LoginRequest,
    LogoutRequest,
    MarkAsReadRequest,
    PauseTorrentsRequest,
    ResumeTorrentsRequest,
    StartSearchRequest,
)
from .response import RSSItemsResponse, SearchResultsResponse, TorrentListResponse
from .rss_collection import RSSFeedCollection
from .search_collection import SearchResultCollection
from .torrent_collection import TorrentCollection
from .validation import ValidationResult

__version__ = "0.1.0"
__all__ = [
    "QBittorrentClient",
    "Config",
    "Collection",
    "TorrentCollection",
    "SearchResultCollection",
    "RSSFeedCollection",
    "TorrentInfo",
    "SearchResult",
    "RSSFeed",
    "RSSArticle",
    "TorrentState",
    "TorrentFilter",
    "TorrentSortField",
    "SearchStatus",
    "ValidationResult",
    "GetTorrentsRequest",
    "AddTorrentRequest",
    "AddTrackersRequest",
    "DeleteTorrentsRequest",
    "PauseTorrentsRequest",
    "ResumeTorrentsRequest",
    "StartSearchRequest",
    "GetSearchResultsRequest",
    "GetRSSItemsRequest",
    "MarkAsReadRequest",
    "LoginRequest",
    "LogoutRequest",
    "TorrentListResponse",
    "SearchResultsResponse",
    "RSSItemsResponse",
    "QBittorrentError",
    "InvalidArgumentError",
    "MissingParameterError",
    "ReadOnlyCollectionError",
    "RequestValidationError",
    "HydrationError",
    "TransportError",
    "NetworkError",
    "ApiError",
    "AuthenticationError",
]
