from .base import Request, RequestBuilder
from .auth import LoginRequest, LogoutRequest
from .rss import GetRSSItemsRequest, MarkAsReadRequest
from .search import GetSearchResultsRequest, StartSearchRequest
from .torrents import (
    AddTorrentRequest,
    AddTrackersRequest,
    DeleteTorrentsRequest,
    GetTorrentsRequest,
    PauseTorrentsRequest,
    ResumeTorrentsRequest,
    TorrentFile,
)

__all__ = [
    "Request",
    "RequestBuilder",
    "LoginRequest",
    "LogoutRequest",
    "GetRSSItemsRequest",
    "MarkAsReadRequest",
    "GetSearchResultsRequest",
    "StartSearchRequest",
    "AddTorrentRequest",
    "AddTrackersRequest",
    "DeleteTorrentsRequest",
    "GetTorrentsRequest",
    "PauseTorrentsRequest",
    "ResumeTorrentsRequest",
    "TorrentFile",
]
