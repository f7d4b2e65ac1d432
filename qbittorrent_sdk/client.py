"""
Python client for the qBittorrent Web API (v2).

Every call goes through a validated request object; list endpoints come back
as response wrappers holding typed, queryable collections.

Usage:
    from qbittorrent_sdk import QBittorrentClient, GetTorrentsRequest, TorrentFilter

    client = QBittorrentClient("http://localhost:8080", "admin", "adminadmin")
    client.login()

    response = client.get_torrents(GetTorrentsRequest.with_filter(TorrentFilter.DOWNLOADING))
    for torrent in response.get_torrents().sort_by_progress(descending=True):
        print(torrent.name, torrent.formatted_download_speed)
"""

from collections.abc import Mapping
from typing import Any, Optional

from .config import Config
from .exceptions import ApiError, AuthenticationError, TransportError
from .logger import logger
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
    Request,
    ResumeTorrentsRequest,
    StartSearchRequest,
)
from .response import RSSItemsResponse, SearchResultsResponse, TorrentListResponse
from .transport import RequestsTransport, Transport


class QBittorrentClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
    ):
        if transport is None:
            api_url = None
            if base_url is not None:
                api_url = f"{base_url.rstrip('/')}/{Config.QBT_API_PATH.strip('/')}"
            transport = RequestsTransport(api_url, timeout)
        self.transport = transport
        self.username = Config.QBT_USERNAME if username is None else username
        self.password = Config.QBT_PASSWORD if password is None else password
        self.authenticated = False

    def execute(self, request: Request) -> Any:
        """Send a built request and return the raw payload."""
        if request.requires_auth and not self.authenticated:
            logger.debug(f"Sending {type(request).__name__} without a login in this client")
        try:
            return self.transport.send(request.method, request.endpoint, request.to_array(), request.files())
        except AuthenticationError:
            self.authenticated = False
            raise
        except TransportError as e:
            logger.error(f"{type(request).__name__} failed: {e}")
            raise

    # -------------------------------------------------------------------------
    # Auth Methods
    # -------------------------------------------------------------------------

    def login(self, username: Optional[str] = None, password: Optional[str] = None) -> bool:
        """Login and keep the session cookie for later calls."""
        request = LoginRequest.create(username or self.username, password or self.password)
        result = self.execute(request)
        if isinstance(result, str) and result.strip() == "Ok.":
            self.authenticated = True
            logger.info(f"Logged in to qBittorrent as {request.username}")
            return True
        self.authenticated = False
        raise AuthenticationError(f"Login rejected for user {request.username}")

    def logout(self) -> None:
        self.execute(LogoutRequest.create())
        self.authenticated = False

    # -------------------------------------------------------------------------
    # Torrent Methods
    # -------------------------------------------------------------------------

    def get_torrents(self, request: Optional[GetTorrentsRequest] = None) -> TorrentListResponse:
        request = request or GetTorrentsRequest.all()
        raw = self.execute(request)
        return TorrentListResponse.from_api_data(raw, request.to_array())

    def add_torrent(self, request: AddTorrentRequest) -> None:
        result = self.execute(request)
        if isinstance(result, str) and result.strip() == "Fails.":
            raise ApiError("qBittorrent refused to add the torrent")
        logger.info(f"Added torrent ({len(request.urls)} urls, {len(request.torrents)} files)")

    def add_trackers(self, request: AddTrackersRequest) -> None:
        self.execute(request)
        logger.info(f"Added {len(request.urls)} trackers to {request.hash}")

    def delete_torrents(self, request: DeleteTorrentsRequest) -> None:
        self.execute(request)
        target = "all torrents" if request.select_all else f"{len(request.hashes)} torrents"
        logger.info(f"Deleted {target} (delete_files={request.delete_files})")

    def pause_torrents(self, request: PauseTorrentsRequest) -> None:
        self.execute(request)

    def resume_torrents(self, request: ResumeTorrentsRequest) -> None:
        self.execute(request)

    # -------------------------------------------------------------------------
    # Search Methods
    # -------------------------------------------------------------------------

    def start_search(self, request: StartSearchRequest) -> int:
        """Start a search job and return its id."""
        raw = self.execute(request)
        if not isinstance(raw, Mapping) or "id" not in raw:
            raise ApiError("Search start response did not include a job id")
        return int(raw["id"])

    def get_search_results(self, request: GetSearchResultsRequest) -> SearchResultsResponse:
        raw = self.execute(request)
        return SearchResultsResponse.from_api_data(raw, request.search_id)

    # -------------------------------------------------------------------------
    # RSS Methods
    # -------------------------------------------------------------------------

    def get_rss_items(self, request: Optional[GetRSSItemsRequest] = None) -> RSSItemsResponse:
        request = request or GetRSSItemsRequest.create()
        raw = self.execute(request)
        return RSSItemsResponse.from_api_data(raw, request.with_data)

    def mark_as_read(self, request: MarkAsReadRequest) -> None:
        self.execute(request)
