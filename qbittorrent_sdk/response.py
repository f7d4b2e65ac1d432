"""
Response wrappers that turn raw Web API payloads into typed, read-only collections.

Hydration is all-or-nothing: if the payload has the wrong shape, or any
element cannot be hydrated, the response is a failure carrying the error
messages and an empty collection. An empty but well-formed payload is a
success.

Usage:
    response = TorrentListResponse.from_api_data(raw)
    if response.is_success():
        for torrent in response.get_downloading_torrents():
            print(torrent.name, torrent.progress_percentage)
    else:
        print(response.get_errors())
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from .enums import SearchStatus
from .exceptions import HydrationError
from .logger import logger
from .models import RSSArticle, RSSFeed, TorrentInfo
from .rss_collection import RSSFeedCollection
from .search_collection import SearchResultCollection
from .torrent_collection import TorrentCollection
from .utils import format_bytes, format_percentage, format_speed
from .validation import ValidationResult


class Response:
    def __init__(
        self,
        success: bool,
        errors: Optional[List[str]] = None,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        raw: Any = None,
    ):
        self._success = success
        self._errors = list(errors or [])
        self._status_code = status_code
        self._headers = dict(headers or {})
        self._raw = raw

    def is_success(self) -> bool:
        return self._success

    def get_errors(self) -> List[str]:
        return list(self._errors)

    def get_status_code(self) -> int:
        return self._status_code

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def get_raw(self) -> Any:
        return self._raw

    def _data(self) -> Any:
        return None

    def to_array(self) -> Dict[str, Any]:
        return {
            "success": self._success,
            "errors": self.get_errors(),
            "status_code": self._status_code,
            "data": self._data(),
        }

    def __repr__(self) -> str:
        state = "success" if self._success else f"failure {self._errors!r}"
        return f"{type(self).__name__}({state})"


# -------------------------------------------------------------------------
# Torrents
# -------------------------------------------------------------------------

class TorrentListResponse(Response):
    """Response of /torrents/info."""

    def __init__(self, success: bool, torrents: Optional[TorrentCollection] = None,
                 request_params: Optional[Dict[str, str]] = None, **kwargs):
        super().__init__(success, **kwargs)
        self._torrents = (torrents.copy() if torrents is not None else TorrentCollection.empty()).freeze()
        self._request_params = dict(request_params or {})

    @classmethod
    def success(cls, torrents: TorrentCollection, **kwargs) -> "TorrentListResponse":
        return cls(True, torrents, **kwargs)

    @classmethod
    def failure(cls, errors: List[str], status_code: int = 400, **kwargs) -> "TorrentListResponse":
        return cls(False, None, errors=errors, status_code=status_code, **kwargs)

    @classmethod
    def from_api_data(cls, raw: Any, request_params: Optional[Dict[str, str]] = None,
                      status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> "TorrentListResponse":
        if not isinstance(raw, list):
            logger.warning(f"Torrent list payload has unexpected type {type(raw).__name__}")
            return cls.failure([f"Expected a list of torrents, got {type(raw).__name__}"],
                               status_code=status_code, headers=headers, raw=raw, request_params=request_params)
        try:
            torrents = TorrentCollection.from_array(raw)
        except HydrationError as e:
            logger.warning(f"Failed to hydrate torrent list: {e}")
            return cls.failure([str(e)], status_code=status_code, headers=headers, raw=raw,
                               request_params=request_params)
        logger.debug(f"Hydrated {torrents.count()} torrents")
        return cls.success(torrents, status_code=status_code, headers=headers, raw=raw,
                           request_params=request_params)

    def get_torrents(self) -> TorrentCollection:
        return self._torrents

    def get_request_params(self) -> Dict[str, str]:
        return dict(self._request_params)

    def get_total_count(self) -> int:
        return self._torrents.count()

    def has_torrents(self) -> bool:
        return not self._torrents.is_empty()

    def get_statistics(self) -> Dict[str, Any]:
        return self._torrents.get_statistics()

    def get_torrent_by_hash(self, torrent_hash: str) -> Optional[TorrentInfo]:
        return self._torrents.find_by_hash(torrent_hash)

    def has_hash(self, torrent_hash: str) -> bool:
        return self._torrents.has_hash(torrent_hash)

    def get_torrents_by_category(self, category: str) -> TorrentCollection:
        return self._torrents.filter_by_category(category)

    def get_torrents_by_tag(self, tag: str) -> TorrentCollection:
        return self._torrents.filter_by_tag(tag)

    def get_active_torrents(self) -> TorrentCollection:
        return self._torrents.get_active()

    def get_completed_torrents(self) -> TorrentCollection:
        return self._torrents.get_completed()

    def get_downloading_torrents(self) -> TorrentCollection:
        return self._torrents.get_downloading()

    def get_uploading_torrents(self) -> TorrentCollection:
        return self._torrents.get_uploading()

    def get_errored_torrents(self) -> TorrentCollection:
        return self._torrents.get_errored()

    def has_active_torrents(self) -> bool:
        return self._torrents.some(lambda t: t.is_active())

    def has_errored_torrents(self) -> bool:
        return self._torrents.some(lambda t: t.has_error())

    def validate(self) -> ValidationResult:
        """Sanity-check the hydrated torrents; problems are reported, never raised."""
        result = ValidationResult.success()
        for error in self._errors:
            result.add_error(error)
        for torrent in self._torrents:
            if not torrent.hash:
                result.add_error(f"Torrent '{torrent.name}' has no hash")
            if not 0.0 <= torrent.progress <= 1.0:
                result.add_warning(f"Torrent {torrent.hash} reports progress {torrent.progress}")
        duplicates = self._torrents.count() - self._torrents.unique(lambda t: t.hash).count()
        if duplicates:
            result.add_warning(f"{duplicates} duplicate torrent hashes in response")
        return result

    def _data(self) -> Any:
        return self._torrents.to_array()

    def get_summary(self) -> Dict[str, Any]:
        summary = {"success": self._success, "errors": self.get_errors()}
        summary.update(self._torrents.get_statistics())
        return summary

    def get_formatted_summary(self) -> Dict[str, Any]:
        stats = self._torrents.get_statistics()
        return {
            "total_count": stats["total_count"],
            "active_count": stats["active_count"],
            "completed_count": stats["completed_count"],
            "downloading_count": stats["downloading_count"],
            "errored_count": stats["errored_count"],
            "total_size": format_bytes(stats["total_size"]),
            "download_speed": format_speed(stats["total_download_speed"]),
            "upload_speed": format_speed(stats["total_upload_speed"]),
            "average_progress": format_percentage(stats["average_progress"]),
            "categories": stats["categories"],
            "tags": stats["tags"],
        }


# -------------------------------------------------------------------------
# Search
# -------------------------------------------------------------------------

class SearchResultsResponse(Response):
    """Response of /search/results: results plus the job's status and total."""

    def __init__(self, success: bool, results: Optional[SearchResultCollection] = None,
                 status: str = "", total: int = 0, search_id: Optional[int] = None, **kwargs):
        super().__init__(success, **kwargs)
        self._results = (results.copy() if results is not None else SearchResultCollection.empty()).freeze()
        self._status = status
        self._total = total
        self._search_id = search_id

    @classmethod
    def success(cls, results: SearchResultCollection, status: str, total: int = 0,
                search_id: Optional[int] = None, **kwargs) -> "SearchResultsResponse":
        return cls(True, results, status, total, search_id, **kwargs)

    @classmethod
    def failure(cls, errors: List[str], status_code: int = 400,
                search_id: Optional[int] = None, **kwargs) -> "SearchResultsResponse":
        return cls(False, None, search_id=search_id, errors=errors, status_code=status_code, **kwargs)

    @classmethod
    def from_api_data(cls, raw: Any, search_id: Optional[int] = None,
                      status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> "SearchResultsResponse":
        if not isinstance(raw, Mapping) or "results" not in raw or "status" not in raw:
            logger.warning("Search results payload is missing 'results' or 'status'")
            return cls.failure(["Invalid API response: missing required fields"],
                               status_code=status_code, search_id=search_id, headers=headers, raw=raw)
        if not isinstance(raw["results"], list):
            return cls.failure([f"Expected a list of search results, got {type(raw['results']).__name__}"],
                               status_code=status_code, search_id=search_id, headers=headers, raw=raw)
        try:
            results = SearchResultCollection.from_array(raw["results"])
            total = int(raw.get("total", results.count()))
        except (HydrationError, TypeError, ValueError) as e:
            logger.warning(f"Failed to hydrate search results: {e}")
            return cls.failure([str(e)], status_code=status_code, search_id=search_id, headers=headers, raw=raw)
        return cls.success(results, str(raw["status"]), total, search_id,
                           status_code=status_code, headers=headers, raw=raw)

    def get_search_results(self) -> SearchResultCollection:
        return self._results

    def get_status(self) -> str:
        return self._status

    def get_total(self) -> int:
        return self._total

    def get_search_id(self) -> Optional[int]:
        return self._search_id

    def get_result_count(self) -> int:
        return self._results.count()

    def is_running(self) -> bool:
        return self._status == SearchStatus.RUNNING.value

    def is_stopped(self) -> bool:
        return self._status == SearchStatus.STOPPED.value

    def has_results(self) -> bool:
        return not self._results.is_empty()

    def has_more_results(self) -> bool:
        return self.is_running() or self._total > self._results.count()

    def _data(self) -> Any:
        return {
            "results": self._results.to_array(),
            "status": self._status,
            "total": self._total,
            "search_id": self._search_id,
        }

    def get_summary(self) -> Dict[str, Any]:
        summary = {
            "success": self._success,
            "errors": self.get_errors(),
            "search_id": self._search_id,
            "status": self._status,
            "total": self._total,
            "has_more_results": self.has_more_results(),
        }
        summary.update(self._results.get_statistics())
        return summary

    def get_formatted_summary(self) -> Dict[str, Any]:
        summary = self._results.get_formatted_summary()
        summary["job_summary"] = {
            "search_id": self._search_id,
            "status": self._status or "Unknown",
            "shown": f"{self._results.count()} of {self._total}",
        }
        return summary


# -------------------------------------------------------------------------
# RSS
# -------------------------------------------------------------------------

def _collect_feeds(node: Mapping, folder: str, with_data: bool, feeds: List[Dict[str, Any]]) -> None:
    """Walk the /rss/items folder tree; a mapping whose ``url`` is a string is a feed."""
    for name, value in node.items():
        if not isinstance(value, Mapping):
            raise HydrationError(f"RSS item '{name}' is not an object")
        if not isinstance(value.get("url"), str):
            _collect_feeds(value, f"{folder}\\{name}" if folder else str(name), with_data, feeds)
            continue

        data = dict(value)
        data.setdefault("name", str(name))
        data.setdefault("title", str(name))
        data.setdefault("path", folder)
        articles = data.get("articles")
        if with_data and isinstance(articles, list):
            data["totalItems"] = len(articles)
            data["unreadCount"] = sum(
                1 for article in articles if not (isinstance(article, Mapping) and article.get("isRead"))
            )
        feeds.append(data)


class RSSItemsResponse(Response):
    """Response of /rss/items, with the folder tree flattened into a feed collection."""

    def __init__(self, success: bool, feeds: Optional[RSSFeedCollection] = None, with_data: bool = False, **kwargs):
        super().__init__(success, **kwargs)
        self._feeds = (feeds.copy() if feeds is not None else RSSFeedCollection.empty()).freeze()
        self._with_data = with_data

    @classmethod
    def success(cls, feeds: RSSFeedCollection, with_data: bool = False, **kwargs) -> "RSSItemsResponse":
        return cls(True, feeds, with_data, **kwargs)

    @classmethod
    def failure(cls, errors: List[str], status_code: int = 400, **kwargs) -> "RSSItemsResponse":
        return cls(False, None, errors=errors, status_code=status_code, **kwargs)

    @classmethod
    def from_api_data(cls, raw: Any, with_data: bool = False,
                      status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> "RSSItemsResponse":
        if not isinstance(raw, Mapping):
            logger.warning(f"RSS payload has unexpected type {type(raw).__name__}")
            return cls.failure([f"Expected an object of RSS items, got {type(raw).__name__}"],
                               status_code=status_code, headers=headers, raw=raw)
        try:
            feed_data: List[Dict[str, Any]] = []
            _collect_feeds(raw, "", with_data, feed_data)
            feeds = RSSFeedCollection.from_array(feed_data)
        except HydrationError as e:
            logger.warning(f"Failed to hydrate RSS items: {e}")
            return cls.failure([str(e)], status_code=status_code, headers=headers, raw=raw)
        return cls.success(feeds, with_data, status_code=status_code, headers=headers, raw=raw)

    def get_feeds(self) -> RSSFeedCollection:
        return self._feeds

    def is_with_data(self) -> bool:
        return self._with_data

    def get_articles(self) -> List[RSSArticle]:
        return self._feeds.reduce(lambda articles, feed: articles + list(feed.articles), [])

    def find_feed_by_url(self, url: str) -> Optional[RSSFeed]:
        return self._feeds.find_by_url(url)

    def find_feeds_by_path(self, path: str) -> RSSFeedCollection:
        return self._feeds.find_by_path(path)

    def get_active_feeds(self) -> RSSFeedCollection:
        return self._feeds.get_active()

    def get_feeds_with_unread_items(self) -> RSSFeedCollection:
        return self._feeds.get_with_unread_items()

    def get_auto_download_feeds(self) -> RSSFeedCollection:
        return self._feeds.get_auto_download_enabled()

    def get_feeds_with_errors(self) -> RSSFeedCollection:
        return self._feeds.get_with_errors()

    def get_all_paths(self) -> List[str]:
        return self._feeds.get_all_paths()

    def get_statistics(self, now: Optional[float] = None) -> Dict[str, Any]:
        stats = self._feeds.get_statistics(now)
        stats.update({
            "with_data": self._with_data,
            "has_feeds": not self._feeds.is_empty(),
            "article_count": len(self.get_articles()),
        })
        return stats

    def _data(self) -> Any:
        return {"feeds": self._feeds.to_array(), "with_data": self._with_data}

    def get_summary(self, now: Optional[float] = None) -> Dict[str, Any]:
        summary = {"success": self._success, "errors": self.get_errors()}
        summary.update(self.get_statistics(now))
        return summary

    def get_formatted_summary(self, now: Optional[float] = None) -> Dict[str, Any]:
        stats = self.get_statistics(now)
        return {
            "feeds": f"{stats['active_feeds']} active of {stats['total_feeds']}",
            "unread": f"{stats['total_unread_items']} unread of {stats['total_items']}",
            "read_percentage": f"{stats['average_read_percentage']:.1f}%",
            "errors": self._feeds.get_all_errors(),
            "folders": self._feeds.get_all_paths(),
        }
