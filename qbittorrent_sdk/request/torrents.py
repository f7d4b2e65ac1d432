"""
Requests for the /torrents endpoints of the qBittorrent Web API.
"""

import re
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from ..enums import TorrentFilter
from ..validation import ValidationResult, check_hash, check_hash_list, check_name, check_range
from .base import Request, RequestBuilder, wire_bool


MAX_HASHES = 1000
ALL = "all"

PATH_FORBIDDEN = '<>"|?*'
CATEGORY_FORBIDDEN = '<>:"|?*\\'
TAG_FORBIDDEN = '<>:"|?*,'
RENAME_FORBIDDEN = '<>:"|?*'
FILENAME_PATTERN = re.compile(r'^[^\\/?%*:|"<>]+$')


def join_hashes(hashes: Iterable[str], select_all: bool = False) -> str:
    return ALL if select_all else "|".join(hashes)


# -------------------------------------------------------------------------
# Listing
# -------------------------------------------------------------------------

class GetTorrentsRequest(Request):
    """GET /torrents/info with optional server-side filtering, sorting and paging."""

    endpoint = "/torrents/info"
    method = "GET"

    MAX_LIMIT = 1000
    ALLOWED_SORT_FIELDS = (
        "hash", "name", "size", "progress", "dlspeed", "upspeed",
        "priority", "num_seeds", "num_leechs", "ratio", "eta",
        "state", "category", "tags", "save_path", "added_on",
        "completion_on", "tracker", "dl_limit", "up_limit",
        "downloaded", "uploaded", "downloaded_session", "uploaded_session",
        "amount_left", "time_active", "seeding_time", "last_activity",
    )

    @classmethod
    def builder(cls) -> "GetTorrentsRequestBuilder":
        return GetTorrentsRequestBuilder()

    @classmethod
    def all(cls) -> "GetTorrentsRequest":
        return cls.builder().build()

    @classmethod
    def with_filter(cls, torrent_filter: TorrentFilter) -> "GetTorrentsRequest":
        return cls.builder().filter(torrent_filter).build()

    @classmethod
    def for_hashes(cls, hashes: Iterable[str]) -> "GetTorrentsRequest":
        return cls.builder().hashes(hashes).build()

    @property
    def filter(self) -> Optional[TorrentFilter]:
        return self._get("filter")

    @property
    def category(self) -> Optional[str]:
        return self._get("category")

    @property
    def tag(self) -> Optional[str]:
        return self._get("tag")

    @property
    def sort(self) -> Optional[str]:
        return self._get("sort")

    @property
    def reverse(self) -> bool:
        return self._get("reverse", False)

    @property
    def limit(self) -> Optional[int]:
        return self._get("limit")

    @property
    def offset(self) -> Optional[int]:
        return self._get("offset")

    @property
    def hashes(self) -> Tuple[str, ...]:
        return self._get("hashes", ())

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if self.sort is not None and self.sort not in self.ALLOWED_SORT_FIELDS:
            result.add_error(f"Invalid sort field: {self.sort}")
        if self.limit is not None and not 0 < self.limit <= self.MAX_LIMIT:
            result.add_error(f"limit must be between 1 and {self.MAX_LIMIT}, got {self.limit}")
        check_range(result, self.offset, "offset", minimum=0)
        for field, value in (("category", self.category), ("tag", self.tag)):
            if value is not None and len(value) > 255:
                result.add_error(f"{field} cannot exceed 255 characters")
        if self.hashes:
            check_hash_list(result, self.hashes, MAX_HASHES)
            if self.filter is not None or self.category is not None or self.tag is not None:
                result.add_warning("hashes combined with filter, category or tag narrows the result further")
        return result

    def to_array(self) -> Dict[str, str]:
        data = {}
        if self.filter is not None:
            data["filter"] = TorrentFilter(self.filter).value
        if self.category is not None:
            data["category"] = self.category
        if self.tag is not None:
            data["tag"] = self.tag
        if self.sort is not None:
            data["sort"] = self.sort
        if self.reverse:
            data["reverse"] = wire_bool(True)
        if self.limit is not None:
            data["limit"] = str(self.limit)
        if self.offset is not None:
            data["offset"] = str(self.offset)
        if self.hashes:
            data["hashes"] = join_hashes(self.hashes)
        return data

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({
            "filter": TorrentFilter(self.filter).value if self.filter is not None else None,
            "category": self.category,
            "tag": self.tag,
            "sort": self.sort,
            "reverse": self.reverse,
            "limit": self.limit,
            "offset": self.offset,
            "hash_count": len(self.hashes),
        })
        return summary


class GetTorrentsRequestBuilder(RequestBuilder[GetTorrentsRequest]):
    request_class = GetTorrentsRequest

    def filter(self, torrent_filter: TorrentFilter):
        return self._set("filter", TorrentFilter(torrent_filter))

    def category(self, category: str):
        return self._set("category", category)

    def tag(self, tag: str):
        return self._set("tag", tag)

    def sort(self, field: str, reverse: bool = False):
        self._set("sort", field)
        return self._set("reverse", reverse)

    def limit(self, limit: int):
        return self._set("limit", limit)

    def offset(self, offset: int):
        return self._set("offset", offset)

    def hashes(self, hashes: Iterable[str]):
        self._fields.pop("hashes", None)
        return self._append("hashes", [h.strip() for h in hashes])

    def add_hash(self, info_hash: str):
        return self._append("hashes", [info_hash.strip()])


# -------------------------------------------------------------------------
# Adding torrents
# -------------------------------------------------------------------------

class TorrentFile(NamedTuple):
    name: str
    content: bytes


class AddTorrentRequest(Request):
    """POST /torrents/add from URLs (http, https, magnet, bc) and/or .torrent files."""

    endpoint = "/torrents/add"

    MAX_URL_LENGTH = 8192
    MAX_FILES = 100
    MAX_FILE_SIZE = 50 * 1024 * 1024
    URL_PREFIXES = ("http://", "https://", "magnet:", "bc://bt/")
    HTTP_URL_PATTERN = re.compile(r'^https?://[^\s/$.?#][^\s]*$', re.IGNORECASE)

    @classmethod
    def builder(cls) -> "AddTorrentRequestBuilder":
        return AddTorrentRequestBuilder()

    @classmethod
    def from_url(cls, url: str, save_path: Optional[str] = None, category: Optional[str] = None) -> "AddTorrentRequest":
        builder = cls.builder().add_url(url)
        if save_path is not None:
            builder.save_path(save_path)
        if category is not None:
            builder.category(category)
        return builder.build()

    @classmethod
    def from_urls(cls, urls: Iterable[str]) -> "AddTorrentRequest":
        return cls.builder().add_urls(urls).build()

    @classmethod
    def from_file(cls, name: str, content: bytes) -> "AddTorrentRequest":
        return cls.builder().add_file(name, content).build()

    @property
    def urls(self) -> Tuple[str, ...]:
        return self._get("urls", ())

    @property
    def torrents(self) -> Tuple[TorrentFile, ...]:
        return self._get("torrents", ())

    @property
    def tags(self) -> Tuple[str, ...]:
        return self._get("tags", ())

    def option(self, name: str) -> Any:
        return self._get(name)

    def _validate_urls(self, result: ValidationResult) -> None:
        for url in self.urls:
            if not url.strip():
                result.add_error("URL cannot be empty")
            elif len(url) > self.MAX_URL_LENGTH:
                result.add_error(f"URL cannot exceed {self.MAX_URL_LENGTH} characters")
            elif not url.startswith(self.URL_PREFIXES):
                result.add_error(f"Unsupported URL: {url}")
            elif url.startswith(("http://", "https://")) and not self.HTTP_URL_PATTERN.match(url):
                result.add_error(f"Invalid URL: {url}")

    def _validate_files(self, result: ValidationResult) -> None:
        if len(self.torrents) > self.MAX_FILES:
            result.add_error(f"Cannot upload more than {self.MAX_FILES} torrent files")
            return
        for torrent in self.torrents:
            if not torrent.name or torrent.content is None:
                result.add_error("Torrent file needs both a name and content")
            elif len(torrent.content) > self.MAX_FILE_SIZE:
                result.add_error(f"Torrent file {torrent.name} exceeds {self.MAX_FILE_SIZE // (1024 * 1024)}MB")
            elif not FILENAME_PATTERN.match(torrent.name):
                result.add_error(f"Invalid torrent file name: {torrent.name}")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if not self.urls and not self.torrents:
            result.add_error("At least one URL or torrent file is required")
        self._validate_urls(result)
        self._validate_files(result)

        check_name(result, self.option("savepath"), "savepath", 4096, PATH_FORBIDDEN)
        check_name(result, self.option("category"), "category", 255, CATEGORY_FORBIDDEN)
        for tag in self.tags:
            check_name(result, tag, f"tag '{tag}'", 255, TAG_FORBIDDEN)
        check_name(result, self.option("rename"), "rename", 255, RENAME_FORBIDDEN)
        for field in ("category", "rename"):
            if self.option(field) and ".." in self.option(field):
                result.add_error(f"{field} cannot contain '..'")

        for field in ("dl_limit", "up_limit"):
            value = self.option(field)
            check_range(result, value, field, minimum=-1)
            if value is not None and value > 1000000:
                result.add_warning(f"{field} of {value} is unusually high")
        ratio_limit = self.option("ratio_limit")
        check_range(result, ratio_limit, "ratio_limit", minimum=-2)
        if ratio_limit is not None and ratio_limit > 1000:
            result.add_warning(f"ratio_limit of {ratio_limit} is unusually high")
        check_range(result, self.option("seeding_time_limit"), "seeding_time_limit", minimum=-2)
        check_range(result, self.option("max_connections"), "max_connections", minimum=-1, maximum=10000)
        check_range(result, self.option("max_upload_slots"), "max_upload_slots", minimum=-1, maximum=1000)
        return result

    def to_array(self) -> Dict[str, str]:
        data = {}
        if self.urls:
            data["urls"] = "\n".join(self.urls)
        if self.tags:
            data["tags"] = ",".join(self.tags)
        for field, key in (("savepath", "savepath"), ("category", "category"), ("rename", "rename")):
            if self.option(field) is not None:
                data[key] = self.option(field)
        for field, key in (
            ("skip_checking", "skip_checking"),
            ("paused", "paused"),
            ("root_folder", "root_folder"),
            ("auto_tmm", "autoTMM"),
            ("sequential_download", "sequentialDownload"),
            ("first_last_piece_prio", "firstLastPiecePrio"),
        ):
            if self.option(field) is not None:
                data[key] = wire_bool(self.option(field))
        for field, key in (
            ("dl_limit", "dlLimit"),
            ("up_limit", "upLimit"),
            ("ratio_limit", "ratioLimit"),
            ("seeding_time_limit", "seedingTimeLimit"),
            ("max_connections", "max_connections"),
            ("max_upload_slots", "max_upload_slots"),
        ):
            if self.option(field) is not None:
                data[key] = str(self.option(field))
        return data

    def files(self) -> Optional[List[Tuple[str, Tuple[str, bytes, str]]]]:
        if not self.torrents:
            return None
        return [("torrents", (t.name, t.content, "application/x-bittorrent")) for t in self.torrents]

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({
            "url_count": len(self.urls),
            "file_count": len(self.torrents),
            "savepath": self.option("savepath"),
            "category": self.option("category"),
            "tags": list(self.tags),
            "paused": bool(self.option("paused")),
        })
        return summary


class AddTorrentRequestBuilder(RequestBuilder[AddTorrentRequest]):
    request_class = AddTorrentRequest

    def missing_fields(self) -> List[str]:
        if self._is_missing(self._fields.get("urls")) and self._is_missing(self._fields.get("torrents")):
            return ["urls"]
        return []

    def add_url(self, url: str):
        return self._append("urls", [url.strip()])

    def add_urls(self, urls: Iterable[str]):
        return self._append("urls", [url.strip() for url in urls])

    def add_file(self, name: str, content: bytes):
        return self._append("torrents", [TorrentFile(name, content)])

    def save_path(self, path: str):
        return self._set("savepath", path)

    def category(self, category: str):
        return self._set("category", category)

    def tags(self, tags: Iterable[str]):
        return self._set("tags", list(tags))

    def add_tag(self, tag: str):
        return self._append("tags", [tag])

    def skip_checking(self, skip: bool = True):
        return self._set("skip_checking", skip)

    def paused(self, paused: bool = True):
        return self._set("paused", paused)

    def root_folder(self, create: bool = True):
        return self._set("root_folder", create)

    def rename(self, name: str):
        return self._set("rename", name)

    def dl_limit(self, bytes_per_second: int):
        return self._set("dl_limit", bytes_per_second)

    def up_limit(self, bytes_per_second: int):
        return self._set("up_limit", bytes_per_second)

    def ratio_limit(self, ratio: float):
        return self._set("ratio_limit", ratio)

    def seeding_time_limit(self, minutes: int):
        return self._set("seeding_time_limit", minutes)

    def auto_tmm(self, enabled: bool = True):
        return self._set("auto_tmm", enabled)

    def sequential_download(self, enabled: bool = True):
        return self._set("sequential_download", enabled)

    def first_last_piece_prio(self, enabled: bool = True):
        return self._set("first_last_piece_prio", enabled)

    def max_connections(self, count: int):
        return self._set("max_connections", count)

    def max_upload_slots(self, count: int):
        return self._set("max_upload_slots", count)


# -------------------------------------------------------------------------
# Trackers
# -------------------------------------------------------------------------

class AddTrackersRequest(Request):
    """POST /torrents/addTrackers for a single torrent."""

    endpoint = "/torrents/addTrackers"

    MAX_URLS = 100
    MAX_URL_LENGTH = 2048
    ALLOWED_SCHEMES = ("http", "https", "udp")
    TRACKER_URL_PATTERN = re.compile(r'^(http|https|udp)://[a-zA-Z0-9.-]+(:\d+)?/.*$')

    @classmethod
    def builder(cls) -> "AddTrackersRequestBuilder":
        return AddTrackersRequestBuilder()

    @classmethod
    def for_torrent(cls, info_hash: str, urls: Iterable[str]) -> "AddTrackersRequest":
        return cls.builder().hash(info_hash).add_urls(urls).build()

    @property
    def hash(self) -> str:
        return self._get("hash", "")

    @property
    def urls(self) -> Tuple[str, ...]:
        return self._get("urls", ())

    def _check_url(self, result: ValidationResult, url: str) -> None:
        scheme = url.split("://", 1)[0].lower() if "://" in url else ""
        if not url:
            result.add_error("Tracker URL cannot be empty")
        elif len(url) > self.MAX_URL_LENGTH:
            result.add_error(f"Tracker URL cannot exceed {self.MAX_URL_LENGTH} characters")
        elif scheme not in self.ALLOWED_SCHEMES:
            result.add_error(f"Tracker URL must use one of {', '.join(self.ALLOWED_SCHEMES)}: {url}")
        elif not self.TRACKER_URL_PATTERN.match(url):
            result.add_error(f"Invalid tracker URL: {url}")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        check_hash(result, self.hash)
        if not self.urls:
            result.add_error("At least one tracker URL is required")
        elif len(self.urls) > self.MAX_URLS:
            result.add_error(f"Cannot add more than {self.MAX_URLS} trackers at once")
        for url in self.urls:
            self._check_url(result, url)
        return result

    def to_array(self) -> Dict[str, str]:
        return {"hash": self.hash, "urls": "\n".join(self.urls)}

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({"hash": self.hash, "url_count": len(self.urls), "urls": list(self.urls)})
        return summary


class AddTrackersRequestBuilder(RequestBuilder[AddTrackersRequest]):
    request_class = AddTrackersRequest
    required_fields = ("hash", "urls")

    def hash(self, info_hash: str):
        return self._set("hash", info_hash.strip())

    def add_url(self, url: str):
        url = url.strip()
        if not url:
            return self
        return self._append("urls", [url])

    def add_urls(self, urls: Iterable[str]):
        for url in urls:
            self.add_url(url)
        return self

    def urls(self, urls: Iterable[str]):
        self.clear_urls()
        return self.add_urls(urls)

    def clear_urls(self):
        self._fields.pop("urls", None)
        return self


# -------------------------------------------------------------------------
# Bulk actions on hashes
# -------------------------------------------------------------------------

class _HashesRequest(Request):
    """Targets either a list of hashes or every torrent."""

    @property
    def hashes(self) -> Tuple[str, ...]:
        return self._get("hashes", ())

    @property
    def select_all(self) -> bool:
        return self._get("select_all", False)

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if not self.select_all:
            if not self.hashes:
                result.add_error("hashes cannot be empty")
            else:
                check_hash_list(result, self.hashes, MAX_HASHES)
        return result

    def to_array(self) -> Dict[str, str]:
        return {"hashes": join_hashes(self.hashes, self.select_all)}

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({"all": self.select_all, "hash_count": len(self.hashes)})
        return summary


class _HashesRequestBuilder(RequestBuilder):
    required_fields = ("hashes",)

    def missing_fields(self) -> List[str]:
        if self._fields.get("select_all"):
            return []
        return super().missing_fields()

    def add_hash(self, info_hash: str):
        return self._append("hashes", [info_hash.strip()])

    def add_hashes(self, hashes: Iterable[str]):
        return self._append("hashes", [h.strip() for h in hashes])

    def hashes(self, hashes: Iterable[str]):
        self._fields.pop("hashes", None)
        return self.add_hashes(hashes)

    def all(self, select_all: bool = True):
        return self._set("select_all", select_all)


class DeleteTorrentsRequest(_HashesRequest):
    """POST /torrents/delete, optionally removing downloaded data."""

    endpoint = "/torrents/delete"

    @classmethod
    def builder(cls) -> "DeleteTorrentsRequestBuilder":
        return DeleteTorrentsRequestBuilder()

    @classmethod
    def for_hashes(cls, hashes: Iterable[str], delete_files: bool = False) -> "DeleteTorrentsRequest":
        return cls.builder().add_hashes(hashes).delete_files(delete_files).build()

    @classmethod
    def delete_all(cls, delete_files: bool = False) -> "DeleteTorrentsRequest":
        return cls.builder().all().delete_files(delete_files).build()

    @property
    def delete_files(self) -> bool:
        return self._get("delete_files", False)

    def validate(self) -> ValidationResult:
        result = super().validate()
        if self.select_all:
            if self.delete_files:
                result.add_warning("Deleting every torrent and its data cannot be undone")
            else:
                result.add_warning("Deleting every torrent")
        elif len(self.hashes) > 1:
            if self.delete_files:
                result.add_warning(f"Deleting {len(self.hashes)} torrents and their data cannot be undone")
            else:
                result.add_warning(f"Deleting {len(self.hashes)} torrents")
        return result

    def to_array(self) -> Dict[str, str]:
        data = super().to_array()
        if self.delete_files:
            data["deleteFiles"] = wire_bool(True)
        return data

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary["delete_files"] = self.delete_files
        return summary


class DeleteTorrentsRequestBuilder(_HashesRequestBuilder):
    request_class = DeleteTorrentsRequest

    def delete_files(self, delete: bool = True):
        return self._set("delete_files", delete)

    def delete_all(self, delete_all: bool = True):
        return self.all(delete_all)


class PauseTorrentsRequest(_HashesRequest):
    """POST /torrents/stop (named pause before qBittorrent 5)."""

    endpoint = "/torrents/stop"

    @classmethod
    def builder(cls) -> "PauseTorrentsRequestBuilder":
        return PauseTorrentsRequestBuilder()

    @classmethod
    def for_hashes(cls, hashes: Iterable[str]) -> "PauseTorrentsRequest":
        return cls.builder().add_hashes(hashes).build()

    @classmethod
    def pause_all(cls) -> "PauseTorrentsRequest":
        return cls.builder().all().build()


class PauseTorrentsRequestBuilder(_HashesRequestBuilder):
    request_class = PauseTorrentsRequest


class ResumeTorrentsRequest(_HashesRequest):
    """POST /torrents/start (named resume before qBittorrent 5)."""

    endpoint = "/torrents/start"

    @classmethod
    def builder(cls) -> "ResumeTorrentsRequestBuilder":
        return ResumeTorrentsRequestBuilder()

    @classmethod
    def for_hashes(cls, hashes: Iterable[str]) -> "ResumeTorrentsRequest":
        return cls.builder().add_hashes(hashes).build()

    @classmethod
    def resume_all(cls) -> "ResumeTorrentsRequest":
        return cls.builder().all().build()


class ResumeTorrentsRequestBuilder(_HashesRequestBuilder):
    request_class = ResumeTorrentsRequest
