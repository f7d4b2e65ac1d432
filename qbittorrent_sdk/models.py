"""
Typed models hydrated from qBittorrent Web API payloads.

Attributes use snake_case names; the Web API's own keys are accepted as
aliases and written back by to_array(), so raw data survives a round trip.
Models are read-only except for the fields a subclass lists in
MUTABLE_FIELDS, which hold local cache state (read flags, unread counts).
"""

import re
import time
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .enums import TorrentState
from .exceptions import HydrationError
from .utils import format_bytes, format_duration, format_speed


# qBittorrent reports 8640000 (100 days) as the ETA of torrents that will not finish
ETA_INFINITY = 8640000

GIB = 1073741824


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", validate_assignment=True)

    MUTABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self.MUTABLE_FIELDS:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    @classmethod
    def from_array(cls, data: Any):
        """
        Hydrate a model from raw API data.

        Raises:
            HydrationError: If ``data`` is not a mapping or a field has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise HydrationError(f"expected an object for {cls.__name__}, got {type(data).__name__}")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or cls.__name__
            raise HydrationError(f"invalid {cls.__name__} field '{location}': {first['msg']}") from e

    def derived_fields(self) -> Dict[str, Any]:
        return {}

    def to_array(self) -> Dict[str, Any]:
        """Raw API keys plus derived fields; derived fields never replace raw keys."""
        data = self.model_dump(by_alias=True)
        for key, value in self.derived_fields().items():
            data.setdefault(key, value)
        return data


def _now(now: Optional[float]) -> float:
    return time.time() if now is None else now


# -------------------------------------------------------------------------
# Torrents
# -------------------------------------------------------------------------

class TorrentInfo(ApiModel):
    """One entry of /torrents/info."""

    hash: str = ""
    name: str = ""
    size: int = 0
    total_size: int = 0
    progress: float = 0.0
    state: str = TorrentState.UNKNOWN.value
    priority: int = 0
    added_on: int = 0
    completion_on: Optional[int] = None
    seen_complete: Optional[int] = None

    download_speed: int = Field(0, alias="dlspeed")
    upload_speed: int = Field(0, alias="upspeed")
    dl_limit: int = -1
    up_limit: int = -1
    eta: int = -1
    force_start: bool = False

    num_seeds: int = 0
    num_leechs: int = 0
    num_complete: int = -1
    num_incomplete: int = -1

    tracker: str = ""
    ratio: float = 0.0
    max_ratio: float = -1.0
    ratio_limit: float = -1.0
    seeding_time_limit: int = -1
    seeding_time: int = 0
    auto_tmm: bool = False
    super_seeding: bool = False

    save_path: str = ""
    content_path: str = ""
    category: str = ""
    tags: str = ""

    downloaded: int = 0
    uploaded: int = 0
    downloaded_session: int = 0
    uploaded_session: int = 0
    amount_left: int = 0
    time_active: int = 0
    last_activity: int = 0

    seq_dl: bool = False
    f_l_piece_prio: bool = False
    magnet_uri: str = ""
    reannounce: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _default_size_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            size = data.get("size", 0)
            data.setdefault("total_size", size)
            data.setdefault("amount_left", size)
        return data

    @property
    def torrent_state(self) -> TorrentState:
        return TorrentState.from_string(self.state)

    @property
    def state_display_name(self) -> str:
        return self.torrent_state.display_name

    @property
    def progress_percentage(self) -> int:
        return int(round(self.progress * 100))

    @property
    def tag_list(self) -> List[str]:
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    def has_tag(self, tag: str) -> bool:
        return tag in self.tag_list

    def has_category(self) -> bool:
        return bool(self.category)

    def is_active(self) -> bool:
        return self.torrent_state.is_active()

    def is_completed(self) -> bool:
        return self.torrent_state.is_completed()

    def is_downloading(self) -> bool:
        return self.torrent_state.is_downloading()

    def is_uploading(self) -> bool:
        return self.torrent_state.is_uploading()

    def is_paused(self) -> bool:
        return self.torrent_state.is_paused()

    def is_queued(self) -> bool:
        return self.torrent_state.is_queued()

    def is_checking(self) -> bool:
        return self.torrent_state.is_checking()

    def is_stalled(self) -> bool:
        return self.torrent_state.is_stalled()

    def has_error(self) -> bool:
        return self.torrent_state.is_error()

    def has_activity(self) -> bool:
        return self.download_speed > 0 or self.upload_speed > 0

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.size)

    @property
    def formatted_download_speed(self) -> str:
        return format_speed(self.download_speed)

    @property
    def formatted_upload_speed(self) -> str:
        return format_speed(self.upload_speed)

    @property
    def formatted_ratio(self) -> str:
        return f"{self.ratio:.2f}"

    @property
    def formatted_eta(self) -> str:
        if self.eta < 0 or self.eta >= ETA_INFINITY:
            return "∞"
        return format_duration(self.eta)

    def derived_fields(self) -> Dict[str, Any]:
        return {
            "progress_percentage": self.progress_percentage,
            "state_display_name": self.state_display_name,
            "formatted_size": self.formatted_size,
            "formatted_download_speed": self.formatted_download_speed,
            "formatted_upload_speed": self.formatted_upload_speed,
            "formatted_ratio": self.formatted_ratio,
            "formatted_eta": self.formatted_eta,
            "is_active": self.is_active(),
            "is_completed": self.is_completed(),
            "is_downloading": self.is_downloading(),
            "is_uploading": self.is_uploading(),
            "is_paused": self.is_paused(),
            "is_queued": self.is_queued(),
            "is_stalled": self.is_stalled(),
            "has_error": self.has_error(),
        }


# -------------------------------------------------------------------------
# Search
# -------------------------------------------------------------------------

class SearchResult(ApiModel):
    """One entry of /search/results."""

    descr_link: str = Field("", alias="descrLink")
    file_name: str = Field("", alias="fileName")
    file_size: int = Field(0, alias="fileSize")
    file_url: str = Field("", alias="fileUrl")
    nb_leechers: int = Field(0, alias="nbLeechers")
    nb_seeders: int = Field(0, alias="nbSeeders")
    site_url: str = Field("", alias="siteUrl")
    engine_name: Optional[str] = Field(None, alias="engineName")
    pub_date: Optional[int] = Field(None, alias="pubDate")

    category: Optional[str] = None
    hash: Optional[str] = None
    ratio: Optional[float] = None
    added_time: Optional[int] = Field(None, alias="addedTime")
    magnet_uri: Optional[str] = Field(None, alias="magnetUri")
    is_trusted: bool = Field(False, alias="isTrusted")
    is_verified: bool = Field(False, alias="isVerified")
    relevance: int = 0

    @property
    def domain(self) -> str:
        return urlparse(self.site_url).hostname or ""

    @property
    def timestamp(self) -> Optional[int]:
        return self.added_time if self.added_time is not None else self.pub_date

    def age(self, now: Optional[float] = None) -> Optional[float]:
        if self.timestamp is None:
            return None
        return _now(now) - self.timestamp

    def has_seeders(self) -> bool:
        return self.nb_seeders > 0

    def has_leechers(self) -> bool:
        return self.nb_leechers > 0

    def has_peers(self) -> bool:
        return self.has_seeders() or self.has_leechers()

    def is_healthy(self) -> bool:
        return self.has_seeders() and (self.ratio is None or self.ratio >= 0.5)

    def is_popular(self) -> bool:
        return self.peer_count >= 100

    def is_recent(self, days: int = 7, now: Optional[float] = None) -> bool:
        age = self.age(now)
        return age is not None and age < days * 86400

    def is_large(self, min_size_gb: float = 1) -> bool:
        return self.file_size >= min_size_gb * GIB

    def contains_keywords(self, keywords: List[str]) -> bool:
        text = self.file_name.lower()
        return any(keyword.lower() in text for keyword in keywords)

    def matches_filter(self, text: Optional[str]) -> bool:
        if text is None or not text.strip():
            return True
        haystack = f"{self.file_name} {self.descr_link}".lower()
        return text.lower() in haystack

    @property
    def peer_count(self) -> int:
        return self.nb_seeders + self.nb_leechers

    @property
    def seed_leech_ratio(self) -> float:
        if self.nb_leechers <= 0:
            return 999.9 if self.nb_seeders > 0 else 0.0
        return round(self.nb_seeders / self.nb_leechers, 2)

    @property
    def score(self) -> int:
        score = 0
        if self.has_seeders():
            score += min(self.nb_seeders * 10, 500)
        if self.is_healthy():
            score += 100
        if self.is_trusted:
            score += 50
        if self.is_verified:
            score += 30
        score += self.relevance * 20
        # between 100 MB and 10 GB
        if 104857600 < self.file_size < 10737418240:
            score += 20
        return score

    @property
    def rank(self) -> str:
        score = self.score
        if score >= 500:
            return "Excellent"
        if score >= 300:
            return "Good"
        if score >= 150:
            return "Fair"
        if score >= 50:
            return "Poor"
        return "Bad"

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.file_size)

    @property
    def formatted_file_name(self) -> str:
        name = re.sub(r"\[(.*?)\]", "", self.file_name)
        return re.sub(r"\s+", " ", name).strip()

    def derived_fields(self) -> Dict[str, Any]:
        return {
            "formatted_size": self.formatted_size,
            "formatted_file_name": self.formatted_file_name,
            "peer_count": self.peer_count,
            "seed_leech_ratio": self.seed_leech_ratio,
            "score": self.score,
            "rank": self.rank,
            "is_healthy": self.is_healthy(),
            "is_popular": self.is_popular(),
        }


# -------------------------------------------------------------------------
# RSS
# -------------------------------------------------------------------------

class RSSArticle(ApiModel):
    """An article inside an RSS feed, as returned by /rss/items?withData=true."""

    MUTABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"is_read"})

    id: str = ""
    title: str = ""
    description: str = ""
    link: str = ""
    author: str = ""
    date: str = ""
    torrent_url: Optional[str] = Field(None, alias="torrentURL")
    is_read: bool = Field(False, alias="isRead")

    def mark_as_read(self) -> None:
        self.is_read = True

    def mark_as_unread(self) -> None:
        self.is_read = False


class RSSFeed(ApiModel):
    """An RSS feed; ``path`` is its location in the feed folder tree."""

    MUTABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "is_active", "auto_download_enabled", "unread_count", "has_error", "error_message",
    })

    url: str = ""
    title: str = ""
    description: str = ""
    link: str = ""
    name: str = ""
    path: str = ""
    uid: Optional[str] = None

    auto_download_enabled: bool = Field(False, alias="autoDownloadEnabled")
    is_active: bool = Field(True, alias="isActive")
    is_loading: bool = Field(False, alias="isLoading")
    update_interval: Optional[int] = Field(None, alias="updateInterval")
    last_update: Optional[int] = Field(None, alias="lastUpdate")
    next_update: Optional[int] = Field(None, alias="nextUpdate")

    has_error: bool = Field(False, alias="hasError")
    error_message: Optional[str] = Field(None, alias="errorMessage")
    unread_count: int = Field(0, alias="unreadCount")
    total_items: int = Field(0, alias="totalItems")

    download_rules: Dict[str, Any] = Field(default_factory=dict, alias="downloadRules")
    save_path: Optional[str] = Field(None, alias="savePath")
    articles: List[RSSArticle] = Field(default_factory=list)

    @property
    def item_path(self) -> str:
        """Path used by the rss endpoints, folders separated by a backslash."""
        name = self.name or self.title
        return f"{self.path}\\{name}" if self.path else name

    # -------------------------------------------------------------------------
    # Local cache state
    # -------------------------------------------------------------------------

    def set_active(self, active: bool) -> None:
        self.is_active = active

    def set_auto_download_enabled(self, enabled: bool) -> None:
        self.auto_download_enabled = enabled

    def set_unread_count(self, count: int) -> None:
        self.unread_count = max(0, count)

    def increment_unread_count(self) -> None:
        self.unread_count = self.unread_count + 1

    def decrement_unread_count(self) -> None:
        self.unread_count = max(0, self.unread_count - 1)

    def set_error(self, message: Optional[str] = None) -> None:
        self.has_error = message is not None
        self.error_message = message

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    def is_due_for_update(self, now: Optional[float] = None) -> bool:
        if self.next_update is None:
            return False
        return _now(now) >= self.next_update

    def is_recently_updated(self, minutes: int = 60, now: Optional[float] = None) -> bool:
        if self.last_update is None:
            return False
        return _now(now) - self.last_update < minutes * 60

    def has_unread_items(self) -> bool:
        return self.unread_count > 0

    @property
    def read_count(self) -> int:
        return max(0, self.total_items - self.unread_count)

    @property
    def read_percentage(self) -> float:
        if self.total_items == 0:
            return 100.0
        return self.read_count / self.total_items * 100

    def is_healthy(self, now: Optional[float] = None) -> bool:
        """Active, without errors and updated during the last 24 hours."""
        return self.is_active and not self.has_error and self.is_recently_updated(1440, now)

    def has_download_rules(self) -> bool:
        return bool(self.download_rules)

    def matches_download_rules(self, title: str, description: str = "") -> bool:
        if not self.auto_download_enabled or not self.download_rules:
            return False
        text = f"{title} {description}".lower()
        for rule in self.download_rules.values():
            if not isinstance(rule, Mapping) or "mustContain" not in rule:
                continue
            keywords = rule["mustContain"]
            if isinstance(keywords, str):
                keywords = [keywords]
            if any(keyword.lower() in text for keyword in keywords):
                return True
        return False

    def derived_fields(self) -> Dict[str, Any]:
        return {
            "read_count": self.read_count,
            "read_percentage": self.read_percentage,
            "has_unread_items": self.has_unread_items(),
            "has_download_rules": self.has_download_rules(),
        }
