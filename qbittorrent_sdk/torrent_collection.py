"""
Query helpers over a list of torrents returned by /torrents/info.

Usage:
    from qbittorrent_sdk import TorrentCollection

    torrents = TorrentCollection.from_array(raw_torrents)
    nearly_done = torrents.get_downloading().sort_by_progress(descending=True).take(5)
    print(torrents.get_statistics())
"""

import operator
from typing import Any, Callable, Dict, Iterable, List, Optional

from .collection import Collection
from .enums import TorrentSortField, TorrentState
from .exceptions import HydrationError, InvalidArgumentError
from .models import TorrentInfo


UNCATEGORIZED = "Uncategorized"

PRIORITY_OPERATORS = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}

SORT_ACCESSORS: Dict[TorrentSortField, Callable[[TorrentInfo], Any]] = {
    TorrentSortField.NAME: lambda t: t.name.lower(),
    TorrentSortField.SIZE: lambda t: t.size,
    TorrentSortField.PROGRESS: lambda t: t.progress,
    TorrentSortField.DOWNLOAD_SPEED: lambda t: t.download_speed,
    TorrentSortField.UPLOAD_SPEED: lambda t: t.upload_speed,
    TorrentSortField.ADDED_ON: lambda t: t.added_on,
    TorrentSortField.RATIO: lambda t: t.ratio,
    TorrentSortField.PRIORITY: lambda t: t.priority,
    TorrentSortField.ETA: lambda t: t.eta,
}


class TorrentCollection(Collection[TorrentInfo]):
    @classmethod
    def from_array(cls, data: Iterable[Any]) -> "TorrentCollection":
        """
        Hydrate every element of ``data``; any malformed element fails the whole batch.

        Raises:
            HydrationError: On the first element that cannot be hydrated.
        """
        torrents = []
        for index, item in enumerate(data):
            try:
                torrents.append(TorrentInfo.from_array(item))
            except HydrationError as e:
                raise HydrationError(str(e), index) from e
        return cls(torrents)

    @classmethod
    def empty(cls) -> "TorrentCollection":
        return cls()

    def to_array(self) -> List[Dict[str, Any]]:
        return self.map(lambda t: t.to_array())

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_by_hash(self, torrent_hash: str) -> Optional[TorrentInfo]:
        return self.filter(lambda t: t.hash.lower() == torrent_hash.lower()).first()

    def find_by_name(self, name: str, exact: bool = True) -> "TorrentCollection":
        if exact:
            return self.filter(lambda t: t.name == name)
        needle = name.lower()
        return self.filter(lambda t: needle in t.name.lower())

    def has_hash(self, torrent_hash: str) -> bool:
        return self.find_by_hash(torrent_hash) is not None

    # -------------------------------------------------------------------------
    # Category and tag filters
    # -------------------------------------------------------------------------

    def filter_by_category(self, category: str, include_empty: bool = False) -> "TorrentCollection":
        return self.filter(lambda t: t.category == category or (include_empty and not t.category))

    def filter_by_tag(self, tag: str) -> "TorrentCollection":
        return self.filter(lambda t: t.has_tag(tag))

    def filter_by_tags(self, tags: List[str]) -> "TorrentCollection":
        """Torrents carrying at least one of ``tags``."""
        return self.filter(lambda t: any(t.has_tag(tag) for tag in tags))

    def filter_by_all_tags(self, tags: List[str]) -> "TorrentCollection":
        return self.filter(lambda t: all(t.has_tag(tag) for tag in tags))

    # -------------------------------------------------------------------------
    # State filters
    # -------------------------------------------------------------------------

    def get_active(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_active())

    def get_completed(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_completed())

    def get_downloading(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_downloading())

    def get_uploading(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_uploading())

    def get_paused(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_paused())

    def get_stalled(self) -> "TorrentCollection":
        return self.filter(lambda t: t.is_stalled())

    def get_errored(self) -> "TorrentCollection":
        return self.filter(lambda t: t.has_error())

    def filter_by_state(self, state: TorrentState) -> "TorrentCollection":
        return self.filter(lambda t: t.torrent_state == state)

    def filter_by_states(self, states: Iterable[TorrentState]) -> "TorrentCollection":
        states = set(states)
        return self.filter(lambda t: t.torrent_state in states)

    # -------------------------------------------------------------------------
    # Numeric filters
    # -------------------------------------------------------------------------

    def filter_by_progress(self, min_progress: float = 0.0, max_progress: float = 1.0) -> "TorrentCollection":
        return self.filter(lambda t: min_progress <= t.progress <= max_progress)

    def filter_by_size(self, min_size: int = 0, max_size: Optional[int] = None) -> "TorrentCollection":
        return self.filter(lambda t: t.size >= min_size and (max_size is None or t.size <= max_size))

    def filter_by_download_speed(self, min_speed: int = 0) -> "TorrentCollection":
        return self.filter(lambda t: t.download_speed >= min_speed)

    def filter_by_upload_speed(self, min_speed: int = 0) -> "TorrentCollection":
        return self.filter(lambda t: t.upload_speed >= min_speed)

    def filter_by_priority(self, priority: int, op: str = "=") -> "TorrentCollection":
        if op not in PRIORITY_OPERATORS:
            raise InvalidArgumentError(f"Unsupported priority operator: {op!r}", "op")
        compare = PRIORITY_OPERATORS[op]
        return self.filter(lambda t: compare(t.priority, priority))

    def filter_by_added_time(self, min_time: int = 0, max_time: Optional[int] = None) -> "TorrentCollection":
        return self.filter(lambda t: t.added_on >= min_time and (max_time is None or t.added_on <= max_time))

    # -------------------------------------------------------------------------
    # Sorting
    # -------------------------------------------------------------------------

    def sort_by_field(self, field: TorrentSortField, descending: bool = False) -> "TorrentCollection":
        try:
            accessor = SORT_ACCESSORS[TorrentSortField(field)]
        except ValueError:
            raise InvalidArgumentError(f"Unsupported sort field: {field!r}", "field") from None
        return self.sort_by(accessor, descending)

    def sort_by_progress(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.PROGRESS, descending)

    def sort_by_size(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.SIZE, descending)

    def sort_by_download_speed(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.DOWNLOAD_SPEED, descending)

    def sort_by_upload_speed(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.UPLOAD_SPEED, descending)

    def sort_by_added_time(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.ADDED_ON, descending)

    def sort_by_name(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.NAME, descending)

    def sort_by_ratio(self, descending: bool = False) -> "TorrentCollection":
        return self.sort_by_field(TorrentSortField.RATIO, descending)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_total_size(self) -> int:
        return self.reduce(lambda total, t: total + t.size, 0)

    def get_total_download_speed(self) -> int:
        return self.reduce(lambda total, t: total + t.download_speed, 0)

    def get_total_upload_speed(self) -> int:
        return self.reduce(lambda total, t: total + t.upload_speed, 0)

    def get_average_progress(self) -> float:
        if self.is_empty():
            return 0.0
        return self.reduce(lambda total, t: total + t.progress, 0.0) / self.count()

    def get_average_ratio(self) -> float:
        if self.is_empty():
            return 0.0
        return self.reduce(lambda total, t: total + t.ratio, 0.0) / self.count()

    def get_all_categories(self) -> List[str]:
        categories = self.filter(lambda t: t.has_category()).reduce(
            lambda found, t: found | {t.category}, set()
        )
        return sorted(categories)

    def get_all_tags(self) -> List[str]:
        return sorted(self.reduce(lambda found, t: found | set(t.tag_list), set()))

    # -------------------------------------------------------------------------
    # Grouping
    # -------------------------------------------------------------------------

    def group_by_category(self) -> Dict[str, "TorrentCollection"]:
        return self.group_by(lambda t: t.category or UNCATEGORIZED)

    def group_by_state(self) -> Dict[str, "TorrentCollection"]:
        return self.group_by(lambda t: t.state_display_name)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_count": self.count(),
            "active_count": self.get_active().count(),
            "completed_count": self.get_completed().count(),
            "downloading_count": self.get_downloading().count(),
            "uploading_count": self.get_uploading().count(),
            "paused_count": self.get_paused().count(),
            "stalled_count": self.get_stalled().count(),
            "errored_count": self.get_errored().count(),
            "total_size": self.get_total_size(),
            "total_download_speed": self.get_total_download_speed(),
            "total_upload_speed": self.get_total_upload_speed(),
            "average_progress": self.get_average_progress(),
            "average_ratio": self.get_average_ratio(),
            "categories": self.get_all_categories(),
            "tags": self.get_all_tags(),
        }
