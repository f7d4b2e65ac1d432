from typing import Any, Dict, Iterable, List, Optional

from .collection import Collection
from .exceptions import HydrationError
from .models import RSSFeed


ROOT_FOLDER = "Root"
UNKNOWN_ERROR = "Unknown error"


def status_label(feed: RSSFeed, now: Optional[float] = None) -> str:
    if feed.has_error:
        return "Error"
    if not feed.is_active:
        return "Inactive"
    if feed.is_healthy(now):
        return "Healthy"
    return "Other"


class RSSFeedCollection(Collection[RSSFeed]):
    """RSS feeds flattened out of the /rss/items folder tree."""

    @classmethod
    def from_array(cls, data: Iterable[Any]) -> "RSSFeedCollection":
        feeds = []
        for index, item in enumerate(data):
            try:
                feeds.append(RSSFeed.from_array(item))
            except HydrationError as e:
                raise HydrationError(str(e), index) from e
        return cls(feeds)

    @classmethod
    def empty(cls) -> "RSSFeedCollection":
        return cls()

    def to_array(self) -> List[Dict[str, Any]]:
        return self.map(lambda f: f.to_array())

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_by_url(self, url: str) -> Optional[RSSFeed]:
        return self.filter(lambda f: f.url == url).first()

    def find_by_path(self, path: str) -> "RSSFeedCollection":
        return self.filter(lambda f: f.path == path)

    def find_by_title(self, title: str, exact: bool = True) -> "RSSFeedCollection":
        if exact:
            return self.filter(lambda f: f.title == title)
        needle = title.lower()
        return self.filter(lambda f: needle in f.title.lower())

    def has_url(self, url: str) -> bool:
        return self.find_by_url(url) is not None

    # -------------------------------------------------------------------------
    # Subsets
    # -------------------------------------------------------------------------

    def get_active(self) -> "RSSFeedCollection":
        return self.filter(lambda f: f.is_active)

    def get_inactive(self) -> "RSSFeedCollection":
        return self.filter(lambda f: not f.is_active)

    def get_auto_download_enabled(self) -> "RSSFeedCollection":
        return self.filter(lambda f: f.auto_download_enabled)

    def get_with_errors(self) -> "RSSFeedCollection":
        return self.filter(lambda f: f.has_error)

    def get_healthy(self, now: Optional[float] = None) -> "RSSFeedCollection":
        return self.filter(lambda f: f.is_healthy(now))

    def get_due_for_update(self, now: Optional[float] = None) -> "RSSFeedCollection":
        return self.filter(lambda f: f.is_due_for_update(now))

    def get_recently_updated(self, minutes: int = 60, now: Optional[float] = None) -> "RSSFeedCollection":
        return self.filter(lambda f: f.is_recently_updated(minutes, now))

    def get_with_unread_items(self) -> "RSSFeedCollection":
        return self.filter(lambda f: f.has_unread_items())

    def get_with_download_rules(self) -> "RSSFeedCollection":
        return self.filter(lambda f: f.has_download_rules())

    # -------------------------------------------------------------------------
    # Grouping and sorting
    # -------------------------------------------------------------------------

    def group_by_path(self) -> Dict[str, "RSSFeedCollection"]:
        return self.group_by(lambda f: f.path or ROOT_FOLDER)

    def group_by_status(self, now: Optional[float] = None) -> Dict[str, "RSSFeedCollection"]:
        return self.group_by(lambda f: status_label(f, now))

    def sort_by_title(self, descending: bool = False) -> "RSSFeedCollection":
        return self.sort_by(lambda f: f.title.lower(), descending)

    def sort_by_last_update(self, descending: bool = False) -> "RSSFeedCollection":
        return self.sort_by(lambda f: f.last_update or 0, descending)

    def sort_by_unread_count(self, descending: bool = False) -> "RSSFeedCollection":
        return self.sort_by(lambda f: f.unread_count, descending)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_total_unread_count(self) -> int:
        return self.reduce(lambda total, f: total + f.unread_count, 0)

    def get_total_item_count(self) -> int:
        return self.reduce(lambda total, f: total + f.total_items, 0)

    def get_total_read_count(self) -> int:
        return self.reduce(lambda total, f: total + f.read_count, 0)

    def get_average_read_percentage(self) -> float:
        if self.is_empty():
            return 100.0
        return self.reduce(lambda total, f: total + f.read_percentage, 0.0) / self.count()

    def get_all_paths(self) -> List[str]:
        return sorted(self.filter(lambda f: bool(f.path)).reduce(lambda found, f: found | {f.path}, set()))

    def get_all_urls(self) -> List[str]:
        return self.map(lambda f: f.url)

    def get_all_errors(self) -> Dict[str, str]:
        """Map feed URL to error message for every feed reporting an error."""
        return self.get_with_errors().reduce(
            lambda errors, f: {**errors, f.url: f.error_message or UNKNOWN_ERROR}, {}
        )

    def has_any_errors(self) -> bool:
        return self.some(lambda f: f.has_error)

    def needs_update(self, now: Optional[float] = None) -> bool:
        return self.some(lambda f: f.is_due_for_update(now))

    # -------------------------------------------------------------------------
    # Local state updates
    # -------------------------------------------------------------------------

    def set_active_status(self, urls: Iterable[str], active: bool) -> "RSSFeedCollection":
        urls = set(urls)
        for feed in self.filter(lambda f: f.url in urls):
            feed.set_active(active)
        return self

    def set_auto_download_status(self, urls: Iterable[str], enabled: bool) -> "RSSFeedCollection":
        urls = set(urls)
        for feed in self.filter(lambda f: f.url in urls):
            feed.set_auto_download_enabled(enabled)
        return self

    def get_statistics(self, now: Optional[float] = None) -> Dict[str, Any]:
        return {
            "total_feeds": self.count(),
            "active_feeds": self.get_active().count(),
            "inactive_feeds": self.get_inactive().count(),
            "auto_download_feeds": self.get_auto_download_enabled().count(),
            "feeds_with_errors": self.get_with_errors().count(),
            "healthy_feeds": self.get_healthy(now).count(),
            "feeds_due_for_update": self.get_due_for_update(now).count(),
            "recently_updated_feeds": self.get_recently_updated(now=now).count(),
            "feeds_with_unread_items": self.get_with_unread_items().count(),
            "feeds_with_download_rules": self.get_with_download_rules().count(),
            "total_unread_items": self.get_total_unread_count(),
            "total_items": self.get_total_item_count(),
            "total_read_items": self.get_total_read_count(),
            "average_read_percentage": self.get_average_read_percentage(),
            "unique_paths": len(self.get_all_paths()),
        }
