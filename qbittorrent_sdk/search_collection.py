from typing import Any, Dict, Iterable, List, Optional

from .collection import Collection
from .exceptions import HydrationError
from .models import GIB, SearchResult
from .utils import format_bytes


UNKNOWN_SITE = "Unknown site"
UNKNOWN_DOMAIN = "Unknown domain"
UNCATEGORIZED = "Uncategorized"

SIZE_BUCKETS = [
    (GIB, "<1GB"),
    (10 * GIB, "1-10GB"),
    (100 * GIB, "10-100GB"),
]
LARGEST_BUCKET = ">100GB"


def size_bucket(size: int) -> str:
    for limit, label in SIZE_BUCKETS:
        if size < limit:
            return label
    return LARGEST_BUCKET


def health_label(result: SearchResult) -> str:
    if not result.has_seeders():
        return "No seeders"
    if not result.is_healthy():
        return "Unhealthy"
    if result.is_popular():
        return "Popular"
    return "Normal"


class SearchResultCollection(Collection[SearchResult]):
    """Results of a search job, with ranking and grouping helpers."""

    @classmethod
    def from_array(cls, data: Iterable[Any]) -> "SearchResultCollection":
        results = []
        for index, item in enumerate(data):
            try:
                results.append(SearchResult.from_array(item))
            except HydrationError as e:
                raise HydrationError(str(e), index) from e
        return cls(results)

    @classmethod
    def empty(cls) -> "SearchResultCollection":
        return cls()

    def to_array(self) -> List[Dict[str, Any]]:
        return self.map(lambda r: r.to_array())

    # -------------------------------------------------------------------------
    # Lookup and filters
    # -------------------------------------------------------------------------

    def find_by_file_name(self, file_name: str, exact: bool = True) -> "SearchResultCollection":
        if exact:
            return self.filter(lambda r: r.file_name == file_name)
        needle = file_name.lower()
        return self.filter(lambda r: needle in r.file_name.lower())

    def find_by_site_url(self, site_url: str) -> "SearchResultCollection":
        return self.filter(lambda r: r.site_url == site_url)

    def find_by_domain(self, domain: str) -> "SearchResultCollection":
        needle = domain.lower()
        return self.filter(lambda r: bool(r.domain) and needle in r.domain.lower())

    def find_by_category(self, category: str) -> "SearchResultCollection":
        return self.filter(lambda r: r.category == category)

    def filter_by_size(self, min_size: int = 0, max_size: Optional[int] = None) -> "SearchResultCollection":
        return self.filter(lambda r: r.file_size >= min_size and (max_size is None or r.file_size <= max_size))

    def filter_by_min_seeders(self, min_seeders: int) -> "SearchResultCollection":
        return self.filter(lambda r: r.nb_seeders >= min_seeders)

    def filter_by_min_leechers(self, min_leechers: int) -> "SearchResultCollection":
        return self.filter(lambda r: r.nb_leechers >= min_leechers)

    def filter_by_keywords(self, keywords: List[str]) -> "SearchResultCollection":
        return self.filter(lambda r: r.contains_keywords(keywords))

    def filter_by_text(self, text: Optional[str]) -> "SearchResultCollection":
        """Match ``text`` against file name and description link; blank text keeps everything."""
        if text is None or not text.strip():
            return self.filter(lambda r: True)
        return self.filter(lambda r: r.matches_filter(text))

    def get_with_seeders(self) -> "SearchResultCollection":
        return self.filter(lambda r: r.has_seeders())

    def get_healthy(self) -> "SearchResultCollection":
        return self.filter(lambda r: r.is_healthy())

    def get_popular(self) -> "SearchResultCollection":
        return self.filter(lambda r: r.is_popular())

    def get_recent(self, days: int = 7, now: Optional[float] = None) -> "SearchResultCollection":
        return self.filter(lambda r: r.is_recent(days, now))

    def get_large_files(self, min_size_gb: float = 1) -> "SearchResultCollection":
        return self.filter(lambda r: r.is_large(min_size_gb))

    # -------------------------------------------------------------------------
    # Sorting (best first by default)
    # -------------------------------------------------------------------------

    def sort_by_score(self, descending: bool = True) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.score, descending)

    def sort_by_size(self, descending: bool = True) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.file_size, descending)

    def sort_by_seeders(self, descending: bool = True) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.nb_seeders, descending)

    def sort_by_leechers(self, descending: bool = True) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.nb_leechers, descending)

    def sort_by_time(self, descending: bool = True) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.timestamp or 0, descending)

    def sort_by_file_name(self, descending: bool = False) -> "SearchResultCollection":
        return self.sort_by(lambda r: r.formatted_file_name.lower(), descending)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_total_size(self) -> int:
        return self.reduce(lambda total, r: total + r.file_size, 0)

    def get_total_seeders(self) -> int:
        return self.reduce(lambda total, r: total + r.nb_seeders, 0)

    def get_total_leechers(self) -> int:
        return self.reduce(lambda total, r: total + r.nb_leechers, 0)

    def get_average_seeders(self) -> float:
        if self.is_empty():
            return 0.0
        return self.get_total_seeders() / self.count()

    def get_average_leechers(self) -> float:
        if self.is_empty():
            return 0.0
        return self.get_total_leechers() / self.count()

    def get_all_site_urls(self) -> List[str]:
        return sorted(self.filter(lambda r: bool(r.site_url)).reduce(lambda found, r: found | {r.site_url}, set()))

    def get_all_domains(self) -> List[str]:
        return sorted(self.filter(lambda r: bool(r.domain)).reduce(lambda found, r: found | {r.domain}, set()))

    def get_all_categories(self) -> List[str]:
        return sorted(self.filter(lambda r: bool(r.category)).reduce(lambda found, r: found | {r.category}, set()))

    # -------------------------------------------------------------------------
    # Grouping
    # -------------------------------------------------------------------------

    def group_by_site(self) -> Dict[str, "SearchResultCollection"]:
        return self.group_by(lambda r: r.site_url or UNKNOWN_SITE)

    def group_by_domain(self) -> Dict[str, "SearchResultCollection"]:
        return self.group_by(lambda r: r.domain or UNKNOWN_DOMAIN)

    def group_by_category(self) -> Dict[str, "SearchResultCollection"]:
        return self.group_by(lambda r: r.category or UNCATEGORIZED)

    def group_by_size(self) -> Dict[str, "SearchResultCollection"]:
        return self.group_by(lambda r: size_bucket(r.file_size))

    def group_by_health(self) -> Dict[str, "SearchResultCollection"]:
        return self.group_by(health_label)

    def get_statistics(self, now: Optional[float] = None) -> Dict[str, Any]:
        return {
            "total_count": self.count(),
            "with_seeders_count": self.get_with_seeders().count(),
            "healthy_count": self.get_healthy().count(),
            "popular_count": self.get_popular().count(),
            "recent_count": self.get_recent(now=now).count(),
            "large_files_count": self.get_large_files().count(),
            "total_size": self.get_total_size(),
            "total_seeders": self.get_total_seeders(),
            "total_leechers": self.get_total_leechers(),
            "average_seeders": self.get_average_seeders(),
            "average_leechers": self.get_average_leechers(),
            "unique_sites": len(self.get_all_site_urls()),
            "unique_domains": len(self.get_all_domains()),
            "unique_categories": len(self.get_all_categories()),
        }

    def get_formatted_summary(self, now: Optional[float] = None) -> Dict[str, Dict[str, Any]]:
        stats = self.get_statistics(now)
        if stats["total_leechers"] > 0:
            seed_leech_ratio = round(stats["total_seeders"] / stats["total_leechers"], 2)
        else:
            seed_leech_ratio = "∞"
        return {
            "search_summary": {
                "total_results": stats["total_count"],
                "with_seeders": stats["with_seeders_count"],
                "healthy": stats["healthy_count"],
                "popular": stats["popular_count"],
                "recent": stats["recent_count"],
                "large_files": stats["large_files_count"],
            },
            "size_summary": {
                "total_size": format_bytes(stats["total_size"]),
                "average_size": format_bytes(stats["total_size"] / max(stats["total_count"], 1)),
            },
            "peer_summary": {
                "total_seeders": stats["total_seeders"],
                "total_leechers": stats["total_leechers"],
                "average_seeders": round(stats["average_seeders"], 2),
                "average_leechers": round(stats["average_leechers"], 2),
                "seed_leech_ratio": seed_leech_ratio,
            },
            "diversity_summary": {
                "unique_sites": stats["unique_sites"],
                "unique_domains": stats["unique_domains"],
                "unique_categories": stats["unique_categories"],
            },
        }
