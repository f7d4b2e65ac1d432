"""
Requests for the /search endpoints.
"""

from typing import Any, Dict, Iterable, Optional, Tuple

from ..validation import ValidationResult, check_range
from .base import Request, RequestBuilder


class StartSearchRequest(Request):
    """POST /search/start; the response carries the new search job id."""

    endpoint = "/search/start"

    @classmethod
    def builder(cls) -> "StartSearchRequestBuilder":
        return StartSearchRequestBuilder()

    @classmethod
    def for_pattern(cls, pattern: str, plugins: Optional[Iterable[str]] = None, category: str = "all") -> "StartSearchRequest":
        builder = cls.builder().pattern(pattern).category(category)
        if plugins is not None:
            builder.plugins(plugins)
        return builder.build()

    @property
    def pattern(self) -> str:
        return self._get("pattern", "")

    @property
    def plugins(self) -> Tuple[str, ...]:
        return self._get("plugins", ("all",))

    @property
    def category(self) -> str:
        return self._get("category", "all")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if not self.pattern.strip():
            result.add_error("Search pattern cannot be empty")
        if not self.plugins:
            result.add_error("At least one search plugin is required")
        if not self.category.strip():
            result.add_error("Search category cannot be empty")
        return result

    def to_array(self) -> Dict[str, str]:
        return {
            "pattern": self.pattern,
            "plugins": "|".join(self.plugins),
            "category": self.category,
        }

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({"pattern": self.pattern, "plugins": list(self.plugins), "category": self.category})
        return summary


class StartSearchRequestBuilder(RequestBuilder[StartSearchRequest]):
    request_class = StartSearchRequest
    required_fields = ("pattern",)

    def pattern(self, pattern: str):
        return self._set("pattern", pattern)

    def plugins(self, plugins: Iterable[str]):
        return self._set("plugins", list(plugins))

    def category(self, category: str):
        return self._set("category", category)


class GetSearchResultsRequest(Request):
    """POST /search/results for a running or finished search job."""

    endpoint = "/search/results"

    @classmethod
    def builder(cls) -> "GetSearchResultsRequestBuilder":
        return GetSearchResultsRequestBuilder()

    @classmethod
    def for_job(cls, search_id: int, limit: Optional[int] = None, offset: Optional[int] = None) -> "GetSearchResultsRequest":
        builder = cls.builder().search_id(search_id)
        if limit is not None:
            builder.limit(limit)
        if offset is not None:
            builder.offset(offset)
        return builder.build()

    @property
    def search_id(self) -> int:
        return self._get("search_id", 0)

    @property
    def limit(self) -> Optional[int]:
        return self._get("limit")

    @property
    def offset(self) -> Optional[int]:
        return self._get("offset")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if self.search_id <= 0:
            result.add_error("Search id must be a positive integer")
        # 0 means no limit
        check_range(result, self.limit, "limit", minimum=0)
        check_range(result, self.offset, "offset", minimum=0)
        return result

    def to_array(self) -> Dict[str, str]:
        data = {"id": str(self.search_id)}
        if self.limit is not None:
            data["limit"] = str(self.limit)
        if self.offset is not None:
            data["offset"] = str(self.offset)
        return data


class GetSearchResultsRequestBuilder(RequestBuilder[GetSearchResultsRequest]):
    request_class = GetSearchResultsRequest
    required_fields = ("search_id",)

    def search_id(self, search_id: int):
        return self._set("search_id", search_id)

    def limit(self, limit: int):
        return self._set("limit", limit)

    def offset(self, offset: int):
        return self._set("offset", offset)
