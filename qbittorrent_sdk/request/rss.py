from typing import Any, Dict, Optional

from ..validation import ValidationResult
from .base import Request, RequestBuilder, wire_bool


class GetRSSItemsRequest(Request):
    """GET /rss/items; with_data also returns the articles of every feed."""

    endpoint = "/rss/items"
    method = "GET"

    @classmethod
    def builder(cls) -> "GetRSSItemsRequestBuilder":
        return GetRSSItemsRequestBuilder()

    @classmethod
    def create(cls, with_data: bool = False) -> "GetRSSItemsRequest":
        return cls.builder().with_data(with_data).build()

    @property
    def with_data(self) -> bool:
        return self._get("with_data", False)

    def to_array(self) -> Dict[str, str]:
        return {"withData": wire_bool(self.with_data)}


class GetRSSItemsRequestBuilder(RequestBuilder[GetRSSItemsRequest]):
    request_class = GetRSSItemsRequest

    def with_data(self, with_data: bool = True):
        return self._set("with_data", with_data)


class MarkAsReadRequest(Request):
    """POST /rss/markAsRead for a whole feed or a single article."""

    endpoint = "/rss/markAsRead"

    @classmethod
    def builder(cls) -> "MarkAsReadRequestBuilder":
        return MarkAsReadRequestBuilder()

    @classmethod
    def for_item(cls, item_path: str, article_id: Optional[str] = None) -> "MarkAsReadRequest":
        builder = cls.builder().item_path(item_path)
        if article_id is not None:
            builder.article_id(article_id)
        return builder.build()

    @property
    def item_path(self) -> str:
        return self._get("item_path", "")

    @property
    def article_id(self) -> Optional[str]:
        return self._get("article_id")

    def validate(self) -> ValidationResult:
        result = ValidationResult.success()
        if not self.item_path.strip():
            result.add_error("RSS item path cannot be empty")
        if self.article_id is not None and not str(self.article_id).strip():
            result.add_error("Article id cannot be blank")
        return result

    def to_array(self) -> Dict[str, str]:
        data = {"itemPath": self.item_path}
        if self.article_id is not None:
            data["articleId"] = str(self.article_id)
        return data

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update({"item_path": self.item_path, "article_id": self.article_id})
        return summary


class MarkAsReadRequestBuilder(RequestBuilder[MarkAsReadRequest]):
    request_class = MarkAsReadRequest
    required_fields = ("item_path",)

    def item_path(self, path: str):
        return self._set("item_path", path)

    def article_id(self, article_id: str):
        return self._set("article_id", article_id)
