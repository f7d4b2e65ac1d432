"""
Base classes for Web API requests and their builders.

A request is created only through its builder (``XxxRequest.builder()``) or
a factory classmethod. Creation checks that every required field was set,
then runs the request's validate() and raises RequestValidationError if any
error was found. The resulting object is immutable and serializes to the
same wire parameters every time.

Usage:
    request = DeleteTorrentsRequest.builder().add_hash(info_hash).delete_files().build()
    client.execute(request)
"""

import hashlib
import json
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from ..exceptions import MissingParameterError, RequestValidationError
from ..logger import logger
from ..validation import ValidationResult


_FACTORY_KEY = object()

R = TypeVar("R", bound="Request")


def _freeze(value: Any) -> Any:
    # NamedTuples such as TorrentFile are kept as-is
    if isinstance(value, list) or type(value) is tuple:
        return tuple(_freeze(item) for item in value)
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


def wire_bool(value: bool) -> str:
    return "true" if value else "false"


class Request(ABC):
    endpoint: str = ""
    method: str = "POST"
    requires_auth: bool = True

    def __init__(self, _key: Any = None, **params: Any):
        if _key is not _FACTORY_KEY:
            raise TypeError(
                f"{type(self).__name__} cannot be instantiated directly; "
                f"use {type(self).__name__}.builder() or a factory classmethod"
            )
        object.__setattr__(self, "_params", MappingProxyType({k: _freeze(v) for k, v in params.items()}))

    @classmethod
    def _create(cls: Type[R], **params: Any) -> R:
        """Construct and validate; the only path to a usable instance."""
        request = cls(_FACTORY_KEY, **params)
        result = request.validate()
        if not result.is_valid():
            logger.debug(f"{cls.__name__} rejected: {'; '.join(result.get_errors())}")
            raise RequestValidationError(result)
        for warning in result.get_warnings():
            logger.debug(f"{cls.__name__} warning: {warning}")
        return request

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _get(self, name: str, default: Any = None) -> Any:
        value = self._params.get(name)
        return default if value is None else value

    def validate(self) -> ValidationResult:
        return ValidationResult.success()

    @abstractmethod
    def to_array(self) -> Dict[str, str]:
        """Wire parameters sent to the Web API."""

    def files(self) -> Optional[List[Tuple[str, Tuple[str, bytes, str]]]]:
        """Multipart file fields, for requests that upload data."""
        return None

    def get_request_id(self) -> str:
        payload = json.dumps(
            [type(self).__name__, self.endpoint, self.method, self.to_array()],
            sort_keys=True,
            default=str,
        )
        return hashlib.md5(payload.encode("utf-8")).hexdigest()

    def get_summary(self) -> Dict[str, Any]:
        return {
            "request": type(self).__name__,
            "endpoint": self.endpoint,
            "method": self.method,
            "requires_auth": self.requires_auth,
        }

    def __eq__(self, other: Any) -> bool:
        return type(other) is type(self) and dict(other._params) == dict(self._params)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.get_request_id()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.method} {self.endpoint} {self.to_array()!r})"


class RequestBuilder(ABC, Generic[R]):
    """
    Accumulates fields for a request and builds validated instances.

    Each build() returns a new request; later builder calls do not affect
    requests that were already built.
    """

    request_class: Type[R]
    required_fields: Tuple[str, ...] = ()

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    def _set(self, name: str, value: Any):
        self._fields[name] = value
        return self

    def _append(self, name: str, values: Iterable[Any]):
        current = self._fields.setdefault(name, [])
        for value in values:
            if value not in current:
                current.append(value)
        return self

    @staticmethod
    def _is_missing(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, (list, tuple, set, dict)):
            return not value
        return False

    def missing_fields(self) -> List[str]:
        return [name for name in self.required_fields if self._is_missing(self._fields.get(name))]

    def reset(self):
        self._fields = {}
        return self

    def build(self) -> R:
        """
        Build a validated request.

        Raises:
            MissingParameterError: A required field was never set.
            RequestValidationError: A field failed validation; ``result`` has every error.
        """
        missing = self.missing_fields()
        if missing:
            raise MissingParameterError(missing[0])
        params = {name: list(value) if isinstance(value, list) else value for name, value in self._fields.items()}
        return self.request_class._create(**params)
