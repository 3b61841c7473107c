"""Serialization codec for mapping columns.

A codec turns a ``str -> str`` mapping into the text stored in a single column
and back again. The blob store never touches the stored representation
directly: ``EncodedMapping`` calls the codec at the persistence boundary, so any
codec honouring the ``MappingCodec`` contract can be swapped in.

Example:
    codec = JsonCodec()
    text = codec.encode({"Name": "Khalid"})
    assert codec.equals(codec.decode(text), {"Name": "Khalid"})
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from customvalues.exceptions import DeserializationError, SerializationError

_STR_MAPPING: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


def _describe(error: Exception) -> str:
    """Collapse a pydantic validation error into one line."""
    if isinstance(error, ValidationError):
        parts = []
        for err in error.errors():
            loc = ".".join(str(p) for p in err["loc"])
            parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return "; ".join(parts)
    return str(error)


class MappingCodec(ABC):
    """Contract for converting a mapping to and from stored text."""

    name: str = "codec"

    @abstractmethod
    def encode(self, mapping: Mapping[str, str]) -> str:
        """Encode a mapping.

        Raises:
            SerializationError: If the mapping cannot be represented.
        """
        ...

    @abstractmethod
    def decode(self, text: str | bytes) -> dict[str, str]:
        """Decode stored text.

        Raises:
            DeserializationError: If the text is malformed.
        """
        ...

    def equals(self, a: Mapping[str, str] | None, b: Mapping[str, str] | None) -> bool:
        """Compare two mappings by key/value pairs, ignoring insertion order."""
        if a is None or b is None:
            return a is b
        # the ORM compares against sentinels when a mutable value is flagged
        if not isinstance(a, Mapping) or not isinstance(b, Mapping):
            return False
        return dict(a) == dict(b)


class JsonCodec(MappingCodec):
    """JSON object codec with strict ``str -> str`` validation."""

    name = "json"

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def encode(self, mapping: Mapping[str, str]) -> str:
        if not isinstance(mapping, Mapping):
            raise SerializationError(
                f"expected a mapping, got {type(mapping).__name__}", codec=self.name
            )
        try:
            values = _STR_MAPPING.validate_python(dict(mapping), strict=True)
        except (TypeError, ValueError) as e:
            raise SerializationError(_describe(e), codec=self.name) from e

        text = json.dumps(values, ensure_ascii=False, sort_keys=True)
        try:
            text.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise SerializationError(
                f"not representable in {self.encoding}: {e.reason}", codec=self.name
            ) from e
        return text

    def decode(self, text: str | bytes) -> dict[str, str]:
        try:
            return _STR_MAPPING.validate_json(text, strict=True)
        except (TypeError, ValueError) as e:
            raise DeserializationError(_describe(e), codec=self.name) from e


class EncodedMapping(TypeDecorator[dict[str, str]]):
    """Column type storing a mapping as codec-produced text."""

    impl = Text
    cache_ok = True

    def __init__(self, codec: MappingCodec | None = None) -> None:
        super().__init__()
        self.codec = codec or JsonCodec()

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return self.codec.encode(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> dict[str, str] | None:
        if value is None:
            return None
        return self.codec.decode(value)

    def compare_values(self, x: Any, y: Any) -> bool:
        return self.codec.equals(x, y)
