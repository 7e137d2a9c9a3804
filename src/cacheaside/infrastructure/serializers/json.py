"""JSON serializer implementation."""

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from cacheaside.core.exceptions import SerializationError

__all__ = ["JsonSerializer", "SerializationError"]

# Marker for values JSON has no type for: {TYPE_TAG: "datetime", "value": iso}
TYPE_TAG = "__cacheaside_type__"
_DECODERS = {
    "datetime": datetime.fromisoformat,
    "date": date.fromisoformat,
}


class JsonSerializer:
    """JSON serializer for cache values.

    Handles serialization of Python objects to JSON bytes and
    deserialization back to Python objects. Datetimes and dates are
    wrapped in a two-key marker object so they come back as the same
    type; Decimal and UUID become strings, sets become lists, and
    dataclasses or objects exposing to_dict() become plain dicts.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            json_str = json.dumps(value, default=self._default_encoder)
            return json_str.encode(self._encoding)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        try:
            json_str = data.decode(self._encoding)
            return json.loads(json_str, object_hook=self._object_hook)
        except (UnicodeDecodeError, TypeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if isinstance(obj, datetime):
            return {TYPE_TAG: "datetime", "value": obj.isoformat()}
        if isinstance(obj, date):
            return {TYPE_TAG: "date", "value": obj.isoformat()}
        if isinstance(obj, (Decimal, UUID)):
            return str(obj)
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        if callable(getattr(obj, "to_dict", None)):
            return obj.to_dict()
        if hasattr(obj, "__dict__"):
            return obj.__dict__
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    @staticmethod
    def _object_hook(obj: dict[str, Any]) -> Any:
        tag = obj.get(TYPE_TAG)
        if len(obj) == 2 and "value" in obj and isinstance(tag, str) and tag in _DECODERS:
            return _DECODERS[tag](obj["value"])
        return obj
