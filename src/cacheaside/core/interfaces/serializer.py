"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for turning cached values into stored bytes and back.

    CacheStore relies on SerializationError being the only failure a
    serializer reports. On write it skips caching the value; on read it
    deletes the entry and reports a miss. Any other exception is treated
    as a bug and propagates.

    deserialize(serialize(v)) should equal v for JSON-like values;
    implementations document any type they convert on the way.
    """

    def serialize(self, value: Any) -> bytes:
        """Encode a fetcher result for storage.

        Args:
            value: The value returned by a fetcher. Never None.

        Returns:
            Bytes to hand to the cache backend.

        Raises:
            SerializationError: If the value has no encoding.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode bytes read from the backend.

        Args:
            data: Bytes previously produced by serialize, or garbage
                written by another client.

        Returns:
            The decoded value.

        Raises:
            SerializationError: If the bytes cannot be decoded.
        """
        ...
