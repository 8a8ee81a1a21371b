"""
ChatMute - Mute Persistence
===========================

Binary encoding of the mute table and its load/save against a save slot.

FORMAT:
    A blob is a plain sequence of records with no header:

        key_length  unsigned 16-bit big-endian
        key         key_length bytes of UTF-8 subject id
        value       signed 64-bit big-endian expiry in ticks

    A tick is one nanosecond since 1970-01-01T00:00:00Z. An empty blob is
    an empty table. Duplicate keys resolve to the last record.

DESIGN:
    Saving writes the whole table every time, so an interrupted save
    never leaves a half-patched blob. Load and save never raise: a
    corrupt blob starts an empty store, a failed save keeps the
    in-memory mutes active and only logs.
"""

import struct
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Tuple

from chatmute.core.constants import MAX_KEY_BYTES, MUTE_DATA_KEY
from chatmute.core.logger import logger
from chatmute.services.mute_store import MuteStore
from chatmute.services.ports import SaveSlot


# =============================================================================
# Errors
# =============================================================================

class PersistenceError(Exception):
    """Base class for mute table encoding problems."""


class PersistenceDecodeError(PersistenceError):
    """Raised when a blob is truncated or corrupt."""


class PersistenceEncodeError(PersistenceError):
    """Raised when the table can't be represented in the record format."""


# =============================================================================
# Tick Conversion
# =============================================================================

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_KEY_LENGTH = struct.Struct(">H")
_VALUE = struct.Struct(">q")


def datetime_to_ticks(value: datetime) -> int:
    """Convert an aware datetime to nanoseconds since the Unix epoch."""
    return ((value - EPOCH) // timedelta(microseconds=1)) * 1000


def ticks_to_datetime(ticks: int) -> datetime:
    """
    Convert nanoseconds since the Unix epoch to an aware UTC datetime.

    Raises:
        PersistenceDecodeError: If the value is outside datetime's range.
    """
    try:
        return EPOCH + timedelta(microseconds=ticks // 1000)
    except OverflowError as e:
        raise PersistenceDecodeError(f"Tick value out of range: {ticks}") from e


# =============================================================================
# Codec
# =============================================================================

def encode_records(records: Iterable[Tuple[str, int]]) -> bytes:
    """
    Encode (key, tick) records into a blob.

    Raises:
        PersistenceEncodeError: On an empty or oversized key, or a value
            that doesn't fit in a signed 64-bit integer.
    """
    parts: List[bytes] = []
    for key, value in records:
        key_bytes = key.encode("utf-8")
        if not key_bytes:
            raise PersistenceEncodeError("Empty subject id")
        if len(key_bytes) > MAX_KEY_BYTES:
            raise PersistenceEncodeError(f"Subject id too long ({len(key_bytes)} bytes)")
        try:
            packed_value = _VALUE.pack(value)
        except struct.error as e:
            raise PersistenceEncodeError(f"Value out of range for {key!r}: {value}") from e
        parts.append(_KEY_LENGTH.pack(len(key_bytes)))
        parts.append(key_bytes)
        parts.append(packed_value)
    return b"".join(parts)


def decode_records(data: bytes) -> List[Tuple[str, int]]:
    """
    Decode a blob into (key, tick) records in stored order.

    Raises:
        PersistenceDecodeError: If the blob is truncated or a key is not
            valid UTF-8.
    """
    records: List[Tuple[str, int]] = []
    view = memoryview(data)
    offset = 0

    while offset < len(view):
        if offset + _KEY_LENGTH.size > len(view):
            raise PersistenceDecodeError(f"Truncated key length at byte {offset}")
        (key_length,) = _KEY_LENGTH.unpack_from(view, offset)
        offset += _KEY_LENGTH.size

        if key_length == 0:
            raise PersistenceDecodeError(f"Empty key at byte {offset}")
        if offset + key_length + _VALUE.size > len(view):
            raise PersistenceDecodeError(f"Truncated record at byte {offset}")

        try:
            key = bytes(view[offset:offset + key_length]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise PersistenceDecodeError(f"Invalid key encoding at byte {offset}") from e
        offset += key_length

        (value,) = _VALUE.unpack_from(view, offset)
        offset += _VALUE.size

        records.append((key, value))

    return records


def encode_mutes(entries: Iterable[Tuple[str, datetime]]) -> bytes:
    """Encode (subject id, expiry) pairs into a blob."""
    return encode_records(
        (subject_id, datetime_to_ticks(expires_at))
        for subject_id, expires_at in entries
    )


def decode_mutes(data: bytes) -> List[Tuple[str, datetime]]:
    """
    Decode a blob into (subject id, expiry) pairs.

    Raises:
        PersistenceDecodeError: If the blob is corrupt.
    """
    return [
        (subject_id, ticks_to_datetime(ticks))
        for subject_id, ticks in decode_records(data)
    ]


# =============================================================================
# Store Binding
# =============================================================================

class MutePersistence:
    """
    Loads and saves a MuteStore through a host save slot.

    Attributes:
        store: The mute store being persisted.
        slot: Durable key-value slot from the host.
        key: Slot key holding the blob.
    """

    def __init__(self, store: MuteStore, slot: SaveSlot, key: str = MUTE_DATA_KEY) -> None:
        self.store = store
        self.slot = slot
        self.key = key

    def load(self) -> int:
        """
        Populate the store from the slot.

        A missing blob leaves the store empty; a corrupt blob or a slot
        failure is logged and leaves the store empty.

        Returns:
            Number of active mutes loaded.
        """
        try:
            data = self.slot.get(self.key)
        except Exception as e:
            logger.warning("Mute Data Unavailable", [
                ("Key", self.key),
                ("Error", str(e)[:100]),
            ])
            self.store.clear()
            return 0

        if not data:
            self.store.clear()
            return 0

        try:
            entries = decode_mutes(data)
        except PersistenceDecodeError as e:
            logger.warning("Mute Data Corrupt, Starting Empty", [
                ("Key", self.key),
                ("Size", f"{len(data)} bytes"),
                ("Error", str(e)[:100]),
            ])
            self.store.clear()
            return 0

        loaded = self.store.load(entries)

        logger.tree("Mute Data Loaded", [
            ("Active", str(loaded)),
            ("Discarded (expired)", str(len(entries) - loaded)),
        ], emoji="📂")

        return loaded

    def save(self) -> bool:
        """
        Write the full store to the slot.

        Returns:
            True if the blob was written.
        """
        try:
            data = encode_mutes(self.store.snapshot())
            self.slot.set(self.key, data)
        except Exception as e:
            logger.error("Mute Data Save Failed", [
                ("Key", self.key),
                ("Error", str(e)[:100]),
            ])
            return False

        logger.debug(f"Mute data saved ({len(data)} bytes)")
        return True


__all__ = [
    "PersistenceError",
    "PersistenceDecodeError",
    "PersistenceEncodeError",
    "EPOCH",
    "datetime_to_ticks",
    "ticks_to_datetime",
    "encode_records",
    "decode_records",
    "encode_mutes",
    "decode_mutes",
    "MutePersistence",
]
