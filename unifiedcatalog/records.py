"""Records stored inside a Unified Log Catalog chunk and their parsers.

Every parser takes a bytes-like object and returns ``(record, remaining)``,
where ``remaining`` is the unread tail of the input.  Malformed or truncated
input raises :class:`CatalogError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LZ4_COMPRESSION = 0x100
_SUBSYSTEM_ENTRY_SIZE = 6
_OFFSET_SIZE = 2
_LOAD_ADDRESS_SIZE = 6


class CatalogError(ValueError):
    """Raised when Catalog data is truncated or inconsistent."""


class _Reader:
    """Sequential little-endian reader over an immutable byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise CatalogError(
                f"need {size} bytes at offset {self._pos}, "
                f"only {len(self._data) - self._pos} available"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def uint(self, size: int) -> int:
        return int.from_bytes(self.take(size), "little")

    def u16(self) -> int:
        return self.uint(2)

    def u32(self) -> int:
        return self.uint(4)

    def u64(self) -> int:
        return self.uint(8)

    def skip_padding(self, used: int) -> None:
        """Skip the padding that aligns ``used`` bytes to 8 bytes."""
        self.take(_padding_size(used))

    @property
    def rest(self) -> bytes:
        return self._data[self._pos:]


def _padding_size(length: int) -> int:
    return (8 - length % 8) % 8


@dataclass
class ProcessUUIDEntry:
    """A UUID reference held by a process information entry."""

    size: int = 0
    unknown: int = 0
    catalog_uuid_index: int = 0
    load_address: int = 0
    uuid: str = ""


@dataclass
class ProcessInfoSubsystem:
    """Offsets of a subsystem and category string for one identifier."""

    identifier: int = 0
    subsystem_offset: int = 0
    category_offset: int = 0


@dataclass
class CatalogSubchunk:
    """Metadata describing one (LZ4 compressed) chunkset."""

    start: int = 0
    end: int = 0
    uncompressed_size: int = 0
    compression_algorithm: int = 0
    number_index: int = 0
    indexes: list[int] = field(default_factory=list)
    number_string_offsets: int = 0
    string_offsets: list[int] = field(default_factory=list)


@dataclass
class ProcessInfoEntry:
    """Process information stored in a Catalog chunk."""

    index: int = 0
    unknown: int = 0
    catalog_main_uuid_index: int = 0
    catalog_dsc_uuid_index: int = 0
    first_number_proc_id: int = 0
    second_number_proc_id: int = 0
    pid: int = 0
    effective_user_id: int = 0
    unknown2: int = 0
    number_uuids_entries: int = 0
    unknown3: int = 0
    uuid_info_entries: list[ProcessUUIDEntry] = field(default_factory=list)
    number_subsystems: int = 0
    unknown4: int = 0
    subsystem_entries: list[ProcessInfoSubsystem] = field(default_factory=list)
    main_uuid: str = ""
    dsc_uuid: str = ""


@dataclass
class SubsystemInfo:
    """Resolved subsystem and category names for a log entry."""

    subsystem: str = ""
    category: str = ""


def _read_uuid_entry(reader: _Reader) -> ProcessUUIDEntry:
    size = reader.u32()
    unknown = reader.u32()
    uuid_index = reader.u16()
    load_address = reader.uint(_LOAD_ADDRESS_SIZE)
    return ProcessUUIDEntry(
        size=size,
        unknown=unknown,
        catalog_uuid_index=uuid_index,
        load_address=load_address,
    )


def _read_subsystem(reader: _Reader) -> ProcessInfoSubsystem:
    return ProcessInfoSubsystem(
        identifier=reader.u16(),
        subsystem_offset=reader.u16(),
        category_offset=reader.u16(),
    )


def _read_subchunk(reader: _Reader) -> CatalogSubchunk:
    start = reader.u64()
    end = reader.u64()
    uncompressed_size = reader.u32()
    compression = reader.u32()
    number_index = reader.u32()
    if compression != LZ4_COMPRESSION:
        logger.error("Unknown compression algorithm: %d", compression)
        raise CatalogError(f"unknown compression algorithm: {compression}")

    indexes = [reader.u16() for _ in range(number_index)]
    number_string_offsets = reader.u32()
    string_offsets = [reader.u16() for _ in range(number_string_offsets)]
    reader.skip_padding((number_index + number_string_offsets) * _OFFSET_SIZE)

    return CatalogSubchunk(
        start=start,
        end=end,
        uncompressed_size=uncompressed_size,
        compression_algorithm=compression,
        number_index=number_index,
        indexes=indexes,
        number_string_offsets=number_string_offsets,
        string_offsets=string_offsets,
    )


def _read_process_entry(reader: _Reader, uuids: list[str]) -> ProcessInfoEntry:
    entry = ProcessInfoEntry(
        index=reader.u16(),
        unknown=reader.u16(),
        catalog_main_uuid_index=reader.u16(),
        catalog_dsc_uuid_index=reader.u16(),
        first_number_proc_id=reader.u64(),
        second_number_proc_id=reader.u32(),
        pid=reader.u32(),
        effective_user_id=reader.u32(),
        unknown2=reader.u32(),
        number_uuids_entries=reader.u32(),
        unknown3=reader.u32(),
    )

    for _ in range(entry.number_uuids_entries):
        uuid_entry = _read_uuid_entry(reader)
        if uuid_entry.catalog_uuid_index >= len(uuids):
            logger.error(
                "Catalog Process UUID Index greater than Catalog UUID Array. "
                "Log is likely corrupted"
            )
            raise CatalogError(
                f"process UUID index {uuid_entry.catalog_uuid_index} "
                f"outside catalog UUID array of {len(uuids)}"
            )
        uuid_entry.uuid = uuids[uuid_entry.catalog_uuid_index]
        entry.uuid_info_entries.append(uuid_entry)

    entry.number_subsystems = reader.u32()
    entry.unknown4 = reader.u32()
    entry.subsystem_entries = [
        _read_subsystem(reader) for _ in range(entry.number_subsystems)
    ]
    reader.skip_padding(entry.number_subsystems * _SUBSYSTEM_ENTRY_SIZE)
    return entry


def parse_process_uuid_entry(data: bytes) -> tuple[ProcessUUIDEntry, bytes]:
    """Parse a process UUID entry; its ``uuid`` is left empty."""
    reader = _Reader(data)
    return _read_uuid_entry(reader), reader.rest


def parse_process_subsystem(data: bytes) -> tuple[ProcessInfoSubsystem, bytes]:
    """Parse one subsystem entry of a process information entry."""
    reader = _Reader(data)
    return _read_subsystem(reader), reader.rest


def parse_catalog_subchunk(data: bytes) -> tuple[CatalogSubchunk, bytes]:
    """Parse one Catalog subchunk, including its trailing alignment padding."""
    reader = _Reader(data)
    return _read_subchunk(reader), reader.rest


def parse_process_entry(
    data: bytes, uuids: list[str]
) -> tuple[ProcessInfoEntry, bytes]:
    """Parse a process information entry, resolving UUID indexes via ``uuids``."""
    reader = _Reader(data)
    return _read_process_entry(reader, list(uuids)), reader.rest