"""The Catalog chunk of a Unified Log tracev3 file.

The Catalog holds metadata shared by the log entries that follow it: the
UUIDs of binaries, subsystem and category strings, per-process information
and the descriptions of the compressed chunksets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from unifiedcatalog.records import (
    CatalogError,
    CatalogSubchunk,
    ProcessInfoEntry,
    SubsystemInfo,
    _read_process_entry,
    _read_subchunk,
    _Reader,
)

logger = logging.getLogger(__name__)

_UUID_SIZE = 16
_UNKNOWN_SIZE = 6
UNKNOWN_SUBSYSTEM = "Unknown subsystem"


def _string_at(data: bytes, offset: int) -> str:
    """Return the NUL-terminated string starting at ``offset`` in ``data``."""
    if offset > len(data):
        raise CatalogError(
            f"string offset {offset} outside subsystem strings of {len(data)} bytes"
        )
    raw = data[offset:].split(b"\x00", 1)[0]
    return raw.decode("utf-8", errors="replace")


@dataclass
class CatalogChunk:
    """A parsed Catalog chunk."""

    chunk_tag: int = 0
    chunk_sub_tag: int = 0
    chunk_data_size: int = 0
    catalog_subsystem_strings_offset: int = 0
    catalog_process_info_entries_offset: int = 0
    number_process_information_entries: int = 0
    catalog_offset_sub_chunks: int = 0
    number_sub_chunks: int = 0
    unknown: bytes = b""
    earliest_firehose_timestamp: int = 0
    catalog_uuids: list[str] = field(default_factory=list)
    catalog_subsystem_strings: bytes = b""
    catalog_process_info_entries: list[ProcessInfoEntry] = field(default_factory=list)
    catalog_subchunks: list[CatalogSubchunk] = field(default_factory=list)

    @classmethod
    def parse(cls, data: bytes) -> tuple[CatalogChunk, bytes]:
        """Parse a Catalog chunk, returning it and the unread remainder."""
        reader = _Reader(data)
        chunk = cls(
            chunk_tag=reader.u32(),
            chunk_sub_tag=reader.u32(),
            chunk_data_size=reader.u64(),
            catalog_subsystem_strings_offset=reader.u16(),
            catalog_process_info_entries_offset=reader.u16(),
            number_process_information_entries=reader.u16(),
            catalog_offset_sub_chunks=reader.u16(),
            number_sub_chunks=reader.u16(),
            unknown=reader.take(_UNKNOWN_SIZE),
            earliest_firehose_timestamp=reader.u64(),
        )

        number_uuids = chunk.catalog_subsystem_strings_offset // _UUID_SIZE
        chunk.catalog_uuids = [
            reader.take(_UUID_SIZE).hex().upper() for _ in range(number_uuids)
        ]

        strings_length = (
            chunk.catalog_process_info_entries_offset
            - chunk.catalog_subsystem_strings_offset
        )
        if strings_length < 0:
            raise CatalogError(
                "process entries offset precedes subsystem strings offset"
            )
        chunk.catalog_subsystem_strings = reader.take(strings_length)

        uuid_count = len(chunk.catalog_uuids)
        for _ in range(chunk.number_process_information_entries):
            entry = _read_process_entry(reader, chunk.catalog_uuids)
            if entry.catalog_main_uuid_index < uuid_count:
                entry.main_uuid = chunk.catalog_uuids[entry.catalog_main_uuid_index]
            if entry.catalog_dsc_uuid_index < uuid_count:
                entry.dsc_uuid = chunk.catalog_uuids[entry.catalog_dsc_uuid_index]
            chunk.catalog_process_info_entries.append(entry)

        chunk.catalog_subchunks = [
            _read_subchunk(reader) for _ in range(chunk.number_sub_chunks)
        ]
        return chunk, reader.rest

    def _find_process(
        self, first_proc_id: int, second_proc_id: int
    ) -> ProcessInfoEntry | None:
        return next(
            (
                entry
                for entry in self.catalog_process_info_entries
                if entry.first_number_proc_id == first_proc_id
                and entry.second_number_proc_id == second_proc_id
            ),
            None,
        )

    def get_subsystem(
        self, subsystem_value: int, first_proc_id: int, second_proc_id: int
    ) -> SubsystemInfo:
        """Resolve the subsystem and category of a log entry."""
        for entry in self.catalog_process_info_entries:
            if (
                entry.first_number_proc_id != first_proc_id
                or entry.second_number_proc_id != second_proc_id
            ):
                continue
            for subsystem in entry.subsystem_entries:
                if subsystem.identifier == subsystem_value:
                    strings = self.catalog_subsystem_strings
                    return SubsystemInfo(
                        subsystem=_string_at(strings, subsystem.subsystem_offset),
                        category=_string_at(strings, subsystem.category_offset),
                    )

        logger.warning("Did not find subsystem in log entry")
        return SubsystemInfo(subsystem=UNKNOWN_SUBSYSTEM)

    def get_pid(self, first_proc_id: int, second_proc_id: int) -> int:
        """Return the process ID of a log entry, or 0 if it is not catalogued."""
        entry = self._find_process(first_proc_id, second_proc_id)
        if entry is None:
            logger.warning("Did not find PID in log Catalog")
            return 0
        return entry.pid

    def get_euid(self, first_proc_id: int, second_proc_id: int) -> int:
        """Return the effective user ID of a log entry, or 0 if not catalogued."""
        entry = self._find_process(first_proc_id, second_proc_id)
        if entry is None:
            logger.warning("Did not find EUID in log Catalog")
            return 0
        return entry.effective_user_id


def parse_catalog(data: bytes) -> tuple[CatalogChunk, bytes]:
    """Parse a Catalog chunk, returning it and the unread remainder."""
    return CatalogChunk.parse(data)