# unifiedcatalog

Parse the Catalog chunk of macOS Unified Log `tracev3` files.

The Catalog chunk holds the metadata that log entries refer to. This metadata
includes the following:

- the UUIDs of the images that emitted the log entries
- the subsystem and category strings
- the process information entries, which give the PID, the effective user ID and the subsystem table
- the descriptions of the compressed chunksets that follow the chunk

This package reads the chunk from raw bytes and answers the lookups a log reader needs.

The package has no runtime dependencies. The test suite uses pytest, which is
available through the `test` extra.

## Usage

```python
from unifiedcatalog.catalog import CatalogChunk, parse_catalog

with open("catalog.raw", "rb") as handle:
    data = handle.read()

catalog, remaining = parse_catalog(data)
# equivalently: catalog, remaining = CatalogChunk.parse(data)

print(catalog.catalog_uuids)          # upper-case hex strings, 32 characters each
print(len(catalog.catalog_subchunks))

info = catalog.get_subsystem(4, 165, 406)
print(info.subsystem, info.category)

pid = catalog.get_pid(165, 406)
euid = catalog.get_euid(165, 406)
```

`remaining` holds the bytes that follow the parsed chunk.

### Process lookups

A process is identified by two process identifiers, `first_proc_id` and
`second_proc_id`, as they appear in a log entry.

If no process matches:

- `get_pid` returns `0`.
- `get_euid` returns `0`.
- `get_subsystem` returns a `SubsystemInfo` whose `subsystem` is `"Unknown subsystem"` and whose `category` is empty.

Each of these cases logs a warning through the standard `logging` module.

## Lower-level parsers

`unifiedcatalog.records` provides the record dataclasses and a parser for
each kind of record:

| Parser | Returns |
| --- | --- |
| `parse_process_entry(data, uuids)` | `ProcessInfoEntry` |
| `parse_process_uuid_entry(data)` | `ProcessUUIDEntry` |
| `parse_process_subsystem(data)` | `ProcessInfoSubsystem` |
| `parse_catalog_subchunk(data)` | `CatalogSubchunk` |

`SubsystemInfo` is the result type of `CatalogChunk.get_subsystem`.

Each parser takes bytes and returns a tuple `(record, remaining)`.

- `parse_process_entry` fills in the `uuid` of each UUID entry from the `uuids` list it is given.
- `parse_process_uuid_entry` leaves the `uuid` of the entry empty.

## Errors

Malformed data raises `unifiedcatalog.records.CatalogError`, a subclass of
`ValueError`. The following cases raise it:

- the data is truncated
- a subchunk names a compression algorithm other than LZ4 (`0x100`)
- a process UUID index lies past the end of the catalog's UUID table
- the process entries offset precedes the subsystem strings offset
- a subsystem string offset lies outside the subsystem strings

## What it does not do

This package reads the Catalog chunk only. It has the following limits:

- It does not read whole `tracev3` files or other chunk types.
- It does not decompress the chunksets that a `CatalogSubchunk` describes.
- It does not resolve format strings, timestamps or shared caches.
- It has no command-line tool.