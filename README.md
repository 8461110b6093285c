# ntfsparse

Read-only parsing of NTFS on-disk structures from raw bytes.

`ntfsparse` decodes individual pieces of an NTFS volume: multi-sector records,
the nodes of index B-trees, UTF-16 strings, timestamps and a few attribute
values. It works on `bytes` you have already read from the volume, so it can
be used with disk images, forensic dumps or test fixtures alike. It has no
dependencies outside the standard library.

## Installation

```
pip install ntfsparse
```

To run the test suite:

```
pip install "ntfsparse[test]"
pytest
```

## Modules

- `ntfsparse.types`: `Position` (an absolute byte position, or none),
  `Lcn` and `Vcn` cluster numbers, and the `NtfsError` exception hierarchy
  raised for malformed structures.
- `ntfsparse.ntfs_time`: `NtfsTime`, a count of 100-nanosecond intervals since
  1601-01-01 UTC, with `from_datetime`, `to_datetime` and `now`.
- `ntfsparse.ntfs_string`: `NtfsString`, UTF-16LE bytes compared code unit by
  code unit (also against `str`), with `to_string_checked` and
  `to_string_lossy`; `compare_code_units`; and `upcase_cmp`, a
  case-insensitive comparison through any object with a
  `to_uppercase(code_unit)` method.
- `ntfsparse.record`: `Record`, with `signature()` and `fixup()`, which
  restores the sector ends from the update sequence array.
- `ntfsparse.volume_information`: `NtfsVolumeInformation` (NTFS version and
  `NtfsVolumeFlags`).
- `ntfsparse.volume_name`: `NtfsVolumeName`, the volume label.
- `ntfsparse.index_entry`: `IndexEntryType` (how the keys and data of an
  index are parsed), `NtfsIndexEntry`, `NtfsIndexEntryFlags` and
  `iter_node_entries`.
- `ntfsparse.index_root`: `NtfsIndexRoot`, the top-level node of an index.
- `ntfsparse.index_record`: `NtfsIndexRecord`, an `INDX` subnode, fixed up and
  validated.
- `ntfsparse.index_allocation`: `NtfsIndexAllocation`, the sequence of index
  records, with `record_from_vcn` and `records`.

## Example

Define the kind of index you are reading, then walk the top-level node and
follow a subnode into the index allocation:

```python
from ntfsparse.index_allocation import NtfsIndexAllocation
from ntfsparse.index_entry import IndexEntryType
from ntfsparse.index_root import NtfsIndexRoot
from ntfsparse.types import Position


class RawKeyIndex(IndexEntryType):
    has_file_reference = True

    @staticmethod
    def key_from_bytes(data, position):
        return bytes(data)


root = NtfsIndexRoot.from_bytes(index_root_bytes, Position(root_offset))
allocation = NtfsIndexAllocation(allocation_bytes, Position(alloc_offset), cluster_size)

for entry in root.entries(RawKeyIndex):
    key = entry.key()            # None for the last entry of a node
    if key is not None:
        print(entry.file_reference(), key)
    vcn = entry.subnode_vcn()    # None if the entry has no subnode
    if vcn is not None:
        record = allocation.record_from_vcn(root.index_record_size(), vcn)
        for sub_entry in record.entries(RawKeyIndex):
            print(sub_entry.key())
```

Malformed input raises a subclass of `ntfsparse.types.NtfsError` that says
which structure was bad and where it is on the volume.

Timestamps:

```python
from datetime import datetime, timezone
from ntfsparse.ntfs_time import NtfsTime

t = NtfsTime.from_datetime(datetime(2013, 1, 5, 18, 15, tzinfo=timezone.utc))
print(t.nt_timestamp, t.to_datetime())
```

## What it does not do

- It does not open a volume or read the boot sector or the Master File Table;
  you supply the bytes of each structure and its position yourself.
- It does not parse `$FILE_NAME` or `$STANDARD_INFORMATION` values, so
  directory keys have to be decoded by your own `IndexEntryType`.
- It does not load the `$UpCase` table; `upcase_cmp` needs an object you
  provide that maps code units to uppercase.
- It does not traverse or search a whole index B-tree in order; it parses
  single nodes, and following subnodes is left to the caller as shown above.
- It never writes to a volume.