#!/usr/bin/env python3

import io
import sys
import enum
import logging

from collections import namedtuple
from texstreamstructs import *
from texstreamerrors import *
from bitmap import prepare
from tarstream import TarStream

log = logging.getLogger(__name__)


class InputKind(enum.Enum):
    HIRES = "hires"
    TEX = "tex"


class Options:
    """Everything a single extraction run needs, built once by the caller."""
    __slots__ = ("input", "output", "prefix", "input_kind",
                 "ignore_errors", "bitmapv5", "verbose")

    def __init__(self, input, output=None, prefix=None, input_kind=None,
                 ignore_errors=False, bitmapv5=False, verbose=0):
        self.input = input
        self.output = output if output is not None else sys.stdout.buffer
        self.prefix = prefix
        self.input_kind = input_kind
        self.ignore_errors = ignore_errors
        self.bitmapv5 = bitmapv5
        self.verbose = verbose


class ByteReader:
    """Little endian fixed width reads on a seekable stream.

    Nothing is retried, every failure is raised straight to the caller.
    """

    def __init__(self, fd):
        self.fd = fd

    def read(self, size):
        try:
            data = self.fd.read(size)
        except OSError as e:
            raise StreamError("Error while reading input: %s" % e) from e
        if len(data) != size:
            raise ShortRead(size, len(data))
        return data

    def field(self, width):
        try:
            con = FIELDS[width]
        except KeyError:
            raise InvalidFieldWidth(width) from None
        return con.parse(self.read(width))

    def seek(self, offset):
        try:
            self.fd.seek(offset, io.SEEK_SET)
        except (OSError, ValueError, OverflowError) as e:
            raise SeekError("Failed to switch to file position %#x: %s" % (offset, e)) from e

    def tell(self):
        try:
            return self.fd.tell()
        except (OSError, ValueError) as e:
            raise SeekError("Failed to get file position: %s" % e) from e


class Header:
    __slots__ = "config", "kind"

    def __init__(self, config, kind):
        self.config = config
        self.kind = kind

    @property
    def flags(self):
        return [name for name, bit in ConfigFlags.flags.items() if self.config & bit]

    def __repr__(self):
        return "Header(config=%#010x, kind=%s)" % (self.config, self.kind.value)


class Record:
    __slots__ = ("checksum", "offset", "width", "height", "format",
                 "texture_format", "pixel_type", "is_hires_tex", "size", "data")

    def __init__(self, checksum, offset, header):
        self.checksum = checksum
        self.offset = offset
        for subcon in RecordHeader.subcons:
            setattr(self, subcon.name, header[subcon.name])
        self.data = None

    def dump(self):
        log.debug("Offset: %#x", self.offset)
        log.debug("File header:")
        log.debug("\tchecksum: 0x%016X", self.checksum)
        log.debug("\twidth: %d", self.width)
        log.debug("\theight: %d", self.height)
        log.debug("\tformat: %#x", self.format)
        log.debug("\ttexture_format: %#x", self.texture_format)
        log.debug("\tpixel_type: %#x", self.pixel_type)
        log.debug("\tis_hires_tex: %d", self.is_hires_tex)
        log.debug("\tsize: %d", self.size)


Summary = namedtuple("Summary", "written skipped")


def parse_header(reader, input_kind=None):
    try:
        config = reader.field(4)
    except StreamError as e:
        raise HeaderReadError("Failed to read config header") from e

    if not config & FILE_CACHE_MASK:
        raise UnsupportedContainerVariant(config)

    kind = InputKind.HIRES if config & FILE_HIRESTEXCACHE else InputKind.TEX
    if input_kind is not None and input_kind != kind:
        log.warning("Input declared as %s but config header %#010x says %s",
                    input_kind.value, config, kind.value)
        kind = input_kind

    header = Header(config, kind)
    log.info("Config header: %#010x (%s)", config,
             ", ".join(header.flags) or "no options")
    return header


def index_entries(reader):
    """Walk the storage index, yielding (index, checksum, offset).

    The cursor may be moved freely while the caller holds an entry, it is
    put back behind that entry before the next one is read.
    """
    try:
        storage_pos = reader.field(8)
    except StreamError as e:
        raise IndexOffsetReadError("Failed to read index storage offset") from e

    try:
        reader.seek(storage_pos)
    except SeekError as e:
        raise IndexSeekError("Failed to switch to storage index offset %#x" % storage_pos) from e

    try:
        storage_size = reader.field(4)
    except StreamError as e:
        raise IndexCountReadError("Failed to read index storage size") from e

    log.debug("Storage index: %d entries at %#x", storage_size, storage_pos)

    for i in range(storage_size):
        entry = {}
        for subcon in IndexEntry.subcons:
            try:
                entry[subcon.name] = reader.field(subcon.sizeof())
            except StreamError as e:
                raise IndexEntryReadError(i, subcon.name) from e

        try:
            pos = reader.tell()
        except SeekError as e:
            raise ResumeSeekError("Failed to get storage index %d file position" % i) from e

        yield i, entry["checksum"], entry["offset"]

        try:
            reader.seek(pos)
        except SeekError as e:
            raise ResumeSeekError("Failed to switch back to storage index") from e


def decode_record(reader, offset, checksum):
    try:
        reader.seek(offset)
    except SeekError as e:
        raise RecordSeekError("Failed to switch to file position %#x" % offset) from e

    header = {}
    for subcon in RecordHeader.subcons:
        try:
            header[subcon.name] = reader.field(subcon.sizeof())
        except StreamError as e:
            raise RecordHeaderReadError(offset, subcon.name) from e

    record = Record(checksum, offset, header)
    record.dump()

    # size is unsigned on disk, zero is the only invalid value
    if record.size == 0:
        raise InvalidPayloadSize(offset, record.size)

    try:
        record.data = reader.read(record.size)
    except StreamError as e:
        raise PayloadReadError("Failed to read file content at %#x" % offset) from e

    return record


def entry_name(prefix, checksum):
    if prefix:
        return "%s#%016X.bmp" % (prefix, checksum)
    return "%016X.bmp" % checksum


def convert_file(opts, reader, archive, offset, checksum):
    """Decode one record and append it to the archive.

    Returns False when the record was skipped under ignore_errors.
    """
    record = decode_record(reader, offset, checksum)

    try:
        data = prepare(record, bitmapv5=opts.bitmapv5)
    except PreparationError as e:
        if opts.ignore_errors and e.skippable:
            log.warning("Skipping %016X: %s", checksum, e)
            return False
        raise
    finally:
        record.data = None

    name = entry_name(opts.prefix, checksum)
    archive.write_entry(name, data)
    log.info("%s (%dx%d, %d bytes)", name, record.width, record.height, len(data))
    return True


def convert(opts):
    reader = ByteReader(opts.input)
    header = parse_header(reader, opts.input_kind)
    archive = TarStream(opts.output)

    written = skipped = 0
    for i, checksum, offset in index_entries(reader):
        if convert_file(opts, reader, archive, offset, checksum):
            written += 1
        else:
            skipped += 1

    archive.finalize()
    return Summary(written, skipped)


__all__ = [
    "InputKind", "Options", "ByteReader", "Header", "Record", "Summary",
    "parse_header", "index_entries", "decode_record", "entry_name",
    "convert_file", "convert",
]
