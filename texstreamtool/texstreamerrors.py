"""Errors raised while extracting a texture stream.

Everything derives from :class:`TexStreamError`.  Only errors with
``skippable`` set may be skipped by the ``ignore_errors`` policy, all
others abort the run.
"""


class TexStreamError(Exception):
    skippable = False


class StreamError(TexStreamError):
    pass


class ShortRead(StreamError):
    def __init__(self, wanted, got):
        super().__init__("File stream ended too early (wanted %d bytes, got %d)" % (wanted, got))
        self.wanted = wanted
        self.got = got


class InvalidFieldWidth(TexStreamError):
    def __init__(self, width):
        super().__init__("Invalid item size %r for endianness conversion" % (width,))
        self.width = width


class SeekError(TexStreamError):
    pass


class IndexSeekError(SeekError):
    pass


class RecordSeekError(SeekError):
    pass


class ResumeSeekError(SeekError):
    pass


class HeaderReadError(TexStreamError):
    pass


class UnsupportedContainerVariant(TexStreamError):
    def __init__(self, config):
        super().__init__("TexCache format not supported (config %#010x), "
                         "please use gliden64-cache-extract" % config)
        self.config = config


class IndexOffsetReadError(TexStreamError):
    pass


class IndexCountReadError(TexStreamError):
    pass


class IndexEntryReadError(TexStreamError):
    def __init__(self, index, field):
        super().__init__("Failed to read %s of storage index %d" % (field, index))
        self.index = index
        self.field = field


class RecordHeaderReadError(TexStreamError):
    def __init__(self, offset, field):
        super().__init__("Failed to read file %s at %#x" % (field, offset))
        self.offset = offset
        self.field = field


class InvalidPayloadSize(TexStreamError):
    def __init__(self, offset, size):
        super().__init__("Invalid filesize %d at %#x" % (size, offset))
        self.offset = offset
        self.size = size


class PayloadReadError(TexStreamError):
    pass


class PreparationError(TexStreamError):
    skippable = True


class WriteError(TexStreamError):
    pass
