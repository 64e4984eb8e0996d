import pytest

from construct import Int32ul, Int64ul
from texstreamstructs import (
    FILE_TEXCACHE, GL_RGBA, GL_UNSIGNED_BYTE, IndexEntry, RecordHeader,
)

GL_RGBA8 = 0x8058


def record_bytes(width=2, height=2, data=None, format=GL_RGBA8,
                 texture_format=GL_RGBA, pixel_type=GL_UNSIGNED_BYTE,
                 is_hires_tex=0, size=None):
    if data is None:
        data = bytes(range(width * height * 4))
    header = RecordHeader.build(dict(
        width=width,
        height=height,
        format=format,
        texture_format=texture_format,
        pixel_type=pixel_type,
        is_hires_tex=is_hires_tex,
        size=len(data) if size is None else size,
    ))
    return header + data


class Layout:
    """A synthetic texture stream and where its parts ended up"""

    def __init__(self, data, index_pos, offsets):
        self.data = data
        self.index_pos = index_pos
        self.offsets = offsets


def build_container(entries, config=FILE_TEXCACHE, index_first=False, gap=37):
    """entries is a list of (checksum, record bytes).

    Records are separated by `gap` filler bytes so no two are adjacent, the
    index table goes either right after the header or behind all records.
    """
    index = Int32ul.build(len(entries))
    head_size = 4 + 8
    index_size = len(index) + IndexEntry.sizeof() * len(entries)

    pos = head_size + (index_size if index_first else 0)
    body = bytearray()
    offsets = []
    for checksum, rec in entries:
        body += b"\xAA" * gap
        offsets.append(pos + len(body))
        body += rec

    index_pos = head_size if index_first else head_size + len(body)
    for (checksum, _), offset in zip(entries, offsets):
        index += IndexEntry.build(dict(checksum=checksum, offset=offset))

    out = bytearray(Int32ul.build(config) + Int64ul.build(index_pos))
    if index_first:
        out += index + body
    else:
        out += body + index
    return Layout(bytes(out), index_pos, offsets)


@pytest.fixture
def container():
    return build_container


@pytest.fixture
def record():
    return record_bytes
