from construct import *

# Fixed width reads, always little endian on disk
FIELDS = {
    1: Int8ul,
    2: Int16ul,
    4: Int32ul,
    8: Int64ul,
}

FILE_TEXCACHE      = 0x00100000
FILE_HIRESTEXCACHE = 0x00200000
FILE_CACHE_MASK    = FILE_TEXCACHE | FILE_HIRESTEXCACHE

ConfigFlags = FlagsEnum(Int32ul,
    FILE_TEXCACHE       = FILE_TEXCACHE,
    FILE_HIRESTEXCACHE  = FILE_HIRESTEXCACHE,
    GZ_TEXCACHE         = 0x00400000,
    GZ_HIRESTEXCACHE    = 0x00800000,
    DUMP_TEXCACHE       = 0x01000000,
    DUMP_HIRESTEXCACHE  = 0x02000000,
    TILE_HIRESTEX       = 0x04000000,
    FORCE16BPP_HIRESTEX = 0x10000000,
    FORCE16BPP_TEX      = 0x20000000,
    LET_TEXARTISTS_FLY  = 0x40000000,
    DUMP_TEX            = 0x80000000,
)

IndexEntry = Struct(
    "checksum" / Int64ul,
    "offset"   / Int64ul,
)

# Read field by field so a short read can name the field
RecordHeader = Struct(
    "width"          / Int32ul,
    "height"         / Int32ul,
    "format"         / Int32ul,
    "texture_format" / Int16ul,
    "pixel_type"     / Int16ul,
    "is_hires_tex"   / Int8ul,
    "size"           / Int32ul,
)

# payload is zlib compressed
GL_TEXFMT_GZ = 0x80000000

GL_UNSIGNED_BYTE          = 0x1401
GL_RGB                    = 0x1907
GL_RGBA                   = 0x1908
GL_UNSIGNED_SHORT_4_4_4_4 = 0x8033
GL_UNSIGNED_SHORT_5_5_5_1 = 0x8034
GL_UNSIGNED_SHORT_5_6_5   = 0x8363

BI_BITFIELDS = 3
LCS_sRGB = 0x73524742

BitmapFileHeader = Struct(
    Const(b"BM"),
    "size"     / Int32ul,
    Const(0, Int32ul),
    "offbits"  / Int32ul,
)

# 124 byte BITMAPV5HEADER, alpha mask is what ImageMagick looks for
BitmapV5Header = Struct(
    Const(124, Int32ul),
    "width"       / Int32sl,
    "height"      / Int32sl,
    Const(1, Int16ul),
    "bitcount"    / Int16ul,
    "compression" / Int32ul,
    "sizeimage"   / Int32ul,
    "xppm"        / Default(Int32sl, 2835),
    "yppm"        / Default(Int32sl, 2835),
    Const(0, Int32ul), # clrused
    Const(0, Int32ul), # clrimportant
    "redmask"     / Int32ul,
    "greenmask"   / Int32ul,
    "bluemask"    / Int32ul,
    "alphamask"   / Int32ul,
    "cstype"      / Default(Int32ul, LCS_sRGB),
    Padding(36), # endpoints
    Padding(12), # gamma
    "intent"      / Default(Int32ul, 4), # LCS_GM_IMAGES
    Padding(12), # profile data, size, reserved
)

__all__ = [
    "FIELDS", "ConfigFlags", "IndexEntry", "RecordHeader",
    "BitmapFileHeader", "BitmapV5Header",
    "FILE_TEXCACHE", "FILE_HIRESTEXCACHE", "FILE_CACHE_MASK",
    "GL_TEXFMT_GZ", "GL_UNSIGNED_BYTE", "GL_RGB", "GL_RGBA",
    "GL_UNSIGNED_SHORT_4_4_4_4", "GL_UNSIGNED_SHORT_5_5_5_1",
    "GL_UNSIGNED_SHORT_5_6_5", "BI_BITFIELDS", "LCS_sRGB",
]
