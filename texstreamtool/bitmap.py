#!/usr/bin/env python3

import zlib
import numpy as np

from io import BytesIO
from PIL import Image
from texstreamstructs import *
from texstreamerrors import PreparationError

int16ul = np.dtype("<u2")

def expand(value, bits):
    """Scale an n bit channel up to 0-255"""
    return (value.astype(np.uint32) * 255 // ((1 << bits) - 1)).astype(np.uint8)

def unpack_rgba8888(data):
    return np.frombuffer(data, dtype=np.uint8).reshape(-1, 4)

def unpack_rgb888(data):
    rgb = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3)
    out = np.full([len(rgb), 4], 255, dtype=np.uint8)
    out[:, :3] = rgb
    return out

def unpack_rgb565(data):
    c = np.frombuffer(data, dtype=int16ul)
    out = np.empty([len(c), 4], dtype=np.uint8)
    out[:, 0] = expand((c >> 11) & 0x1F, 5) # r
    out[:, 1] = expand((c >>  5) & 0x3F, 6) # g
    out[:, 2] = expand((c >>  0) & 0x1F, 5) # b
    out[:, 3] = 255
    return out

def unpack_rgba4444(data):
    c = np.frombuffer(data, dtype=int16ul)
    out = np.empty([len(c), 4], dtype=np.uint8)
    out[:, 0] = expand((c >> 12) & 0xF, 4)
    out[:, 1] = expand((c >>  8) & 0xF, 4)
    out[:, 2] = expand((c >>  4) & 0xF, 4)
    out[:, 3] = expand((c >>  0) & 0xF, 4)
    return out

def unpack_rgba5551(data):
    c = np.frombuffer(data, dtype=int16ul)
    out = np.empty([len(c), 4], dtype=np.uint8)
    out[:, 0] = expand((c >> 11) & 0x1F, 5)
    out[:, 1] = expand((c >>  6) & 0x1F, 5)
    out[:, 2] = expand((c >>  1) & 0x1F, 5)
    out[:, 3] = expand(c & 0x1, 1)
    return out

# (texture_format, pixel_type) -> (bytes per pixel, unpacker)
PIXEL_FORMATS = {
    (GL_RGBA, GL_UNSIGNED_BYTE):          (4, unpack_rgba8888),
    (GL_RGB,  GL_UNSIGNED_BYTE):          (3, unpack_rgb888),
    (GL_RGB,  GL_UNSIGNED_SHORT_5_6_5):   (2, unpack_rgb565),
    (GL_RGBA, GL_UNSIGNED_SHORT_4_4_4_4): (2, unpack_rgba4444),
    (GL_RGBA, GL_UNSIGNED_SHORT_5_5_5_1): (2, unpack_rgba5551),
}

def encode_bitmap(pixels):
    height, width = pixels.shape[:2]
    img = Image.frombytes("RGB", (width, height), pixels[:, :, :3].tobytes())
    out = BytesIO()
    img.save(out, format="BMP")
    return out.getvalue()

def encode_bitmapv5(pixels):
    height, width = pixels.shape[:2]
    # bottom up rows of little endian BGRA words
    image = pixels[::-1, :, [2, 1, 0, 3]].tobytes()
    offbits = BitmapFileHeader.sizeof() + BitmapV5Header.sizeof()

    out = BytesIO()
    out.write(BitmapFileHeader.build(dict(size=offbits + len(image), offbits=offbits)))
    out.write(BitmapV5Header.build(dict(
        width=width,
        height=height,
        bitcount=32,
        compression=BI_BITFIELDS,
        sizeimage=len(image),
        redmask=0x00FF0000,
        greenmask=0x0000FF00,
        bluemask=0x000000FF,
        alphamask=0xFF000000,
    )))
    out.write(image)
    return out.getvalue()

def prepare(record, bitmapv5=False):
    """Turn a decoded record into the contents of a .bmp file"""
    data = record.data

    if record.format & GL_TEXFMT_GZ:
        try:
            data = zlib.decompress(data)
        except zlib.error as e:
            raise PreparationError("Failed to inflate %016X: %s" % (record.checksum, e)) from e

    try:
        bpp, unpack = PIXEL_FORMATS[(record.texture_format, record.pixel_type)]
    except KeyError:
        raise PreparationError("Unsupported texture_format %#x with pixel_type %#x" %
                               (record.texture_format, record.pixel_type)) from None

    width, height = record.width, record.height
    if not width or not height:
        raise PreparationError("Invalid dimensions %dx%d" % (width, height))

    if len(data) != width * height * bpp:
        raise PreparationError("Expected %d bytes for %dx%d, got %d" %
                               (width * height * bpp, width, height, len(data)))

    pixels = unpack(data).reshape(height, width, 4)

    if bitmapv5:
        return encode_bitmapv5(pixels)
    return encode_bitmap(pixels)

__all__ = ["PIXEL_FORMATS", "prepare", "encode_bitmap", "encode_bitmapv5"]
