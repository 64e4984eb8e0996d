#!/usr/bin/env python3

import tarfile

from texstreamerrors import WriteError

ZERO_BLOCK = tarfile.NUL * tarfile.BLOCKSIZE


class TarStream:
    """Append only ustar writer, never seeks on the output.

    tarfile's own stream mode pads the end of the archive out to a full
    record, here the archive ends right after the two zero blocks.
    """

    def __init__(self, fd):
        self.fd = fd
        self.entries = 0
        self.finalized = False

    def _write(self, data, what):
        try:
            self.fd.write(data)
        except (OSError, ValueError) as e:
            raise WriteError("Failed to write %s: %s" % (what, e)) from e

    def write_entry(self, name, data):
        if self.finalized:
            raise WriteError("Archive already finalized, cannot add %s" % name)

        info = tarfile.TarInfo(name=name)
        info.size = len(data)
        info.mode = 0o644
        info.mtime = 0
        try:
            buf = info.tobuf(tarfile.USTAR_FORMAT, "utf-8", "strict")
        except (ValueError, UnicodeError) as e:
            raise WriteError("Could not build tar header for %s: %s" % (name, e)) from e

        self._write(buf, "tar header for %s" % name)
        self._write(data, "file content of %s" % name)

        remainder = len(data) % tarfile.BLOCKSIZE
        if remainder:
            self._write(tarfile.NUL * (tarfile.BLOCKSIZE - remainder), "padding of %s" % name)
        self.entries += 1

    def finalize(self):
        self.finalized = True
        self._write(ZERO_BLOCK, "first EOF tar record")
        self._write(ZERO_BLOCK, "second EOF tar record")
        try:
            self.fd.flush()
        except (OSError, ValueError) as e:
            raise WriteError("Failed to flush output: %s" % e) from e


__all__ = ["TarStream", "ZERO_BLOCK"]
