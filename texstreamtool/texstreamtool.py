#!/usr/bin/env python3
"""GLideN64 texture stream extraction tool for debugging.

Example:
    texstreamtool --input MUPEN64PLUS.hts -vv -p MUPEN64PLUS > mupen64plus.tar
"""

import sys
import logging

from contextlib import ExitStack
from argparse import ArgumentParser
from texstream import InputKind, Options, convert
from texstreamerrors import TexStreamError

log = logging.getLogger("texstreamtool")

class _ArgumentParser(ArgumentParser):
    # invalid options share the exit code of an unopenable input
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, "%s: error: %s\n" % (self.prog, message))

argparser = _ArgumentParser(prog="texstreamtool", description=__doc__.splitlines()[0])
argparser.add_argument("-i", "--input", required=True, metavar="FILE",
                       help="Use FILE as uncompressed input file")
argparser.add_argument("-o", "--output", metavar="FILE",
                       help="Use FILE as output file (default: stdout)")
argparser.add_argument("-p", "--prefix", metavar="NAME",
                       help="Add prefix to each file")
argparser.add_argument("-t", "--type", type=str.lower, choices=[k.value for k in InputKind],
                       help="Type of the input")
argparser.add_argument("-v", "--verbose", action="count", default=0,
                       help="Print extra information on stderr (repeat for more verbosity)")
argparser.add_argument("-e", "--ignore-error", action="store_true",
                       help="Skip current file when a conversion error is detected")
argparser.add_argument("-b", "--bitmapv5", action="store_true",
                       help="Use V5 Windows Bitmap files with ImageMagick compatible alpha channels")

def log_level(verbose):
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING

def main(argv=None):
    args = argparser.parse_args(argv)
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level(args.verbose))

    with ExitStack() as stack:
        try:
            infile = stack.enter_context(open(args.input, "rb"))
        except OSError as e:
            log.error("Could not open input file %s: %s", args.input, e)
            argparser.print_usage(sys.stderr)
            return 1

        outfile = sys.stdout.buffer
        if args.output:
            try:
                outfile = stack.enter_context(open(args.output, "wb"))
            except OSError as e:
                log.error("Could not open output file %s: %s", args.output, e)
                argparser.print_usage(sys.stderr)
                return 1

        opts = Options(
            infile,
            outfile,
            prefix=args.prefix,
            input_kind=InputKind(args.type) if args.type else None,
            ignore_errors=args.ignore_error,
            bitmapv5=args.bitmapv5,
            verbose=args.verbose,
        )

        try:
            summary = convert(opts)
        except TexStreamError as e:
            log.error("%s", e)
            if e.__cause__ is not None:
                log.error("    %s", e.__cause__)
            return 2

    log.info("Extracted %d files, skipped %d", summary.written, summary.skipped)
    return 0

if __name__ == "__main__":
    sys.exit(main())
