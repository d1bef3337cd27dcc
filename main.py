import argparse
import sys
from typing import Tuple

from codetable import sidecar_path
from compressor import HuffmanCompressor
from errors import CodeTableFormatError, DecodeError, InputFileError

EXIT_OK = 0
EXIT_INPUT_ERROR = 1  #: Missing or unreadable input/sidecar
EXIT_FORMAT_ERROR = 3  #: Malformed sidecar (2 is argparse's usage error)
EXIT_DECODE_ERROR = 4  #: Bitstream does not decode or fails its checksum


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Static Huffman compressor with a sidecar code table"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    compress = subparsers.add_parser(
        "compress", aliases=["c"],
        help="Compress a file; the code table goes to <output>.huff",
    )
    compress.add_argument("input", help="File to compress")
    compress.add_argument("output", help="Packed output file path")
    compress.add_argument(
        "--no-newline",
        action="store_true",
        help="Do not force a code for the newline byte",
    )
    compress.add_argument(
        "--text-sidecar",
        action="store_true",
        help="Write the code table in the line-oriented text format",
    )

    decompress = subparsers.add_parser(
        "decompress", aliases=["d"],
        help="Decompress a file using <input>.huff",
    )
    decompress.add_argument("input", help="Packed file to decompress")
    decompress.add_argument("output", help="Decompressed output file path")

    return parser


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def _fmt_ratio(original: int, compressed: int) -> str:
    """Format ``original / compressed``, or ``n/a`` when nothing was written.

    :param original: Size before compression.
    :type original: int
    :param compressed: Size after compression.
    :type compressed: int
    :returns: Ratio string.
    :rtype: str
    """
    if compressed <= 0:
        return "n/a"
    return f"{original / compressed:.2f}"


def _read_file(path: str) -> bytes:
    """Read a whole file.

    :param path: File to read.
    :type path: str
    :returns: File contents.
    :rtype: bytes
    :raises InputFileError: If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise InputFileError(f"Cannot read {path}: {e.strerror or e}") from e


def compress_file(
    input_path: str,
    output_path: str,
    always_include_newline: bool = True,
    sidecar_format: str = "binary",
) -> Tuple[int, int]:
    """Compress ``input_path`` into ``output_path`` plus its sidecar.

    :param input_path: File to compress.
    :type input_path: str
    :param output_path: Destination of the packed bitstream.
    :type output_path: str
    :param always_include_newline: Whether the newline byte always gets
        a code.
    :type always_include_newline: bool
    :param sidecar_format: ``"binary"`` or ``"text"``.
    :type sidecar_format: str
    :returns: Tuple ``(original_size, packed_size)``.
    :rtype: Tuple[int, int]
    :raises InputFileError: If the input cannot be read.
    :raises AmbiguousCodeTableError: If the text format cannot hold the table.
    """
    data = _read_file(input_path)
    compressor = HuffmanCompressor(
        always_include_newline=always_include_newline,
        sidecar_format=sidecar_format,
    )
    packed, sidecar = compressor.compress(data)
    with open(output_path, "wb") as out:
        out.write(packed)
    with open(sidecar_path(output_path), "wb") as out:
        out.write(sidecar)
    return len(data), len(packed)


def decompress_file(input_path: str, output_path: str) -> Tuple[int, int]:
    """Decompress ``input_path`` using ``<input_path>.huff``.

    :param input_path: Packed bitstream file.
    :type input_path: str
    :param output_path: Destination of the decoded data.
    :type output_path: str
    :returns: Tuple ``(packed_size, decoded_size)``.
    :rtype: Tuple[int, int]
    :raises InputFileError: If the input or sidecar cannot be read.
    :raises CodeTableFormatError: If the sidecar is malformed.
    :raises DecodeError: If the stream cannot be decoded.
    """
    packed = _read_file(input_path)
    sidecar = _read_file(sidecar_path(input_path))
    data = HuffmanCompressor.decompress(packed, sidecar)
    with open(output_path, "wb") as out:
        out.write(data)
    return len(packed), len(data)


def main(argv=None) -> int:
    """Entry point for the CLI tool.

    :param argv: Argument list; ``sys.argv[1:]`` when ``None``.
    :type argv: list | None
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["compress", "c"]:
            original, packed = compress_file(
                args.input,
                args.output,
                always_include_newline=not args.no_newline,
                sidecar_format="text" if args.text_sidecar else "binary",
            )
            print("Size before compression: ", _fmt_bytes(original))
            print("Size after compression: ", _fmt_bytes(packed))
            print(f"Compression ratio: {_fmt_ratio(original, packed)}")
        elif args.cmd in ["decompress", "d"]:
            packed, decoded = decompress_file(args.input, args.output)
            print("Compressed size: ", _fmt_bytes(packed))
            print("Decompressed size: ", _fmt_bytes(decoded))
    except InputFileError as e:
        print(f"[!] {e}")
        return EXIT_INPUT_ERROR
    except CodeTableFormatError as e:
        print(f"[!] Bad code table: {e}")
        return EXIT_FORMAT_ERROR
    except DecodeError as e:
        print(f"[!] Cannot decode {args.input}: {e}")
        return EXIT_DECODE_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
