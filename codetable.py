import struct
from typing import Dict, NamedTuple, Optional

from bitops import BitReader, BitWriter
from errors import AmbiguousCodeTableError, CodeTableFormatError
from huffman import is_prefix_free

SIDECAR_SUFFIX = ".huff"  #: Appended to the packed file name for the sidecar


class Sidecar(NamedTuple):
    """Contents of a sidecar file.

    ``bit_count`` and ``checksum`` are ``None`` for tables written without
    them (text tables written by older tools).
    """

    codes: Dict[int, str]
    bit_count: Optional[int] = None
    checksum: Optional[int] = None


def sidecar_path(path: str) -> str:
    """Return the sidecar file name belonging to a packed file.

    :param path: Path of the packed bitstream file.
    :type path: str
    :returns: ``path`` with the sidecar suffix appended.
    :rtype: str
    """
    return path + SIDECAR_SUFFIX


def _validate_codes(codes: Dict[int, str]):
    """Reject tables that cannot drive the decoder.

    :param codes: Mapping from byte value to code string.
    :type codes: Dict[int, str]
    :returns: None
    :rtype: None
    :raises CodeTableFormatError: On an empty or non-binary code, a repeated
        code, or a code that prefixes another one.
    """
    for symbol, code in codes.items():
        if not code or code.strip("01"):
            raise CodeTableFormatError(
                f"Invalid code {code!r} for symbol {symbol}"
            )
    if len(set(codes.values())) != len(codes):
        raise CodeTableFormatError("Duplicate codes in code table")
    if not is_prefix_free(codes.values()):
        raise CodeTableFormatError("Code table is not prefix-free")


class BinaryCodeTableCodec:
    """Length-prefixed binary sidecar format.

    Layout (little-endian):
    - Signature: ``b"HUFT"`` (4 bytes)
    - Version: uint8
    - Bit count of the packed stream: uint64
    - CRC-32 of the original data: uint32
    - Record count: uint16
    For each record:
    - Symbol: uint8
    - Code length in bits: uint16
    - Code bits, MSB first, padded to a whole byte

    :ivar SIGNATURE: File signature.
    :type SIGNATURE: bytes
    :ivar VERSION: Format version written by :meth:`dumps`.
    :type VERSION: int
    """

    SIGNATURE = b"HUFT"
    VERSION = 1
    HEADER = struct.Struct("<4sBQIH")
    RECORD = struct.Struct("<BH")

    @classmethod
    def dumps(cls, sidecar: Sidecar) -> bytes:
        """Serialize a sidecar.

        :param sidecar: Code table with bit count and checksum.
        :type sidecar: Sidecar
        :returns: Serialized sidecar bytes.
        :rtype: bytes
        :raises CodeTableFormatError: If the bit count or checksum is
            missing, or the table is invalid.
        """
        if sidecar.bit_count is None or sidecar.checksum is None:
            raise CodeTableFormatError(
                "Binary sidecar requires a bit count and a checksum"
            )
        _validate_codes(sidecar.codes)

        out = bytearray(
            cls.HEADER.pack(
                cls.SIGNATURE,
                cls.VERSION,
                sidecar.bit_count,
                sidecar.checksum & 0xFFFFFFFF,
                len(sidecar.codes),
            )
        )
        for symbol in sorted(sidecar.codes):
            code = sidecar.codes[symbol]
            out += cls.RECORD.pack(symbol, len(code))
            writer = BitWriter()
            writer.write_code(code)
            out += writer.flush()
        return bytes(out)

    @classmethod
    def loads(cls, data: bytes) -> Sidecar:
        """Parse a sidecar produced by :meth:`dumps`.

        :param data: Serialized sidecar.
        :type data: bytes
        :returns: Parsed sidecar.
        :rtype: Sidecar
        :raises CodeTableFormatError: If the signature or version is wrong,
            the data is truncated or the table is invalid.
        """
        if len(data) < cls.HEADER.size:
            raise CodeTableFormatError("Sidecar header is truncated")
        signature, version, bit_count, checksum, count = cls.HEADER.unpack_from(data)
        if signature != cls.SIGNATURE:
            raise CodeTableFormatError("Invalid sidecar format (bad signature)")
        if version != cls.VERSION:
            raise CodeTableFormatError(f"Unsupported sidecar version: {version}")

        codes: Dict[int, str] = {}
        pos = cls.HEADER.size
        for _ in range(count):
            if pos + cls.RECORD.size > len(data):
                raise CodeTableFormatError("Sidecar record is truncated")
            symbol, length = cls.RECORD.unpack_from(data, pos)
            pos += cls.RECORD.size
            nbytes = (length + 7) // 8
            if pos + nbytes > len(data):
                raise CodeTableFormatError("Sidecar code bits are truncated")
            if symbol in codes:
                raise CodeTableFormatError(f"Duplicate symbol {symbol} in sidecar")
            codes[symbol] = BitReader(data[pos:pos + nbytes]).read_code(length)
            pos += nbytes
        if pos != len(data):
            raise CodeTableFormatError("Trailing bytes after sidecar records")

        _validate_codes(codes)
        return Sidecar(codes, bit_count, checksum)


class TextCodeTableCodec:
    """Line-oriented ``<symbol-token>:<code>`` sidecar format.

    The symbol token is the byte itself (read as Latin-1), or ``\\n`` for
    the newline byte. Two optional metadata lines, ``\\bits:<count>`` and
    ``\\crc32:<hex>``, carry the stream length and checksum; their tokens
    are longer than one byte and cannot be confused with a symbol.

    A literal ``:`` byte cannot be represented: the line would start with
    the delimiter itself.
    """

    NEWLINE_TOKEN = b"\\n"
    BITS_TOKEN = b"\\bits"
    CRC_TOKEN = b"\\crc32"
    DELIMITER = b":"

    @classmethod
    def dumps(cls, sidecar: Sidecar) -> bytes:
        """Serialize a sidecar as text lines, symbols in ascending order.

        :param sidecar: Code table with optional bit count and checksum.
        :type sidecar: Sidecar
        :returns: Serialized sidecar bytes.
        :rtype: bytes
        :raises AmbiguousCodeTableError: If the table has a code for ``:``.
        """
        _validate_codes(sidecar.codes)
        if cls.DELIMITER[0] in sidecar.codes:
            raise AmbiguousCodeTableError(
                "Text sidecar cannot hold a code for the ':' byte"
            )

        lines = []
        if sidecar.bit_count is not None:
            lines.append(cls.BITS_TOKEN + b":" + str(sidecar.bit_count).encode("ascii"))
        if sidecar.checksum is not None:
            lines.append(cls.CRC_TOKEN + b":" + f"{sidecar.checksum:08x}".encode("ascii"))
        for symbol in sorted(sidecar.codes):
            if symbol == 0x0A:
                token = cls.NEWLINE_TOKEN
            else:
                token = bytes([symbol])
            lines.append(token + cls.DELIMITER + sidecar.codes[symbol].encode("ascii"))
        return b"".join(line + b"\n" for line in lines)

    @classmethod
    def loads(cls, data: bytes) -> Sidecar:
        """Parse text sidecar lines.

        Each non-empty line is split at its first colon.

        :param data: Serialized sidecar.
        :type data: bytes
        :returns: Parsed sidecar.
        :rtype: Sidecar
        :raises CodeTableFormatError: On a malformed line, an unknown token or
            an invalid table.
        """
        codes: Dict[int, str] = {}
        bit_count = None
        checksum = None
        for lineno, line in enumerate(data.split(b"\n"), start=1):
            if not line:
                continue
            token, sep, value = line.partition(cls.DELIMITER)
            if not sep:
                raise CodeTableFormatError(f"Line {lineno}: missing ':' delimiter")
            if not token:
                raise CodeTableFormatError(
                    f"Line {lineno}: empty symbol token (ambiguous ':' entry)"
                )
            try:
                text = value.decode("ascii")
            except UnicodeDecodeError:
                raise CodeTableFormatError(f"Line {lineno}: non-ASCII value") from None

            if token == cls.BITS_TOKEN:
                if not text.isdigit():
                    raise CodeTableFormatError(f"Line {lineno}: invalid bit count {text!r}")
                bit_count = int(text)
                continue
            if token == cls.CRC_TOKEN:
                try:
                    checksum = int(text, 16)
                except ValueError:
                    raise CodeTableFormatError(
                        f"Line {lineno}: invalid checksum {text!r}"
                    ) from None
                continue

            if token == cls.NEWLINE_TOKEN:
                symbol = 0x0A
            elif len(token) == 1:
                symbol = token[0]
            else:
                raise CodeTableFormatError(
                    f"Line {lineno}: unknown symbol token {token.decode('latin-1')!r}"
                )
            if symbol in codes:
                raise CodeTableFormatError(f"Line {lineno}: duplicate symbol {symbol}")
            codes[symbol] = text

        _validate_codes(codes)
        return Sidecar(codes, bit_count, checksum)


CODECS = {
    "binary": BinaryCodeTableCodec,
    "text": TextCodeTableCodec,
}


def load_sidecar(data: bytes) -> Sidecar:
    """Parse a sidecar in either format, picked by its signature.

    :param data: Serialized sidecar.
    :type data: bytes
    :returns: Parsed sidecar.
    :rtype: Sidecar
    :raises CodeTableFormatError: If the sidecar is malformed.
    """
    if data.startswith(BinaryCodeTableCodec.SIGNATURE):
        return BinaryCodeTableCodec.loads(data)
    return TextCodeTableCodec.loads(data)
