import zlib
from typing import Tuple

from bitops import pack_codes
from codetable import CODECS, Sidecar, load_sidecar
from decoder import Decoder
from errors import ChecksumMismatchError
from huffman import HuffmanCoder


class HuffmanCompressor:
    """One-shot Huffman compressor producing a packed stream and a sidecar.

    :ivar VERSION: Version of the binary sidecar format written by default.
    :type VERSION: int
    :ivar SIDECAR_FORMATS: Names of the supported sidecar formats.
    :type SIDECAR_FORMATS: Tuple[str, ...]
    :ivar coder: Huffman coder used to build code tables.
    :type coder: HuffmanCoder
    :ivar sidecar_format: Format used when writing sidecars.
    :type sidecar_format: str
    """

    VERSION = CODECS["binary"].VERSION
    SIDECAR_FORMATS = tuple(CODECS)

    def __init__(self, always_include_newline: bool = True, sidecar_format: str = "binary"):
        """Initialize the coder and select a sidecar format.

        :param always_include_newline: Whether the newline byte always gets
            a code.
        :type always_include_newline: bool
        :param sidecar_format: ``"binary"`` or ``"text"``.
        :type sidecar_format: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``sidecar_format`` is unknown.
        """
        if sidecar_format not in CODECS:
            raise ValueError(f"Unknown sidecar format: {sidecar_format}")
        self.coder = HuffmanCoder(always_include_newline=always_include_newline)
        self.sidecar_format = sidecar_format

    def compress(self, data: bytes) -> Tuple[bytes, bytes]:
        """Compress ``data`` into a packed bitstream and its sidecar.

        :param data: Input bytes to compress.
        :type data: bytes
        :returns: Tuple ``(packed, sidecar)``. Empty input yields empty
            ``packed`` and a sidecar recording zero bits.
        :rtype: Tuple[bytes, bytes]
        :raises AmbiguousCodeTableError: If the text sidecar format is
            selected and ``data`` contains a ``:`` byte.
        """
        codes = self.coder.build_from_data(data)
        packed, bit_count = pack_codes(codes[byte] for byte in data)
        sidecar = Sidecar(codes, bit_count, zlib.crc32(data))
        return packed, CODECS[self.sidecar_format].dumps(sidecar)

    @staticmethod
    def decompress(packed: bytes, sidecar: bytes) -> bytes:
        """Decompress data produced by :meth:`compress`.

        Sidecars without a bit count (written by older tools) are decoded
        up to the last whole code in the stream.

        :param packed: Packed bitstream.
        :type packed: bytes
        :param sidecar: Serialized sidecar in either format.
        :type sidecar: bytes
        :returns: Original bytes.
        :rtype: bytes
        :raises CodeTableFormatError: If the sidecar is malformed.
        :raises DecodeError: If the stream does not decode or fails the
            checksum.
        """
        table = load_sidecar(sidecar)
        data = Decoder(table.codes).decode(packed, table.bit_count)
        if table.checksum is not None and zlib.crc32(data) != table.checksum:
            raise ChecksumMismatchError("Decoded data does not match its checksum")
        return data
