class HuffError(Exception):
    """Base class for every failure raised by the coder."""


class InputFileError(HuffError, OSError):
    """Input file or its sidecar is missing or unreadable."""


class CodeTableFormatError(HuffError, ValueError):
    """Sidecar code table is malformed or uses an unsupported version."""


class AmbiguousCodeTableError(CodeTableFormatError):
    """Code table contains a symbol the text format cannot represent.

    A literal ``:`` byte collides with the ``<token>:<code>`` delimiter.
    """


class DecodeError(HuffError, ValueError):
    """Packed bitstream cannot be decoded with the given code table."""


class UnknownCodeError(DecodeError):
    """Accumulated bits never matched a known code."""


class TruncatedStreamError(DecodeError):
    """Packed data holds fewer bits than the sidecar records."""


class ChecksumMismatchError(DecodeError):
    """Decoded data does not match the checksum stored in the sidecar."""
