from .record import (
    RECORD_LENGTH,
    Decoded,
    DecodeResult,
    Malformed,
    NotApplicable,
    decode_line,
    decode_records,
)

__all__ = [
    "RECORD_LENGTH",
    "Decoded",
    "DecodeResult",
    "Malformed",
    "NotApplicable",
    "decode_line",
    "decode_records",
]
