import logging

import numpy as np

from errors import MalformedArtifactError

logger = logging.getLogger(__name__)

_ZERO = ord("0")


def convert_to_binary_string(symbols, mapping):
    """Concatenate the code of every symbol, in input order."""
    return "".join(mapping[symbol] for symbol in symbols)


def add_padding(bits):
    """
    Pad with trailing zeros up to a whole number of bytes.
    Returns (padded_bits, pad_count) with pad_count in 0..7.
    """
    pad_count = (8 - len(bits) % 8) % 8
    return bits + "0" * pad_count, pad_count


def remove_padding(bits, pad_count):
    """Drop exactly pad_count trailing bits."""
    if not 0 <= pad_count <= 7:
        raise MalformedArtifactError(f"pad count out of range: {pad_count}")
    if pad_count > len(bits):
        raise MalformedArtifactError(
            f"pad count {pad_count} exceeds bit length {len(bits)}"
        )
    # bits[:-0] would be empty, so slice by explicit length
    return bits[:len(bits) - pad_count]


def pack(bits):
    """Turn a '0'/'1' string whose length is a multiple of 8 into bytes (MSB first)."""
    if len(bits) % 8:
        raise ValueError(f"bit length {len(bits)} is not a multiple of 8")
    if not bits:
        return b""
    digits = np.frombuffer(bits.encode("ascii"), dtype=np.uint8) - _ZERO
    packed = np.packbits(digits).tobytes()
    logger.debug("Packed %d bits into %d bytes", len(bits), len(packed))
    return packed


def unpack(data):
    """Render every byte as 8 binary digits and concatenate them."""
    if not data:
        return ""
    bits = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
    return (bits + _ZERO).astype(np.uint8).tobytes().decode("ascii")
