import logging
import os

from huffman import decode_with_tree, display, encode_with_tree

logger = logging.getLogger(__name__)

COMPRESSED_EXTENSION = ".huff"


def compression_ratio(original, artifact):
    """Original length over artifact length, both counted in characters."""
    if not artifact:
        return 0.0
    return round(len(original) / len(artifact), 2)


def compress_text(text):
    artifact, tree = encode_with_tree(text)
    ratio = compression_ratio(text, artifact)

    return {
        "artifact": artifact,
        "tree": display(tree),
        "original_size": len(text),
        "compressed_size": len(artifact),
        "compression_ratio": ratio,
        "info": f"Compression complete\nCompression Ratio: {ratio:.2f}",
    }


def decompress_text(artifact):
    text, tree = decode_with_tree(artifact)

    return {
        "text": text,
        "tree": display(tree),
        "info": "Decompression complete",
    }


def compress_file(input_path, output_path=None):
    """
    Compresses a UTF-8 text file into a .huff artifact next to it (or at
    output_path) and returns size statistics.
    """
    if output_path is None:
        output_path = input_path + COMPRESSED_EXTENSION

    # newline="" keeps \r\n and lone \r as symbols instead of translating them
    with open(input_path, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    result = compress_text(text)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(result["artifact"])

    original_bytes = os.path.getsize(input_path)
    compressed_bytes = os.path.getsize(output_path)
    saved = original_bytes - compressed_bytes
    saved_percent = round(saved / original_bytes * 100, 2) if original_bytes else 0

    logger.info("Compressed '%s' -> '%s' (%d -> %d bytes)",
                input_path, output_path, original_bytes, compressed_bytes)

    result.update({
        "output_path": output_path,
        "original_bytes": original_bytes,
        "compressed_bytes": compressed_bytes,
        "saved": saved,
        "saved_percent": saved_percent,
    })
    return result


def decompress_file(input_path, output_path):
    """Decodes a .huff artifact back into the original text file."""
    if not input_path.endswith(COMPRESSED_EXTENSION):
        raise ValueError(f"input file must have the '{COMPRESSED_EXTENSION}' extension")

    with open(input_path, "r", encoding="utf-8", newline="") as f:
        artifact = f.read()

    result = decompress_text(artifact)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(result["text"])

    logger.info("Decompressed '%s' -> '%s'", input_path, output_path)

    result["output_path"] = output_path
    return result
