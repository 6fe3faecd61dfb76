import pytest

from errors import EmptyInputError, MalformedArtifactError
from Text_Compression import (
    compress_file,
    compress_text,
    compression_ratio,
    decompress_file,
    decompress_text,
)


def test_compress_text_reports_tree_and_ratio():
    result = compress_text("abracadabra")

    assert result["artifact"] == "0'a10'r10'b10'c1'd\n1\ni\xcfh"
    assert result["original_size"] == 11
    assert result["compressed_size"] == len(result["artifact"])
    assert result["compression_ratio"] == round(11 / len(result["artifact"]), 2)
    assert result["tree"].splitlines()[0] == "2 <= 1 => 3"
    assert result["info"] == (
        f"Compression complete\nCompression Ratio: {result['compression_ratio']:.2f}"
    )


def test_decompress_text_returns_text_and_tree():
    artifact = compress_text("hello world")["artifact"]
    result = decompress_text(artifact)

    assert result["text"] == "hello world"
    assert result["info"] == "Decompression complete"
    assert "= h" in result["tree"]


def test_compression_ratio_of_empty_artifact():
    assert compression_ratio("abc", "") == 0.0


def test_compress_text_rejects_empty_input():
    with pytest.raises(EmptyInputError):
        compress_text("")


def test_file_round_trip_preserves_line_endings(tmp_path):
    original = "first line\r\nsecond line\nthird\rdone 'quoted' 01\n" * 20
    source = tmp_path / "notes.txt"
    source.write_bytes(original.encode("utf-8"))

    stats = compress_file(str(source))
    compressed = tmp_path / "notes.txt.huff"
    assert stats["output_path"] == str(compressed)
    assert compressed.exists()
    assert stats["original_bytes"] == len(original.encode("utf-8"))
    assert stats["compressed_bytes"] == compressed.stat().st_size
    assert stats["saved"] == stats["original_bytes"] - stats["compressed_bytes"]

    restored = tmp_path / "restored.txt"
    result = decompress_file(str(compressed), str(restored))
    assert result["output_path"] == str(restored)
    assert restored.read_bytes() == original.encode("utf-8")


def test_decompress_file_requires_huff_extension(tmp_path):
    source = tmp_path / "notes.txt"
    source.write_text("abc", encoding="utf-8")
    with pytest.raises(ValueError):
        decompress_file(str(source), str(tmp_path / "out.txt"))


def test_decompress_file_rejects_corrupted_artifact(tmp_path):
    corrupted = tmp_path / "bad.huff"
    corrupted.write_text("0'a1'b\n9\nxyz", encoding="utf-8", newline="")
    with pytest.raises(MalformedArtifactError):
        decompress_file(str(corrupted), str(tmp_path / "out.txt"))
