import pytest

from bitpack import add_padding, convert_to_binary_string, pack, remove_padding, unpack
from errors import MalformedArtifactError


def test_convert_to_binary_string_follows_input_order():
    mapping = {"a": "0", "b": "10", "c": "11"}
    assert convert_to_binary_string("abca", mapping) == "010110"


@pytest.mark.parametrize("length", range(0, 17))
def test_add_padding_reaches_byte_boundary(length):
    bits = "1" * length
    padded, pad_count = add_padding(bits)

    assert len(padded) % 8 == 0
    assert 0 <= pad_count <= 7
    assert padded == bits + "0" * pad_count
    assert remove_padding(padded, pad_count) == bits


def test_remove_padding_with_zero_count_keeps_everything():
    assert remove_padding("10101010", 0) == "10101010"


@pytest.mark.parametrize("pad_count", [-1, 8, 9])
def test_remove_padding_rejects_out_of_range_count(pad_count):
    with pytest.raises(MalformedArtifactError):
        remove_padding("10101010", pad_count)


def test_remove_padding_rejects_count_longer_than_bits():
    with pytest.raises(MalformedArtifactError):
        remove_padding("101", 4)


def test_pack_is_msb_first():
    assert pack("0110100111001111") == bytes([0x69, 0xCF])
    assert pack("") == b""


def test_pack_rejects_partial_byte():
    with pytest.raises(ValueError):
        pack("1010")


def test_unpack_renders_eight_digits_per_byte():
    assert unpack(bytes([0, 1, 255])) == "00000000" "00000001" "11111111"
    assert unpack(b"") == ""
