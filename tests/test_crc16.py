import pytest

from framebus.constants import CRC16_INIT
from framebus.crc16 import crc16_ccitt


def test_standard_check_value():
    assert crc16_ccitt(b"123456789") == 0x29B1


def test_empty_input_is_initial_value():
    assert crc16_ccitt(b"") == CRC16_INIT


@pytest.mark.parametrize(
    "data", [b"a", b"hello world", bytes(range(256)), b"\x00" * 40]
)
def test_appending_crc_gives_zero_residue(data):
    crc = crc16_ccitt(data)
    assert 0 <= crc <= 0xFFFF
    assert crc16_ccitt(data + crc.to_bytes(2, "big")) == 0


def test_accepts_bytearray_and_memoryview():
    data = b"payload bytes"
    expected = crc16_ccitt(data)
    assert crc16_ccitt(bytearray(data)) == expected
    assert crc16_ccitt(memoryview(data)) == expected


def test_single_bit_flips_are_detected():
    data = bytearray(b"frame under test")
    original = crc16_ccitt(data)
    for index in range(len(data)):
        for bit in range(8):
            corrupted = bytearray(data)
            corrupted[index] ^= 1 << bit
            assert crc16_ccitt(corrupted) != original