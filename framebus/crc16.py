"""CRC-16/CCITT-FALSE checksum (poly 0x1021, init 0xFFFF)."""

from __future__ import annotations

from .constants import CRC16_INIT, CRC16_POLY


def _make_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ CRC16_POLY) if crc & 0x8000 else (crc << 1)
            crc &= 0xFFFF
        table.append(crc)
    return tuple(table)


_TABLE = _make_table()


def crc16_ccitt(data: bytes | bytearray | memoryview) -> int:
    """Return the 16-bit CRC of ``data``."""
    crc = CRC16_INIT
    for byte in bytes(data):
        crc = ((crc << 8) & 0xFFFF) ^ _TABLE[(crc >> 8) ^ byte]
    return crc