"""Frames exchanged between the master and the receivers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .constants import MAX_ADDR_VALUE, MAX_DATA_LEN
from .crc16 import crc16_ccitt


class PacketType(IntEnum):
    """Direction/kind of a frame."""

    DATA = 0  # master -> slave
    ACK = 1  # slave -> master


class RequestType(IntEnum):
    """Memory operation carried by a frame."""

    READ = 0
    WRITE = 1


@dataclass
class Frame:
    """A single bus frame.

    ``length`` is a header field of its own; it defaults to ``len(data)``.
    The checksum covers the first ``length`` payload bytes only.
    """

    device_addr: int = 0
    packet_type: int = PacketType.DATA
    request_type: int = RequestType.READ
    mem_addr: int = 0
    data: bytes = b""
    length: Optional[int] = None
    checksum: int = 0

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if len(self.data) > MAX_DATA_LEN:
            raise ValueError(f"payload longer than {MAX_DATA_LEN} bytes")
        if self.length is None:
            self.length = len(self.data)
        if not 0 <= self.length <= MAX_DATA_LEN:
            raise ValueError(f"length must be in 0..{MAX_DATA_LEN}")
        self.mem_addr &= 0xFFFF
        self.checksum &= 0xFFFF

    @property
    def payload(self) -> bytes:
        """The ``length`` valid payload bytes, zero-padded if data is shorter."""
        return self.data[: self.length].ljust(self.length, b"\x00")

    def compute_checksum(self) -> int:
        """Store and return the CRC of the payload."""
        self.checksum = crc16_ccitt(self.payload)
        return self.checksum

    def checksum_valid(self) -> bool:
        """Whether the stored checksum matches the payload."""
        return crc16_ccitt(self.payload) == self.checksum

    def normalize_headers(self) -> None:
        """Clamp header fields to their legal ranges."""
        self.device_addr &= MAX_ADDR_VALUE
        self.packet_type = PacketType.ACK if self.packet_type else PacketType.DATA
        self.request_type = RequestType.WRITE if self.request_type else RequestType.READ

    def summary(self, prefix: str = "") -> str:
        """One-line description of the frame for logs."""
        kind = "ACK" if self.packet_type else "DATA"
        req = "WRITE" if self.request_type else "READ"
        return (
            f"{prefix or ''} dst={self.device_addr & MAX_ADDR_VALUE:02d} "
            f"type={kind} req={req} mem=0x{self.mem_addr:04X} "
            f"len={self.length} crc=0x{self.checksum:04X}"
        )