"""Master-side transfers: chunked writes and verified reads with retries."""

from __future__ import annotations

from typing import Iterator, Optional

from .bus import Bus, BusBusyError
from .constants import DEFAULT_MAX_RETRIES, MAX_ADDR_VALUE, MAX_DATA_LEN
from .frame import Frame, PacketType, RequestType
from .logger import Logger


class TransferError(Exception):
    """A chunk could not be transferred within the allowed retries."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


class Master:
    """The bus master: splits transfers into frames and retries on failure.

    Each frame is tried ``max_retries + 1`` times before giving up.
    """

    def __init__(
        self,
        bus: Bus,
        max_retries: int = DEFAULT_MAX_RETRIES,
        chunk_size: int = MAX_DATA_LEN,
        logger: Optional[Logger] = None,
    ) -> None:
        self.bus = bus
        self.max_retries = max_retries
        self.chunk_size = chunk_size
        self.logger = logger if logger is not None else bus.logger

    @property
    def chunk_size(self) -> int:
        """Payload bytes per frame, always within 1..MAX_DATA_LEN."""
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, size: int) -> None:
        self._chunk_size = min(max(int(size), 1), MAX_DATA_LEN)

    def _chunks(self, total: int) -> Iterator[tuple[int, int]]:
        for offset in range(0, total, self._chunk_size):
            yield offset, min(self._chunk_size, total - offset)

    def _attempts(self) -> Iterator[str]:
        total = self.max_retries + 1
        for attempt in range(1, total + 1):
            yield f"{attempt}/{total}"

    def _send(self, request: Frame) -> Optional[Frame]:
        try:
            return self.bus.send(request)
        except BusBusyError:
            return None

    def _request(self, dst_addr: int, kind: RequestType, mem_addr: int, **fields) -> Frame:
        return Frame(
            device_addr=dst_addr & MAX_ADDR_VALUE,
            packet_type=PacketType.DATA,
            request_type=kind,
            mem_addr=mem_addr & 0xFFFF,
            **fields,
        )

    def write(self, dst_addr: int, start_addr: int, data: bytes) -> None:
        """Write ``data`` to device memory starting at ``start_addr``.

        Raises ``TransferError`` if a chunk is never acknowledged.
        """
        data = bytes(data)
        for offset, size in self._chunks(len(data)):
            request = self._request(
                dst_addr,
                RequestType.WRITE,
                start_addr + offset,
                data=data[offset : offset + size],
            )
            request.compute_checksum()
            for attempt in self._attempts():
                if self._send(request) is not None:
                    break
                self.logger.error("MASTER", f"NACK (attempt {attempt}) -> retrying\n")
            else:
                self.logger.error("MASTER", f"WRITE failed at offset {offset}\n")
                raise TransferError(f"write failed at offset {offset}", offset)

    def read(self, dst_addr: int, start_addr: int, length: int) -> bytes:
        """Read ``length`` bytes of device memory from ``start_addr``.

        Responses are checked for CRC and header consistency and re-requested
        when they fail. Raises ``TransferError`` if a chunk never arrives intact.
        """
        out = bytearray()
        for offset, size in self._chunks(length):
            expected_addr = (start_addr + offset) & 0xFFFF
            request = self._request(
                dst_addr, RequestType.READ, expected_addr, length=size
            )
            for attempt in self._attempts():
                response = self._send(request)
                if response is None:
                    self.logger.error(
                        "MASTER", f"READ: received NACK (attempt {attempt})\n"
                    )
                    continue
                if not response.checksum_valid():
                    self.logger.error(
                        "MASTER",
                        f"READ: CRC mismatch on response (attempt {attempt})\n",
                    )
                    continue
                if response.mem_addr != expected_addr or response.length != size:
                    self.logger.error(
                        "MASTER",
                        "READ: header mismatch (addr or length). Retrying.\n",
                    )
                    continue
                out += response.payload
                break
            else:
                self.logger.error("MASTER", f"READ failed at offset {offset}\n")
                raise TransferError(f"read failed at offset {offset}", offset)
        return bytes(out)

    def write_string(self, dst_addr: int, start_addr: int, text: str) -> None:
        """Write the UTF-8 bytes of ``text`` (no terminator)."""
        self.write(dst_addr, start_addr, text.encode("utf-8"))

    def read_string(self, dst_addr: int, start_addr: int, length: int) -> str:
        """Read ``length`` bytes and decode them up to the first NUL byte."""
        raw = self.read(dst_addr, start_addr, length)
        return raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace")