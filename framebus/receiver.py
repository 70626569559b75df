"""Memory-backed slave devices that answer master requests."""

from __future__ import annotations

from typing import Optional

from .constants import MASTER_ADDR, MAX_ADDR_VALUE, SLAVE_MEM_SIZE
from .frame import Frame, PacketType, RequestType
from .logger import Logger

_ROW = 16


def _range_valid(start: int, length: int) -> bool:
    """Whether ``length`` bytes from ``start`` fit in device memory."""
    return length == 0 or start + length <= SLAVE_MEM_SIZE


class Receiver:
    """A bus device with its own block of memory.

    ``logger`` may be left unset; a bus adopts the device into its own
    logger when the device is attached.
    """

    def __init__(self, addr: int, logger: Optional[Logger] = None) -> None:
        self.addr = addr & MAX_ADDR_VALUE
        self.memory = bytearray(SLAVE_MEM_SIZE)
        self.logger = logger

    def _log(self, message: str) -> None:
        if self.logger is not None:
            self.logger.info("RX", f"DEV {self.addr:02d}: {message}\n")

    def process(self, request: Frame) -> Optional[Frame]:
        """Handle one master frame.

        Returns the ACK frame (carrying data for a READ), or ``None`` when
        the request is refused (NACK).
        """
        response = Frame(
            device_addr=MASTER_ADDR,
            packet_type=PacketType.ACK,
            request_type=request.request_type,
        )
        kind = "ACK(?)" if request.packet_type else "DATA"
        req = "WRITE" if request.request_type else "READ"
        self._log(
            f"got {kind} frame: req={req} "
            f"addr=0x{request.mem_addr:04X} len={request.length}"
        )

        if request.packet_type != PacketType.DATA:
            self._log("NACK - unexpected packet type (not DATA)")
            return None
        if (request.device_addr & MAX_ADDR_VALUE) != self.addr:
            self._log(
                "NACK - wrong destination "
                f"(got {request.device_addr & MAX_ADDR_VALUE})"
            )
            return None

        start, length = request.mem_addr, request.length

        if request.request_type == RequestType.READ:
            if not _range_valid(start, length):
                self._log("NACK - invalid READ range")
                return None
            response.request_type = RequestType.READ
            response.mem_addr = start
            response.data = bytes(self.memory[start : start + length])
            response.length = length
            response.compute_checksum()
            self._log(
                f"READ -> ACK to master: addr=0x{response.mem_addr:04X} "
                f"len={response.length} crc=0x{response.checksum:04X}"
            )
            return response

        if request.request_type == RequestType.WRITE:
            if not _range_valid(start, length):
                self._log("NACK - invalid WRITE range")
                return None
            if not request.checksum_valid():
                self._log("NACK - CRC mismatch on WRITE")
                return None
            if length:
                self.memory[start : start + length] = request.payload
            response.data = b""
            response.length = 0
            response.checksum = 0
            self._log(f"WRITE -> ACK to master (len={length})")
            return response

        self._log("NACK - unknown request type")
        return None

    def dump_memory(self, max_bytes: int = 128) -> str:
        """Hex dump of the first ``max_bytes`` bytes of memory.

        A count that is not positive or exceeds the memory size dumps it all.
        """
        if max_bytes <= 0 or max_bytes > SLAVE_MEM_SIZE:
            max_bytes = SLAVE_MEM_SIZE
        lines = [
            "",
            f"[device {self.addr:02d}] memory dump (first {max_bytes} bytes):",
        ]
        for start in range(0, max_bytes, _ROW):
            row = self.memory[start : min(start + _ROW, max_bytes)]
            lines.append(f"0x{start:04X}: " + "".join(f"{b:02X} " for b in row))
        return "\n".join(lines) + "\n"