"""A shared, optionally noisy bus that routes frames to receivers."""

from __future__ import annotations

import dataclasses
import itertools
import random
from typing import Optional

from .constants import (
    DEFAULT_NOISE_PROB,
    MASTER_ADDR,
    MAX_ADDR_VALUE,
    MAX_DEVICES_LIMIT,
)
from .frame import Frame, PacketType, RequestType
from .logger import Logger
from .receiver import Receiver


class BusBusyError(RuntimeError):
    """Raised when a transfer is started while another is in progress."""


def _flip_random_bit(buf: bytearray, rng) -> tuple[int, int]:
    index = rng.randrange(len(buf))
    bit = rng.randrange(8)
    buf[index] ^= 1 << bit
    return index, bit


def apply_noise(frame: Frame, rng) -> str:
    """Flip one random bit in the header, payload or checksum of ``frame``.

    ``rng`` needs ``randrange``. Returns a short description of the change.
    """
    choice = rng.randrange(3)
    if choice == 0:
        header = bytearray(
            [
                frame.device_addr & 0xFF,
                int(frame.packet_type) & 0xFF,
                int(frame.request_type) & 0xFF,
                frame.mem_addr >> 8,
                frame.mem_addr & 0xFF,
                frame.length,
            ]
        )
        index, bit = _flip_random_bit(header, rng)
        frame.device_addr = header[0] & MAX_ADDR_VALUE
        frame.packet_type = PacketType.ACK if header[1] else PacketType.DATA
        frame.request_type = RequestType.WRITE if header[2] else RequestType.READ
        frame.mem_addr = (header[3] << 8) | header[4]
        frame.length = header[5]
        where = "header"
    elif choice == 1 and frame.length > 0:
        payload = bytearray(frame.payload)
        index, bit = _flip_random_bit(payload, rng)
        frame.data = bytes(payload)
        where = "payload"
    else:
        checksum = bytearray(frame.checksum.to_bytes(2, "big"))
        index, bit = _flip_random_bit(checksum, rng)
        frame.checksum = int.from_bytes(checksum, "big")
        where = "checksum"
    return f"flipped bit {bit} in {where} byte {index}"


class Bus:
    """Routes one frame at a time from the master to an attached receiver."""

    def __init__(
        self,
        noise_prob: float = DEFAULT_NOISE_PROB,
        logger: Optional[Logger] = None,
        rng=None,
    ) -> None:
        self.noise_prob = min(max(float(noise_prob), 0.0), 1.0)
        self.logger = logger if logger is not None else Logger()
        self.devices: dict[int, Receiver] = {}
        self.busy = False
        self._rng = rng if rng is not None else random.Random()
        self._txids = itertools.count(1)

    def attach(self, receiver: Receiver) -> None:
        """Register ``receiver`` at its address.

        Raises ``ValueError`` for the master address.
        """
        addr = receiver.addr & MAX_ADDR_VALUE
        if addr == MASTER_ADDR or addr > MAX_DEVICES_LIMIT:
            raise ValueError(f"cannot attach a receiver at address {addr}")
        self.devices[addr] = receiver
        if receiver.logger is None:
            receiver.logger = self.logger
        self.logger.info("BUS", f"attached receiver at address {addr}\n")

    def _maybe_corrupt(self, frame: Frame) -> None:
        if self._rng.random() < self.noise_prob:
            self.logger.verbose("BUS", f"noise: {apply_noise(frame, self._rng)}\n")

    def send(self, request: Frame) -> Optional[Frame]:
        """Deliver ``request`` and return the device's ACK frame.

        Returns ``None`` on NACK. The caller's frame is never modified.
        Raises ``BusBusyError`` if a transfer is already in progress.
        """
        txid = next(self._txids)
        if self.busy:
            self.logger.error("BUS", "BUSY -> NACK\n")
            raise BusBusyError("bus is busy")
        self.busy = True
        try:
            return self._transfer(txid, request)
        finally:
            self.busy = False

    def _transfer(self, txid: int, request: Frame) -> Optional[Frame]:
        log = self.logger
        local = dataclasses.replace(request)
        local.normalize_headers()

        log.banner_tx_begin(txid, local.device_addr)
        log.stream.write(local.summary("REQ  ▶") + "\n")
        log.verbose(
            "BUS",
            f"M->S raw send details: dst={local.device_addr} "
            f"type={int(local.packet_type)} req={int(local.request_type)} "
            f"addr=0x{local.mem_addr:04X} len={local.length}\n",
        )
        self._maybe_corrupt(local)

        target = self.devices.get(local.device_addr)
        if target is None:
            log.error("BUS", f"NACK: no receiver at address {local.device_addr}\n")
            log.banner_tx_end(txid, False)
            return None

        response = target.process(local)
        if response is not None:
            self._maybe_corrupt(response)
            log.stream.write(response.summary("RESP ◀") + "\n")
            log.verbose(
                "BUS",
                f"S->M resp details: req={int(response.request_type)} "
                f"addr=0x{response.mem_addr:04X} len={response.length} "
                f"crc=0x{response.checksum:04X}\n",
            )
        else:
            log.error("BUS", "S->M resp: NACK (no ACK produced)\n")

        log.banner_tx_end(txid, response is not None)
        return response