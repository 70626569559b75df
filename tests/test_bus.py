import io
import random

import pytest

from framebus.bus import Bus, BusBusyError, apply_noise
from framebus.constants import MAX_ADDR_VALUE, MAX_DEVICES_LIMIT, SLAVE_MEM_SIZE
from framebus.frame import Frame, PacketType, RequestType
from framebus.logger import Logger
from framebus.receiver import Receiver


class CorruptChecksumRng:
    """Always injects noise and always picks the last choice offered."""

    def random(self):
        return 0.0

    def randrange(self, n):
        return n - 1


def make_bus(noise=0.0, rng=None):
    stream = io.StringIO()
    logger = Logger(color=False, stream=stream)
    bus = Bus(noise, logger=logger, rng=rng if rng is not None else random.Random(1))
    return bus, stream


def write_frame(addr, mem, data):
    frame = Frame(
        device_addr=addr,
        packet_type=PacketType.DATA,
        request_type=RequestType.WRITE,
        mem_addr=mem,
        data=data,
    )
    frame.compute_checksum()
    return frame


def read_frame(addr, mem, length):
    return Frame(
        device_addr=addr,
        packet_type=PacketType.DATA,
        request_type=RequestType.READ,
        mem_addr=mem,
        length=length,
    )


def frame_bytes(frame):
    header = bytes(
        [
            frame.device_addr,
            int(frame.packet_type),
            int(frame.request_type),
            frame.mem_addr >> 8,
            frame.mem_addr & 0xFF,
            frame.length,
        ]
    )
    return header + frame.data + frame.checksum.to_bytes(2, "big")


@pytest.mark.parametrize("given,expected", [(-0.5, 0.0), (1.5, 1.0), (0.25, 0.25)])
def test_noise_probability_is_clamped(given, expected):
    bus, _ = make_bus(given)
    assert bus.noise_prob == expected


def test_attach_rejects_master_address():
    bus, _ = make_bus()
    with pytest.raises(ValueError):
        bus.attach(Receiver(0))


def test_attach_highest_address():
    bus, _ = make_bus()
    receiver = Receiver(MAX_DEVICES_LIMIT)
    bus.attach(receiver)
    assert bus.devices[MAX_DEVICES_LIMIT] is receiver


def test_attach_shares_logger():
    bus, stream = make_bus()
    receiver = Receiver(2)
    bus.attach(receiver)
    assert receiver.logger is bus.logger
    assert "attached receiver at address 2" in stream.getvalue()


def test_send_write_then_read():
    bus, stream = make_bus()
    receiver = Receiver(1)
    bus.attach(receiver)
    ack = bus.send(write_frame(1, 8, b"payload"))
    assert ack is not None
    assert bytes(receiver.memory[8:15]) == b"payload"
    response = bus.send(read_frame(1, 8, 7))
    assert response.payload == b"payload"
    assert response.checksum_valid()
    assert "RESULT: ACK" in stream.getvalue()


def test_send_to_missing_device_nacks():
    bus, stream = make_bus()
    bus.attach(Receiver(1))
    assert bus.send(write_frame(9, 0, b"x")) is None
    out = stream.getvalue()
    assert "NACK: no receiver at address 9" in out
    assert "RESULT: NACK" in out


def test_send_normalizes_headers_without_touching_request():
    bus, _ = make_bus()
    receiver = Receiver(5)
    bus.attach(receiver)
    request = write_frame(MAX_ADDR_VALUE + 1 + 5, 0, b"z")
    assert bus.send(request) is not None
    assert request.device_addr == MAX_ADDR_VALUE + 1 + 5
    assert receiver.memory[0] == ord("z")


def test_transaction_ids_increase():
    bus, stream = make_bus()
    bus.attach(Receiver(1))
    bus.send(read_frame(1, 0, 1))
    bus.send(read_frame(1, 0, 1))
    out = stream.getvalue()
    assert "TX 0001" in out
    assert "TX 0002" in out


def test_busy_bus_raises():
    bus, _ = make_bus()
    bus.attach(Receiver(1))
    bus.busy = True
    with pytest.raises(BusBusyError):
        bus.send(read_frame(1, 0, 1))


def test_busy_flag_cleared_after_send():
    bus, _ = make_bus()
    bus.attach(Receiver(1))
    bus.send(read_frame(1, 0, 1))
    bus.send(read_frame(2, 0, 1))
    assert bus.busy is False


def test_corrupted_write_is_nacked():
    bus, _ = make_bus(1.0, CorruptChecksumRng())
    receiver = Receiver(1)
    bus.attach(receiver)
    assert bus.send(write_frame(1, 0, b"abc")) is None
    assert receiver.memory == bytes(SLAVE_MEM_SIZE)


def test_corrupted_read_response_fails_checksum():
    bus, _ = make_bus(1.0, CorruptChecksumRng())
    receiver = Receiver(1)
    receiver.memory[0:3] = b"abc"
    bus.attach(receiver)
    response = bus.send(read_frame(1, 0, 3))
    assert response is not None
    assert response.payload == b"abc"
    assert not response.checksum_valid()


def test_apply_noise_on_checksum_flips_one_bit():
    frame = write_frame(1, 0, b"abc")
    original = frame.checksum
    description = apply_noise(frame, CorruptChecksumRng())
    assert bin(frame.checksum ^ original).count("1") == 1
    assert frame.payload == b"abc"
    assert "checksum" in description


def test_apply_noise_flips_at_most_one_bit_and_keeps_ranges():
    changed = 0
    for seed in range(300):
        frame = write_frame(7, 0x1234, b"hello world")
        before = frame_bytes(frame)
        apply_noise(frame, random.Random(seed))
        after = frame_bytes(frame)
        assert len(after) == len(before)
        distance = sum(bin(a ^ b).count("1") for a, b in zip(before, after))
        assert distance <= 1
        changed += distance
        assert 0 <= frame.device_addr <= MAX_ADDR_VALUE
        assert frame.packet_type in (PacketType.DATA, PacketType.ACK)
        assert frame.request_type in (RequestType.READ, RequestType.WRITE)
        assert 0 <= frame.mem_addr <= 0xFFFF
        assert 0 <= frame.checksum <= 0xFFFF
    assert changed > 0