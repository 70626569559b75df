"""Command-line front end: drive one read or write over a simulated bus."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence

from .bus import Bus
from .constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_NOISE_PROB,
    MAX_DATA_LEN,
    MAX_DEVICES_LIMIT,
    SLAVE_MEM_SIZE,
)
from .logger import Logger, LogLevel
from .receiver import Receiver
from .sender import Master, TransferError

_PROG = "framebus"
_ULONG = 1 << 64

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_UINT_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_FLOAT_RE = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _strtoul(text: str) -> int:
    """Parse an unsigned number with C-style base prefixes (0x hex, 0 octal)."""
    match = _UINT_RE.match(text)
    if not match:
        return 0
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    return (-value) % _ULONG if sign == "-" else value


def _atof(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(0)) if match else 0.0


def _usage(prog: str) -> str:
    return "\n".join(
        [
            "Usage:",
            f'  {prog} --devices N --dest D --write --addr A --data "STRING" '
            "[--retries R] [--noise P] [--dump] [--state DIR] [--chunk N]",
            f"  {prog} --devices N --dest D --read  --addr A --len  L       "
            "[--retries R] [--noise P] [--dump] [--state DIR] [--chunk N]",
            "",
            "Notes:",
            "  - Addresses are 6-bit: 0 reserved for master, 1..63 for slaves.",
            f"  - A is 16-bit memory address (0..{SLAVE_MEM_SIZE - 1}).",
            f"  - L is number of bytes to read (1..{MAX_DATA_LEN}).",
            "  - P is noise probability in [0.0, 1.0].",
            "  - With --dump, device memory prefix is printed after operation.",
            "  - Use --verbose or --quiet to control log detail; "
            "--no-color to disable ANSI colors.",
            "  - Use --state DIR to persist device memory across runs "
            "(files: DIR/dev_XX.bin).",
            f"  - Use --chunk N to change frame payload size at runtime "
            f"(1..{MAX_DATA_LEN}; default {MAX_DATA_LEN}).",
            "",
        ]
    )


class _Input:
    """Whitespace-separated token reading over a line-oriented stream."""

    def __init__(self, readline: Callable[[], str]) -> None:
        self._readline = readline
        self._line = ""

    def _skip_ws(self) -> bool:
        while True:
            if not self._line:
                self._line = self._readline()
                if not self._line:
                    return False
            self._line = self._line.lstrip()
            if self._line:
                return True

    def read_int(self) -> Optional[int]:
        if not self._skip_ws():
            return None
        match = re.match(r"[+-]?\d+", self._line)
        if not match:
            return None
        self._line = self._line[match.end():]
        return int(match.group(0))

    def read_char(self) -> Optional[str]:
        if not self._skip_ws():
            return None
        char, self._line = self._line[0], self._line[1:]
        return char

    def read_fresh_line(self) -> Optional[str]:
        """Discard the rest of the current line, then return the next one."""
        if self._line:
            self._line = ""
        else:
            self._readline()
        line = self._readline()
        if not line:
            return None
        return line[:-1] if line.endswith("\n") else line


def ensure_dir(path) -> bool:
    """Make sure ``path`` is a directory, creating it if needed."""
    if not path:
        return False
    target = Path(path)
    if target.exists():
        return target.is_dir()
    try:
        target.mkdir()
    except FileExistsError:
        return True
    except OSError as exc:
        print(f"mkdir --state DIR: {exc.strerror}", file=sys.stderr)
        return False
    return True


def state_path(directory, addr: int) -> Path:
    """File holding the saved memory of the device at ``addr``."""
    return Path(directory) / f"dev_{addr:02d}.bin"


def load_state(receiver: Receiver, directory) -> None:
    """Restore device memory from its state file, if there is one."""
    try:
        with open(state_path(directory, receiver.addr), "rb") as handle:
            saved = handle.read(SLAVE_MEM_SIZE)
    except OSError:
        return
    receiver.memory[: len(saved)] = saved


def save_state(receiver: Receiver, directory) -> None:
    """Write device memory to its state file."""
    try:
        with open(state_path(directory, receiver.addr), "wb") as handle:
            handle.write(bytes(receiver.memory))
    except OSError as exc:
        print(f"fopen --state: {exc.strerror}", file=sys.stderr)


def _prompt(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one transfer; 0 on success, 1 on bad input, 2 on a failed transfer."""
    args = list(sys.argv[1:] if argv is None else argv)

    num_devices = 0
    have_write = have_read = False
    dest = -1
    retries = DEFAULT_MAX_RETRIES
    noise = DEFAULT_NOISE_PROB
    dump_after = False
    have_addr = False
    addr = 0
    data_str: Optional[str] = None
    read_len = 0
    state_dir: Optional[str] = None
    chunk_arg = 0
    level = LogLevel.NORMAL
    color = True

    tokens: Iterator[str] = iter(args)
    remaining = len(args)
    for index, arg in enumerate(tokens):
        has_value = index + 1 < remaining
        if arg == "--devices" and has_value:
            num_devices = _atoi(next(tokens))
        elif arg == "--dest" and has_value:
            dest = _atoi(next(tokens))
        elif arg == "--write":
            have_write = True
        elif arg == "--read":
            have_read = True
        elif arg == "--addr" and has_value:
            have_addr = True
            addr = _strtoul(next(tokens))
        elif arg == "--data" and has_value:
            data_str = next(tokens)
        elif arg == "--len" and has_value:
            read_len = _strtoul(next(tokens))
        elif arg == "--retries" and has_value:
            retries = max(_atoi(next(tokens)), 0)
        elif arg == "--noise" and has_value:
            noise = min(max(_atof(next(tokens)), 0.0), 1.0)
        elif arg == "--dump":
            dump_after = True
        elif arg == "--state" and has_value:
            state_dir = next(tokens)
        elif arg == "--chunk" and has_value:
            chunk_arg = min(max(_strtoul(next(tokens)), 1), MAX_DATA_LEN)
        elif arg == "--verbose":
            level = LogLevel.VERBOSE
        elif arg == "--quiet":
            level = LogLevel.QUIET
        elif arg == "--no-color":
            color = False
        elif arg == "--help":
            sys.stdout.write(_usage(_PROG))
            return 0
        else:
            print(f"Unknown or incomplete argument: {arg}")
            sys.stdout.write(_usage(_PROG))
            return 1
        # enumerate does not see values consumed with next(); keep index honest
        if arg in {
            "--devices", "--dest", "--addr", "--data", "--len",
            "--retries", "--noise", "--state", "--chunk",
        }:
            remaining -= 1
            args_left = remaining - index - 1
            if args_left < 0:
                remaining += 1

    stdin = _Input(sys.stdin.readline)

    if not 0 < num_devices <= MAX_DEVICES_LIMIT:
        _prompt(f"Enter number of devices (1..{MAX_DEVICES_LIMIT}): ")
        value = stdin.read_int()
        if value is None or not 0 < value <= MAX_DEVICES_LIMIT:
            print("Invalid number of devices.", file=sys.stderr)
            return 1
        num_devices = value
    if not 1 <= dest <= num_devices:
        _prompt(f"Enter destination device address (1..{num_devices}): ")
        value = stdin.read_int()
        if value is None or not 1 <= value <= num_devices:
            print("Invalid destination address.", file=sys.stderr)
            return 1
        dest = value
    if not have_addr:
        _prompt(f"Enter memory address (0..{SLAVE_MEM_SIZE - 1}): ")
        value = stdin.read_int()
        if value is None or value < 0 or value >= SLAVE_MEM_SIZE:
            print("Invalid memory address.", file=sys.stderr)
            return 1
        addr = value
    if not have_write and not have_read:
        _prompt("Choose operation (w=write, r=read): ")
        choice = ""
        while choice not in ("w", "r"):
            char = stdin.read_char()
            if char is None:
                print("Invalid input.", file=sys.stderr)
                return 1
            choice = char
        have_write = choice == "w"
        have_read = choice == "r"
    if have_write and data_str is None:
        _prompt("Enter string to WRITE: ")
        line = stdin.read_fresh_line()
        if line is None:
            print("Failed to read string.", file=sys.stderr)
            return 1
        data_str = line
    if have_read and read_len == 0:
        _prompt(f"Enter number of bytes to READ (1..{MAX_DATA_LEN}): ")
        value = stdin.read_int()
        if value is None or not 1 <= value <= MAX_DATA_LEN:
            print("Invalid read length.", file=sys.stderr)
            return 1
        read_len = value

    if state_dir is not None and not ensure_dir(state_dir):
        print(
            f"Could not create/access --state directory: {state_dir}",
            file=sys.stderr,
        )
        return 1

    logger = Logger(level=level, color=color, stream=sys.stdout)
    bus = Bus(noise, logger=logger)
    receivers = []
    for device in range(1, num_devices + 1):
        receiver = Receiver(device)
        if state_dir is not None:
            load_state(receiver, state_dir)
        bus.attach(receiver)
        receivers.append(receiver)

    master = Master(bus, max_retries=retries, logger=logger)
    if chunk_arg > 0:
        master.chunk_size = chunk_arg

    ok = False
    mem_addr = addr & 0xFFFF
    if have_write:
        logger.draw_rule()
        logger.info(
            "MASTER",
            f'WRITE: "{data_str}" -> device {dest} at 0x{addr:04X} '
            f"(retries={retries}, noise={noise:.3f})\n",
        )
        payload = os.fsencode(data_str) if data_str else b""
        try:
            master.write(dest, mem_addr, payload)
            ok = True
        except TransferError:
            ok = False
        logger.info("MASTER", f"WRITE {'SUCCESS' if ok else 'FAILED'}\n")
        logger.draw_rule()
    elif have_read:
        logger.draw_rule()
        logger.info(
            "MASTER",
            f"READ: device {dest} at 0x{addr:04X} for {read_len} bytes "
            f"(retries={retries}, noise={noise:.3f})\n",
        )
        try:
            raw = master.read(dest, mem_addr, read_len)
            ok = True
        except TransferError:
            ok = False
        if ok:
            text = raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace")
            logger.info("MASTER", f'READ SUCCESS, data: "{text}"\n')
        else:
            logger.error("MASTER", "READ FAILED\n")
        logger.draw_rule()

    if state_dir is not None:
        for receiver in receivers:
            save_state(receiver, state_dir)

    if dump_after:
        for receiver in receivers:
            sys.stdout.write(receiver.dump_memory(128))

    return 0 if ok else 2