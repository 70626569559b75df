"""Tagged, optionally coloured console logging for bus transactions."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Optional, TextIO

_RESET = "\x1b[0m"
_DIM = "\x1b[2m"
_BOLD = "\x1b[1m"
_GREEN = "\x1b[32m"
_RED = "\x1b[31m"
_CYAN = "\x1b[36m"

_RULE = "─" * 68


class LogLevel(IntEnum):
    """How much detail is printed."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2


class Logger:
    """Writes tagged log lines prefixed with the current transaction id."""

    def __init__(
        self,
        level: LogLevel = LogLevel.NORMAL,
        color: bool = True,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.level = LogLevel(level)
        self.color = bool(color)
        self.txid = 0
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        """The output stream; standard output unless one was given."""
        return self._stream if self._stream is not None else sys.stdout

    def _colored(self, code: str, text: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    def log(self, level: LogLevel, tag: str, message: str) -> None:
        """Write ``message`` if ``level`` is within the configured level."""
        if level > self.level:
            return
        parts = []
        if tag:
            parts.append(self._colored(_DIM, f"[TX {self.txid:04d}]"))
            parts.append(" ")
            parts.append(self._colored(_CYAN, f"[{tag}]"))
            parts.append(" ")
        parts.append(message)
        self.stream.write("".join(parts))

    def info(self, tag: str, message: str) -> None:
        self.log(LogLevel.NORMAL, tag, message)

    def verbose(self, tag: str, message: str) -> None:
        self.log(LogLevel.VERBOSE, tag, message)

    def error(self, tag: str, message: str) -> None:
        self.log(LogLevel.NORMAL, tag, message)

    def draw_rule(self) -> None:
        """Write a horizontal separator line."""
        if self.color:
            self.stream.write(f"{_DIM}{_RULE}\n{_RESET}")
        else:
            self.stream.write(f"{_RULE}\n")

    def banner_tx_begin(self, txid: int, dst_addr: int) -> None:
        """Start a transaction: remember its id and print a header."""
        self.txid = txid
        line = f"┌─ TX {txid:04d}: MASTER → DEV {dst_addr:02d}\n"
        self.stream.write(self._colored(_BOLD, line))

    def banner_tx_end(self, txid: int, ok: bool) -> None:
        """Close a transaction with its ACK/NACK result."""
        del txid
        if ok:
            self.stream.write(self._colored(_GREEN, "└─ RESULT: ACK ✓\n"))
        else:
            self.stream.write(self._colored(_RED, "└─ RESULT: NACK ✗\n"))