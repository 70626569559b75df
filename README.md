# framebus

A small in-process simulation of a master/slave memory bus. A master writes
and reads byte ranges on numbered devices through a shared bus. Every
transfer is split into frames whose payload is protected by
CRC-16/CCITT-FALSE; the bus can flip random bits to imitate line noise, and
the master retries a frame when a device answers with a NACK or a reply fails
its checksum or header check.

The package also ships a command runner for binary search trees and AVL trees.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## The bus simulator

```
framebus --devices N --dest D --write --addr A --data "STRING" [options]
framebus --devices N --dest D --read  --addr A --len L       [options]
```

- Device addresses are 6-bit: 0 belongs to the master, 1..63 to devices.
- `A` is a memory address in each device's 4096-byte memory (0..4095). It may
  be given in decimal, hexadecimal (`0x10`) or octal (`010`).
- `L` is the number of bytes to read (1..255).

Options:

| Option | Meaning |
| --- | --- |
| `--retries R` | retries per frame (default 3; negative values become 0) |
| `--noise P` | probability in [0.0, 1.0] that a frame is corrupted (default 0.01) |
| `--chunk N` | frame payload size, clamped to 1..255 (default 255) |
| `--state DIR` | keep device memory between runs in `DIR/dev_XX.bin` |
| `--dump` | print a hex dump of the first 128 bytes of every device after the operation |
| `--verbose` / `--quiet` | more or less log detail |
| `--no-color` | no ANSI colours in the log |
| `--help` | show usage |

Any value left off the command line (device count, destination, address,
operation, data or read length) is asked for on standard input. The command
exits with 0 when the operation succeeded, 2 when it failed after all
retries, and 1 on bad input.

Write a string and read it back in a later run:

```
framebus --devices 4 --dest 2 --write --addr 0x10 --data "hello" --state .state --noise 0
framebus --devices 4 --dest 2 --read --addr 0x10 --len 5 --state .state --dump
```

## Using it from Python

- `framebus.crc16.crc16_ccitt(data)` returns the 16-bit CRC of a bytes-like
  object; `crc16_ccitt(b"123456789")` is `0x29B1`.
- `framebus.frame.Frame` is one frame on the wire (with `PacketType` and
  `RequestType`), offering `compute_checksum()`, `checksum_valid()`,
  `normalize_headers()` and `summary(prefix)`.
- `framebus.logger.Logger` writes tagged log lines at a `LogLevel`
  (`QUIET`, `NORMAL`, `VERBOSE`), optionally with ANSI colours.
- `framebus.receiver.Receiver` is a device with 4096 bytes of memory;
  `process(request)` returns an ACK frame or `None` for a NACK, and
  `dump_memory(max_bytes)` returns a hex dump as a string.
- `framebus.bus.Bus` routes frames to attached receivers (`attach`, `send`)
  and may corrupt them with `apply_noise`. `attach` raises `ValueError` for
  the master address; `send` returns `None` on NACK and raises
  `BusBusyError` if a transfer is started while another is in progress.
- `framebus.sender.Master` splits a transfer into frames of `chunk_size`
  bytes and retries each one: `write`, `read`, `write_string` and
  `read_string`. A transfer that fails after all retries raises
  `TransferError`, whose `offset` tells where it stopped.
- `framebus.cli` has the helpers behind `--state`: `ensure_dir`,
  `state_path`, `load_state` and `save_state`.

```python
from framebus.bus import Bus
from framebus.receiver import Receiver
from framebus.sender import Master

bus = Bus(noise_prob=0.0)
bus.attach(Receiver(1))
master = Master(bus)
master.write_string(1, 0x20, "hello")
assert master.read_string(1, 0x20, 5) == "hello"
```

## The tree runner

```
framebus-tree < commands.txt
```

The first input line holds the number of command lines that follow. Each
command is a letter, optionally followed by integers:

| Command | Effect |
| --- | --- |
| `T v...` | start a new binary search tree; positive values are inserted, negative ones deleted |
| `H v...` | start a new AVL tree and insert the absolute value of each non-zero number |
| `A v...` | insert the positive values into the current tree |
| `U v...` | delete the positive values from the current tree |
| `F x` | print `Yes` if `x` is in the tree, else `No` |
| `N` / `Q` | number of nodes / number of leaves |
| `P` / `I` / `S` / `L` | preorder, inorder, postorder, level-order listing |
| `D` / `W` / `X` | height (-1 for an empty tree), width, diameter |

Unknown commands are ignored. The same operations are available in Python
through `framebus.tree.SearchTree` (with `TreeKind.BST` or `TreeKind.AVL`)
and `framebus.tree.run_commands(lines)`, which yields the output lines.

## What it does not do

The bus, devices and noise exist only inside one process: nothing talks to
real hardware or a real serial line, and device memory lasts only for the run
unless `--state` is given.