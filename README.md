# lc3vm

A virtual machine for the LC-3, the small 16-bit computer that is used to
teach computer architecture. It loads LC-3 object images and runs them in
your terminal. Keyboard input and text output go through the standard trap
routines.

The console handling uses `termios` and `select`, so the command runs on
POSIX systems.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Running programs

Pass one or more object image files:

```
lc3vm program.obj
```

`python -m lc3vm.cli program.obj` does the same.

Each image starts with a big-endian 16-bit origin address. Big-endian
16-bit words follow it and are loaded from that address onwards. Words that
would run past the end of memory are dropped, and so is a trailing odd byte.
When several images are given they are loaded in order, so a later image can
overwrite an earlier one. Execution starts at address `0x3000` with the zero
condition flag set.

While a program runs, a terminal on standard input is switched to
unbuffered, non-echoing input, so that programs can read single keystrokes.
The terminal is restored when the program halts or when you press Ctrl-C.
Input that is not a terminal is left as it is.

Exit status:

- `2` when no image is given; the usage line `lc3 [image-file1] ...` is
  printed.
- `1` when an image cannot be read or is shorter than its two-byte origin;
  `failed to load image: <path>` is printed.
- `0` when the program halts.
- `-2` (reported by the shell as 254) when interrupted with Ctrl-C.

## Supported behaviour

All LC-3 instructions are implemented: `BR`, `ADD`, `LD`, `ST`, `JSR`/`JSRR`,
`AND`, `LDR`, `STR`, `NOT`, `LDI`, `STI`, `JMP`/`RET`, `LEA` and `TRAP`.
`RTI` and the reserved opcode do nothing. There is no privilege mode and
there are no interrupts.

The trap routines are:

| Code   | Name    | Effect                                             |
|--------|---------|----------------------------------------------------|
| `0x20` | `GETC`  | read a character into R0, without echo             |
| `0x21` | `OUT`   | write the character in R0                          |
| `0x22` | `PUTS`  | write the string of words starting at R0           |
| `0x23` | `IN`    | prompt with `>`, read a character into R0, echo it |
| `0x24` | `PUTSP` | write the string of packed bytes starting at R0    |
| `0x25` | `HALT`  | print `HALT` and stop                              |

Every trap first saves the program counter in R7. A trap code not in the
table does nothing else. At the end of input, a character read gives
`0xFFFF`.

The keyboard status (`0xFE00`) and data (`0xFE02`) registers are mapped into
memory. Reading the status register checks for a waiting key without
blocking. When a key is waiting, bit 15 of the status register is set and
the key is placed in the data register.

## Using the library

You can also drive the machine from Python. Its console is any pair of
binary streams, and the keyboard check is any function that returns a bool:

```python
import io

from lc3vm.image import read_image
from lc3vm.machine import Machine

output = io.BytesIO()
machine = Machine(io.BytesIO(b""), output, lambda: False)
origin, words = read_image("program.obj")
machine.load(origin, words)
machine.run()
print(output.getvalue())
```

Each argument of `Machine` is optional. When one is left out, the machine
uses empty input, a fresh `io.BytesIO` for output, and a keyboard that never
has a key waiting.

`Machine` provides:

- `memory` and `registers`, which are lists of 16-bit words.
- `pc` and `cond`, which give the program counter and the current condition
  flag.
- `running`, which becomes false once the program halts.
- `load(origin, words)`, `read(address)` and `write(address, value)` for
  memory.
- `step()` to run one instruction, `execute(instruction)` to carry out an
  instruction word directly, and `run()` to continue until the program halts.
- `trap(instruction)` and `update_flags(register)`.

The other modules:

- `lc3vm.hardware` holds the `Opcode`, `Register`, `ConditionFlag`,
  `TrapCode` and `MemoryRegister` enumerations and `ConditionFlag.from_value`.
  It also has the `sign_extend(value, bit_count)` helper and the constants
  `MEMORY_SIZE`, `WORD_MASK` and `PC_START`.
- `lc3vm.image` has `read_image(path)` and `parse_image(data)`, which return
  `(origin, words)` and raise `ImageError` on failure. It also has `swap16`.
- `lc3vm.console` has `key_ready(stream)` for a non-blocking input check and
  `RawInput(stream)`. `RawInput` is a context manager that turns off line
  buffering and echo on a terminal, and its `restore()` method puts the
  settings back.

## What it does not do

The package only runs programs that are already assembled. It includes no
assembler and no debugger.