"""The LC-3 processor: registers, memory, instruction execution and traps."""

from __future__ import annotations

import io
from typing import Any, Callable, Iterable

from lc3vm.hardware import (
    MEMORY_SIZE,
    PC_START,
    REGISTER_COUNT,
    WORD_MASK,
    ConditionFlag,
    MemoryRegister,
    Opcode,
    Register,
    TrapCode,
    sign_extend,
)

_EOF_WORD = WORD_MASK


def _never_ready() -> bool:
    return False


class Machine:
    """An LC-3 virtual machine wired to byte streams for its console."""

    def __init__(
        self,
        input_stream: Any = None,
        output_stream: Any = None,
        key_ready: Callable[[], bool] | None = None,
    ) -> None:
        self.input_stream = io.BytesIO() if input_stream is None else input_stream
        self.output_stream = io.BytesIO() if output_stream is None else output_stream
        self.key_ready = key_ready if key_ready is not None else _never_ready
        self.memory = [0] * MEMORY_SIZE
        self.registers = [0] * REGISTER_COUNT
        self.registers[Register.PC] = PC_START
        self.registers[Register.COND] = int(ConditionFlag.ZRO)
        self.running = True
        self._operations: dict[int, Callable[[int], None]] = {
            Opcode.BR: self._br,
            Opcode.ADD: self._add,
            Opcode.LD: self._ld,
            Opcode.ST: self._st,
            Opcode.JSR: self._jsr,
            Opcode.AND: self._and,
            Opcode.LDR: self._ldr,
            Opcode.STR: self._str,
            Opcode.RTI: self._unused,
            Opcode.NOT: self._not,
            Opcode.LDI: self._ldi,
            Opcode.STI: self._sti,
            Opcode.JMP: self._jmp,
            Opcode.RES: self._unused,
            Opcode.LEA: self._lea,
            Opcode.TRAP: self.trap,
        }
        self._traps: dict[int, Callable[[], None]] = {
            TrapCode.GETC: self._trap_getc,
            TrapCode.OUT: self._trap_out,
            TrapCode.PUTS: self._trap_puts,
            TrapCode.IN: self._trap_in,
            TrapCode.PUTSP: self._trap_putsp,
            TrapCode.HALT: self._trap_halt,
        }

    @property
    def pc(self) -> int:
        """The program counter."""
        return self.registers[Register.PC]

    @property
    def cond(self) -> ConditionFlag:
        """The current condition flag."""
        return ConditionFlag(self.registers[Register.COND])

    # Memory

    def load(self, origin: int, words: Iterable[int]) -> None:
        """Place ``words`` in memory starting at ``origin``; words past the end are dropped."""
        origin &= WORD_MASK
        values = [word & WORD_MASK for word in words][: MEMORY_SIZE - origin]
        self.memory[origin : origin + len(values)] = values

    def read(self, address: int) -> int:
        """Read a word, polling the keyboard when the status register is read."""
        address &= WORD_MASK
        if address == MemoryRegister.KBSR:
            if self.key_ready():
                self.memory[MemoryRegister.KBSR] = 1 << 15
                self.memory[MemoryRegister.KBDR] = self._getchar()
            else:
                self.memory[MemoryRegister.KBSR] = 0
        return self.memory[address]

    def write(self, address: int, value: int) -> None:
        """Store a word in memory."""
        self.memory[address & WORD_MASK] = value & WORD_MASK

    def update_flags(self, register: int) -> None:
        """Set the condition register from the value held in ``register``."""
        self.registers[Register.COND] = int(
            ConditionFlag.from_value(self.registers[register])
        )

    # Execution

    def execute(self, instruction: int) -> None:
        """Carry out one instruction word."""
        instruction &= WORD_MASK
        self._operations[instruction >> 12](instruction)

    def step(self) -> None:
        """Fetch the instruction at PC, advance PC and execute it."""
        address = self.registers[Register.PC]
        self.registers[Register.PC] = (address + 1) & WORD_MASK
        self.execute(self.read(address))

    def run(self) -> None:
        """Execute instructions until the machine halts."""
        while self.running:
            self.step()

    # Operations

    def _set(self, register: int, value: int) -> None:
        self.registers[register] = value & WORD_MASK

    def _add(self, instruction: int) -> None:
        dr, sr1 = _dr(instruction), _sr1(instruction)
        if (instruction >> 5) & 1:
            operand = sign_extend(instruction & 0x1F, 5)
        else:
            operand = self.registers[instruction & 0x7]
        self._set(dr, self.registers[sr1] + operand)
        self.update_flags(dr)

    def _and(self, instruction: int) -> None:
        dr, sr1 = _dr(instruction), _sr1(instruction)
        if (instruction >> 5) & 1:
            operand = sign_extend(instruction & 0x1F, 5)
        else:
            operand = self.registers[instruction & 0x7]
        self._set(dr, self.registers[sr1] & operand)
        self.update_flags(dr)

    def _not(self, instruction: int) -> None:
        dr = _dr(instruction)
        self._set(dr, ~self.registers[_sr1(instruction)])
        self.update_flags(dr)

    def _br(self, instruction: int) -> None:
        nzp = (instruction >> 9) & 0x7
        if nzp & self.registers[Register.COND]:
            self._set(Register.PC, self.pc + sign_extend(instruction & 0x1FF, 9))

    def _jmp(self, instruction: int) -> None:
        self._set(Register.PC, self.registers[_sr1(instruction)])

    def _jsr(self, instruction: int) -> None:
        self.registers[Register.R7] = self.pc
        if (instruction >> 11) & 1:
            self._set(Register.PC, self.pc + sign_extend(instruction & 0x7FF, 11))
        else:
            self._set(Register.PC, self.registers[_sr1(instruction)])

    def _ld(self, instruction: int) -> None:
        dr = _dr(instruction)
        self._set(dr, self.read(self.pc + _offset9(instruction)))
        self.update_flags(dr)

    def _ldi(self, instruction: int) -> None:
        dr = _dr(instruction)
        self._set(dr, self.read(self.read(self.pc + _offset9(instruction))))
        self.update_flags(dr)

    def _ldr(self, instruction: int) -> None:
        dr = _dr(instruction)
        base = self.registers[_sr1(instruction)]
        self._set(dr, self.read(base + sign_extend(instruction & 0x3F, 6)))
        self.update_flags(dr)

    def _lea(self, instruction: int) -> None:
        dr = _dr(instruction)
        self._set(dr, self.pc + _offset9(instruction))
        self.update_flags(dr)

    def _st(self, instruction: int) -> None:
        self.write(self.pc + _offset9(instruction), self.registers[_dr(instruction)])

    def _sti(self, instruction: int) -> None:
        address = self.read(self.pc + _offset9(instruction))
        self.write(address, self.registers[_dr(instruction)])

    def _str(self, instruction: int) -> None:
        base = self.registers[_sr1(instruction)]
        self.write(base + sign_extend(instruction & 0x3F, 6), self.registers[_dr(instruction)])

    def _unused(self, instruction: int) -> None:
        """RTI and the reserved opcode do nothing."""

    # Traps

    def trap(self, instruction: int) -> None:
        """Run the trap routine named by the low byte of ``instruction``."""
        self.registers[Register.R7] = self.pc
        routine = self._traps.get(instruction & 0xFF)
        if routine is not None:
            routine()

    def _getchar(self) -> int:
        data = self.input_stream.read(1)
        if not data:
            return _EOF_WORD
        return ord(data) if isinstance(data, str) else data[0]

    def _putc(self, value: int) -> None:
        self.output_stream.write(bytes([value & 0xFF]))

    def _flush(self) -> None:
        flush = getattr(self.output_stream, "flush", None)
        if flush is not None:
            flush()

    def _string_words(self) -> Iterable[int]:
        address = self.registers[Register.R0]
        while word := self.memory[address]:
            yield word
            address = (address + 1) & WORD_MASK

    def _trap_getc(self) -> None:
        self.registers[Register.R0] = self._getchar()
        self.update_flags(Register.R0)

    def _trap_out(self) -> None:
        self._putc(self.registers[Register.R0])
        self._flush()

    def _trap_in(self) -> None:
        self._putc(ord(">"))
        self.registers[Register.R0] = self._getchar()
        self._putc(self.registers[Register.R0])
        self._flush()
        self.update_flags(Register.R0)

    def _trap_puts(self) -> None:
        for word in self._string_words():
            self._putc(word)
        self._flush()

    def _trap_putsp(self) -> None:
        for word in self._string_words():
            self._putc(word & 0xFF)
            high = (word >> 8) & 0xFF
            if high:
                self._putc(high)
        self._flush()

    def _trap_halt(self) -> None:
        self.output_stream.write(b"HALT\n")
        self._flush()
        self.running = False


def _dr(instruction: int) -> int:
    return (instruction >> 9) & 0x7


def _sr1(instruction: int) -> int:
    return (instruction >> 6) & 0x7


def _offset9(instruction: int) -> int:
    return sign_extend(instruction & 0x1FF, 9)