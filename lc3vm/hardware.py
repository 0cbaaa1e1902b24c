"""Fixed facts about the LC-3 machine: opcodes, registers, flags and traps."""

from __future__ import annotations

import enum

MEMORY_SIZE = 1 << 16
WORD_MASK = 0xFFFF
PC_START = 0x3000


class Opcode(enum.IntEnum):
    """The sixteen instruction opcodes, taken from the top four bits."""

    BR = 0
    ADD = 1
    LD = 2
    ST = 3
    JSR = 4
    AND = 5
    LDR = 6
    STR = 7
    RTI = 8
    NOT = 9
    LDI = 10
    STI = 11
    JMP = 12
    RES = 13
    LEA = 14
    TRAP = 15


class Register(enum.IntEnum):
    """General purpose registers plus the program counter and condition register."""

    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    PC = 8
    COND = 9


REGISTER_COUNT = len(Register)


class ConditionFlag(enum.IntFlag):
    """Condition codes stored in the COND register."""

    POS = 1 << 0
    ZRO = 1 << 1
    NEG = 1 << 2

    @classmethod
    def from_value(cls, value: int) -> ConditionFlag:
        """Return the flag describing a 16-bit word: zero, negative or positive."""
        value &= WORD_MASK
        if value == 0:
            return cls.ZRO
        if value >> 15:
            return cls.NEG
        return cls.POS


class TrapCode(enum.IntEnum):
    """Trap vectors understood by the TRAP instruction."""

    GETC = 0x20
    OUT = 0x21
    PUTS = 0x22
    IN = 0x23
    PUTSP = 0x24
    HALT = 0x25


class MemoryRegister(enum.IntEnum):
    """Memory-mapped device registers."""

    KBSR = 0xFE00
    KBDR = 0xFE02


def sign_extend(value: int, bit_count: int) -> int:
    """Extend the low ``bit_count`` bits of ``value`` to a 16-bit two's complement word."""
    if not 1 <= bit_count <= 16:
        raise ValueError(f"bit_count must be between 1 and 16, got {bit_count}")
    value &= WORD_MASK
    if (value >> (bit_count - 1)) & 1:
        value |= (WORD_MASK << bit_count) & WORD_MASK
    return value