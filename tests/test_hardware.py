import pytest

from lc3vm.hardware import (
    MEMORY_SIZE,
    REGISTER_COUNT,
    ConditionFlag,
    MemoryRegister,
    Opcode,
    Register,
    TrapCode,
    sign_extend,
)


@pytest.mark.parametrize(
    "instruction, expected",
    [
        (0x0E02, Opcode.BR),
        (0x1261, Opcode.ADD),
        (0xE005, Opcode.LEA),
        (0xF025, Opcode.TRAP),
    ],
)
def test_opcode_decoded_from_instruction_top_bits(instruction, expected):
    assert Opcode(instruction >> 12) is expected


def test_every_four_bit_value_decodes_to_an_opcode():
    decoded = [Opcode(value) for value in range(16)]
    assert decoded == list(Opcode)


@pytest.mark.parametrize(
    "index, expected",
    [(7, Register.R7), (8, Register.PC), (9, Register.COND)],
)
def test_register_lookup_by_index(index, expected):
    assert Register(index) is expected


def test_every_register_index_below_count_decodes_in_order():
    decoded = [Register(index) for index in range(REGISTER_COUNT)]
    assert decoded == list(Register)
    with pytest.raises(ValueError):
        Register(REGISTER_COUNT)


def test_sign_extend_all_ones_fills_whole_address_space():
    assert sign_extend(0x1FF, 9) == MEMORY_SIZE - 1


def test_condition_flags_from_values_have_distinct_bits():
    flags = [
        ConditionFlag.from_value(1),
        ConditionFlag.from_value(0),
        ConditionFlag.from_value(0x8000),
    ]
    assert [int(flag) for flag in flags] == [1, 2, 4]


@pytest.mark.parametrize(
    "instruction, expected",
    [(0xF020, TrapCode.GETC), (0xF025, TrapCode.HALT)],
)
def test_trap_code_decoded_from_instruction_low_byte(instruction, expected):
    assert TrapCode(instruction & 0xFF) is expected


@pytest.mark.parametrize(
    "address, expected",
    [(0xFE00, MemoryRegister.KBSR), (0xFE02, MemoryRegister.KBDR)],
)
def test_memory_register_lookup_by_address(address, expected):
    assert MemoryRegister(address) is expected


def test_from_value_zero():
    assert ConditionFlag.from_value(0) is ConditionFlag.ZRO


def test_from_value_negative_when_top_bit_set():
    assert ConditionFlag.from_value(1 << 15) is ConditionFlag.NEG
    assert ConditionFlag.from_value(0xFFFF) is ConditionFlag.NEG


@pytest.mark.parametrize("value", [1, 0x3000, (1 << 15) - 1])
def test_from_value_positive(value):
    assert ConditionFlag.from_value(value) is ConditionFlag.POS


def test_sign_extend_negative_five_bit():
    assert sign_extend(0x1F, 5) == 0xFFFF


def test_sign_extend_positive_unchanged():
    assert sign_extend(0x0F, 5) == 0x0F
    assert sign_extend(0xFF, 9) == 0xFF


@pytest.mark.parametrize("bits", [5, 6, 9, 11])
def test_sign_extend_preserves_low_bits_and_fills_high_bits(bits):
    mask = (1 << bits) - 1
    for value in range(1 << bits):
        result = sign_extend(value, bits)
        assert result & mask == value
        assert 0 <= result <= 0xFFFF
        top = (value >> (bits - 1)) & 1
        high = result >> bits
        assert high == (((1 << (16 - bits)) - 1) if top else 0)


def test_sign_extend_rejects_bad_width():
    with pytest.raises(ValueError):
        sign_extend(1, 0)
    with pytest.raises(ValueError):
        sign_extend(1, 17)