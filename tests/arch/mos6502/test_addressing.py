# tests/arch/mos6502/test_addressing.py
"""
アドレッシングモード解決の単体テスト。
各モードが正しい実効アドレスを返し、決められた数のサイクルを消費することを検証します。
"""
import pytest

from retro_step6502.arch.mos6502.cpu import Mos6502Cpu
from retro_step6502.arch.mos6502.instructions import base

# @intent:test_suite アドレッシングモード解決とオペランド書式の検証。


@pytest.fixture
def cpu():
    cpu = Mos6502Cpu()
    # オペランドは $0300 から置き、解決前のサイクル残数を10とする
    cpu.state.pc = 0x0300
    cpu.state.cycles_remaining = 10
    return cpu


def consumed(cpu):
    return 10 - cpu.state.cycles_remaining


def test_implied(cpu):
    assert base.addr_implied(cpu) == (None, None, False)
    assert consumed(cpu) == 0
    assert cpu.state.pc == 0x0300


def test_immediate(cpu):
    cpu.memory.write(0x0300, 0x42)
    res = base.addr_immediate(cpu)
    assert res.address is None
    assert res.value == 0x42
    assert consumed(cpu) == 1
    assert cpu.state.pc == 0x0301


def test_zeropage(cpu):
    cpu.memory.write(0x0300, 0x80)
    res = base.addr_zeropage(cpu)
    assert res.address == 0x0080
    assert res.value is None
    assert consumed(cpu) == 1


def test_zeropage_x(cpu):
    cpu.memory.write(0x0300, 0x10)
    cpu.state.x = 0x05
    res = base.addr_zeropage_x(cpu)
    assert res.address == 0x0015
    assert consumed(cpu) == 2


# @intent:test_case_regression ゼロページ内へ折り返さず、単純な16bit加算になることを検証します。
def test_zeropage_x_does_not_wrap(cpu):
    cpu.memory.write(0x0300, 0x80)
    cpu.state.x = 0xFF
    res = base.addr_zeropage_x(cpu)
    assert res.address == 0x017F


def test_zeropage_y_does_not_wrap(cpu):
    cpu.memory.write(0x0300, 0xF0)
    cpu.state.y = 0x20
    res = base.addr_zeropage_y(cpu)
    assert res.address == 0x0110
    assert consumed(cpu) == 2


def test_lda_zeropage_x_reads_past_zero_page():
    cpu = Mos6502Cpu()
    # LDX #$FF ; LDA $80,X
    cpu.memory.load(0x0200, [0xA2, 0xFF, 0xB5, 0x80])
    cpu.memory.write(0x017F, 0x77)
    cpu.memory.write(0x007F, 0x11)

    cpu.step()
    cpu.step()

    assert cpu.state.a == 0x77


# @intent:test_case_endianness 2バイトのオペランドが下位バイト先行で組み立てられることを検証します。
def test_absolute_little_endian(cpu):
    cpu.memory.load(0x0300, [0x34, 0x12])
    res = base.addr_absolute(cpu)
    assert res.address == 0x1234
    assert consumed(cpu) == 2
    assert cpu.state.pc == 0x0302


def test_absolute_x(cpu):
    cpu.memory.load(0x0300, [0x00, 0x20])
    cpu.state.x = 0x10
    res = base.addr_absolute_x(cpu)
    assert res.address == 0x2010
    assert res.page_fixup
    assert consumed(cpu) == 2


def test_absolute_y_wraps_at_64k(cpu):
    cpu.memory.load(0x0300, [0xFF, 0xFF])
    cpu.state.y = 0x02
    res = base.addr_absolute_y(cpu)
    assert res.address == 0x0001


# @intent:test_case_no_page_penalty ページ境界を越えても読み出し命令のサイクルが増えないことを検証します。
def test_absolute_x_page_cross_has_no_extra_cycle():
    cpu = Mos6502Cpu()
    # LDX #$01 ; LDA $02FF,X
    cpu.memory.load(0x0200, [0xA2, 0x01, 0xBD, 0xFF, 0x02])
    cpu.step()
    snapshot = cpu.step()
    assert snapshot.state.cycles_remaining == 0
    assert cpu.total_cycles == 2 + 4


def test_indexed_indirect(cpu):
    cpu.memory.write(0x0300, 0x20)
    cpu.state.x = 0x04
    cpu.memory.load(0x0024, [0x00, 0x40])
    res = base.addr_indexed_indirect(cpu)
    assert res.address == 0x4000
    assert not res.page_fixup
    assert consumed(cpu) == 4


def test_indexed_indirect_pointer_stays_in_zero_page(cpu):
    cpu.memory.write(0x0300, 0xFE)
    cpu.state.x = 0x01
    cpu.memory.write(0x00FF, 0x34)
    cpu.memory.write(0x0000, 0x12)
    res = base.addr_indexed_indirect(cpu)
    assert res.address == 0x1234


def test_indirect_indexed(cpu):
    cpu.memory.write(0x0300, 0x40)
    cpu.memory.load(0x0040, [0x00, 0x30])
    cpu.state.y = 0x10
    res = base.addr_indirect_indexed(cpu)
    assert res.address == 0x3010
    assert res.page_fixup
    assert consumed(cpu) == 3


def test_sta_indirect_indexed_end_to_end():
    cpu = Mos6502Cpu()
    # LDY #$05 ; LDA #$99 ; STA ($40),Y
    cpu.memory.load(0x0200, [0xA0, 0x05, 0xA9, 0x99, 0x91, 0x40])
    cpu.memory.load(0x0040, [0x00, 0x30])
    for _ in range(3):
        cpu.step()
    assert cpu.memory.read(0x3005) == 0x99
    assert cpu.state.cycles_remaining == 0


@pytest.mark.parametrize("mode, operand_bytes, expected", [
    (base.IMPLIED, [], ""),
    (base.IMMEDIATE, [0x05], "#$05"),
    (base.ZEROPAGE, [0x30], "$30"),
    (base.ZEROPAGE_X, [0x30], "$30,X"),
    (base.ZEROPAGE_Y, [0x30], "$30,Y"),
    (base.ABSOLUTE, [0x21, 0x02], "$0221"),
    (base.ABSOLUTE_X, [0x00, 0x04], "$0400,X"),
    (base.ABSOLUTE_Y, [0x00, 0x04], "$0400,Y"),
    (base.INDEXED_INDIRECT, [0x20], "($20,X)"),
    (base.INDIRECT_INDEXED, [0x40], "($40),Y"),
])
def test_format_operand(mode, operand_bytes, expected):
    assert mode.format_operand(operand_bytes) == expected
