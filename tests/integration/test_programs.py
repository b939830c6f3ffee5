"""End-to-end runs of small hand-assembled programs."""

from __future__ import annotations

from pychip8.system import MachineConfig, create_machine
from pychip8.video import render_text
from pychip8.video.terminal import BORDER, LIT, UNLIT

# Print the decimal digits of 123 using the built-in font.
BCD_DIGITS = bytes.fromhex(
    "607B"  # LD V0, 123
    "A300"  # LD I, 0x300
    "F033"  # LD B, V0
    "F265"  # LD V2, [I]
    "6300"  # LD V3, 0
    "6400"  # LD V4, 0
    "F029"  # LD F, V0
    "D345"  # DRW V3, V4, 5
    "7305"  # ADD V3, 5
    "F129"  # LD F, V1
    "D345"  # DRW V3, V4, 5
    "7305"  # ADD V3, 5
    "F229"  # LD F, V2
    "D345"  # DRW V3, V4, 5
    "121C"  # JP 0x21C
)

# Call a subroutine that increments V0 until it reaches 5.
COUNT_TO_FIVE = bytes.fromhex(
    "6000"  # LD V0, 0
    "220A"  # CALL 0x20A
    "3005"  # SE V0, 5
    "1202"  # JP 0x202
    "1208"  # JP 0x208
    "7001"  # ADD V0, 1
    "00EE"  # RET
)


def test_bcd_digits_are_drawn() -> None:
    machine = create_machine(MachineConfig(program=BCD_DIGITS))
    cpu = machine.cpu
    for _ in range(20):
        cpu.step()

    assert cpu.state.pc == 0x21C
    assert cpu.state.registers[:3] == [1, 2, 3]
    assert cpu.state.registers[0xF] == 0

    top = render_text(cpu.framebuffer())[1]
    cells = [top[i : i + 2] for i in range(len(BORDER), len(top) - len(BORDER), 2)]
    lit = [index for index, cell in enumerate(cells) if cell == LIT]
    # "1" has 0x20 in its top row, "2" and "3" have 0xF0.
    assert lit == [2, 5, 6, 7, 8, 10, 11, 12, 13]
    assert all(cell in (LIT, UNLIT) for cell in cells)


def test_subroutine_loop_terminates() -> None:
    machine = create_machine(MachineConfig(program=COUNT_TO_FIVE))
    cpu = machine.cpu
    for _ in range(40):
        cpu.step()

    assert cpu.state.registers[0] == 5
    assert cpu.state.pc == 0x208
    assert cpu.state.sp == 0
