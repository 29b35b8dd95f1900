#!/usr/bin/env python3

"""
CPU Debugger

When live, one trace line is printed before each instruction executes:

    PC:OP  MNEMONIC  V0..VF  I  DT  ST  SP

When the CPU halts on a fault, the same line is produced with the call stack
(oldest return address first) and the key wait state added underneath.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


def format_registers(registers):
    # V0 first, so the register number matches the position along the line
    return " ".join("{:02x}".format(reg) for reg in registers)


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        stack_items = cpu.stack.get_items()
        debug_str = "PC: 0x{:03x} OP: 0x{:04x} {:<16} V: {} I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} SP: {}".format(
            cpu.debug_pc, cpu.opcode, instruction, format_registers(cpu.v), cpu.i, cpu.dt.read(), cpu.st.read(),
            len(stack_items)
        )

        if verbose:
            stack_str = " ".join("0x{:03x}".format(addr) for addr in stack_items)
            debug_str += "\nStack: {}".format(stack_str or "(Empty)")

            if cpu.awaiting_keypress is not None:
                debug_str += "\nWaiting for a keypress into V{:01x}".format(cpu.awaiting_keypress)

        return debug_str

    def set_live(self, enabled):
        self.live = bool(enabled)

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.debug(cpu, instruction))
