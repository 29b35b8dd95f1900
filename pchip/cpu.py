#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
runs in frames: sixty times a second, the host inputs are checked, a fixed
budget of instructions is executed, both timers count down once, and the
framebuffer is handed to the renderer.

Waiting for a keypress (Fx0A) doesn't block the host.  Instead, the CPU is
parked on the instruction and resumes when a key goes down, so the timers and
display keep running in the meantime.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from random import Random
from .clock import Clock
from .constants import (
    APP_INTRO, DEFAULT_CYCLES_PER_FRAME, FONT_GLYPH_SIZE, FONT_LOC, FRAME_INTERVAL, PROGRAM_LOC, SYSTEM_FONT
)
from .timers import Timer, SoundTimer

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
PERF_REPORT_INTERVAL = 1.0

logger = logging.getLogger(__name__)


class CPUError(Exception):
    pass


class IllegalInstruction(CPUError):
    pass


class CPU:
    def __init__(self, ram, stack, framebuffer, inputs, audio, debugger, clock=None, cycles_per_frame=None,
                 shift_quirks=None, load_quirks=None, seed=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.audio = audio
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.clock = Clock() if clock is None else clock
        self.cycles_per_frame = DEFAULT_CYCLES_PER_FRAME if cycles_per_frame is None else cycles_per_frame
        self.rng = Random(seed)

        """
        Quirks
        ------

        - Shift quirks: 8xy6/8xyE shift Vy into Vx, as on the COSMAC VIP.  Off by default, so Vx is shifted in place.
        - Load quirks : Fx55/Fx65 leave I pointing after the last register, as on the COSMAC VIP.  Off by default, so
                        I is left unchanged.
        """

        self.shift_quirks = False if shift_quirks is None else shift_quirks
        self.load_quirks = False if load_quirks is None else load_quirks

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x9: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            0xF: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
            0x5000: self._5xy0,
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            0x9000: self._9xy0,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

        # Initialise registers
        self.v = memoryview(bytearray(16))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0  # Index register

        # Initialise timers
        self.dt = Timer()       # Delay timer
        self.st = SoundTimer()  # Sound timer

        # Initialise program counter and current opcode
        self.pc = PROGRAM_LOC
        self.debug_pc = PROGRAM_LOC
        self.opcode = 0

        # Register index waiting for a keypress, or None if not parked on Fx0A
        self.awaiting_keypress = None

        # SYS addresses already warned about
        self.sys_warned = set()

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

        self.reset()

    def reset(self):
        self.ram.clear()
        self.ram.write_block(FONT_LOC, SYSTEM_FONT)
        self.stack.clear()
        self.framebuffer.clear()
        self.v[:] = bytes(16)
        self.i = 0
        self.dt.set(0)
        self.st.set(0)
        self.pc = PROGRAM_LOC
        self.debug_pc = PROGRAM_LOC
        self.opcode = 0
        self.awaiting_keypress = None

    def load(self, rom):
        self.ram.write_block(PROGRAM_LOC, rom)

    def run(self, start_location=PROGRAM_LOC, max_frames=0):
        # Returns when the host asks to quit, or after 'max_frames' frames if non-zero.  Faults propagate.
        self.pc = start_location
        clock = self.clock
        frame_count = 0
        this_time = clock.now()
        next_frame_time = this_time
        next_perf_report_time = this_time + PERF_REPORT_INTERVAL

        while self.run_frame():
            frame_count += 1

            if max_frames and frame_count >= max_frames:
                return

            this_time = clock.now()

            if this_time >= next_perf_report_time:
                next_perf_report_time = this_time + PERF_REPORT_INTERVAL
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_fps = 0
                self.perf_counter_ops = 0

            next_frame_time += FRAME_INTERVAL

            if next_frame_time < this_time:
                # The host is lagging.  Don't try to catch up, or the timers will race.
                next_frame_time = this_time
            else:
                clock.sleep_until(next_frame_time)

    def run_frame(self):
        # Returns False if the host has asked to quit
        if self.inputs.process_messages():  # Inputs are observed before any instruction in this frame
            return False

        for _ in range(self.cycles_per_frame):
            if not self.cycle():
                break  # Parked on Fx0A until the next frame

        # Timers count down once per frame, after all instructions, however many ran
        self.dt.tick()
        self.st.tick()
        self.audio.enable_buzzer(self.st.is_active())
        self.refresh_framebuffer()
        self.perf_counter_fps += 1
        return True

    def cycle(self):
        # Returns False while waiting for a keypress
        if self.awaiting_keypress is not None:
            return self._poll_keypress()

        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch (and technically before decode), but before execute
        self.decode_exec()
        self.perf_counter_ops += 1
        return self.awaiting_keypress is None

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def _call_masked_instruction(self, masked_opcode):
        instruction = self.instructions.get(masked_opcode)

        if instruction is None:
            self._opcode_unsupported()

        instruction()

    def decode_exec(self):
        self._call_masked_instruction((0xF000 & self.opcode) >> 12)

    def refresh_framebuffer(self):
        self.framebuffer.refresh_display()

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFF

    def dec_pc(self):
        # Only used to stay on an instruction (keypress wait)
        self.pc = (self.pc - 2) & 0xFFF

    def invariants_hold(self):
        return (
            0 <= self.pc <= 0xFFF and
            self.pc % 2 == 0 and
            len(self.stack) <= self.stack.size and
            0 <= self.i <= 0xFFFF and
            all(0 <= reg <= 0xFF for reg in self.v) and
            all(pixel in (0, 1) for pixel in self.framebuffer.pixels)
        )

    def fault_report(self, error):
        return (
            "Emulation halted.\n\n" +
            "{}Debug info:\n" +
            "{}\n\n{} (opcode 0x{:04x} at address 0x{:03x})."
        ).format(APP_INTRO, self.debugger.debug(self, "???", verbose=True), error, self.opcode, self.debug_pc)

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _opcode_unsupported(self):
        raise IllegalInstruction(
            "Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction".format(self.opcode, self.debug_pc)
        ) from None

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _0nnn(self):
        opcode = self.opcode

        if opcode in (0x00E0, 0x00EE):
            self._call_masked_instruction(opcode)
        else:
            self._0nnn_sys()

    def _5nnn_8nnn_9nnn(self):
        self._call_masked_instruction(self.opcode & 0xF00F)

    def _Ennn_Fnnn(self):
        self._call_masked_instruction(self.opcode & 0xF0FF)

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        self.pc = self.stack.pop()

    def _0nnn_sys(self):  # SYS addr
        addr = self.addr

        if self.live_debug:
            self.debug("SYS 0x{:03x}".format(addr))

        # Machine code routines for the original host CPU can't be run, so skip them
        if addr not in self.sys_warned:
            self.sys_warned.add(addr)
            logger.warning(
                "Ignoring SYS 0x%03x at address 0x%03x (native machine code routines are not emulated)",
                addr, self.debug_pc
            )

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        self.stack.push(self.pc)
        self.pc = self.addr

    def _post_skip(self):
        self.inc_pc()

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] == self.byte:
            self._post_skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] == self.v[self.vy]:
            self._post_skip()

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        byte += self.v[vx]
        self.v[vx] = byte & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]

    # Vf is always written before the result, so the result wins when Vf is also the destination

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying
        self.v[vx] = val & 0xFF

    def _post_8xy5_8xy7(self, minuend_reg, subtrahend_reg):  # Post-SUB/SUBN
        # Operands are read again after the flag is written, in case either of them is Vf
        v = self.v
        v[0xF] = int(v[minuend_reg] > v[subtrahend_reg])
        v[self.vx] = (v[minuend_reg] - v[subtrahend_reg]) & 0xFF

    def _8xy5(self):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.vx, self.vy)

    def _debug_8xy6_8xyE(self, direction):
        self.debug(
            "{} V{:01x}, V{:01x}".format(direction, self.vx, self.vy) if self.shift_quirks else
            "{} V{:01x}".format(direction, self.vx)
        )

    def _8xy6(self):  # SHR Vx {, Vy}
        # Vx is shifted in place, unless emulating the COSMAC VIP, which shifts Vy
        if self.live_debug:
            self._debug_8xy6_8xyE("SHR")

        src = self.vy if self.shift_quirks else self.vx
        self.v[0xF] = self.v[src] & 1
        self.v[self.vx] = self.v[src] >> 1

    def _8xy7(self):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.vy, self.vx)

    def _8xyE(self):  # SHL Vx {, Vy}
        if self.live_debug:
            self._debug_8xy6_8xyE("SHL")

        src = self.vy if self.shift_quirks else self.vx
        self.v[0xF] = self.v[src] >> 7
        self.v[self.vx] = (self.v[src] << 1) & 0xFF

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] != self.v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(self.addr))

        self.pc = (self.v[0] + self.addr) & 0xFFF

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        sprite_rows = self.ram.read_block(self.i, height)
        # Vf is only written once the whole sprite is drawn, so it can also be used as a coordinate
        self.v[0xF] = self.framebuffer.draw(self.v[self.vx], self.v[self.vy], sprite_rows)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        if self.inputs.is_key_down(self.v[self.vx] & 0xF):
            self._post_skip()

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        if not self.inputs.is_key_down(self.v[self.vx] & 0xF):
            self._post_skip()

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.dt.read()

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        # Park on this instruction.  The sound and delay timers still need to expire correctly, and the framebuffer
        # still needs updating, so control goes back to the frame loop until a key goes down.
        if not self.inputs.interactive:
            logger.warning(
                "LD V%01x, K at address 0x%03x is waiting for a keypress, but no keys can be pressed",
                self.vx, self.debug_pc
            )

        self.inputs.setup_keypress()  # Forget any keys pressed before now
        self.awaiting_keypress = self.vx
        self.dec_pc()

    def _poll_keypress(self):
        key = self.inputs.get_keypress()

        if key is None:
            return False

        self.v[self.awaiting_keypress] = key
        self.awaiting_keypress = None
        self.inc_pc()
        return True

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.dt.set(self.v[self.vx])

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        # The buzzer follows the sound timer at the end of the frame
        self.st.set(self.v[self.vx])

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        self.i = (self.i + self.v[self.vx]) & 0xFFFF

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        self.i = FONT_LOC + FONT_GLYPH_SIZE * (self.v[self.vx] & 0xF)

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        # RAM wraps the addresses to 12 bits
        val = self.v[self.vx]
        i = self.i
        self.ram.write(i, val // 100)            # Most-significant digit
        self.ram.write(i + 1, (val // 10) % 10)  # Middle digit
        self.ram.write(i + 2, val % 10)          # Least-significant digit

    def _post_Fx55_Fx65(self):
        if self.load_quirks:
            self.i = (self.i + self.vx + 1) & 0xFFFF

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        i = self.i

        for reg in range(self.vx + 1):
            self.ram.write(i + reg, self.v[reg])

        self._post_Fx55_Fx65()

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        i = self.i

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.read(i + reg)

        self._post_Fx55_Fx65()
