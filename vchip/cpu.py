#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each call
to step() runs exactly one fetch-decode-execute cycle.  The CPU never waits on
anything itself: the caller decides how many steps to run per frame, and ticks
the timers separately at 60Hz.

Waiting for a keypress (Fx0A) doesn't block either.  The CPU simply parks on
the instruction and checks the keypad at the top of every step until a fresh
key press arrives.

Any fatal condition (an unknown instruction, running off the end of memory, or
misusing the call stack) halts the CPU.  The error is raised to the caller, and
any further attempt to step raises CPUHaltedError.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import randint
from .constants import (
    APP_INTRO, DEFAULT_QUIRKS, FONT_GLYPH_SIZE, FONT_START, NUM_KEYS, NUM_REGISTERS, PROGRAM_START, SYSTEM_FONT
)
from .instructions import CPU_ENDIAN, InvalidOpcodeError, Op, decode
from .ram import RAMError
from .stack import StackError


class CPUError(Exception):
    pass


class CPUHaltedError(CPUError):
    pass


# Errors which stop the running program for good
FATAL_ERRORS = (RAMError, StackError, InvalidOpcodeError, CPUError)


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, timers, shift_quirks=None, index_overflow_quirks=None,
                 load_quirks=None, logic_quirks=None, jump_quirks=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.timers = timers

        """
        Quirks
        ------

        - Shift quirks          : Enabled.  8xy6/8xyE shift Vx in place, ignoring Vy.
        - Index overflow quirks : Disabled.  Fx1E leaves Vf alone.
        - Load quirks           : Disabled.  Fx55/Fx65 leave I unchanged.
        - Logic quirks          : Disabled.  8xy1/8xy2/8xy3 leave Vf alone.
        - Jump quirks           : Disabled.  Bnnn always offsets by V0.
        """

        self.shift_quirks = DEFAULT_QUIRKS["shift"] if shift_quirks is None else shift_quirks
        self.index_overflow_quirks = (
            DEFAULT_QUIRKS["index_overflow"] if index_overflow_quirks is None else index_overflow_quirks
        )
        self.load_quirks = DEFAULT_QUIRKS["load"] if load_quirks is None else load_quirks
        self.logic_quirks = DEFAULT_QUIRKS["logic"] if logic_quirks is None else logic_quirks
        self.jump_quirks = DEFAULT_QUIRKS["jump"] if jump_quirks is None else jump_quirks

        self.instructions = {
            Op.CLS:       self._00E0,
            Op.RET:       self._00EE,
            Op.JP:        self._1nnn,
            Op.CALL:      self._2nnn,
            Op.SE_BYTE:   self._3xkk,
            Op.SNE_BYTE:  self._4xkk,
            Op.SE_REG:    self._5xy0,
            Op.LD_BYTE:   self._6xkk,
            Op.ADD_BYTE:  self._7xkk,
            Op.LD_REG:    self._8xy0,
            Op.OR:        self._8xy1,
            Op.AND:       self._8xy2,
            Op.XOR:       self._8xy3,
            Op.ADD_REG:   self._8xy4,
            Op.SUB:       self._8xy5,
            Op.SHR:       self._8xy6,
            Op.SUBN:      self._8xy7,
            Op.SHL:       self._8xyE,
            Op.SNE_REG:   self._9xy0,
            Op.LD_I:      self._Annn,
            Op.JP_V0:     self._Bnnn,
            Op.RND:       self._Cxkk,
            Op.DRW:       self._Dxyn,
            Op.SKP:       self._Ex9E,
            Op.SKNP:      self._ExA1,
            Op.LD_VX_DT:  self._Fx07,
            Op.LD_VX_K:   self._Fx0A,
            Op.LD_DT_VX:  self._Fx15,
            Op.LD_ST_VX:  self._Fx18,
            Op.ADD_I:     self._Fx1E,
            Op.LD_F:      self._Fx29,
            Op.LD_B:      self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65
        }

        missing = [op.name for op in Op if op not in self.instructions]

        if missing:
            raise CPUError("No handler defined for instructions: {}".format(", ".join(missing)))

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Mutable, so this should be fast when a register is updated
        self.i = 0  # Index register

        # Initialise program counter, current opcode and the address it came from
        self.pc = PROGRAM_START
        self.op_pc = PROGRAM_START
        self.opcode = 0

        # Register number to receive the key, while waiting for a keypress
        self.awaiting_key = None

        # Set once a fatal error occurs
        self.fault = None

        # Write the system font into RAM
        self.ram.write_block(FONT_START, SYSTEM_FONT)

    @property
    def sp(self):
        return self.stack.sp

    @property
    def halted(self):
        return self.fault is not None

    def reset(self):
        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0
        self.pc = PROGRAM_START
        self.op_pc = PROGRAM_START
        self.opcode = 0
        self.awaiting_key = None
        self.fault = None
        self.stack.clear()
        self.timers.reset()
        self.keypad.reset()
        self.framebuffer.clear()

    def load_program(self, image):
        # Reinitialises the machine, then places the program at the usual start address
        self.reset()
        self.ram.clear()
        self.ram.write_block(FONT_START, SYSTEM_FONT)
        self.ram.write_block(PROGRAM_START, image)

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def step(self):
        # Returns the instruction executed, or None if still waiting for a keypress
        if self.fault is not None:
            raise CPUHaltedError("Emulation halted.  Reload the program to continue.") from self.fault

        try:
            if self.awaiting_key is not None:
                self._poll_keypress()
                return None

            # Keep track of the program counter before altering it in any way, for error reports
            self.op_pc = self.pc
            self.opcode = self.fetch()
            instruction = decode(self.opcode)
            self.inc_pc()  # Program counter updates after fetch, but before execute
            self.instructions[instruction.op](instruction)
        except FATAL_ERRORS as err:
            self.fault = err
            raise

        return instruction

    def tick_timers(self):
        # Call exactly once per frame (60Hz).  Returns True when the sound timer has just run out.
        return self.timers.tick()

    def is_sound_active(self):
        return self.timers.is_sound_active()

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFFF

    def dec_pc(self):
        # Only used to park on an instruction (keypress wait)
        self.pc = (self.pc - 2) & 0xFFFF

    def describe(self):
        stack_items = self.stack.get_items()
        return (
            "V: 0x" + ("{:02x}" * NUM_REGISTERS) + " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x}" +
            " Stack:{}"
        ).format(
            *[self.v[reg_num] for reg_num in range(NUM_REGISTERS - 1, -1, -1)] +
            [
                self.i, self.timers.delay, self.timers.sound, self.op_pc, self.opcode,
                (" 0x{:03x}" * len(stack_items)).format(*stack_items) or " (Empty)"
            ]
        )

    def fault_report(self):
        return "{}Emulation halted at address 0x{:03x}: {}\n{}".format(
            APP_INTRO, self.op_pc, self.fault, self.describe()
        )

    def _poll_keypress(self):
        key = self.keypad.get_keypress()

        if key is not None:
            self.v[self.awaiting_key] = key
            self.awaiting_key = None
            self.inc_pc()

    def _skip(self):
        self.inc_pc()

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _3xkk(self, ins):  # SE Vx, byte
        if self.v[ins.x] == ins.kk:
            self._skip()

    def _4xkk(self, ins):  # SNE Vx, byte
        if self.v[ins.x] != ins.kk:
            self._skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.v[ins.x] == self.v[ins.y]:
            self._skip()

    def _6xkk(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.kk

    def _7xkk(self, ins):  # ADD Vx, byte
        # No carry flag for this one
        self.v[ins.x] = (self.v[ins.x] + ins.kk) & 0xFF

    def _post_8xy1_8xy2_8xy3(self):
        if self.logic_quirks:
            self.v[0xF] = 0

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        self.v[ins.x] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes Vf is specified in the
        # parameters.
        self.v[0xF] = int(val >= 0)

    def _8xy5(self, ins):  # SUB Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.x] - self.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx {, Vy}
        val = self.v[ins.x if self.shift_quirks else ins.y]
        self.v[ins.x] = val >> 1  # The result is put in Vx either way
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.y] - self.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx {, Vy}
        val = self.v[ins.x if self.shift_quirks else ins.y]
        self.v[ins.x] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.v[ins.x] != self.v[ins.y]:
            self._skip()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # Breaks lots of programs if set incorrectly.  Landing outside memory is caught on the next fetch.
        self.pc = self.v[ins.x if self.jump_quirks else 0] + ins.nnn

    def _Cxkk(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = randint(0, 0xFF) & ins.kk

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        sprite = self.ram.read_block(self.i, ins.n)
        self.v[0xF] = int(self.framebuffer.draw_sprite(self.v[ins.x], self.v[ins.y], sprite))

    def _Ex9E(self, ins):  # SKP Vx
        if self.keypad.is_down(self.v[ins.x] % NUM_KEYS):
            self._skip()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.keypad.is_down(self.v[ins.x] % NUM_KEYS):
            self._skip()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.timers.delay

    def _Fx0A(self, ins):  # LD Vx, K
        # Park on this instruction.  Timers keep running and the display keeps refreshing while we wait, because
        # control goes straight back to the caller.
        self.keypad.setup_keypress()  # Ignore keys which are already held
        self.awaiting_key = ins.x
        self.dec_pc()

    def _Fx15(self, ins):  # LD DT, Vx
        self.timers.set_delay(self.v[ins.x])

    def _Fx18(self, ins):  # LD ST, Vx
        self.timers.set_sound(self.v[ins.x])

    def _Fx1E(self, ins):  # ADD I, Vx
        val = self.i + self.v[ins.x]
        self.i = val & 0xFFFF

        # Allow for Amiga CHIP-8 emulator behaviour
        if self.index_overflow_quirks:
            self.v[0xF] = int(val > 0xFFF)

    def _Fx29(self, ins):  # LD F, Vx
        self.i = FONT_START + FONT_GLYPH_SIZE * (self.v[ins.x] & 0xF)

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        self.ram.write_block(self.i, bytes((val // 100, (val // 10) % 10, val % 10)))

    def _post_Fx55_Fx65(self, ins):
        if self.load_quirks:
            self.i = (self.i + ins.x + 1) & 0xFFFF

    def _Fx55(self, ins):  # LD [I], Vx
        # Ensure with +1s that the final register is copied
        self.ram.write_block(self.i, self.v[:ins.x + 1])
        self._post_Fx55_Fx65(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        self.v[:ins.x + 1] = self.ram.read_block(self.i, ins.x + 1)
        self._post_Fx55_Fx65(ins)
