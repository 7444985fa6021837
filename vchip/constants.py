#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "VChip-8 Virtual Machine"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000
PROGRAM_START = 0x200
FONT_START = 0x50
FONT_GLYPH_SIZE = 5

# Register file and stack
NUM_REGISTERS = 0x10
STACK_DEPTH = 16

# Display and keypad
VID_WIDTH = 64
VID_HEIGHT = 32
NUM_KEYS = 0x10

# Timing
TIMER_FREQ = 60.0            # Timers, input polling and display refresh all run at 60Hz
FRAME_INTERVAL = 1.0 / TIMER_FREQ
DEFAULT_CLOCK_SPEED = 700    # Instructions per second

# 16 glyphs (0-F), 5 rows each, 4 pixels wide in the high nibble
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Configurable quirks, with the behaviour used when left unspecified
DEFAULT_QUIRKS = {
    "shift": True,            # 8xy6/8xyE shift Vx in place rather than Vy into Vx
    "index_overflow": False,  # Fx1E sets Vf when I passes the end of addressable memory
    "load": False,            # Fx55/Fx65 advance I past the last register transferred
    "logic": False,           # 8xy1/8xy2/8xy3 reset Vf
    "jump": False,            # Bnnn offsets by Vx rather than V0
    "screen_wrap": True       # Sprites wrap around the screen edges rather than being clipped
}

QUIRKS = list(DEFAULT_QUIRKS.keys())
