#!/usr/bin/env python3

"""
Emulation Driver

Runs the machine one frame (1/60th of a second) at a time.  During each frame:

    1. Host inputs are polled and pushed into the keypad
    2. The delay and sound timers tick exactly once
    3. The CPU runs clock_speed / 60 instructions
    4. The buzzer follows the sound timer, and is cut off on the tick where it
       runs out, even if the program sets it again in the same frame
    5. The screen is redrawn, but only if something changed

This keeps the CPU speed decoupled from the fixed 60Hz timer and display rate.
When the clock speed doesn't divide evenly by 60, the leftover fraction of an
instruction is carried into the next frame, so over a second the CPU runs at
exactly the requested speed.

Fatal CPU errors are not caught here.  They propagate to whoever called run().
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, FRAME_INTERVAL, TIMER_FREQ


class RunnerError(Exception):
    pass


class Runner:
    def __init__(self, cpu, framebuffer, keypad, inputs, renderer, audio, clock_speed=None):
        self.cpu = cpu
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.inputs = inputs
        self.renderer = renderer
        self.audio = audio
        self.clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed

        if self.clock_speed <= 0:
            raise RunnerError("Clock speed must be at least 1 instruction per second")

        self.steps_per_frame = self.clock_speed / TIMER_FREQ
        self.step_budget = 0.0

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

        self.renderer.set_resolution(*self.framebuffer.get_vid_size())
        self.report_perf()

    def run_frame(self):
        # Returns False once the user has asked to quit
        if self.inputs.process_messages():
            return False

        self.keypad.set_pressed(self.inputs.get_pressed())

        if self.cpu.tick_timers():
            # Sound timer just reached zero.  Stop the buzzer before the CPU gets a chance to restart it.
            self.audio.enable_buzzer(False)

        self.step_budget += self.steps_per_frame
        steps = int(self.step_budget)
        self.step_budget -= steps

        for _ in range(steps):
            self.cpu.step()

        self.perf_counter_ops += steps

        # Starts the buzzer as soon as the sound timer is set
        self.audio.enable_buzzer(self.cpu.is_sound_active())

        # Prevent unnecessary display rendering if nothing has been drawn
        if self.framebuffer.dirty:
            self.renderer.render(self.framebuffer.snapshot())
            self.framebuffer.mark_clean()

        self.perf_counter_fps += 1
        return True

    def run(self):
        next_frame_time = perf_counter()

        while True:
            this_time = perf_counter()

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            if not self.run_frame():
                return

            next_frame_time += FRAME_INTERVAL

            if next_frame_time < this_time:
                # The host has lagged.  Don't try to catch up by running frames back-to-back.
                next_frame_time = this_time

            sleep(max(0.0, next_frame_time - perf_counter()))

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))
