#!/usr/bin/env python3

"""
Host Scheduler

Drives a CPU in real time.  Two clocks are kept apart on purpose:

- The instruction clock calls CPU.step() at the configured clock speed (or as
  fast as possible if the speed is 0).
- The timer clock calls CPU.tick_timers() at 60Hz, however many instructions
  ran in between.  If the host falls behind, the missed ticks are caught up in
  one go so the timers stay linked to real time.

The display is refreshed, input is polled, and the buzzer is switched on or
off at 60Hz too.

When the CPU halts, the run ends with a CPUError carrying the full debug dump.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_INTRO, APP_NAME, DEFAULT_CLOCK_SPEED, TIMER_FREQ
from .cpu import CPUError

TIMER_INTERVAL = 1.0 / TIMER_FREQ
DISPLAY_FREQ = 60.0  # 60Hz emulated display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class HostError(Exception):
    pass


class Host:
    def __init__(self, cpu, renderer, inputs, audio, clock_speed=None):
        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED
        elif clock_speed < 0:
            raise HostError("Clock speed cannot be negative")

        self.cpu = cpu
        self.renderer = renderer
        self.inputs = inputs
        self.audio = audio
        self.core_interval = None if clock_speed == 0 else 1.0 / clock_speed
        self.buzzer_on = False

        self.renderer.set_resolution(*cpu.state.framebuffer.get_vid_size())

        # Performance-related vars
        self.next_display_update_time = 0
        self.next_timer_time = None
        self.next_perf_report_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.report_perf()

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

    def refresh_display(self):
        # Only hand over a new frame if something was drawn since the last one
        framebuffer = self.cpu.state.framebuffer
        content_changed = framebuffer.dirty

        if content_changed:
            self.renderer.draw_frame(self.cpu.display_snapshot())
            framebuffer.dirty = False

        self.renderer.refresh_display(content_changed)

    def tick_timers(self):
        self.cpu.tick_timers()
        sound_active = self.cpu.sound_active()

        if sound_active != self.buzzer_on:
            self.audio.enable_buzzer(sound_active)
            self.buzzer_on = sound_active

    def run(self, max_ops=None):
        # Returns when the user quits, or once max_ops steps have been made.  Raises CPUError if the CPU halts.
        cpu = self.cpu
        ops = 0
        self.next_timer_time = perf_counter() + TIMER_INTERVAL

        try:
            while max_ops is None or ops < max_ops:
                this_time = perf_counter()  # Do this first for maximum precision

                # Performance counters
                if this_time >= self.next_perf_report_time:
                    self.next_perf_report_time = int(this_time) + 1.0
                    self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                    self.perf_counter_ops = 0
                    self.perf_counter_fps = 0

                # Catch the timers up with real time
                while this_time >= self.next_timer_time:
                    self.tick_timers()
                    self.next_timer_time += TIMER_INTERVAL

                # Prevent unnecessary display rendering in excess of host frame rate
                if this_time >= self.next_display_update_time:
                    if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                        return
                    self.next_display_update_time = this_time + DISPLAY_INTERVAL
                    self.refresh_display()
                    self.perf_counter_fps += 1

                status = cpu.step()
                ops += 1

                if status.is_halted:
                    self.refresh_display()  # Leave the final frame on screen
                    raise CPUError(
                        "Emulation halted.\n\n{}Debug info:\n{}".format(APP_INTRO, cpu.debugger.debug(cpu, verbose=True))
                    )

                if self.core_interval is not None:
                    # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent
                    # on this instruction)
                    next_time = this_time + self.core_interval

                    while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                        pass

                self.perf_counter_ops += 1
        finally:
            if self.buzzer_on:
                self.audio.enable_buzzer(False)
                self.buzzer_on = False
