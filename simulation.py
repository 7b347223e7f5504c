"""
The simulation object: config, figure path, particles, pointer and the frame
loop that drives them, owned by one explicit instance.
"""

import logging
import random

import pygame

import draw
import export_html
import shapes
from config import FPS, HEIGHT, WIDTH, SimulationConfig
from particles import ParticleSystem, PointerState


class FrameLoop:
    """Single-slot frame scheduler paced by a ``pygame.time.Clock``.

    Only one callback is scheduled at a time: ``request`` cancels whatever
    was running before installing the new one.
    """

    def __init__(self, fps=FPS, clock=None):
        self.fps = fps
        self.clock = clock if clock is not None else pygame.time.Clock()
        self.dt = 0.0
        self.frames = 0
        self._callback = None
        self._handle = 0

    @property
    def active(self):
        return self._callback is not None

    @property
    def handle(self):
        return self._handle if self._callback is not None else None

    def request(self, callback):
        self.cancel()
        self._handle += 1
        self._callback = callback
        return self._handle

    def cancel(self, handle=None):
        if handle is None or handle == self._handle:
            self._callback = None

    def pump(self):
        """Run the scheduled callback once and wait for the next refresh slot."""
        if self._callback is None:
            return False
        self._callback()
        self.frames += 1
        self.dt = self.clock.tick(self.fps) / 1000
        return True


class Simulation:
    def __init__(self, config=None, width=WIDTH, height=HEIGHT, rng=None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.config = (config or SimulationConfig()).validate()
        self.pointer = PointerState()
        self.path = self._generate_path(self.config.shape_type)
        self.system = ParticleSystem(self.path, self.config.particle_count, self.config.trail_length, self.rng)
        self.settled = self.system.positions()
        self.surface = pygame.Surface((width, height))
        self._loop = None
        self._handle = None

    @property
    def particles(self):
        return self.system.particles

    def _generate_path(self, shape_type):
        return tuple(shapes.generate_path(shape_type, self.width / 2, self.height / 2))

    # configuration

    def apply_config(self, config=None, **changes):
        """Swap in a new config, regenerating whatever it invalidates."""
        new = (config or self.config).replace(**changes) if changes else (config or self.config).validate()
        old = self.config
        if new == old:
            return old

        path = self.path
        if new.shape_type != old.shape_type:
            path = self._generate_path(new.shape_type)
            logging.debug(f"Regenerated {new.shape_type} path ({len(path)} points).")

        self.config = new
        if path is not self.path or new.particle_count != old.particle_count:
            self.path = path
            self.system.reset(path, new.particle_count, new.trail_length)
            self.settled = self.system.positions()
            logging.debug(f"Reinitialized {new.particle_count} particles.")
        elif new.trail_length != old.trail_length:
            self.system.set_trail_length(new.trail_length)

        if self._handle is not None:
            self._restart()
        return new

    def restore(self, data):
        return self.apply_config(SimulationConfig.from_dict(data))

    # pointer

    def pointer_down(self, x, y):
        self.pointer.press(x, y)

    def pointer_move(self, x, y):
        self.pointer.move(x, y)

    def pointer_up(self):
        self.pointer.release()

    # frames

    def update(self, config=None):
        """One physics tick. Positions from before the tick are kept for connections."""
        config = config or self.config
        self.settled = self.system.positions()
        self.system.step(config.animation_speed, self.pointer)

    def render(self, config=None):
        config = config or self.config
        return draw.render_frame(self.surface, config, self.system.particles, self.settled, self.rng)

    def frame(self, config=None):
        self.update(config)
        return self.render(config)

    def _frame_task(self):
        config = self.config

        def run():
            self.frame(config)

        return run

    def start(self, loop):
        self.stop()
        self._loop = loop
        self._handle = loop.request(self._frame_task())
        return self._handle

    def _restart(self):
        self._loop.cancel(self._handle)
        self._handle = self._loop.request(self._frame_task())
        logging.debug(f"Frame loop restarted with handle {self._handle}.")

    def stop(self):
        if self._loop is not None and self._handle is not None:
            self._loop.cancel(self._handle)
        self._handle = None

    @property
    def running(self):
        return self._loop is not None and self._handle is not None and self._loop.handle == self._handle

    def close(self):
        self.stop()
        self._loop = None
        self.path = ()
        self.system.reset((), 0, 0)
        self.settled = []

    # outputs

    def snapshot(self):
        """PNG bytes of the current canvas."""
        data = draw.encode_png(self.surface)
        logging.info(f"Snapshot encoded: {len(data)} bytes.")
        return data

    def export(self):
        return export_html.export_artifact(self.config, width=self.width, height=self.height)
