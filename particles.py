import math
import random
from collections import deque
from dataclasses import dataclass, field
from itertools import islice

import pygame

from config import DAMPING, JITTER, REPULSION_POWER, REPULSION_RADIUS, SPRING


@dataclass
class Particle:
    position: pygame.Vector2
    velocity: pygame.Vector2
    path_index: float
    trail: deque


@dataclass
class PointerState:
    active: bool = False
    position: pygame.Vector2 = field(default_factory=pygame.Vector2)

    def press(self, x, y):
        self.active = True
        self.position.update(x, y)

    def move(self, x, y):
        self.position.update(x, y)

    def release(self):
        self.active = False


def init_particles(path, count, trail_length):
    """Spread ``count`` particles evenly along ``path``, at rest, with empty trails."""
    if not path:
        return []
    particles = []
    for i in range(count):
        path_index = math.floor((i / count) * len(path))
        particles.append(
            Particle(
                position=pygame.Vector2(path[path_index]),
                velocity=pygame.Vector2(0, 0),
                path_index=float(path_index),
                trail=deque(maxlen=trail_length),
            )
        )
    return particles


def update_particle(particle, path, speed, pointer, rng):
    """Advance one particle by one frame.

    Order matters and is mirrored by the exported runtime: target, spring,
    pointer repulsion, damping, integration, trail.
    """
    particle.path_index = (particle.path_index + speed) % len(path)
    target = path[int(particle.path_index)]

    particle.velocity += (pygame.Vector2(target) - particle.position) * SPRING

    if pointer.active:
        dx = pointer.position.x - particle.position.x
        dy = pointer.position.y - particle.position.y
        distance = math.sqrt(dx * dx + dy * dy)
        if distance < REPULSION_RADIUS:
            force = (REPULSION_RADIUS - distance) / REPULSION_RADIUS
            push = force * force * REPULSION_POWER
            ux, uy = (dx / distance, dy / distance) if distance > 0 else (1.0, 0.0)
            # deliberate chaos, independent per axis
            jitter_x = (rng.random() - 0.5) * push * JITTER
            jitter_y = (rng.random() - 0.5) * push * JITTER
            particle.velocity.x -= ux * push + jitter_x
            particle.velocity.y -= uy * push + jitter_y

    particle.velocity *= DAMPING
    particle.position += particle.velocity

    particle.trail.appendleft((particle.position.x, particle.position.y))


class ParticleSystem:
    """Owns the figure path and the particles flowing along it.

    ``path`` and ``particles`` are only ever swapped together, never patched,
    so a particle's ``path_index`` always refers to the current path.
    """

    def __init__(self, path=(), count=0, trail_length=0, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.path = tuple(path)
        self.particles = init_particles(self.path, count, trail_length)

    def reset(self, path, count, trail_length):
        path = tuple(path)
        particles = init_particles(path, count, trail_length)
        self.path, self.particles = path, particles

    def set_trail_length(self, trail_length):
        for particle in self.particles:
            particle.trail = deque(islice(particle.trail, trail_length), maxlen=trail_length)

    def positions(self):
        return [(p.position.x, p.position.y) for p in self.particles]

    def step(self, speed, pointer):
        if not self.path:
            return
        for particle in self.particles:
            update_particle(particle, self.path, speed, pointer, self.rng)

    def __len__(self):
        return len(self.particles)
