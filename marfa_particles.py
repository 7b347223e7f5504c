import argparse
import logging
import os
import random
import time
from pathlib import Path

import imageio.v2 as imageio
import pygame

import draw
import export_html
import scenes
import shapes
from config import (
    FPS,
    FRAME_LIMIT,
    GRADIENT_TYPES,
    HEIGHT,
    LIMITS,
    OUTPUT_DIR,
    OUTPUT_FILE,
    PRESETS,
    RECORD,
    WIDTH,
    ConfigError,
    SimulationConfig,
    apply_preset,
    randomize,
)
from simulation import FrameLoop, Simulation

PRESET_KEYS = {getattr(pygame, f"K_{i + 1}"): name for i, name in enumerate(PRESETS)}


def _limits(name):
    low, high = LIMITS[name]
    return f"({low} to {high})"


def build_parser():
    parser = argparse.ArgumentParser(description="Desert particle art: particles flowing along Marfa shapes.")
    look = parser.add_argument_group("design")
    look.add_argument("--shape", dest="shape_type", choices=sorted(shapes.SHAPES))
    look.add_argument("--scene", dest="scene_type", choices=[scenes.NONE] + sorted(scenes.SCENES))
    look.add_argument("--particle-color", metavar="#RRGGBB")
    look.add_argument("--background-color", metavar="#RRGGBB")
    look.add_argument("--background-color2", metavar="#RRGGBB")
    look.add_argument("--gradient", dest="gradient_type", choices=GRADIENT_TYPES)
    look.add_argument("--particles", dest="particle_count", type=int, help=_limits("particle_count"))
    look.add_argument("--trail", dest="trail_length", type=int, help=_limits("trail_length"))
    look.add_argument("--glow", dest="glow_intensity", type=float, help=_limits("glow_intensity"))
    look.add_argument("--size", dest="particle_size", type=float, help=_limits("particle_size"))
    look.add_argument("--speed", dest="animation_speed", type=float, help=_limits("animation_speed"))
    look.add_argument("--connections", dest="connection_distance", type=float, help=_limits("connection_distance"))
    look.add_argument("--preset", choices=list(PRESETS))
    look.add_argument("--randomize", action="store_true", help="start from a random design")

    run = parser.add_argument_group("run")
    run.add_argument("--seed", type=int, help="seed for every random draw")
    run.add_argument("--frames", type=int, default=FRAME_LIMIT, help="stop after N frames (0 runs until closed)")
    run.add_argument("--headless", action="store_true", help="no window; needs --frames")
    run.add_argument(
        "--record", nargs="?", const=OUTPUT_FILE, default=OUTPUT_FILE if RECORD else None, metavar="VIDEO"
    )
    run.add_argument("--snapshot", metavar="PNG", help="write the last frame as PNG")
    run.add_argument("--export", metavar="HTML", help="write a standalone HTML version of the design")
    run.add_argument("-v", "--verbose", action="store_true")
    return parser


DESIGN_FIELDS = (
    "shape_type",
    "scene_type",
    "particle_color",
    "background_color",
    "background_color2",
    "gradient_type",
    "particle_count",
    "trail_length",
    "glow_intensity",
    "particle_size",
    "animation_speed",
    "connection_distance",
)


def build_config(args, rng):
    config = randomize(rng) if args.randomize else SimulationConfig()
    if args.preset:
        config = apply_preset(config, args.preset)
    overrides = {name: getattr(args, name) for name in DESIGN_FIELDS if getattr(args, name) is not None}
    return config.replace(**overrides) if overrides else config.validate()


def next_index(prefix, suffix):
    pattern = f"{prefix}_*{suffix}"
    taken = [p.name[len(prefix) + 1 : -len(suffix)] for p in Path(OUTPUT_DIR).glob(pattern)]
    numbers = [int(n) for n in taken if n.isdigit()]
    return max(numbers, default=-1) + 1


def save_frame(sim, prefix="marfa"):
    os.makedirs(OUTPUT_DIR, exist_ok=True)
    path = os.path.join(OUTPUT_DIR, f"{prefix}_{next_index(prefix, '.png'):04d}.png")
    with open(path, "wb") as f:
        f.write(sim.snapshot())
    return path


def save_export(sim, prefix="marfa"):
    path = os.path.join(OUTPUT_DIR, f"{prefix}_{next_index(prefix, '.html'):04d}.html")
    return export_html.write_artifact(path, sim.export())


def handle_event(sim, event, rng):
    """Route one pygame event. Returns False when the app should quit."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        sim.pointer_down(*event.pos)
    elif event.type == pygame.MOUSEMOTION:
        sim.pointer_move(*event.pos)
    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
        sim.pointer_up()
    elif event.type == pygame.WINDOWLEAVE:
        sim.pointer_up()
    elif event.type == pygame.FINGERDOWN:
        sim.pointer_down(event.x * sim.width, event.y * sim.height)
    elif event.type == pygame.FINGERMOTION:
        sim.pointer_move(event.x * sim.width, event.y * sim.height)
    elif event.type == pygame.FINGERUP:
        sim.pointer_up()
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_s:
            print(f"Saved {save_frame(sim)}")
        elif event.key == pygame.K_e:
            print(f"Exported {save_export(sim)}")
        elif event.key == pygame.K_r:
            sim.apply_config(randomize(rng))
            logging.info(f"Randomized design: {sim.config.shape_type} on {sim.config.scene_type}.")
        elif event.key in PRESET_KEYS:
            sim.apply_config(apply_preset(sim.config, PRESET_KEYS[event.key]))
    return True


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    if args.frames < 0:
        parser.error("--frames must be >= 0")
    if args.headless:
        if not args.frames:
            parser.error("--headless needs --frames")
        os.environ["SDL_VIDEODRIVER"] = "dummy"

    rng = random.Random(args.seed)
    try:
        config = build_config(args, rng)
    except ConfigError as e:
        parser.error(str(e))

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Marfa Particle Art")
    sim = Simulation(config, WIDTH, HEIGHT, rng)
    loop = FrameLoop(FPS)
    sim.start(loop)

    frames = [] if args.record else None
    time_frame, time_display = 0, 0

    running = True
    start_time = time.time()
    count = 0
    while running:
        count += 1
        if args.frames and count > args.frames:
            running = False
            end_time = time.time()
            print(f"Time taken for {args.frames} frames: {end_time - start_time} seconds")
            break

        for event in pygame.event.get():
            if not handle_event(sim, event, rng):
                running = False

        t0 = time.time()
        loop.pump()
        t1 = time.time()
        screen.blit(sim.surface, (0, 0))
        pygame.display.flip()
        time_display += time.time() - t1
        time_frame += t1 - t0

        if frames is not None:
            frames.append(draw.frame_array(sim.surface))

    if frames:
        imageio.mimsave(args.record, frames, fps=FPS)
        print(f"Recorded {len(frames)} frames to {args.record}")
    if args.snapshot:
        with open(args.snapshot, "wb") as f:
            f.write(sim.snapshot())
    if args.export:
        try:
            html = sim.export()
        except export_html.ExportError as e:
            parser.error(str(e))
        print(f"Exported {export_html.write_artifact(args.export, html)}")

    sim.close()
    pygame.quit()
    print(f"Time taken for frame loop: {time_frame} seconds")
    print(f"Time taken for display: {time_display} seconds")


if __name__ == "__main__":
    main()
