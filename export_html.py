"""
Standalone HTML export.

The artifact is one HTML file holding a JSON bundle and a small JavaScript
runtime.  The bundle carries everything the runtime needs, computed here from
the same sources the live engine uses:

- ``path``: the active shape's recipe expanded by ``shapes.generate_path``
- ``background``: the display list from ``draw.background_ops`` (scene or fill)
- ``physics`` / ``render``: the constants from ``config``

so the runtime never carries its own copy of a shape or scene.  The runtime
ticks particles in the same order and with the same arithmetic as
``particles.update_particle``.
"""

import json
import logging
import re
from pathlib import Path

import config as settings
import draw
import scenes
import shapes


class ExportError(ValueError):
    pass


RUNTIME_JS = r"""
(function (root) {
  "use strict";

  function paintOps(ctx, ops, random) {
    for (const op of ops) {
      ctx.globalAlpha = 1;
      switch (op.op) {
        case "fill_rect":
          ctx.fillStyle = op.color;
          ctx.fillRect(op.rect[0], op.rect[1], op.rect[2], op.rect[3]);
          break;
        case "stroke_rect":
          ctx.strokeStyle = op.color;
          ctx.lineWidth = op.width;
          ctx.strokeRect(op.rect[0], op.rect[1], op.rect[2], op.rect[3]);
          break;
        case "linear_gradient":
        case "radial_gradient": {
          const g = op.op === "linear_gradient"
            ? ctx.createLinearGradient(op.start[0], op.start[1], op.end[0], op.end[1])
            : ctx.createRadialGradient(op.center[0], op.center[1], 0, op.center[0], op.center[1], op.radius);
          for (const stop of op.stops) g.addColorStop(stop[0], stop[1]);
          ctx.fillStyle = g;
          ctx.fillRect(op.rect[0], op.rect[1], op.rect[2], op.rect[3]);
          break;
        }
        case "polygon":
          ctx.fillStyle = op.color;
          ctx.beginPath();
          ctx.moveTo(op.points[0][0], op.points[0][1]);
          for (const p of op.points.slice(1)) ctx.lineTo(p[0], p[1]);
          ctx.closePath();
          ctx.fill();
          break;
        case "line":
          ctx.strokeStyle = op.color;
          ctx.lineWidth = op.width;
          ctx.beginPath();
          ctx.moveTo(op.points[0][0], op.points[0][1]);
          for (const p of op.points.slice(1)) ctx.lineTo(p[0], p[1]);
          ctx.stroke();
          break;
        case "arc":
          ctx.strokeStyle = op.color;
          ctx.lineWidth = op.width;
          ctx.beginPath();
          ctx.arc(op.center[0], op.center[1], op.radius, op.start, op.end);
          ctx.stroke();
          break;
        case "text":
          ctx.font = (op.bold ? "bold " : "") + op.size + "px Arial";
          ctx.textAlign = "center";
          ctx.fillStyle = op.color;
          ctx.fillText(op.text, op.pos[0], op.pos[1]);
          break;
        case "starfield": {
          const w = ctx.canvas.width, h = ctx.canvas.height;
          ctx.fillStyle = op.color;
          for (let i = 0; i < op.count; i++) {
            const x = random() * w;
            const y = random() * h;
            const size = random() * op.size[1] + op.size[0];
            ctx.globalAlpha = random() * op.alpha[1] + op.alpha[0];
            ctx.beginPath();
            ctx.arc(x, y, size, 0, Math.PI * 2);
            ctx.fill();
          }
          ctx.globalAlpha = 1;
          break;
        }
        default:
          throw new Error("unknown paint op " + op.op);
      }
    }
  }

  function create(bundle, random) {
    random = random || Math.random;
    const cfg = bundle.config;
    const phys = bundle.physics;
    const look = bundle.render;
    const path = bundle.path;
    const particles = [];
    if (path.length > 0) {
      for (let i = 0; i < cfg.particleCount; i++) {
        const pathIndex = Math.floor((i / cfg.particleCount) * path.length);
        const pos = path[pathIndex];
        particles.push({ x: pos[0], y: pos[1], vx: 0, vy: 0, pathIndex: pathIndex, trail: [] });
      }
    }
    const pointer = { active: false, x: 0, y: 0 };
    let settled = particles.map(p => [p.x, p.y]);

    function step() {
      settled = particles.map(p => [p.x, p.y]);
      if (path.length === 0) return;
      for (const p of particles) {
        p.pathIndex = (p.pathIndex + cfg.animationSpeed) % path.length;
        const target = path[Math.floor(p.pathIndex)];
        p.vx += (target[0] - p.x) * phys.spring;
        p.vy += (target[1] - p.y) * phys.spring;
        if (pointer.active) {
          const dx = pointer.x - p.x;
          const dy = pointer.y - p.y;
          const distance = Math.sqrt(dx * dx + dy * dy);
          if (distance < phys.repulsionRadius) {
            const force = (phys.repulsionRadius - distance) / phys.repulsionRadius;
            const push = force * force * phys.repulsionPower;
            const ux = distance > 0 ? dx / distance : 1;
            const uy = distance > 0 ? dy / distance : 0;
            const jitterX = (random() - 0.5) * push * phys.jitter;
            const jitterY = (random() - 0.5) * push * phys.jitter;
            p.vx -= ux * push + jitterX;
            p.vy -= uy * push + jitterY;
          }
        }
        p.vx *= phys.damping;
        p.vy *= phys.damping;
        p.x += p.vx;
        p.y += p.vy;
        p.trail.unshift([p.x, p.y]);
        while (p.trail.length > cfg.trailLength) p.trail.pop();
      }
    }

    function render(ctx) {
      if (particles.length === 0) return;
      paintOps(ctx, bundle.background, random);
      const color = cfg.particleColor;
      if (cfg.connectionDistance > 0) {
        ctx.strokeStyle = color;
        ctx.lineWidth = look.connectionWidth;
        for (let i = 0; i < settled.length; i++) {
          for (let j = i + 1; j < settled.length; j++) {
            const dx = settled[i][0] - settled[j][0];
            const dy = settled[i][1] - settled[j][1];
            const distance = Math.sqrt(dx * dx + dy * dy);
            if (distance < cfg.connectionDistance) {
              ctx.globalAlpha = (1 - distance / cfg.connectionDistance) * look.connectionAlpha;
              ctx.beginPath();
              ctx.moveTo(settled[i][0], settled[i][1]);
              ctx.lineTo(settled[j][0], settled[j][1]);
              ctx.stroke();
            }
          }
        }
        ctx.globalAlpha = 1;
      }
      for (const p of particles) {
        const n = p.trail.length;
        if (n > 1) {
          ctx.strokeStyle = color;
          ctx.lineWidth = look.trailWidth;
          for (let i = 0; i < n - 1; i++) {
            ctx.globalAlpha = (1 - i / n) * look.trailAlpha;
            ctx.beginPath();
            ctx.moveTo(p.trail[i][0], p.trail[i][1]);
            ctx.lineTo(p.trail[i + 1][0], p.trail[i + 1][1]);
            ctx.stroke();
          }
        }
        ctx.fillStyle = color;
        ctx.shadowColor = color;
        for (const tier of look.glowTiers) {
          if (cfg.glowIntensity > tier.threshold) {
            ctx.shadowBlur = tier.blur * cfg.glowIntensity;
            ctx.globalAlpha = tier.alpha;
            ctx.beginPath();
            ctx.arc(p.x, p.y, cfg.particleSize + tier.pad, 0, Math.PI * 2);
            ctx.fill();
          }
        }
        ctx.shadowBlur = 0;
        ctx.globalAlpha = 1;
        ctx.beginPath();
        ctx.arc(p.x, p.y, cfg.particleSize, 0, Math.PI * 2);
        ctx.fill();
      }
    }

    return { particles: particles, pointer: pointer, step: step, render: render };
  }

  function boot() {
    const bundle = JSON.parse(document.getElementById("marfa-bundle").textContent);
    const canvas = document.getElementById("canvas");
    canvas.width = bundle.width;
    canvas.height = bundle.height;
    const ctx = canvas.getContext("2d");
    const engine = create(bundle, Math.random);
    const pointer = engine.pointer;

    function moveTo(clientX, clientY) {
      const rect = canvas.getBoundingClientRect();
      pointer.x = (clientX - rect.left) * canvas.width / rect.width;
      pointer.y = (clientY - rect.top) * canvas.height / rect.height;
    }

    canvas.addEventListener("mousedown", e => { pointer.active = true; moveTo(e.clientX, e.clientY); });
    canvas.addEventListener("mousemove", e => moveTo(e.clientX, e.clientY));
    canvas.addEventListener("mouseup", () => { pointer.active = false; });
    canvas.addEventListener("mouseleave", () => { pointer.active = false; });
    canvas.addEventListener("touchstart", e => {
      pointer.active = true;
      moveTo(e.touches[0].clientX, e.touches[0].clientY);
    });
    canvas.addEventListener("touchmove", e => moveTo(e.touches[0].clientX, e.touches[0].clientY));
    canvas.addEventListener("touchend", () => { pointer.active = false; });

    function frame() {
      engine.step();
      engine.render(ctx);
      root.requestAnimationFrame(frame);
    }
    root.requestAnimationFrame(frame);
  }

  root.MarfaEngine = { create: create, paintOps: paintOps };
  if (typeof document !== "undefined") boot();
})(typeof window !== "undefined" ? window : globalThis);
"""

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>@@TITLE@@</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { display: flex; justify-content: center; align-items: center; min-height: 100vh; background: @@BACKGROUND@@; overflow: hidden; }
        canvas { max-width: 100%; max-height: 100vh; cursor: crosshair; touch-action: none; }
    </style>
</head>
<body>
    <canvas id="canvas"></canvas>
    <script id="marfa-bundle" type="application/json">@@BUNDLE@@</script>
    <script id="marfa-runtime">@@RUNTIME@@</script>
</body>
</html>
"""

_TOKEN = re.compile(r"@@[A-Z0-9_]+@@")


def physics_constants():
    return {
        "spring": settings.SPRING,
        "damping": settings.DAMPING,
        "repulsionRadius": settings.REPULSION_RADIUS,
        "repulsionPower": settings.REPULSION_POWER,
        "jitter": settings.JITTER,
    }


def render_constants():
    return {
        "connectionAlpha": settings.CONNECTION_ALPHA,
        "connectionWidth": settings.CONNECTION_WIDTH,
        "trailAlpha": settings.TRAIL_ALPHA,
        "trailWidth": settings.TRAIL_WIDTH,
        "glowTiers": [
            {"threshold": threshold, "blur": blur, "pad": pad, "alpha": alpha}
            for threshold, blur, pad, alpha in settings.GLOW_TIERS
        ],
    }


def build_bundle(config, width=settings.WIDTH, height=settings.HEIGHT):
    path = shapes.generate_path(config.shape_type, width / 2, height / 2)
    if not path:
        raise ExportError(f"shape {config.shape_type!r} produced an empty path")
    return {
        "width": width,
        "height": height,
        "config": config.to_dict(),
        "path": [[x, y] for x, y in path],
        "background": draw.background_ops(config, width, height),
        "physics": physics_constants(),
        "render": render_constants(),
    }


def _title(config):
    words = config.shape_type.replace("-", " ").title()
    return f"Marfa Particle Art: {words}"


def export_artifact(config, shape_id=None, scene_id=None, width=settings.WIDTH, height=settings.HEIGHT):
    """Serialize ``config`` (optionally with another shape / scene) into standalone HTML.

    Raises ExportError instead of returning a partial artifact.
    """
    shape_id = config.shape_type if shape_id is None else shape_id
    scene_id = config.scene_type if scene_id is None else scene_id
    if shape_id not in shapes.SHAPES:
        raise ExportError(f"cannot export unknown shape {shape_id!r}")
    if scene_id != scenes.NONE and scene_id not in scenes.SCENES:
        raise ExportError(f"cannot export unknown scene {scene_id!r}")
    try:
        config = config.replace(shape_type=shape_id, scene_type=scene_id)
    except settings.ConfigError as e:
        raise ExportError(f"cannot export invalid config: {e}") from e

    try:
        bundle = json.dumps(build_bundle(config, width, height), allow_nan=False, separators=(",", ":"))
    except ValueError as e:
        if isinstance(e, ExportError):
            raise
        raise ExportError(f"config is not serializable: {e}") from e

    html = (
        HTML_TEMPLATE.replace("@@TITLE@@", _title(config))
        .replace("@@BACKGROUND@@", config.background_color)
        .replace("@@RUNTIME@@", RUNTIME_JS)
        # keep "</script" out of the inline JSON
        .replace("@@BUNDLE@@", bundle.replace("</", "<\\/"))
    )
    leftover = sorted(set(_TOKEN.findall(html)))
    if leftover:
        raise ExportError("unreplaced template tokens: " + ", ".join(leftover))

    logging.info(f"Exported {shape_id} / {scene_id} ({len(html)} bytes).")
    return html


def write_artifact(path, html):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path


def extract_bundle(html):
    """Parse the JSON bundle back out of an exported artifact."""
    match = re.search(r'<script id="marfa-bundle" type="application/json">(.*?)</script>', html, re.S)
    if match is None:
        raise ExportError("no bundle in artifact")
    return json.loads(match.group(1).replace("<\\/", "</"))


def extract_runtime(html):
    match = re.search(r'<script id="marfa-runtime">(.*?)</script>', html, re.S)
    if match is None:
        raise ExportError("no runtime in artifact")
    return match.group(1)
