"""Command line harness that builds a world and flies it, windowed or headless."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .src.gameplay.world import FlightSession, HeadlessRenderer, SimulationLoop, build_world
from .src.generation import CONTROL_SCHEMES, GenerationSeed, load_display_config, load_world_settings

LOGGER = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fly a spaceship over a procedurally generated low-poly landscape")
    parser.add_argument("--headless", action="store_true", help="Run without a window using the headless renderer")
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames")
    parser.add_argument("--seed", type=int, default=None, help="Seed for world generation (default: FLYOVER_SEED)")
    parser.add_argument("--config-dir", default=None, help="Directory holding terrain/scatter/flight/sky JSON")
    parser.add_argument("--control-scheme", choices=CONTROL_SCHEMES, default=None, help="Camera control scheme")
    parser.add_argument("--log-level", default="INFO", help="Logging level name")
    return parser


def _resolve_seed(args: argparse.Namespace) -> GenerationSeed:
    # //1.- The command line wins over the environment.
    if args.seed is not None:
        return GenerationSeed(value=args.seed)
    return GenerationSeed.from_environment()


def run(args: Sequence[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)
    logging.basicConfig(
        level=getattr(logging, str(parsed.log_level).upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(message)s",
    )
    if parsed.frames is not None and parsed.frames < 0:
        parser.error("--frames must be non-negative")

    # //2.- Configuration errors surface before any world or window exists.
    try:
        display = load_display_config()
        settings = load_world_settings(parsed.config_dir)
    except (OSError, ValueError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2
    scheme = parsed.control_scheme or display.control_scheme
    seed = _resolve_seed(parsed)
    LOGGER.info("Generating world (seed=%s, scheme=%s)", seed.value, scheme)
    world = build_world(settings, seed.create_generator())
    session = FlightSession(world, control_scheme=scheme)

    if parsed.headless:
        renderer = HeadlessRenderer()
        session.resize(display.width, display.height, renderer)
        loop = SimulationLoop(session, renderer)
        frames = loop.run(parsed.frames if parsed.frames is not None else 1)
        LOGGER.info("Headless run rendered %d frames", renderer.frames)
        return 0 if frames == renderer.frames else 1

    # //3.- The windowed viewer is optional; its dependencies come from the viewer extra.
    from .viewer import PygameHost, PygameRenderer

    host = PygameHost(display.width, display.height)
    try:
        renderer = PygameRenderer(display.width, display.height)
        session.resize(display.width, display.height, renderer)
        loop = SimulationLoop(session, renderer, poll_events=host.poll_events)
        frames = 0
        while not host.quit_requested and (parsed.frames is None or frames < parsed.frames):
            loop.frame()
            frames += 1
        LOGGER.info("Viewer closed after %d frames", frames)
    except KeyboardInterrupt:  # pragma: no cover - manual interruption
        return 130
    finally:
        host.close()
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover - exercised by manual runs
    main()
