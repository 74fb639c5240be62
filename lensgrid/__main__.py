import argparse
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from lensgrid import (
    LensField,
    LevelStats,
    estimate_magnification,
    generate_tikz_document,
    get_search_options,
    load_event_config,
    sample_event,
    search,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Find the images of a finite source behind point-mass lenses")
    parser.add_argument(
        "event",
        nargs="?",
        help="Path to a JSON event description (default: built-in two-lens sample)",
    )
    parser.add_argument(
        "--frame",
        type=int,
        default=0,
        help="Animation frame that fixes the source position (default: 0)",
    )
    parser.add_argument(
        "--resolution",
        type=float,
        help="Override the event's resolution floor",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--tikz-output-path",
        help="Write a standalone TikZ document of the search to the given path",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Outline every classified region in the TikZ output",
    )
    args = parser.parse_args(argv)
    if args.resolution is not None and not (math.isfinite(args.resolution) and args.resolution > 0):
        parser.error(f"--resolution must be a positive number, got {args.resolution!r}")

    _configure_logging(args.log_level)

    event = load_event_config(args.event) if args.event else sample_event()
    lens_field = event.field
    if args.resolution is not None:
        lens_field = LensField(lens_field.lenses, args.resolution)
        event = replace(event, field=lens_field)

    frame = event.trajectory.clamp(args.frame)
    if frame != args.frame:
        logger.warning("Frame %d outside 0..%d, using %d", args.frame, event.trajectory.frames, frame)
    source = event.source_for_frame(frame)

    options = get_search_options()
    stats = LevelStats(options.level_capacity)
    result = search(lens_field, source, event.region, stats=stats, options=options)

    print(f"Event: {event.name}")
    print(f"Frame: {frame}/{event.trajectory.frames}")
    print(f"Source: ({source.origin.x:.6f}, {source.origin.y:.6f}) r={source.radius:.6f}")
    print("Levels:")
    for level, area, calls in result.snapshot().levels():
        print(f"  {level:3d}: area={area:.6f} calls={calls}")
    print(f"Terminal regions: {len(result.terminals)}")
    print(f"Unresolved regions: {len(result.unresolved)}")
    print(f"Hit area: {result.hit_area:.6f}")
    print(f"Eliminated area: {result.eliminated_area:.6f}")
    print(f"Area fraction: {result.area_fraction:.6f}")
    print(f"Magnification estimate: {estimate_magnification(result):.4f}")

    if args.tikz_output_path:
        output_path = Path(args.tikz_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing TikZ document to %s", output_path)
        document = generate_tikz_document(
            result,
            lens_field,
            title=f"{event.name}, frame {frame}",
            show_grid=args.show_grid,
        )
        output_path.write_text(document, encoding="utf-8")
        print(f"TikZ document written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
