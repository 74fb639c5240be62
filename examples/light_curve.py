"""Example pipeline: sweep the built-in two-lens event and print a coarse light curve."""

from dataclasses import replace

from lensgrid import LensField, LevelStats, estimate_magnification, sample_event, search

RESOLUTION = 0.05
FRAME_STEP = 10


def main() -> None:
    event = sample_event()
    field = LensField(event.field.lenses, RESOLUTION)
    event = replace(event, field=field)
    stats = LevelStats()

    print(f"Event: {event.name} ({len(field.lenses)} lenses, resolution={field.resolution})")
    for frame, source in event.trajectory.iter_sources(event.source):
        if frame % FRAME_STEP:
            continue
        result = search(field, source, event.region, stats=stats)
        print(
            f"  frame {frame:3d}  source=({source.origin.x:.4f}, {source.origin.y:.4f})  "
            f"hits={len(result.hit_regions):5d}  unresolved={len(result.unresolved):3d}  "
            f"magnification={estimate_magnification(result):.4f}"
        )


if __name__ == "__main__":
    main()
