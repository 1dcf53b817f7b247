"""
Replay the demo track in the terminal.

This script runs a playback clock over the built-in demo track and prints
one line per tick with the tick date, interpolated position, heading and
accuracy.

Usage:
    python3 replay_track.py
    python3 replay_track.py --speed 4
    python3 replay_track.py --seek 10 --interval 0.25 --log-level DEBUG
"""

import argparse
import logging
import sys
import threading

from trackplayback import playback


def format_tick(tick: playback.Tick, point: playback.TrackPoint) -> str:
    """
    Build the printed line for one tick.

    Args:
        tick: Tick delivered by the clock.
        point: Position at the tick time (last point of the visible window).

    Returns:
        Single-line summary of the tick.
    """
    heading = "   -  " if point.dir is None else f"{point.dir:6.1f}"
    accuracy = next((entry["value"] for entry in point.info if entry.get("key") == playback.ACCURACY_LABEL), "-")
    kind = "sample" if point.is_origin else "interp"
    return (
        f"{playback.format_timestamp(tick.time)}  t={tick.time:8.3f}s  "
        f"lat={point.lat:.6f}  lng={point.lng:.6f}  "
        f"dir={heading}  acc={accuracy:>10}  [{kind}]"
    )


def main():
    parser = argparse.ArgumentParser(description="Replay the demo track and print each tick")
    parser.add_argument(
        "--speed",
        type=float,
        default=playback.DEFAULT_SPEED,
        help=f"Initial speed multiplier (default: {playback.DEFAULT_SPEED})"
    )
    parser.add_argument(
        "--seek",
        type=float,
        default=None,
        help="Track time to seek to before starting (default: track start)"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=0.5,
        help="Seconds between ticks (default: 0.5)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the playback library (default: WARNING)"
    )

    args = parser.parse_args()

    if args.interval <= 0:
        print("Error: --interval must be positive")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    track = playback.build_demo_track()
    clock = playback.PlaybackClock(track, speed=args.speed, tick_interval=args.interval)
    finished = threading.Event()

    def on_tick(tick: playback.Tick) -> None:
        point = track.get_track_point_at_time(tick.time)
        if point is not None:
            print(format_tick(tick, point))
        if tick.time >= clock.get_end_time():
            finished.set()

    clock.subscribe(on_tick)

    print(f"\n{'='*70}")
    print("Track Playback")
    print(f"{'='*70}")
    print(f"Samples: {len(track)}")
    print(f"Start: {clock.get_start_time()}s  End: {clock.get_end_time()}s")
    print(f"Speed: x{clock.get_speed()}  Tick interval: {args.interval}s")
    print(f"{'='*70}")

    if args.seek is not None:
        clock.set_cursor(args.seek)

    clock.start()
    try:
        finished.wait()
    except KeyboardInterrupt:
        print("\nInterrupted.")
    finally:
        clock.dispose()

    print(f"{'='*70}\n")


if __name__ == "__main__":
    main()
