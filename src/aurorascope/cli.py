"""
CLI entry point for the aurora band renderer.

Usage:
    aurorascope render [-o out.mp4] [options]
    aurorascope still [-o frame.png] [--frame N] [options]
    aurorascope preview [options]
"""

import argparse
import sys
import time
from pathlib import Path

from aurorascope.base import PROFILES, AuroraConfig, prefers_reduced_motion
from aurorascope.bands import load_band_table
from aurorascope.encoder import QUALITY_PRESETS, encode_video, ffmpeg_available, save_still
from aurorascope.pipeline import AuroraRenderer


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def _add_common_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=list(PROFILES),
        help="Target profile (low: 720p 30fps, medium: 1080p 60fps, high: 4k 60fps)",
    )
    parser.add_argument("--width", type=int, default=None, help="Output width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Output height (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for noise tables and band phases")
    parser.add_argument("--bands", type=Path, default=None, help="JSON band table (default: built-in 7 bands)")
    parser.add_argument(
        "--render-scale", type=float, default=0.5,
        help="Working raster scale relative to output (default: 0.5)",
    )
    parser.add_argument(
        "--soft-focus", type=float, default=0.0,
        help="Extra gaussian blur radius after upscaling (default: 0)",
    )
    parser.add_argument(
        "--reduced-motion", action="store_true",
        help="Respect a reduced-motion preference: render nothing",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aurorascope",
        description="Ambient aurora band background renderer",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render an MP4 video")
    _add_common_args(render)
    render.add_argument("-o", "--output", type=Path, default=Path("aurora.mp4"), help="Output MP4 path")
    render.add_argument("-d", "--duration", type=float, default=10.0, help="Length in seconds (default: 10)")
    render.add_argument("--audio", type=Path, default=None, help="Optional audio track to mux in")
    render.add_argument(
        "-q", "--quality", type=str, default=None,
        choices=list(QUALITY_PRESETS),
        help="Encoding quality (defaults to profile quality)",
    )

    still = sub.add_parser("still", help="Render a single frame to an image")
    _add_common_args(still)
    still.add_argument("-o", "--output", type=Path, default=Path("aurora.png"), help="Output image path")
    still.add_argument("--frame", type=int, default=0, help="Frame counter value to render (default: 0)")

    preview = sub.add_parser("preview", help="Open a live preview window")
    _add_common_args(preview)

    return parser


def _make_config(args) -> AuroraConfig:
    return AuroraConfig.from_profile(
        args.profile,
        width=args.width,
        height=args.height,
        fps=args.fps,
        seed=args.seed,
        render_scale=args.render_scale,
        soft_focus_radius=args.soft_focus,
        reduced_motion=args.reduced_motion or prefers_reduced_motion(),
    )


def _cmd_render(args, config: AuroraConfig, bands) -> int:
    if not ffmpeg_available():
        print("Error: ffmpeg not found on PATH", file=sys.stderr)
        return 1
    if args.audio is not None and not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        return 1

    quality = args.quality or PROFILES[args.profile]["quality"]
    total_frames = max(1, int(args.duration * config.fps))

    print(f"Rendering {total_frames} frames at {config.width}x{config.height} @ {config.fps}fps")
    print(f"  Profile: {args.profile}, Quality: {quality}, Bands: {len(bands) if bands else 'default'}")
    t0 = time.time()

    renderer = AuroraRenderer(config, bands)
    frame_gen = renderer.render_frames(total_frames, progress_callback=_progress_bar)

    encode_video(
        frame_iterator=frame_gen,
        output_path=args.output,
        width=config.width,
        height=config.height,
        fps=config.fps,
        quality=quality,
        audio_path=args.audio,
        duration=args.duration,
        total_frames=total_frames,
    )

    elapsed = time.time() - t0
    file_size_mb = args.output.stat().st_size / 1024 / 1024
    print(f"\nDone! {file_size_mb:.1f} MB")
    print(f"  Render+encode took {elapsed:.1f}s ({total_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {args.output}")
    return 0


def _cmd_still(args, config: AuroraConfig, bands) -> int:
    renderer = AuroraRenderer(config, bands)
    frame = next(renderer.render_frames(1, start_frame=args.frame), None)
    if frame is None:
        print("Reduced motion preferred; nothing rendered.")
        return 0
    save_still(frame, args.output)
    print(f"Saved frame {args.frame} to {args.output}")
    return 0


def _cmd_preview(args, config: AuroraConfig, bands) -> int:
    from aurorascope.preview import run_preview

    frames = run_preview(config, bands)
    print(f"Preview closed after {frames} frames")
    return 0


COMMANDS = {
    "render": _cmd_render,
    "still": _cmd_still,
    "preview": _cmd_preview,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _make_config(args)
        bands = load_band_table(args.bands) if args.bands else None
        if config.reduced_motion and args.command != "still":
            print("Reduced motion preferred; animation disabled.")
            return 0
        return COMMANDS[args.command](args, config, bands)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    sys.exit(main())
