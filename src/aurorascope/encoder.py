"""
FFmpeg video encoder.

Pipes raw RGB frames to ffmpeg via stdin, optionally muxing an audio
track. Stills are written with Pillow.
"""

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
from PIL import Image


# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "high",
    audio_path: Optional[Path] = None,
    duration: Optional[float] = None,
) -> list:
    """Assemble the ffmpeg argument list for a raw rgb24 stdin stream."""
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])

    cmd = [
        "ffmpeg", "-y",
        "-hide_banner", "-loglevel", "error",
        # Raw video input from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
    ]
    if audio_path is not None:
        cmd += ["-i", str(audio_path)]

    cmd += [
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
    ]
    if audio_path is not None:
        cmd += ["-c:a", "aac", "-b:a", "192k", "-shortest"]
    if duration is not None:
        cmd += ["-t", str(duration)]

    cmd.append(str(output_path))
    return cmd


def encode_video(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int = 1920,
    height: int = 1080,
    fps: int = 60,
    quality: str = "high",
    audio_path: Optional[Path] = None,
    duration: Optional[float] = None,
    total_frames: Optional[int] = None,
    progress_callback: callable = None,
) -> Path:
    """
    Encode frames to MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width: Frame width.
        height: Frame height.
        fps: Frames per second.
        quality: "high", "medium", or "fast".
        audio_path: Optional audio file to mux in.
        duration: Optional output duration limit in seconds.
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_command(output_path, width, height, fps, quality, audio_path, duration)

    # stderr goes to a temp file so a chatty ffmpeg can never fill a pipe
    # and stall while we are still writing frames
    with tempfile.TemporaryFile() as err_file:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=err_file,
        )

        frame_count = 0
        finished = False
        try:
            try:
                for frame in frame_iterator:
                    proc.stdin.write(np.ascontiguousarray(frame).tobytes())
                    frame_count += 1

                    if progress_callback and total_frames:
                        progress_callback(frame_count, total_frames)

            except BrokenPipeError:
                # ffmpeg died early; its exit status and stderr explain why
                pass
            finished = True
        finally:
            if not finished:
                proc.kill()
            if proc.stdin:
                try:
                    proc.stdin.close()
                except BrokenPipeError:
                    pass
            proc.wait()
            if not finished:
                output_path.unlink(missing_ok=True)

        err_file.seek(0)
        stderr = err_file.read().decode("utf-8", errors="replace")

    if proc.returncode != 0:
        output_path.unlink(missing_ok=True)
        # Filter out common non-error ffmpeg messages
        error_lines = [
            line for line in stderr.split("\n")
            if "error" in line.lower() or "invalid" in line.lower()
        ]
        error_msg = "\n".join(error_lines[-5:]) if error_lines else stderr[-500:]
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {error_msg}"
        )

    return output_path


def save_still(frame: np.ndarray, output_path: Path) -> Path:
    """Write one (H, W, 3) uint8 frame as an image (format from suffix)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(frame).save(output_path)
    return output_path
