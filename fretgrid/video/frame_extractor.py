"""
Read frames from video files as RGBA images
"""
import cv2
import logging
import numpy as np
from pathlib import Path
from typing import Dict, Iterator

logger = logging.getLogger(__name__)

_ROTATIONS = {
    0: None,
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


class FrameExtractor:
    """Extract and orient video frames for the fretboard pipeline"""

    def __init__(self, target_fps=10, rotation=0, mirror=False):
        """
        Args:
            target_fps: Target frame rate for extraction (lower = faster processing)
            rotation: Clockwise rotation in degrees (0, 90, 180 or 270)
            mirror: Flip frames horizontally, as a front camera shows them
        """
        if rotation not in _ROTATIONS:
            raise ValueError(f"Rotation must be one of {sorted(_ROTATIONS)}, got {rotation}")

        self.target_fps = target_fps
        self.rotation = rotation
        self.mirror = mirror

    def orient(self, frame: np.ndarray) -> np.ndarray:
        """Apply the configured rotation and mirroring"""
        rotate_code = _ROTATIONS[self.rotation]
        if rotate_code is not None:
            frame = cv2.rotate(frame, rotate_code)
        if self.mirror:
            frame = cv2.flip(frame, 1)
        return frame

    def iter_frames(self, video_path: Path, max_frames=None) -> Iterator[Dict]:
        """
        Yield frames from a video one at a time

        Args:
            video_path: Path to video file
            max_frames: Maximum number of frames to extract (None = all)

        Yields:
            Dicts with 'frame' (RGBA), 'timestamp' and 'frame_number'
        """
        video_path = Path(video_path)

        if not video_path.exists():
            raise FileNotFoundError(f"Video file not found: {video_path}")

        cap = cv2.VideoCapture(str(video_path))

        if not cap.isOpened():
            raise RuntimeError(f"Failed to open video: {video_path}")

        try:
            original_fps = cap.get(cv2.CAP_PROP_FPS)
            total_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))

            # Calculate frame skip interval
            frame_interval = max(1, int(original_fps / self.target_fps)) if original_fps > 0 else 1

            logger.info(
                f"Video info: {original_fps:.2f} fps, {total_frames} frames, "
                f"extracting every {frame_interval} frame(s)"
            )

            frame_count = 0
            extracted_count = 0

            while True:
                ret, frame = cap.read()

                if not ret:
                    break

                if frame_count % frame_interval == 0:
                    timestamp = frame_count / original_fps if original_fps > 0 else 0.0

                    # OpenCV decodes to BGR; the pipeline expects RGBA
                    frame_rgba = self.orient(cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA))

                    yield {
                        'frame': frame_rgba,
                        'timestamp': timestamp,
                        'frame_number': frame_count
                    }

                    extracted_count += 1

                    if max_frames and extracted_count >= max_frames:
                        break

                frame_count += 1
        finally:
            cap.release()

    def save_frame(self, frame: np.ndarray, output_path: Path):
        """Save a single RGBA or RGB frame as image"""
        if frame.ndim == 3 and frame.shape[2] == 4:
            frame_bgr = cv2.cvtColor(frame, cv2.COLOR_RGBA2BGR)
        else:
            frame_bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
        cv2.imwrite(str(output_path), frame_bgr)
