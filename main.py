#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path

from fretgrid.logging_config import setup_logging
from fretgrid.pipeline import FretboardPipeline
from fretgrid.video.frame_extractor import FrameExtractor
from fretgrid.video.frame_worker import FrameWorker


def main():
    parser = argparse.ArgumentParser(description='Fretboard landmark grid from a guitar video')
    parser.add_argument('input', type=str, help='Input video file')
    parser.add_argument('-o', '--output-dir', type=str, help='Directory for annotated frames (default: none)')
    parser.add_argument('--fps', type=float, default=10, help='Frames per second to process')
    parser.add_argument('--max-frames', type=int, default=None, help='Stop after this many frames')
    parser.add_argument('--rotate', type=int, choices=[0, 90, 180, 270], default=0,
                        help='Clockwise rotation applied to every frame')
    parser.add_argument('--mirror', action='store_true', help='Mirror frames (front camera)')
    parser.add_argument('--realtime', action='store_true',
                        help='Process on a worker thread, dropping frames that arrive while busy')
    parser.add_argument('--hand-model', type=str, help='hand_landmarker.task model for fingertip tracking')
    parser.add_argument('--log-level', type=str, default=None, help='Log level (DEBUG, INFO, ...)')
    parser.add_argument('--log-file', type=str, default=None, help='Also write logs to this file')

    args = parser.parse_args()

    setup_logging(level=args.log_level, log_file=args.log_file)

    hand_tracker = None
    if args.hand_model:
        from fretgrid.video.hand_tracker import HandTracker
        hand_tracker = HandTracker(args.hand_model)

    extractor = FrameExtractor(target_fps=args.fps, rotation=args.rotate, mirror=args.mirror)
    pipeline = FretboardPipeline(fingertip_provider=hand_tracker)
    detector = pipeline.detector

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir:
        output_dir.mkdir(exist_ok=True, parents=True)

    stats = {'frames': 0, 'detected': 0, 'total_ms': 0.0}

    def record(result):
        stats['frames'] += 1
        stats['total_ms'] += result.processing_time_ms
        if result.detected:
            stats['detected'] += 1

    worker = None
    if args.realtime:
        worker = FrameWorker(pipeline, on_result=record)
        worker.start()

    print(f"Processing: {args.input}")
    try:
        for frame_data in extractor.iter_frames(args.input, max_frames=args.max_frames):
            frame = frame_data['frame']

            if worker is not None:
                worker.submit(frame)
                continue

            result = pipeline.process_frame(frame)
            record(result)

            if output_dir:
                annotated = detector.draw_strings(frame, list(result.strings))
                annotated = detector.draw_frets(annotated, list(result.frets))
                annotated = detector.draw_grid(annotated, result.grid)
                annotated = detector.draw_fingertips(annotated, result.fingertips)

                output_path = output_dir / f"frame_{frame_data['frame_number']:05d}_t{frame_data['timestamp']:.2f}s.jpg"
                extractor.save_frame(annotated, output_path)
    finally:
        if worker is not None:
            worker.stop()
        if hand_tracker is not None:
            hand_tracker.close()

    if worker is not None:
        print(f"Frames dropped while busy: {worker.frames_dropped}")

    if stats['frames'] == 0:
        print("No frames processed")
        sys.exit(1)

    print(f"Frames processed: {stats['frames']}")
    print(f"Fretboard detected: {stats['detected']} ({stats['detected'] / stats['frames'] * 100:.1f}%)")
    print(f"Average processing time: {stats['total_ms'] / stats['frames']:.1f} ms")

    print("Final grid (string x fret, normalized):")
    for i, row in enumerate(pipeline.current):
        cells = ["   --------   " if cell is None else f"({cell.x:.3f}, {cell.y:.3f})" for cell in row]
        print(f"  S{i + 1}: " + " ".join(cells))

    if output_dir:
        print(f"Annotated frames saved to: {output_dir}")


if __name__ == "__main__":
    main()
