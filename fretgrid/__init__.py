"""
Fretboard landmark grid from guitar video

Strings and frets are found in each frame and combined into a 6x5 grid of
normalized string/fret positions, smoothed over recent frames.
"""

from .pipeline import FretboardPipeline, GuitarResult

__all__ = [
    'FretboardPipeline',
    'GuitarResult'
]
