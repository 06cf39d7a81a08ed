"""
Video modules

This package contains the per-frame vision components:
- frame_preprocessor: Edge, horizontal and vertical feature maps
- line_extractor: Hough and LSD line detection
- string_detector: String lines (six, extrapolated when some are missing)
- fret_detector: Fret lines corrected to the fret spacing ratio
- grid_composer: String/fret landmark grid
- temporal_stabilizer: Mean grid over recent frames
- fretboard_detector: All of the above for one frame
"""
