# Guitar geometry
NUM_STRINGS = 6
GRID_COLUMNS = 5  # open/nut column + 4 fret midpoints
NUM_GRID_FRETS = 6  # fret lines needed to build GRID_COLUMNS

# Equal temperament: each fret gap is 2^(-1/12) of the one before it
FRET_RATIO = 0.94387

# Phase 1: Frame preprocessing
BLUR_KERNEL_SIZE = (5, 5)
BLUR_SIGMA = 1.6
CLAHE_CLIP_LIMIT = 0.75
CLAHE_TILE_GRID = (16, 16)
CANNY_LOW = 50
CANNY_HIGH = 100

# Region of interest: the top 3/7 of the frame is background above the neck
TOP_MASK_NUMERATOR = 3
TOP_MASK_DENOMINATOR = 7
LEFT_MASK_WIDTH = 3
RIGHT_MASK_WIDTH = 2

# Morphology kernels are (width, height)
HORIZONTAL_ERODE_KERNEL = (2, 1)
HORIZONTAL_CLOSE_KERNEL = (1, 4)
VERTICAL_ERODE_KERNEL = (1, 2)
VERTICAL_CLOSE_KERNEL = (8, 5)

# Phase 2: Line extraction (probabilistic Hough on the string map)
HOUGH_RHO = 1
HOUGH_THRESHOLD = 100
HOUGH_MIN_LINE_LENGTH = 75
HOUGH_MAX_LINE_GAP = 20

# Phase 3/4: Candidate selection and merging
MAX_STRING_CANDIDATES = 6
MAX_FRET_CANDIDATES = 50
STRING_MERGE_DISTANCE = 10  # pixels between segment end and next start
FRET_MERGE_DISTANCE = 8
INTERCEPT_BUCKET = 10  # strings sharing a rounded intercept are duplicates
MIN_STRINGS_FOR_EXTRAPOLATION = 3

# Phase 5: Fret selection and extrapolation
FRET_REGRESSION_TOLERANCE = 10.0
RIDGE_MERGE_DISTANCE = 10
ANCHOR_FRETS = 6  # rightmost frets trusted as anchors
MIN_ANCHOR_FRETS = 3
MIN_ANCHOR_GAP = 20  # narrower rightmost gap means the anchors are noise
FRET_SPACING_TOLERANCE = 10
MAX_FRET_CORRECTIONS = 20

# Phase 6: Temporal smoothing
HISTORY_LENGTH = 10
