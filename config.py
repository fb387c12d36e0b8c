"""Central configuration for stroke-width bib number detection.

All tunable parameters are defined here with descriptive names.
These values are the defaults for PreprocessConfig and DetectionConfig and
can be overridden per run from the command line.
"""

import math

# =============================================================================
# IMAGE PREPROCESSING
# =============================================================================

# Optional width to resize images to before detection (None keeps the original size)
TARGET_WIDTH = None

# Allowed range when a target width is given
MIN_TARGET_WIDTH = 64
MAX_TARGET_WIDTH = 4096

# Canny edge detection thresholds and Sobel aperture
CANNY_THRESHOLD_LOW = 175
CANNY_THRESHOLD_HIGH = 320
CANNY_APERTURE_SIZE = 3

# Gaussian kernel applied to the [0, 1] grayscale image before the Scharr derivative
GRADIENT_GAUSSIAN_KERNEL = 5

# Median kernel applied to each gradient field after the derivative
GRADIENT_MEDIAN_KERNEL = 3

# =============================================================================
# STROKE WIDTH TRANSFORM
# =============================================================================

# Dark text on a light background (race bibs are mostly black on white)
DARK_ON_LIGHT = True

# Rays longer than this (pixels) are discarded
MAX_STROKE_LENGTH = 15.0

# Sub-pixel step used when marching a ray along the gradient
RAY_STEP = 0.05

# Adjacent pixels join the same component when larger/smaller width <= this
MAX_NEIGHBOR_WIDTH_RATIO = 3.0

# =============================================================================
# COMPONENT FILTERING
# =============================================================================

# Components taller than this are never a single character
MAX_FONT_HEIGHT = 300

# Rows at the top/bottom of the image where components are discarded
TOP_BORDER = 0
BOTTOM_BORDER = 0

# Allowed rotated bounding box aspect ratio band (1/x .. x)
MAX_ASPECT_RATIO = 2.0

# The rotated bounding box is searched in steps of pi / ROTATION_DIVISIONS
ROTATION_DIVISIONS = 36

# Optional stroke width variance check (variance > ratio * mean rejects)
FILTER_VARIANCE = False
MAX_VARIANCE_RATIO = 0.5

# Nesting filter: "contained", "container" or "off"
NESTING_FILTER = "contained"

# A component is nested noise once this many other components are involved
MAX_NESTED_COUNT = 2

# =============================================================================
# CHAINING
# =============================================================================

# Ratio bands for pairing two components
MAX_MEDIAN_RATIO = 3.0
MAX_DIMENSION_RATIO = 2.0

# Squared center distance / squared max(min dimension) must stay below this
MAX_DISTANCE_RATIO = 1.6

# Squared RGB distance between component mean colors (None disables the check)
MAX_COLOR_DISTANCE = None

# Two chains merge when their directions differ by less than this angle (radians)
MERGE_ANGLE = math.pi / 6.0

# Chains with fewer distinct components are discarded
MIN_CHAIN_LENGTH = 3

# =============================================================================
# REGION RECOGNITION
# =============================================================================

# Chains whose members are lower than this (pixels) are rejected
MIN_CHARACTER_HEIGHT = 10

# Maximum chain angle against the horizontal (degrees)
MAX_ANGLE = 45.0

# Chains narrower than image_width / ratio are rejected
MAX_IMG_WIDTH_TO_TEXT_RATIO = 100.0

# Blank border (pixels) around the cropped chain raster
RASTER_BORDER = 3

# Upscale factor applied to the chain raster before OCR
RASTER_UPSCALE = 3.0

# Erosion radius as a fraction of the upscaled raster height
RASTER_EROSION_RATIO = 0.05

# Optional character allowlist handed to the OCR engine (None = unrestricted)
OCR_ALLOWLIST = None

# Languages loaded by the EasyOCR reader
OCR_LANGUAGES = ("en",)

# =============================================================================
# BATCH PROCESSING
# =============================================================================

# File name written by the scan command for directory inputs
SCAN_RESULT_FILENAME = "out.csv"

# Field separator of ground truth CSV files
GROUND_TRUTH_DELIMITER = ";"
