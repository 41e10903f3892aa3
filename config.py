"""Central configuration for the 8-vs-0 digit recognizer.

All tunable parameters are defined here with descriptive names.
The canvas size is load-bearing: it must match the input length of the
trained model, so changing it requires a different model.
"""

from pathlib import Path

# =============================================================================
# CANONICAL CANVAS
# =============================================================================

# Size of the monochrome canvas fed to the classifier (32 * 32 = 1024 inputs)
CANVAS_WIDTH = 32
CANVAS_HEIGHT = 32

# Number of values in the model input vector
MODEL_INPUT_LENGTH = CANVAS_WIDTH * CANVAS_HEIGHT

# =============================================================================
# IMAGE PREPROCESSING
# =============================================================================

# Smooth (area/bilinear) resampling when shrinking the photo to the canvas
ANTIALIASING = True

# Recenter the ink on the canvas (x by center of mass, y by bounding box)
CENTER_ENABLED = True

# Orders in which canvas pixels can be flattened into the model input.
# "row_major" reads canvas[y, x] at index y * width + x.
# "column_major" reads canvas[y, x] at index x * width + y.
# The default follows the model, see MODEL_SCAN_ORDER below.
PIXEL_SCAN_ORDERS = ("row_major", "column_major")

# Pure colors used by the binarizer, framer and centerer
BLACK = 0
WHITE = 255

# Zero-saturation color matrix weights (R, G, B)
GRAYSCALE_WEIGHTS = (0.213, 0.715, 0.072)

# =============================================================================
# SAMPLE GALLERY
# =============================================================================

# Longer side of sample thumbnails in pixels
THUMBNAIL_MAX_LENGTH = 64

# Maximum number of samples offered at once
MAX_SAMPLES = 8

# Sample images are read from this extension only
SAMPLE_EXTENSION = ".png"

# =============================================================================
# CLASSIFIER
# =============================================================================

# Oracle backend selection (swappable via config)
ORACLE_BACKEND = "tflite"

MODELS_DIR = Path(__file__).parent / "models"
MODEL_FILENAME = "2020-Mar-31_20-03-28_LATENCY_antialiasing_B-W.tflite"
MODEL_PATH = MODELS_DIR / MODEL_FILENAME

# Pixel order MODEL_FILENAME was trained with; a model trained on row-major
# input needs "row_major" here
MODEL_SCAN_ORDER = "column_major"
PIXEL_SCAN_ORDER = MODEL_SCAN_ORDER

# Probability above which the digit is an eight; 0.5 itself resolves to zero
DECISION_BOUNDARY = 0.5

# Symbols for the two classes of the binary model
POSITIVE_SYMBOL = "8"
NEGATIVE_SYMBOL = "0"

# Number of decimals shown for confidence values
CONFIDENCE_DECIMALS = 2
