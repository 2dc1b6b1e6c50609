"""
Embedscape Configuration
Central configuration for paths, defaults, and settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"

# Default data paths
POINTS_FILE_PATH = Path(os.getenv("EMBEDSCAPE_POINTS_FILE", DATA_DIR / "out.json"))
OWNERS_FILE_PATH = Path(os.getenv("EMBEDSCAPE_OWNERS_FILE", DATA_DIR / "owners.json"))
TEXTS_CSV_PATH = DATA_DIR / "texts.csv"

# Logging
LOG_LEVEL = os.getenv("EMBEDSCAPE_LOG_LEVEL", "INFO")

# Embedding settings
DEFAULT_EMBEDDER = "openai"
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None  # None means api.openai.com
OPENAI_MODEL = os.getenv("EMBEDSCAPE_MODEL", "text-embedding-ada-002")
OPENAI_BATCH_SIZE = 256  # Max texts per API call (actual batch size adapts to token limits)
REQUEST_WORKERS = int(os.getenv("EMBEDSCAPE_REQUEST_WORKERS", "4"))  # Background requests shared by all sessions

# Reduction settings
N_COMPONENTS_2D = 2
N_COMPONENTS_3D = 3
SUPPORTED_COMPONENTS = (N_COMPONENTS_2D, N_COMPONENTS_3D)
ZERO_VARIANCE_TOLERANCE = 1e-12  # Relative to the largest eigenvalue

# View settings
DEFAULT_DISPLAY_COUNT = 50
DEFAULT_SCALE_FACTOR = 1.0
SCALE_FACTOR_MIN = 0.1  # UI slider bounds only, the core has no upper bound
SCALE_FACTOR_MAX = 10.0
SCALE_FACTOR_STEP = 0.1

# Visualization settings
PLOT_HEIGHT = 600
PLOT_WIDTH = 800
AXIS_PADDING = 0.05  # Fraction of the data span added on each side
HOVER_RADIUS = 0.05  # 2D hit-test radius as a fraction of the larger axis span
MARKER_SIZE_2D = 10
MARKER_SIZE_3D = 6
TOOLTIP_MAX_CHARS = 200
FALLBACK_COLOR = "#94a3b8"  # Slate

# Camera settings (three.js-style y-up scene, camera starts at (0, 0, 5))
CAMERA_DISTANCE = 5.0
CAMERA_MIN_DISTANCE = 0.5
CAMERA_MAX_DISTANCE = 100.0
CAMERA_ROTATE_SPEED = 0.005  # Radians per pixel of drag
CAMERA_PAN_SPEED = 0.002  # Scene units per pixel, times distance
CAMERA_ZOOM_SPEED = 0.001  # Exponential zoom per wheel unit
CAMERA_UNITS_PER_EYE = 4.0  # Scene units per Plotly normalized eye unit
CAMERA_DRAG_STEP = 60  # Pointer pixels per sidebar nudge
CAMERA_WHEEL_STEP = 250  # Wheel units per sidebar zoom click

# Source identifiers for batches
SOURCE_INPUTS = "inputs"
SOURCE_POINTS_FILE = "points_file"
SOURCE_TEXTS_CSV = "texts_csv"

# Batch source registry
AVAILABLE_SOURCES = {
    SOURCE_INPUTS: {
        "label": "✏️ Typed texts",
        "description": "Embed texts typed into the input list",
        "data_check": lambda: True,
    },
    SOURCE_POINTS_FILE: {
        "label": "📦 Point file",
        "description": "Precomputed 3D points with owners",
        "data_check": lambda: POINTS_FILE_PATH.exists(),
    },
    SOURCE_TEXTS_CSV: {
        "label": "📄 Texts CSV",
        "description": "Embed every row of a CSV file",
        "data_check": lambda: TEXTS_CSV_PATH.exists(),
    },
}

DEFAULT_SOURCE = SOURCE_INPUTS
