"""
Global configuration and constants for the Wind Radar Scan Analyzer.
"""

# --- Input Logs ---
ANGLE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"    # Angle log: "2025-11-18 13:01:22"
WIND_TIME_FORMAT = "%Y%m%d %H:%M:%S"       # Wind log:  "20251118 13:01:15"
FIELD_SEPARATOR_PATTERN = r"[,\s]+"        # Runs of comma / space / tab
GATE_HEADER_PATTERN = r"\d+m"              # Wind-log header token naming a range gate
ANGLE_HEADER_TOKENS = ("时间", "方位", "Time", "Azimuth")
WIND_HEADER_TOKENS = ("时间", "Time")
MIN_ANGLE_FIELDS = 4                       # date, time, azimuth, elevation
MIN_WIND_FIELDS = 3                        # date, time, at least one value
WIND_LEADING_COLUMNS = 2                   # Date + time before the first gate pair
LEGACY_ENCODING = "gb18030"                # Fallback when a log is not valid UTF-8

# --- Time Alignment ---
ALIGNMENT_TOLERANCE_S = 3.0    # Max |angle time - wind time| for a match (seconds)

# --- Signal Processing ---
DEFAULT_SNR_THRESHOLD_DB = -20.0   # Gates below this SNR are marked invalid
SNR_THRESHOLD_RANGE_DB = (-50.0, 50.0)
DEFAULT_WINDOW_SIZE = 5            # Sliding TI window, in gates
MIN_WINDOW_SIZE = 2
MAX_WINDOW_SIZE = 20
MIN_MEAN_SPEED = 0.01              # |mean| at or below this gives TI = 0 (m/s)

# --- PPI Projection ---
ORIENTATION_OFFSET_DEG = 15.0  # Radar azimuth 0 is drawn 15 deg clockwise of screen east
REFERENCE_RANGE_M = 4000.0     # Range that fills 1/RADIUS_DIVISOR of the short view side
RADIUS_DIVISOR = 2.2
DEFAULT_SCALE = 0.8
MIN_SCALE = 0.1
MAX_SCALE = 30.0
ZOOM_IN_FACTOR = 1.15
ZOOM_OUT_FACTOR = 0.85
PAN_STEP_PX = 60.0             # Offset applied by one pan-button press
DEFAULT_VIEW_SIZE_PX = (900, 700)

# --- Visible Range ---
DEFAULT_MIN_DISTANCE_M = 0.0
DEFAULT_MAX_DISTANCE_M = 4000.0
DISTANCE_SLIDER_MAX_M = 10000
RANGE_RING_SPACING_M = 1000
RANGE_RING_MAX_M = 4000

# --- Ray Picking ---
PICK_MAX_AZIMUTH_DIFF_DEG = 2.0    # Pointer must be within 2 deg of a ray
PICK_MAX_DISTANCE_M = 4000.0       # ... and no farther than this from the radar
PICK_RANGE_TOLERANCE_M = 30.0      # Gate must be within 30 m of the pointer range

# --- Rendering ---
BEAM_WIDTH_DEG = 1.2               # Angular width of each drawn ray (slightly wide to hide seams)
SPEED_COLOR_RANGE = (-10.0, 10.0)  # m/s, blue (low) to red (high)
TURBULENCE_COLOR_RANGE = (0.0, 0.5)
# HSV hue sweeps: 240 -> 0 (blue to red) for speed, 120 -> 0 (green to red) for TI
SPEED_COLORSCALE = [
    [0.0, "rgb(0,0,255)"],
    [0.25, "rgb(0,255,255)"],
    [0.5, "rgb(0,255,0)"],
    [0.75, "rgb(255,255,0)"],
    [1.0, "rgb(255,0,0)"],
]
TURBULENCE_COLORSCALE = [
    [0.0, "rgb(0,255,0)"],
    [0.5, "rgb(255,255,0)"],
    [1.0, "rgb(255,0,0)"],
]
INVALID_GATE_COLOR = "rgb(240,240,240)"
COLOR_LEVELS = 32                  # Number of discrete fill colors per PPI
PLAY_STEP_RAYS = 2                 # Rays added per replay step

# --- Export ---
EXPORT_HEADER = ("Time", "Azimuth", "Elevation", "Distance", "Speed", "SNR", "TI")
EXPORT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
EXPORT_ENCODING = "utf-8-sig"      # UTF-8 with byte-order mark

# --- Logging ---
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
