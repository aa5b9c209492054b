"""Constants for the ambientble fixture protocol and runtime defaults."""

# Command frame layout
FRAME_LENGTH = 20
BODY_LENGTH = FRAME_LENGTH - 1

# Opcodes
OPCODE_COLOR = 0x33
OPCODE_KEEP_ALIVE = 0xAA

# Sub-opcodes
SUB_SET_RGB = (0x05, 0x02)
SUB_POWER_OFF = (0x01, 0x00)
SUB_KEEP_ALIVE = (0x01,)

# GATT characteristic accepting command frames
CONTROL_CHARACTERISTIC_UUID = "00010203-0405-0607-0809-0a0b0c0d2b11"

# Name substrings matched against advertised local names
DEFAULT_MATCH_NAMES = ("48EA", "6072", "6146")

# Discovery
DEFAULT_SETTLE_TIME = 1.0
DEFAULT_CONNECT_TIMEOUT = 10.0

# Color pipeline
DEFAULT_SATURATION_GAIN = 1.5
DEFAULT_SATURATION_OFFSET = 0.0
DEFAULT_SAMPLE_STRIDE = 3
WHITE_CUTOFF = 250
MIN_PALETTE_SIZE = 2

# Transitions
DEFAULT_SENSITIVITY = 3
# Smaller bands stall one step short of the target under integer midpoints
MIN_SENSITIVITY = 2
DEFAULT_KEEP_ALIVE_INTERVAL = 10

# Camera
DEFAULT_CAMERA_INDEX = 0
DEFAULT_FRAME_WIDTH = 640
DEFAULT_FRAME_HEIGHT = 480
DEFAULT_FRAME_FPS = 30

# Control loop
DEFAULT_BLANK_THRESHOLD = 4.0
DEFAULT_FRAME_DELAY = 0.02
DEFAULT_TEST_PATTERN_DELAY = 0.5

BLACK = (0, 0, 0)
TEST_PATTERN = ((255, 0, 0), (0, 255, 0), (0, 0, 255), BLACK)

# Environment variable prefix for configuration
ENV_PREFIX = "AMBIENTBLE_"
