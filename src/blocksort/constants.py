# Palette used by the level catalog. Order matters: blank boards take colors
# from the front of this list, the engine permutes them afterwards.
BLOCK_COLORS = ['red', 'blue', 'yellow', 'green', 'purple', 'orange', 'pink', 'gray']

# Layout geometry in sprite units. Blocks overlap vertically inside a line.
BLOCK_WIDTH = 1166
BLOCK_HEIGHT = 1322
BLOCK_OVERLAP = 600
LINE_PADDING_SIDE = 200
LINE_PADDING_TOP = 200
LINE_PADDING_BOTTOM = 400
LINE_WIDTH = BLOCK_WIDTH + LINE_PADDING_SIDE * 2

# Target width/height ratio for two-row boards; wider boards get no extra gap.
BOARD_TARGET_RATIO = 1.0
# Boards with fewer upper lines than this always get a minimum gap.
NARROW_BOARD_LINES = 4
NARROW_BOARD_MIN_GAP_PCT = 0.33
MAX_LINE_GAP_PCT = 0.5

# Generation defaults (per-level values in factories/levels.py override these).
DEFAULT_MAX_MOVES = 20
DEFAULT_TRIALS = 20

# Move weighting switches strategy below this completion rate.
LOW_COMPLETION_THRESHOLD = 0.3
LOW_COMPLETION_WEIGHT_CEILING = 20
