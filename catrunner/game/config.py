# --- Display ---
WIDTH = 800
HEIGHT = 300
FPS = 60

# --- Clock ---
FRAME_MS = 16.666           # one ideal 60 Hz frame = 1.0 step unit
MAX_FRAME_MS = 32.0         # clamp stalls (tab resume, window drag) to ~2 frames
FPS_SMOOTHING = 0.9         # weight of the previous smoothed fps
FPS_LOW = 45.0              # below -> "low" quality tier
FPS_MED = 55.0              # below -> "med" quality tier

# --- World / Physics (per frame, not scaled by dt) ---
GROUND_Y = HEIGHT - 48      # ground baseline (feet line)
GRAVITY = 0.7
JUMP_FORCE = 13.5
OFFSCREEN_X = -20           # entities whose right edge passes this are dropped

# --- Player ---
PLAYER_X = 80               # player's fixed x (world scrolls left)
PLAYER_SPRITE = 16          # pixel-art cat is 16x16
PLAYER_SCALE = 3
PLAYER_W = PLAYER_SPRITE * PLAYER_SCALE
PLAYER_H = PLAYER_SPRITE * PLAYER_SCALE
TAIL_WIGGLE_FRAMES = 6      # frames per tail pose of the pixel cat

# --- Difficulty ---
START_SPEED = 3.2
BASE_SPEED = 3.0
MAX_SPEED = 10.0
SPEED_STEP_EVERY = 100      # score points per speed increment
SPEED_STEP_INC = 0.35
SPEED_EASING = 0.08
LEVEL_EVERY = 300
MAX_LEVEL = 99
BIRD_MIN_SCORE = 200
BIRD_BASE_PROB = 0.05
BIRD_PROB_PER_LEVEL = 0.03
BIRD_MAX_PROB = 0.5

# --- Obstacle generation ---
SPAWN_X = WIDTH + 30
CAP_RETRY_DELAY = 0.3       # step units to wait when the obstacle cap is full
BIRD_W = 34
BIRD_H = 22
BIRD_MIN_LIFT = 60          # bird bottom at least this far above ground
BIRD_SPREAD = 80
BIRD_SPREAD_MIN = 40
CACTUS_CHANCE = 0.5         # cumulative thresholds: cactus / rock / cluster
ROCK_CHANCE = 0.75
CLUSTER_MIN_BLOCK = 28

# --- Fair gap sizing ---
REACT_MS_MAX = 520
REACT_MS_MIN = 340
REACT_MS_PER_LEVEL = 6
REACT_FACTOR = 0.35
JUMP_PREP_PX = 120
JUMP_PREP_PER_LEVEL = 8
JUMP_PREP_MAX_EXTRA = 200
BASE_SAFE_PX = 160
WIDTH_CLEARANCE = 1.6
MIN_SAFE_GAP = 220
MIN_SPAWN_SPEED = 3.0

# --- Clouds ---
CLOUD_SPAWN_X = WIDTH + 20
CLOUD_JITTER = 1.2

# --- Per quality tier limits ---
OBSTACLE_CAP = {"high": 8, "med": 7, "low": 6}
CLOUD_CAP = {"high": 12, "med": 8, "low": 5}
CLOUD_BASE_INTERVAL = {"high": 1.4, "med": 1.6, "low": 2.0}

# --- Persistence ---
HIGH_SCORE_KEY = "runnerHighScore"
HIGH_SCORE_FILE = "~/.catrunner/highscore.json"
SPRITE_FILE = "cat.png"

# --- Colors (RGB) ---
COLOR_SKY = (186, 230, 253)
COLOR_INK = (15, 23, 42)
COLOR_STRIPE = (226, 232, 240)
COLOR_CACTUS = (34, 197, 94)
COLOR_CLUSTER = (22, 163, 74)
COLOR_ROCK = (100, 116, 139)
COLOR_BIRD = (245, 158, 11)
COLOR_WING = (251, 191, 36)
COLOR_FG = (255, 255, 255)
