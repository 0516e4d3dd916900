"""
Pop It Bubble - Audio Constants and Configuration
Procedural pop sounds for the bubble grid
"""

# =============================================================================
# SYNTHESIS SETTINGS
# =============================================================================
SAMPLE_RATE = 22050           # Hz, mono
POP_DURATION = 0.13           # seconds per pop (2866 samples at 22050 Hz)
POP_VARIATIONS = 4            # Timbre presets generated at startup (0..3)

# Per-variation timbre: base value + step * variation
DECAY_RATE_BASE = 20.0
DECAY_RATE_STEP = 3.0
TONE_FREQ_BASE = 90.0         # Hz, low "thump"
TONE_FREQ_STEP = 25.0
NOISE_MIX_BASE = 0.65
NOISE_MIX_STEP = -0.05
TONE_MIX_BASE = 0.40
TONE_MIX_STEP = 0.05

# Initial click transient
CLICK_SAMPLES = 5
CLICK_LEVEL = 0.3

# 16-bit PCM
MAX_SAMPLE = 32767
MIN_SAMPLE = -32767

# =============================================================================
# CONTAINER SETTINGS
# =============================================================================
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
WAV_FORMAT_PCM = 1
WAV_HEADER_SIZE = 44
POP_FILE_TEMPLATE = "pop_{variation}.wav"

# =============================================================================
# PLAYBACK SETTINGS
# =============================================================================
MAX_STREAMS = 8
PLAY_PRIORITY = 1
PLAY_LOOP = 0                 # 0 = play once

# Random jitter applied per trigger
PITCH_MIN = 0.85
PITCH_MAX = 1.15
VOLUME_MIN = 0.8
VOLUME_MAX = 1.0

# =============================================================================
# AUDIO SETTINGS (defaults, overridden by settings.json)
# =============================================================================
AUDIO_ENABLED = True
MASTER_VOLUME = 1.0
SFX_VOLUME = 1.0
