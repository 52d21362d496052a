"""Project-wide defaults and fixed constants for the noise generators."""

from noisekit.core.numeric import to_int64

MIN_DIMENSION = 2
MAX_DIMENSION = 6

# Per-call seeds for generators without an efficient set_seed shift coordinates by seed * 2**-48
SEED_SHIFT_SCALE = 2.0 ** -48

HONEY_DEFAULT_SEED = 0xD1CEDBEEF0FFA
HONEY_DEFAULT_SHARPNESS = 0.6

FOAMPLEX_DEFAULT_SEED = 1234567890
FOAMPLEX_INPUT_SCALE = 0.75
FOAMPLEX_WARP = 0.25
FOAMPLEX_SEED_OFFSETS = (
    0,
    to_int64(0x9A827999FCEF3243),
    to_int64(0x3504F333F9DE6486),
    to_int64(0xCF876CCDF6CD96C9),
    to_int64(0x6A09E667F3BCC90C),
    to_int64(0x048C6001F0ABFB4F),
    to_int64(0x9F0ED99BED9B2D92),
)
FOAMPLEX_SHARPNESS = {2: 0.35, 3: 0.45, 4: 0.55, 5: 0.65, 6: 0.75}

FLAN_DEFAULT_SEED = to_int64(0xFEEDBEEF1337CAFE)
FLAN_DEFAULT_DIMENSION = 3
FLAN_DEFAULT_SHARPNESS = 0.5
FLAN_LAYERS = 5
FLAN_ORIGIN_SHIFT = 5.0

WRAPPER_DEFAULT_SEED = 123
WRAPPER_DEFAULT_FREQUENCY = 0.03125
WRAPPER_DEFAULT_OCTAVES = 1

RADIAL_DEFAULT_DIVISIONS = 5

DEFAULT_FIELD_SIZE = 64
DEFAULT_FIELD_SCALE = 1.0
ENCODING = "utf-8"
