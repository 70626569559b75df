"""Protocol-wide limits and defaults for the simulated bus."""

# Addresses
MASTER_ADDR = 0x00
MAX_ADDR_VALUE = 0x3F

# Memory and framing
SLAVE_MEM_SIZE = 4096
MAX_DATA_LEN = 255
CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF

# Bus
DEFAULT_NOISE_PROB = 0.01
MAX_DEVICES_LIMIT = 63

# Retries
DEFAULT_MAX_RETRIES = 3