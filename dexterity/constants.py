"""Protocol constants for the Dexterity router.

Centralizes error codes, opcode byte values and cache defaults.
"""

# Chain-native asset marker
STX_TOKEN_ID = ".stx"

# Error codes (business logic 1000-1999, system 2000-2999)
ERROR_INVALID_PATH = 1004
ERROR_QUOTE_FAILED = 1005
ERROR_TRANSACTION_FAILED = 1006
ERROR_INVALID_OPCODE = 1007
ERROR_NO_VALID_ROUTE = 1008
ERROR_INVALID_CONFIG = 1009
ERROR_NETWORK = 2002

# Opcode buffer length in bytes
OPCODE_SIZE = 16

# Fees are expressed in parts per million (1_000_000 = 100%)
FEE_DENOMINATOR = 1_000_000

# Hop budget bounds
DEFAULT_MAX_HOPS = 3
MAX_HOPS_LIMIT = 9

# Cache defaults (seconds)
DEFAULT_CACHE_TTL = 5 * 60
QUOTE_CACHE_TTL = 30
CACHE_MAX_ITEMS = 1000

# Router contract used for multi-hop swaps (mainnet)
DEFAULT_ROUTER_CONTRACT = "SP2ZNGJ85ENDY6QRHQ5P2D4FXKGZWCKTB2T0Z55KS.multihop"

# Hiro mainnet API
DEFAULT_API_URL = "https://api.hiro.so"
