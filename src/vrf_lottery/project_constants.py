"""
Public rules of the draw.

These values define how long a round lasts and what a ticket costs.
Changing them changes the game and MUST be publicly announced.
"""

# Native amounts are integers with 18 decimals (wei-like)
NATIVE_DECIMALS = 18

# One ticket: 0.01 of the native unit
DEFAULT_ENTRY_FEE = 10 ** (NATIVE_DECIMALS - 2)

# Entry window length (7 days)
ROUND_DURATION_S = 7 * 24 * 60 * 60

# Oracle key selector used when none is configured
DEFAULT_KEY_HASH = "0x787d74caea10b2b357790d5b5247c2f63d1d91572a9846f780606e4d953677ae"

# Public randomness beacon (drand HTTP relay)
DEFAULT_BEACON_URL = "https://api.drand.sh"

# Subscription billing period (30 days)
SUBSCRIPTION_PERIOD_S = 30 * 24 * 60 * 60

# Addresses are base58-encoded 32-byte public keys
ADDRESS_BYTES = 32
