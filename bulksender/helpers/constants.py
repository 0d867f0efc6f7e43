"""Common configuration constants used across the application."""

# Batch Size Constants
DEFAULT_BATCH_SIZE = 200
"""Default number of recipients per bulk transfer transaction"""

BALANCE_READ_BATCH_SIZE = 50
"""Number of balanceOf reads issued concurrently by the snapshot scripts"""

# Gas Constants
GAS_BUFFER_PERCENT = 10
"""Safety margin added on top of a successful gas estimate"""

# Sampling Verification
SAMPLE_RATIO_DENOMINATOR = 10
"""Sample one in ten recipients of every batch (rounded up)"""

MIN_SAMPLES_PER_BATCH = 1
"""Lower bound on sampled recipients per batch"""

MAX_SAMPLES_PER_BATCH = 10
"""Upper bound on sampled recipients per batch"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

# Confirmation Constants
CONFIRMATION_TIMEOUT = 300.0
"""Maximum seconds to wait for a transaction receipt"""

RECEIPT_POLL_INTERVAL = 2.0
"""Seconds between eth_getTransactionReceipt polls"""

# Retry Configuration
MAX_RETRIES = 5
"""Default maximum number of retry attempts for read-only calls"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 60.0
"""Maximum delay between retries in seconds"""

# HTTP Connection Pooling
MAX_KEEPALIVE_CONNECTIONS = 10
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 50
"""Maximum total number of connections"""

# Reporting
REPORT_MISMATCH_LIMIT = 20
"""Mismatches printed in console reports"""

REPORT_MATCH_LIMIT = 10
"""Matching rows printed in console reports"""

PREVIEW_ENTRY_COUNT = 3
"""Recipient rows echoed after loading a transfer list"""

# Token Defaults
DEFAULT_TOKEN_DECIMALS = 18
"""Decimals assumed when the token does not expose decimals()"""

DEFAULT_TOKEN_SYMBOL = "TOKEN"
"""Symbol assumed when the token does not expose symbol()"""

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
"""The zero address, rejected by the contract as recipient or token"""


__all__ = [
    "BALANCE_READ_BATCH_SIZE",
    "CONFIRMATION_TIMEOUT",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_TOKEN_DECIMALS",
    "DEFAULT_TOKEN_SYMBOL",
    "GAS_BUFFER_PERCENT",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MAX_RETRIES",
    "MAX_SAMPLES_PER_BATCH",
    "MIN_SAMPLES_PER_BATCH",
    "PREVIEW_ENTRY_COUNT",
    "RECEIPT_POLL_INTERVAL",
    "REPORT_MATCH_LIMIT",
    "REPORT_MISMATCH_LIMIT",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
    "SAMPLE_RATIO_DENOMINATOR",
    "ZERO_ADDRESS",
]
