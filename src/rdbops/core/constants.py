"""
Application constants and enumerations.
Central location for the analysis thresholds and sample sizes.
"""

from typing import Final

# Byte units
KIB: Final[int] = 1024
MIB: Final[int] = 1024 * KIB
GIB: Final[int] = 1024 * MIB

# Sample sizes taken from the ranked largest-entries list
LARGE_KEY_SAMPLE_SIZE: Final[int] = 100
ENTRY_SAMPLE_SIZE: Final[int] = 500
TTL_SAMPLE_SIZE: Final[int] = 100

# Prefix groups considered by the hotspot and pattern passes
HOTSPOT_PREFIX_LIMIT: Final[int] = 20
PATTERN_PREFIX_LIMIT: Final[int] = 50
TOP_SLOTS_LIMIT: Final[int] = 10

# Large-key detection
LARGE_KEY_WARNING_BYTES: Final[int] = 10 * MIB
LARGE_KEY_CRITICAL_BYTES: Final[int] = 50 * MIB
KEY_DISPLAY_MAX_LENGTH: Final[int] = 50
KEY_DISPLAY_TRUNCATED_LENGTH: Final[int] = 47

# Memory hotspots (percent of total bytes)
PREFIX_HOTSPOT_PERCENT: Final[float] = 30.0
TYPE_DOMINANCE_PERCENT: Final[float] = 50.0

# Key explosion
HIGH_KEY_COUNT: Final[int] = 10_000_000
TINY_KEY_BYTES: Final[int] = 100
TINY_KEY_MIN_COUNT: Final[int] = 100
TINY_KEY_MIN_RATIO: Final[float] = 0.3

# Collections
HUGE_COLLECTION_ELEMENTS: Final[int] = 1_000_000

# Type efficiency
LOW_EFFICIENCY_SCORE: Final[float] = 50.0
STRING_EFFICIENCY_RECOMMENDATION: Final[float] = 60.0

# Cluster balance
SLOT_IMBALANCE_PERCENT: Final[float] = 50.0
CLUSTER_SLOT_COUNT: Final[int] = 16384

# Health score deductions
CRITICAL_DEDUCTION: Final[int] = 15
WARNING_DEDUCTION: Final[int] = 8
INFO_DEDUCTION: Final[int] = 3
KEY_COUNT_SEVERE: Final[int] = 100_000_000
KEY_COUNT_ELEVATED: Final[int] = 50_000_000
AVG_KEY_SIZE_SEVERE: Final[float] = 1 * MIB
AVG_KEY_SIZE_ELEVATED: Final[float] = 100 * KIB
SEVERE_DEDUCTION: Final[int] = 10
ELEVATED_DEDUCTION: Final[int] = 5

# Health labels (lower bound of each band)
HEALTH_EXCELLENT: Final[int] = 90
HEALTH_GOOD: Final[int] = 75
HEALTH_FAIR: Final[int] = 60
HEALTH_POOR: Final[int] = 40

# Recommendations
EVICTION_POLICY_BYTES: Final[int] = 10 * GIB
TTL_RECOMMENDATION_MIN_ENTRIES: Final[int] = 50

# API Constants
API_VERSION: Final[str] = "v1"
API_PREFIX: Final[str] = f"/api/{API_VERSION}"

# Monitoring Constants
METRICS_PREFIX: Final[str] = "rdbops"
