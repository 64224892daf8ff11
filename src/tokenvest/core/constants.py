"""
tokenvest Constants

Fixed protocol values. Changing any of the vesting constants changes the
release schedule of every existing VestingSchedule.
"""

from typing import Final

# =============================================================================
# TIME CONSTANTS (in seconds)
# =============================================================================

SECONDS_PER_DAY: Final[int] = 86400  # 60 * 60 * 24

# =============================================================================
# VESTING CONSTANTS
# =============================================================================

# A vesting month is always 30 days
MONTH: Final[int] = 30 * SECONDS_PER_DAY  # 2592000
QUARTER: Final[int] = 3 * MONTH  # 7776000
TOTAL_QUARTERS: Final[int] = 4  # 12 month horizon
VESTING_DURATION: Final[int] = QUARTER * TOTAL_QUARTERS

# =============================================================================
# ADDRESS CONSTANTS
# =============================================================================

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40
LOG_ADDRESS_PREFIX_LENGTH: Final[int] = 10

# =============================================================================
# GOVERNANCE CONSTANTS
# =============================================================================

DEFAULT_MAX_BALLOT_OPTIONS: Final[int] = 16
