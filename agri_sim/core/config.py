"""All tunable constants for the farm economy simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# STARTING CONDITIONS
# =============================================================================
STARTING_CASH: float = 10000.0
STARTING_INTEGRITY: float = 100.0
STARTING_YEAR: int = 1
INITIAL_GRID_SIZE: int = 5
DEFAULT_SEED: int = 42

# =============================================================================
# LAND & GRID
# =============================================================================
BASE_LAND_PRICE: float = 1000.0
GRID_EXPANSION_GROWTH: float = 1.5   # expansion cost grows by this per extra row
TAX_PER_TILE: float = 50.0
TILE_MAX_HEALTH: int = 100

# =============================================================================
# VALUATION
# =============================================================================
LIVESTOCK_VALUE: float = 300.0       # balance-sheet value per head
CROP_BASE_VALUE: float = 150.0       # harvest yield for crops missing from the catalog
DEFAULT_LIVESTOCK_YIELD: float = 80.0

# =============================================================================
# YEAR-END PIPELINE
# =============================================================================
INTEREST_RATE: float = 0.08
DEPRECIATION_WITH_BARN: float = 0.98
DEPRECIATION_WITHOUT_BARN: float = 0.90
INTEGRITY_PROFIT_BOOST: float = 5.0
INTEGRITY_MIN: float = 0.0
INTEGRITY_MAX: float = 100.0
DROUGHT_PENALTY: float = 0.6

# =============================================================================
# TOOLS
# =============================================================================
HAND_TOOLS_MULTIPLIER: float = 1.05
ANIMAL_PLOW_MULTIPLIER: float = 1.15   # only with livestock on the farm
TRACTOR_MULTIPLIER: float = 1.4
HARVESTER_MULTIPLIER: float = 2.0      # only with a renovated tractor
TRACTOR_FUEL_COST: float = 100.0

# =============================================================================
# INSURANCE
# =============================================================================
ONE_TIME_INSURANCE_FEE: float = 8000.0
ANNUAL_INSURANCE_FEE: float = 1000.0

# =============================================================================
# LIQUIDATION
# =============================================================================
BASE_REFUND_RATE: float = 0.70
ROAD_REFUND_RATE: float = 0.85

# =============================================================================
# MARKET
# =============================================================================
PRICE_HISTORY_LENGTH: int = 10
EVENT_PRICE_FLOOR: float = 0.1
EVENT_PRICE_CEILING: float = 10000.0

# Per-class random-walk behaviour: bias centres the uniform draw (below 0.5
# drifts upward), reversion pulls toward the base price each step.
MARKET_CLASS_DYNAMICS: dict[str, dict[str, float]] = {
    "commodity": {"bias": 0.45, "reversion": 0.02},
    "currency": {"bias": 0.50, "reversion": 0.05},
    "equity": {"bias": 0.50, "reversion": 0.01},
}

# =============================================================================
# LOGGING
# =============================================================================
DEFAULT_VERBOSITY: int = 0
