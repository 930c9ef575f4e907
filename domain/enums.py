"""Domain Enums"""
from enum import Enum


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SeasonType(str, Enum):
    HIGH = "high"
    MID = "mid"
    LOW = "low"


class ReasonCode(str, Enum):
    """Why a suggested price differs from the base price"""
    BASE = "base"
    HIGH_SEASON = "highSeason"
    MID_SEASON = "midSeason"
    LOW_SEASON = "lowSeason"
    HIGH_OCCUPANCY = "highOccupancy"
    LOW_OCCUPANCY = "lowOccupancy"
    WEEKEND = "weekend"


SEASON_REASONS = {
    SeasonType.HIGH: ReasonCode.HIGH_SEASON,
    SeasonType.MID: ReasonCode.MID_SEASON,
    SeasonType.LOW: ReasonCode.LOW_SEASON,
}
