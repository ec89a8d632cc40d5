"""Enum definitions for utilities, rent purposes and invoice lines."""

from enum import Enum


class UtilityCategory(str, Enum):
    """Metered utility with its own register, price and photo."""

    COLD_WATER = "cold_water"
    HOT_WATER = "hot_water"
    GAS = "gas"
    ENERGY = "energy"
    HEAT = "heat"


# Categories every property is billed for, regardless of its utility flags
ALWAYS_APPLICABLE = frozenset({UtilityCategory.COLD_WATER, UtilityCategory.ENERGY})

# Categories that carry a fixed monthly subscription fee
SUBSCRIBED = (UtilityCategory.GAS, UtilityCategory.ENERGY, UtilityCategory.HEAT)


class RentPurpose(str, Enum):
    """What the tenant rents the property for."""

    LIVE = "live"
    WORK = "work"
    HOTEL = "hotel"


class ChargeKind(str, Enum):
    """Kind of a single invoice line."""

    METERED = "metered"
    SUBSCRIPTION = "subscription"
    LANDLORD_RENT = "landlord_rent"
    HOUSING_RENT = "housing_rent"


class RentStatus(str, Enum):
    """Lifecycle filter for rent listings."""

    ONGOING = "ongoing"
    FINISHED = "finished"
