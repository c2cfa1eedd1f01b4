# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Models/Categories.py
#  Purpose: Define incident categories and the category -> severity lookup.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping

from Core.Errors import Invalid_Configuration, Invalid_Incident


class Incident_Category(str, Enum):
    MURDER            = "murder"
    ROBBERY           = "robbery"
    TRAFFIC_COLLISION = "traffic_collision"
    WELLNESS_CHECK    = "wellness_check"


@dataclass(frozen=True)
class Severity_Table:
    """
    Closed lookup: category -> severity rank (0 is served first) and display label.
    """

    ranks_dict_category_i32  : Mapping[Incident_Category, int]
    labels_dict_category_str : Mapping[Incident_Category, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.ranks_dict_category_i32:
            raise Invalid_Configuration("Severity table must rank at least one category.")
        for category_, rank_i32 in self.ranks_dict_category_i32.items():
            if int(rank_i32) < 0:
                raise Invalid_Configuration(f"Severity rank for {category_} must be >= 0.")

    def Knows(self, category: Incident_Category) -> bool:
        return category in self.ranks_dict_category_i32

    def Rank(self, category: Incident_Category) -> int:
        if category not in self.ranks_dict_category_i32:
            raise Invalid_Incident(f"Category {category!r} is not in the severity table.")
        return int(self.ranks_dict_category_i32[category])

    def Label(self, category: Incident_Category) -> str:
        if category not in self.ranks_dict_category_i32:
            raise Invalid_Incident(f"Category {category!r} is not in the severity table.")
        return self.labels_dict_category_str.get(category, str(category.value).replace("_", " "))

    def Categories(self) -> List[Incident_Category]:
        return sorted(self.ranks_dict_category_i32, key=lambda c: (self.ranks_dict_category_i32[c], c.value))


DEFAULT_RANKS: Dict[Incident_Category, int] = {
    Incident_Category.MURDER            : 0,
    Incident_Category.ROBBERY           : 1,
    Incident_Category.TRAFFIC_COLLISION : 2,
    Incident_Category.WELLNESS_CHECK    : 3,
}

DEFAULT_LABELS: Dict[Incident_Category, str] = {
    Incident_Category.MURDER            : "murder",
    Incident_Category.ROBBERY           : "robbery",
    Incident_Category.TRAFFIC_COLLISION : "traffic collision",
    Incident_Category.WELLNESS_CHECK    : "wellness check",
}

DEFAULT_SEVERITY_TABLE = Severity_Table(
    ranks_dict_category_i32=DEFAULT_RANKS,
    labels_dict_category_str=DEFAULT_LABELS,
)
