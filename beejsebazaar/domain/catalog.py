from typing import Dict, List


SOIL_TYPES: List[str] = [
    "Sandy",
    "Loamy",
    "Silty",
    "Clay",
    "Peaty",
    "Chalky",
    "Red Sandy",
    "Black Sandy",
    "Coarse Sand",
    "Fine Sand",
]

MONTHS: List[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WATER_SOURCES: List[str] = [
    "Rainfed",
    "Canal Irrigation",
    "Borewell/Tubewell",
    "River/Lift Irrigation",
    "Tank Irrigation",
    "Drip Irrigation",
    "Sprinkler Irrigation",
]

TIP_CATEGORIES: List[str] = [
    "Fertilizer Application",
    "Pest & Disease Management",
    "Irrigation Scheduling",
    "Harvesting Timing & Techniques",
    "General Crop Health",
    "Sustainable & Organic Practices",
    "Soil Health Management",
]

OPTIMIZABLE_RESOURCES: List[str] = [
    "Water",
    "Labor",
    "Fertilizer",
    "Tools",
    "Tractor",
    "Pesticides",
]


def build_catalog(harvest_crops: List[str]) -> Dict[str, List[str]]:
    return {
        "soil_types": list(SOIL_TYPES),
        "months": list(MONTHS),
        "water_sources": list(WATER_SOURCES),
        "tip_categories": list(TIP_CATEGORIES),
        "resources": list(OPTIMIZABLE_RESOURCES),
        "harvest_crops": list(harvest_crops),
    }
