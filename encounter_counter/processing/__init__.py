"""Processing module - region extraction and encounter text classification."""

from .encounter_classifier import LEVEL_MARKERS, WILD_TRIGGER, extract_species, has_wild_trigger, is_level_marker
from .region_extractor import BOTTOM_REGION, TOP_REGION, Region, RegionExtractor

__all__ = [
    "BOTTOM_REGION",
    "TOP_REGION",
    "Region",
    "RegionExtractor",
    "LEVEL_MARKERS",
    "WILD_TRIGGER",
    "extract_species",
    "has_wild_trigger",
    "is_level_marker",
]
