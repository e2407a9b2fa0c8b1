"""
Criterion Implementations.

All criteria are auto-registered when imported.
Import all criterion modules here to trigger registration.
"""

from .momentum import RSICriterion, MACDCriterion
from .trend import EMAStackCriterion, HigherLowCriterion
from .volume import VolumeSpikeCriterion
