"""
Utility helpers for kalimdor.
"""

from kalimdor.utils.general import distinct, as_numeric_array, weighted_mean, weighted_means
