"""
Linear models.
"""

from kalimdor.linear_model.ridge import Ridge
