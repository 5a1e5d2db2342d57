"""
Preprocessing transforms.
"""

from kalimdor.preprocessing.data import (
    add_dummy_feature, normalize, Binarizer, MinMaxScaler, PolynomialFeatures
)
from kalimdor.preprocessing.encoders import OneHotEncoder
