"""
Bundled datasets.
"""

from kalimdor.datasets.base import BaseDataset
from kalimdor.datasets.iris import Iris
