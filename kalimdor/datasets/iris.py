"""
Fisher's Iris dataset.

References:
- https://archive.ics.uci.edu/ml/datasets/iris
- https://en.wikipedia.org/wiki/Iris_flower_data_set
"""

from typing import List, Tuple

from sklearn.datasets import load_iris

from kalimdor.datasets.base import BaseDataset


class Iris(BaseDataset):
    """
    150 samples of 4 measurements from 3 iris species (50 each):
    'setosa', 'versicolor' and 'virginica'.

    Example:
        iris = Iris()
        X, y = iris.load()
        iris.target_names  # ['setosa', 'versicolor', 'virginica']
    """

    def _read(self) -> Tuple[List[List[float]], List[int]]:
        bunch = load_iris()
        self.target_names = [str(name) for name in bunch.target_names]
        self.feature_names = list(bunch.feature_names)
        self.description = bunch.DESCR
        return bunch.data.tolist(), bunch.target.tolist()
