"""
Base class for bundled datasets.
"""

import logging
from typing import Any, List, Optional, Tuple

from kalimdor.ops import validate_fit_inputs

logger = logging.getLogger(__name__)


class BaseDataset:
    """
    A dataset holding a feature matrix and a target vector as nested lists.

    Subclasses implement `_read` and get validation and caching of the
    loaded arrays on the instance for free.
    """

    def __init__(self):
        self.data: Optional[List[List[float]]] = None
        self.targets: Optional[List[Any]] = None
        self.target_names: List[str] = []
        self.feature_names: List[str] = []
        self.description: str = ''

    def _read(self) -> Tuple[List[List[float]], List[Any]]:
        raise NotImplementedError("Each dataset must implement _read")

    def load(self) -> Tuple[List[List[float]], List[Any]]:
        """
        Load the dataset.

        Returns:
            Tuple of (data, targets)
        """
        data, targets = self._read()
        validate_fit_inputs(data, targets)

        self.data = data
        self.targets = targets
        logger.debug(f"Loaded {type(self).__name__} with {len(data)} samples")
        return data, targets

    def __repr__(self) -> str:
        n = 0 if self.data is None else len(self.data)
        return f"{type(self).__name__}(samples={n})"
