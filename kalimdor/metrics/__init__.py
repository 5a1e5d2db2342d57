"""
Evaluation metrics.
"""

from kalimdor.metrics.classification import accuracy_score, zero_one_loss, confusion_matrix
from kalimdor.metrics.regression import mean_absolute_error, mean_squared_error
