"""
One-hot encoding of record lists.

Records are dictionaries (for example rows parsed from JSON). Data keys
become numeric columns: numbers are standardized and booleans become 0/1.
Label keys are expanded into one indicator column per distinct value.
"""

import logging
from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd

from kalimdor.ops import ElementType, TypeContractError, validate_matrix_2d, validate_matrix_type
from kalimdor.utils.general import as_numeric_array, distinct

logger = logging.getLogger(__name__)


class OneHotEncoder:
    """
    Encode a list of records into a numeric matrix and back.

    Example:
        enc = OneHotEncoder()
        info = enc.encode(planets, data_keys=['value', 'isGasGiant'], label_keys=['planet'])
        info['data']      # numeric matrix
        enc.decode(info['data'], info['decoders'])  # original records
    """

    def _to_frame(self, records: Any) -> pd.DataFrame:
        if not isinstance(records, (list, tuple)) or not all(isinstance(r, dict) for r in records):
            raise TypeContractError("Records must be a list of dictionaries", records)
        return pd.DataFrame.from_records(list(records))

    def _encode_data_column(self, key: str, column: pd.Series):
        values = column.tolist()
        validate_matrix_type(values, [ElementType.NUMBER, ElementType.BOOLEAN])

        if pd.api.types.is_bool_dtype(column):
            return [column.astype(int).to_numpy(dtype=float)], {'key': key, 'type': 'boolean'}

        numeric = column.astype(float)
        mean = float(numeric.mean())
        std = float(numeric.std())
        if not np.isfinite(std) or std == 0:
            std = 1.0
        encoded = ((numeric - mean) / std).to_numpy()
        return [encoded], {'key': key, 'type': 'number', 'mean': mean, 'std': std}

    def _encode_label_column(self, key: str, column: pd.Series):
        values = column.tolist()
        validate_matrix_type(values, ElementType)

        categories = distinct(values)
        encoded = [(column == category).astype(float).to_numpy() for category in categories]
        return encoded, {'key': key, 'type': 'label', 'categories': categories}

    def encode(self,
               records: Sequence[Dict[str, Any]],
               data_keys: Sequence[str] = (),
               label_keys: Sequence[str] = ()) -> Dict[str, Any]:
        """
        Encode records into a numeric matrix.

        Args:
            records: List of dictionaries
            data_keys: Keys holding numeric or boolean values
            label_keys: Keys holding categorical values

        Returns:
            Dictionary with 'data' (nested list, one row per record) and
            'decoders' (per-key metadata consumed by `decode`)
        """
        frame = self._to_frame(records)

        columns = []
        decoders = []
        for key in data_keys:
            if key not in frame.columns or frame[key].isna().any():
                raise ValueError(f"Cannot find {key} from data")
            encoded, decoder = self._encode_data_column(key, frame[key])
            columns.extend(encoded)
            decoders.append(decoder)

        for key in label_keys:
            if key not in frame.columns or frame[key].isna().any():
                raise ValueError(f"Cannot find {key} from labels")
            encoded, decoder = self._encode_label_column(key, frame[key])
            columns.extend(encoded)
            decoders.append(decoder)

        if columns:
            data = np.column_stack(columns).tolist()
        else:
            data = [[] for _ in range(len(frame))]

        logger.debug(f"Encoded {len(frame)} records into {len(columns)} columns")
        return {'data': data, 'decoders': decoders}

    def decode(self, data: Any, decoders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Rebuild records from an encoded matrix.

        Args:
            data: 2D numeric matrix produced by `encode`
            decoders: Decoders produced by `encode`

        Returns:
            List of dictionaries
        """
        validate_matrix_2d(data)
        matrix = as_numeric_array(data)

        width = sum(len(d['categories']) if d['type'] == 'label' else 1 for d in decoders)
        if matrix.shape[1] != width:
            raise ValueError(f"Data has {matrix.shape[1]} columns, but the decoders describe {width}")

        records = []
        for row in matrix:
            record = {}
            position = 0
            for decoder in decoders:
                key = decoder['key']
                if decoder['type'] == 'number':
                    record[key] = float(row[position] * decoder['std'] + decoder['mean'])
                    position += 1
                elif decoder['type'] == 'boolean':
                    record[key] = bool(round(row[position]))
                    position += 1
                else:
                    categories = decoder['categories']
                    block = row[position:position + len(categories)]
                    record[key] = categories[int(np.argmax(block))]
                    position += len(categories)
            records.append(record)

        return records
