"""
Command line entry point for kalimdor.

Reads a tensor from a JSON or YAML file and runs one engine operation (or
k-means) on it.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

import yaml

from kalimdor.cluster import KMeans
from kalimdor.components.config import Config, ConfigManager, load_config_file, to_int, to_list
from kalimdor.ops import (
    TensorOpsError, infer_shape, reshape, validate_matrix_1d, validate_matrix_2d,
    validate_matrix_type
)
from kalimdor.ops.errors import format_shape

logger = logging.getLogger(__name__)

LOG_LEVELS = {'warn': 'WARNING'}


def setup_logging(level: str = 'INFO') -> None:
    """
    Set up logging.

    Args:
        level: Logging level
    """
    level = LOG_LEVELS.get(level.lower(), level.upper())
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Arguments, defaulting to sys.argv

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='kalimdor tensor tools')

    parser.add_argument(
        '--config',
        help='Path to configuration file (JSON or YAML)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (defaults to the logging.level config key)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    shape_parser = subparsers.add_parser('shape', help='Print the inferred shape of a tensor')
    shape_parser.add_argument('file', help='JSON or YAML file holding the tensor')

    validate_parser = subparsers.add_parser('validate', help='Check rank and element types')
    validate_parser.add_argument('file', help='JSON or YAML file holding the tensor')
    validate_parser.add_argument('--rank', type=int, choices=[1, 2], help='Required rank')
    validate_parser.add_argument('--types', help='Comma-separated allowed element types')

    reshape_parser = subparsers.add_parser('reshape', help='Reshape a tensor')
    reshape_parser.add_argument('file', help='JSON or YAML file holding the tensor')
    reshape_parser.add_argument('--shape', required=True, help='Comma-separated target shape')

    kmeans_parser = subparsers.add_parser('kmeans', help='Cluster the rows of a 2D matrix')
    kmeans_parser.add_argument('file', help='JSON or YAML file holding the matrix')
    kmeans_parser.add_argument('--k', type=int, help='Number of clusters')

    return parser.parse_args(argv)


def load_tensor_file(filepath: str) -> Any:
    """
    Load a tensor from a file.

    Args:
        filepath: Path to a .json, .yaml or .yml file

    Returns:
        The deserialized nested lists
    """
    if filepath.endswith('.json'):
        with open(filepath, 'r') as f:
            return json.load(f)
    elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
        with open(filepath, 'r') as f:
            return yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported tensor file format: {filepath}")


def count_leaves(tensor: Any) -> int:
    """
    Count scalar values in a nested list without validating its shape.
    """
    count = 0
    stack = [tensor]
    while stack:
        item = stack.pop()
        if isinstance(item, (list, tuple)):
            stack.extend(item)
        else:
            count += 1
    return count


def check_size_limit(tensor: Any, config: Config) -> None:
    """
    Reject tensors above the configured element limit.
    """
    limit = to_int(config.get('validation.max-elements'))
    if limit is None:
        return
    n = count_leaves(tensor)
    if n > limit:
        raise ValueError(f"Tensor has {n} elements, above the configured limit of {limit}")


def run_command(args: argparse.Namespace, config: Config) -> str:
    """
    Execute a parsed subcommand.

    Args:
        args: Parsed arguments
        config: Configuration

    Returns:
        Text to print
    """
    tensor = load_tensor_file(args.file)
    check_size_limit(tensor, config)

    if args.command == 'shape':
        return format_shape(infer_shape(tensor))

    if args.command == 'validate':
        if args.rank == 1:
            validate_matrix_1d(tensor)
        elif args.rank == 2:
            validate_matrix_2d(tensor)
        else:
            infer_shape(tensor)
        if args.types:
            validate_matrix_type(tensor, to_list(args.types))
        return 'OK'

    if args.command == 'reshape':
        target_shape = [to_int(n) for n in to_list(args.shape)]
        if any(n is None for n in target_shape):
            raise ValueError(f"Invalid target shape: {args.shape}")
        return json.dumps(reshape(tensor, target_shape))

    if args.command == 'kmeans':
        overrides = {} if args.k is None else {'k': args.k}
        result = KMeans.from_config(config, **overrides).fit(tensor)
        return json.dumps(result)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Arguments, defaulting to sys.argv

    Returns:
        Process exit code
    """
    args = parse_args(argv)

    try:
        overrides = {}
        if args.config:
            overrides.update(load_config_file(args.config))

        config = ConfigManager.get_config(overrides)
        setup_logging(args.log_level or config.get('logging.level', 'warn'))

        output = run_command(args, config)
    except (TensorOpsError, ValueError, OSError, yaml.YAMLError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
