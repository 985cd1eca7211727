"""
Eureka Client command-line interface

    eureka-client apps
    eureka-client app MYAPP
    eureka-client register MYAPP instance.yaml
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .client import EurekaClient
from .config import EurekaConfig
from .errors import ConfigurationError, DecodeError, EurekaError
from .logger import get_logger, setup_logging
from .models import Applications, Instance

logger = get_logger(__name__)


def load_instance(path: Path) -> Instance:
    """Read an instance in wire form from a YAML or JSON file"""
    if not path.exists():
        raise ConfigurationError(f"Instance file not found: {path}")

    if path.suffix not in ['.yaml', '.yml', '.json']:
        raise ConfigurationError(f"Unsupported file format: {path.suffix}")

    with open(path, 'r') as f:
        try:
            data = json.load(f) if path.suffix == '.json' else yaml.safe_load(f)
        except (yaml.YAMLError, ValueError) as e:
            raise DecodeError(f"{path}: cannot parse instance file: {e}", cause=e) from e

    # accept both a bare instance and a register body
    if isinstance(data, dict) and 'instance' in data:
        data = data['instance']
    return Instance.from_dict(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='eureka-client',
        description='Query and register with a Eureka service registry'
    )
    parser.add_argument('--config', type=Path, help='YAML or JSON config file')
    parser.add_argument('--url', help='Base registry URL (overrides config)')
    parser.add_argument('--log-level', help='Logging level')
    parser.add_argument('--log-format', choices=['json', 'console'])

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('apps', help='Print the full registry snapshot')

    app = commands.add_parser('app', help='Print the instances of one application')
    app.add_argument('name')

    register = commands.add_parser('register', help='Register an instance')
    register.add_argument('name')
    register.add_argument('file', type=Path, help='Instance in wire form (YAML or JSON)')

    return parser


def load_config(args: argparse.Namespace) -> EurekaConfig:
    config = EurekaConfig.from_file(args.config) if args.config else EurekaConfig.from_env()

    if args.url:
        config.url = args.url
    if args.log_level:
        config.log_level = args.log_level
    if args.log_format:
        config.log_format = args.log_format

    config.validate()
    return config


def run(args: argparse.Namespace, config: EurekaConfig) -> int:
    with EurekaClient.from_config(config) as client:
        if args.command == 'apps':
            output = client.get_all().to_dict()
        elif args.command == 'app':
            instances = client.get(args.name)
            output = Applications({args.name: instances}).to_dict()
        else:
            client.register(args.name, load_instance(args.file))
            output = None

    if output is not None:
        print(json.dumps(output, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, config.log_format)

    try:
        return run(args, config)
    except EurekaError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
