"""
Policystore command-line entry point.
"""

import logging
from pathlib import Path

import casbin

from policystore.adapter import Adapter
from policystore.config import load_config, Config
from policystore.models import create_db_engine, model_to_rules


logger = logging.getLogger(__name__)


def _load(args) -> Config | None:
    """Load config and set up logging. Returns None if the file is missing."""
    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}")
        print("Please create a config.yaml file or specify a different path with -c")
        return None

    config = load_config(config_path)

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return config


def _open_adapter(config: Config) -> Adapter:
    engine = create_db_engine(config.database)
    return Adapter(engine, config.database.table_name)


def cmd_init(args):
    """Create the policy table if it does not exist."""
    config = _load(args)
    if config is None:
        return 1

    adapter = _open_adapter(config)
    print(f"Policy table ready: {adapter.table_name}")
    return 0


def cmd_import(args):
    """Replace stored rules with the content of a casbin CSV policy file."""
    config = _load(args)
    if config is None:
        return 1

    model_path = Path(config.casbin.model_path)
    if not model_path.exists():
        print(f"Error: Model file not found: {model_path}")
        return 1

    policy_path = Path(args.policy_file)
    if not policy_path.exists():
        print(f"Error: Policy file not found: {policy_path}")
        return 1

    # The default file adapter parses the CSV into the model
    enforcer = casbin.Enforcer(str(model_path), str(policy_path))
    model = enforcer.get_model()

    adapter = _open_adapter(config)
    adapter.save_policy(model)

    count = len(model_to_rules(model))
    print(f"Imported {count} rules into {adapter.table_name}")
    return 0


def cmd_export(args):
    """Print stored rules as casbin CSV lines."""
    config = _load(args)
    if config is None:
        return 1

    model_path = Path(config.casbin.model_path)
    if not model_path.exists():
        print(f"Error: Model file not found: {model_path}")
        return 1

    adapter = _open_adapter(config)
    enforcer = casbin.Enforcer(str(model_path), adapter)

    for rule in model_to_rules(enforcer.get_model()):
        print(rule.to_line())

    return 0


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Casbin policy store for SQL databases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create the policy table")

    import_parser = subparsers.add_parser("import", help="Load a CSV policy file into the table")
    import_parser.add_argument("policy_file", help="Path to a casbin policy .csv file")

    subparsers.add_parser("export", help="Print stored rules as CSV lines")

    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args)
    elif args.command == "import":
        return cmd_import(args)
    elif args.command == "export":
        return cmd_export(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    exit(main())
