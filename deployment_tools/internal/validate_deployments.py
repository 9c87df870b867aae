import json
import sys
import argparse
from pathlib import Path
from typing import List, Optional

from deployment_tools.config import RegistryConfig, load_config
from deployment_tools.errors import DeploymentToolError
from deployment_tools.network_addresses import CHAIN_ID_RE, chain_id_key
from deployment_tools.types import ADDRESS_TYPES


def validate_network_addresses(record_path: Path, network_addresses) -> List[str]:
    errors = []

    if not isinstance(network_addresses, dict):
        errors.append(f"{record_path}: 'networkAddresses' is missing or not an object")
        return errors

    previous = None
    for chain_id, value in network_addresses.items():
        if not CHAIN_ID_RE.fullmatch(chain_id):
            errors.append(f"{record_path}: chain ID {chain_id!r} is not a decimal number")
            continue

        key = chain_id_key(chain_id)
        if previous is not None:
            if key == previous:
                errors.append(f"{record_path}: chain ID {chain_id} duplicates the previous key")
            elif key < previous:
                errors.append(f"{record_path}: chain ID {chain_id} is out of ascending order")
        previous = key

        tags = [value] if isinstance(value, str) else value
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            errors.append(f"{record_path}: chain ID {chain_id} has invalid value {value!r}")
            continue
        if not tags:
            errors.append(f"{record_path}: chain ID {chain_id} has an empty deployment type list")
        for tag in tags:
            if tag not in ADDRESS_TYPES:
                errors.append(f"{record_path}: chain ID {chain_id} has unknown deployment type {tag!r}")
        if len(set(tags)) != len(tags):
            errors.append(f"{record_path}: chain ID {chain_id} lists a deployment type more than once")

    return errors


def validate_record(record_path: Path) -> List[str]:
    try:
        with open(record_path, encoding="utf-8") as f:
            record = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return [f"Failed to read or parse {record_path}: {e}"]

    if not isinstance(record, dict):
        return [f"{record_path}: expected a JSON object at the top level"]

    return validate_network_addresses(record_path, record.get("networkAddresses"))


def validate_registry(config: RegistryConfig, version: Optional[str] = None) -> List[str]:
    """
    Check every record of every version directory (or only `version`).
    """
    all_errors = []

    if version is not None:
        version_dirs = [config.version_dir(version)]
        if not version_dirs[0].is_dir():
            return [f"Version directory does not exist: {version_dirs[0]}"]
    elif config.assets_dir.is_dir():
        version_dirs = sorted(
            d for d in config.assets_dir.iterdir()
            if d.is_dir() and d.name.startswith(config.version_prefix)
        )
    else:
        return [f"Assets directory does not exist: {config.assets_dir}"]

    for version_dir in version_dirs:
        for record_path in sorted(version_dir.glob(f"*{config.record_suffix}")):
            all_errors.extend(validate_record(record_path))

    return all_errors


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Validate networkAddresses in every deployment record")
    parser.add_argument("--config", help="Registry layout config (YAML)")
    parser.add_argument("--version", help="Only check this version")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except DeploymentToolError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    all_errors = validate_registry(config, args.version)

    if all_errors:
        for error in all_errors:
            print("❌", error)
        sys.exit(1)
    else:
        print("✅ All deployment records have valid networkAddresses.")

if __name__ == "__main__":
    main()
