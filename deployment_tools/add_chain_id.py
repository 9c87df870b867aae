#!/usr/bin/env python3

import os
import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

# Ensure the repo root is in the Python path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from deployment_tools.config import RegistryConfig, load_config
from deployment_tools.errors import (
    DeploymentToolError,
    InvalidVariant,
    MalformedRecord,
    MissingArgument,
    NoRecordsFound,
    VersionNotFound,
)
from deployment_tools.network_addresses import NetworkAddresses, Single, insert_chain_id, validate_chain_id
from deployment_tools.types import ADDRESS_TYPES, Options, SingletonDeploymentJSON

REQUIRED_OPTIONS = ("version", "chain_id", "deployment_type")


def _debug(verbose: bool, *msg) -> None:
    if verbose:
        print(*msg)


def resolve_options(values: dict) -> Options:
    """
    Validate raw option values. The chain ID is checked here once because
    every record in the run shares it.
    """
    for option in REQUIRED_OPTIONS:
        if values.get(option) is None:
            raise MissingArgument(f"missing --{option.replace('_', '-')} flag")

    deployment_type = values["deployment_type"]
    if deployment_type not in ADDRESS_TYPES:
        raise InvalidVariant(
            f"invalid deploymentType: {deployment_type}. Must be one of: {', '.join(ADDRESS_TYPES)}"
        )

    return {
        "version": values["version"],
        "chain_id": validate_chain_id(values["chain_id"]),
        "deployment_type": deployment_type,
        "verbose": values.get("verbose") is True,
    }


def load_record(file_path: Path) -> SingletonDeploymentJSON:
    with open(file_path, encoding="utf-8") as f:
        try:
            deployment = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedRecord(f"Failed to parse {file_path}: {e}") from e
    if not isinstance(deployment, dict):
        raise MalformedRecord(f"{file_path}: expected a JSON object at the top level")
    return deployment


def save_record(file_path: Path, deployment: SingletonDeploymentJSON) -> None:
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(deployment, f, indent=2, ensure_ascii=False)
        f.write("\n")


def process_file(file_path: Path, chain_id: str, deployment_type: str, verbose: bool = False) -> bool:
    """
    Add chain_id to one record. Returns True if the file was rewritten.
    """
    _debug(verbose, f"🔍 Processing file: {file_path}")

    deployment = load_record(file_path)
    try:
        network_addresses = NetworkAddresses.from_json(deployment.get("networkAddresses"))
    except MalformedRecord as e:
        raise MalformedRecord(f"{file_path}: {e}") from e

    # Only a bare string match skips the write; an array that already holds
    # the type still goes through insert_chain_id, which leaves it unchanged.
    existing = network_addresses.get(chain_id)
    if existing == Single(deployment_type):
        _debug(verbose, f"Chain ID {chain_id} already exists with deployment type {deployment_type}, skipping")
        return False

    updated = insert_chain_id(network_addresses, chain_id, deployment_type)
    if existing is not None:
        _debug(verbose, f"Chain ID {chain_id} already exists, updated deployment types")
    deployment["networkAddresses"] = updated.to_json()

    save_record(file_path, deployment)
    _debug(verbose, f"📝 Updated file: {file_path}")
    return True


def find_records(version_dir: Path, suffix: str) -> List[Path]:
    return sorted(p for p in version_dir.iterdir() if p.is_file() and p.name.endswith(suffix))


def update_version(config: RegistryConfig, version: str, chain_id: str, deployment_type: str, verbose: bool = False) -> int:
    """
    Add chain_id to every record of `version`. Returns the number of files written.
    The first failing record aborts the run; files written before it stay written.
    """
    validate_chain_id(chain_id)

    version_dir = config.version_dir(version)
    _debug(verbose, f"Looking for version directory: {version_dir}")
    if not version_dir.exists():
        raise VersionNotFound(f"Version directory does not exist: {version_dir}")
    if not version_dir.is_dir():
        raise VersionNotFound(f"Path exists but is not a directory: {version_dir}")
    _debug(verbose, f"Found version directory: {version_dir}")

    records = find_records(version_dir, config.record_suffix)
    if not records:
        raise NoRecordsFound(f"No JSON files found in {version_dir}")
    _debug(verbose, f"Found {len(records)} JSON files to process")

    updated_count = 0
    for file_path in records:
        if process_file(file_path, chain_id, deployment_type, verbose):
            updated_count += 1
    return updated_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Add a chain ID to every deployment record of a version")
    parser.add_argument("--version", help="Version without the 'v' prefix, e.g. 1.4.1")
    parser.add_argument(
        "--chain-id",
        "--chainId",
        dest="chain_id",
        help="Decimal chain ID, matched to existing keys by numeric value (988 merges into \"0988\")",
    )
    parser.add_argument(
        "--deployment-type",
        "--deploymentType",
        dest="deployment_type",
        help=f"One of: {', '.join(ADDRESS_TYPES)}",
    )
    parser.add_argument("--config", help="Registry layout config (YAML), defaults to ./deployments.yaml")
    parser.add_argument("--verbose", action="store_true", help="Print diagnostic output")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        options = resolve_options(vars(args))
        verbose = options["verbose"]
        _debug(verbose, "Parsed options:")
        _debug(verbose, options)
        _debug(verbose, f"Current working directory: {os.getcwd()}")

        config = load_config(args.config)
        updated_count = update_version(
            config,
            options["version"],
            options["chain_id"],
            options["deployment_type"],
            verbose,
        )
    except DeploymentToolError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    print(
        f"✅ Successfully added chain ID {options['chain_id']} with deployment type "
        f"\"{options['deployment_type']}\" to {updated_count} files in version {options['version']}"
    )


if __name__ == "__main__":
    main()
