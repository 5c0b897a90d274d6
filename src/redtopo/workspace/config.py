# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the RedTopo workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from redtopo.lexer.automaton import Automaton, load_automaton_file, load_default_automaton

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "redtopo.yaml"
DEFAULT_SNAPSHOT_DIRECTORY = ".redtopo"

DEFAULT_CONFIG_TEXT = """\
# RedTopo workspace configuration.

# Custom lexer automaton, relative to this file. Omit to use the built-in one.
# automaton: lexer/custom.aut

# Where `redtopo run --snapshot` stores network snapshots.
snapshot-directory: .redtopo

# Colored diagnostics and output.
color: true
"""


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a RedTopo workspace.

    Attributes:
        root: Directory the configuration applies to; relative paths are
            resolved against it.
        automaton: Optional path to a custom automaton specification.
        snapshot_directory: Relative path (from the root) for snapshots.
        color: Whether terminal output is colored.
    """

    root: Path
    automaton: str | None = None
    snapshot_directory: str = DEFAULT_SNAPSHOT_DIRECTORY
    color: bool = True


def load_config(path: Path) -> WorkspaceConfig:
    """Load and parse a RedTopo workspace configuration file.

    Args:
        path: Path to the ``redtopo.yaml`` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return _parse_config(text, root=path.parent, source_label=str(path))


def find_config(source: Path) -> WorkspaceConfig:
    """Return the configuration next to *source*, or the defaults if there is none."""
    directory = source if source.is_dir() else source.parent
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return load_config(candidate)
    return WorkspaceConfig(root=directory)


def resolve_automaton(config: WorkspaceConfig) -> Automaton:
    """Load the automaton named by *config*, or the packaged default.

    Raises:
        AutomatonSpecError: If the configured specification is missing or invalid.
    """
    if config.automaton is None:
        return load_default_automaton()
    return load_automaton_file(config.root / config.automaton)


# ################
# Implementation
# ################


def _parse_config(text: str, root: Path, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    An empty document yields the defaults.

    Raises:
        WorkspaceConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    config = WorkspaceConfig(root=root)
    if "automaton" in data:
        config.automaton = _require_type(data, "automaton", str, "a string", source_label)
    if "snapshot-directory" in data:
        config.snapshot_directory = _require_type(data, "snapshot-directory", str, "a string", source_label)
    if "color" in data:
        config.color = _require_type(data, "color", bool, "a boolean", source_label)
    return config


def _require_type(mapping: dict[str, object], key: str, expected: type, noun: str, source_label: str) -> Any:
    """Extract a field from a mapping, raising WorkspaceConfigError if it has the wrong type."""
    value = mapping[key]
    if not isinstance(value, expected):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be {noun}")
    return value
