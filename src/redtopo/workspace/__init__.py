# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for RedTopo."""

from redtopo.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    DEFAULT_SNAPSHOT_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_config,
    load_config,
    resolve_automaton,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG_TEXT",
    "DEFAULT_SNAPSHOT_DIRECTORY",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "find_config",
    "load_config",
    "resolve_automaton",
]
