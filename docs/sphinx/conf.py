# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for RedTopo documentation."""

project = "RedTopo"
author = "RedTopo Contributors"
release = "0.1.0"
language = "es"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_typehints = "description"

html_theme = "alabaster"
html_title = "RedTopo: lenguaje de topologías Ethernet"
