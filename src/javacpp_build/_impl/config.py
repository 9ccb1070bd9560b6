#
# ----------------------------------------------------------------------------------------------------
#
# Copyright (c) 2024, 2024, Oracle and/or its affiliates. All rights reserved.
# DO NOT ALTER OR REMOVE COPYRIGHT NOTICES OR THIS FILE HEADER.
#
# This code is free software; you can redistribute it and/or modify it
# under the terms of the GNU General Public License version 2 only, as
# published by the Free Software Foundation.
#
# This code is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
# FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
# version 2 for more details (a copy is included in the LICENSE file that
# accompanied this code).
#
# You should have received a copy of the GNU General Public License version
# 2 along with this work; if not, write to the Free Software Foundation,
# Inc., 51 Franklin St, Fifth Floor, Boston, MA 02110-1301 USA.
#
# Please contact Oracle, 500 Oracle Parkway, Redwood Shores, CA 94065 USA
# or visit www.oracle.com if you need additional information or have any
# questions.
#
# ----------------------------------------------------------------------------------------------------
#
"""
Build descriptions: TOML files with a ``[javacpp]`` table holding the options of a build.

    [javacpp]
    class-path = ["build/classes"]
    output-directory = "build/native"
    class-or-package-names = ["com.example.*"]
    link-path = []

    [javacpp.property-keys-and-values]
    "platform.compiler" = "clang++"

Relative paths are resolved against the directory of the file.
"""

from __future__ import annotations

__all__ = ["ConfigurationError", "load_build_description"]

import os
from os.path import dirname, isabs, join, normpath
from typing import Any, Dict

from .request import PLATFORM_PATH_CATEGORIES, BuildRequest

BUILD_DESCRIPTION_TABLE = "javacpp"

_PATH_OPTIONS = frozenset([
    "output_directory",
    "config_directory",
    "property_file",
    "working_directory",
])

_PATH_LIST_OPTIONS = frozenset([
    "class_path",
    "include_path",
    "build_path",
    "link_path",
    "preload_path",
    "resource_path",
    "executable_path",
    "target_directory",
])

_LIST_OPTIONS = _PATH_LIST_OPTIONS | frozenset(PLATFORM_PATH_CATEGORIES.values()) | frozenset([
    "class_or_package_names",
    "build_command",
    "compiler_options",
])

_TABLE_OPTIONS = frozenset([
    "property_keys_and_values",
    "environment_variables",
])


class ConfigurationError(Exception):
    pass


def _load_toml_from_fd(fd):
    try:
        import tomllib
        try:
            return tomllib.load(fd)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(str(e))
    except ImportError:
        # Python before 3.11
        pass

    import toml
    try:
        # tomllib expects 'rb', toml expects text
        return toml.loads(fd.read().decode('utf-8'))
    except toml.TomlDecodeError as e:
        raise ConfigurationError(str(e))


def _resolve(base_dir: str, path: str) -> str:
    return path if isabs(path) else normpath(join(base_dir, path))


def load_build_description(path: str) -> Dict[str, Any]:
    """
    Reads the build options of the TOML build description `path`.

    :return: the options keyed by BuildRequest field name
    :raises ConfigurationError: if the file cannot be parsed or has no ``[javacpp]`` table
    """
    try:
        with open(path, 'rb') as fd:
            tree = _load_toml_from_fd(fd)
    except ConfigurationError as e:
        raise ConfigurationError(f"{path}: {e}")
    table = tree.get(BUILD_DESCRIPTION_TABLE)
    if not isinstance(table, dict):
        raise ConfigurationError(f"{path}: no [{BUILD_DESCRIPTION_TABLE}] table")

    base_dir = dirname(os.path.abspath(path))
    options = {}
    for name, value in table.items():
        attr = BuildRequest.option_field(name)
        if attr is None:
            raise ConfigurationError(f"{path}: unknown option '{name}' in [{BUILD_DESCRIPTION_TABLE}]")
        if attr in _LIST_OPTIONS and not isinstance(value, list):
            raise ConfigurationError(f"{path}: option '{name}' must be an array, not {type(value).__name__}")
        if attr in _TABLE_OPTIONS and not isinstance(value, dict):
            raise ConfigurationError(f"{path}: option '{name}' must be a table, not {type(value).__name__}")
        if attr in _PATH_OPTIONS and isinstance(value, str):
            value = _resolve(base_dir, value)
        elif attr in _PATH_LIST_OPTIONS:
            value = [_resolve(base_dir, v) for v in value]
        elif attr in _TABLE_OPTIONS:
            value = {str(k): str(v) for k, v in value.items()}
        options[attr] = value
    return options
