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
The options of a JavaCPP build and the result of running one.
"""

from __future__ import annotations

__all__ = [
    "PLATFORM_PATH_CATEGORIES",
    "BuildRequest",
    "BuildResult",
]

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

PLATFORM_PATH_CATEGORIES = {
    "includepath": "include_path",
    "includeresource": "include_resource",
    "buildpath": "build_path",
    "buildresource": "build_resource",
    "linkpath": "link_path",
    "linkresource": "link_resource",
    "preloadpath": "preload_path",
    "preloadresource": "preload_resource",
    "resourcepath": "resource_path",
    "executablepath": "executable_path",
}
"""Maps each ``platform.<category>`` property to the BuildRequest field that supplies it."""

# Alternative option names, accepted in addition to the snake_case, kebab-case and camelCase field names
_ALIASES = {
    "classPaths": "class_path",
    "deleteGeneratedGlue": "delete_jni_files",
    "emitHeader": "header",
    "copyLibraries": "copy_libs",
    "configDir": "config_directory",
    "propertyKeysAndValues": "property_keys_and_values",
}


def _snake_case(name: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in name).replace("-", "_")


@dataclass
class BuildRequest:
    """
    The options of one JavaCPP build. None means "not configured": the delegated builder then
    applies its own default. For list options this differs from an empty list, which clears
    the builder's default.
    """

    class_path: Optional[List[str]] = None
    """Load user classes from these class path entries."""
    include_path: Optional[List[str]] = None
    include_resource: Optional[List[str]] = None
    build_path: Optional[List[str]] = None
    build_resource: Optional[List[str]] = None
    link_path: Optional[List[str]] = None
    link_resource: Optional[List[str]] = None
    preload_path: Optional[List[str]] = None
    preload_resource: Optional[List[str]] = None
    resource_path: Optional[List[str]] = None
    executable_path: Optional[List[str]] = None
    encoding: Optional[str] = None
    """Character encoding used for input and output files."""
    output_directory: Optional[str] = None
    output_name: Optional[str] = None
    """Output everything in a library named after this name."""
    clean: bool = False
    """Delete all files from the output directory before generating anything in it."""
    generate: bool = True
    """Generate .cpp files from Java interfaces if found, parsing from header files if not."""
    compile: bool = True
    """Compile and delete the generated .cpp files."""
    delete_jni_files: bool = True
    header: bool = False
    """Generate a header file with declarations of callback functions."""
    copy_libs: bool = False
    copy_resources: bool = False
    config_directory: Optional[str] = None
    """Also create config files for GraalVM native-image in this directory."""
    jar_prefix: Optional[str] = None
    """Also create a JAR file named ``<jar_prefix>-<platform>.jar``."""
    properties: Optional[str] = None
    """Name of the property resource to load, e.g. ``linux-x86_64``."""
    property_file: Optional[str] = None
    property_keys_and_values: Optional[Dict[str, str]] = None
    class_or_package_names: Optional[List[str]] = None
    """Process only these classes or packages (suffixed with .* or .**)."""
    build_command: Optional[List[str]] = None
    """Execute this command instead of JavaCPP itself."""
    target_directory: Optional[List[str]] = None
    """Source directories of Java files generated by the build command."""
    working_directory: Optional[str] = None
    environment_variables: Optional[Dict[str, str]] = None
    compiler_options: Optional[List[str]] = None
    skip: bool = False

    def platform_path_properties(self) -> Dict[str, List[str]]:
        """
        Gets the ``platform.<category>`` properties of the configured path and resource categories.
        Categories that are not configured are left out.
        """
        result = {}
        for category, attr in PLATFORM_PATH_CATEGORIES.items():
            value = getattr(self, attr)
            if value is not None:
                result["platform." + category] = list(value)
        return result

    def copy(self) -> BuildRequest:
        return dataclasses.replace(self, **{f.name: _copy_value(getattr(self, f.name)) for f in dataclasses.fields(self)})

    @staticmethod
    def option_names() -> List[str]:
        return [f.name for f in dataclasses.fields(BuildRequest)]

    @staticmethod
    def option_field(name: str) -> Optional[str]:
        """
        Gets the field for the option `name`, given in snake_case, kebab-case, camelCase or as an alias.
        """
        attr = _ALIASES.get(name) or _snake_case(name)
        return attr if attr in BuildRequest.option_names() else None

    @staticmethod
    def from_mapping(options: Mapping[str, Any]) -> BuildRequest:
        """
        Creates a request from a mapping of option names to values. Names may be given in snake_case,
        kebab-case or in the camelCase of the Gradle plugin. Entries whose value is None are ignored.

        :raises ValueError: for unknown option names
        """
        kwargs = {}
        for name, value in options.items():
            attr = BuildRequest.option_field(name)
            if attr is None:
                raise ValueError(f"Unknown JavaCPP build option '{name}'")
            if value is not None:
                kwargs[attr] = value
        return BuildRequest(**kwargs)


def _copy_value(value):
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


@dataclass
class BuildResult:
    """
    The output of one JavaCPP build: the produced files and the final property table of the builder.
    """

    files: List[str] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)
    target_directories: List[str] = field(default_factory=list)

    @staticmethod
    def empty() -> BuildResult:
        return BuildResult()

    def is_empty(self) -> bool:
        return not self.files and not self.properties and not self.target_directories
