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
Reading, writing and merging of Java ``.properties`` tables.

The effective property table of a build is assembled from up to three sources
in a fixed order, each one overriding the previous ones:

    host platform < property resource < property file < explicit key/value pairs

See :func:`merge_properties`.
"""

from __future__ import annotations

__all__ = [
    "PROPERTIES_RESOURCE_DIR",
    "PropertiesParseError",
    "parse_properties",
    "load_properties_file",
    "find_properties_resource",
    "format_properties",
    "write_properties_file",
    "merge_properties",
    "join_path_list",
]

import os
import zipfile
from os.path import isdir, isfile, join
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple

from .support.logging import logv, warn
from .util import SafeFileCreation

PROPERTIES_RESOURCE_DIR = "org/bytedeco/javacpp/properties"
"""Class path directory holding the named platform property resources."""

# java.util.Properties reads byte streams as ISO 8859-1
PROPERTIES_ENCODING = "latin-1"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class PropertiesParseError(ValueError):
    def __init__(self, message: str, source: str, line_number: int):
        super(PropertiesParseError, self).__init__(f"{source}:{line_number}: {message}")
        self.source = source
        self.line_number = line_number


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """
    Joins continuation lines (odd number of trailing backslashes) and drops comments and blank lines.
    Yields the line number where each logical line starts.
    """
    pending = None
    start = 0
    for number, raw in enumerate(text.splitlines(), 1):
        line = raw.lstrip(" \t\f")
        if pending is None:
            if not line or line[0] in "#!":
                continue
            start = number
            pending = ""
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield start, pending + line
        pending = None
    if pending is not None:
        yield start, pending


def _unescape(s: str, source: str, line_number: int) -> str:
    out = []
    i = 0
    while i < len(s):
        c = s[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        i += 1
        if i == len(s):
            break
        c = s[i]
        if c == "u":
            digits = s[i + 1:i + 5]
            if len(digits) != 4:
                raise PropertiesParseError(f"Malformed \\uxxxx encoding: \\u{digits}", source, line_number)
            try:
                out.append(chr(int(digits, 16)))
            except ValueError:
                raise PropertiesParseError(f"Malformed \\uxxxx encoding: \\u{digits}", source, line_number)
            i += 5
        else:
            out.append(_ESCAPES.get(c, c))
            i += 1
    return "".join(out)


def _split_key_value(line: str) -> Tuple[str, str]:
    i = 0
    while i < len(line):
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in "=: \t\f":
            break
        i += 1
    i = min(i, len(line))
    key = line[:i]
    # One '=' or ':' may follow the key, surrounded by optional whitespace
    j = i
    while j < len(line) and line[j] in " \t\f":
        j += 1
    if j < len(line) and line[j] in "=:":
        j += 1
    return key, line[j:].lstrip(" \t\f")


def parse_properties(text: str, source: str = "<string>") -> Dict[str, str]:
    """
    Parses the contents of a Java ``.properties`` file. Later definitions of a key replace earlier ones.
    """
    result = {}
    for line_number, line in _logical_lines(text):
        key, value = _split_key_value(line)
        result[_unescape(key, source, line_number)] = _unescape(value, source, line_number)
    return result


def load_properties_file(path: str) -> Dict[str, str]:
    with open(path, encoding=PROPERTIES_ENCODING) as fp:
        return parse_properties(fp.read(), source=path)


def find_properties_resource(name: str, class_path: Optional[Sequence[str]]) -> Optional[Tuple[str, Dict[str, str]]]:
    """
    Looks up the property resource `name` on `class_path`. Directory and jar entries are
    searched in order and the first hit wins.

    :return: a tuple of a description of where the resource was found and its properties,
             or None if no class path entry has it
    """
    resource = name if name.endswith(".properties") else f"{PROPERTIES_RESOURCE_DIR}/{name}.properties"
    for entry in class_path or []:
        if isdir(entry):
            candidate = join(entry, *resource.split("/"))
            if isfile(candidate):
                return candidate, load_properties_file(candidate)
        elif isfile(entry) and zipfile.is_zipfile(entry):
            with zipfile.ZipFile(entry) as zf:
                try:
                    data = zf.read(resource)
                except KeyError:
                    continue
                source = f"{entry}!/{resource}"
                return source, parse_properties(data.decode(PROPERTIES_ENCODING), source=source)
    return None


def _escape(s: str, is_key: bool) -> str:
    out = []
    for i, c in enumerate(s):
        if c == "\\":
            out.append("\\\\")
        elif c == "\t":
            out.append("\\t")
        elif c == "\n":
            out.append("\\n")
        elif c == "\r":
            out.append("\\r")
        elif c == "\f":
            out.append("\\f")
        elif c in "=:#!" or (c == " " and (is_key or i == 0)):
            out.append("\\" + c)
        elif ord(c) > 0xff:
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    return "".join(out)


def format_properties(properties: Mapping[str, str]) -> str:
    """
    Formats `properties` as the text of a ``.properties`` file, sorted by key.
    """
    return "".join(f"{_escape(k, True)}={_escape(properties[k], False)}\n" for k in sorted(properties))


def write_properties_file(path: str, properties: Mapping[str, str]) -> None:
    with SafeFileCreation(path) as sfc:
        with open(sfc.tmpPath, "w", encoding=PROPERTIES_ENCODING) as fp:
            fp.write(format_properties(properties))


def merge_properties(host_platform: str,
                     resource: Optional[str] = None,
                     property_file: Optional[str] = None,
                     keys_and_values: Optional[Mapping[str, str]] = None,
                     class_path: Optional[Sequence[str]] = None) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Merges the property sources of a build in the fixed order
    host platform < resource < file < explicit key/value pairs.

    Without a named `resource` the properties of the host platform are loaded, as the
    JavaCPP builder does by itself.

    :return: the merged table and the subset of it contributed by the host platform and the resource,
             which the delegated builder can load again by itself
    """
    platform = resource if resource is not None else host_platform
    merged = {"platform": platform}
    found = find_properties_resource(platform, class_path)
    if found is not None:
        source, values = found
        logv(f"Loaded {len(values)} properties from {source}")
        merged.update(values)
    elif resource is not None:
        warn(f"Property resource {resource} not found on the class path")
    else:
        logv(f"No properties for platform {platform} on the class path")
    base = dict(merged)
    if property_file is not None:
        values = load_properties_file(property_file)
        logv(f"Loaded {len(values)} properties from {property_file}")
        merged.update(values)
    if keys_and_values:
        merged.update({str(k): str(v) for k, v in keys_and_values.items()})
    return merged, base


def join_path_list(values: Sequence[str]) -> str:
    return os.pathsep.join(values)
