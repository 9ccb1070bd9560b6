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
Property namespaces shared between the steps of an enclosing build.
"""

from __future__ import annotations

__all__ = [
    "PropertyNamespace",
    "ExtraProperties",
    "PropertiesFileNamespace",
]

from abc import ABCMeta, abstractmethod
from os.path import exists
from typing import Dict, List, Optional

from .properties import load_properties_file, write_properties_file
from .support.logging import logvv


class PropertyNamespace(object, metaclass=ABCMeta):
    """A mutable string to string store that later build steps can read."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value


class ExtraProperties(PropertyNamespace):
    """An in-memory namespace, the counterpart of the extra properties of a Gradle project."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def set(self, key, value):
        self._values[key] = value

    def get(self, key, default=None):
        return self._values.get(key, default)

    def keys(self):
        return list(self._values)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __repr__(self):
        return f"ExtraProperties({self._values!r})"


class PropertiesFileNamespace(ExtraProperties):
    """
    A namespace backed by a ``.properties`` file, so that steps running in other processes can read
    the values. Existing entries of the file are loaded on creation; the file is rewritten on `close()`
    if anything was set.

    :Example:

    with PropertiesFileNamespace('build/javacpp.properties') as ns:
        ns.set('javacpp.platform', 'linux-x86_64')
    """

    def __init__(self, path: str):
        super(PropertiesFileNamespace, self).__init__(load_properties_file(path) if exists(path) else None)
        self.path = path
        self._dirty = False

    def set(self, key, value):
        super(PropertiesFileNamespace, self).set(key, value)
        self._dirty = True

    def close(self) -> None:
        if self._dirty:
            write_properties_file(self.path, self._values)
            logvv(f"Wrote {len(self._values)} properties to {self.path}")
            self._dirty = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
