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
The javacpp_build package.

Public API of the JavaCPP build task. The implementation lives in `_impl`.

DO NOT WRITE IMPLEMENTATION CODE HERE.
"""

from ._impl.request import PLATFORM_PATH_CATEGORIES, BuildRequest, BuildResult
from ._impl.builder import (
    BUILDER_MAIN_CLASS,
    Builder,
    BuilderException,
    BuilderRequest,
    BuildExecutor,
    CommandLineBuilder,
)
from ._impl.build.tasks import PROPERTY_PREFIX, JavaCPPBuildTask, TaskState
from ._impl.namespace import ExtraProperties, PropertiesFileNamespace, PropertyNamespace
from ._impl.properties import PropertiesParseError, merge_properties
from ._impl.config import ConfigurationError, load_build_description
from ._impl.main import main

__all__ = [
    "PLATFORM_PATH_CATEGORIES",
    "BuildRequest",
    "BuildResult",
    "BUILDER_MAIN_CLASS",
    "Builder",
    "BuilderException",
    "BuilderRequest",
    "BuildExecutor",
    "CommandLineBuilder",
    "PROPERTY_PREFIX",
    "JavaCPPBuildTask",
    "TaskState",
    "ExtraProperties",
    "PropertiesFileNamespace",
    "PropertyNamespace",
    "PropertiesParseError",
    "merge_properties",
    "ConfigurationError",
    "load_build_description",
    "main",
]
