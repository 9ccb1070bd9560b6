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

from __future__ import annotations

__all__ = ["PROPERTY_PREFIX", "TaskState", "JavaCPPBuildTask"]

from enum import Enum
from typing import Callable, Mapping, Optional

from .task import Task
from ..args import ArgsNamespace
from ...builder import Builder, BuilderException, BuilderRequest, BuildExecutor, CommandLineBuilder
from ...namespace import PropertyNamespace
from ...request import BuildRequest, BuildResult
from ...support.logging import log, log_error, logv
from ...support.system import get_platform

PROPERTY_PREFIX = "javacpp"
"""Prefix of the keys under which resolved builder properties are published."""

BuilderFactory = Callable[[BuilderRequest, BuildExecutor], Builder]


class TaskState(Enum):
    NOT_STARTED = "not started"
    SKIPPED = "skipped"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JavaCPPBuildTask(Task):
    """
    Runs the JavaCPP builder once for a set of build options and publishes the properties
    it resolved into the property namespace of the enclosing build.
    """

    def __init__(self, request: BuildRequest, namespace: PropertyNamespace,
                 builder_factory: BuilderFactory = CommandLineBuilder,
                 executor: Optional[BuildExecutor] = None,
                 name: str = "javacppBuild", args: Optional[ArgsNamespace] = None):
        super(JavaCPPBuildTask, self).__init__(name, args)
        self.request = request
        self.namespace = namespace
        self.builder_factory = builder_factory
        self.executor = executor or BuildExecutor()
        self.state = TaskState.NOT_STARTED
        self.result: Optional[BuildResult] = None

    def __str__(self):
        return f"Building {self.name} with JavaCPP"

    def create_builder(self, request: BuildRequest, host_platform: str) -> Builder:
        """
        Creates the builder for the build options. The builder resolves the property table of
        its request (see :meth:`BuilderRequest.resolve`) before it is returned.
        """
        return self.builder_factory(BuilderRequest(request, host_platform), self.executor)

    def publish(self, properties: Mapping[str, str]) -> None:
        for key in sorted(properties):
            self.namespace.set(f"{PROPERTY_PREFIX}.{key}", properties[key])

    def run(self) -> BuildResult:
        """
        Runs the builder unless the build is skipped.

        Any exception raised while preparing or running the builder propagates unchanged; in that
        case no result is produced and nothing is published.
        """
        assert self.state is not TaskState.RUNNING, f"{self} is already running"
        self.result = None
        request = self.request.copy()
        if request.skip:
            log("Skipping execution of JavaCPP Builder")
            self.state = TaskState.SKIPPED
            self.result = BuildResult.empty()
            return self.result

        self.state = TaskState.RUNNING
        try:
            host_platform = get_platform()
            builder = self.create_builder(request, host_platform)
            log(f'Detected platform "{host_platform}"')
            result = builder.build()
        except BaseException:
            self.state = TaskState.FAILED
            raise

        extension = builder.get_property("platform.extension")
        log(f'Built platform "{builder.get_property("platform")}"'
            + (f' with extension "{extension}"' if extension else ''))
        self.publish(builder.properties)
        result.target_directories = list(request.target_directory or [])
        logv(f"outputFiles: {result.files}")
        self.state = TaskState.SUCCEEDED
        self.result = result
        return result

    def execute(self) -> None:
        try:
            self.run()
        except BuilderException as e:
            log_error(f"{self}: Failed due to error: {e}")
            self.abort(e.exitcode)
