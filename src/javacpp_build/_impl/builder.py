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
The boundary to the JavaCPP builder that generates, compiles and packages the native code.
"""

from __future__ import annotations

__all__ = [
    "BUILDER_MAIN_CLASS",
    "BuilderException",
    "BuilderRequest",
    "Builder",
    "BuildExecutor",
    "CommandLineBuilder",
]

import os
import tempfile
from abc import ABCMeta, abstractmethod
from os.path import exists, isdir, join
from typing import Dict, List, Optional, Sequence

from .properties import join_path_list, merge_properties
from .request import BuildRequest, BuildResult
from .support import java_argument_file
from .support.logging import log, log_error, logv, logvv
from .support.options import _opts
from .support.processes import ERROR_TIMEOUT, list_to_cmd_line, run
from .support.system import is_windows
from .support.timestampfile import DirectorySnapshot

BUILDER_MAIN_CLASS = "org.bytedeco.javacpp.tools.Builder"

# Command lines longer than this are passed to java in an argument file
_MAX_COMMAND_LINE = 8000 if is_windows() else 100000


class BuilderException(Exception):
    """A failure of the delegated builder."""

    def __init__(self, message: str, exitcode: int = 1):
        super(BuilderException, self).__init__(message)
        self.exitcode = exitcode


class BuilderRequest(object):
    """
    What the delegated builder is asked to do: a private copy of the build options, the
    merged property table and the ``platform.<category>`` lists registered on top of it.

    Until :meth:`resolve` is called the table only holds the host platform. A
    :class:`Builder` resolves its request when it is created, because only the builder
    knows where the platform property resources live.
    """

    def __init__(self, options: BuildRequest, host_platform: str):
        self.options = options.copy()
        self.host_platform = host_platform
        self.properties: Dict[str, str] = {"platform": host_platform}
        self.resource_properties: Dict[str, str] = {}
        self.platform_paths: Dict[str, List[str]] = {}

    def resolve(self, class_path: Sequence[str]) -> None:
        """
        Merges the property sources of the options (see :func:`merge_properties`), looking up
        the platform property resource on `class_path`, then registers each configured path or
        resource category as a ``platform.<category>`` property on top of them.
        """
        options = self.options
        self.properties, self.resource_properties = merge_properties(
            self.host_platform,
            resource=options.properties,
            property_file=options.property_file,
            keys_and_values=options.property_keys_and_values,
            class_path=class_path,
        )
        self.platform_paths = {}
        for name, values in options.platform_path_properties().items():
            self.add_property(name, values)

    def add_property(self, name: str, values: Optional[List[str]]) -> None:
        """
        Registers a path list property. None leaves the property untouched so that the
        builder falls back to its own default.
        """
        if values is None:
            return
        self.platform_paths[name] = list(values)
        self.properties[name] = join_path_list(values)

    def get_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(name, default)

    def __repr__(self):
        return f"BuilderRequest(platform={self.properties.get('platform')!r}, classes={self.options.class_or_package_names!r})"


class BuildExecutor(object):
    """
    Runs the commands of a builder, echoing their output to the console.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def execute(self, command: List[str], cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> int:
        log(list_to_cmd_line(command))
        out = lambda line: log(line.rstrip())
        err = lambda line: log_error(line.rstrip())
        rc = run(command, out=out, err=err, cwd=cwd, env=env, timeout=self.timeout)
        if rc == ERROR_TIMEOUT:
            log_error(f"Timed out after {self.timeout} seconds: {command[0]}")
        return rc


class Builder(object, metaclass=ABCMeta):
    """
    A builder that turns the classes of a request into native libraries.
    A builder is created for one request and built at most once.
    """

    def __init__(self, request: BuilderRequest, executor: BuildExecutor):
        self.request = request
        self.executor = executor
        request.resolve(self.resource_class_path())

    def resource_class_path(self) -> List[str]:
        """The class path searched for the platform property resource."""
        return list(self.request.options.class_path or [])

    @property
    def properties(self) -> Dict[str, str]:
        """The final property table of this builder."""
        return self.request.properties

    def get_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(name, default)

    @abstractmethod
    def build(self) -> BuildResult:
        """
        Runs the build.

        :raises BuilderException: if the build failed
        """


class CommandLineBuilder(Builder):
    """Encapsulates access to the JavaCPP Builder through its ``java`` command line.

    Generation, compilation and packaging are all done by the Java process. The
    property table is resolved here and handed over as ``-D`` options.
    """

    def __init__(self, request: BuilderRequest, executor: BuildExecutor,
                 javacpp_jar: Optional[str] = None, java_home: Optional[str] = None):
        self._javacpp_jar = javacpp_jar
        self._java_home = java_home
        super(CommandLineBuilder, self).__init__(request, executor)

    def __str__(self):
        return f"JavaCPP Builder for {self.get_property('platform')}"

    def java_executable(self) -> str:
        java_home = self._java_home or _opts.java_home or os.environ.get("JAVA_HOME")
        exe = "java.exe" if is_windows() else "java"
        if java_home:
            return join(java_home, "bin", exe)
        return exe

    def _javacpp_jar_location(self) -> Optional[str]:
        return self._javacpp_jar or _opts.javacpp_jar or os.environ.get("JAVACPP_JAR")

    def javacpp_jar(self) -> str:
        jar = self._javacpp_jar_location()
        if not jar:
            raise BuilderException("The location of javacpp.jar is unknown, use --javacpp-jar or set JAVACPP_JAR")
        if not exists(jar):
            raise BuilderException(f"javacpp.jar not found: {jar}")
        return jar

    def class_path(self) -> List[str]:
        return [self.javacpp_jar()] + list(self.request.options.class_path or [])

    def resource_class_path(self) -> List[str]:
        # The platform properties ship in javacpp.jar, which comes first on the java class path too
        jar = self._javacpp_jar_location()
        jars = [jar] if jar and exists(jar) else []
        return jars + super(CommandLineBuilder, self).resource_class_path()

    def builder_arguments(self) -> List[str]:
        """
        Gets the arguments of the JavaCPP Builder main class for the request.
        """
        options = self.request.options
        args = []
        if options.class_path:
            args += ["-classpath", os.pathsep.join(options.class_path)]
        if options.encoding is not None:
            args += ["-encoding", options.encoding]
        if options.output_directory is not None:
            args += ["-d", options.output_directory]
        if options.output_name is not None:
            args += ["-o", options.output_name]
        if options.clean:
            args.append("-clean")
        if not options.generate:
            args.append("-nogenerate")
        if not options.compile:
            args.append("-nocompile")
        if not options.delete_jni_files:
            args.append("-nodelete")
        if options.header:
            args.append("-header")
        if options.copy_libs:
            args.append("-copylibs")
        if options.copy_resources:
            args.append("-copyresources")
        if options.config_directory is not None:
            args += ["-configdir", options.config_directory]
        if options.jar_prefix is not None:
            args += ["-jarprefix", options.jar_prefix]
        resource = options.properties if options.properties is not None else self.request.resource_properties.get("platform")
        if resource is not None:
            args += ["-properties", resource]
        for key in sorted(self.properties):
            value = self.properties[key]
            if self.request.resource_properties.get(key) != value:
                args.append(f"-D{key}={value}")
        for option in options.compiler_options or []:
            args += ["-Xcompiler", option]
        args += options.class_or_package_names or []
        return args

    def command_line(self, argument_file_dir: Optional[str] = None) -> List[str]:
        """
        Gets the java command line running the builder. If the command line is too long and
        `argument_file_dir` is given, the arguments are moved into a Java argument file there.
        """
        args = ["-cp", os.pathsep.join(self.class_path()), BUILDER_MAIN_CLASS] + self.builder_arguments()
        if argument_file_dir is not None and len(list_to_cmd_line(args)) > _MAX_COMMAND_LINE:
            argfile = join(argument_file_dir, "javacpp-builder.args")
            args = [java_argument_file.write_argument_file(argfile, args)]
            logvv(f"Builder arguments written to {argfile}")
        return [self.java_executable()] + args

    def output_roots(self) -> List[str]:
        options = self.request.options
        if options.output_directory is not None:
            roots = [options.output_directory]
        else:
            roots = [e for e in options.class_path or [] if isdir(e)]
        if options.config_directory is not None:
            roots.append(options.config_directory)
        return roots

    def build_command_environment(self) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(self.request.options.environment_variables or {})
        env["BUILD_PATH"] = self.get_property("platform.buildpath", "")
        env["BUILD_PATH_SEPARATOR"] = os.pathsep
        env["PLATFORM"] = self.get_property("platform", "")
        for var, name in [("PLATFORM_ROOT", "platform.root"), ("PLATFORM_COMPILER", "platform.compiler")]:
            value = self.get_property(name)
            if value:
                env[var] = value
        return env

    def _execute(self, command: List[str], env: Dict[str, str]) -> None:
        rc = self.executor.execute(command, cwd=self.request.options.working_directory, env=env)
        if rc != 0:
            raise BuilderException(f"Process exited with an error: {rc}", exitcode=rc)

    def build(self) -> BuildResult:
        options = self.request.options
        if options.build_command:
            logv(f"Executing build command instead of {BUILDER_MAIN_CLASS}")
            self._execute(list(options.build_command), self.build_command_environment())
            return BuildResult(properties=dict(self.properties))

        env = os.environ.copy()
        env.update(options.environment_variables or {})
        roots = self.output_roots()
        before = DirectorySnapshot(roots)
        with tempfile.TemporaryDirectory(prefix="javacpp-build.") as tmp:
            self._execute(self.command_line(argument_file_dir=tmp), env)
        files = DirectorySnapshot(roots).changed_since(before)
        return BuildResult(files=files, properties=dict(self.properties))
