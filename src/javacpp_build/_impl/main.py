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
The ``javacpp-build`` command.
"""

from __future__ import annotations

__all__ = ["main", "parse_request"]

import os
import shlex
import sys
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from typing import Any, Dict, List, Optional, Tuple

from .build.args import ArgsNamespace
from .build.tasks import JavaCPPBuildTask, TaskAbortException
from .config import ConfigurationError, load_build_description
from .namespace import ExtraProperties, PropertiesFileNamespace
from .properties import PropertiesParseError
from .request import BuildRequest
from .support.logging import abort, log
from .support.options import set_opts

# argparse destinations that are not BuildRequest options
_GLOBAL_OPTIONS = frozenset(["verbose", "very_verbose", "warn", "quiet", "platform", "javacpp_jar",
                             "java_home", "ptimeout", "config", "export_properties", "print_properties"])


def _path_list(value: str) -> List[str]:
    # an empty value is an explicitly empty list
    return [p for p in value.split(os.pathsep) if p]


def _key_value(value: str) -> Tuple[str, str]:
    if '=' not in value:
        raise ArgumentTypeError(f"expected <key>=<value>, got '{value}'")
    key, val = value.split('=', 1)
    return key, val


def _argparser() -> ArgumentParser:
    parser = ArgumentParser(prog='javacpp-build',
                            description='Generates, compiles and packages the JNI code of Java classes with the JavaCPP Builder.')
    parser.add_argument('-v', action='store_true', dest='verbose', help='enable verbose output')
    parser.add_argument('-V', action='store_true', dest='very_verbose', help='enable very verbose output')
    parser.add_argument('--no-warning', action='store_false', dest='warn', help='disable warning messages')
    parser.add_argument('--quiet', action='store_true', help='disable log messages')
    parser.add_argument('--platform', help='override the detected host platform', metavar='<platform>')
    parser.add_argument('--javacpp-jar', help='location of javacpp.jar (default: $JAVACPP_JAR)', metavar='<path>')
    parser.add_argument('--java-home', help='JDK used to run the builder (default: $JAVA_HOME)', metavar='<path>')
    parser.add_argument('--ptimeout', type=int, default=0, help='timeout in seconds for subprocesses', metavar='<secs>')
    parser.add_argument('--config', help='TOML build description with a [javacpp] table', metavar='<file>')
    parser.add_argument('--export-properties', help='also write the published properties to this file', metavar='<file>')
    parser.add_argument('--print-properties', action='store_true', help='print the published properties')

    group = parser.add_argument_group('build options')
    group.add_argument('-cp', '--classpath', dest='class_path', action='append', type=_path_list, metavar='<path>',
                       help='load user classes from path')
    for category, what in [('include', 'header files'), ('build', 'build tools'), ('link', 'libraries'),
                           ('preload', 'preloaded libraries'), ('resource', 'resources'), ('executable', 'executables')]:
        group.add_argument(f'--{category}-path', dest=f'{category}_path', action='append', type=_path_list,
                           metavar='<path>', help=f'add to the "platform.{category}path" property ({what})')
        if category in ('include', 'build', 'link', 'preload'):
            group.add_argument(f'--{category}-resource', dest=f'{category}_resource', action='append', type=_path_list,
                               metavar='<path>', help=f'add to the "platform.{category}resource" property')
    group.add_argument('--encoding', help='character encoding used for input and output files', metavar='<name>')
    group.add_argument('-d', '--output-directory', help='output all generated files to directory', metavar='<dir>')
    group.add_argument('-o', '--output-name', help='output everything in a file named after name', metavar='<name>')
    group.add_argument('--clean', action='store_const', const=True, help='delete the output directory before generating anything in it')
    group.add_argument('--no-generate', dest='generate', action='store_const', const=False, help='do not generate C++ source files')
    group.add_argument('--no-compile', dest='compile', action='store_const', const=False, help='do not compile or delete the generated C++ source files')
    group.add_argument('--no-delete', dest='delete_jni_files', action='store_const', const=False, help='do not delete generated C++ JNI files after compilation')
    group.add_argument('--header', action='store_const', const=True, help='generate header file with declarations of callbacks functions')
    group.add_argument('--copy-libs', action='store_const', const=True, help='copy to output directory dependent libraries (link and preload)')
    group.add_argument('--copy-resources', action='store_const', const=True, help='copy to output directory resources listed in properties')
    group.add_argument('--config-directory', help='also create config files for GraalVM native-image in directory', metavar='<dir>')
    group.add_argument('--jar-prefix', help='also create a JAR file named "<prefix>-<platform>.jar"', metavar='<prefix>')
    group.add_argument('--properties', help='load all platform properties from resource', metavar='<resource>')
    group.add_argument('--property-file', help='load all platform properties from file', metavar='<file>')
    group.add_argument('-D', dest='property_keys_and_values', action='append', type=_key_value, metavar='<property>=<value>',
                       help='set platform property to value')
    group.add_argument('--build-command', type=shlex.split, help='execute this command instead of JavaCPP itself', metavar='<command>')
    group.add_argument('--target-directory', action='append', help='source directory of Java files generated by the build command', metavar='<dir>')
    group.add_argument('--working-directory', help='working directory of the build subprocess', metavar='<dir>')
    group.add_argument('--env', dest='environment_variables', action='append', type=_key_value, metavar='<name>=<value>',
                       help='add an environment variable to the build subprocess')
    group.add_argument('-X', '--compiler-option', dest='compiler_options', action='append', metavar='<option>',
                       help='pass option directly to the compiler')
    group.add_argument('--skip', action='store_const', const=True, help='skip the execution')
    group.add_argument('class_or_package_names', nargs='*', metavar='<class or package>',
                       help='process only these classes or packages (suffixed with .* or .**)')
    return parser


def _env_flag(name: str) -> bool:
    value = os.environ.get(name, 'false').lower()
    if value in ('false', '0', 'no', ''):
        return False
    if value in ('true', '1', 'yes'):
        return True
    raise ValueError(f"Unexpected value for {name}: {value}")


def _command_line_options(parsed: Namespace) -> Dict[str, Any]:
    options = {}
    for name, value in vars(parsed).items():
        if name in _GLOBAL_OPTIONS or value is None:
            continue
        if name == 'class_or_package_names' and not value:
            continue
        if name in ('property_keys_and_values', 'environment_variables'):
            value = dict(value)
        elif name == 'class_path' or name.endswith('_path') or name.endswith('_resource'):
            value = [p for paths in value for p in paths]
        options[name] = value
    return options


def parse_request(argv: List[str]) -> Tuple[ArgsNamespace, BuildRequest, Namespace]:
    """
    Parses the command line `argv` into the global options and the build request. Options given on the
    command line override those of the ``--config`` build description.
    """
    parsed = _argparser().parse_args(argv)
    opts = ArgsNamespace(
        verbose=parsed.verbose or _env_flag('JAVACPP_VERBOSE'),
        very_verbose=parsed.very_verbose,
        warn=parsed.warn,
        quiet=parsed.quiet,
        platform=parsed.platform,
        javacpp_jar=parsed.javacpp_jar,
        java_home=parsed.java_home,
        ptimeout=parsed.ptimeout,
    )
    options = load_build_description(parsed.config) if parsed.config else {}
    options.update(_command_line_options(parsed))
    return opts, BuildRequest.from_mapping(options), parsed


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        opts, request, parsed = parse_request(argv)
    except (ConfigurationError, ValueError, OSError) as e:
        return abort(str(e))
    set_opts(opts)

    namespace = PropertiesFileNamespace(parsed.export_properties) if parsed.export_properties else ExtraProperties()
    task = JavaCPPBuildTask(request, namespace, args=opts)
    try:
        task.execute()
    except TaskAbortException as e:
        return e.code
    except (PropertiesParseError, OSError) as e:
        return abort(str(e))
    if isinstance(namespace, PropertiesFileNamespace):
        namespace.close()
    if parsed.print_properties:
        for key in sorted(namespace.keys()):
            log(f"{key}={namespace.get(key)}")
    return task.exitcode


def _main_wrapper():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        abort(1)
