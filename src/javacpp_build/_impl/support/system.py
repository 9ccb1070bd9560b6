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

__all__ = [
    "get_os",
    "get_arch",
    "get_platform",
    "is_darwin",
    "is_linux",
    "is_windows",
]

import os, platform, sys

from .logging import abort, logv
from .options import _opts


def is_darwin() -> bool:
    return sys.platform.startswith("darwin")


def is_linux() -> bool:
    return sys.platform.startswith("linux")


def is_windows() -> bool:
    return sys.platform.startswith("win32") or sys.platform.startswith("cygwin")


def get_os() -> str:
    """
    Get the operating system part of a platform classifier.
    """
    if is_darwin():
        return "macosx"
    elif is_linux():
        return "linux"
    elif is_windows():
        return "windows"
    elif sys.platform.startswith("freebsd"):
        return "freebsd"
    else:
        return abort("Unknown operating system " + sys.platform)


def _arch_for_machine(machine: str) -> str:
    machine = machine.lower()
    if machine in ["amd64", "x86_64", "x86-64", "i86pc"]:
        return "x86_64"
    if machine in ["i386", "i486", "i586", "i686", "x86"]:
        return "x86"
    if machine in ["aarch64", "arm64", "armv8"]:
        return "arm64"
    if machine.startswith("arm"):
        return "armhf"
    if machine in ["ppc64le", "powerpc64le"]:
        return "ppc64le"
    if machine in ["ppc64", "powerpc64"]:
        return "ppc64"
    if machine in ["riscv64", "s390x", "mips64el"]:
        return machine
    return abort("unknown or unsupported architecture: os=" + get_os() + ", machine=" + machine)


def get_arch() -> str:
    """
    Get the architecture part of a platform classifier.
    """
    return _arch_for_machine(platform.machine())


def get_platform() -> str:
    """
    Gets the classifier of the host platform, e.g. ``linux-x86_64``. The ``--platform``
    option and the ``JAVACPP_PLATFORM`` environment variable take precedence over detection.
    """
    override = _opts.platform or os.environ.get("JAVACPP_PLATFORM")
    if override:
        logv(f"Using platform override {override}")
        return override
    return get_os() + "-" + get_arch()
