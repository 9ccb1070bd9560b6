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
from abc import ABCMeta, abstractmethod
from typing import Optional

from ..args import ArgsNamespace
from ...support.logging import nyi

__all__ = ["Task", "TaskAbortException"]


class TaskAbortException(Exception):
    def __init__(self, code):
        super(TaskAbortException, self).__init__(code)
        self.code = code


class Task(object, metaclass=ABCMeta):
    """A task executed during a build."""

    name: str
    args: Optional[ArgsNamespace]

    def __init__(self, name: str, args: Optional[ArgsNamespace] = None):
        """
        :param name: the name under which the enclosing build knows this task
        :param args: global options of the invoking command, if any
        """
        self.name = name
        self.args = args
        self._exitcode = 0

    def __str__(self) -> str:
        return nyi('__str__', self)

    def __repr__(self) -> str:
        return str(self)

    def abort(self, code):
        self._exitcode = code
        raise TaskAbortException(code)

    @property
    def exitcode(self) -> int:
        return self._exitcode

    @abstractmethod
    def execute(self) -> None:
        """Executes this task."""
