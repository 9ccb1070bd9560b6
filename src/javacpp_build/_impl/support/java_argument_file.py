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
Java argument files, passed to the launcher as ``java @file`` to work around command line length limits.

See the JAVA COMMAND-LINE ARGUMENT FILES section in ``man 1 java``.
"""

__all__ = [
    "escape_argument",
    "write_argument_file",
]

import os
from typing import Sequence

_NEEDS_QUOTES = frozenset(" '\"\n\r\t\f")

# Inside quotes backslash starts an escape sequence, so it has to be translated first
_QUOTED_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
})


def escape_argument(arg: str) -> str:
    """
    Escapes a single argument so that it can be put on its own line of an argument file.
    """
    if not arg:
        # the launcher drops empty unquoted arguments
        return '""'
    if _NEEDS_QUOTES.isdisjoint(arg):
        return arg
    return '"' + arg.translate(_QUOTED_ESCAPES) + '"'


def write_argument_file(path: str, args: Sequence[str]) -> str:
    """
    Writes `args` to `path`, one escaped argument per line.

    :return: the launcher argument referring to the file
    """
    with open(path, "w") as fp:
        for arg in args:
            fp.write(escape_argument(arg))
            fp.write(os.linesep)
    return "@" + path
