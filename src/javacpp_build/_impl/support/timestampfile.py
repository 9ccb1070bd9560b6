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
from typing import Dict, List, Optional, Sequence, Tuple
import os
import os.path as ospath

Path = str


class TimeStampFile:
    """
    Represents a file and its modification time stamp at the time the TimeStampFile is created.

    Coarse file system time stamps can give a file rewritten within the same tick the old
    time stamp, so the size and inode are recorded along with it.
    """

    path: Path
    timestamp: Optional[float]
    signature: Optional[Tuple[int, int, int]]

    def __init__(self, path: Path):
        assert isinstance(path, str), path + ' # type=' + str(type(path))
        self.path = path
        try:
            st = os.stat(path)
        except FileNotFoundError:
            self.timestamp = None
            self.signature = None
        else:
            self.timestamp = st.st_mtime
            self.signature = (st.st_mtime_ns, st.st_size, st.st_ino)

    def isModifiedSince(self, arg: Optional[TimeStampFile]) -> bool:
        """
        Returns True if self represents an existing file that did not exist when `arg` was taken,
        or whose time stamp, size or inode differ from those recorded in `arg`.
        """
        if self.signature is None:
            return False
        if arg is None or arg.signature is None:
            return True
        return arg.signature != self.signature

    def __str__(self):
        return self.path


class DirectorySnapshot:
    """
    The time stamps of all files below a set of directories, used to find the files a
    subprocess created or modified.
    """

    def __init__(self, roots: Sequence[Path]):
        self.roots = list(roots)
        self.files: Dict[Path, TimeStampFile] = {}
        for root in self.roots:
            for dirpath, _, filenames in os.walk(root):
                for name in sorted(filenames):
                    path = ospath.join(dirpath, name)
                    self.files[path] = TimeStampFile(path)

    def changed_since(self, before: DirectorySnapshot) -> List[Path]:
        """
        Gets the files of this snapshot that do not exist in `before` or were modified since.
        """
        return [path for path, ts in self.files.items() if ts.isModifiedSince(before.files.get(path))]
