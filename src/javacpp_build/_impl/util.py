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

#
# This module must only import from the standard Python library
#

import os
import errno
import tempfile
from os.path import dirname, exists, isdir, basename


def ensure_dir_exists(path, mode=None):
    """
    Ensures all directories on 'path' exists, creating them first if necessary with os.makedirs().
    """
    if not isdir(path):
        try:
            if mode:
                os.makedirs(path, mode=mode)
            else:
                os.makedirs(path)
        except OSError as e:
            if e.errno == errno.EEXIST and isdir(path):
                # be happy if another thread already created the path
                pass
            else:
                raise e
    return path


# Capture the current umask since there's no way to query it without mutating it.
_current_umask = os.umask(0)
os.umask(_current_umask)


class SafeFileCreation(object):
    """
    Context manager for creating a file that tries hard to handle races between processes/threads
    creating the same file. The file only appears at `path` if the body of the `with`
    statement completed without an exception.

    :Example:

    with SafeFileCreation(dst) as sfc:
        with open(sfc.tmpPath, 'w') as fp:
            fp.write(content)

    """
    def __init__(self, path):
        self.path = path

    def __enter__(self):
        path_dir = dirname(self.path) or '.'
        ensure_dir_exists(path_dir)
        # Temporary file must be on the same file system as self.path for os.replace to be atomic.
        fd, tmp = tempfile.mkstemp(suffix=basename(self.path), dir=path_dir)
        self.tmpFd = fd
        self.tmpPath = tmp
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # Windows will complain about tmp being in use by another process
        # when calling os.replace if we don't close the file descriptor.
        os.close(self.tmpFd)
        if exists(self.tmpPath):
            if exc_value:
                os.remove(self.tmpPath)
            else:
                # Correct the permissions on the temporary file which is created with restrictive permissions
                os.chmod(self.tmpPath, 0o666 & ~_current_umask)
                os.replace(self.tmpPath, self.path)
