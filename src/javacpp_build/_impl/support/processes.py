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

__all__ = [
    "ERROR_TIMEOUT",
    "run",
    "list_to_cmd_line",
    "terminate_subprocesses",
    "waitOn",
]

import os, shlex, signal, subprocess, time
from threading import Thread
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .logging import log, log_error, logv, logvv
from .options import _opts
from .system import is_windows

Pid = int
Signal = int
Args = Sequence[str]
Process = subprocess.Popen
ReturnCode = int
RedirectStream = Union[None, int, Callable[[str], None]]

# Makes the current subprocess accessible to the abort() function
_currentSubprocesses: List[Tuple[Process, Args]] = []

ERROR_TIMEOUT = 0x700000000  # not 32 bits


def terminate_subprocesses(killsig: Signal = signal.SIGTERM) -> None:
    for p, args in _currentSubprocesses:
        if p.poll() is None:
            if is_windows():
                p.terminate()
            else:
                _kill_process(p.pid, killsig)
            time.sleep(0.1)
        if p.poll() is None:
            try:
                if is_windows():
                    p.terminate()
                else:
                    _kill_process(p.pid, signal.SIGKILL)
            except OSError as e:
                if p.poll() is None:
                    log_error(f"error while killing subprocess {p.pid} \"{' '.join(args)}\": {e}")


def _kill_process(pid: Pid, sig: Signal) -> bool:
    """
    Sends the signal `sig` to the process identified by `pid`. If `pid` is a process group
    leader, then signal is sent to the process group id.
    """
    try:
        logvv(f"[{os.getpid()} sending {sig} to {pid}]")
        pgid = os.getpgid(pid)
        if pgid == pid:
            os.killpg(pgid, sig)
        else:
            os.kill(pid, sig)
        return True
    except OSError as e:
        log("Error killing subprocess " + str(pid) + ": " + str(e))
        return False


def _waitWithTimeout(process: Process, cmd_line: str, timeout: Optional[float]) -> ReturnCode:
    try:
        return process.wait(timeout)
    except subprocess.TimeoutExpired:
        log_error(f"Process timed out after {timeout} seconds: {cmd_line}")
        process.kill()
        return ERROR_TIMEOUT


def _addSubprocess(p: Process, args: Args) -> Tuple[Process, Args]:
    entry = (p, args)
    logvv(f"[{os.getpid()}: started subprocess {p.pid}: {args}]")
    _currentSubprocesses.append(entry)
    return entry


def _removeSubprocess(entry: Optional[Tuple[Process, Args]]) -> None:
    if entry and entry in _currentSubprocesses:
        _currentSubprocesses.remove(entry)


def waitOn(p: Process) -> ReturnCode:
    if is_windows():
        # on windows use a poll loop, otherwise signal does not get handled
        retcode = None
        while retcode is None:
            retcode = p.poll()
            time.sleep(0.05)
    else:
        retcode = p.wait()
    return retcode


def _get_new_progress_group_args():
    """
    Gets a tuple containing the `start_new_session` and `creationflags` parameters to subprocess.Popen
    required to create a subprocess that can be killed via os.killpg without killing the
    process group of the parent process.
    """
    if is_windows():
        return False, subprocess.CREATE_NEW_PROCESS_GROUP
    return True, 0


def list_to_cmd_line(args: Args) -> str:
    return subprocess.list2cmdline(args) if is_windows() else ' '.join(shlex.quote(arg) for arg in args)


def run(
    args: List[str],
    out: RedirectStream = None,
    err: RedirectStream = None,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
    env: Optional[dict] = None,
) -> ReturnCode:
    """
    Run a command in a subprocess, wait for it to complete and return the exit status of the process.
    If the command times out, it kills the subprocess and returns `ERROR_TIMEOUT`.

    :param out: Callable or any value accepted by :meth:`subprocess.Popen`. For callables, output is redirected (in a
                separate thread) calling it once per output line.
                Other values are passed on as-is.
    :param err: See out parameter
    """
    assert isinstance(args, list), "'args' must be a list: " + str(args)
    for idx, arg in enumerate(args):
        if not isinstance(arg, str):
            raise TypeError(f'Type of argument {idx} is not str but {type(arg).__name__}: {arg}\nArguments: {args}')

    if env is None:
        env = os.environ.copy()

    cmd_line = list_to_cmd_line(args)
    if _opts.verbose or _opts.very_verbose:
        s = ''
        if cwd is not None:
            s += '# Directory: ' + os.path.abspath(cwd) + os.linesep
        env_diff = [(k, env[k]) for k in env if os.environ.get(k) != env[k]]
        if env_diff:
            s += 'env ' + ' '.join([n + '=' + shlex.quote(v) for n, v in env_diff]) + ' \\' + os.linesep
        s += cmd_line
        logv(s)

    if timeout is None and _opts.ptimeout:
        timeout = _opts.ptimeout

    def redirect(stream, f):
        for line in iter(stream.readline, b''):
            f(line.decode(errors="replace"))
        stream.close()

    sub = None
    try:
        if timeout or is_windows():
            start_new_session, creationflags = _get_new_progress_group_args()
        else:
            start_new_session, creationflags = (False, 0)
        stdout = out if not callable(out) else subprocess.PIPE
        stderr = err if not callable(err) else subprocess.PIPE

        p = subprocess.Popen(cmd_line if is_windows() else args, cwd=cwd, stdout=stdout, stderr=stderr,
                             start_new_session=start_new_session, creationflags=creationflags, env=env)
        sub = _addSubprocess(p, args)
        joiners = []
        if callable(out):
            t = Thread(target=redirect, args=(p.stdout, out))
            # Don't make the reader thread a daemon otherwise output can be dropped
            t.start()
            joiners.append(t)
        if callable(err):
            t = Thread(target=redirect, args=(p.stderr, err))
            t.start()
            joiners.append(t)
        try:
            if not timeout:
                retcode = waitOn(p)
            else:
                retcode = _waitWithTimeout(p, cmd_line, timeout)
        except KeyboardInterrupt:
            if is_windows():
                p.terminate()
            else:
                _kill_process(p.pid, signal.SIGINT)
            raise
        while any([t.is_alive() for t in joiners]):
            # Need to use timeout otherwise all signals (including CTRL-C) are blocked
            for t in joiners:
                t.join(10)
    finally:
        _removeSubprocess(sub)
    return retcode
