import sys

from javacpp_build import BuildExecutor
from javacpp_build._impl.support.processes import run


def test_undecodable_output_is_drained():
    # more than a pipe buffer of bytes that are not UTF-8
    script = "import sys; sys.stdout.buffer.write(b'\\xff\\n' * 200000); sys.stdout.flush()"
    lines = []
    rc = run([sys.executable, "-c", script], out=lines.append, err=lines.append, timeout=60)
    assert rc == 0
    assert len(lines) == 200000
    assert lines[0] == "\ufffd\n"


def test_executor_returns_exit_code():
    script = "import sys; sys.stderr.buffer.write(b'caf\\xe9\\n'); sys.exit(3)"
    assert BuildExecutor(timeout=60).execute([sys.executable, "-c", script]) == 3
