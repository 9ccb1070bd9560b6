import os
import tempfile

from javacpp_build._impl.support.timestampfile import DirectorySnapshot, TimeStampFile

_MTIME_NS = 1_600_000_000 * 1_000_000_000


def _write(path, text):
    with open(path, "w") as fp:
        fp.write(text)
    os.utime(path, ns=(_MTIME_NS, _MTIME_NS))


def test_new_and_rewritten_files():
    with tempfile.TemporaryDirectory() as tmp:
        unchanged = os.path.join(tmp, "unchanged.txt")
        rewritten = os.path.join(tmp, "libjniExample.so")
        created = os.path.join(tmp, "sub", "Example.cpp")
        _write(unchanged, "old")
        _write(rewritten, "old")
        before = DirectorySnapshot([tmp])

        # same time stamp as before, as on a file system with coarse time stamps
        _write(rewritten, "generated")
        os.makedirs(os.path.dirname(created))
        _write(created, "generated")
        assert sorted(DirectorySnapshot([tmp]).changed_since(before)) == sorted([rewritten, created])


def test_missing_file():
    with tempfile.TemporaryDirectory() as tmp:
        missing = TimeStampFile(os.path.join(tmp, "missing"))
        assert missing.timestamp is None
        assert not missing.isModifiedSince(None)
        path = os.path.join(tmp, "present")
        _write(path, "x")
        assert TimeStampFile(path).isModifiedSince(missing)
        assert not TimeStampFile(path).isModifiedSince(TimeStampFile(path))


def test_missing_root():
    with tempfile.TemporaryDirectory() as tmp:
        snapshot = DirectorySnapshot([os.path.join(tmp, "does-not-exist")])
        assert snapshot.files == {}
