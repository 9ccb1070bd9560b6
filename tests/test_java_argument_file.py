import os
import tempfile

from javacpp_build._impl.support import java_argument_file


def test_no_escape():
    for arg in [
        "com.example.*",
        "-Dplatform=linux-x86_64",
        "üöä",
        "-Xcompiler",
        "C:\\include",
        "@Platform",
    ]:
        assert java_argument_file.escape_argument(arg) == arg


def test_escape():
    for arg, escaped_without_quotes in [
        ("", ""),
        (" ", " "),
        ("/path with space", "/path with space"),
        ("C:\\Program Files\\Java", "C:\\\\Program Files\\\\Java"),
        ("text 'with' quote", "text \\'with\\' quote"),
        ('-Dkey="value"', '-Dkey=\\"value\\"'),
        ("\t", "\\t"),
        ("\n", "\\n"),
        ("\r", "\\r"),
        ("\f", "\\f"),
    ]:
        assert java_argument_file.escape_argument(arg) == f'"{escaped_without_quotes}"', arg


def test_write_argument_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "builder.args")
        ref = java_argument_file.write_argument_file(path, ["-cp", "/a b", "", "Main"])
        assert ref == "@" + path
        with open(path) as fp:
            assert fp.read().splitlines() == ["-cp", '"/a b"', '""', "Main"]
