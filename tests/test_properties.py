import os
import tempfile
import zipfile

import pytest

from javacpp_build._impl.properties import (
    PropertiesParseError,
    find_properties_resource,
    format_properties,
    load_properties_file,
    merge_properties,
    parse_properties,
    write_properties_file,
)


def test_separators_and_comments():
    text = """
    # a comment
    ! another comment
    platform=linux-x86_64
    platform.compiler : g++
    platform.extension   -avx2
    empty=
    spaced   =   value with spaces
    """
    assert parse_properties(text) == {
        "platform": "linux-x86_64",
        "platform.compiler": "g++",
        "platform.extension": "-avx2",
        "empty": "",
        "spaced": "value with spaces",
    }


def test_continuation_lines():
    text = "platform.compiler.default=-O3 \\\n    -march=native \\\n    -fPIC\nnext=1\n"
    assert parse_properties(text) == {
        "platform.compiler.default": "-O3 -march=native -fPIC",
        "next": "1",
    }


def test_escaped_backslash_does_not_continue():
    assert parse_properties("path=C:\\\\\nnext=1") == {"path": "C:\\", "next": "1"}


def test_escapes():
    props = parse_properties("key\\ with\\ spaces=a\\tb\nunicode=\\u00e9t\\u00e9\ncolon\\:key=x=y\n")
    assert props == {"key with spaces": "a\tb", "unicode": "été", "colon:key": "x=y"}


def test_later_definition_wins():
    assert parse_properties("a=1\na=2\n") == {"a": "2"}


def test_malformed_unicode_escape():
    with pytest.raises(PropertiesParseError) as excinfo:
        parse_properties("ok=1\nbad=\\u12\n", source="test.properties")
    assert excinfo.value.line_number == 2
    assert "test.properties:2" in str(excinfo.value)


def test_format_is_parsed_back():
    props = {
        "platform": "windows-x86_64",
        "platform.includepath": "C:\\include;D:\\include",
        "key with spaces": " leading space",
        "multi": "line\nbreak",
        "snowman": "\u2603",
        "assign": "a=b:c#d",
    }
    text = format_properties(props)
    assert text.splitlines()[0].startswith("assign=")
    assert parse_properties(text) == props


def test_write_and_load_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "sub", "out.properties")
        write_properties_file(path, {"javacpp.platform": "linux-arm64"})
        assert load_properties_file(path) == {"javacpp.platform": "linux-arm64"}


def test_find_resource_in_directory_and_jar():
    with tempfile.TemporaryDirectory() as tmp:
        empty_dir = os.path.join(tmp, "empty")
        os.makedirs(empty_dir)
        jar = os.path.join(tmp, "presets.jar")
        with zipfile.ZipFile(jar, "w") as zf:
            zf.writestr("org/bytedeco/javacpp/properties/android-arm64.properties", "platform.compiler=clang\n")
        found = find_properties_resource("android-arm64", [empty_dir, os.path.join(tmp, "missing.jar"), jar])
        assert found is not None
        source, props = found
        assert source.startswith(jar + "!/")
        assert props == {"platform.compiler": "clang"}

        props_dir = os.path.join(tmp, "classes", "org", "bytedeco", "javacpp", "properties")
        os.makedirs(props_dir)
        with open(os.path.join(props_dir, "android-arm64.properties"), "w") as fp:
            fp.write("platform.compiler=gcc\n")
        # first class path entry wins
        _, props = find_properties_resource("android-arm64", [os.path.join(tmp, "classes"), jar])
        assert props == {"platform.compiler": "gcc"}

        assert find_properties_resource("ios-arm64", [os.path.join(tmp, "classes"), jar]) is None


def test_merge_order():
    with tempfile.TemporaryDirectory() as tmp:
        jar = os.path.join(tmp, "presets.jar")
        with zipfile.ZipFile(jar, "w") as zf:
            zf.writestr("org/bytedeco/javacpp/properties/linux-arm64.properties", "a=resource\nb=resource\nc=resource\n")
        property_file = os.path.join(tmp, "file.properties")
        with open(property_file, "w") as fp:
            fp.write("b=file\nc=file\n")
        merged, base = merge_properties("linux-x86_64", resource="linux-arm64", property_file=property_file,
                                        keys_and_values={"c": "explicit"}, class_path=[jar])
        assert merged == {"platform": "linux-arm64", "a": "resource", "b": "file", "c": "explicit"}
        assert base == {"platform": "linux-arm64", "a": "resource", "b": "resource", "c": "resource"}


def test_merge_without_sources():
    merged, base = merge_properties("macosx-arm64")
    assert merged == {"platform": "macosx-arm64"}
    assert base == merged


def test_missing_resource_only_sets_platform():
    merged, _ = merge_properties("linux-x86_64", resource="linux-ppc64le", class_path=[])
    assert merged == {"platform": "linux-ppc64le"}


def test_host_platform_resource_is_loaded_by_default():
    with tempfile.TemporaryDirectory() as tmp:
        jar = os.path.join(tmp, "javacpp.jar")
        with zipfile.ZipFile(jar, "w") as zf:
            zf.writestr("org/bytedeco/javacpp/properties/linux-x86_64.properties",
                        "platform.compiler=g++\nplatform.link.prefix=lib\n")
        merged, base = merge_properties("linux-x86_64", keys_and_values={"custom": "1"}, class_path=[jar])
        assert merged == {"platform": "linux-x86_64", "platform.compiler": "g++", "platform.link.prefix": "lib",
                          "custom": "1"}
        assert base == {"platform": "linux-x86_64", "platform.compiler": "g++", "platform.link.prefix": "lib"}
