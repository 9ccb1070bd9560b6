import os
import tempfile

import pytest

from javacpp_build import ExtraProperties, PropertiesFileNamespace


def test_extra_properties():
    ns = ExtraProperties({"existing": "1"})
    ns.set("javacpp.platform", "linux-x86_64")
    assert ns["javacpp.platform"] == "linux-x86_64"
    assert "existing" in ns
    assert ns.get("missing") is None
    with pytest.raises(KeyError):
        ns["missing"]
    assert ns.as_dict() == {"existing": "1", "javacpp.platform": "linux-x86_64"}


def test_properties_file_namespace():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "build", "javacpp.properties")
        with PropertiesFileNamespace(path) as ns:
            assert ns.keys() == []
        # nothing was set, nothing is written
        assert not os.path.exists(path)

        with PropertiesFileNamespace(path) as ns:
            ns.set("javacpp.platform", "windows-x86_64")
            ns.set("javacpp.platform.linkpath", "C:\\lib")
        with PropertiesFileNamespace(path) as ns:
            assert ns.get("javacpp.platform") == "windows-x86_64"
            assert ns.get("javacpp.platform.linkpath") == "C:\\lib"
            ns.set("other.step", "done")
        with PropertiesFileNamespace(path) as ns:
            assert sorted(ns.keys()) == ["javacpp.platform", "javacpp.platform.linkpath", "other.step"]
