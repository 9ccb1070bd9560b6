from javacpp_build._impl.support import system
from javacpp_build._impl.support.options import get_opts


def test_arch_names():
    for machine, arch in [
        ("x86_64", "x86_64"),
        ("AMD64", "x86_64"),
        ("i686", "x86"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("armv7l", "armhf"),
        ("ppc64le", "ppc64le"),
        ("riscv64", "riscv64"),
    ]:
        assert system._arch_for_machine(machine) == arch, machine


def test_platform_override():
    assert get_opts().platform == "linux-x86_64"
    assert system.get_platform() == "linux-x86_64"


def test_platform_from_environment(monkeypatch):
    get_opts().platform = None
    monkeypatch.setenv("JAVACPP_PLATFORM", "android-arm64")
    assert system.get_platform() == "android-arm64"


def test_detected_platform(monkeypatch):
    get_opts().platform = None
    monkeypatch.delenv("JAVACPP_PLATFORM", raising=False)
    monkeypatch.setattr(system.platform, "machine", lambda: "aarch64")
    monkeypatch.setattr(system.sys, "platform", "darwin")
    assert system.get_platform() == "macosx-arm64"
