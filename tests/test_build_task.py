import os
import tempfile

import pytest

from javacpp_build import (
    PLATFORM_PATH_CATEGORIES,
    Builder,
    BuilderException,
    BuildRequest,
    BuildResult,
    ExtraProperties,
    JavaCPPBuildTask,
    TaskState,
)
from javacpp_build._impl.build.tasks import TaskAbortException


class StubBuilder(Builder):
    def __init__(self, request, executor, files=(), properties=None, error=None):
        super(StubBuilder, self).__init__(request, executor)
        self.files = list(files)
        self.extra = dict(properties or {})
        self.error = error
        self.build_calls = 0

    @property
    def properties(self):
        props = dict(self.request.properties)
        props.update(self.extra)
        return props

    def build(self):
        self.build_calls += 1
        if self.error is not None:
            raise self.error
        return BuildResult(files=list(self.files), properties=self.properties)


class StubFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.builders = []

    def __call__(self, request, executor):
        builder = StubBuilder(request, executor, **self.kwargs)
        self.builders.append(builder)
        return builder


def _task(request, **kwargs):
    factory = StubFactory(**kwargs)
    namespace = ExtraProperties()
    return JavaCPPBuildTask(request, namespace, builder_factory=factory), factory, namespace


def test_skip_does_not_call_builder():
    request = BuildRequest(skip=True, output_directory="/out", class_or_package_names=["com.example.*"],
                           link_path=["/usr/lib"], property_file="/does/not/exist.properties")
    task, factory, namespace = _task(request, files=["/out/Example.o"])
    result = task.run()
    assert result.is_empty()
    assert result.files == []
    assert factory.builders == []
    assert namespace.keys() == []
    assert task.state is TaskState.SKIPPED


def test_example_build():
    request = BuildRequest(skip=False, output_directory="/out", class_or_package_names=["com.example.*"], build_command=None)
    task, factory, namespace = _task(request, files=["/out/Example.cpp", "/out/Example.o"],
                                     properties={"platform": "linux-x86_64"})
    result = task.run()
    assert result.files == ["/out/Example.cpp", "/out/Example.o"]
    assert namespace.get("javacpp.platform") == "linux-x86_64"
    assert len(factory.builders) == 1
    assert factory.builders[0].build_calls == 1
    assert task.state is TaskState.SUCCEEDED
    assert task.result is result


def test_all_builder_properties_are_published():
    request = BuildRequest(include_path=["/opt/include"], property_keys_and_values={"platform.compiler": "clang++"})
    task, factory, namespace = _task(request, properties={"platform.extension": "-avx2", "platform.root": "/opt/ndk"})
    task.run()
    builder = factory.builders[0]
    assert builder.properties["platform.extension"] == "-avx2"
    for key, value in builder.properties.items():
        assert namespace.get("javacpp." + key) == value
    assert sorted(namespace.keys()) == sorted("javacpp." + k for k in builder.properties)


def test_absent_categories_are_not_registered():
    task, factory, _ = _task(BuildRequest())
    task.run()
    builder_request = factory.builders[0].request
    assert builder_request.platform_paths == {}
    for category in PLATFORM_PATH_CATEGORIES:
        assert "platform." + category not in builder_request.properties


def test_present_categories_are_registered_exactly():
    values = {}
    for i, (category, attr) in enumerate(sorted(PLATFORM_PATH_CATEGORIES.items())):
        # every other category is explicitly empty
        values[attr] = [] if i % 2 == 0 else [f"/{category}/a", f"/{category}/b"]
    task, factory, _ = _task(BuildRequest(**values))
    task.run()
    builder_request = factory.builders[0].request
    assert len(builder_request.platform_paths) == len(PLATFORM_PATH_CATEGORIES)
    for category, attr in PLATFORM_PATH_CATEGORIES.items():
        assert builder_request.platform_paths["platform." + category] == values[attr]
        assert builder_request.properties["platform." + category] == os.pathsep.join(values[attr])


def test_single_category():
    task, factory, _ = _task(BuildRequest(link_path=[]))
    task.run()
    builder_request = factory.builders[0].request
    assert builder_request.platform_paths == {"platform.linkpath": []}
    assert builder_request.get_property("platform.linkpath") == ""
    assert builder_request.get_property("platform.includepath") is None


def _write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as fp:
        fp.write(text)


def test_property_source_precedence():
    with tempfile.TemporaryDirectory() as tmp:
        classes = os.path.join(tmp, "classes")
        _write(os.path.join(classes, "org", "bytedeco", "javacpp", "properties", "custom-x86_64.properties"),
               "key=resource\nfrom.resource=1\nshared.file=resource\n")
        property_file = os.path.join(tmp, "build.properties")
        _write(property_file, "key=file\nshared.file=file\n")

        def resolved(**kwargs):
            request = BuildRequest(class_path=[classes], properties="custom-x86_64", **kwargs)
            task, factory, _ = _task(request)
            task.run()
            return factory.builders[0].request.properties

        props = resolved(property_file=property_file, property_keys_and_values={"key": "explicit"})
        assert props["key"] == "explicit"
        assert props["shared.file"] == "file"
        assert props["from.resource"] == "1"
        assert props["platform"] == "custom-x86_64"

        assert resolved(property_file=property_file)["key"] == "file"
        assert resolved()["key"] == "resource"


def test_typed_category_overrides_explicit_property():
    request = BuildRequest(link_path=["/typed"], property_keys_and_values={"platform.linkpath": "/explicit"})
    task, factory, _ = _task(request)
    task.run()
    assert factory.builders[0].request.properties["platform.linkpath"] == "/typed"


def test_host_platform_without_resource():
    task, factory, namespace = _task(BuildRequest())
    task.run()
    assert factory.builders[0].request.properties["platform"] == "linux-x86_64"
    assert namespace["javacpp.platform"] == "linux-x86_64"


def test_failure_propagates_without_publishing():
    error = OSError("disk full")
    task, factory, namespace = _task(BuildRequest(output_directory="/out"), error=error)
    with pytest.raises(OSError) as excinfo:
        task.run()
    assert excinfo.value is error
    assert factory.builders[0].build_calls == 1
    assert namespace.keys() == []
    assert task.result is None
    assert task.state is TaskState.FAILED


def test_interrupt_propagates():
    task, factory, namespace = _task(BuildRequest(), error=KeyboardInterrupt())
    with pytest.raises(KeyboardInterrupt):
        task.run()
    assert namespace.keys() == []
    assert task.state is TaskState.FAILED


def test_missing_property_file_fails_before_build():
    task, factory, namespace = _task(BuildRequest(property_file="/does/not/exist.properties"))
    with pytest.raises(OSError):
        task.run()
    assert factory.builders == []
    assert namespace.keys() == []


def test_execute_turns_builder_failure_into_abort():
    task, _, namespace = _task(BuildRequest(), error=BuilderException("Process exited with an error: 3", exitcode=3))
    with pytest.raises(TaskAbortException) as excinfo:
        task.execute()
    assert excinfo.value.code == 3
    assert task.exitcode == 3
    assert namespace.keys() == []


def test_request_is_not_shared_with_builder():
    request = BuildRequest(link_path=["/a"], class_or_package_names=["com.example.Foo"])
    task, factory, _ = _task(request)
    task.run()
    builder_request = factory.builders[0].request
    builder_request.options.link_path.append("/b")
    assert request.link_path == ["/a"]


def test_target_directories_are_reported():
    task, _, _ = _task(BuildRequest(build_command=["make"], target_directory=["/gen/java"]))
    result = task.run()
    assert result.target_directories == ["/gen/java"]


def test_fresh_request_per_run():
    request = BuildRequest()
    task, factory, namespace = _task(request)
    task.run()
    request.skip = True
    assert task.run().is_empty()
    assert task.state is TaskState.SKIPPED
    assert len(factory.builders) == 1
