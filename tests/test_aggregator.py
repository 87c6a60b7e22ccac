from pathlib import Path

import pytest

from central_publisher.exceptions import InvalidInputError, PublisherIOError
from central_publisher.modules.bundle.aggregate import ArtifactAggregator, aggregate, staged_name
from central_publisher.modules.bundle.domain import ArtifactDescriptor, ArtifactRole


def _artifact(tmp_path: Path, rel: str, content: bytes = b"x", classifier=None) -> ArtifactDescriptor:
    path = tmp_path / "build" / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return ArtifactDescriptor.from_path(path, classifier=classifier)


def test_descriptor_from_path_infers_role_and_extension(tmp_path):
    jar_sig = ArtifactDescriptor.from_path(tmp_path / "my-lib.jar.asc")
    pom = ArtifactDescriptor.from_path(tmp_path / "pom-default.xml")
    sources = ArtifactDescriptor.from_path(tmp_path / "my-lib-sources.jar", classifier=" sources ")

    assert jar_sig.extension == "jar.asc"
    assert jar_sig.role is ArtifactRole.SIGNATURE
    assert pom.role is ArtifactRole.POM
    assert sources.classifier == "sources"
    assert sources.role is ArtifactRole.MAIN
    assert ArtifactDescriptor.from_path(tmp_path / "a.jar", classifier="  ").classifier is None


def test_staged_names():
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("pom-default.xml"), "xml")) == "lib-1.0.pom"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("pom-default.xml.asc"), "asc")) == "lib-1.0.pom.asc"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("module.json"), "json")) == "lib-1.0.module"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("module.json.asc"), "asc")) == "lib-1.0.module.asc"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("out.jar"), "jar")) == "lib-1.0.jar"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("out.jar"), "jar", "javadoc")) == "lib-1.0-javadoc.jar"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("out.jar.asc"), "jar")) == "lib-1.0.jar.asc"
    assert staged_name("lib", "1.0", ArtifactDescriptor(Path("notes.txt"), "txt")) == "notes.txt"


def test_aggregate_pom_signature_and_jar(tmp_path):
    artifacts = [
        _artifact(tmp_path, "publications/maven/pom-default.xml", b"<project/>"),
        _artifact(tmp_path, "publications/maven/pom-default.xml.asc", b"sig"),
        _artifact(tmp_path, "libs/my-lib.jar", b"jar"),
    ]
    target = tmp_path / "staging"

    staged = aggregate("com.example", "my-lib", "1.0", artifacts, target)

    assert [path.name for path in staged] == ["my-lib-1.0.jar", "my-lib-1.0.pom", "my-lib-1.0.pom.asc"]
    assert sorted(path.name for path in target.iterdir()) == [
        "my-lib-1.0.jar",
        "my-lib-1.0.pom",
        "my-lib-1.0.pom.asc",
    ]
    assert (target / "my-lib-1.0.pom").read_bytes() == b"<project/>"
    assert (target / "my-lib-1.0.jar").read_bytes() == b"jar"


def test_aggregate_classifiers_and_module_metadata(tmp_path):
    artifacts = [
        _artifact(tmp_path, "libs/my-lib.jar"),
        _artifact(tmp_path, "libs/my-lib-sources.jar", classifier="sources"),
        _artifact(tmp_path, "libs/my-lib-sources.jar.asc", classifier="sources"),
        _artifact(tmp_path, "publications/maven/module.json", b"{}"),
    ]
    target = tmp_path / "staging"

    staged = aggregate("com.example", "my-lib", "1.0", artifacts, target)

    assert sorted(path.name for path in staged) == [
        "my-lib-1.0-sources.jar",
        "my-lib-1.0-sources.jar.asc",
        "my-lib-1.0.jar",
        "my-lib-1.0.module",
    ]


def test_aggregate_result_is_order_independent(tmp_path):
    artifacts = [
        _artifact(tmp_path, "publications/maven/pom-default.xml", b"pom"),
        _artifact(tmp_path, "libs/my-lib.jar", b"jar"),
        _artifact(tmp_path, "libs/my-lib-javadoc.jar", b"doc", classifier="javadoc"),
    ]
    first = aggregate("com.example", "my-lib", "1.0", artifacts, tmp_path / "first")
    second = aggregate("com.example", "my-lib", "1.0", list(reversed(artifacts)), tmp_path / "second")

    assert [path.name for path in first] == [path.name for path in second]
    for left, right in zip(first, second):
        assert left.read_bytes() == right.read_bytes()


def test_aggregate_clears_previous_content(tmp_path):
    target = tmp_path / "staging"
    target.mkdir()
    (target / "stale.jar").write_bytes(b"old")

    aggregate("com.example", "my-lib", "1.0", [_artifact(tmp_path, "libs/my-lib.jar")], target)

    assert sorted(path.name for path in target.iterdir()) == ["my-lib-1.0.jar"]


def test_aggregate_rejects_colliding_names(tmp_path):
    artifacts = [
        _artifact(tmp_path, "a/first.jar", b"1"),
        _artifact(tmp_path, "b/second.jar", b"2"),
    ]

    with pytest.raises(InvalidInputError):
        ArtifactAggregator().aggregate("com.example", "my-lib", "1.0", artifacts, tmp_path / "staging")


def test_aggregate_missing_source(tmp_path):
    missing = ArtifactDescriptor.from_path(tmp_path / "missing.jar")
    target = tmp_path / "staging"
    target.mkdir()
    (target / "keep.txt").write_text("untouched")

    with pytest.raises(PublisherIOError):
        aggregate("com.example", "my-lib", "1.0", [missing], target)

    assert (target / "keep.txt").exists()
