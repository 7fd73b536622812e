"""Benchmark fixture configuration."""

import json

import pytest

PROPERTY_COUNT = 5000


def _release_document(release: int) -> bytes:
    """Synthetic metadata where each release renames, retypes and drops some properties."""
    properties = []
    for i in range(PROPERTY_COUNT):
        if release == 2 and i % 50 == 0:
            continue
        prop = {
            "id": f"app.module{i % 40}.setting{i}",
            "type": "java.lang.Integer" if release == 2 and i % 7 == 0 else "java.lang.String",
            "description": f"Setting number {i}. Controls module {i % 40}.",
            "defaultValue": i if release == 1 or i % 11 else str(i),
        }
        if release == 2 and i % 13 == 0:
            prop["deprecation"] = {"replacement": f"app.next.setting{i}"}
        properties.append(prop)
    if release == 2:
        properties.extend({"id": f"app.next.setting{i}"} for i in range(0, PROPERTY_COUNT, 13))
    groups = [{"id": f"app.module{m}", "type": f"org.acme.Module{m}"} for m in range(40)]
    return json.dumps({"groups": groups, "properties": properties}).encode("utf-8")


@pytest.fixture(scope="session")
def property_count() -> int:
    return PROPERTY_COUNT


@pytest.fixture(scope="session")
def release_documents() -> tuple[bytes, bytes]:
    return _release_document(1), _release_document(2)


@pytest.fixture()
def benchmark_config(benchmark):  # type: ignore[no-untyped-def]
    """Configure benchmark defaults."""
    benchmark.group = "configdiff"
    benchmark.warmup = True
    return benchmark
