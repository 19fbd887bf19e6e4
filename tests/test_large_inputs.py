"""Engines stay fast on large and adversarial fragments."""

import time

import pytest

from codeintel.engines import BUILTIN_ENGINES

# Each operation on a ~100 KB fragment must finish well inside this bound.
TIME_LIMIT = 5.0

BLOBS = {
    "letters": "a" * 100_000,
    "sync-call-prefix": "readFile" + "a" * 100_000,
    "open-img-tags": "<img " * 20_000,
    "unclosed-button": "<button" + " a" * 50_000,
    "unclosed-script": "<script " + "src= " * 20_000,
    "long-from": "FROM " + "a" * 50_000,
    "index-columns": "CREATE INDEX i ON t (" + "a," * 50_000,
    "repeated-index": "CREATE INDEX " * 10_000,
    "repeated-select": "SELECT " * 20_000,
    "fstring-select": "f'" + "SELECT " * 20_000,
    "repeated-alter": "ALTER TABLE " * 10_000,
    "open-comments": "/*" * 20_000,
    "repeated-password": "password" * 12_500,
    "copy-lines": "COPY . x\n" * 10_000,
    "newlines": "\n" * 100_000,
    "bare-except": "except:" + "\n" * 50_000,
    "indented-lines": "  \n" * 30_000,
}


@pytest.fixture(params=sorted(BUILTIN_ENGINES))
def engine(request):
    return BUILTIN_ENGINES[request.param]()


@pytest.mark.asyncio
@pytest.mark.parametrize("blob", sorted(BLOBS))
async def test_operations_finish_on_large_input(engine, blob):
    code = BLOBS[blob]
    technology = engine.default_technology

    for name in ("analyze_code", "validate_code", "optimize_code"):
        started = time.perf_counter()
        await getattr(engine, name)(code, technology)
        elapsed = time.perf_counter() - started
        assert elapsed < TIME_LIMIT, f"{engine.category}.{name} took {elapsed:.2f}s on {blob}"


@pytest.mark.asyncio
async def test_large_generated_fragment_is_optimized_quickly(engine):
    code = await engine.generate_code({"featureDescription": "Bulk import", "techStack": [engine.default_technology]})
    large = code * 200

    started = time.perf_counter()
    optimized = await engine.optimize_code(large, engine.default_technology)
    await engine.validate_code(optimized, engine.default_technology)

    assert time.perf_counter() - started < 2 * TIME_LIMIT
