"""Every engine treats unusable insight payloads as no insights at all."""

import pytest

from codeintel.engines import BUILTIN_ENGINES

MALFORMED = [None, "x", 42, ["patterns"], {"insights": "broken"}, {"insights": {"patterns": "x"}}]

SAMPLES = {
    "backend": "const app = require('express')();\napp.get('/users', (req, res) => res.json([]));\napp.listen(3000);\n",
    "database": "CREATE TABLE users (\n    email TEXT\n);\nDELETE FROM users;\n",
    "devops": "FROM node:latest\nCOPY . .\nRUN npm install\nCMD [\"node\", \"server.js\"]\n",
    "frontend": '<main><img src="a.png"><button></button></main>',
    "mobile": "import { ScrollView } from 'react-native';\nconsole.log('x');\n",
}


@pytest.fixture(params=sorted(BUILTIN_ENGINES))
def engine(request):
    return BUILTIN_ENGINES[request.param]()


@pytest.mark.asyncio
@pytest.mark.parametrize("context", MALFORMED)
async def test_analysis_ignores_malformed_context(engine, context):
    code = SAMPLES[engine.category]
    technology = engine.default_technology

    baseline = await engine.analyze_code(code, technology)
    degraded = await engine.analyze_code(code, technology, context)

    assert degraded.to_dict() == baseline.to_dict()


@pytest.mark.asyncio
@pytest.mark.parametrize("context", MALFORMED)
async def test_guidance_falls_back_to_static_lists(engine, context):
    technology = engine.default_technology

    assert await engine.get_best_practices(technology, context) == await engine.get_best_practices(technology)
    assert await engine.get_anti_patterns(technology, context) == list(type(engine).anti_patterns)


@pytest.mark.asyncio
@pytest.mark.parametrize("context", MALFORMED)
async def test_generation_and_optimization_ignore_malformed_context(engine, context):
    request = {"featureDescription": "Order history", "techStack": [engine.default_technology]}
    code = SAMPLES[engine.category]
    technology = engine.default_technology

    assert await engine.generate_code(request, context) == await engine.generate_code(request)
    assert await engine.optimize_code(code, technology, context) == await engine.optimize_code(code, technology)
    assert await engine.validate_code(code, technology, context) == await engine.validate_code(code, technology)


@pytest.mark.asyncio
async def test_static_best_practices_come_first(engine):
    practices = await engine.get_best_practices(engine.default_technology)

    assert practices[: len(type(engine).best_practices)] == list(type(engine).best_practices)
