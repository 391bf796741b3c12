import pytest

from teamgen.config import GenerationRules


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fast_rules() -> GenerationRules:
    return GenerationRules(retry_backoff=0.0)
