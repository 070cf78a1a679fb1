import dataclasses
import unittest.mock

import pytest


@dataclasses.dataclass
class DummyRelease:
    tag_name: str


@pytest.fixture
def releases() -> list[DummyRelease]:
    return [
        DummyRelease('v6.1.0'),
        DummyRelease('v5.9.0'),
        DummyRelease('v6.0.0'),
        DummyRelease('v5.8.1'),
    ]


@pytest.fixture
def repository(releases):
    '''
    stand-in for `github3.repos.Repository`; only public API is backed by test-data
    '''
    repository = unittest.mock.MagicMock()
    repository.releases.side_effect = lambda *args, **kwargs: iter(releases)
    return repository
