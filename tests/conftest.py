import pytest

from mygit.object_store import ObjectStore


@pytest.fixture
def dot_git(tmp_path):
    p = tmp_path / '.git'
    (p / 'objects').mkdir(parents=True)
    return p


@pytest.fixture
def store(dot_git):
    return ObjectStore(dot_git)
