import copy

import pytest

from artifacts.models import Artifact, ArtifactIdentifier, MavenArtifactType, Repository, RepositoryType
from constants import Constants


@pytest.fixture(autouse=True)
def restore_constants():
    # Config and CLI overrides mutate Constants in place
    saved = {
        name: copy.deepcopy(value)
        for name, value in vars(Constants).items()
        if name.isupper()
    }
    yield
    for name, value in saved.items():
        setattr(Constants, name, value)


@pytest.fixture
def central():
    return Repository(RepositoryType.NORMAL, "central", "https://repo.example.com/maven2")


@pytest.fixture
def plugins_repo():
    return Repository(RepositoryType.PLUGIN, "plugins", "https://plugins.example.com/maven2")


def make_artifact(coordinates, artifact_type=MavenArtifactType.DEPENDENCY, inherited=False):
    group_id, artifact_id, *rest = coordinates.split(":")
    version = rest[0] if rest else None
    return Artifact(artifact_type, ArtifactIdentifier(group_id, artifact_id), version, inherited)


class FakeMetadataService:
    """In-memory metadata service keyed by (repository id, "g:a")."""

    def __init__(self, listings=None):
        self.listings = dict(listings or {})
        self.calls = []

    def list_versions(self, identifier, repository):
        self.calls.append((repository.id, str(identifier)))
        value = self.listings.get((repository.id, str(identifier)), [])
        if isinstance(value, Exception):
            raise value
        return list(value)
