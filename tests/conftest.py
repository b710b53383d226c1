"""Shared fixtures: isolated registries and fake KMS clients."""

from __future__ import annotations

import pytest

from pykeyx import aead
from pykeyx.core.kms_clients import KmsClientRegistry
from pykeyx.core.registry import Registry
from tests.fakes import FakeKmsClient


@pytest.fixture
def kms_clients() -> KmsClientRegistry:
    return KmsClientRegistry()


@pytest.fixture
def fake_kms(kms_clients: KmsClientRegistry) -> FakeKmsClient:
    client = FakeKmsClient()
    kms_clients.register(client)
    return client


@pytest.fixture
def registry(kms_clients: KmsClientRegistry) -> Registry:
    fresh = Registry()
    aead.register(fresh, kms_clients)
    return fresh
