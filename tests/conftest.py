"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

from k8s_tester.config import ENV_PREFIX, ConfigTree

TEST_CLUSTER_NAME = "test-cluster"


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every ``K8S_TESTER_`` variable from the process environment."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def tree(clean_env: pytest.MonkeyPatch) -> ConfigTree:
    """Return a default tree with a deterministic cluster name."""
    del clean_env
    return ConfigTree.build({f"{ENV_PREFIX}CLUSTER_NAME": TEST_CLUSTER_NAME})
