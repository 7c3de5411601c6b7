"""Shared test fixtures."""

import os
import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from graphclone import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop GRAPHCLONE_* variables and cached settings around every test."""
    for name in list(os.environ):
        if name.startswith("GRAPHCLONE_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@dataclass
class FixtureNode:
    name: str
    children: list["FixtureNode"] = field(default_factory=list)
    parent: "FixtureNode | None" = None


class FixtureSlotted:
    __slots__ = ("x", "__secret")

    def __init__(self, x, secret):
        self.x = x
        self.__secret = secret

    @property
    def secret(self):
        return self.__secret


@pytest.fixture
def node_cls():
    return FixtureNode


@pytest.fixture
def slotted_cls():
    return FixtureSlotted


@pytest.fixture
def tree():
    """Three-level node tree: root -> child -> grandchild."""
    root = FixtureNode("root")
    child = FixtureNode("child", parent=root)
    grandchild = FixtureNode("grandchild", parent=child)
    child.children.append(grandchild)
    root.children.append(child)
    return root
