"""Pytest fixtures for atomlineage tests."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from atomlineage.foundation.config import reset_config
from atomlineage.foundation.types.config import LineageConfig
from atomlineage.lineage.models import Atom
from atomlineage.lineage.registry import ShadowRegistry


def atom_dict(
    atom_id: str = "atom-get-user",
    name: str = "getUser",
    *,
    param: str = "userId",
    operations: tuple[str, ...] = ("fetch",),
    outputs: tuple[str, ...] = ("return",),
    verb: str | None = "get",
    domain: str | None = "user",
    entity: str | None = "user",
    operation_type: str | None = "read",
    connections: tuple[tuple[str, float], ...] = (),
    created_at: str | None = None,
) -> dict[str, Any]:
    """Extractor-shaped (camelCase) atom JSON.

    The default is a read-return getter: one input, one fetch, one return.
    """
    data: dict[str, Any] = {
        "id": atom_id,
        "name": name,
        "filePath": "src/users.js",
        "lineNumber": 12,
        "isExported": True,
        "dataFlow": {
            "inputs": [{"name": param, "type": "string", "usages": ["read"]}],
            "transformations": [
                {"operation": op, "from": param, "to": f"v{i}"}
                for i, op in enumerate(operations)
            ],
            "outputs": [
                {"name": f"out{i}", "type": kind, "isSideEffect": kind == "side_effect"}
                for i, kind in enumerate(outputs)
            ],
        },
        "connections": [
            {"target": target, "type": "calls", "weight": weight}
            for target, weight in connections
        ],
    }
    if verb or domain or entity or operation_type:
        data["semantic"] = {
            "verb": verb,
            "domain": domain,
            "entity": entity,
            "operationType": operation_type,
        }
    if created_at is not None:
        data["createdAt"] = created_at
    return data


@pytest.fixture
def make_atom() -> Callable[..., Atom]:
    """Factory building Atoms from extractor-shaped JSON."""

    def _make(*args: Any, **kwargs: Any) -> Atom:
        return Atom.from_dict(atom_dict(*args, **kwargs))

    return _make


@pytest.fixture
def registry(tmp_path: Path) -> ShadowRegistry:
    """Registry over a fresh store directory."""
    return ShadowRegistry(tmp_path / ".atomlineage", LineageConfig())


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep user/project config files and ATOMLINEAGE_* env vars out of tests."""
    for key in list(os.environ):
        if key.startswith("ATOMLINEAGE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_atom_dict() -> Callable[..., dict[str, Any]]:
    """Factory building raw extractor JSON (for CLI input files)."""
    return atom_dict
