"""Read the package name, version and flavours from a manifest on disk."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

from constants import Constants
from errors import ManifestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Minifest:
    """The slice of a manifest that matters for a remote build."""

    name: str
    version: str
    flavours: List[str] = field(default_factory=list)


def find_manifest(path: Union[str, Path], max_depth: int = Constants.MANIFEST_MAX_DEPTH) -> Optional[Path]:
    """Locate a ``*manifest.yaml`` or ``*pk.yaml`` under ``path``.

    Searches ``path`` itself and subdirectories down to ``max_depth`` levels,
    shallowest first and alphabetically within a level.
    """
    root = Path(path)
    if not root.is_dir():
        return None
    for depth in range(max_depth):
        pattern = "/".join(["*"] * depth + ["*.yaml"])
        hits = sorted(
            p for p in root.glob(pattern)
            if p.is_file() and p.name.lower().endswith(Constants.MANIFEST_NAMES)
        )
        if hits:
            return hits[0]
    return None


def _lookup(data: dict, key: str) -> Any:
    for k, v in data.items():
        if str(k).strip().lower() == key:
            return v
    return None


def _clean(value: Any) -> str:
    return str(value).strip().strip("'\"").strip()


def _flavour_names(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, dict):
        raw = list(raw.keys())
    names = []
    for entry in raw if isinstance(raw, list) else [raw]:
        if isinstance(entry, dict):
            name = _lookup(entry, "name")
            if name is not None:
                names.append(_clean(name))
        elif entry is not None:
            names.append(_clean(entry))
    return [n for n in names if n]


def load_manifest(manifest_path: Union[str, Path]) -> Minifest:
    """Parse ``manifest_path``.

    Raises:
        ManifestError: If the file cannot be read, is not a YAML mapping, or
            lacks a name or version.
    """
    try:
        with open(manifest_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        raise ManifestError(f"unable to read manifest {manifest_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"unable to parse manifest {manifest_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestError(f"manifest {manifest_path} is not a mapping")

    name = _lookup(data, "name")
    if name is None or not _clean(name):
        raise ManifestError(f"Unable to get name from manifest {manifest_path}.")
    version = _lookup(data, "version")
    if version is None or not _clean(version):
        raise ManifestError(f"Unable to get version from manifest {manifest_path}.")

    flavours = _lookup(data, "flavours")
    if flavours is None:
        flavours = _lookup(data, "flavors")

    return Minifest(_clean(name), _clean(version), _flavour_names(flavours))


def read_manifest(path: Union[str, Path, None] = None) -> Minifest:
    """Find and parse the manifest of the package rooted at ``path`` (default: cwd).

    Raises:
        ManifestError: If no manifest is found or it cannot be parsed.
    """
    root = Path(path) if path is not None else Path(os.getcwd())
    manifest_path = find_manifest(root)
    if manifest_path is None:
        raise ManifestError(
            f"Unable to find a manifest under {root}. Perhaps the manifest was not found?"
        )
    logger.debug("reading manifest %s", manifest_path)
    return load_manifest(manifest_path)
