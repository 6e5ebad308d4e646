"""Project manifest (package.json) loading."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from depinsight import DepInsightError

MANIFEST_FILENAME = "package.json"


class ManifestError(DepInsightError):
    """package.json is missing or cannot be parsed."""

    pass


class Manifest(BaseModel):
    """The fields of package.json that depinsight reads."""

    name: str = Field(default="(unnamed)")
    version: str = Field(default="0.0.0")
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    scripts: dict[str, str] = Field(default_factory=dict)
    repository: str | dict[str, Any] | None = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def all_dependencies(self) -> dict[str, str]:
        """Dependencies then devDependencies; a dev entry wins on a shared name."""
        return {**self.dependencies, **self.dev_dependencies}


def repository_url(repository: Any) -> str | None:
    """Extract the URL from a ``repository`` field (string or ``{url}``)."""
    if isinstance(repository, str):
        return repository or None
    if isinstance(repository, dict):
        url = repository.get("url")
        return url if isinstance(url, str) and url else None
    return None


def read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk.

    Raises:
        ManifestError: If the file is unreadable or not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestError(f"Invalid encoding in {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"Expected a JSON object in {path}")
    return data


def load_manifest(project_root: Path | str) -> Manifest:
    """Load and validate ``<project_root>/package.json``.

    Raises:
        ManifestError: If the manifest is absent or malformed.
    """
    path = Path(project_root) / MANIFEST_FILENAME
    if not path.is_file():
        raise ManifestError(f"No {MANIFEST_FILENAME} found in {project_root}")
    try:
        return Manifest.model_validate(read_json(path))
    except ValidationError as e:
        raise ManifestError(f"Unexpected package.json layout in {path}: {e}") from e
