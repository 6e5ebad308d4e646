"""Report models produced by the analyzers.

Pydantic models so every report can be printed as text by the CLI or
dumped as JSON with ``model_dump_json``.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic import BaseModel, Field, computed_field

BYTES_PER_MEGABYTE = 1024 * 1024

# Tier boundaries in megabytes; a size equal to a boundary stays in the lower tier
MEDIUM_THRESHOLD_MB = 5.0
HIGH_THRESHOLD_MB = 10.0

SizeTier = Literal["low", "medium", "high"]


def to_megabytes(size_bytes: int) -> float:
    """Convert bytes to megabytes rounded half-up to two decimals."""
    mb = Decimal(size_bytes) / Decimal(BYTES_PER_MEGABYTE)
    return float(mb.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def classify_size(size_bytes: int) -> SizeTier:
    """Classify a size by its displayed megabyte value.

    >>> classify_size(5 * BYTES_PER_MEGABYTE)
    'low'
    >>> classify_size(10 * BYTES_PER_MEGABYTE)
    'medium'
    """
    mb = to_megabytes(size_bytes)
    if mb > HIGH_THRESHOLD_MB:
        return "high"
    if mb > MEDIUM_THRESHOLD_MB:
        return "medium"
    return "low"


# Tree view


class TreeLine(BaseModel):
    """One rendered line of the dependency tree."""

    depth: int = Field(ge=0, description="Nesting depth (root = 0)")
    kind: Literal["package", "peer", "circular"] = Field(description="What the line shows")
    name: str = Field(description="Package or peer name")
    version: str = Field(description="Resolved version, or declared range for peers")

    @property
    def indent(self) -> str:
        return "  " * self.depth

    @property
    def text(self) -> str:
        """Plain-text rendering of the line."""
        if self.kind == "peer":
            return f"{self.indent}└─ requires {self.name}@{self.version}"
        if self.kind == "circular":
            return f"{self.indent}{self.name}@{self.version} [circular]"
        return f"{self.indent}{self.name}@{self.version}"


# Size view


class SizeRecord(BaseModel):
    """On-disk size of one direct dependency."""

    name: str = Field(description="Package name")
    size_bytes: int = Field(ge=0, description="Total bytes under the install directory")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size_mb(self) -> float:
        return to_megabytes(self.size_bytes)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tier(self) -> SizeTier:
        return classify_size(self.size_bytes)


class SizeLedger(BaseModel):
    """Sorted size records of the direct dependencies that are installed."""

    records: list[SizeRecord] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list, description="Missing installs and unreadable paths"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def count(self) -> int:
        return len(self.records)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_bytes(self) -> int:
        return sum(r.size_bytes for r in self.records)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_mb(self) -> float:
        return to_megabytes(self.total_bytes)


# Suggestion view


class SuggestionEntry(BaseModel):
    """A lighter package suggested in place of an installed one."""

    installed_name: str
    suggested_name: str

    @property
    def message(self) -> str:
        return f"Consider using {self.suggested_name} instead of {self.installed_name}"


# Audit / outdated


class AuditCounts(BaseModel):
    """Vulnerability counts by severity."""

    info: int = 0
    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0
    total: int = 0


class Advisory(BaseModel):
    """One vulnerability advisory from ``npm audit``."""

    title: str
    severity: str
    module_name: str
    patched_versions: str = "N/A"
    path: str = "N/A"
    url: str | None = None


class AuditReport(BaseModel):
    counts: AuditCounts = Field(default_factory=AuditCounts)
    advisories: list[Advisory] = Field(default_factory=list)

    @property
    def has_vulnerabilities(self) -> bool:
        return self.counts.total > 0


class OutdatedEntry(BaseModel):
    """A dependency with a newer version available."""

    name: str
    current: str = Field(default="N/A", description="Installed version")
    wanted: str = Field(default="N/A", description="Highest version matching the declared range")
    latest: str = Field(default="N/A", description="Latest published version")


# Unused dependencies


class UnusedReport(BaseModel):
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list)
    files_scanned: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.dependencies and not self.dev_dependencies


# Health


class RepositoryStats(BaseModel):
    stars: int | None = None
    open_issues: int | None = None
    updated_at: str | None = Field(default=None, description="ISO timestamp of last update")


class PackageHealth(BaseModel):
    """Popularity and maintenance signals for one declared dependency."""

    name: str
    declared_range: str
    monthly_downloads: int | None = None
    repository: RepositoryStats | None = None


# Graph


class GraphSummary(BaseModel):
    """Structural summary of the resolved dependency graph."""

    node_count: int
    edge_count: int
    max_depth: int = Field(description="Longest root-to-leaf path in the tree")
    cycles: list[list[str]] = Field(default_factory=list)
    multiple_versions: dict[str, list[str]] = Field(
        default_factory=dict, description="Packages installed in more than one version"
    )
