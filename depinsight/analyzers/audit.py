"""Summaries of ``npm audit --json`` output.

npm 6 reports an ``advisories`` map keyed by advisory id; npm 7+ reports a
``vulnerabilities`` map keyed by package name. Both carry severity counts
under ``metadata.vulnerabilities``.
"""

from typing import Any

from depinsight.models.reports import Advisory, AuditCounts, AuditReport

SEVERITIES = ("info", "low", "moderate", "high", "critical")


def _as_int(value: Any) -> int:
    return value if isinstance(value, int) else 0


def _counts(payload: dict[str, Any]) -> AuditCounts:
    raw = (payload.get("metadata") or {}).get("vulnerabilities") or {}
    counts = {sev: _as_int(raw.get(sev)) for sev in SEVERITIES}
    total = raw.get("total")
    counts["total"] = total if isinstance(total, int) else sum(counts.values())
    return AuditCounts(**counts)


def _legacy_advisories(advisories: dict[str, Any]) -> list[Advisory]:
    result = []
    for advisory in advisories.values():
        if not isinstance(advisory, dict):
            continue
        findings = advisory.get("findings") or []
        paths = findings[0].get("paths") if findings and isinstance(findings[0], dict) else None
        result.append(
            Advisory(
                title=str(advisory.get("title", "Unknown advisory")),
                severity=str(advisory.get("severity", "unknown")),
                module_name=str(advisory.get("module_name", "unknown")),
                patched_versions=str(advisory.get("patched_versions") or "N/A"),
                path=paths[0] if paths else "N/A",
                url=advisory.get("url"),
            )
        )
    return result


def _vulnerability_advisories(vulnerabilities: dict[str, Any]) -> list[Advisory]:
    result = []
    for name, vuln in vulnerabilities.items():
        if not isinstance(vuln, dict):
            continue
        fix = vuln.get("fixAvailable")
        if isinstance(fix, dict):
            patched = f"{fix.get('name', name)}@{fix.get('version', '?')}"
        elif fix is True:
            patched = "fix available"
        else:
            patched = "N/A"
        nodes = vuln.get("nodes") or []
        # "via" mixes advisory objects with names of the packages they came through
        sources = [v for v in vuln.get("via") or [] if isinstance(v, dict)]
        if not sources:
            sources = [{}]
        for source in sources:
            result.append(
                Advisory(
                    title=str(source.get("title") or f"Vulnerable dependency {name}"),
                    severity=str(source.get("severity") or vuln.get("severity", "unknown")),
                    module_name=name,
                    patched_versions=patched,
                    path=nodes[0] if nodes else "N/A",
                    url=source.get("url"),
                )
            )
    return result


def summarize_audit(payload: dict[str, Any]) -> AuditReport:
    """Build an AuditReport from parsed ``npm audit --json`` output.

    Missing sections produce zero counts and no advisories rather than
    errors.
    """
    advisories: list[Advisory] = []
    if isinstance(payload.get("advisories"), dict):
        advisories = _legacy_advisories(payload["advisories"])
    elif isinstance(payload.get("vulnerabilities"), dict):
        advisories = _vulnerability_advisories(payload["vulnerabilities"])
    return AuditReport(counts=_counts(payload), advisories=advisories)
