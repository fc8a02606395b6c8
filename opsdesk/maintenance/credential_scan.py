"""
Scan a source tree for credentials committed in plain text.

Connection strings with embedded passwords, API keys, cloud access keys,
JWTs, private keys and hard-coded passwords are reported by severity.
Placeholder values and generated/vendored paths are ignored.
"""

from __future__ import annotations

import logging
import os
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialPattern:
    name: str
    pattern: Pattern
    severity: str
    description: str


CREDENTIAL_PATTERNS: Sequence[CredentialPattern] = (
    CredentialPattern(
        "MongoDB Connection String with Credentials",
        re.compile(r"mongodb(\+srv)?://[^/\s:]+:[^/\s@]+@[^/\s]+", re.IGNORECASE),
        "critical",
        "MongoDB connection string with embedded username and password",
    ),
    CredentialPattern(
        "Generic Database URL with Credentials",
        re.compile(r"\b(?:postgres(?:ql)?|mysql|redis|amqp)://[^/\s:]+:[^/\s@]+@[^/\s]+", re.IGNORECASE),
        "high",
        "Database URL with embedded credentials",
    ),
    CredentialPattern(
        "API Key Pattern",
        re.compile(r"(?:api[_-]?key|apikey|secret[_-]?key|access[_-]?token)[\"'\s]*[:=][\"'\s]*[a-zA-Z0-9_\-]{20,}", re.IGNORECASE),
        "high",
        "Potential API key or secret token",
    ),
    CredentialPattern("AWS Access Key", re.compile(r"AKIA[0-9A-Z]{16}"), "critical", "AWS Access Key ID"),
    CredentialPattern(
        "JWT Token",
        re.compile(r"eyJ[A-Za-z0-9_-]{5,}\.[A-Za-z0-9_-]{5,}\.[A-Za-z0-9_-]*"),
        "medium",
        "JWT token (may contain sensitive data)",
    ),
    CredentialPattern("Private Key", re.compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----"), "critical", "Private key detected"),
    CredentialPattern(
        "Password in Code",
        re.compile(r"(?:password|passwd|pwd)[\"']?\s*[:=]\s*[\"']([^\"'\s]{6,})[\"']", re.IGNORECASE),
        "high",
        "Hardcoded password",
    ),
)

SAFE_PATTERNS: Sequence[Pattern] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"localhost",
        r"127\.0\.0\.1",
        r"your-username",
        r"your-password",
        r"<YOUR_[A-Z_]+>",
        r"\[YOUR_[A-Z_]+\]",
        r"<[a-z_]+>",
        r"\$\{[^}]+\}",
        r"example\.com",
        r"test\.com",
        r"os\.environ",
        r"process\.env",
        r"getenv",
        r"=your-",
        r"changeme|change-me",
        r"\*\*\*",
    )
)

EXCLUDED_PARTS = frozenset(
    {".git", "node_modules", ".next", ".venv", "venv", "__pycache__", ".pytest_cache", "tests", "__tests__", "dist", "build"}
)
EXCLUDED_SUFFIXES = frozenset({".lock", ".map", ".log", ".png", ".jpg", ".jpeg", ".gif", ".pdf", ".ico", ".woff", ".woff2"})
EXCLUDED_NAMES = frozenset({".env", ".env.local", ".env.production", "package-lock.json"})

SEVERITY_ORDER = ("critical", "high", "medium", "low")


@dataclass(frozen=True)
class Finding:
    path: Path
    line: int
    pattern: str
    severity: str
    match: str

    @property
    def redacted(self) -> str:
        if len(self.match) <= 12:
            return self.match[:3] + "***"
        return f"{self.match[:8]}***{self.match[-4:]}"


def is_safe(match: str) -> bool:
    return any(p.search(match) for p in SAFE_PATTERNS)


def is_excluded(path: Path, root: Path) -> bool:
    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    if any(part in EXCLUDED_PARTS for part in rel.parts[:-1]):
        return True
    if path.name in EXCLUDED_NAMES or path.suffix.lower() in EXCLUDED_SUFFIXES:
        return True
    return path.name.startswith("test_") or path.name.endswith((".test.ts", ".spec.ts", ".test.js"))


def scan_text(text: str, path: Path) -> List[Finding]:
    findings = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        for cp in CREDENTIAL_PATTERNS:
            for m in cp.pattern.finditer(line):
                if is_safe(m.group(0)):
                    continue
                findings.append(Finding(path, lineno, cp.name, cp.severity, m.group(0)))
    return findings


def iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # prune in place so excluded trees are never descended into
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_PARTS)
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if not is_excluded(path, root):
                yield path


def scan_tree(root: Path, paths: Optional[Iterable[Path]] = None) -> List[Finding]:
    findings: List[Finding] = []
    for path in paths if paths is not None else iter_files(root):
        try:
            text = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            logger.debug("Skipping %s: %s", path, e)
            continue
        findings.extend(scan_text(text, path))
    return findings


def print_findings(findings: List[Finding], root: Path) -> None:
    if not findings:
        print("✅ No credential exposures found")
        return
    counts = Counter(f.severity for f in findings)
    print(f"🚨 Found {len(findings)} potential credential exposure(s):")
    for sev in SEVERITY_ORDER:
        if counts.get(sev):
            print(f"  {sev.upper()}: {counts[sev]}")
    print()
    for sev in SEVERITY_ORDER:
        for f in (f for f in findings if f.severity == sev):
            try:
                shown = f.path.relative_to(root)
            except ValueError:
                shown = f.path
            print(f"  [{sev}] {shown}:{f.line} {f.pattern}: {f.redacted}")
    print()
    print("Move these values into environment variables (.env.local) and rotate any real credentials.")


def run(root: Path) -> int:
    root = root.resolve()
    print(f"🔍 Scanning {root} for hardcoded credentials...\n")
    findings = scan_tree(root)
    print_findings(findings, root)
    return 1 if any(f.severity == "critical" for f in findings) else 0
