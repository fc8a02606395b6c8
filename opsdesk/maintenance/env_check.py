"""
Environment variable check: presence, format, placeholders and production
safety of the variables the application and these tools rely on.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Pattern

REQUIRED_VARS = ("MONGODB_URI", "NEXTAUTH_URL", "NEXTAUTH_SECRET")
OPTIONAL_VARS = (
    "MONGODB_DB",
    "RESEND_API_KEY",
    "RESEND_FROM_EMAIL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "EMAIL_FROM",
    "OPENAI_API_KEY",
    "CLAUDE_API_KEY",
)
SENSITIVE_VARS = frozenset(
    {"MONGODB_URI", "NEXTAUTH_SECRET", "RESEND_API_KEY", "OPENAI_API_KEY", "CLAUDE_API_KEY", "SMTP_PASS"}
)

GENERIC_PLACEHOLDERS = ("your-", "change-me", "change-in-production", "placeholder", "<your_", "dummy")
PLACEHOLDER_PATTERNS: Dict[str, tuple] = {
    "MONGODB_URI": ("your-username", "your-password", "<your_", "username:password"),
    "NEXTAUTH_SECRET": ("your-secret", "change-me", "default"),
    "RESEND_API_KEY": ("your-api-key", "your-resend-key"),
    "OPENAI_API_KEY": ("your-openai-key", "sk-your-key"),
    "CLAUDE_API_KEY": ("your-claude-key",),
    "SMTP_PASS": ("your-password", "your-app-password"),
}


def _valid_port(value: str) -> bool:
    try:
        return 0 < int(value) <= 65535
    except ValueError:
        return False


@dataclass(frozen=True)
class FormatRule:
    description: str
    check: Callable[[str], bool]


def _regex(pattern: Pattern) -> Callable[[str], bool]:
    return lambda v: bool(pattern.match(v))


FORMAT_RULES: Dict[str, FormatRule] = {
    "MONGODB_URI": FormatRule("should start with mongodb:// or mongodb+srv://", _regex(re.compile(r"^mongodb(\+srv)?://.+"))),
    "NEXTAUTH_URL": FormatRule("should start with http:// or https://", _regex(re.compile(r"^https?://.+"))),
    "NEXTAUTH_SECRET": FormatRule("should be at least 32 characters", lambda v: len(v) >= 32),
    "SMTP_PORT": FormatRule("should be a port number between 1 and 65535", _valid_port),
}


@dataclass
class VariableCheck:
    name: str
    required: bool
    present: bool
    problems: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.present and not self.problems


@dataclass
class EnvReport:
    checks: List[VariableCheck] = field(default_factory=list)
    security_issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return [c.name for c in self.checks if c.required and not c.present]

    @property
    def invalid(self) -> List[str]:
        return [c.name for c in self.checks if c.present and c.problems]

    @property
    def ok(self) -> bool:
        return not self.missing and not self.invalid and not self.security_issues


def _is_placeholder(name: str, value: str) -> bool:
    lowered = value.lower()
    patterns = GENERIC_PLACEHOLDERS + PLACEHOLDER_PATTERNS.get(name, ())
    return any(p.lower() in lowered for p in patterns)


def check_variable(name: str, value: Optional[str], required: bool) -> VariableCheck:
    present = value is not None and value.strip() != ""
    check = VariableCheck(name=name, required=required, present=present)
    if not present:
        return check
    value = value.strip()
    rule = FORMAT_RULES.get(name)
    if rule and not rule.check(value):
        check.problems.append(f"Invalid format ({rule.description})")
    if _is_placeholder(name, value):
        check.problems.append("Contains placeholder value - replace with real credentials")
    return check


def check_environment(environ: Optional[Mapping[str, str]] = None) -> EnvReport:
    env = os.environ if environ is None else environ
    report = EnvReport()
    for name in REQUIRED_VARS:
        report.checks.append(check_variable(name, env.get(name), required=True))
    for name in OPTIONAL_VARS:
        report.checks.append(check_variable(name, env.get(name), required=False))

    production = env.get("NODE_ENV") == "production"
    mongo = (env.get("MONGODB_URI") or "").strip()
    url = (env.get("NEXTAUTH_URL") or "").strip()
    if production and mongo and ("localhost" in mongo or "127.0.0.1" in mongo):
        report.security_issues.append("MONGODB_URI: Using localhost in production environment")
    if production and url.startswith("http://"):
        report.security_issues.append("NEXTAUTH_URL: Using HTTP in production (should use HTTPS)")

    for name in sorted(SENSITIVE_VARS):
        value = (env.get(name) or "").strip()
        if value and len(value) < 10:
            report.warnings.append(f"{name}: Value seems too short to be a real credential")
    return report


def print_env_report(report: EnvReport) -> None:
    print("Required Environment Variables:")
    print("-------------------------------")
    for c in report.checks:
        if not c.required:
            continue
        if not c.present:
            print(f"❌ {c.name}: MISSING (Required)")
        elif c.problems:
            print(f"❌ {c.name}: {'; '.join(c.problems)}")
        else:
            print(f"✅ {c.name}: Set")

    print("\nOptional Environment Variables:")
    print("-------------------------------")
    for c in report.checks:
        if c.required:
            continue
        if not c.present:
            print(f"⚠️  {c.name}: Not set (optional for basic functionality)")
        elif c.problems:
            print(f"❌ {c.name}: {'; '.join(c.problems)}")
        else:
            print(f"✅ {c.name}: Set")

    print("\nSecurity Validation:")
    print("-------------------")
    if not report.security_issues and not report.warnings:
        print("✅ No security issues detected in environment variables")
    for issue in report.security_issues:
        print(f"🚨 {issue}")
    for warning in report.warnings:
        print(f"⚠️  {warning}")

    print("\n" + "=" * 50)
    if report.ok:
        print("🎉 All required environment variables are properly configured!")
    else:
        if report.missing:
            print(f"❌ Missing required variables: {', '.join(report.missing)}")
        if report.invalid:
            print(f"❌ Variables needing attention: {', '.join(report.invalid)}")
        print("Please update your .env.local file with the correct values.")


def run(environ: Optional[Mapping[str, str]] = None) -> int:
    print("🔍 Environment Variables Checker")
    print("=================================\n")
    report = check_environment(environ)
    print_env_report(report)
    return 0 if report.ok else 1
