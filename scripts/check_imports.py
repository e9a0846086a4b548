#!/usr/bin/env python3
"""Check hexagonal layering of the turnaround package.

Rules:
- domain/: aggregate, rules and events; imports no other turnaround layer
- application/: services and ports; imports domain/ only
- infrastructure/: adapters; imports domain/ and application/
- config/: settings; imports domain/ only
- api/: HTTP surface; imports application/, domain/ and bootstrap/
- bootstrap/: wiring; may import anything

The observability helpers (correlation ids, structlog setup) are shared by
every layer and are exempt.

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""

import argparse
import ast
import sys
from pathlib import Path

PACKAGE = "turnaround"

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "infrastructure": {"domain", "application"},
    "config": {"domain"},
    "api": {"application", "domain", "bootstrap"},
    "bootstrap": {"domain", "application", "infrastructure", "config", "api"},
}

SHARED_MODULES: tuple[str, ...] = (f"{PACKAGE}.infrastructure.observability",)

Violation = tuple[str, int, str]


def get_import_modules(node: ast.Import | ast.ImportFrom) -> list[str]:
    """Absolute module names referenced by an import statement.

    Relative imports (``from . import x``) yield nothing.
    """
    if isinstance(node, ast.ImportFrom):
        if node.level or node.module is None:
            return []
        return [node.module]
    return [alias.name for alias in node.names]


def layer_of(py_file: Path, package_dir: Path) -> str | None:
    """Layer a file belongs to, or None for files outside any layer."""
    try:
        parts = py_file.relative_to(package_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in ALLOWED_IMPORTS else None


def check_module(module: str, file_layer: str) -> str | None:
    """Return a violation message if ``file_layer`` may not import ``module``."""
    if not module.startswith(f"{PACKAGE}."):
        return None
    if any(module == shared or module.startswith(f"{shared}.") for shared in SHARED_MODULES):
        return None

    target_layer = module.split(".")[1]
    if target_layer not in ALLOWED_IMPORTS or target_layer == file_layer:
        return None
    if target_layer not in ALLOWED_IMPORTS[file_layer]:
        return f"{file_layer} layer cannot import from {target_layer}"
    return None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Check one file; unparsable files are reported on stderr and skipped."""
    file_layer = layer_of(py_file, package_dir)
    if file_layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        for module in get_import_modules(node):
            message = check_module(module, file_layer)
            if message:
                violations.append((str(py_file), node.lineno, message))
    return violations


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    """Check every Python file under ``package_dir``."""
    if not package_dir.exists():
        print(f"Error: Package directory '{package_dir}' does not exist", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, package_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    if not violations:
        return ""
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {path}:{line_no}: {message}" for path, line_no, message in sorted(violations))
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Check turnaround layer boundaries")
    parser.add_argument(
        "package_dir",
        nargs="?",
        type=Path,
        default=Path(__file__).parent.parent / PACKAGE,
        help="Package directory to scan (default: ./turnaround)",
    )
    args = parser.parse_args()

    violations = check_import_boundaries(args.package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
