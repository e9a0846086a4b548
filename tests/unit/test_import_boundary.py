"""Unit tests for the layer boundary checking script.

Rules under test:
- domain/ imports nothing from other turnaround layers
- application/ imports domain/ only
- infrastructure/ imports domain/ and application/
- api/ imports application/, domain/ and bootstrap/
- observability helpers are importable from anywhere
"""

import ast
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from check_imports import (  # noqa: E402
    ALLOWED_IMPORTS,
    check_file_imports,
    check_import_boundaries,
    check_module,
    get_import_modules,
)

PACKAGE_DIR = Path(__file__).parent.parent.parent / "turnaround"


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """Create an empty layered package."""
    root = tmp_path / "turnaround"
    for layer in ALLOWED_IMPORTS:
        (root / layer).mkdir(parents=True)
        (root / layer / "__init__.py").write_text("")
    return root


def _write(package_dir: Path, layer: str, source: str) -> Path:
    path = package_dir / layer / "module.py"
    path.write_text(source)
    return path


class TestRules:
    """Tests for the rule table."""

    def test_domain_imports_nothing(self) -> None:
        assert ALLOWED_IMPORTS["domain"] == set()

    def test_application_imports_domain_only(self) -> None:
        assert ALLOWED_IMPORTS["application"] == {"domain"}

    def test_observability_is_shared(self) -> None:
        assert check_module("turnaround.infrastructure.observability.context", "domain") is None
        assert check_module("turnaround.infrastructure.stubs", "application") is not None

    def test_third_party_imports_ignored(self) -> None:
        assert check_module("structlog", "domain") is None


class TestGetImportModules:
    def test_from_import(self) -> None:
        node = ast.parse("from turnaround.domain.models import Actor").body[0]
        assert get_import_modules(node) == ["turnaround.domain.models"]

    def test_plain_import_lists_every_name(self) -> None:
        node = ast.parse("import os, turnaround.api").body[0]
        assert get_import_modules(node) == ["os", "turnaround.api"]

    def test_relative_import_ignored(self) -> None:
        node = ast.parse("from . import sibling").body[0]
        assert get_import_modules(node) == []


class TestCheckFileImports:
    """Tests for check_file_imports() on generated files."""

    def test_application_may_import_domain(self, package_dir: Path) -> None:
        path = _write(package_dir, "application", "from turnaround.domain.models import Actor")
        assert check_file_imports(path, package_dir) == []

    def test_domain_may_not_import_application(self, package_dir: Path) -> None:
        path = _write(
            package_dir, "domain", "from turnaround.application.services import TurnaroundService"
        )
        violations = check_file_imports(path, package_dir)
        assert violations == [(str(path), 1, "domain layer cannot import from application")]

    def test_application_may_not_import_stubs(self, package_dir: Path) -> None:
        path = _write(
            package_dir, "application", "import json\nfrom turnaround.infrastructure.stubs import X"
        )
        violations = check_file_imports(path, package_dir)
        assert [v[1] for v in violations] == [2]

    def test_config_may_not_import_bootstrap(self, package_dir: Path) -> None:
        path = _write(package_dir, "config", "from turnaround.bootstrap import turnaround")
        assert len(check_file_imports(path, package_dir)) == 1

    def test_unparsable_file_skipped(self, package_dir: Path) -> None:
        path = _write(package_dir, "domain", "def broken(:\n")
        assert check_file_imports(path, package_dir) == []


class TestCheckImportBoundaries:
    def test_nonexistent_directory(self) -> None:
        assert check_import_boundaries(Path("/nonexistent/path")) == []

    def test_nested_files_scanned(self, package_dir: Path) -> None:
        nested = package_dir / "domain" / "entities"
        nested.mkdir()
        (nested / "bad.py").write_text("from turnaround.api.routes import router")
        violations = check_import_boundaries(package_dir)
        assert len(violations) == 1
        assert "bad.py" in violations[0][0]

    def test_project_package_is_clean(self) -> None:
        assert check_import_boundaries(PACKAGE_DIR) == []
