"""
Layer boundary tests.

1. sitelog_engines/** is pure: it may not import the database layer,
   configuration, ingestion or modules, and may not read the clock.

2. sitelog_ingestion/** reads files only: no database or module imports.

3. sitelog_kernel/domain/** has no upward dependencies.

These tests read source code via AST; they cannot break anything.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(package: str) -> list[Path]:
    return sorted((ROOT / package).rglob("*.py"))


def _parse(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _extract_imports(path: Path) -> list[tuple[int, str]]:
    """(line_number, module) for every import in a file."""
    results: list[tuple[int, str]] = []
    for node in ast.walk(_parse(path)):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for path in _python_files(package):
        for lineno, module in _extract_imports(path):
            for prefix in forbidden:
                if module == prefix or module.startswith(f"{prefix}."):
                    found.append(f"  {path.relative_to(ROOT)}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

class TestEnginePurity:
    """sitelog_engines/** must stay a pure calculation layer."""

    FORBIDDEN_PREFIXES = (
        "sqlalchemy",
        "sitelog_modules",
        "sitelog_config",
        "sitelog_ingestion",
        "sitelog_kernel.db",
        "openpyxl",
        "yaml",
    )

    CLOCK_CALLS = {"now", "today", "utcnow"}

    def test_engine_files_exist(self):
        assert _python_files("sitelog_engines")

    def test_engines_do_not_import_io_layers(self):
        violations = _violations("sitelog_engines", self.FORBIDDEN_PREFIXES)
        assert not violations, "Engine purity violation:\n" + "\n".join(violations)

    def test_engines_do_not_read_the_clock(self):
        violations: list[str] = []
        for path in _python_files("sitelog_engines"):
            for node in ast.walk(_parse(path)):
                if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                    continue
                target = node.func.value
                if (
                    node.func.attr in self.CLOCK_CALLS
                    and isinstance(target, ast.Name)
                    and target.id in {"datetime", "date"}
                ):
                    violations.append(
                        f"  {path.relative_to(ROOT)}:{node.lineno} calls {target.id}.{node.func.attr}()"
                    )
        assert not violations, "Engines must take time as a parameter:\n" + "\n".join(violations)


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

class TestIngestionBoundary:
    """sitelog_ingestion/** never touches the record store."""

    FORBIDDEN_PREFIXES = ("sqlalchemy", "sitelog_modules", "sitelog_kernel.db")

    def test_ingestion_has_no_db_imports(self):
        violations = _violations("sitelog_ingestion", self.FORBIDDEN_PREFIXES)
        assert not violations, "Ingestion boundary violation:\n" + "\n".join(violations)


# ---------------------------------------------------------------------------
# Kernel domain
# ---------------------------------------------------------------------------

class TestKernelDomainNoUpwardDependencies:

    FORBIDDEN_PREFIXES = (
        "sitelog_engines",
        "sitelog_ingestion",
        "sitelog_config",
        "sitelog_modules",
        "sqlalchemy",
    )

    def test_domain_does_not_import_outer_layers(self):
        violations = _violations("sitelog_kernel/domain", self.FORBIDDEN_PREFIXES)
        assert not violations, "Kernel domain boundary violation:\n" + "\n".join(violations)
