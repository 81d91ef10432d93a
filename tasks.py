"""Invoke tasks for Tourbridge development and data transfer."""

from invoke import task
from invoke.context import Context


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=tourbridge --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task(name="export")
def export_tours(ctx: Context, format: str = "csv", status: str = "", output: str = "") -> None:
    """Export tours to a CSV or XLSX file.

    Args:
        ctx: Invoke context
        format: csv or xlsx
        status: Only export tours with this status
        output: Output file path (default: tours-export-<date>.<format>)
    """
    cmd = f"uv run tourbridge-transfer export --format {format}"
    if status:
        cmd += f" --status {status}"
    if output:
        cmd += f" --output {output}"
    ctx.run(cmd)


@task(name="import")
def import_tours(ctx: Context, file: str, dry_run: bool = False) -> None:
    """Import tours from a CSV or XLSX file.

    Args:
        ctx: Invoke context
        file: File to import
        dry_run: Validate only, create nothing
    """
    cmd = f"uv run tourbridge-transfer import {file}"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, warn=True)


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files."""
    # Clean Python cache
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    # Clean build artifacts
    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
