"""
Command-line interface for SiteAudit
"""
import asyncio
import json
import sys

import click

from core.config import settings
from core.exceptions import AnalysisTimeout, FetchFailure, ValidationError
from core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@click.group()
@click.version_option(version=settings.app_version)
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level")
@click.option("--log-format", type=click.Choice(["json", "text"]), default=None, help="Override LOG_FORMAT")
def cli(verbose: bool, log_format: str):
    """SiteAudit CLI - heuristic website digital audits"""
    if verbose or log_format:
        setup_logging(level="DEBUG" if verbose else None, log_format=log_format)


@cli.command()
@click.argument("url")
@click.option("--deep/--no-deep", default=settings.run_deep_audit, help="Run Lighthouse and axe-core audits")
@click.option(
    "--resources/--no-resources",
    default=settings.collect_resources,
    help="Render in a browser to collect resource metrics",
)
@click.option("--render/--no-render", default=False, help="Always use the browser-rendered HTML")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write JSON to a file")
@click.option("--timeout", type=float, default=None, help="Overall analysis timeout in seconds")
def analyze(url: str, deep: bool, resources: bool, render: bool, output: str, timeout: float):
    """Analyze a website and print its audit document as JSON"""
    from d5_audit.coordinator import analyze_website_with_timeout
    from d5_audit.models import AnalysisOptions

    options = AnalysisOptions(run_deep_audit=deep, collect_resources=resources, force_render=render)

    try:
        result = asyncio.run(analyze_website_with_timeout(url, options, timeout=timeout))
    except (FetchFailure, AnalysisTimeout, ValidationError) as e:
        logger.error(f"Analysis of {url} failed: {e.message}")
        click.echo(f"✗ {e.message}", err=True)
        sys.exit(1)

    document = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(document)
        click.echo(f"✓ Audit written to {output}", err=True)
    else:
        click.echo(document)


@cli.command()
def env_info():
    """Display environment information"""
    click.echo(f"{settings.app_name} v{settings.app_version}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Schema version: {settings.schema_version}")
    click.echo(f"Fetch timeout: {settings.fetch_timeout}s / render timeout: {settings.render_timeout}s")
    click.echo(f"Lighthouse binary: {settings.lighthouse_binary}")
    click.echo(f"axe-core script: {settings.axe_script_path or 'not configured'}")


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
