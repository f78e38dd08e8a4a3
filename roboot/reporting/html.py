from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .models import RunReport


def render_html(report: RunReport) -> str:
    """Render a self-contained HTML page for a finished run."""
    template_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(template_dir), autoescape=True)
    template = env.get_template("report.html.j2")

    return template.render(
        report=report,
        cases=report.test_cases,
        passed_pct=report.percent(report.passed_cases),
        failed_pct=report.percent(report.failed_cases),
        error_pct=report.percent(report.error_cases),
    )
