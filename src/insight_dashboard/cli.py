from __future__ import annotations

import json
from pathlib import Path

import typer

from insight_dashboard.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from insight_dashboard.dashboard import Dashboard
from insight_dashboard.errors import RecordsApiError
from insight_dashboard.io.api import InsightApiClient, InsightFilters
from insight_dashboard.io.read import load_records
from insight_dashboard.io.write import write_records, write_summary
from insight_dashboard.logging import configure_logging
from insight_dashboard.paths import build_output_paths
from insight_dashboard.records import RecordSet
from insight_dashboard.report.render import render_dashboard_html
from insight_dashboard.viz.figures import plot_dashboard

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _build_filters(
    end_year: str,
    topic: str,
    sector: str,
    region: str,
    pestle: str,
    source: str,
    country: str,
) -> InsightFilters:
    return InsightFilters(
        end_year=end_year,
        topic=topic,
        sector=sector,
        region=region,
        pestle=pestle,
        source=source,
        country=country,
    )


def _fetch_records(cfg: AppConfig, filters: InsightFilters) -> RecordSet:
    try:
        with InsightApiClient.from_config(cfg.api) as client:
            return client.fetch_records(filters)
    except RecordsApiError as exc:
        typer.echo(f"Failed to fetch records: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def render(
    records: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Records JSON/CSV export. When omitted, records are fetched from the API.",
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    loading: bool = typer.Option(False, help="Render every chart in its loading state."),
    end_year: str = typer.Option("", help="API filter: end year."),
    topic: str = typer.Option("", help="API filter: topic."),
    sector: str = typer.Option("", help="API filter: sector."),
    region: str = typer.Option("", help="API filter: region."),
    pestle: str = typer.Option("", help="API filter: PESTLE category."),
    source: str = typer.Option("", help="API filter: source."),
    country: str = typer.Option("", help="API filter: country."),
) -> None:
    """Render the four dashboard charts as figures and an HTML page."""
    configure_logging()
    cfg = _load_app_config(config)
    filters = _build_filters(end_year, topic, sector, region, pestle, source, country)
    if records is not None and filters.active_count:
        raise typer.BadParameter("API filters cannot be combined with --records.")

    record_set = load_records(records) if records is not None else _fetch_records(cfg, filters)
    paths = build_output_paths(out)

    with Dashboard(settings=cfg.charts) as dashboard:
        dashboard.update(record_set, loading=loading)
        dashboard.settle()
        scenes = dashboard.scenes()
        figures = plot_dashboard(scenes, paths.figures, cfg.outputs.figures_format)
        if cfg.outputs.write_html:
            render_dashboard_html(
                scenes,
                records_count=len(record_set),
                output_path=paths.report / "dashboard.html",
                settings=cfg.charts,
                loading=loading,
            )

    write_summary(
        {
            "records": len(record_set),
            "loading": loading,
            "charts": {
                kind.value: {
                    "elements": len(scene.elements),
                    "placeholder": scene.placeholder,
                    "figure": str(figures[kind]),
                }
                for kind, scene in scenes.items()
            },
        },
        paths.root / "summary.json",
    )
    typer.echo(f"Render complete. Records: {len(record_set)}. Output: {paths.root}")


@app.command()
def fetch(
    out: Path = typer.Option(Path("out/records.json"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    end_year: str = typer.Option("", help="Filter: end year."),
    topic: str = typer.Option("", help="Filter: topic."),
    sector: str = typer.Option("", help="Filter: sector."),
    region: str = typer.Option("", help="Filter: region."),
    pestle: str = typer.Option("", help="Filter: PESTLE category."),
    source: str = typer.Option("", help="Filter: source."),
    country: str = typer.Option("", help="Filter: country."),
) -> None:
    """Download records from the insights API into a JSON file."""
    configure_logging()
    cfg = _load_app_config(config)
    filters = _build_filters(end_year, topic, sector, region, pestle, source, country)
    record_set = _fetch_records(cfg, filters)
    write_records(record_set, out)
    typer.echo(f"Fetched {len(record_set)} records into {out}")


@app.command()
def options(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print the filter values the API offers."""
    configure_logging()
    cfg = _load_app_config(config)
    try:
        with InsightApiClient.from_config(cfg.api) as client:
            filter_options = client.fetch_filter_options()
    except RecordsApiError as exc:
        typer.echo(f"Failed to fetch filter options: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for name, values in sorted(filter_options.items()):
        typer.echo(f"{name}: {', '.join(values)}")


@app.command()
def stats(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print the API's dataset statistics as JSON."""
    configure_logging()
    cfg = _load_app_config(config)
    try:
        with InsightApiClient.from_config(cfg.api) as client:
            payload = client.fetch_stats()
    except RecordsApiError as exc:
        typer.echo(f"Failed to fetch stats: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


if __name__ == "__main__":
    app()
