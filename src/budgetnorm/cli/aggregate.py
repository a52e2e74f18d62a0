"""Aggregation and dataset CLI commands."""

from decimal import Decimal
from pathlib import Path

import typer
from dependency_injector import providers
from pydantic import BaseModel, Field, TypeAdapter
from rich.markup import escape
from rich.table import Table

from budgetnorm.application.use_cases import ExecutionStrategy, GetAggregatedLineItemsRequest
from budgetnorm.cli.utils import async_command, console, handle_cli_error
from budgetnorm.domain.exceptions import (
    BudgetNormError,
    NormalizationDatasetError,
)
from budgetnorm.domain.models import (
    AggregatedLineItemConnection,
    AnalyticsFilter,
    EntityRecord,
    NormalizationMode,
    UatRecord,
    resolve_normalization_request,
)
from budgetnorm.domain.models.periods import PeriodInterval, PeriodSelection, ReportPeriod
from budgetnorm.domain.models.results import PipelineError
from budgetnorm.infrastructure.containers import get_container
from budgetnorm.infrastructure.logging import configure_logging
from budgetnorm.infrastructure.repositories import (
    InMemoryLineItemRepository,
    InMemoryPopulationRepository,
    LineItemRecord,
)

_line_items_adapter = TypeAdapter(list[LineItemRecord])


class PopulationFile(BaseModel):
    """Contents of a ``--population-file`` document."""

    uats: list[UatRecord] = Field(default_factory=list)
    entities: list[EntityRecord] = Field(default_factory=list)


def _load_line_items(path: Path) -> list[LineItemRecord]:
    return _line_items_adapter.validate_json(path.read_bytes())


def _load_population(path: Path) -> PopulationFile:
    return PopulationFile.model_validate_json(path.read_bytes())


def _build_filter(
    account_category: str,
    start_year: int | None,
    end_year: int | None,
    counties: list[str] | None,
    min_amount: float | None,
    max_amount: float | None,
) -> AnalyticsFilter:
    selection = PeriodSelection()
    if start_year is not None or end_year is not None:
        first = start_year if start_year is not None else end_year
        last = end_year if end_year is not None else start_year
        selection = PeriodSelection(interval=PeriodInterval(start=str(first), end=str(last)))

    return AnalyticsFilter(
        account_category=account_category,
        report_period=ReportPeriod(selection=selection),
        county_codes=counties or None,
        aggregate_min_amount=Decimal(str(min_amount)) if min_amount is not None else None,
        aggregate_max_amount=Decimal(str(max_amount)) if max_amount is not None else None,
    )


def _display_connection(connection: AggregatedLineItemConnection, unit: str) -> None:
    table = Table(title=f"Aggregated line items ({unit})")
    table.add_column("Functional", style="cyan")
    table.add_column("Economic", style="cyan")
    table.add_column("Amount", justify="right", style="green")
    table.add_column("Items", justify="right")

    for node in connection.nodes:
        table.add_row(
            escape(f"{node.functional_code} {node.functional_name}"),
            escape(f"{node.economic_code} {node.economic_name}"),
            f"{node.amount:,.2f}",
            str(node.count),
        )

    console.print(table)
    info = connection.page_info
    console.print(
        f"Total: {info.total_count}  "
        f"next page: {'yes' if info.has_next_page else 'no'}  "
        f"previous page: {'yes' if info.has_previous_page else 'no'}"
    )


def _display_error(error: PipelineError) -> None:
    hint = " (retryable)" if error.retryable else ""
    console.print(f"[bold red]{error.type}:[/bold red] {escape(error.message)}{hint}")


@async_command
async def aggregate(
    line_items_file: Path = typer.Argument(..., exists=True, help="JSON list of line items"),
    population_file: Path | None = typer.Option(
        None, exists=True, help="JSON document with 'uats' and 'entities' lists"
    ),
    mode: str = typer.Option(
        "total", help="total, per_capita, percent_gdp (legacy: total_euro, per_capita_euro)"
    ),
    currency: str | None = typer.Option(None, help="RON, EUR or USD"),
    inflation_adjusted: bool = typer.Option(False, help="Express amounts in real terms"),
    account_category: str = typer.Option("ch", help="vn (revenues) or ch (expenses)"),
    start_year: int | None = typer.Option(None, help="First reporting year"),
    end_year: int | None = typer.Option(None, help="Last reporting year"),
    county: list[str] | None = typer.Option(None, help="County code filter (repeatable)"),
    min_amount: float | None = typer.Option(None, help="Minimum normalized total"),
    max_amount: float | None = typer.Option(None, help="Maximum normalized total"),
    limit: int | None = typer.Option(None, help="Page size"),
    offset: int | None = typer.Option(None, help="Page offset"),
    strategy: ExecutionStrategy | None = typer.Option(
        None, help="Execution strategy (defaults to BUDGETNORM_EXECUTION_STRATEGY)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Aggregate line items by classification with per-year normalization."""
    container = get_container()
    settings = container.settings()
    configure_logging(settings.log_level, settings.log_json)

    try:
        normalization = resolve_normalization_request(mode, currency, inflation_adjusted)
        filter = _build_filter(
            account_category, start_year, end_year, county, min_amount, max_amount
        )
        line_items = _load_line_items(line_items_file)
        population = _load_population(population_file) if population_file else PopulationFile()
    except (ValueError, OSError) as e:
        handle_cli_error(e, context={"command": "aggregate"})

    container.line_item_repository.override(
        providers.Object(InMemoryLineItemRepository(line_items, max_rows=settings.max_db_rows))
    )
    container.population_repository.override(
        providers.Object(InMemoryPopulationRepository(population.uats, population.entities))
    )

    if normalization.needs_normalization:
        try:
            await container.normalization_service().validate_required_datasets()
        except NormalizationDatasetError as e:
            handle_cli_error(e, context={"datasets_dir": str(settings.datasets_dir)})

    use_case = (
        container.get_aggregated_line_items_use_case(strategy=strategy)
        if strategy is not None
        else container.get_aggregated_line_items_use_case()
    )
    result = await use_case.execute(
        GetAggregatedLineItemsRequest(
            filter=filter, normalization=normalization, limit=limit, offset=offset
        )
    )

    if not result.success or result.data is None:
        if result.error is not None:
            _display_error(result.error)
        raise typer.Exit(code=1)

    if json_output:
        console.print_json(result.data.model_dump_json())
        return

    unit = normalization.mode.value
    if normalization.mode != NormalizationMode.PERCENT_GDP:
        unit = f"{unit}, {normalization.currency.value}"
        if normalization.inflation_adjusted:
            unit = f"{unit}, real"
    _display_connection(result.data, unit)


@async_command
async def datasets() -> None:
    """List normalization datasets found in the datasets directory."""
    container = get_container()
    settings = container.settings()
    configure_logging(settings.log_level, settings.log_json)

    source = container.dataset_source()
    dataset_ids = await source.list_ids()
    if not dataset_ids:
        console.print(f"[yellow]No datasets found in {settings.datasets_dir}[/yellow]")
        return

    table = Table(title=f"Datasets ({settings.datasets_dir})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Frequency")
    table.add_column("Units")
    table.add_column("Points", justify="right")
    table.add_column("Status")

    problems: list[str] = []
    for dataset_id in dataset_ids:
        try:
            dataset = await source.get_by_id(dataset_id)
        except BudgetNormError as e:
            table.add_row(dataset_id, "-", "-", "-", "[red]invalid[/red]")
            problems.append(f"{dataset_id}: {e}")
            continue
        table.add_row(
            dataset_id,
            dataset.metadata.frequency or "-",
            dataset.metadata.units,
            str(len(dataset.points)),
            "[green]ok[/green]",
        )

    console.print(table)
    for problem in problems:
        console.print(f"[red]{escape(problem)}[/red]")
