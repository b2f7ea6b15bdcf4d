"""Command-line interface for maxentkit."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="maxentkit",
    help="Train, evaluate and convert maximum-entropy models.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Enable structured logging at this level (DEBUG, INFO, WARNING, ERROR).",
        ),
    ] = None,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Configure logging for every command."""
    if log_level is None:
        return

    from maxentkit.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


def _open_events(path: Path, real_values: bool):
    from maxentkit.events import FileEventStream, RealValueFileEventStream

    return RealValueFileEventStream(path) if real_values else FileEventStream(path)


@app.command()
def train(
    events: Annotated[
        Path,
        typer.Option(
            "--events",
            "-e",
            help="Training events, one 'outcome pred1 pred2 ...' line per event.",
            exists=True,
            dir_okay=False,
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Model file (.bin for binary, anything else for text, .gz to compress).",
        ),
    ],
    params: Annotated[
        Path | None,
        typer.Option(
            "--params",
            "-p",
            help="Training parameters (YAML or .properties).",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    algorithm: Annotated[
        str | None,
        typer.Option("--algorithm", "-a", help="Algorithm (MAXENT, PERCEPTRON, QN)."),
    ] = None,
    iterations: Annotated[
        int | None,
        typer.Option("--iterations", "-i", help="Number of training iterations."),
    ] = None,
    cutoff: Annotated[
        int | None,
        typer.Option("--cutoff", help="Minimum predicate frequency."),
    ] = None,
    real_values: Annotated[
        bool,
        typer.Option("--real-values", help="Parse 'pred=value' context tokens."),
    ] = False,
) -> None:
    """Train a model from an event file."""
    from maxentkit.config import TrainingParameters, load_parameters
    from maxentkit.config.parameters import (
        ALGORITHM_PARAM,
        CUTOFF_PARAM,
        ITERATIONS_PARAM,
        TRAINING_EVENT_HASH,
    )
    from maxentkit.errors import MaxentError
    from maxentkit.io import save_model
    from maxentkit.training import get_event_trainer

    try:
        parameters = (
            load_parameters(params)
            if params is not None
            else TrainingParameters.default_parameters()
        )
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading parameters: {e}[/red]")
        raise typer.Exit(code=1) from e

    if algorithm is not None:
        parameters.set(ALGORITHM_PARAM, algorithm)
    if iterations is not None:
        parameters.set(ITERATIONS_PARAM, iterations)
    if cutoff is not None:
        parameters.set(CUTOFF_PARAM, cutoff)

    console.print(f"[blue]Training on {events}[/blue]")
    report: dict[str, str] = {}
    try:
        trainer = get_event_trainer(parameters, report)
        with _open_events(events, real_values) as stream:
            model = trainer.train(stream)
        save_model(model, output)
    except (MaxentError, ValueError) as e:
        console.print(f"[red]Training failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Training Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Model type", model.model_type.value)
    table.add_row("Outcomes", str(model.num_outcomes))
    table.add_row("Predicates", str(len(model.pmap)))
    table.add_row("Event hash", report.get(TRAINING_EVENT_HASH, "-"))
    console.print(table)
    console.print(f"\n[green]Saved to: {output}[/green]")


@app.command()
def evaluate(
    model_path: Annotated[
        Path,
        typer.Option("--model", "-m", help="Model file.", exists=True, dir_okay=False),
    ],
    events: Annotated[
        Path,
        typer.Option(
            "--events", "-e", help="Evaluation events.", exists=True, dir_okay=False
        ),
    ],
    real_values: Annotated[
        bool,
        typer.Option("--real-values", help="Parse 'pred=value' context tokens."),
    ] = False,
) -> None:
    """Evaluate a model on an event file."""
    from maxentkit.errors import MaxentError
    from maxentkit.evaluation import evaluate_model
    from maxentkit.io import load_model

    try:
        model = load_model(model_path)
        with _open_events(events, real_values) as stream:
            metrics = evaluate_model(model, stream)
    except (MaxentError, ValueError) as e:
        console.print(f"[red]Evaluation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Evaluation Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Events", str(metrics.n_events))
    table.add_row("Accuracy", f"{metrics.accuracy:.4f}")
    table.add_row("Log-loss", f"{metrics.log_loss:.4f}")
    if metrics.n_unknown_outcomes:
        table.add_row("Unknown outcomes", str(metrics.n_unknown_outcomes))
    console.print(table)


@app.command()
def convert(
    source: Annotated[
        Path,
        typer.Argument(help="Existing model file.", exists=True, dir_okay=False),
    ],
    target: Annotated[
        Path,
        typer.Argument(help="Output model file; encoding follows the suffix."),
    ],
) -> None:
    """Re-encode a model (binary <-> text, gzip)."""
    from maxentkit.errors import CorruptModelError
    from maxentkit.io import load_model, save_model

    try:
        save_model(load_model(source), target)
    except CorruptModelError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Converted {source} -> {target}[/green]")


@app.command()
def info(
    model_path: Annotated[
        Path,
        typer.Argument(help="Model file.", exists=True, dir_okay=False),
    ],
) -> None:
    """Show a summary of a model."""
    from maxentkit.errors import CorruptModelError
    from maxentkit.io import load_model

    try:
        model = load_model(model_path)
    except CorruptModelError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Model {model_path.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Model type", model.model_type.value)
    table.add_row("Outcomes", ", ".join(model.outcome_names))
    table.add_row("Predicates", str(len(model.pmap)))
    console.print(table)


@app.command()
def compare(
    events: Annotated[
        Path,
        typer.Option("--events", "-e", help="Labelled events.", exists=True, dir_okay=False),
    ],
    algorithms: Annotated[
        list[str] | None,
        typer.Option("--algorithm", "-a", help="Algorithm to include (repeatable)."),
    ] = None,
    params: Annotated[
        Path | None,
        typer.Option(
            "--params",
            "-p",
            help="Base training parameters (YAML or .properties).",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    test_size: Annotated[
        float,
        typer.Option("--test-size", help="Share of events held out for evaluation."),
    ] = 0.2,
    real_values: Annotated[
        bool,
        typer.Option("--real-values", help="Parse 'pred=value' context tokens."),
    ] = False,
) -> None:
    """Compare algorithms on a held-out split of an event file."""
    from maxentkit.config import load_parameters
    from maxentkit.errors import MaxentError
    from maxentkit.evaluation.comparison import DEFAULT_ALGORITHMS, compare_algorithms

    try:
        parameters = load_parameters(params) if params is not None else None
        with _open_events(events, real_values) as stream:
            results = compare_algorithms(
                stream,
                parameters,
                algorithms=algorithms or DEFAULT_ALGORITHMS,
                test_size=test_size,
            )
    except (MaxentError, OSError, ValueError) as e:
        console.print(f"[red]Comparison failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Algorithm Comparison")
    table.add_column("Algorithm", style="cyan")
    table.add_column("Accuracy", style="green")
    table.add_column("Log-loss", style="green")
    table.add_column("Test events")
    for result in results:
        table.add_row(
            result.algorithm,
            f"{result.metrics.accuracy:.4f}",
            f"{result.metrics.log_loss:.4f}",
            str(result.metrics.n_events),
        )
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from maxentkit import __version__

    console.print(f"maxentkit version {__version__}")


if __name__ == "__main__":
    app()
