"""Main CLI interface using Typer."""

import typer
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn, TimeElapsedColumn

from pagetran import __version__
from pagetran.core.exceptions import PageTranError
from pagetran.core.pipeline import TranslationPipeline
from pagetran.translation.backends import BACKENDS, get_backend_class
from pagetran.utils import setup_logger, load_config, config_from_dict

app = typer.Typer(
    name="pagetran",
    help="PageTran: translate PDF documents page by page with LLM backends",
    add_completion=False
)

console = Console()


def _build_config(config_file: Optional[Path], overrides: Dict[str, Any]):
    data = load_config(str(config_file) if config_file else None)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return config_from_dict(data)


@app.command()
def translate(
    input_file: Path = typer.Argument(..., help="Input PDF file"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output file path"),
    source_lang: Optional[str] = typer.Option(None, "-s", "--source", help="Source language"),
    target_lang: Optional[str] = typer.Option(None, "-t", "--target", help="Target language"),
    backend: Optional[str] = typer.Option(None, "-b", "--backend", help="Translation backend (gemini/openai/anthropic/ollama/local)"),
    model: Optional[str] = typer.Option(None, "-m", "--model", help="Model name (e.g., gemini-1.5-flash, gpt-4o)"),
    concurrency: Optional[int] = typer.Option(None, "-j", "--concurrency", help="Pages translated at the same time"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Max characters per backend request"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="Only translate the first N pages"),
    font: Optional[Path] = typer.Option(None, "--font", help="TTF/OTF font to embed in the output"),
    config_file: Optional[Path] = typer.Option(None, "-c", "--config", help="YAML config file"),
    debug_mode: bool = typer.Option(False, "--debug/--no-debug", help="Enable debug logging"),
):
    """Translate a PDF document."""

    if not input_file.exists():
        console.print(f"[red]Error: Input file not found: {input_file}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = input_file.with_name(f"{input_file.stem}_translated.pdf")

    try:
        config = _build_config(config_file, {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "backend": backend,
            "model_name": model,
            "max_concurrent_pages": concurrency,
            "chunk_size": chunk_size,
            "max_pages": max_pages,
            "font_path": font,
            "log_level": "DEBUG" if debug_mode else None,
        })
    except (PageTranError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    setup_logger(level=config.log_level)

    console.print(f"[bold blue]PageTran Translation[/bold blue]")
    console.print(f"Input: {input_file}")
    console.print(f"Output: {output}")
    console.print(f"Translation: {config.source_lang} → {config.target_lang}")
    console.print(f"Backend: {config.backend}\n")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=30),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False
        ) as progress:
            task = progress.add_task("[cyan]Starting...", total=100)

            def progress_callback(pct: float, message: str):
                progress.update(task, completed=int(pct * 100), description=f"[cyan]{message}")

            pipeline = TranslationPipeline(config, progress_callback=progress_callback)
            pipeline.translate_file(input_file, output)
            progress.update(task, completed=100, description="[green]✓ Output saved")

    except PageTranError as e:
        console.print(f"[red]Error: {e}[/red]")
        if e.suggestion:
            console.print(f"[dim]{e.suggestion}[/dim]")
        raise typer.Exit(1)

    stats = pipeline.get_statistics()
    console.print("\n[bold green]Translation Complete![/bold green]")
    console.print(f"Output: {output}")
    console.print(
        f"Pages: {stats['pages_translated']}  Chunks: {stats['chunks_translated']}  "
        f"Retries: {stats['retries']}  Time: {stats['last_duration']:.1f}s"
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "-p", "--port", envvar="PORT", help="Port"),
    config_file: Optional[Path] = typer.Option(None, "-c", "--config", help="YAML config file"),
):
    """Run the HTTP upload service."""
    import uvicorn
    from pagetran.server import create_app

    try:
        config = _build_config(config_file, {})
        setup_logger(level=config.log_level)
        web_app = create_app(config)
    except (PageTranError, FileNotFoundError, ImportError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold blue]PageTran[/bold blue] serving on http://{host}:{port}")
    uvicorn.run(web_app, host=host, port=port, log_config=None)


@app.command()
def backends():
    """List translation backends and whether they are configured."""

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Backend")
    table.add_column("Default model")
    table.add_column("API key")
    table.add_column("Status")

    for name, (_, _, env_var) in BACKENDS.items():
        try:
            backend = get_backend_class(name)()
        except ImportError as e:
            table.add_row(name, "-", env_var or "-", f"[red]✗ {e}[/red]")
            continue

        if backend.is_available():
            status = "[green]✓ Available[/green]"
        else:
            status = "[yellow]✗ Not configured[/yellow]"
        table.add_row(name, backend.model or "-", env_var or "-", status)

    console.print("\n[bold]Available Translation Backends[/bold]\n")
    console.print(table)
    console.print("\n[dim]💡 Set the API key variable (or put it in .env) to enable a backend[/dim]")


@app.command()
def version():
    """Show the installed version."""
    console.print(f"pagetran {__version__}")


def cli():
    """Main CLI entry point."""
    load_dotenv()
    app()


if __name__ == "__main__":
    cli()
