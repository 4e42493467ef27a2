"""
Rich console output and progress tracking
"""

from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn, TimeRemainingColumn
)
from rich.table import Table

from .file_utils import format_file_size
from .models import BatchProcessingStats, Container, Convert, Operation

# Global console instances; diagnostics go to stderr so plans can be piped
console = Console()
error_console = Console(stderr=True)


def describe_operation(op: Operation) -> str:
    """One-line description, e.g. `0:1 (audio): transcode to truehd`"""
    prefix = f"0:{op.stream_index} ({op.stream_type.label})"
    if isinstance(op.kind, Convert):
        return f"{prefix}: transcode to {op.kind.codec}"
    return f"{prefix}: copy"


def describe_stream(stream) -> str:
    """Short human readable summary of a stream for plan tables"""
    parts = [getattr(stream, 'codec_name', stream.codec_type)]
    if stream.codec_type == 'video':
        parts.append(f"{stream.width}x{stream.height}")
    elif stream.codec_type == 'audio':
        parts.append(f"{stream.channel_count}ch")
    if stream.language:
        parts.append(stream.language)
    if stream.title:
        parts.append(f'"{stream.title}"')
    if stream.dispositions:
        parts.append('[' + ', '.join(sorted(d.value for d in stream.dispositions)) + ']')
    return ' '.join(parts)


class RichOutput:
    """Rich console output manager"""

    def __init__(self):
        self.console = console
        self.error_console = error_console

    def print_file_path(self, path: Path):
        """Print file path being processed"""
        self.console.print(f"\n[bold cyan]Processing:[/bold cyan] {escape(str(path))}")

    def print_dry_run(self, inp: Path, out: Path, operations: Sequence[Operation]):
        """Print the operations a conversion would perform"""
        self.console.print(f"{inp} -> {out}:", markup=False, highlight=False, soft_wrap=True)
        for op in operations:
            self.console.print(f"  {describe_operation(op)}", markup=False, highlight=False, soft_wrap=True)

    def print_plan(self, container: Container, operations: Sequence[Operation]):
        """Print every input stream with what the plan does to it"""
        planned = {op.stream_index: op for op in operations}
        output_position = {op.stream_index: n for n, op in enumerate(operations)}

        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED,
                      title=f"{escape(Path(container.filename).name)} ({format_file_size(container.size)})")
        table.add_column("Stream", style="cyan")
        table.add_column("Details", style="white")
        table.add_column("Action")
        table.add_column("Output #", justify="right")

        for stream in container.streams:
            op = planned.get(stream.index)
            if op is None:
                action = "[red]drop[/red]"
                position = ""
            elif isinstance(op.kind, Convert):
                action = f"[yellow]transcode to {op.kind.codec}[/yellow]"
                position = str(output_position[stream.index])
            else:
                action = "[green]copy[/green]"
                position = str(output_position[stream.index])
            table.add_row(f"0:{stream.index} ({stream.codec_type})", escape(describe_stream(stream)),
                          action, position)

        self.console.print(table)

    def create_progress_bar(self, total_duration: Optional[float] = None) -> Progress:
        """Progress display for an ffmpeg run, measured in seconds of output written.

        Without a known duration only a spinner and the elapsed time are shown.
        """
        columns = [SpinnerColumn(), TextColumn("[bold blue]{task.description}")]
        if total_duration:
            columns += [BarColumn(), TaskProgressColumn(), TimeElapsedColumn(), TimeRemainingColumn()]
        else:
            columns.append(TimeElapsedColumn())
        return Progress(*columns, console=self.error_console, transient=False)

    def print_success(self, message: str):
        self.error_console.print(f"[bold green]✓ {escape(message)}[/bold green]")

    def print_error(self, message: str, details: Optional[str] = None):
        """Print an error, with optional details on a second line"""
        self.error_console.print(f"[bold red]✗ {escape(message)}[/bold red]")
        if details:
            self.error_console.print(f"[red]  {escape(details)}[/red]")

    def print_info(self, message: str):
        self.error_console.print(f"[bold cyan]ℹ {escape(message)}[/bold cyan]")

    def print_skipped(self, reason: str):
        self.error_console.print(f"[bold yellow]⏭ {escape(reason)}[/bold yellow]")

    def print_interrupted(self, message: str = "Conversion interrupted"):
        self.error_console.print(f"\n[bold red]⏹ {escape(message)}[/bold red]")

    def print_final_summary(self, stats: BatchProcessingStats):
        """Print batch summary"""
        ok = stats.error_files == 0
        status_color = "green" if ok else "yellow"
        title = "Processing Complete" if ok else "Processing Finished With Errors"

        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="white", justify="right")

        table.add_row("Total Files", str(stats.total_files))
        table.add_row("Converted", f"[green]{stats.processed_files}[/green]")
        table.add_row("Planned (dry run)", f"[blue]{stats.planned_files}[/blue]")
        table.add_row("Skipped", f"[yellow]{stats.skipped_files}[/yellow]")
        if stats.error_files > 0:
            table.add_row("Errors", f"[red]{stats.error_files}[/red]")

        self.error_console.print(Panel(
            table,
            title=f"[bold {status_color}]{title}[/bold {status_color}]",
            border_style=status_color
        ))


# Global rich output instance
rich_output = RichOutput()
