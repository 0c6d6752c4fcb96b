import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Routes the package loggers through a RichHandler on stderr.
    Safe to call more than once.
    """
    logger = logging.getLogger("portmonitor")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=err_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    return logger


class MonitorUI:
    def __init__(self):
        self.console = console
        self.err_console = err_console

    def print_usage(self, prog: str = "portmonitor"):
        self.console.print(f"usage: {prog} <command> [<args>]", markup=False, highlight=False)
        self.console.print("These are the available commands:")
        self.console.print("   params      Configuration over params")
        self.console.print("   properties  Configuration for properties file")

    def show_unknown_command(self, args):
        self.console.print(f"[yellow]unknown parameters:[/yellow] {escape(' '.join(args))}", highlight=False)

    def show_config_error(self, error: Exception, parser: argparse.ArgumentParser):
        self.err_console.print(Panel(str(error), title="Configuration Error", border_style="bold red"))
        self.err_console.print(f"Usage of {parser.prog}:", markup=False, highlight=False)
        self.err_console.print(parser.format_help(), markup=False, highlight=False)

    def display_start(self, hostname, addresses):
        self.console.print(Panel.fit(
            f"[bold green]Monitoring {hostname}[/bold green] on {', '.join(addresses) or 'no addresses'}",
            border_style="blue"
        ))

    def display_results(self, result):
        """
        Displays the open ports in a Rich table.
        """
        if not result.any_open:
            self.console.print(f"[green]No open ports found ({len(result.outcomes)} probes).[/green]")
            return

        table = Table(title="Open Ports", show_header=True, header_style="bold magenta")
        table.add_column("Address", style="blue")
        table.add_column("Port", style="cyan", justify="right")
        table.add_column("State", style="red")
        for outcome in result.open_ports:
            table.add_row(outcome.address, str(outcome.port), "OPEN")

        self.console.print(table)
        closed = len(result.outcomes) - len(result.open_ports)
        self.console.print(f"[bold]Open ports found: {len(result.open_ports)}[/bold]")
        if closed:
            self.console.print(f"[dim]Not shown: {closed} closed ports[/dim]")
