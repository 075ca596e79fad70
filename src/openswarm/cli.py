"""
Command Line Interface for OpenSwarm.
Author: Nik Jois <nikjois@llamasearch.ai>
"""

import sys
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from . import __version__
from .core.config import Config, load_config
from .driver import run as run_swarm, build_swarm, describe_parameters
from .functions import BENCHMARKS
from .models.errors import SwarmError
from .optimization import Swarm, StepReport
from .reporting import format_summary, build_particle_table


console = Console()


def setup_logging(verbose: bool = False, debug: bool = False, default_level: str = "WARNING"):
    """Setup logging configuration."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = getattr(logging, default_level.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def apply_overrides(config: Config, overrides: Dict[str, Any]) -> Config:
    """Return a new config with dotted-path overrides applied."""
    data = config.to_dict()
    for path, value in overrides.items():
        if value is None:
            continue
        if "." in path:
            section, key = path.split(".", 1)
            data[section][key] = value
        else:
            data[path] = value
    return Config.from_dict(data)


@click.group()
@click.version_option(version=__version__)
def cli():
    """OpenSwarm Particle Swarm Optimization CLI"""
    pass


@cli.command()
@click.option("--config", "-c", type=click.Path(), help="Configuration file path")
@click.option("--function", "-f", "objective", type=str, help="Benchmark objective name")
@click.option("--size", "-n", type=int, help="Number of particles")
@click.option("--dimensions", "-d", type=int, help="Search space dimensionality")
@click.option("--iterations", "-i", type=int, help="Number of iterations")
@click.option("--omega", type=float, help="Inertia weight (random each iteration if omitted)")
@click.option("--phi1", type=float, help="Cognitive coefficient")
@click.option("--phi2", type=float, help="Social coefficient")
@click.option("--seed", type=int, help="Random seed")
@click.option("--maximize", is_flag=True, help="Maximize instead of minimize")
@click.option("--update-sign", type=click.Choice(["add", "subtract"]), help="Position update sign")
@click.option("--workers", type=int, help="Threads used to update particles")
@click.option("--show-particles", is_flag=True, help="List particles in summaries")
@click.option("--summary-every", type=int, help="Print a summary every N iterations")
@click.option("--plot", type=click.Path(), help="Write an animated GIF of the run")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable info logging")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def run(config: Optional[str], objective: Optional[str], size: Optional[int],
        dimensions: Optional[int], iterations: Optional[int], omega: Optional[float],
        phi1: Optional[float], phi2: Optional[float], seed: Optional[int],
        maximize: bool, update_sign: Optional[str], workers: Optional[int],
        show_particles: bool, summary_every: Optional[int], plot: Optional[str],
        as_json: bool, verbose: bool, debug: bool):
    """Run a particle swarm optimization."""
    try:
        run_config = Config.from_file(config) if config else load_config()
        run_config = apply_overrides(run_config, {
            "objective": objective,
            "iterations": iterations,
            "seed": seed,
            "maximize": maximize or None,
            "swarm.size": size,
            "swarm.dimensions": dimensions,
            "swarm.update_sign": update_sign,
            "swarm.max_workers": workers,
            "options.omega": omega,
            "options.phi_1": phi1,
            "options.phi_2": phi2,
            "output.show_particles": show_particles or None,
            "output.summary_every": summary_every,
            "output.plot_path": plot,
        })
    except SwarmError as e:
        console.print(f"[red]Configuration error: {e}")
        sys.exit(1)

    setup_logging(verbose, debug, run_config.log_level)

    output = run_config.output

    def on_start(swarm: Swarm):
        if as_json:
            return
        show_parameters(run_config)
        console.print(format_summary(swarm, show_particles=True), markup=False, highlight=False)

    def on_step(swarm: Swarm, report: StepReport):
        if as_json or not output.summary_every or report.iteration % output.summary_every:
            return
        console.print(f"\n[bold]>>>> Iteration {report.iteration} <<<<[/bold]")
        console.print(f"Omega (w): {report.omega}")
        if report.global_best_changed:
            console.print("[green]Global best changed")
        console.print(format_summary(swarm, output.show_particles), markup=False, highlight=False)

    try:
        result = run_swarm(run_config, on_start=on_start, on_step=on_step)
    except SwarmError as e:
        console.print(f"[red]Optimization failed: {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(Panel(
        f"x: {result.best_position}\nfitness: {result.best_fitness}",
        title="[bold blue]Global best[/bold blue]",
        subtitle=f"{result.iterations} iterations in {result.execution_time:.2f}s"
    ))
    if result.plot_path:
        console.print(f"[green]Animation written to: {result.plot_path}")


def show_parameters(config: Config):
    """Show the run parameters."""
    table = Table(title="Parameters")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    for key, value in describe_parameters(config).items():
        table.add_row(key, value)

    console.print(table)


@cli.command()
def functions():
    """List available benchmark objectives."""
    table = Table(title="Benchmark Objectives")
    table.add_column("Name", style="cyan")
    table.add_column("Bounds", style="white")
    table.add_column("Dimensions", justify="right")
    table.add_column("Description")

    for name, benchmark in sorted(BENCHMARKS.items()):
        dims = str(benchmark.dimensions) if benchmark.dimensions else "any"
        table.add_row(name, f"{benchmark.bounds}", dims, benchmark.description)

    console.print(table)


@cli.command()
@click.option("--config", "-c", type=click.Path(), help="Configuration file path")
@click.option("--size", "-n", type=int, help="Number of particles")
@click.option("--seed", type=int, help="Random seed")
@click.option("--function", "-f", "objective", type=str, help="Benchmark objective name")
def inspect(config: Optional[str], size: Optional[int], seed: Optional[int], objective: Optional[str]):
    """Show the initial swarm without iterating it."""
    try:
        run_config = Config.from_file(config) if config else load_config()
        run_config = apply_overrides(run_config, {
            "objective": objective, "seed": seed, "swarm.size": size,
        })
        swarm = build_swarm(run_config)
    except SwarmError as e:
        console.print(f"[red]Error: {e}")
        sys.exit(1)

    console.print(build_particle_table(swarm, title="Initial swarm"))
    console.print(f"Global best: {swarm.best()} (fitness {swarm.best_fitness()})")


@cli.command("init-config")
@click.argument("path", type=click.Path(), default="openswarm.yaml")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(path: str, force: bool):
    """Write the default configuration to PATH."""
    output_path = Path(path)
    if output_path.exists() and not force:
        console.print(f"[red]{output_path} already exists (use --force to overwrite)")
        sys.exit(1)

    Config().to_file(output_path)
    console.print(f"[green]Default configuration written to: {output_path}")


@cli.command("config-show")
@click.option("--config", "-c", type=click.Path(), help="Configuration file path")
def config_show(config: Optional[str]):
    """Show current configuration."""
    try:
        run_config = Config.from_file(config) if config else load_config()
    except SwarmError as e:
        console.print(f"[red]Error loading configuration: {e}")
        sys.exit(1)

    console.print(Panel(
        json.dumps(run_config.to_dict(), indent=2),
        title="[bold blue]OpenSwarm Configuration[/bold blue]",
        expand=False
    ))


if __name__ == "__main__":
    cli()
