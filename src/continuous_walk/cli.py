from typing import Optional

import typer
from rich import print
from rich.markup import escape

from continuous_walk import __version__
from continuous_walk.config import SimulationConfig
from continuous_walk.errors import WalkError
from continuous_walk.logger import setup_logging
from continuous_walk.my_walk import run_simulation

app = typer.Typer(help="Continuous random walk simulator")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def run(
    count: Optional[int] = typer.Option(None, help="Requested number of walks"),
    initial_value: Optional[float] = typer.Option(None, help="Starting value of every walk"),
    duration: Optional[float] = typer.Option(None, help="Last time value"),
    sd: Optional[float] = typer.Option(None, help="Standard deviation of the increments"),
    time_step: Optional[float] = typer.Option(None, help="Spacing of the time axis"),
    y_min: Optional[float] = typer.Option(None, help="Lower y limit of the plot"),
    y_max: Optional[float] = typer.Option(None, help="Upper y limit of the plot"),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible walks"),
    extra_walk: Optional[bool] = typer.Option(
        None, "--extra-walk/--exact-count",
        help="Generate count + 1 walks (historical default) or exactly count",
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config file"),
    save: Optional[str] = typer.Option(None, help="Write the figure to this path instead of showing it"),
    no_plot: bool = typer.Option(False, "--no-plot", help="Skip plotting"),
):
    """
    Simulate an ensemble of Gaussian random walks and plot them
    """
    if save and no_plot:
        print("[red]--save needs a plot; drop --no-plot[/red]")
        raise typer.Exit(code=1)

    overrides = dict(
        count=count, initial_value=initial_value, duration=duration, sd=sd,
        time_step=time_step, y_min=y_min, y_max=y_max, seed=seed, extra_walk=extra_walk,
    )

    try:
        if config:
            cfg = SimulationConfig.load(config, **overrides)
        else:
            cfg = SimulationConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValueError as e:
        print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    setup_logging(cfg.log.level, cfg.log.dir, cfg.log.rotation, cfg.log.retention)

    try:
        df, ax = run_simulation(cfg, plot=not no_plot, show=save is None)
    except WalkError as e:
        print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if ax is not None and save:
        ax.figure.savefig(save, dpi=150, bbox_inches="tight")
        print(f"[green]Figure saved to {save}[/green]")

    print(f"[blue]{len(df.columns) - 1} walks x {len(df)} steps[/blue]")
    print(df.tail(1).to_string(index=False))


if __name__ == "__main__":
    app()
