"""Command 'pomo' of kit: run pomodoro timers."""

import typer

from kit_cli.config import load_pomo_config
from kit_cli.models.pomo import PomoDisplay, PomodoroSession, SegmentSequence

from .decorators import command_wrapper


@command_wrapper
async def pomo(
    time: int = typer.Option(
        25,
        "--time",
        "-t",
        help="Length of work periods",
        metavar="MINUTES",
        envvar="KIT_POMO_TIME",
    ),
    break_: int = typer.Option(
        5,
        "--break",
        "-b",
        help="Length of break periods",
        metavar="MINUTES",
        envvar="KIT_POMO_BREAK",
    ),
    long_break: int = typer.Option(
        15,
        "--long-break",
        "-l",
        help="Length of long break periods",
        metavar="MINUTES",
        envvar="KIT_POMO_LONG_BREAK",
    ),
    n_pomos: int = typer.Option(
        3,
        "--n-pomos",
        "-n",
        help="Number of work periods per long break",
        metavar="NUMBER",
        envvar="KIT_POMO_N_POMOS",
    ),
) -> None:
    """Run pomodoro timers. Press 'h' to see help for keyboard shortcuts while running."""
    config = load_pomo_config(
        time=time, break_=break_, long_break=long_break, n_pomos=n_pomos
    )
    sequence = SegmentSequence(config.time, config.break_, config.long_break, config.n_pomos)
    session = PomodoroSession(sequence, PomoDisplay())
    await session.run()
