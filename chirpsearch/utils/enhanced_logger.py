"""
Rich console reporting for detections, catalog events and monitor runs.

Console output for the command line goes through a single ``rich`` Console so
log records (via RichHandler) and result tables interleave cleanly.
"""

import logging
from typing import Iterable, Optional, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..data.event_types import EVENT_TYPE_STYLES
from ..data.gw_physics_engine import chirp_mass, distance_light_years
from ..data.gw_signal_params import Analysis, DerivedPhysics, Event, StrainSample


def _fmt_optional(value: Optional[float], fmt: str) -> str:
    return "n/a" if value is None else format(value, fmt)


class ScientificReporter:
    """Renders engine results as rich tables and panels."""

    def __init__(self, console: Optional[Console] = None, console_width: int = 120):
        self.console = console or Console(width=console_width)

    def rich_handler(self) -> RichHandler:
        """Log handler writing through this reporter's console."""
        handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
        return handler

    def detection_table(self, analysis: Analysis) -> Table:
        detection = analysis.detection
        physics = analysis.physics
        table = Table(title="Detection", box=box.SIMPLE)
        table.add_column("Quantity", style="cyan")
        table.add_column("Value", style="magenta")

        table.add_row("SNR", f"{detection.snr:.2f}")
        table.add_row("Confidence", f"{analysis.confidence:.1%}")
        table.add_row("m1", f"{detection.m1:.1f} M☉")
        table.add_row("m2", f"{detection.m2:.1f} M☉")
        table.add_row("Chirp mass", f"{detection.chirp_mass:.2f} M☉")
        table.add_row("Total mass", f"{detection.total_mass:.1f} M☉")
        table.add_row("Peak strain", f"{detection.peak_strain:.3e}")
        self._add_physics_rows(table, physics)
        return table

    def _add_physics_rows(self, table: Table, physics: DerivedPhysics):
        table.add_row("Radiated energy", _fmt_optional(physics.radiated_energy_joules, ".2e") + " J")
        table.add_row("Peak luminosity", f"{physics.peak_luminosity_watts:.2e} W")
        table.add_row("Distance", f"{physics.distance_megaparsecs:.3g} Mpc")
        table.add_row("Redshift", f"{physics.redshift:.6f}")

    def print_detection(self, analysis: Optional[Analysis], threshold: float):
        if analysis is None:
            self.console.print(Panel.fit(
                f"No template cleared the SNR threshold of {threshold:g}",
                title="No detection",
                border_style="yellow",
            ))
            return
        self.console.print(self.detection_table(analysis))

    def catalog_table(self, rows: Iterable[Tuple[Event, DerivedPhysics]]) -> Table:
        table = Table(title="Confirmed detections", box=box.SIMPLE)
        table.add_column("Event", no_wrap=True)
        for column in ("Date", "Type", "m1", "m2", "M_final", "Mc",
                       "Distance", "Radiated E", "Peak L", "z", "σ"):
            table.add_column(column)

        for event, physics in rows:
            style = EVENT_TYPE_STYLES.get(event.event_type, "white")
            table.add_row(
                event.name,
                event.date.strftime("%Y-%m-%d"),
                f"[{style}]{event.event_type.display_name}[/{style}]",
                f"{event.m1:.2f}",
                f"{event.m2:.2f}",
                f"{event.final_mass:.2f}",
                f"{chirp_mass(event.m1, event.m2):.2f}",
                f"{event.distance_mpc:g} Mpc",
                _fmt_optional(physics.radiated_energy_joules, ".2e"),
                f"{physics.peak_luminosity_watts:.2e}",
                f"{physics.redshift:.4f}",
                f"{event.significance_sigma:.1f}",
            )
        return table

    def print_event(self, event: Event, physics: DerivedPhysics):
        table = Table(title=event.name, box=box.SIMPLE)
        table.add_column("Quantity", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_row("Type", event.event_type.display_name)
        table.add_row("Date", event.date.isoformat())
        table.add_row("Primary (m1)", f"{event.m1:.2f} M☉")
        table.add_row("Secondary (m2)", f"{event.m2:.2f} M☉")
        table.add_row("Final mass", f"{event.final_mass:.2f} M☉")
        table.add_row("Radiated mass", f"{event.radiated_mass:.2f} M☉")
        table.add_row("Chirp mass", f"{chirp_mass(event.m1, event.m2):.2f} M☉")
        table.add_row("Light years", f"{distance_light_years(event.distance_mpc):.2e} ly")
        table.add_row("Peak strain (h)", f"{event.peak_strain:.2e}")
        table.add_row("Significance", f"{event.significance_sigma:.1f}σ")
        self._add_physics_rows(table, physics)
        self.console.print(table)
        if event.description:
            self.console.print(Panel.fit(event.description, border_style="dim"))

    def print_monitor_summary(self, samples: Tuple[StrainSample, ...], ticks: int):
        values = [s.value for s in samples]
        table = Table(title="Strain monitor", box=box.SIMPLE)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_row("Ticks", str(ticks))
        table.add_row("Buffered samples", str(len(values)))
        if values:
            table.add_row("Min strain", f"{min(values):.3e}")
            table.add_row("Max strain", f"{max(values):.3e}")
            table.add_row("Window", f"{samples[0].time:.1f}s - {samples[-1].time:.1f}s")
        self.console.print(table)
