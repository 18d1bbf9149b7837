"""Command-line interface for Live Harmony.

Provides commands for:
- ports: List MIDI input ports
- listen: Live chord, key and suggestion display from a MIDI port
- replay: Run a MIDI file through the live analysis pipeline
- chord: Classify a set of MIDI pitches
- keys: Rank keys for a chord progression
- suggest: Diatonic chords, scales and extensions for a key
"""

import typer
import time
import logging
from itertools import groupby
from dataclasses import asdict
from pathlib import Path
from typing import Optional, List
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="live-harmony",
    help="Real-time harmonic analysis for MIDI input",
    rich_markup_mode="markdown",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _session_config(history_size: int, decay: float, scales: str):
    """Build a SessionConfig from CLI options."""
    from .inference import KeyDetectorConfig
    from .session import SessionConfig

    scale_names = tuple(s.strip() for s in scales.split(",") if s.strip())
    try:
        key_config = KeyDetectorConfig(
            history_size=history_size,
            recency_decay=decay,
            scales=scale_names,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return SessionConfig(key_detector=key_config)


@app.command()
def ports(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """List available MIDI input ports."""
    from .input import MidiSource, MidiSourceError

    _setup_logging(verbose)

    try:
        names = MidiSource.list_inputs()
    except MidiSourceError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not names:
        console.print("[yellow]No MIDI devices found. Connect a device and try again.[/yellow]")
        return

    table = Table(title="MIDI Inputs")
    table.add_column("#", style="cyan")
    table.add_column("Name", style="green")
    for index, name in enumerate(names):
        table.add_row(str(index), name)
    console.print(table)


@app.command()
def listen(
    port: Optional[str] = typer.Option(
        None, "-p", "--port", help="MIDI input port name (default: first available)"
    ),
    history_size: int = typer.Option(
        16, "--history-size", help="Number of chords remembered for key detection"
    ),
    decay: float = typer.Option(
        0.9, "--decay", help="Recency weight decay per chord (1.0 = plain count)"
    ),
    scales: str = typer.Option(
        "Major,Minor", "--scales", help="Comma-separated scales tried for key detection"
    ),
    poll_interval: float = typer.Option(
        0.005, "--poll-interval", help="Seconds between port polls"
    ),
    refresh_interval: float = typer.Option(
        2.0, "--refresh-interval", help="Seconds between port re-scans (0 = never)"
    ),
    debounce: float = typer.Option(
        0.15, "--debounce", help="Seconds of quiet before analyzing (0 = every event)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Show live chord, key and suggestions while you play.

    Examples:
        live-harmony listen
        live-harmony listen --port "USB Keyboard" --scales "Major,Minor,Dorian"
    """
    from .input import MidiSource, MidiSourceError
    from .session import AnalysisSession

    _setup_logging(verbose)
    config = _session_config(history_size, decay, scales)
    config.debounce = max(debounce, 0.0)
    session = AnalysisSession(config)
    source = MidiSource(session.tracker)

    try:
        opened = source.open(port)
    except MidiSourceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[blue]Listening on:[/blue] {opened}  [dim](Ctrl+C to stop)[/dim]\n")

    last_state = None
    last_refresh = time.monotonic()
    try:
        with source:
            while True:
                polled = source.poll()
                analyzed = session.update()
                if analyzed or (polled and not config.debounce):
                    snapshot = session.snapshot()
                    state = (tuple(snapshot.active_notes), snapshot.chord, snapshot.key)
                    if state != last_state:
                        _print_snapshot(snapshot)
                        last_state = state

                if refresh_interval > 0 and time.monotonic() - last_refresh >= refresh_interval:
                    last_refresh = time.monotonic()
                    try:
                        source.refresh()
                    except MidiSourceError as e:
                        console.print(f"[yellow]Warning: {e}[/yellow]")

                time.sleep(poll_interval)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
    finally:
        session.tracker.events.remove_all_listeners()


@app.command()
def replay(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    history_size: int = typer.Option(
        16, "--history-size", help="Number of chords remembered for key detection"
    ),
    decay: float = typer.Option(
        0.9, "--decay", help="Recency weight decay per chord (1.0 = plain count)"
    ),
    scales: str = typer.Option(
        "Major,Minor", "--scales", help="Comma-separated scales tried for key detection"
    ),
    include_drums: bool = typer.Option(
        False, "--drums", help="Include percussion tracks"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Replay a MIDI file through the live analysis pipeline."""
    from .input import MidiFileReader
    from .session import AnalysisSession

    _setup_logging(verbose)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    config = _session_config(history_size, decay, scales)
    config.auto_analyze = False
    session = AnalysisSession(config)
    reader = MidiFileReader(include_drums=include_drums)
    try:
        events = reader.read(str(input_file))
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    timeline = []
    previous = None
    # Notes struck together are analyzed together
    for onset, group in groupby(events, key=lambda item: item[0]):
        for _, event in group:
            session.handle(event)
        current = session.analyze()
        if current is not None and current != previous:
            timeline.append((onset, current))
        previous = current

    candidates = session.snapshot().keys

    if json_output:
        console.print_json(data={
            "file": str(input_file),
            "events": len(events),
            "chords": [{"time": round(t, 3), "chord": c} for t, c in timeline],
            "keys": [asdict(k) for k in candidates],
            "diatonic": [asdict(s) for s in _diatonic_for_best(candidates)],
        })
        return

    console.print(f"\n[bold blue]Replay: {input_file.name}[/bold blue]")
    console.print(f"   {len(events)} note events, {len(timeline)} chord changes\n")

    if not timeline:
        console.print("[yellow]No chords recognized![/yellow]")
        return

    best = candidates[0] if candidates else None
    _show_timeline_table(timeline, best)
    _show_keys_table(candidates[:5])
    if best:
        _show_suggestions_table(f"Diatonic Chords in {best.name}", _diatonic_for_best(candidates))


def _diatonic_for_best(candidates) -> list:
    """Diatonic chord suggestions for the best key, if any."""
    from .inference import suggest_diatonic_chords

    return suggest_diatonic_chords(candidates[0].name, None) if candidates else []


@app.command()
def chord(
    pitches: List[int] = typer.Argument(..., help="MIDI pitches, e.g. 60 64 67"),
):
    """Classify a set of MIDI pitches as a chord."""
    from .core import midi_to_note_name
    from .inference import detect_chord, suggest_extensions

    names = "  ".join(midi_to_note_name(p) for p in pitches)
    console.print(f"[blue]Notes:[/blue] {names}")

    name = detect_chord(pitches)
    if name is None:
        console.print("[yellow]No chord[/yellow]")
        return

    console.print(f"[green]Chord: {name}[/green]")
    extensions = suggest_extensions(name)
    if extensions:
        _show_suggestions_table("Extensions", extensions)


@app.command()
def keys(
    chords: List[str] = typer.Argument(..., help='Chord names in order, e.g. "D Minor" "G Major"'),
    history_size: int = typer.Option(
        16, "--history-size", help="Number of chords remembered for key detection"
    ),
    decay: float = typer.Option(
        0.9, "--decay", help="Recency weight decay per chord (1.0 = plain count)"
    ),
    scales: str = typer.Option(
        "Major,Minor", "--scales", help="Comma-separated scales tried for key detection"
    ),
):
    """Rank the most likely keys for a chord progression."""
    from .inference import KeyDetector

    config = _session_config(history_size, decay, scales)
    detector = KeyDetector(config=config.key_detector)

    for name in chords:
        if not detector.add_chord(name):
            console.print(f"[yellow]Warning: Unknown chord '{name}', skipped[/yellow]")

    candidates = detector.detect()
    if not candidates:
        console.print("[yellow]No key candidates[/yellow]")
        return

    _show_keys_table(candidates[:5])


@app.command()
def suggest(
    key: str = typer.Argument(..., help='Key name, e.g. "C Major"'),
    current: Optional[str] = typer.Option(
        None, "-c", "--chord", help='Current chord, e.g. "G Dom7"'
    ),
):
    """Suggest diatonic chords, scales and extensions for a key."""
    from .inference import (
        parse_key_name,
        parse_chord_name,
        suggest_diatonic_chords,
        suggest_scales,
        suggest_extensions,
    )

    if parse_key_name(key) is None:
        console.print(f"[red]Error: Unknown key: {key}[/red]")
        raise typer.Exit(1)
    if current is not None and parse_chord_name(current) is None:
        console.print(f"[red]Error: Unknown chord: {current}[/red]")
        raise typer.Exit(1)

    diatonic = suggest_diatonic_chords(key, current)
    if diatonic:
        _show_suggestions_table(f"Diatonic Chords in {key}", diatonic)
    else:
        console.print("[yellow]No diatonic triads for this scale[/yellow]")

    _show_suggestions_table("Scales", suggest_scales(key, current))

    if current is not None:
        extensions = suggest_extensions(current)
        if extensions:
            _show_suggestions_table(f"Extensions of {current}", extensions)


def _print_snapshot(snapshot):
    """Print one line per state change in listen mode."""
    notes = "  ".join(snapshot.note_names) or "-"
    chord_text = snapshot.chord or ("?" if snapshot.active_notes else "-")
    key_text = snapshot.key.name if snapshot.key else "-"
    line = f"[cyan]{notes:<24}[/cyan] [bold yellow]{chord_text:<20}[/bold yellow] [dim]Key: {key_text}[/dim]"
    if snapshot.chord and snapshot.diatonic:
        ideas = ", ".join(s.name for s in snapshot.diatonic[:3])
        line += f"  [green]→ {ideas}[/green]"
    console.print(line)


def _show_timeline_table(timeline, best_key):
    """Display recognized chords in a table."""
    from .inference import parse_chord_name

    table = Table(title="Recognized Chords")
    table.add_column("Time", style="yellow")
    table.add_column("Chord", style="cyan")
    table.add_column("Roman", style="green")

    for onset, name in timeline:
        roman = ""
        if best_key:
            roman = parse_chord_name(name).get_roman_numeral(best_key.root, best_key.scale)
        table.add_row(f"{onset:.2f}s", name, roman)

    console.print(table)


def _show_keys_table(candidates):
    """Display key candidates in a table."""
    from .inference import relative_key, parallel_key

    table = Table(title="Key Candidates")
    table.add_column("Key", style="cyan")
    table.add_column("Score", style="magenta")
    table.add_column("Relative", style="green")
    table.add_column("Parallel", style="green")

    for candidate in candidates:
        table.add_row(
            candidate.name,
            f"{candidate.score:.3f}",
            relative_key(candidate.name) or "-",
            parallel_key(candidate.name) or "-",
        )

    console.print(table)


def _show_suggestions_table(title, suggestions):
    """Display suggestions in a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Function", style="green")
    table.add_column("Confidence", style="magenta")

    for s in suggestions:
        table.add_row(s.name, s.function, f"{s.confidence:.2f}")

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
