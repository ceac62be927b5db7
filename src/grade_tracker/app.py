"""Interactive CLI application."""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from grade_tracker.aggregation import (
    UNLABELED, complete_semesters, needed_average, overall_average, per_subject_averages,
    semester_average, semester_report, semester_status, status_class, status_color,
    total_score, validate,
)
from grade_tracker.db import DEFAULT_DB_PATH
from grade_tracker.models import SemesterStatus
from grade_tracker.mutations import parse_score, parse_semester_count, parse_target_avg
from grade_tracker.session import ANALYSIS_DELAY_SECONDS, TrackerSession

console = Console()

STATUS_STYLE = {
    SemesterStatus.EMPTY: "dim",
    SemesterStatus.PARTIAL: "yellow",
    SemesterStatus.COMPLETE: "green",
}

GUIDE = [
    "Set your final [bold]target average[/bold] and the [bold]total number of semesters[/bold] (e.g. 6).",
    "In [bold]Semester 1[/bold], add every subject. The list is copied to the other semesters automatically.",
    "Enter scores for each finished semester. A finished semester must have no subject left at 0.",
    "Run [bold]analyze[/bold] to see the minimum average needed in the remaining semesters.",
]


def configure_logging() -> None:
    level = os.environ.get("GRADE_TRACKER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level, format="%(message)s", handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome(session: TrackerSession):
    console.print(Panel(
        "[bold]Grade Tracker[/bold]\n[dim]Semester averages and target projection[/dim]",
        title="Welcome", border_style="cyan",
    ))
    if session.needs_profile:
        cmd_profile(session)
    else:
        console.print(f"Welcome back, [bold]{session.document.user_name}[/bold].")


def show_menu(session: TrackerSession):
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("overview", "Settings and semester status"),
        ("settings", "Target average and semester count"),
        ("semester", "Switch active semester"),
        ("scores", "Enter scores for the active semester"),
        ("analyze", "Run the analysis"),
        ("report", "Full report of the last analysis"),
        ("history", "Past analyses"),
        ("profile", "Change your name"),
        ("guide", "How to use this tool"),
        ("quit", "Exit"),
    ]
    if session.is_canonical_active:
        commands[4:4] = [
            ("add", "Add a subject"),
            ("rename", "Rename a subject"),
            ("delete", "Delete a subject"),
        ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def pick_subject(session: TrackerSession) -> str | None:
    semester = session.active_semester
    if semester is None or not semester.subjects:
        console.print("[yellow]No subjects yet.[/yellow]")
        return None
    for i, sub in enumerate(semester.subjects, 1):
        console.print(f"  [cyan]{i}[/cyan]) {sub.name or UNLABELED}  [dim]{sub.score}[/dim]")
    choice = Prompt.ask("Subject", choices=[str(i) for i in range(1, len(semester.subjects) + 1)])
    return semester.subjects[int(choice) - 1].id


def cmd_profile(session: TrackerSession):
    name = ""
    while not name:
        name = Prompt.ask("What is your name?", default=session.document.user_name or None) or ""
        name = name.strip()
    session.set_user_name(name)
    console.print(f"[green]Hello, {name}![/green]")


def cmd_overview(session: TrackerSession):
    doc = session.document
    console.print(Panel(
        f"Target average: [bold]{doc.target_avg:g}[/bold]   Semesters: [bold]{doc.total_semesters_target}[/bold]",
        title=doc.user_name or "Overview", border_style="cyan",
    ))
    table = Table(title="Semesters")
    table.add_column("Semester", justify="right")
    table.add_column("Subjects", justify="right")
    table.add_column("Average", justify="right")
    table.add_column("Status")
    for sem in doc.semesters:
        status = semester_status(sem)
        marker = " ←" if sem.id == session.active_semester_id else ""
        style = STATUS_STYLE[status]
        table.add_row(
            f"{sem.id}{marker}",
            str(len(sem.subjects)),
            f"{semester_average(sem):.1f}",
            f"[{style}]{status.value}[/{style}]",
        )
    console.print(table)


def cmd_settings(session: TrackerSession):
    doc = session.document
    target = parse_target_avg(Prompt.ask("Target average (1-100)", default=f"{doc.target_avg:g}"))
    session.set_target_avg(target)
    count = parse_semester_count(Prompt.ask("Total semesters", default=str(doc.total_semesters_target)))
    session.set_total_semesters(count)
    validation = validate(session.document)
    if not validation.is_valid_target:
        console.print("[red]Target average must be above 0 and at most 100.[/red]")
    if not validation.is_valid_sem_count:
        console.print("[red]Semester count must be at least 1.[/red]")


def cmd_semester(session: TrackerSession):
    ids = [str(s.id) for s in session.document.semesters]
    if not ids:
        console.print("[yellow]No semesters configured. Set a semester count first.[/yellow]")
        return
    choice = Prompt.ask("Semester", choices=ids, default=str(session.active_semester_id))
    session.select_semester(int(choice))
    console.print(f"[green]Semester {choice} is now active.[/green]")


def cmd_add(session: TrackerSession):
    if not session.is_canonical_active:
        console.print("[red]Subjects are managed from Semester 1.[/red]")
        return
    if not session.document.semesters:
        console.print("[yellow]No semesters configured. Set a semester count first.[/yellow]")
        return
    subject_id = session.add_subject()
    name = Prompt.ask("Subject name", default="").strip()
    if name:
        session.rename_subject(subject_id, name)
    console.print(f"[green]Added {name or UNLABELED} to every semester.[/green]")


def cmd_rename(session: TrackerSession):
    if not session.is_canonical_active:
        console.print("[red]Subject names can only be changed from Semester 1.[/red]")
        return
    subject_id = pick_subject(session)
    if subject_id:
        session.rename_subject(subject_id, Prompt.ask("New name").strip())


def cmd_delete(session: TrackerSession):
    if not session.is_canonical_active:
        console.print("[red]Subjects are managed from Semester 1.[/red]")
        return
    subject_id = pick_subject(session)
    if subject_id:
        session.delete_subject(subject_id)
        console.print("[green]Subject removed from every semester.[/green]")


def cmd_scores(session: TrackerSession):
    semester = session.active_semester
    if semester is None or not semester.subjects:
        if session.is_canonical_active:
            console.print("[yellow]Add your subjects first with 'add'.[/yellow]")
        else:
            console.print("[yellow]Subjects are copied from Semester 1. Add them there first.[/yellow]")
        return
    console.print(f"\n[bold]Semester {semester.id}[/bold] [dim](blank keeps the current score)[/dim]")
    for sub in semester.subjects:
        raw = Prompt.ask(f"  {sub.name or UNLABELED}", default=str(sub.score))
        session.set_score(sub.id, parse_score(raw))
    status = semester_status(session.active_semester)
    style = STATUS_STYLE[status]
    console.print(f"Semester {semester.id}: [{style}]{status.value}[/{style}]")


def cmd_analyze(session: TrackerSession, delay: float = ANALYSIS_DELAY_SECONDS):
    validation = validate(session.document)
    if not validation.can_calculate:
        if validation.has_partial:
            console.print("[yellow]Some semesters are only partly scored. Finish or clear them first.[/yellow]")
        if not validation.has_complete:
            console.print("[yellow]Complete at least one semester before analyzing.[/yellow]")
        if not validation.is_valid_target:
            console.print("[red]Target average must be above 0 and at most 100.[/red]")
        if not validation.is_valid_sem_count:
            console.print("[red]Semester count must be at least 1.[/red]")
        return
    with console.status("Processing..."):
        summary = session.analyze(delay=delay)
    color = status_color(summary["status_class"])
    verdict = "Target accomplished" if summary["target_reached"] else "Recovery plan needed"
    console.print(Panel(
        f"Overall average: [bold]{summary['overall_avg']:.1f}[/bold]\n"
        f"Total score: [bold]{summary['total_score']}[/bold]\n"
        f"Semesters analysed: [bold]{len(summary['completed_semesters'])}[/bold]\n"
        f"[{color}]{verdict}[/{color}]",
        title=summary["user_name"] or "Analysis", border_style=color,
    ))
    console.print("[dim]Type 'report' for the full breakdown.[/dim]")


def cmd_report(session: TrackerSession):
    if not session.results_visible:
        console.print("[yellow]Run 'analyze' first.[/yellow]")
        return
    doc = session.document
    for entry in semester_report(doc):
        status = entry["status"]
        title = f"Semester {entry['id']:02d}"
        if status == SemesterStatus.COMPLETE:
            title += f" — {entry['average']:.1f}"
        if status == SemesterStatus.EMPTY:
            body = "[dim]Awaiting data[/dim]"
        else:
            body = "\n".join(f"{name:<24} {score:>3}" for name, score in entry["subjects"])
        console.print(Panel(body, title=title, border_style=STATUS_STYLE[status]))

    table = Table(title="Subject Averages")
    table.add_column("Subject", style="cyan")
    table.add_column("Average", justify="right")
    table.add_column("Semesters", justify="right")
    for row in per_subject_averages(doc):
        sc_color = status_color(status_class(row["average"], doc.target_avg))
        table.add_row(row["name"] or UNLABELED, f"[{sc_color}]{row['average']:.1f}[/{sc_color}]", str(row["count"]))
    console.print(table)

    overall = overall_average(complete_semesters(doc))
    color = status_color(status_class(overall, doc.target_avg))
    needed = needed_average(doc)
    console.print(f"\n  Overall average: [{color}][bold]{overall:.1f}[/bold][/{color}]  |  "
                  f"Total score: [bold]{total_score(doc)}[/bold]")
    console.print(f"  Needed average in remaining semesters: [bold cyan]{needed:.1f}[/bold cyan] "
                  f"to reach [bold]{doc.target_avg:g}[/bold]")


def cmd_history(session: TrackerSession):
    history = session.document.history
    if not history:
        console.print("[dim]No analyses recorded yet.[/dim]")
        return
    table = Table(title="Analysis History")
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("Name")
    table.add_column("Average", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Semesters")
    for i, h in enumerate(history, 1):
        table.add_row(
            str(i), h.timestamp[:16].replace("T", " "), h.user_name, f"{h.overall_avg:.1f}",
            str(h.total_score), f"{h.target_avg:g}", ", ".join(str(s) for s in h.completed_semesters),
        )
    console.print(table)
    choice = Prompt.ask("Delete an entry? (number, blank to keep)", default="").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(history):
        session.delete_history_entry(history[int(choice) - 1].id)
        console.print("[green]Entry deleted.[/green]")


def cmd_guide(session: TrackerSession):
    body = "\n".join(f"[cyan]{i}.[/cyan] {line}" for i, line in enumerate(GUIDE, 1))
    console.print(Panel(body, title="How to use", border_style="blue"))


COMMANDS = {
    "overview": cmd_overview,
    "settings": cmd_settings,
    "semester": cmd_semester,
    "add": cmd_add,
    "rename": cmd_rename,
    "delete": cmd_delete,
    "scores": cmd_scores,
    "analyze": cmd_analyze,
    "report": cmd_report,
    "history": cmd_history,
    "profile": cmd_profile,
    "guide": cmd_guide,
}


def main():
    configure_logging()
    session = TrackerSession.open(DEFAULT_DB_PATH)
    show_welcome(session)

    while True:
        show_menu(session)
        choice = Prompt.ask("\n[bold]>[/bold]", default="overview").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck this semester![/dim]")
                break
            command = COMMANDS.get(choice)
            if command is None:
                console.print("[red]Unknown command. Try again.[/red]")
            else:
                command(session)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
