"""Command-line interface for codemaster_py."""

import asyncio
import shlex
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape
from rich.table import Table

from . import __version__
from .client.models import Difficulty, Problem, Submission
from .config import GlobalConfig, LocalConfig
from .errors import CodeMasterError
from .practice import Practice, open_practice
from .progress import SessionState, StatusFilter
from .utils.logging_config import setup_logging
from .utils.terminal import (
    console,
    create_table,
    format_difficulty,
    format_status_color,
    print_verdict,
    scanline_trim,
)


def _practice() -> Practice:
    return open_practice(GlobalConfig.load(), LocalConfig.load())


def _run(coro):
    """Run a command coroutine, reporting codemaster errors instead of tracebacks."""
    try:
        return asyncio.run(coro)
    except CodeMasterError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


async def _restore(practice: Practice) -> bool:
    """Restore the remembered user; tell the user when there is none."""
    await practice.session.boot()
    if practice.session.state is not SessionState.AUTHENTICATED:
        console.print("[yellow]Not logged in. Please login first.[/yellow]")
        return False
    return True


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _default_problem() -> Optional[str]:
    local = LocalConfig.load()
    return local.default_problem if local else None


def print_problem(problem: Problem, solved: bool = False) -> None:
    marker = " [green]✓ solved[/green]" if solved else ""
    console.print(f"\n[bold cyan]{escape(problem.title)}[/bold cyan]{marker}")
    console.print(
        f"{format_difficulty(problem.difficulty)}  [white]{escape(problem.category)}[/white]"
        f"  [dim]{escape(problem.id)}[/dim]"
    )
    console.print(f"\n{problem.description}", markup=False)

    for idx, test in enumerate(problem.public_tests, start=1):
        console.print(f"\n[bold]Example {idx}:[/bold]")
        console.print(f"  Input:  {test.input}", markup=False)
        console.print(f"  Output: {test.expected_output}", markup=False)
        if test.explanation:
            console.print(f"  Explanation: {test.explanation}", markup=False)

    if problem.constraints:
        console.print("\n[bold]Constraints:[/bold]")
        for constraint in problem.constraints:
            console.print(f"  - {constraint}", markup=False)


def print_problems(practice: Practice) -> None:
    problems = practice.view.problems
    if not problems:
        console.print("[yellow]No problems match the current filters.[/yellow]")
        return

    table = create_table("Problems", ["#", "ID", "Title", "Difficulty", "Category", "Solved"])
    for idx, problem in enumerate(problems):
        table.add_row(
            str(idx),
            escape(problem.id),
            escape(problem.title),
            format_difficulty(problem.difficulty),
            escape(problem.category),
            "[green]✓[/green]" if practice.view.is_solved(problem.id) else "",
        )
    console.print(table)


def print_stats(practice: Practice) -> None:
    record = practice.session.record
    console.print(f"\n[bold cyan]User:[/bold cyan] {escape(record.username)}")
    console.print(f"[bold cyan]Points:[/bold cyan] {record.points}")
    console.print(f"[bold cyan]Submissions:[/bold cyan] {len(record.submissions)}")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Difficulty", style="cyan")
    table.add_column("Solved", style="white")
    for difficulty, stats in practice.view.stats.items():
        table.add_row(format_difficulty(difficulty), f"{stats.solved}/{stats.total}")
    console.print(table)


def print_submissions(submissions, limit: int = 20) -> None:
    if not submissions:
        console.print("[yellow]No submissions found.[/yellow]")
        return

    table = Table(title="Submissions", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Problem", style="yellow")
    table.add_column("Result", style="white")
    table.add_column("Score", style="white")
    table.add_column("Time", style="magenta")

    for sub in submissions[:limit]:
        table.add_row(
            sub.id[:8],
            escape(sub.problem_id),
            format_status_color(sub.verdict.status),
            str(sub.verdict.score),
            _format_time(sub.timestamp),
        )

    console.print(table)


def print_submission_outcome(practice: Practice, submission: Submission, before: int) -> None:
    print_verdict(submission.verdict)
    gained = practice.session.record.points - before
    if gained:
        console.print(f"\n[green]Solved! +{gained} points[/green]")
    elif submission.verdict.accepted:
        console.print("\n[cyan]Already solved; points are only awarded once.[/cyan]")


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, default=False, help="Enable debug output")
def cli(debug: bool):
    """codemaster_py - coding practice client with cloud-synced progress."""
    setup_logging(debug=debug)


@cli.command()
@click.argument("username", required=False)
def login(username: Optional[str]):
    """Log in by nickname, creating the progress record on first use."""

    async def run():
        practice = _practice()
        session = practice.session
        await session.boot()

        name = username if username is not None else click.prompt("Username")
        if session.state is SessionState.AUTHENTICATED:
            if session.username == name.strip():
                console.print(f"[green]Already logged in as {escape(session.username)}[/green]")
                return
            console.print(
                f"[yellow]Logged in as {escape(session.username)}. Run 'logout' first.[/yellow]"
            )
            return

        with console.status("[bold green]Loading progress..."):
            record = await session.login(name)
        console.print(f"[green]Successfully logged in as {escape(record.username)}[/green]")
        console.print(
            f"[cyan]{record.points} points, {len(record.solved_problem_ids)} solved[/cyan]"
        )

    _run(run())


@cli.command()
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def logout(yes: bool):
    """Forget the remembered user on this machine."""

    async def run():
        practice = _practice()
        if not await _restore(practice):
            return
        if not yes and not click.confirm(
            "Log out? Your progress is stored safely in the cloud.", default=True
        ):
            return
        username = practice.session.username
        practice.session.logout()
        console.print(f"[green]Logged out {escape(username)}[/green]")

    _run(run())


@cli.command()
def info():
    """Show user progress by difficulty."""

    async def run():
        practice = _practice()
        if not await _restore(practice):
            return
        print_stats(practice)

    _run(run())


@cli.command()
@click.option("-s", "--search", default="", help="Case-insensitive title search")
@click.option(
    "--status",
    type=click.Choice([s.value for s in StatusFilter], case_sensitive=False),
    default=StatusFilter.ALL.value,
    help="Solved status filter",
)
@click.option(
    "-d",
    "--difficulty",
    type=click.Choice([d.value for d in Difficulty], case_sensitive=False),
    help="Difficulty filter",
)
def problems(search: str, status: str, difficulty: Optional[str]):
    """List catalog problems."""

    async def run():
        practice = _practice()
        await practice.session.boot()
        practice.view.search = search
        practice.view.status = StatusFilter(status.lower())
        if difficulty:
            practice.view.difficulty = Difficulty(difficulty.capitalize())
        print_problems(practice)

    _run(run())


@cli.command()
@click.argument("problem_id", required=False)
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), help="Write starter code to file"
)
def show(problem_id: Optional[str], output: Optional[Path]):
    """Show a problem statement and its public examples."""

    async def run():
        practice = _practice()
        pid = problem_id or _default_problem()
        if not pid:
            console.print("[red]No problem given and no default problem configured.[/red]")
            return
        problem = practice.problem(pid)

        await practice.session.boot()
        print_problem(problem, solved=practice.view.is_solved(problem.id))

        if output is not None:
            if output.exists() and not click.confirm(f"Overwrite {output}?", default=False):
                return
            output.write_text(problem.starter_code + "\n", encoding="utf-8")
            console.print(f"\n[green]Starter code written to {escape(str(output))}[/green]")

    _run(run())


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--problem", help="Problem ID (default: extracted from filename)")
def submit(file: Path, problem: Optional[str]):
    """Submit a solution file for judging."""

    async def run():
        practice = _practice()
        if not await _restore(practice):
            return

        # "two-sum.js" -> "two-sum"
        pid = problem or file.stem
        try:
            target = practice.problem(pid)
        except CodeMasterError:
            fallback = _default_problem()
            if problem is not None or not fallback:
                raise
            target = practice.problem(fallback)

        source = file.read_text(encoding="utf-8")
        before = practice.session.record.points

        console.print(f"[cyan]Submitted {escape(file.name)}[/cyan]")
        console.print(f"[yellow]Problem: {escape(target.id)}[/yellow]")
        with console.status("[bold green]Judging..."):
            submission = await practice.session.submit(target, source)

        try:
            print_submission_outcome(practice, submission, before)
        finally:
            saved = await practice.close()
        if not saved:
            console.print(
                "[yellow]Progress could not be saved to the cloud: "
                f"{escape(str(practice.synchronizer.last_error))}[/yellow]"
            )

    _run(run())


@cli.command()
@click.option("-p", "--problem", help="Only show submissions for this problem")
@click.option("-n", "--limit", type=int, default=20, help="Number of submissions to show")
def submissions(problem: Optional[str], limit: int):
    """Show submission history, newest first."""

    async def run():
        practice = _practice()
        if not await _restore(practice):
            return
        record = practice.session.record
        subs = record.submissions_for(problem) if problem else record.submissions
        print_submissions(subs, limit)

    _run(run())


@cli.command()
@click.argument("submission_id", type=str)
@click.option("--code", is_flag=True, help="Also print the submitted code")
def feedback(submission_id: str, code: bool):
    """Show the verdict of a specific submission (ID or prefix)."""

    async def run():
        practice = _practice()
        if not await _restore(practice):
            return

        matches = [
            s for s in practice.session.record.submissions if s.id.startswith(submission_id)
        ]
        if not matches:
            console.print(f"[yellow]No submission matches {escape(submission_id)}.[/yellow]")
            return
        if len(matches) > 1:
            console.print(f"[yellow]{len(matches)} submissions match; use a longer ID.[/yellow]")
            return

        sub = matches[0]
        console.print(
            f"\n[bold cyan]Submission {sub.id}[/bold cyan] "
            f"for {escape(sub.problem_id)} at {_format_time(sub.timestamp)}"
        )
        if code:
            console.print(sub.code, markup=False, highlight=False)
        print_verdict(sub.verdict)

    _run(run())


SHELL_HELP = """\
Commands:
  problems                   list problems with the current filters
  search <text>              set title search (empty to clear)
  status <all|solved|unsolved>
  difficulty <Easy|Medium|Hard|all>
  show <problem>             show a problem statement
  submit <problem> <file>    judge a solution file
  history [problem]          show submissions
  stats                      show progress
  sync                       save progress now
  login <username> | logout
  quit"""


async def _shell_command(practice: Practice, line: str) -> bool:
    """Execute one shell line. Returns False when the shell should exit."""
    session = practice.session
    view = practice.view
    parts = shlex.split(line)
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("quit", "exit"):
        return False
    if cmd == "help":
        console.print(SHELL_HELP, markup=False)
    elif cmd == "login":
        if not args:
            console.print("[red]Usage: login <username>[/red]")
        else:
            record = await session.login(" ".join(args))
            console.print(f"[green]Successfully logged in as {escape(record.username)}[/green]")
    elif cmd == "problems":
        print_problems(practice)
    elif cmd == "search":
        view.search = " ".join(args)
        print_problems(practice)
    elif cmd == "status":
        view.status = StatusFilter((args or ["all"])[0].lower())
        print_problems(practice)
    elif cmd == "difficulty":
        value = (args or ["all"])[0]
        view.difficulty = None if value.lower() == "all" else Difficulty(value.capitalize())
        print_problems(practice)
    elif cmd == "show" and args:
        problem = practice.problem(args[0])
        print_problem(problem, solved=view.is_solved(problem.id))
    elif session.state is not SessionState.AUTHENTICATED:
        console.print("[yellow]Not logged in. Please login first.[/yellow]")
    elif cmd == "submit" and len(args) == 2:
        problem = practice.problem(args[0])
        source = Path(args[1]).expanduser().read_text(encoding="utf-8")
        before = session.record.points
        with console.status("[bold green]Judging..."):
            submission = await session.submit(problem, source)
        print_submission_outcome(practice, submission, before)
    elif cmd == "history":
        record = session.record
        print_submissions(record.submissions_for(args[0]) if args else record.submissions)
    elif cmd == "stats":
        print_stats(practice)
    elif cmd == "sync":
        if await practice.synchronizer.flush():
            console.print("[green]Progress saved.[/green]")
        else:
            console.print(f"[red]{escape(str(practice.synchronizer.last_error))}[/red]")
    elif cmd == "logout":
        confirmed = await asyncio.to_thread(
            click.confirm, "Log out? Your progress is stored safely in the cloud.", True
        )
        if confirmed:
            await practice.synchronizer.flush()
            session.logout()
            console.print("[green]Logged out[/green]")
    else:
        console.print(f"[red]Unknown command: {escape(line)}[/red] (type 'help')")
    return True


@cli.command()
def shell():
    """Interactive practice session with background progress sync."""

    async def run():
        practice = _practice()
        await practice.session.boot()
        if practice.session.record is not None:
            console.print(f"[green]Using saved session for {escape(practice.session.username)}[/green]")
        console.print("Type 'help' for commands.")

        while True:
            user = practice.session.username or "anonymous"
            marker = "*" if practice.synchronizer.syncing or practice.synchronizer.dirty else ""
            try:
                # Read off-loop so sync timers keep firing while waiting for input
                line = await asyncio.to_thread(scanline_trim, f"{user}{marker}> ")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            try:
                if not await _shell_command(practice, line):
                    break
            except CodeMasterError as e:
                console.print(f"[red]{escape(str(e))}[/red]")
            except (OSError, ValueError) as e:
                console.print(f"[red]{escape(str(e))}[/red]")

        if not await practice.close():
            console.print(
                f"[yellow]Progress could not be saved: "
                f"{escape(str(practice.synchronizer.last_error))}[/yellow]"
            )

    _run(run())


@cli.command()
@click.option("--api-url", help="Progress store relay base URL")
@click.option("--judge-url", help="Judging oracle endpoint")
@click.option("--sync-delay", type=float, help="Seconds of quiet before progress is saved")
@click.option("--timeout", type=float, help="Network timeout in seconds")
@click.option(
    "--catalog",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Problem catalog JSON for this directory",
)
@click.option("--default-problem", help="Problem used when none is given in this directory")
def configure(
    api_url: Optional[str],
    judge_url: Optional[str],
    sync_delay: Optional[float],
    timeout: Optional[float],
    catalog: Optional[Path],
    default_problem: Optional[str],
):
    """Show or change service endpoints and directory settings."""
    config = GlobalConfig.load()
    if api_url is not None:
        config.api_url = api_url
    if judge_url is not None:
        config.judge_url = judge_url
    if sync_delay is not None:
        config.sync_delay = sync_delay
    if timeout is not None:
        config.timeout = timeout
    if any(v is not None for v in (api_url, judge_url, sync_delay, timeout)):
        config.save()
        console.print("[green]Configuration saved[/green]")

    console.print(f"[bold cyan]User:[/bold cyan] {escape(config.user or '-')}")
    console.print(f"[bold cyan]Store:[/bold cyan] {config.api_url}")
    console.print(f"[bold cyan]Judge:[/bold cyan] {config.judge_url}")
    console.print(f"[bold cyan]Sync delay:[/bold cyan] {config.sync_delay:g}s")
    console.print(f"[bold cyan]Timeout:[/bold cyan] {config.timeout:g}s")

    local_path = LocalConfig.find_config() or Path.cwd() / ".codemaster_py.local"
    local = LocalConfig.load(local_path)
    if catalog is not None or default_problem is not None:
        local = local or LocalConfig()
        if catalog is not None:
            local.catalog = str(catalog.resolve())
        if default_problem is not None:
            local.default_problem = default_problem or None
        local.save(local_path)
        console.print(f"[green]Directory settings saved to {escape(str(local_path))}[/green]")

    if local is not None:
        console.print(f"[bold cyan]Catalog:[/bold cyan] {escape(local.catalog or 'built-in')}")
        console.print(
            f"[bold cyan]Default problem:[/bold cyan] {escape(local.default_problem or '-')}"
        )


@cli.command()
@click.option("--host", help="Bind address (default: HOST setting)")
@click.option("--port", type=int, help="Port (default: PORT setting)")
@click.option("--database-url", help="SQLAlchemy database URL")
def serve(host: Optional[str], port: Optional[int], database_url: Optional[str]):
    """Run the progress store relay server."""
    import uvicorn

    from .server import create_app
    from .server.config import settings

    setup_logging(json_logs=True)
    app = create_app(database_url)
    uvicorn.run(
        app,
        host=host or settings.HOST,
        port=port or settings.PORT,
        log_config=None,
        log_level=settings.LOG_LEVEL.lower(),
    )


@cli.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]codemaster_py[/bold cyan] version [green]{__version__}[/green]")
    console.print("Coding practice client with cloud-synced progress")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
