"""Main CLI entry point."""

import asyncio
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

import click

from .. import __version__
from ..config import ConfigManager
from ..config.models import MOVIE_MODES, SUPPORTED_LANGUAGES
from ..core.interfaces import IContentProvider
from ..core.models import (
    CastOutcome,
    FilmographyEntry,
    FilmographyState,
    GuessStatus,
    HintLevel,
    MovieSummary,
    RoundResult,
)
from ..core.services import CastRevealSession, FilmographySession
from ..infrastructure import Container, setup_logging
from ..utils import CineQuizError

SEARCH_RESULTS_SHOWN = 5


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="cinequiz")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """CineQuiz - Guess movies from their cast, or name an actor's films."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    if ctx.invoked_subcommand == "init":
        return

    # Tests and embedding hosts may pass a ready container
    if "container" in ctx.obj:
        ctx.obj.setdefault("config", ctx.obj["container"].get_config())
        return

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
def init(output: Path) -> None:
    """Initialize configuration file."""
    if output.exists():
        if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
            return

    try:
        ConfigManager.create_default_config(output)
    except OSError as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration file created at: {output}")
    click.echo("Set TMDB_API_KEY in your environment or a .env file.")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration summary."""
    config = ctx.obj["config"]
    cast = config.game.cast
    filmography = config.game.filmography

    click.echo("CineQuiz Status")
    click.echo("=" * 40)
    click.echo(f"TMDb Configured: {'yes' if _has_api_key(config.tmdb.api_key) else 'no'}")
    click.echo(f"Language: {config.app.language}")
    click.echo(f"Cast Mode: {config.app.mode}")
    click.echo(f"Reveal Budget: {cast.reveal_budget}")
    click.echo(f"Minimum Cast Size: {cast.min_cast_size}")
    limit = filmography.time_limit_seconds
    click.echo(f"Filmography Time Limit: {f'{limit}s' if limit else 'none'}")


@cli.command()
@click.option("--mode", "-m", type=click.Choice(sorted(MOVIE_MODES)), help="Movie pool")
@click.option("--language", "-l", type=click.Choice(sorted(SUPPORTED_LANGUAGES)))
@click.option(
    "--budget", "-b", type=click.IntRange(min=1), help="Cast members that can be revealed"
)
@click.option(
    "--results-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Append round results as JSON lines",
)
@click.pass_context
def cast(
    ctx: click.Context,
    mode: Optional[str],
    language: Optional[str],
    budget: Optional[int],
    results_file: Optional[Path],
) -> None:
    """Guess the movie from its progressively revealed cast."""
    config = ctx.obj["config"]
    if budget is not None:
        config.game.cast.reveal_budget = budget
    container = ctx.obj["container"]
    if results_file is None and config.app.results_file:
        results_file = Path(config.app.results_file)

    _run(container, _play_cast(container, mode, language, results_file))


@cli.command()
@click.argument("actor_query")
@click.option(
    "--time-limit",
    "-t",
    type=click.IntRange(min=0),
    help="Round length in seconds (0 for no limit)",
)
@click.option("--language", "-l", type=click.Choice(sorted(SUPPORTED_LANGUAGES)))
@click.pass_context
def filmography(
    ctx: click.Context,
    actor_query: str,
    time_limit: Optional[int],
    language: Optional[str],
) -> None:
    """Name every film an actor appeared in before time runs out."""
    container = ctx.obj["container"]
    _run(container, _play_filmography(container, actor_query, time_limit, language))


def _run(container: Container, coro: Any) -> None:
    async def runner() -> None:
        try:
            await coro
        finally:
            await container.aclose()

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        click.echo("\nGame cancelled.")
        sys.exit(1)
    except CineQuizError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


async def _ask(text: str, default: Optional[str] = None) -> str:
    """Prompt without blocking the event loop (the countdown keeps ticking)."""
    answer = await asyncio.to_thread(
        click.prompt, text, default=default, show_default=False, type=str
    )
    return answer.strip()


async def _pick(options: Sequence[Any], label: Any) -> Optional[Any]:
    if not options:
        click.echo("  No matches.")
        return None

    shown = list(options)[:SEARCH_RESULTS_SHOWN]
    for i, option in enumerate(shown, 1):
        click.echo(f"  {i}. {label(option)}")
    choice = await _ask(f"Pick 1-{len(shown)} (enter to cancel)", default="")
    if choice.isdigit() and 1 <= int(choice) <= len(shown):
        return shown[int(choice) - 1]
    return None


async def _search_movie(
    provider: IContentProvider, query: str, language: str
) -> Optional[MovieSummary]:
    movies = await provider.search_subjects(query, language)
    return await _pick(movies, lambda m: m.display_title)


async def _play_cast(
    container: Container,
    mode: Optional[str],
    language: Optional[str],
    results_file: Optional[Path],
) -> None:
    session = container.get(CastRevealSession)
    provider = container.get(IContentProvider)  # type: ignore

    if results_file is not None:
        session.on_round_complete(lambda result: _append_result(results_file, result))

    click.echo("Loading movies...")
    state = await session.initialize(mode=mode, language=language)
    if state.error:
        raise CineQuizError(state.error)

    while True:
        state = session.state
        if state.is_in_round:
            _show_cast(session)
            command = await _ask("Title to guess, [r]eveal, [s]kip, [g]ive up, [q]uit")
            lowered = command.lower()
            if lowered == "q":
                break
            if lowered == "r":
                outcome = session.reveal_next_cast().outcome
                if outcome == CastOutcome.CAPPED:
                    click.echo("The whole cast is already revealed.")
                continue
            if lowered == "s":
                transition = await session.skip_subject()
                _show_answer(transition.result)
                if session.state.error:
                    raise CineQuizError(session.state.error)
                continue
            if lowered == "g":
                _show_answer(session.give_up().result)
                continue

            guess = await _search_movie(provider, command, state.language)
            if guess is None:
                continue
            transition = session.take_guess(guess)
            if transition.outcome == CastOutcome.WRONG:
                click.echo("Incorrect! Revealing another cast member...")
            elif transition.result is not None:
                _show_answer(transition.result)
        else:
            click.echo(f"Score: {state.score} | Rounds: {state.rounds_played}")
            if (await _ask("Play again? [y/n]", default="y")).lower() != "y":
                break
            if await session.next_round() is None:
                raise CineQuizError(session.state.error or "Could not start a new round")

    state = session.state
    click.echo(
        f"Final score: {state.score}/{state.rounds_played} "
        f"({state.accuracy:.0%} accuracy, attempts: {state.attempts})"
    )
    if state.score:
        click.echo(f"Average cast revealed per win: {state.average_reveals_to_win:.1f}")


def _show_cast(session: CastRevealSession) -> None:
    state = session.state
    click.echo("")
    click.echo(
        f"Cast revealed {state.revealed_cast}/{state.reveal_budget} "
        f"({state.reveals_remaining} reveals left):"
    )
    for member in state.revealed_members:
        role = f" as {member.character}" if member.character else ""
        click.echo(f"  - {member.name}{role}")
    if state.wrong_guesses:
        wrong = ", ".join(m.display_title for m in state.wrong_guesses)
        click.echo(f"Wrong guesses: {wrong}")


def _show_answer(result: Optional[RoundResult]) -> None:
    if result is None:
        return
    year = f" ({result.movie_year})" if result.movie_year else ""
    if result.is_correct:
        click.echo(
            f"Correct! It was '{result.movie_title}'{year} "
            f"with {result.revealed_cast_count} cast members revealed."
        )
    else:
        click.echo(f"It was '{result.movie_title}'{year}.")


def _append_result(path: Path, result: RoundResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(result.model_dump_json() + "\n")


async def _play_filmography(
    container: Container,
    actor_query: str,
    time_limit: Optional[int],
    language: Optional[str],
) -> None:
    session = container.get(FilmographySession)
    provider = container.get(IContentProvider)  # type: ignore
    language = language or container.get_config().app.language

    actor = await _pick(
        await provider.search_people(actor_query, language),
        lambda p: f"{p.name} ({p.known_for_department or 'unknown'})",
    )
    if actor is None:
        return

    state = await session.select_subject(actor, time_limit=time_limit, language=language)
    if state.error:
        raise CineQuizError(state.error)

    click.echo(f"Name all {state.total} films of {actor.name}.")
    while not session.state.is_time_up and not session.state.is_complete:
        _show_filmography(session.state)
        command = await _ask("Title to guess, h<N> for a hint, [q]uit")
        if command.lower() == "q":
            break
        if command.lower().startswith("h") and command[1:].strip().isdigit():
            _reveal(session, int(command[1:].strip()))
            continue

        guess = await _search_movie(provider, command, language)
        if guess is None:
            continue
        result = session.guess(guess)
        if result.status == GuessStatus.CORRECT and result.entry is not None:
            click.echo(f"Correct: {result.entry.title} ({result.entry.year})")
        elif result.status == GuessStatus.ALREADY_GUESSED:
            click.echo("Already named.")
        elif result.status == GuessStatus.OUT_OF_TIME:
            click.echo("Time is up!")
        else:
            click.echo("Not in the filmography.")

    state = session.state
    session.reset()
    click.echo(f"Named {state.correct}/{state.total} films.")
    for entry in state.entries:
        if not state.is_solved(entry.id):
            click.echo(f"  missed: {entry.title} ({entry.year})")


def _show_filmography(state: FilmographyState) -> None:
    timer = f"{state.remaining_seconds}s left" if state.has_time_limit else "no time limit"
    click.echo("")
    click.echo(f"{state.correct}/{state.total} named, {timer}")
    for i, entry in enumerate(state.entries, 1):
        if state.is_solved(entry.id):
            click.echo(f"  {i:>3}. {entry.title} ({entry.year})")
        else:
            details = _hint_details(entry, state.hint_level(entry.id))
            click.echo(f"  {i:>3}. ???{details}")


def _hint_details(entry: FilmographyEntry, level: int) -> str:
    parts: List[str] = []
    if level >= HintLevel.YEAR:
        parts.append(str(entry.year))
    if level >= HintLevel.GENRE and entry.genre:
        parts.append(entry.genre)
    if level >= HintLevel.CHARACTER and entry.character:
        parts.append(f"as {entry.character}")
    if level >= HintLevel.POSTER and entry.poster_path:
        parts.append(f"poster {entry.poster_path}")
    return f"  [{' | '.join(parts)}]" if parts else ""


def _reveal(session: FilmographySession, number: int) -> None:
    entries = session.state.entries
    if not 1 <= number <= len(entries):
        click.echo("No such film.")
        return
    level = session.reveal_hint(entries[number - 1].id)
    click.echo(f"Hint level {level}: {HintLevel(level).name.title()}")


def _has_api_key(api_key: str) -> bool:
    return bool(api_key) and not api_key.startswith("${")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
