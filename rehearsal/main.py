"""Terminal front end: a text-mode rehearsal loop and a standalone anonymizer."""

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable

from rehearsal.anonymization.exceptions import AnonymizationError
from rehearsal.classification.factory import AnonymizerFactory
from rehearsal.config.settings import Settings
from rehearsal.database.connection import close_pool, init_pool
from rehearsal.history.exceptions import PersistenceError
from rehearsal.history.postgres_repository import PostgresHistoryRepository
from rehearsal.history.serializer import RecordSerializer
from rehearsal.logging.logger import Log
from rehearsal.questions.exceptions import QuestionUnavailable
from rehearsal.session.exceptions import SessionError
from rehearsal.session.models import AnswerOutcome
from rehearsal.session.orchestrator import SessionOrchestrator, build_orchestrator

_HELP = "Commands: /next skips or retries the question, /history, /quit."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rehearsal",
        description="Rehearse interview answers with personal details stripped before storage.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    interview = commands.add_parser("interview", help="Run a text-mode rehearsal session.")
    interview.add_argument("--role", required=True, help="Job role to rehearse for.")

    anonymize = commands.add_parser(
        "anonymize",
        help="Anonymize a transcript read from stdin and print the result as JSON.",
    )
    anonymize.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2).",
    )
    return parser


async def _anonymize_stdin(settings: Settings, indent: int) -> int:
    transcript = sys.stdin.read()
    pipeline = AnonymizerFactory.create(settings)
    try:
        result = await pipeline.anonymize(transcript)
    except AnonymizationError as exc:
        print(f"Anonymization failed: {exc}", file=sys.stderr)
        return 1
    payload = {
        "anonymized_text": result.anonymized_text,
        "entity_map": RecordSerializer().entity_map_payload(result.entity_map)["entities"],
    }
    print(json.dumps(payload, indent=indent, ensure_ascii=False))
    return 0


def _print_outcome(outcome: AnswerOutcome) -> None:
    record = outcome.record
    print(f"\nStored answer: {record.anonymized_answer}")
    for warning in outcome.warnings:
        print(f"Warning: {warning}")
    if record.feedback is not None:
        print(f"Clarity: {record.feedback.clarity}")
        print(f"Relevance: {record.feedback.relevance}")
        print(f"Speech pace: {record.feedback.speech_pace}")
    if outcome.question_error:
        print(f"Could not load the next question ({outcome.question_error}). Type /next to retry.")


async def _print_history(orchestrator: SessionOrchestrator) -> None:
    try:
        records = await orchestrator.history()
    except PersistenceError as exc:
        print(f"History is not available ({exc}).")
        return
    if not records:
        print("No answers stored yet.")
        return
    for record in records:
        print(f"[{record.timestamp:%Y-%m-%d %H:%M}] {record.question}")
        print(f"    {record.anonymized_answer}")


async def _ask(request: Callable[[], Awaitable[str]]) -> None:
    try:
        question = await request()
    except QuestionUnavailable as exc:
        print(f"Could not load a question ({exc}). Type /next to retry.")
        return
    print(f"\nQ: {question}")


async def _interview(settings: Settings, role: str) -> int:
    orchestrator = build_orchestrator(settings)
    print(_HELP)
    await _ask(lambda: orchestrator.start_session(role))

    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            command = line.strip()
            if command == "/quit":
                break
            if command == "/next":
                await _ask(orchestrator.next_question)
                continue
            if command == "/history":
                await _print_history(orchestrator)
                continue
            try:
                outcome = await orchestrator.submit_answer(line)
            except SessionError as exc:
                print(f"{exc}. {_HELP}")
                continue
            _print_outcome(outcome)
            if outcome.next_question is not None:
                print(f"\nQ: {outcome.next_question}")
    finally:
        orchestrator.teardown()
    return 0


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "anonymize":
        return await _anonymize_stdin(settings, args.indent)

    if settings.history_backend.lower() != "postgres":
        return await _interview(settings, args.role)

    await init_pool(settings)
    try:
        await PostgresHistoryRepository().ensure_schema()
        return await _interview(settings, args.role)
    finally:
        await close_pool()


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> configure logging -> run the command."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    # Keep stdout clean for the JSON printed by `anonymize`.
    Log.configure(settings.log_level, stream=sys.stderr if args.command == "anonymize" else None)
    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        Log.info("Interrupted, shutting down")
        return 130


if __name__ == "__main__":
    sys.exit(main())
