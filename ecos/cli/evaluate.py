from __future__ import annotations

import asyncio
import re
import typing as t
from pathlib import Path

import ecos.lib.cli as click
import ecos.lib.json as json
from ecos import storage
from ecos.core import di
from ecos.llm.evaluation import EvaluationPipeline, InsufficientContentError
from ecos.model import PersistOutcome, Scenario, session_scenario_id, SessionContext, TranscriptMessage
from ecos.storage import Session

EXIT_UNSAVED = 2
EXIT_NOTHING_TO_GRADE = 3

_unsafe = re.compile(r"[^A-Za-z0-9_-]")


@click.command("evaluate")
@click.argument("session_id")
@click.option("--student", default=None, help="student id to record, when the session row has none")
@click.option("--scenario", "scenario_id", type=int, default=None, help="scenario to grade against")
@di.inject
def evaluate(
    session_id: str,
    student: str | None,
    scenario_id: int | None,
    session: Session = di.Provide["storage.persistent.session"],
    pipeline: EvaluationPipeline = di.Provide["evaluation.pipeline"],
    state_path: Path = di.Provide["state_path"],
) -> int:
    """Grade a finished session and store its evaluation.

    Exits with status 2 when the report could not be stored; it is then kept
    under the state directory so that it can be inspected or stored later.
    Exits with status 3 when the session has no transcript to grade.
    """
    with session.begin():
        record = storage.session.get(session_id, session=session)
        if record is not None:
            context = record.context()
        else:
            context = SessionContext(session_id=session_id, scenario_id=session_scenario_id(session_id))
        context = context.model_copy(
            update={
                "scenario_id": scenario_id or context.scenario_id,
                "student_id": context.student_id or student,
            }
        )

        scenario = storage.scenario.get(context.scenario_id, session=session) if context.scenario_id else None
        transcript = storage.message.find(session_id, session=session)

    return run_evaluation(pipeline, context, scenario, transcript, state_path)


def run_evaluation(
    pipeline: EvaluationPipeline,
    context: SessionContext,
    scenario: Scenario | None,
    transcript: t.Sequence[TranscriptMessage],
    state_path: Path,
) -> int:
    try:
        outcome = asyncio.run(pipeline.evaluate(context, scenario, transcript))
    except InsufficientContentError as ex:
        click.echo(f"{click.style('NOTHING TO GRADE', fg='yellow')} {ex}", err=True)
        return EXIT_NOTHING_TO_GRADE

    click.echo(json.dumps(outcome.model_dump(mode="json"), indent=2))
    if outcome.stored:
        return 0

    path = keep_unsaved(outcome, context, state_path)
    click.echo(click.style(f"evaluation not stored ({outcome.error}), kept at {path}", fg="yellow"), err=True)
    return EXIT_UNSAVED


def unsaved_filename(session_id: str) -> str:
    """File name for a session's unsaved report, confined to one path component."""
    return f"{_unsafe.sub('_', session_id) or 'session'}.json"


def keep_unsaved(outcome: PersistOutcome, context: SessionContext, state_path: Path) -> Path:
    unsaved = state_path / "unsaved"
    unsaved.mkdir(parents=True, exist_ok=True)
    path = unsaved / unsaved_filename(context.session_id)
    path.write_text(json.dumps({"context": context, "report": outcome.report}, indent=2), encoding="utf8")
    return path
