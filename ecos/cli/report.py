from __future__ import annotations

import asyncio

import ecos.lib.cli as click
import ecos.lib.json as json
from ecos.core import di
from ecos.llm.evaluation import EvaluationStore, read_report, ScenarioSource, TranscriptSource


@click.command("report")
@click.argument("session_id")
@di.inject
def report(
    session_id: str,
    store: EvaluationStore = di.Provide["evaluation.store"],
    scenarios: ScenarioSource = di.Provide["evaluation.scenarios"],
    transcripts: TranscriptSource = di.Provide["evaluation.transcripts"],
) -> None:
    """Print the stored evaluation report of a session."""
    rs = asyncio.run(read_report(session_id, store=store, scenarios=scenarios, transcripts=transcripts))
    if rs is None:
        raise click.ClickException(f"no evaluation stored for session {session_id}")
    click.echo(json.dumps(rs.model_dump(mode="json"), indent=2))
