"""Pipelines: run action steps in order and thread their results.

A pipeline file is YAML:

    steps:
      - id: issue
        action: create_issue
        with:
          title: Release checklist
      - action: add_labels
        with:
          issue_number: "{{ steps.issue.json.number }}"
          labels: [release]
        continue_on_error: true

String option values are Jinja2 templates rendered against the results of
earlier steps before each step runs.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError

from ghsteps.actions import ActionError, ActionResult, get_action
from ghsteps.env import Settings
from ghsteps.github.client import GitHubClient

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when a pipeline definition is invalid."""


class StepStatus(Enum):
    """Status of a pipeline step.

    Values:
        PENDING: Step has not started yet
        COMPLETED: Step finished successfully
        FAILED: Step failed (bad options, API error or transport error)
        SKIPPED: Step never ran because an earlier step failed
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PipelineStep:
    """One action invocation in a pipeline.

    Attributes:
        id: Name other steps use to refer to this step's result
        action: Action name (e.g. "create_label")
        options: Raw options, possibly containing templates
        continue_on_error: Keep going if this step fails
    """

    id: str
    action: str
    options: dict[str, Any] = field(default_factory=dict)
    continue_on_error: bool = False


@dataclass
class StepRecord:
    """What happened to a step during a run."""

    step: PipelineStep
    status: StepStatus = StepStatus.PENDING
    result: ActionResult | None = None
    error: str | None = None


@dataclass
class PipelineRun:
    """Results of a pipeline run.

    Attributes:
        records: One record per step, in pipeline order
        context: Output values of every step that produced a result,
            keyed like GITHUB_CREATE_LABEL_STATUS_CODE
    """

    records: list[StepRecord] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(
            record.status == StepStatus.COMPLETED or record.step.continue_on_error
            for record in self.records
        )

    def results(self) -> dict[str, dict[str, Any]]:
        """Results of finished steps keyed by step id."""
        return {
            record.step.id: record.result.to_dict()
            for record in self.records
            if record.result is not None
        }

    def format(self) -> str:
        """Format the run as a checklist."""
        header = "✅ pipeline completed" if self.ok else "❌ pipeline failed"
        lines = [header, ""]

        for record in self.records:
            label = f"{record.step.id} ({record.step.action})"
            status = f" [{record.result.status}]" if record.result and record.result.status else ""
            if record.status == StepStatus.COMPLETED:
                lines.append(f"- [x] {label}{status}")
            elif record.status == StepStatus.FAILED:
                lines.append(f"- [ ] {label}{status} ← failed: {record.error}")
            elif record.status == StepStatus.SKIPPED:
                lines.append(f"- [ ] {label} ← skipped")
            else:
                lines.append(f"- [ ] {label}")

        return "\n".join(lines)


class TemplateRenderer:
    """Renders Jinja2 templates inside step options."""

    def __init__(self):
        self.env = Environment(undefined=StrictUndefined, keep_trailing_newline=False)

    def render(self, value: Any, variables: dict[str, Any]) -> Any:
        """Render every string in a nested structure.

        Unquoted YAML timestamps come back as ISO 8601 strings, with UTC
        written as "Z".

        Raises:
            jinja2.TemplateError: If a template is invalid or refers to
                something that doesn't exist
        """
        if isinstance(value, str):
            if "{{" not in value and "{%" not in value:
                return value
            return self.env.from_string(value).render(**variables)
        if isinstance(value, dict):
            return {key: self.render(item, variables) for key, item in value.items()}
        if isinstance(value, list):
            return [self.render(item, variables) for item in value]
        if isinstance(value, date):
            text = value.isoformat()
            return text[:-6] + "Z" if text.endswith("+00:00") else text
        return value


class Pipeline:
    """An ordered list of action steps."""

    def __init__(self, steps: list[PipelineStep]):
        ids = [step.id for step in steps]
        duplicates = {step_id for step_id in ids if ids.count(step_id) > 1}
        if duplicates:
            raise PipelineError(f"Duplicate step ids: {', '.join(sorted(duplicates))}")
        self.steps = steps
        self.renderer = TemplateRenderer()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pipeline":
        """Build a pipeline from parsed YAML.

        Raises:
            PipelineError: If the definition is malformed or names an
                unknown action
        """
        if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
            raise PipelineError("Pipeline must contain a 'steps' list")

        steps = []
        for index, raw in enumerate(data["steps"], start=1):
            if not isinstance(raw, dict) or not raw.get("action"):
                raise PipelineError(f"Step {index} must have an 'action'")
            options = raw.get("with") or {}
            if not isinstance(options, dict):
                raise PipelineError(f"Step {index}: 'with' must be a mapping")
            try:
                action = get_action(str(raw["action"]))
            except ActionError as e:
                raise PipelineError(f"Step {index}: {e}") from e
            steps.append(
                PipelineStep(
                    id=str(raw.get("id") or f"step{index}"),
                    action=action.name,
                    options=options,
                    continue_on_error=bool(raw.get("continue_on_error", False)),
                )
            )
        return cls(steps)

    @classmethod
    def load(cls, path: Path) -> "Pipeline":
        """Load a pipeline from a YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise PipelineError(f"Invalid YAML in {path}: {e}") from e
        return cls.from_dict(data)

    async def run(self, client: GitHubClient, settings: Settings | None = None) -> PipelineRun:
        """Run every step in order.

        A failing step stops the pipeline unless it has continue_on_error;
        the steps after it are marked skipped.
        """
        run = PipelineRun(records=[StepRecord(step) for step in self.steps])
        halted = False

        for record in run.records:
            step = record.step
            if halted:
                record.status = StepStatus.SKIPPED
                continue

            logger.info(f"Running step {step.id}: {step.action}")
            variables = {
                "steps": run.results(),
                "context": dict(run.context),
                "env": dict(os.environ),
            }

            try:
                options = self.renderer.render(step.options, variables)
                result = await get_action(step.action).execute(client, options, settings)
            except (ActionError, TemplateError) as e:
                record.status = StepStatus.FAILED
                record.error = str(e)
                logger.error(f"Step {step.id} failed: {e}")
            else:
                record.result = result
                run.context.update(result.output_values())
                if result.ok:
                    record.status = StepStatus.COMPLETED
                else:
                    record.status = StepStatus.FAILED
                    record.error = result.error
                    logger.error(f"Step {step.id} failed: {result.error}")

            if record.status == StepStatus.FAILED and not step.continue_on_error:
                halted = True

        return run
