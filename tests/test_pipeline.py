"""Tests for running action pipelines."""

import json

import pytest
from httpx import Response

from ghsteps.env import Settings
from ghsteps.github.client import GitHubClient
from ghsteps.pipeline import Pipeline, PipelineError, StepStatus, TemplateRenderer

REPO = "https://api.github.com/repos/o/r"
SETTINGS = Settings(token="test-token", repo_owner="o", repo_name="r")


async def run_pipeline(definition):
    pipeline = Pipeline.from_dict(definition)
    async with GitHubClient() as client:
        return await pipeline.run(client, SETTINGS)


@pytest.mark.asyncio
async def test_outputs_feed_later_steps(respx_mock):
    respx_mock.post(f"{REPO}/issues").mock(return_value=Response(201, json={"number": 17}))
    labels = respx_mock.post(f"{REPO}/issues/17/labels").mock(return_value=Response(200, json=[]))

    run = await run_pipeline(
        {
            "steps": [
                {"id": "issue", "action": "create_issue", "with": {"title": "Release 1.2"}},
                {
                    "action": "add_labels",
                    "with": {
                        "issue_number": "{{ steps.issue.json.number }}",
                        "labels": ["release", "v{{ context.GITHUB_CREATE_ISSUE_STATUS_CODE }}"],
                    },
                },
            ]
        }
    )

    assert run.ok
    assert [record.status for record in run.records] == [StepStatus.COMPLETED, StepStatus.COMPLETED]
    assert json.loads(labels.calls.last.request.content) == {"labels": ["release", "v201"]}
    assert run.context["GITHUB_ADD_LABELS_STATUS_CODE"] == 200
    assert set(run.results()) == {"issue", "step2"}


@pytest.mark.asyncio
async def test_failure_skips_remaining_steps(respx_mock):
    respx_mock.get(f"{REPO}/issues/1").mock(return_value=Response(404, json={"message": "Not Found"}))

    run = await run_pipeline(
        {
            "steps": [
                {"id": "get", "action": "get_issue", "with": {"issue_number": 1}},
                {"id": "lock", "action": "lock_issue", "with": {"issue_number": 1}},
            ]
        }
    )

    assert not run.ok
    assert run.records[0].status == StepStatus.FAILED
    assert run.records[0].error == "GitHub API returned 404: Not Found"
    assert run.records[1].status == StepStatus.SKIPPED
    assert "lock" not in run.results()


@pytest.mark.asyncio
async def test_continue_on_error(respx_mock):
    respx_mock.get(f"{REPO}/pulls/2/merge").mock(return_value=Response(500, text="boom"))
    respx_mock.get(f"{REPO}/pulls/2").mock(return_value=Response(200, json={"state": "open"}))

    run = await run_pipeline(
        {
            "steps": [
                {
                    "id": "merged",
                    "action": "check_pull_merged",
                    "with": {"pull_number": 2},
                    "continue_on_error": True,
                },
                {"id": "pull", "action": "get_pull", "with": {"pull_number": 2}},
            ]
        }
    )

    assert run.ok
    assert run.records[0].status == StepStatus.FAILED
    assert run.records[1].status == StepStatus.COMPLETED


@pytest.mark.asyncio
async def test_invalid_options_fail_the_step():
    run = await run_pipeline(
        {"steps": [{"id": "label", "action": "create_label", "with": {"name": "bug", "color": "blue"}}]}
    )

    assert run.records[0].status == StepStatus.FAILED
    assert "hex" in run.records[0].error
    assert run.records[0].result is None


@pytest.mark.asyncio
async def test_undefined_template_variable_fails_the_step():
    run = await run_pipeline(
        {"steps": [{"action": "get_issue", "with": {"issue_number": "{{ steps.missing.json.number }}"}}]}
    )

    assert run.records[0].status == StepStatus.FAILED
    assert "missing" in run.records[0].error


def test_unknown_action():
    with pytest.raises(PipelineError, match="Step 1: Unknown action"):
        Pipeline.from_dict({"steps": [{"action": "make_coffee"}]})


def test_duplicate_step_ids():
    with pytest.raises(PipelineError, match="Duplicate step ids: a"):
        Pipeline.from_dict({"steps": [{"id": "a", "action": "get_issue"}, {"id": "a", "action": "get_pull"}]})


@pytest.mark.parametrize(
    "definition",
    [None, {}, {"steps": "get_issue"}, {"steps": [{"with": {}}]}, {"steps": [{"action": "get_issue", "with": ["issue_number"]}]}],
)
def test_malformed_definition(definition):
    with pytest.raises(PipelineError):
        Pipeline.from_dict(definition)


def test_load_from_yaml(tmp_path):
    path = tmp_path / "release.yml"
    path.write_text(
        "steps:\n"
        "  - id: milestone\n"
        "    action: github_create_milestone\n"
        "    with:\n"
        "      title: v1.0\n"
    )

    pipeline = Pipeline.load(path)

    assert pipeline.steps[0].id == "milestone"
    assert pipeline.steps[0].action == "create_milestone"
    assert pipeline.steps[0].options == {"title": "v1.0"}


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("steps: [unclosed\n")

    with pytest.raises(PipelineError, match="Invalid YAML"):
        Pipeline.load(path)


def test_renderer_leaves_plain_values_alone():
    renderer = TemplateRenderer()
    value = {"count": 3, "names": ["a", "{{ who }}"], "flag": True}

    assert renderer.render(value, {"who": "b"}) == {"count": 3, "names": ["a", "b"], "flag": True}


@pytest.mark.asyncio
async def test_format_checklist(respx_mock):
    respx_mock.get(f"{REPO}/issues/1").mock(return_value=Response(200, json={"number": 1}))
    respx_mock.get(f"{REPO}/pulls/1").mock(return_value=Response(404, json={"message": "Not Found"}))

    run = await run_pipeline(
        {
            "steps": [
                {"id": "issue", "action": "get_issue", "with": {"issue_number": 1}},
                {"id": "pull", "action": "get_pull", "with": {"pull_number": 1}},
                {"id": "merge", "action": "merge_pull", "with": {"pull_number": 1}},
            ]
        }
    )

    assert run.format().splitlines() == [
        "❌ pipeline failed",
        "",
        "- [x] issue (get_issue) [200]",
        "- [ ] pull (get_pull) [404] ← failed: GitHub API returned 404: Not Found",
        "- [ ] merge (merge_pull) ← skipped",
    ]


@pytest.mark.asyncio
async def test_unquoted_yaml_dates_are_sent_as_text(respx_mock, tmp_path):
    milestone = respx_mock.post(f"{REPO}/milestones").mock(return_value=Response(201, json={"number": 4}))
    review = respx_mock.post(f"{REPO}/pulls/2/reviews").mock(return_value=Response(200, json={"id": 1}))
    path = tmp_path / "dates.yml"
    path.write_text(
        "steps:\n"
        "  - action: create_milestone\n"
        "    with:\n"
        "      title: v2.0\n"
        "      due_on: 2024-12-31T00:00:00Z\n"
        "  - action: submit_pull_review\n"
        "    with:\n"
        "      pull_number: 2\n"
        "      comments:\n"
        "        - path: CHANGELOG.md\n"
        "          position: 1\n"
        "          body: 2024-01-01\n"
    )

    pipeline = Pipeline.load(path)
    async with GitHubClient() as client:
        run = await pipeline.run(client, SETTINGS)

    assert run.ok
    assert json.loads(milestone.calls.last.request.content) == {"title": "v2.0", "due_on": "2024-12-31T00:00:00Z"}
    assert json.loads(review.calls.last.request.content)["comments"] == [
        {"path": "CHANGELOG.md", "position": 1, "body": "2024-01-01"}
    ]


def test_renderer_formats_dates():
    from datetime import date, datetime, timezone

    renderer = TemplateRenderer()

    assert renderer.render(date(2024, 1, 1), {}) == "2024-01-01"
    assert renderer.render(datetime(2024, 12, 31, tzinfo=timezone.utc), {}) == "2024-12-31T00:00:00Z"
