"""Pull request actions."""

import logging
from typing import Literal

from pydantic import Field, model_validator

from ghsteps.actions.base import BaseAction, PageOptions, RepoOptions
from ghsteps.github.client import Envelope

logger = logging.getLogger(__name__)


class PullOptions(RepoOptions):
    pull_number: int = Field(gt=0, description="The pull request number")


class PullPageOptions(PageOptions):
    pull_number: int = Field(gt=0, description="The pull request number")


class CreatePullOptions(RepoOptions):
    title: str = Field(min_length=1, description="The title of the pull request")
    head: str = Field(min_length=1, description="The branch where your changes are implemented")
    base: str = Field(min_length=1, description="The branch you want the changes pulled into")
    body: str | None = None
    maintainer_can_modify: bool | None = None
    draft: bool | None = None
    issue: int | None = Field(default=None, gt=0, description="Issue to convert into a pull request")


class UpdatePullOptions(PullOptions):
    title: str | None = None
    body: str | None = None
    state: Literal["open", "closed"] | None = None
    base: str | None = None
    maintainer_can_modify: bool | None = None


class ListPullsOptions(PageOptions):
    state: Literal["open", "closed", "all"] | None = None
    head: str | None = Field(default=None, description="Filter by head user/org and branch (user:ref)")
    base: str | None = None
    sort: Literal["created", "updated", "popularity", "long-running"] | None = None
    direction: Literal["asc", "desc"] | None = None


class MergePullOptions(PullOptions):
    commit_title: str | None = None
    commit_message: str | None = None
    merge_method: Literal["merge", "squash", "rebase"] | None = "merge"
    sha: str | None = Field(default=None, description="SHA that the pull request head must match")


class UpdatePullBranchOptions(PullOptions):
    expected_head_sha: str | None = None


class ReviewersOptions(PullOptions):
    reviewers: list[str] | None = None
    team_reviewers: list[str] | None = None

    @model_validator(mode="after")
    def require_reviewers(self) -> "ReviewersOptions":
        if not self.reviewers and not self.team_reviewers:
            raise ValueError("Provide at least one of reviewers or team_reviewers")
        return self


class CreatePullAction(BaseAction):
    name = "create_pull"
    description = "Creates a new pull request in a GitHub repository"
    method = "POST"
    Options = CreatePullOptions
    fields = ("title", "head", "base", "body", "maintainer_can_modify", "draft", "issue")

    def path(self, options: CreatePullOptions) -> str:
        return f"{options.repo_path}/pulls"


class GetPullAction(BaseAction):
    name = "get_pull"
    description = "Gets a single pull request from a GitHub repository"
    Options = PullOptions

    def path(self, options: PullOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}"


class UpdatePullAction(BaseAction):
    name = "update_pull"
    description = "Updates a pull request in a GitHub repository"
    method = "PATCH"
    Options = UpdatePullOptions
    fields = ("title", "body", "state", "base", "maintainer_can_modify")

    def path(self, options: UpdatePullOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}"


class ListPullsAction(BaseAction):
    name = "list_pulls"
    description = "Lists pull requests in a GitHub repository"
    Options = ListPullsOptions
    fields = ("state", "head", "base", "sort", "direction", "per_page", "page")

    def path(self, options: ListPullsOptions) -> str:
        return f"{options.repo_path}/pulls"


class MergePullAction(BaseAction):
    name = "merge_pull"
    description = "Merge a pull request"
    method = "PUT"
    Options = MergePullOptions
    fields = ("commit_title", "commit_message", "merge_method", "sha")

    def path(self, options: MergePullOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/merge"

    def success_outputs(self, envelope: Envelope, options: MergePullOptions) -> dict:
        merged = bool(envelope.json.get("merged")) if isinstance(envelope.json, dict) else False
        return {"merged": merged}


class CheckPullMergedAction(BaseAction):
    """Check whether a pull request has been merged.

    GitHub answers 204 when merged and 404 when not; both are successful
    outcomes. Any other status is an error.
    """

    name = "check_pull_merged"
    description = "Check if a pull request has been merged"
    Options = PullOptions
    output_aliases = {"is_merged": "GITHUB_PULL_IS_MERGED"}

    def path(self, options: PullOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/merge"

    def is_success(self, envelope: Envelope) -> bool:
        return envelope.status in (204, 404)

    def success_outputs(self, envelope: Envelope, options: PullOptions) -> dict:
        is_merged = envelope.status == 204
        if not is_merged:
            logger.info(f"Pull request #{options.pull_number} has not been merged")
        return {"is_merged": is_merged}


class UpdatePullBranchAction(BaseAction):
    name = "update_pull_branch"
    description = "Updates a pull request branch with the latest upstream changes"
    method = "PUT"
    Options = UpdatePullBranchOptions
    fields = ("expected_head_sha",)

    def path(self, options: UpdatePullBranchOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/update-branch"


class ListPullCommitsAction(BaseAction):
    name = "list_pull_commits"
    description = "Lists commits on a pull request"
    Options = PullPageOptions
    fields = ("per_page", "page")

    def path(self, options: PullPageOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/commits"


class ListPullReviewersAction(BaseAction):
    name = "list_pull_reviewers"
    description = "Lists requested reviewers for a pull request"
    Options = PullOptions

    def path(self, options: PullOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/requested_reviewers"


class RequestPullReviewAction(BaseAction):
    name = "request_pull_review"
    description = "Requests reviewers for a pull request"
    method = "POST"
    Options = ReviewersOptions
    fields = ("reviewers", "team_reviewers")

    def path(self, options: ReviewersOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/requested_reviewers"

    def payload(self, options: ReviewersOptions) -> dict:
        # Empty lists are left out entirely
        return {key: value for key, value in super().payload(options).items() if value}


class RemovePullReviewersAction(RequestPullReviewAction):
    name = "remove_pull_reviewers"
    description = "Removes requested reviewers from a pull request"
    method = "DELETE"
    body_on_delete = True


ACTIONS = [
    CreatePullAction(),
    GetPullAction(),
    UpdatePullAction(),
    ListPullsAction(),
    MergePullAction(),
    CheckPullMergedAction(),
    UpdatePullBranchAction(),
    ListPullCommitsAction(),
    ListPullReviewersAction(),
    RequestPullReviewAction(),
    RemovePullReviewersAction(),
]
