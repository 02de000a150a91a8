"""Issue, issue comment and issue event actions."""

from typing import Literal

from pydantic import Field

from ghsteps.actions.base import TIMELINE_PREVIEW, BaseAction, PageOptions, RepoOptions

LOCK_REASONS = Literal["off-topic", "too heated", "resolved", "spam"]


class IssueOptions(RepoOptions):
    issue_number: int = Field(gt=0, description="The issue number")


class IssuePageOptions(PageOptions):
    issue_number: int = Field(gt=0, description="The issue number")


class CommentOptions(RepoOptions):
    comment_id: int = Field(gt=0, description="The comment ID")


class AssigneesOptions(IssueOptions):
    assignees: list[str] = Field(min_length=1, description="Usernames to assign")


class AddIssueCommentOptions(IssueOptions):
    body: str = Field(min_length=1, description="The comment text")


class CreateIssueOptions(RepoOptions):
    title: str = Field(min_length=1, description="The title of the issue")
    body: str | None = Field(default=None, description="The contents of the issue")
    assignees: list[str] | None = None
    milestone: int | None = Field(default=None, gt=0)
    labels: list[str] | None = None


class UpdateIssueOptions(IssueOptions):
    title: str | None = None
    body: str | None = None
    state: Literal["open", "closed"] | None = None
    assignees: list[str] | None = None
    milestone: int | None = Field(default=None, gt=0)
    labels: list[str] | None = None


class ListIssuesOptions(PageOptions):
    state: Literal["open", "closed", "all"] | None = None
    assignee: str | None = None
    creator: str | None = None
    mentioned: str | None = None
    labels: list[str] | None = None
    sort: Literal["created", "updated", "comments"] | None = None
    direction: Literal["asc", "desc"] | None = None
    since: str | None = Field(default=None, description="ISO 8601 timestamp")
    milestone: str | None = Field(default=None, description="Milestone number, '*' or 'none'")


class LockIssueOptions(IssueOptions):
    lock_reason: LOCK_REASONS | None = None


class IssueCommentsOptions(IssuePageOptions):
    since: str | None = Field(default=None, description="ISO 8601 timestamp")


class UpdateIssueCommentOptions(CommentOptions):
    body: str = Field(min_length=1, description="The new comment text")


class EventOptions(RepoOptions):
    event_id: int = Field(gt=0, description="The event ID")


class AddAssigneesAction(BaseAction):
    name = "add_assignees"
    description = "Adds assignees to a GitHub issue"
    method = "POST"
    Options = AssigneesOptions
    fields = ("assignees",)

    def path(self, options: AssigneesOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/assignees"


class AddIssueCommentAction(BaseAction):
    name = "add_issue_comment"
    description = "Adds a comment to a GitHub issue"
    method = "POST"
    Options = AddIssueCommentOptions
    fields = ("body",)

    def path(self, options: AddIssueCommentOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/comments"


class CreateIssueAction(BaseAction):
    name = "create_issue"
    description = "Creates a new GitHub issue"
    method = "POST"
    Options = CreateIssueOptions
    fields = ("title", "body", "assignees", "milestone", "labels")

    def path(self, options: CreateIssueOptions) -> str:
        return f"{options.repo_path}/issues"


class GetIssueAction(BaseAction):
    name = "get_issue"
    description = "Gets a specific GitHub issue by number"
    Options = IssueOptions

    def path(self, options: IssueOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}"


class UpdateIssueAction(BaseAction):
    name = "update_issue"
    description = "Updates an existing GitHub issue"
    method = "PATCH"
    Options = UpdateIssueOptions
    fields = ("title", "body", "state", "assignees", "milestone", "labels")

    def path(self, options: UpdateIssueOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}"


class ListIssuesAction(BaseAction):
    name = "list_issues"
    description = "Lists issues in a GitHub repository"
    Options = ListIssuesOptions
    fields = (
        "state",
        "assignee",
        "creator",
        "mentioned",
        "labels",
        "sort",
        "direction",
        "since",
        "per_page",
        "page",
        "milestone",
    )

    def path(self, options: ListIssuesOptions) -> str:
        return f"{options.repo_path}/issues"

    def payload(self, options: ListIssuesOptions) -> dict:
        params = super().payload(options)
        # GitHub expects a comma separated list here
        if "labels" in params:
            params["labels"] = ",".join(params["labels"])
        return params


class LockIssueAction(BaseAction):
    name = "lock_issue"
    description = "Locks a GitHub issue"
    method = "PUT"
    Options = LockIssueOptions
    fields = ("lock_reason",)

    def path(self, options: LockIssueOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/lock"


class UnlockIssueAction(BaseAction):
    name = "unlock_issue"
    description = "Unlocks a GitHub issue"
    method = "DELETE"
    Options = IssueOptions

    def path(self, options: IssueOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/lock"


class GetIssueCommentAction(BaseAction):
    name = "get_issue_comment"
    description = "Gets a specific comment from a GitHub issue"
    Options = CommentOptions

    def path(self, options: CommentOptions) -> str:
        return f"{options.repo_path}/issues/comments/{options.comment_id}"


class ListIssueCommentsAction(BaseAction):
    name = "list_issue_comments"
    description = "Lists comments on a GitHub issue"
    Options = IssueCommentsOptions
    fields = ("per_page", "page", "since")

    def path(self, options: IssueCommentsOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/comments"


class UpdateIssueCommentAction(BaseAction):
    name = "update_issue_comment"
    description = "Updates a comment on a GitHub issue"
    method = "PATCH"
    Options = UpdateIssueCommentOptions
    fields = ("body",)

    def path(self, options: UpdateIssueCommentOptions) -> str:
        return f"{options.repo_path}/issues/comments/{options.comment_id}"


class DeleteIssueCommentAction(BaseAction):
    name = "delete_issue_comment"
    description = "Deletes a comment from a GitHub issue"
    method = "DELETE"
    Options = CommentOptions

    def path(self, options: CommentOptions) -> str:
        return f"{options.repo_path}/issues/comments/{options.comment_id}"


class GetIssueEventAction(BaseAction):
    name = "get_issue_event"
    description = "Gets a specific GitHub issue event by ID"
    Options = EventOptions

    def path(self, options: EventOptions) -> str:
        return f"{options.repo_path}/issues/events/{options.event_id}"


class ListIssueEventsAction(BaseAction):
    name = "list_issue_events"
    description = "Lists events for a GitHub issue"
    Options = IssuePageOptions
    fields = ("per_page", "page")

    def path(self, options: IssuePageOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/events"


class ListRepoIssueEventsAction(BaseAction):
    name = "list_repo_issue_events"
    description = "Lists issue events for a GitHub repository"
    Options = PageOptions
    fields = ("per_page", "page")

    def path(self, options: PageOptions) -> str:
        return f"{options.repo_path}/issues/events"


class GetIssueTimelineAction(BaseAction):
    name = "get_issue_timeline"
    description = "Gets the timeline of events for a GitHub issue"
    Options = IssuePageOptions
    fields = ("per_page", "page")
    accept = TIMELINE_PREVIEW

    def path(self, options: IssuePageOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/timeline"


ACTIONS = [
    AddAssigneesAction(),
    AddIssueCommentAction(),
    CreateIssueAction(),
    GetIssueAction(),
    UpdateIssueAction(),
    ListIssuesAction(),
    LockIssueAction(),
    UnlockIssueAction(),
    GetIssueCommentAction(),
    ListIssueCommentsAction(),
    UpdateIssueCommentAction(),
    DeleteIssueCommentAction(),
    GetIssueEventAction(),
    ListIssueEventsAction(),
    ListRepoIssueEventsAction(),
    GetIssueTimelineAction(),
]
