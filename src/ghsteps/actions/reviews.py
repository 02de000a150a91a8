"""Pull request review and review comment actions."""

from typing import Any, Literal

from pydantic import Field, model_validator

from ghsteps.actions.base import BaseAction, PageOptions, RepoOptions
from ghsteps.actions.pulls import PullOptions, PullPageOptions


class ReviewOptions(PullOptions):
    review_id: int = Field(gt=0, description="The review ID")


class ReviewPageOptions(PullPageOptions):
    review_id: int = Field(gt=0, description="The review ID")


class SubmitReviewOptions(PullOptions):
    event: Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"] = "COMMENT"
    body: str | None = Field(default=None, description="The body text of the review")
    comments: list[dict[str, Any]] | None = Field(
        default=None, description="Draft review comments (path, position, body)"
    )
    commit_id: str | None = None

    @model_validator(mode="after")
    def require_body_for_feedback(self) -> "SubmitReviewOptions":
        if self.event == "REQUEST_CHANGES" and not self.body:
            raise ValueError("A body is required when requesting changes")
        return self


class DismissReviewOptions(ReviewOptions):
    message: str = Field(min_length=1, description="The message for the dismissal")


class CreatePullCommentOptions(PullOptions):
    """Either commit_id and path (a new thread) or in_reply_to (a reply)."""

    body: str = Field(min_length=1, description="The text of the review comment")
    commit_id: str | None = None
    path: str | None = Field(default=None, description="Relative path of the file to comment on")
    position: int | None = None
    line: int | None = None
    side: Literal["LEFT", "RIGHT"] | None = None
    start_line: int | None = None
    start_side: Literal["LEFT", "RIGHT"] | None = None
    in_reply_to: int | None = Field(default=None, description="ID of the comment to reply to")

    @model_validator(mode="after")
    def require_target(self) -> "CreatePullCommentOptions":
        if self.in_reply_to is None and not (self.commit_id and self.path):
            raise ValueError("Either provide commit_id and path OR in_reply_to parameter")
        return self


class SubmitPullCommentOptions(PullOptions):
    body: str = Field(min_length=1)
    commit_id: str | None = None
    path: str | None = None
    position: int | None = None


class PullCommentOptions(RepoOptions):
    comment_id: int = Field(gt=0, description="The review comment ID")


class UpdatePullCommentOptions(PullCommentOptions):
    body: str = Field(min_length=1, description="The new comment text")


class CommentListOptions(PageOptions):
    sort: Literal["created", "updated"] | None = None
    direction: Literal["asc", "desc"] | None = None
    since: str | None = Field(default=None, description="ISO 8601 timestamp")


class PullCommentListOptions(CommentListOptions):
    pull_number: int = Field(gt=0, description="The pull request number")


class GetPullReviewAction(BaseAction):
    name = "get_pull_review"
    description = "Gets a single review for a pull request"
    Options = ReviewOptions

    def path(self, options: ReviewOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/reviews/{options.review_id}"


class GetPullReviewCommentsAction(BaseAction):
    name = "get_pull_review_comments"
    description = "Get comments for a pull request review"
    Options = ReviewPageOptions
    fields = ("per_page", "page")

    def path(self, options: ReviewPageOptions) -> str:
        return (
            f"{options.repo_path}/pulls/{options.pull_number}"
            f"/reviews/{options.review_id}/comments"
        )


class SubmitPullReviewAction(BaseAction):
    name = "submit_pull_review"
    description = "Create a review for a pull request"
    method = "POST"
    Options = SubmitReviewOptions
    fields = ("commit_id", "event", "body", "comments")

    def path(self, options: SubmitReviewOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/reviews"

    def payload(self, options: SubmitReviewOptions) -> dict:
        return {key: value for key, value in super().payload(options).items() if value != []}


class DismissPullReviewAction(BaseAction):
    name = "dismiss_pull_review"
    description = "Dismiss a review for a pull request"
    method = "PUT"
    Options = DismissReviewOptions
    fields = ("message",)

    def path(self, options: DismissReviewOptions) -> str:
        return (
            f"{options.repo_path}/pulls/{options.pull_number}"
            f"/reviews/{options.review_id}/dismissals"
        )


class CreatePullCommentAction(BaseAction):
    name = "create_pull_comment"
    description = "Creates a review comment on a pull request"
    method = "POST"
    Options = CreatePullCommentOptions
    fields = ("body", "commit_id", "path", "position", "line", "side", "start_line", "start_side")

    def path(self, options: CreatePullCommentOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/comments"

    def payload(self, options: CreatePullCommentOptions) -> dict:
        if options.in_reply_to is not None:
            return {"body": options.body, "in_reply_to": options.in_reply_to}
        return super().payload(options)


class SubmitPullCommentAction(BaseAction):
    name = "submit_pull_comment"
    description = "Create a review comment on a pull request"
    method = "POST"
    Options = SubmitPullCommentOptions
    fields = ("body", "commit_id", "path", "position")

    def path(self, options: SubmitPullCommentOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/comments"


class GetPullCommentAction(BaseAction):
    name = "get_pull_comment"
    description = "Gets a specific pull request comment"
    Options = PullCommentOptions

    def path(self, options: PullCommentOptions) -> str:
        return f"{options.repo_path}/pulls/comments/{options.comment_id}"


class UpdatePullCommentAction(BaseAction):
    name = "update_pull_comment"
    description = "Updates a pull request comment"
    method = "PATCH"
    Options = UpdatePullCommentOptions
    fields = ("body",)

    def path(self, options: UpdatePullCommentOptions) -> str:
        return f"{options.repo_path}/pulls/comments/{options.comment_id}"


class DeletePullCommentAction(BaseAction):
    name = "delete_pull_comment"
    description = "Deletes a pull request comment"
    method = "DELETE"
    Options = PullCommentOptions

    def path(self, options: PullCommentOptions) -> str:
        return f"{options.repo_path}/pulls/comments/{options.comment_id}"


class ListPullCommentsAction(BaseAction):
    name = "list_pull_comments"
    description = "List review comments on a pull request"
    Options = PullCommentListOptions
    fields = ("sort", "direction", "since", "per_page", "page")

    def path(self, options: PullCommentListOptions) -> str:
        return f"{options.repo_path}/pulls/{options.pull_number}/comments"


class ListAllPullCommentsAction(BaseAction):
    name = "list_all_pull_comments"
    description = "Lists review comments in a repository"
    Options = CommentListOptions
    fields = ("sort", "direction", "since", "per_page", "page")

    def path(self, options: CommentListOptions) -> str:
        return f"{options.repo_path}/pulls/comments"


ACTIONS = [
    GetPullReviewAction(),
    GetPullReviewCommentsAction(),
    SubmitPullReviewAction(),
    DismissPullReviewAction(),
    CreatePullCommentAction(),
    SubmitPullCommentAction(),
    GetPullCommentAction(),
    UpdatePullCommentAction(),
    DeletePullCommentAction(),
    ListPullCommentsAction(),
    ListAllPullCommentsAction(),
]
