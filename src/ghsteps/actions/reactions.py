"""Reaction actions (squirrel-girl preview media type)."""

from typing import Literal

from pydantic import Field

from ghsteps.actions.base import REACTIONS_PREVIEW, BaseAction, PageOptions, RepoOptions
from ghsteps.actions.issues import IssueOptions

ReactionContent = Literal["+1", "-1", "laugh", "confused", "heart", "hooray", "rocket", "eyes"]


class IssueReactionOptions(IssueOptions):
    content: ReactionContent


class CommitCommentReactionOptions(RepoOptions):
    comment_id: int = Field(gt=0, description="The commit comment ID")
    content: ReactionContent


class ListIssueReactionsOptions(PageOptions):
    issue_number: int = Field(gt=0)
    content: ReactionContent | None = Field(default=None, description="Only return this reaction type")


class DeleteCommentReactionOptions(RepoOptions):
    comment_id: int = Field(gt=0, description="The issue comment ID")
    reaction_id: int = Field(gt=0, description="The reaction ID")


class CreateIssueReactionAction(BaseAction):
    name = "create_issue_reaction"
    description = "Create a reaction for an issue"
    method = "POST"
    Options = IssueReactionOptions
    fields = ("content",)
    accept = REACTIONS_PREVIEW

    def path(self, options: IssueReactionOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/reactions"


class CreateCommitCommentReactionAction(BaseAction):
    name = "create_commit_comment_reaction"
    description = "Create a reaction for a commit comment"
    method = "POST"
    Options = CommitCommentReactionOptions
    fields = ("content",)
    accept = REACTIONS_PREVIEW

    def path(self, options: CommitCommentReactionOptions) -> str:
        return f"{options.repo_path}/comments/{options.comment_id}/reactions"


class ListIssueReactionsAction(BaseAction):
    name = "list_issue_reactions"
    description = "List reactions for an issue"
    Options = ListIssueReactionsOptions
    fields = ("content", "per_page", "page")
    accept = REACTIONS_PREVIEW

    def path(self, options: ListIssueReactionsOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/reactions"


class DeleteIssueCommentReactionAction(BaseAction):
    name = "delete_issue_comment_reaction"
    description = "Delete a reaction from an issue comment"
    method = "DELETE"
    Options = DeleteCommentReactionOptions
    accept = REACTIONS_PREVIEW

    def path(self, options: DeleteCommentReactionOptions) -> str:
        return (
            f"{options.repo_path}/issues/comments/{options.comment_id}"
            f"/reactions/{options.reaction_id}"
        )


ACTIONS = [
    CreateIssueReactionAction(),
    CreateCommitCommentReactionAction(),
    ListIssueReactionsAction(),
    DeleteIssueCommentReactionAction(),
]
