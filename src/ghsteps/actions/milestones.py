"""Milestone actions."""

from typing import Literal

from pydantic import Field

from ghsteps.actions.base import BaseAction, PageOptions, RepoOptions


class MilestoneOptions(RepoOptions):
    milestone_number: int = Field(gt=0, description="The milestone number")


class CreateMilestoneOptions(RepoOptions):
    title: str = Field(min_length=1, description="The title of the milestone")
    state: Literal["open", "closed"] | None = None
    description: str | None = None
    due_on: str | None = Field(default=None, description="ISO 8601 due date")


class UpdateMilestoneOptions(MilestoneOptions):
    title: str | None = None
    state: Literal["open", "closed"] | None = None
    description: str | None = None
    due_on: str | None = None


class ListMilestonesOptions(PageOptions):
    state: Literal["open", "closed", "all"] | None = None
    sort: Literal["due_on", "completeness"] | None = None
    direction: Literal["asc", "desc"] | None = None


class CreateMilestoneAction(BaseAction):
    name = "create_milestone"
    description = "Creates a new milestone in a GitHub repository"
    method = "POST"
    Options = CreateMilestoneOptions
    fields = ("title", "state", "description", "due_on")

    def path(self, options: CreateMilestoneOptions) -> str:
        return f"{options.repo_path}/milestones"


class GetMilestoneAction(BaseAction):
    name = "get_milestone"
    description = "Gets a specific GitHub milestone by number"
    Options = MilestoneOptions

    def path(self, options: MilestoneOptions) -> str:
        return f"{options.repo_path}/milestones/{options.milestone_number}"


class UpdateMilestoneAction(BaseAction):
    name = "update_milestone"
    description = "Updates an existing milestone in a GitHub repository"
    method = "PATCH"
    Options = UpdateMilestoneOptions
    fields = ("title", "state", "description", "due_on")

    def path(self, options: UpdateMilestoneOptions) -> str:
        return f"{options.repo_path}/milestones/{options.milestone_number}"


class ListMilestonesAction(BaseAction):
    name = "list_milestones"
    description = "Lists milestones in a GitHub repository"
    Options = ListMilestonesOptions
    fields = ("state", "sort", "direction", "per_page", "page")

    def path(self, options: ListMilestonesOptions) -> str:
        return f"{options.repo_path}/milestones"


ACTIONS = [
    CreateMilestoneAction(),
    GetMilestoneAction(),
    UpdateMilestoneAction(),
    ListMilestonesAction(),
]
