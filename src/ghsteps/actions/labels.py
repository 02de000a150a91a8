"""Label actions for issues and repositories."""

from urllib.parse import quote

from pydantic import Field, field_validator

from ghsteps.actions.base import BaseAction, PageOptions, RepoOptions, strip_color
from ghsteps.actions.issues import IssueOptions


def encode_label(name: str) -> str:
    """URL-encode a label name for use in a path (spaces, slashes, emoji)."""
    return quote(name, safe="")


class IssueLabelsOptions(IssueOptions):
    labels: list[str] = Field(min_length=1, description="Label names")


class RemoveLabelOptions(IssueOptions):
    label_name: str = Field(min_length=1, description="The label to remove")


class CreateLabelOptions(RepoOptions):
    name: str = Field(min_length=1, description="The name of the label")
    color: str = Field(description="Hex color, with or without leading #")
    description: str | None = Field(default=None, description="A short description of the label")

    @field_validator("color")
    @classmethod
    def normalize_color(cls, value: str) -> str:
        return strip_color(value)


class UpdateLabelOptions(RepoOptions):
    label_name: str = Field(min_length=1, description="The current label name")
    new_name: str | None = None
    color: str | None = None
    description: str | None = None

    @field_validator("color")
    @classmethod
    def normalize_color(cls, value: str | None) -> str | None:
        return strip_color(value)


class AddLabelsAction(BaseAction):
    name = "add_labels"
    description = "Adds labels to a GitHub issue"
    method = "POST"
    Options = IssueLabelsOptions
    fields = ("labels",)

    def path(self, options: IssueLabelsOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/labels"


class SetLabelsAction(AddLabelsAction):
    name = "set_labels"
    description = "Replaces all labels on a GitHub issue"
    method = "PUT"


class RemoveLabelAction(BaseAction):
    name = "remove_label"
    description = "Removes a label from a GitHub issue"
    method = "DELETE"
    Options = RemoveLabelOptions

    def path(self, options: RemoveLabelOptions) -> str:
        label = encode_label(options.label_name)
        return f"{options.repo_path}/issues/{options.issue_number}/labels/{label}"


class RemoveAllLabelsAction(BaseAction):
    name = "remove_all_labels"
    description = "Removes all labels from a GitHub issue"
    method = "DELETE"
    Options = IssueOptions

    def path(self, options: IssueOptions) -> str:
        return f"{options.repo_path}/issues/{options.issue_number}/labels"


class CreateLabelAction(BaseAction):
    name = "create_label"
    description = "Creates a label in a GitHub repository"
    method = "POST"
    Options = CreateLabelOptions
    fields = ("name", "color", "description")

    def path(self, options: CreateLabelOptions) -> str:
        return f"{options.repo_path}/labels"


class UpdateLabelAction(BaseAction):
    name = "update_label"
    description = "Updates a label in a GitHub repository"
    method = "PATCH"
    Options = UpdateLabelOptions
    fields = ("new_name", "color", "description")

    def path(self, options: UpdateLabelOptions) -> str:
        return f"{options.repo_path}/labels/{encode_label(options.label_name)}"


class ListRepoLabelsAction(BaseAction):
    name = "list_repo_labels"
    description = "Lists all labels for a GitHub repository"
    Options = PageOptions
    fields = ("per_page", "page")

    def path(self, options: PageOptions) -> str:
        return f"{options.repo_path}/labels"


ACTIONS = [
    AddLabelsAction(),
    SetLabelsAction(),
    RemoveLabelAction(),
    RemoveAllLabelsAction(),
    CreateLabelAction(),
    UpdateLabelAction(),
    ListRepoLabelsAction(),
]
