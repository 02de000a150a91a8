"""Repository actions."""

from pydantic import Field, field_validator

from ghsteps.actions.base import ActionOptions, BaseAction, RepoOptions


class CreateRepositoryOptions(ActionOptions):
    name: str = Field(min_length=1, description="The name of the repository")
    organization: str | None = Field(
        default=None, description="Create the repository in this organization instead of for the user"
    )
    description: str | None = None
    homepage: str | None = None
    private: bool | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None
    auto_init: bool | None = None
    license_template: str | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_rebase_merge: bool | None = None


class DeleteRepositoryOptions(RepoOptions):
    confirm: bool = Field(
        default=False, validate_default=True, description="Must be true to delete the repository"
    )

    @field_validator("confirm")
    @classmethod
    def require_confirmation(cls, value: bool) -> bool:
        if not value:
            raise ValueError("Repository deletion was not confirmed")
        return value


class CreateRepositoryAction(BaseAction):
    name = "create_repository"
    description = "Creates a new GitHub repository"
    method = "POST"
    Options = CreateRepositoryOptions
    fields = (
        "name",
        "description",
        "homepage",
        "private",
        "has_issues",
        "has_projects",
        "has_wiki",
        "auto_init",
        "license_template",
        "allow_squash_merge",
        "allow_merge_commit",
        "allow_rebase_merge",
    )

    def path(self, options: CreateRepositoryOptions) -> str:
        if options.organization:
            return f"/orgs/{options.organization}/repos"
        return "/user/repos"


class DeleteRepositoryAction(BaseAction):
    name = "delete_repository"
    description = "Deletes a GitHub repository"
    method = "DELETE"
    Options = DeleteRepositoryOptions

    def path(self, options: DeleteRepositoryOptions) -> str:
        return options.repo_path


ACTIONS = [
    CreateRepositoryAction(),
    DeleteRepositoryAction(),
]
