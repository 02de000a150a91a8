"""Base action class with the shared request/interpret workflow."""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ghsteps.env import Settings, get_settings
from ghsteps.github.client import Envelope, GitHubClient, TransportError

logger = logging.getLogger(__name__)

REACTIONS_PREVIEW = "application/vnd.github.squirrel-girl-preview+json"
TIMELINE_PREVIEW = "application/vnd.github.mockingbird-preview+json"

HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")


class ActionError(Exception):
    """Raised when an action cannot be started (bad options, unknown name)."""


class Outcome(Enum):
    """How an action ended.

    Values:
        SUCCESS: GitHub answered with a status the action accepts
        API_ERROR: GitHub answered with an error status
        TRANSPORT_ERROR: No response could be obtained
    """

    SUCCESS = "success"
    API_ERROR = "api_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class ActionResult:
    """Result of running one action.

    Attributes:
        action: Action name (e.g. "create_label")
        outcome: Success, API error or transport error
        status: HTTP status code, None on transport errors
        body: Raw response text
        json: Parsed response JSON, None if absent
        error: Human-readable error message when the action failed
        outputs: Action-specific extra values (e.g. is_merged)
        aliases: Fixed context keys some outputs are also published under
    """

    action: str
    outcome: Outcome
    status: int | None = None
    body: str = ""
    json: Any = None
    error: str | None = None
    outputs: dict[str, Any] = field(default_factory=dict)
    aliases: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @classmethod
    def from_envelope(
        cls,
        action: str,
        envelope: Envelope,
        outcome: Outcome = Outcome.SUCCESS,
        error: str | None = None,
        **outputs: Any,
    ) -> "ActionResult":
        return cls(
            action=action,
            outcome=outcome,
            status=envelope.status,
            body=envelope.body,
            json=envelope.json,
            error=error,
            outputs=outputs,
        )

    def output_values(self) -> dict[str, Any]:
        """Values keyed the way pipelines expose them.

        Example for create_label:
            GITHUB_CREATE_LABEL_STATUS_CODE, GITHUB_CREATE_LABEL_RESPONSE,
            GITHUB_CREATE_LABEL_JSON
        """
        prefix = f"GITHUB_{self.action.upper()}"
        values = {
            f"{prefix}_STATUS_CODE": self.status,
            f"{prefix}_RESPONSE": self.body,
            f"{prefix}_JSON": self.json,
        }
        for key, value in self.outputs.items():
            values[f"{prefix}_{key.upper()}"] = value
        values.update(self.aliases)
        return values

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "outcome": self.outcome.value,
            "status": self.status,
            "body": self.body,
            "json": self.json,
            "error": self.error,
            **self.outputs,
        }


class ActionOptions(BaseModel):
    """Base class for action options."""

    # YAML and templates may hand over numbers for text fields such as titles
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)


class RepoOptions(ActionOptions):
    """Options shared by every repository-scoped action."""

    repo_owner: str = Field(min_length=1, description="Repository owner (organization or username)")
    repo_name: str = Field(min_length=1, description="Repository name")

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.repo_owner}/{self.repo_name}"


class PageOptions(RepoOptions):
    """Options for list endpoints. A single page is fetched."""

    per_page: int | None = Field(default=None, ge=1, le=100, description="Results per page (max 100)")
    page: int | None = Field(default=None, ge=1, description="Page number of the results")


def strip_color(value: str | None) -> str | None:
    """Normalize a hex color, dropping a leading "#"."""
    if value is None:
        return None
    value = value[1:] if value.startswith("#") else value
    if not HEX_COLOR.match(value):
        raise ValueError("Color must be a valid 6 character hex code")
    return value


class BaseAction:
    """Base class for GitHub API actions.

    Subclasses declare the HTTP method, an Options model and how to build
    the endpoint path. By default the request payload is made of the option
    fields listed in `fields`, skipping unset values; GET and DELETE send it
    as the query string, other methods as a JSON body.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    method: ClassVar[str] = "GET"
    Options: ClassVar[type[ActionOptions]] = RepoOptions
    fields: ClassVar[tuple[str, ...]] = ()
    accept: ClassVar[str | None] = None
    # Send the payload as a JSON body even on DELETE
    body_on_delete: ClassVar[bool] = False
    # Output name -> extra context key it is also published under
    output_aliases: ClassVar[dict[str, str]] = {}

    def path(self, options: Any) -> str:
        raise NotImplementedError

    def payload(self, options: Any) -> dict[str, Any]:
        """Build query/body parameters from the option fields."""
        data = options.model_dump(include=set(self.fields), exclude_none=True)
        # Preserve declaration order for stable query strings
        return {key: data[key] for key in self.fields if key in data}

    def headers(self, options: Any) -> dict[str, str] | None:
        if self.accept:
            return {"Accept": self.accept}
        return None

    def parse_options(
        self, raw: dict[str, Any], settings: Settings | None = None
    ) -> ActionOptions:
        """Validate raw options, filling repository defaults from settings.

        Raises:
            ActionError: If the options fail validation
        """
        data = dict(raw)
        model_fields = self.Options.model_fields
        if "repo_owner" in model_fields or "repo_name" in model_fields:
            settings = settings or get_settings()
            if "repo_owner" in model_fields and not data.get("repo_owner") and settings.repo_owner:
                data["repo_owner"] = settings.repo_owner
            if "repo_name" in model_fields and not data.get("repo_name") and settings.repo_name:
                data["repo_name"] = settings.repo_name

        try:
            return self.Options.model_validate(data)
        except ValidationError as e:
            raise ActionError(f"Invalid options for {self.name}: {e}") from e

    def request_args(self, options: Any) -> dict[str, Any]:
        """Arguments for GitHubClient.request."""
        payload = self.payload(options)
        args: dict[str, Any] = {
            "method": self.method,
            "path": self.path(options),
            "headers": self.headers(options),
        }
        if self.method == "DELETE" and self.body_on_delete:
            args["json_body"] = payload or None
        else:
            args["params"] = payload or None
        return args

    def is_success(self, envelope: Envelope) -> bool:
        return envelope.ok

    def success_outputs(self, envelope: Envelope, options: Any) -> dict[str, Any]:
        """Extra values to expose on success."""
        return {}

    def interpret(self, envelope: Envelope, options: Any) -> ActionResult:
        """Turn an envelope into a result.

        Any 2xx status counts as success unless is_success says otherwise.
        """
        if self.is_success(envelope):
            logger.info(f"{self.name}: succeeded ({envelope.status})")
            outputs = self.success_outputs(envelope, options)
            result = ActionResult.from_envelope(self.name, envelope, **outputs)
            result.aliases = {
                alias: outputs[key] for key, alias in self.output_aliases.items() if key in outputs
            }
            return result

        detail = envelope.message or envelope.body or "Unknown error"
        error = f"GitHub API returned {envelope.status}: {detail}"
        logger.error(f"{self.name}: {error}")
        return ActionResult.from_envelope(self.name, envelope, Outcome.API_ERROR, error)

    async def run(self, client: GitHubClient, options: Any) -> ActionResult:
        """Send the request for validated options and interpret the response."""
        args = self.request_args(options)
        logger.info(f"{self.name}: {args['method']} {args['path']}")

        try:
            envelope = await client.request(**args)
        except TransportError as e:
            logger.error(f"{self.name}: {e}")
            return ActionResult(
                action=self.name,
                outcome=Outcome.TRANSPORT_ERROR,
                error=str(e),
            )

        return self.interpret(envelope, options)

    async def execute(
        self,
        client: GitHubClient,
        raw_options: dict[str, Any],
        settings: Settings | None = None,
    ) -> ActionResult:
        """Validate raw options and run the action.

        Raises:
            ActionError: If the options are invalid
        """
        options = self.parse_options(raw_options, settings)
        return await self.run(client, options)
