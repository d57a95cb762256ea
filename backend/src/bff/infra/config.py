"""Synth-time settings for the BFF stacks.

Settings come from CDK context, either ``cdk.json`` or ``-c key=value``
on the command line:

    externalApis       JSON object mapping project name to API id,
                       e.g. ``{"Users": "86qmfc4dy1"}``
    projects           list (or comma-separated string) of project names
                       that get their own Lambda-backed gateway stack
    stageName          stage the usage plan binds to (default ``prod``)
    integrationRegion  region hosting the external APIs (default ``us-east-1``)

Values passed with ``-c`` always arrive as strings, so JSON-looking
strings are decoded before validation.
"""

from __future__ import annotations

import json
import re
from typing import Any
from typing import Mapping

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator

from bff.exceptions import ValidationError

DEFAULT_EXTERNAL_APIS: dict[str, str] = {"Users": "86qmfc4dy1"}
DEFAULT_PROJECTS: tuple[str, ...] = ("Users",)
DEFAULT_STAGE_NAME = "prod"
DEFAULT_INTEGRATION_REGION = "us-east-1"

_CONTEXT_FIELDS = {
    "externalApis": "external_apis",
    "projects": "projects",
    "stageName": "stage_name",
    "integrationRegion": "integration_region",
}

PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
API_ID_PATTERN = re.compile(r"^[a-z0-9]{10}$")
STAGE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
REGION_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d$")
RESERVED_PATH_SEGMENTS = frozenset({"health"})


def _check_project_name(name: str) -> str:
    if not PROJECT_NAME_PATTERN.match(name):
        raise ValueError(f"invalid project name: {name!r}")
    return name


class BffSettings(BaseModel):
    """Validated, immutable settings for one CDK app."""

    model_config = ConfigDict(frozen=True)

    external_apis: dict[str, str] = Field(default_factory=dict)
    projects: tuple[str, ...] = ()
    stage_name: str = DEFAULT_STAGE_NAME
    integration_region: str = DEFAULT_INTEGRATION_REGION

    @field_validator("external_apis")
    @classmethod
    def _validate_external_apis(cls, value: dict[str, str]) -> dict[str, str]:
        path_segments: dict[str, str] = {}
        for name, api_id in value.items():
            _check_project_name(name)
            if not API_ID_PATTERN.match(api_id):
                raise ValueError(f"invalid API id for {name}: {api_id!r}")
            segment = name.lower()
            if segment in RESERVED_PATH_SEGMENTS:
                raise ValueError(f"{name!r} maps to reserved path /{segment}")
            if segment in path_segments:
                raise ValueError(
                    f"{name!r} and {path_segments[segment]!r} map to the "
                    f"same path /{segment}"
                )
            path_segments[segment] = name
        return value

    @field_validator("projects")
    @classmethod
    def _validate_projects(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            _check_project_name(name)
        if len(set(value)) != len(value):
            raise ValueError("duplicate project names")
        return value

    @field_validator("stage_name")
    @classmethod
    def _validate_stage_name(cls, value: str) -> str:
        if not STAGE_NAME_PATTERN.match(value):
            raise ValueError(f"invalid stage name: {value!r}")
        return value

    @field_validator("integration_region")
    @classmethod
    def _validate_region(cls, value: str) -> str:
        if not REGION_PATTERN.match(value):
            raise ValueError(f"invalid region: {value!r}")
        return value

    def integration_url(self, api_id: str) -> str:
        """Return the HTTP proxy target for an external API id."""
        return (
            f"https://{api_id}.execute-api.{self.integration_region}"
            f".amazonaws.com/{self.stage_name}/{{proxy}}"
        )


def _decode_external_apis(raw: Any) -> Any:
    if isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return {}
        try:
            return json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                "externalApis must be a JSON object", field="externalApis"
            ) from exc
    return raw


def _decode_projects(raw: Any) -> Any:
    if isinstance(raw, str):
        stripped = raw.strip()
        if stripped.startswith("["):
            try:
                return json.loads(stripped)
            except json.JSONDecodeError as exc:
                raise ValidationError(
                    "projects must be a JSON list or comma-separated names",
                    field="projects",
                ) from exc
        return [name.strip() for name in stripped.split(",") if name.strip()]
    return raw


def settings_from_context(context: Mapping[str, Any]) -> BffSettings:
    """Build settings from a mapping of CDK context values.

    Missing ``externalApis`` and ``projects`` fall back to the defaults of
    the default deployment; an explicitly empty value is kept empty.

    Raises:
        ValidationError: If any value fails validation. ``field`` names
            the offending context key.
    """
    values: dict[str, Any] = {
        "external_apis": DEFAULT_EXTERNAL_APIS,
        "projects": DEFAULT_PROJECTS,
    }
    for context_key, field_name in _CONTEXT_FIELDS.items():
        raw = context.get(context_key)
        if raw is None:
            continue
        if context_key == "externalApis":
            raw = _decode_external_apis(raw)
        elif context_key == "projects":
            raw = _decode_projects(raw)
        values[field_name] = raw

    try:
        return BffSettings(**values)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field_name = str(first["loc"][0]) if first["loc"] else None
        context_key = next(
            (key for key, name in _CONTEXT_FIELDS.items() if name == field_name),
            field_name,
        )
        message = str(first["msg"]).removeprefix("Value error, ")
        raise ValidationError(message, field=context_key) from exc


def load_settings(scope: Any) -> BffSettings:
    """Read settings from the CDK context visible to ``scope``."""
    context = {key: scope.node.try_get_context(key) for key in _CONTEXT_FIELDS}
    return settings_from_context(context)
