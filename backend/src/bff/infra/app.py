"""Composition of the BFF stacks into one CDK app."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Optional

import aws_cdk as cdk

from bff.infra.bff_stack import BffStack
from bff.infra.config import BffSettings
from bff.infra.config import load_settings
from bff.infra.project_stack import BffProjectStack
from bff.utils.logging import get_logger

logger = get_logger(__name__)

BFF_STACK_ID = "BlogBffStack"


def project_stack_id(project_name: str) -> str:
    return f"BlogBff{project_name}Stack"


@dataclass
class BffApp:
    """Stacks declared by ``build_app``."""

    app: cdk.App
    settings: BffSettings
    bff_stack: BffStack
    project_stacks: dict[str, BffProjectStack] = field(default_factory=dict)


def build_app(
    app: Optional[cdk.App] = None,
    settings: Optional[BffSettings] = None,
) -> BffApp:
    """Declare the BFF stack and one stack per configured project.

    A project that is also listed in the external API registry is
    deployed before the BFF stack, whose usage plan references its stage.
    """
    if app is None:
        app = cdk.App()
    if settings is None:
        settings = load_settings(app)

    bff_stack = BffStack(
        app,
        BFF_STACK_ID,
        external_apis=settings.external_apis,
        stage_name=settings.stage_name,
        integration_region=settings.integration_region,
    )
    result = BffApp(app=app, settings=settings, bff_stack=bff_stack)

    for project_name in settings.projects:
        project_stack = BffProjectStack(
            app,
            project_stack_id(project_name),
            project_name=project_name,
            stage_name=settings.stage_name,
        )
        result.project_stacks[project_name] = project_stack
        if project_name in settings.external_apis:
            bff_stack.add_dependency(project_stack)

    logger.info(
        "BFF app declared",
        extra={
            "external_apis": sorted(settings.external_apis),
            "projects": list(settings.projects),
        },
    )
    return result
