"""Usage plan whose API-stage associations are resolved after declaration.

The L2 ``UsagePlan`` only accepts API stages as typed references to
``RestApi``/``Stage`` constructs of the same app. APIs owned by other
stacks or accounts are only known by their raw id, so stage associations
are collected as plain bindings while the stack is declared and written
to the underlying ``CfnUsagePlan`` in a single finalization pass once the
construct tree is complete.

Finalization overwrites ``ApiStages`` completely: stages configured on
the plan through any other route are discarded.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from typing import Optional

import jsii
from aws_cdk import Aspects
from aws_cdk import IAspect
from aws_cdk import aws_apigateway as apigw
from constructs import Construct
from constructs import IConstruct

from bff.infra.config import DEFAULT_STAGE_NAME
from bff.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiStageBinding:
    """Request to authorize the usage plan against one API stage."""

    api_id: str
    stage: str = DEFAULT_STAGE_NAME

    def to_property(self) -> apigw.CfnUsagePlan.ApiStageProperty:
        return apigw.CfnUsagePlan.ApiStageProperty(
            api_id=self.api_id,
            stage=self.stage,
        )


class DeferredUsagePlan(Construct):
    """Usage plan with two-phase (declare, then finalize) stage binding."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        usage_plan_name: str,
    ) -> None:
        super().__init__(scope, construct_id)

        self.plan = apigw.UsagePlan(
            self,
            "Plan",
            name=usage_plan_name,
            api_stages=[],
        )
        self._bindings: list[ApiStageBinding] = []

        Aspects.of(self).add(_ApiStageFinalizer())

    @property
    def bindings(self) -> tuple[ApiStageBinding, ...]:
        return tuple(self._bindings)

    @property
    def cfn_usage_plan(self) -> apigw.CfnUsagePlan:
        return self.plan.node.default_child  # type: ignore[return-value]

    def add_api_key(self, api_key: apigw.IApiKey) -> None:
        self.plan.add_api_key(api_key)

    def bind(
        self,
        api_id: str,
        stage: str = DEFAULT_STAGE_NAME,
        depends_on: Optional[IConstruct] = None,
    ) -> ApiStageBinding:
        """Record a stage association to write at finalization.

        Duplicate bindings are ignored; the first occurrence keeps its
        position.

        Args:
            api_id: REST API id, either a literal or a CDK token.
            stage: Stage name on that API.
            depends_on: Construct that must be deployed before the plan,
                typically the stage of an API declared in the same stack.

        Returns:
            The recorded binding.
        """
        binding = ApiStageBinding(api_id=api_id, stage=stage)
        if binding not in self._bindings:
            self._bindings.append(binding)
        if depends_on is not None:
            self.plan.node.add_dependency(depends_on)
        return binding

    def bind_rest_api(
        self,
        api: apigw.RestApi,
        stage: str = DEFAULT_STAGE_NAME,
    ) -> ApiStageBinding:
        """Bind a gateway declared in this app.

        The stage name is written literally; the plan depends on the
        gateway's deployment stage so that it exists first.
        """
        return self.bind(api.rest_api_id, stage, depends_on=api.deployment_stage)

    def finalize(self) -> None:
        """Overwrite the plan's API stages with the collected bindings.

        Safe to call more than once; each call writes the same list.
        """
        cfn_plan = self.cfn_usage_plan
        existing = cfn_plan.api_stages
        if existing:
            logger.debug(
                "Discarding previously configured usage plan API stages",
                extra={"api_stages": _describe(existing)},
            )

        api_stages = [binding.to_property() for binding in self._bindings]
        cfn_plan.api_stages = api_stages or None
        logger.info(
            "Usage plan API stages finalized",
            extra={
                "usage_plan": self.node.path,
                "api_stage_count": len(self._bindings),
            },
        )


@jsii.implements(IAspect)
class _ApiStageFinalizer:
    """Finalizes every ``DeferredUsagePlan`` once the tree is complete."""

    def visit(self, node: IConstruct) -> None:
        if isinstance(node, DeferredUsagePlan):
            node.finalize()


def _describe(api_stages: Any) -> str:
    return json.dumps(api_stages, default=str)
