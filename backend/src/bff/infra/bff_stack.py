"""Front gateway stack aggregating the project APIs behind one API key."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from aws_cdk import CfnOutput
from aws_cdk import Stack
from aws_cdk import aws_apigateway as apigw
from constructs import Construct

from bff.infra.config import DEFAULT_INTEGRATION_REGION
from bff.infra.config import DEFAULT_STAGE_NAME
from bff.infra.config import settings_from_context
from bff.infra.gateway import BffGateway
from bff.infra.remote_proxy import add_remote_proxy
from bff.infra.usage_plan import DeferredUsagePlan
from bff.utils.logging import get_logger

logger = get_logger(__name__)


class BffStack(Stack):
    """Gateway forwarding ``/{name}/{proxy+}`` to each external API.

    The single usage plan authorizes ``BFFApiKey`` against this gateway
    and every external API at the configured stage.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        external_apis: Mapping[str, str],
        stage_name: str = DEFAULT_STAGE_NAME,
        integration_region: str = DEFAULT_INTEGRATION_REGION,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Validate before declaring anything.
        settings = settings_from_context(
            {
                "externalApis": dict(external_apis),
                "projects": [],
                "stageName": stage_name,
                "integrationRegion": integration_region,
            }
        )
        self.external_apis = settings.external_apis

        self.api_key = apigw.ApiKey(self, "BFFApiKey", api_key_name="BFFApiKey")

        self.gateway = BffGateway(
            self,
            "Gateway",
            prefix="BFFApi",
            description="BFF API",
            stage_name=settings.stage_name,
        )

        self.usage_plan = DeferredUsagePlan(
            self,
            "BFFUsagePlan",
            usage_plan_name="BFFUsagePlan",
        )
        self.usage_plan.add_api_key(self.api_key)
        self.usage_plan.bind_rest_api(self.gateway.api, settings.stage_name)
        self.gateway.add_health_check()

        self.remote_proxies: dict[str, apigw.ProxyResource] = {}
        for name, api_id in settings.external_apis.items():
            self.usage_plan.bind(api_id, settings.stage_name)
            self.remote_proxies[name] = add_remote_proxy(
                self.gateway.api,
                name,
                settings.integration_url(api_id),
            )

        CfnOutput(self, "ApiUrl", value=self.gateway.api.url)
        CfnOutput(self, "ApiKeyId", value=self.api_key.key_id)
        CfnOutput(self, "UsagePlanId", value=self.usage_plan.plan.usage_plan_id)

        logger.info(
            "Declared BFF stack",
            extra={
                "stack": construct_id,
                "external_apis": sorted(settings.external_apis),
            },
        )

    @property
    def api(self) -> apigw.RestApi:
        return self.gateway.api
