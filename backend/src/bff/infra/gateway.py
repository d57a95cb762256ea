"""REST API and access-log declaration shared by every BFF stack."""

from __future__ import annotations

from aws_cdk import RemovalPolicy
from aws_cdk import aws_apigateway as apigw
from aws_cdk import aws_logs as logs
from constructs import Construct

from bff.infra.config import DEFAULT_STAGE_NAME

HEALTH_RESPONSE = '{"healthy": true}'


class BffGateway(Construct):
    """Regional REST API whose methods all require an API key.

    The deploy stage has data tracing, X-Ray tracing and metrics enabled
    and writes JSON access logs to a dedicated log group that keeps one
    week of data and is deleted with the stack.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        prefix: str,
        description: str,
        stage_name: str = DEFAULT_STAGE_NAME,
    ) -> None:
        super().__init__(scope, construct_id)

        self.log_group = logs.LogGroup(
            self,
            "AccessLogs",
            log_group_name=f"/{prefix}",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.api = apigw.RestApi(
            self,
            "Api",
            rest_api_name=prefix,
            description=description,
            endpoint_configuration=apigw.EndpointConfiguration(
                types=[apigw.EndpointType.REGIONAL],
            ),
            default_method_options=apigw.MethodOptions(
                api_key_required=True,
            ),
            deploy_options=apigw.StageOptions(
                stage_name=stage_name,
                data_trace_enabled=True,
                tracing_enabled=True,
                metrics_enabled=True,
                access_log_destination=apigw.LogGroupLogDestination(self.log_group),
                access_log_format=apigw.AccessLogFormat.json_with_standard_fields(
                    caller=True,
                    http_method=True,
                    ip=True,
                    protocol=True,
                    request_time=True,
                    resource_path=True,
                    response_length=True,
                    status=True,
                    user=True,
                ),
            ),
        )

    def add_health_check(self, path_part: str = "health") -> apigw.Method:
        """Add ``GET /{path_part}`` answered by the gateway itself.

        Keeps the API deployable when no other route is declared. The
        method requires an API key like every other method.
        """
        integration = apigw.MockIntegration(
            request_templates={"application/json": '{"statusCode": 200}'},
            integration_responses=[
                apigw.IntegrationResponse(
                    status_code="200",
                    response_templates={"application/json": HEALTH_RESPONSE},
                ),
            ],
        )
        return self.api.root.add_resource(path_part).add_method(
            "GET",
            integration,
            method_responses=[apigw.MethodResponse(status_code="200")],
        )
