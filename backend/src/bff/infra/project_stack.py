"""Per-project stack: a gateway whose every route reaches one Lambda."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from aws_cdk import CfnOutput
from aws_cdk import Duration
from aws_cdk import Stack
from aws_cdk import aws_apigateway as apigw
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_logs as logs
from constructs import Construct

from bff.infra.config import DEFAULT_STAGE_NAME
from bff.infra.gateway import BffGateway
from bff.utils.logging import get_logger

logger = get_logger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[3]
HELLO_HANDLER = "lambda/hello/handler.lambda_handler"
ASSET_EXCLUDES = [
    "scripts",
    "src/bff/infra",
    "**/__pycache__",
    "**/*.pyc",
]


def lambda_code() -> lambda_.Code:
    """Return the Lambda code asset: ``lambda/`` and ``src/`` of the backend.

    The handlers only use the standard library and the Lambda runtime, so
    no third-party packages are bundled. The synth-time ``bff.infra``
    package is left out.
    """
    return lambda_.Code.from_asset(str(BACKEND_DIR), exclude=ASSET_EXCLUDES)


class BffProjectStack(Stack):
    """Gateway for one project, proxying ``ANY /{proxy+}`` to a Lambda."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        project_name: str,
        stage_name: str = DEFAULT_STAGE_NAME,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.project_name = project_name

        self.gateway = BffGateway(
            self,
            "Gateway",
            prefix=f"BFF{project_name}Api",
            description=f"BFF {project_name} API",
            stage_name=stage_name,
        )

        self.function = lambda_.Function(
            self,
            f"BFF{project_name}Function",
            runtime=lambda_.Runtime.PYTHON_3_12,
            architecture=lambda_.Architecture.ARM_64,
            handler=HELLO_HANDLER,
            code=lambda_code(),
            timeout=Duration.seconds(10),
            memory_size=128,
            log_retention=logs.RetentionDays.ONE_WEEK,
            environment={
                "PROJECT_NAME": project_name,
                "LOG_LEVEL": "INFO",
                "PYTHONPATH": "/var/task/src",
            },
        )

        self.proxy = self.gateway.api.root.add_proxy(
            any_method=True,
            default_integration=apigw.LambdaIntegration(self.function, proxy=True),
        )

        CfnOutput(
            self,
            "ApiId",
            value=self.gateway.api.rest_api_id,
            description=f"REST API id of the {project_name} project gateway",
        )
        CfnOutput(
            self,
            "ApiUrl",
            value=self.gateway.api.url,
            description=f"Invoke URL of the {project_name} project gateway",
        )

        logger.info(
            "Declared project stack",
            extra={"stack": construct_id, "project_name": project_name},
        )

    @property
    def api(self) -> apigw.RestApi:
        return self.gateway.api
