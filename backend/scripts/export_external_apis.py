"""Print the external API registry of deployed project stacks.

Reads the ``ApiId`` output of each ``BlogBff{Project}Stack`` and prints a
JSON object suitable for the BFF stack context, e.g.

    cdk deploy BlogBffStack -c externalApis="$(python backend/scripts/export_external_apis.py Users)"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any
from typing import Iterable

from botocore.exceptions import ClientError

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from bff.exceptions import ConfigurationError  # noqa: E402
from bff.infra.app import project_stack_id  # noqa: E402
from bff.services.aws_clients import get_cloudformation_client  # noqa: E402

logger = logging.getLogger(__name__)

API_ID_OUTPUT_KEY = "ApiId"


def read_api_id(cfn_client: Any, stack_name: str) -> str:
    """Return the ``ApiId`` output of a deployed stack.

    Raises:
        ConfigurationError: If the stack has no ``ApiId`` output.
    """
    response = cfn_client.describe_stacks(StackName=stack_name)
    for stack in response.get("Stacks", []):
        for output in stack.get("Outputs", []):
            if output.get("OutputKey") == API_ID_OUTPUT_KEY:
                return output["OutputValue"]
    raise ConfigurationError(f"{stack_name}.{API_ID_OUTPUT_KEY}")


def export_registry(
    project_names: Iterable[str],
    region_name: str | None = None,
) -> dict[str, str]:
    cfn_client = get_cloudformation_client(region_name)
    registry: dict[str, str] = {}
    for project_name in project_names:
        stack_name = project_stack_id(project_name)
        registry[project_name] = read_api_id(cfn_client, stack_name)
        logger.info("Resolved %s -> %s", stack_name, registry[project_name])
    return registry


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "projects",
        nargs="+",
        help="Project names whose stacks should be read.",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="AWS region of the project stacks (default: boto3 configuration).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)
    args = _parse_args(argv)
    try:
        registry = export_registry(args.projects, args.region)
    except ClientError as exc:
        logger.error("Failed to read stack outputs: %s", exc)
        raise SystemExit(1) from exc
    except ConfigurationError as exc:
        logger.error(exc.message)
        raise SystemExit(1) from exc
    print(json.dumps(registry))


if __name__ == "__main__":
    main()
