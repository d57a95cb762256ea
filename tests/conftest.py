"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the Lambda handlers
and for synthesizing the CDK stacks into CloudFormation templates.
"""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


# --- API Event Fixtures ---


@pytest.fixture
def api_gateway_event() -> dict:
    """API Gateway proxy event as delivered to the project Lambda."""
    return {
        'resource': '/{proxy+}',
        'path': '/orders/42',
        'httpMethod': 'POST',
        'headers': {
            'Content-Type': 'application/json',
            'x-api-key': 'test-key',
        },
        'queryStringParameters': {'expand': 'items'},
        'multiValueQueryStringParameters': {'expand': ['items']},
        'pathParameters': {'proxy': 'orders/42'},
        'requestContext': {
            'requestId': str(uuid4()),
            'stage': 'prod',
        },
        'body': '{"quantity": 3}',
        'isBase64Encoded': False,
    }


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    """Minimal Lambda context object."""
    return SimpleNamespace(
        aws_request_id=str(uuid4()),
        function_name='BFFUsersFunction',
    )


# --- CDK Fixtures ---


@pytest.fixture
def cdk_app():
    """Fresh CDK app with no context."""
    import aws_cdk as cdk

    return cdk.App()


# --- Mock Fixtures ---


@pytest.fixture
def mock_boto3_client(mocker):
    """Mock boto3 client for AWS service calls."""
    from bff.services.aws_clients import clear_client_cache

    clear_client_cache()
    mock = mocker.patch('boto3.client')
    yield mock
    clear_client_cache()

