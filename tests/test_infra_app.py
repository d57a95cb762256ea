"""Tests for composing the CDK app from settings."""

from __future__ import annotations

import aws_cdk as cdk
import pytest

from bff.exceptions import ValidationError
from bff.infra.app import BFF_STACK_ID
from bff.infra.app import build_app
from bff.infra.app import project_stack_id
from bff.infra.config import BffSettings


class TestProjectStackId:
    """Tests for project_stack_id."""

    def test_format(self) -> None:
        assert project_stack_id('Users') == 'BlogBffUsersStack'


class TestBuildApp:
    """Tests for build_app."""

    def test_default_deployment(self, cdk_app) -> None:
        result = build_app(cdk_app)

        assert result.bff_stack.stack_name == BFF_STACK_ID
        assert result.bff_stack.external_apis == {'Users': '86qmfc4dy1'}
        assert list(result.project_stacks) == ['Users']
        assert result.project_stacks['Users'].stack_name == 'BlogBffUsersStack'

    def test_registered_project_deploys_first(self, cdk_app) -> None:
        result = build_app(cdk_app)
        assert result.project_stacks['Users'] in result.bff_stack.dependencies

    def test_unregistered_project_has_no_ordering(self) -> None:
        settings = BffSettings(external_apis={}, projects=('Orders',))
        result = build_app(cdk.App(), settings)
        assert result.project_stacks['Orders'] not in result.bff_stack.dependencies

    def test_uses_context(self) -> None:
        app = cdk.App(
            context={
                'externalApis': '{"Orders": "abcde12345"}',
                'projects': '',
            }
        )
        result = build_app(app)
        assert result.bff_stack.external_apis == {'Orders': 'abcde12345'}
        assert result.project_stacks == {}

    def test_synthesizes(self, cdk_app) -> None:
        result = build_app(cdk_app)
        assembly = result.app.synth()
        names = {stack.stack_name for stack in assembly.stacks}
        assert names == {'BlogBffStack', 'BlogBffUsersStack'}

    def test_invalid_context(self) -> None:
        app = cdk.App(context={'externalApis': '{"Users": "bad"}'})
        with pytest.raises(ValidationError):
            build_app(app)
