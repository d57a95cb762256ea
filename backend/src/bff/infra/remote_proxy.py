"""HTTP proxy routes that forward a path prefix to an external REST API.

For a registry entry ``{"Users": "86qmfc4dy1"}`` the gateway gets

    ANY /users/{proxy+}  ->  https://86qmfc4dy1.execute-api.<region>.amazonaws.com/prod/{proxy}

Method, path remainder, headers and query string are forwarded as-is.
Responses, including errors and non-200 statuses, are relayed to the
caller unchanged; only a 200 gains ``Access-Control-Allow-Origin: *``.
"""

from __future__ import annotations

from aws_cdk import aws_apigateway as apigw

PROXY_PATH_PARAMETER = "proxy"
ALLOW_ORIGIN_HEADER = "method.response.header.Access-Control-Allow-Origin"

# Rebuilds the request as a JSON envelope for application/json bodies.
REQUEST_TEMPLATE = """{
  "body" : $input.json('$'),
  "headers": {
    #foreach($header in $input.params().header.keySet())
    "$header": "$util.escapeJavaScript($input.params().header.get($header))"
    #if($foreach.hasNext),#end
    #end
  },
  "method": "$context.httpMethod",
  "params": {
    #foreach($param in $input.params().path.keySet())
    "$param": "$util.escapeJavaScript($input.params().path.get($param))"
    #if($foreach.hasNext),#end
    #end
  },
  "query": {
    #foreach($queryParam in $input.params().querystring.keySet())
    "$queryParam": "$util.escapeJavaScript($input.params().querystring.get($queryParam))"
    #if($foreach.hasNext),#end
    #end
  }
}
"""


def remote_integration_options() -> apigw.IntegrationOptions:
    """Integration options shared by every remote proxy route."""
    return apigw.IntegrationOptions(
        passthrough_behavior=apigw.PassthroughBehavior.WHEN_NO_MATCH,
        request_parameters={
            f"integration.request.path.{PROXY_PATH_PARAMETER}": (
                f"method.request.path.{PROXY_PATH_PARAMETER}"
            ),
        },
        request_templates={"application/json": REQUEST_TEMPLATE},
        integration_responses=[
            apigw.IntegrationResponse(
                status_code="200",
                response_parameters={ALLOW_ORIGIN_HEADER: "'*'"},
            ),
        ],
    )


def remote_method_options() -> apigw.MethodOptions:
    """Method options for the catch-all method of a remote proxy route."""
    return apigw.MethodOptions(
        request_parameters={f"method.request.path.{PROXY_PATH_PARAMETER}": True},
        method_responses=[
            apigw.MethodResponse(
                status_code="200",
                response_parameters={ALLOW_ORIGIN_HEADER: True},
            ),
        ],
    )


def add_remote_proxy(
    api: apigw.RestApi,
    name: str,
    integration_url: str,
) -> apigw.ProxyResource:
    """Route ``ANY /{lower(name)}/{proxy+}`` to ``integration_url``.

    Args:
        api: Gateway receiving the route.
        name: Project name; lower-cased to form the path segment.
        integration_url: Target URL containing a ``{proxy}`` placeholder.

    Returns:
        The catch-all proxy resource.
    """
    integration = apigw.HttpIntegration(
        integration_url,
        http_method="ANY",
        proxy=True,
        options=remote_integration_options(),
    )
    return api.root.add_resource(name.lower()).add_proxy(
        any_method=True,
        default_integration=integration,
        default_method_options=remote_method_options(),
    )
