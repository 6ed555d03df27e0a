"""API Gateway event parsing."""

from typing import Dict, Optional

from aws_lambda_restify.patterns import proxy_pattern


def _normalize_headers(event: Dict) -> Dict[str, str]:
    # API Gateway does not guarantee header name case
    headers = event.get("headers") or {}
    return {key.lower(): value for key, value in headers.items()}


def _get_apigw_stage(event: Dict) -> str:
    """Return API Gateway stage name."""
    headers = _normalize_headers(event)
    host = headers.get("x-forwarded-host", headers.get("host", ""))
    if ".execute-api." in host and ".amazonaws.com" in host:
        return (event.get("requestContext") or {}).get("stage", "")
    return ""


def _get_request_path(event: Dict) -> Optional[str]:
    """Return the path routed to this function, unwrapping ``{proxy+}`` resources."""
    resource_proxy = proxy_pattern.search(event.get("resource", "/"))
    if resource_proxy:
        parameters = event.get("pathParameters") or {}
        proxy_path = parameters.get(resource_proxy["name"])
        return f"/{proxy_path}" if proxy_path is not None else "/"

    return event.get("path")


class ApigwPath:
    """Request path and the prefix API Gateway mounted it under."""

    def __init__(self, event: Dict) -> None:
        """Initialize API Gateway path info."""
        self.method: str = (event.get("httpMethod") or "GET").upper()
        self.stage = _get_apigw_stage(event)
        self.path = _get_request_path(event)
        resource = event.get("resource", "")
        self.resource_prefix = (
            proxy_pattern.sub("", resource).rstrip("/")
            if proxy_pattern.search(resource)
            else ""
        )

        # custom domain base path mappings show up in front of the resource
        self.path_mapping = ""
        if not self.stage and self.path:
            suffix = self.resource_prefix + self.path
            full_path = event.get("path", "")
            if full_path.endswith(suffix):
                self.path_mapping = full_path[: -len(suffix)] if suffix else full_path

    @property
    def prefix(self) -> str:
        """Return the prefix to put in front of generated paths."""
        if self.stage and self.stage != "$default":
            return f"/{self.stage}{self.resource_prefix}"
        return self.path_mapping + self.resource_prefix
