from typing import Dict, Optional

import pytest

from aws_lambda_restify import API, Restify
from aws_lambda_restify.conditions import IDENTIFIER_CONDITIONS
from aws_lambda_restify.routing import Router


@pytest.fixture
def router():
    """Router with the identifier conditions installed."""
    router = Router()
    for name, condition in IDENTIFIER_CONDITIONS.items():
        router.add_condition(name, condition)
    return router


@pytest.fixture
def app():
    """API with the restify plugin registered."""
    app = API(name="restify-test", configure_logs=False)
    app.plugin(Restify)
    return app


@pytest.fixture
def make_event():
    """Build an API Gateway proxy event."""

    def _make_event(
        method: str,
        path: str,
        query: Optional[Dict] = None,
        body: Optional[str] = None,
    ) -> Dict:
        return {
            "resource": "/{proxy+}",
            "pathParameters": {"proxy": path.lstrip("/")},
            "path": path,
            "httpMethod": method,
            "headers": {"Host": "test.apigw.com"},
            "queryStringParameters": query,
            "body": body,
        }

    return _make_event
