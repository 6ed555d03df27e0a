"""aws-lambda-restify: REST collection routes for AWS Lambda proxy handlers."""

from enum import Enum

__version__ = "1.0.0"


class StatusCode(Enum):
    """HTTP status codes used by the dispatcher."""

    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500


from aws_lambda_restify.controller import Controller  # noqa: E402
from aws_lambda_restify.proxy import API  # noqa: E402
from aws_lambda_restify.restify import Restify  # noqa: E402

__all__ = ["API", "Controller", "Restify", "StatusCode"]
