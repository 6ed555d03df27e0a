from dataclasses import dataclass
from typing import Dict, Optional, Union

from aws_lambda_restify import StatusCode


@dataclass(frozen=True)
class Response:
    status_code: StatusCode
    content_type: str
    body: Union[str, bytes]
    headers: Optional[Dict[str, str]] = None
