"""Lambda manager: synchronous function invocation."""

import json
from typing import Any


class LambdaManager:
    """Async adapter over an aioboto3 Lambda client."""

    def __init__(self, lambda_client: Any) -> None:
        self._lambda_client = lambda_client

    async def get_response(self, function_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke a function with a JSON payload and wait for its result (Invoke response)."""
        return await self._lambda_client.invoke(
            FunctionName=function_name,
            InvocationType="RequestResponse",
            Payload=json.dumps(payload),
        )
