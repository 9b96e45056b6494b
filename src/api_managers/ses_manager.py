"""SES manager: templated email."""

import json
from typing import Any


class SESManager:
    """Async adapter over an aioboto3 SES client."""

    def __init__(self, ses_client: Any) -> None:
        self._ses_client = ses_client

    async def send_email_using_template(
        self,
        source_email: str,
        destination_email: str,
        template_name: str,
        template_data: dict[str, str | int | float],
    ) -> dict[str, Any]:
        """Send a stored SES template to a single recipient."""
        return await self._ses_client.send_templated_email(
            Source=source_email,
            Destination={"ToAddresses": [destination_email]},
            Template=template_name,
            TemplateData=json.dumps(template_data),
        )
