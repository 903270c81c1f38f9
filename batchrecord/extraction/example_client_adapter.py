"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from batchrecord.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Example adapter that answers with a fixed fenced JSON array.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RECORDS: ClassVar[list[dict[str, object]]] = [
        {"product": "Saline Solution 0.9%", "batch": "42"},
        {"Sodium Chloride": "9.0 g", "Water for Injection": "1000 mL"},
        {"target pH": 7.0, "measured pH": 6.8, "0.1N NaOH added": "2 mL"},
    ]

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return f"```json\n{json.dumps(self.DEFAULT_RECORDS, indent=2)}\n```"
