"""
Ollama API client.

Related classes:
  - config.Config: provides host, model and generation settings
  - insight.generator.InsightGenerator: sends the note batch through this client
"""

import json
import logging
from typing import Any, Dict, List, Union

import ollama


class OllamaClient:
    """Thin wrapper over ollama.Client for chat completions"""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ):
        """
        Args:
            host: Ollama server URL
            model: model name
            temperature: sampling temperature (0.0-1.0)
            max_tokens: maximum number of generated tokens
        """
        self.host = host
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logging.getLogger(__name__)

        self.client = ollama.Client(host=host)

    def chat(
        self,
        messages: List[Dict[str, str]],
        return_json: bool = True,
    ) -> Union[Dict[str, Any], str]:
        """
        Run a chat completion.

        Args:
            messages: [{"role": "user", "content": "..."}, ...]
            return_json: ask the model for JSON and decode it

        Returns:
            decoded JSON dict when return_json is True, otherwise the raw text

        Raises:
            ValueError: the model did not return valid JSON
        """
        try:
            response = self.client.chat(
                model=self.model,
                messages=messages,
                stream=False,
                format="json" if return_json else "",
                options={
                    "temperature": self.temperature,
                    "num_predict": self.max_tokens,
                },
            )
            content = response["message"]["content"]
            if return_json:
                return json.loads(content)
            return content

        except json.JSONDecodeError as e:
            self.logger.error(f"JSON decode error: {e}")
            raise ValueError(f"Ollama response is not valid JSON: {e}")
        except Exception as e:
            self.logger.error(f"Ollama chat error: {e}")
            raise
