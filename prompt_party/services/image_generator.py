"""Image-generation client for an OpenAI-compatible images API."""
import logging
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """Raised when the image service fails or returns no image."""


class OpenAIImageGenerator:
    """Generates one image per prompt via ``POST /v1/images/generations``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        model: str = "dall-e-3",
        size: str = "1024x1024",
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.size = size
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "OpenAIImageGenerator":
        """Build a generator from Flask app config."""
        return cls(
            api_key=config["OPENAI_API_KEY"],
            base_url=config["IMAGE_API_BASE_URL"],
            model=config["IMAGE_MODEL"],
            size=config["IMAGE_SIZE"],
            timeout=config["IMAGE_API_TIMEOUT"],
        )

    def _build_url(self) -> str:
        if self.base_url.endswith("/v1/images/generations"):
            return self.base_url
        if self.base_url.endswith("/v1"):
            return f"{self.base_url}/images/generations"
        return f"{self.base_url}/v1/images/generations"

    def generate(self, prompt: str) -> str:
        """Generate a single image and return its URL.

        Args:
            prompt: The text prompt.

        Returns:
            URL of the generated image.

        Raises:
            ImageGenerationError: On transport errors, non-2xx responses, or a
                response without an image URL.
        """
        if not self.api_key:
            raise ImageGenerationError("OPENAI_API_KEY is not configured")

        body = {"model": self.model, "prompt": prompt, "n": 1, "size": self.size}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self._build_url(), json=body, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise ImageGenerationError(
                f"Image API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageGenerationError(f"Image API request failed: {exc}") from exc
        except ValueError as exc:
            raise ImageGenerationError("Image API returned invalid JSON") from exc

        data = payload.get("data") or []
        url = data[0].get("url") if data else None
        if not url:
            raise ImageGenerationError("No image URL in response")
        logger.debug("Generated image for prompt %r", prompt)
        return url
