import json
import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from openai import AsyncOpenAI

from app.core.config import settings

logger = logging.getLogger(__name__)


class BaseAIService:
    """Base Service to interact with an OpenAI-compatible chat completions API"""

    def __init__(self):
        self.api_key = settings.ai_api_key
        self.api_endpoint = settings.ai_api_endpoint
        self.model = settings.ai_model

        # No endpoint means the SDK default (api.openai.com)
        self.client = AsyncOpenAI(
            api_key=self.api_key or "not-configured",
            base_url=(
                self.api_endpoint.replace("/chat/completions", "")
                if self.api_endpoint
                else None
            ),
            timeout=60.0,
            max_retries=2,
        )

        if not self.api_key:
            logger.warning("AI_API_KEY not configured. AI features will be disabled.")

    async def close(self):
        """Close the OpenAI client and release resources"""
        await self.client.close()

    def is_configured(self) -> bool:
        """Check if AI service is properly configured"""
        return bool(self.api_key and self.model)

    def _extract_json_from_response(self, text: str) -> Any:
        """
        Extract and parse JSON from AI response that may contain markdown formatting

        Args:
            text: Raw text response from AI that may contain ```json``` markers

        Returns:
            Parsed JSON object (dict or list)

        Raises:
            HTTPException: If JSON parsing fails
        """
        try:
            json_pattern = r"```(?:json)?\s*\n?([\s\S]*?)\n?```"
            match = re.search(json_pattern, text)
            json_text = match.group(1).strip() if match else text.strip()
            return json.loads(json_text)

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON from AI response: {str(e)}")
            logger.error(f"Response length: {len(text)} characters")

            if not text.strip().endswith("}") and not text.strip().endswith("]"):
                logger.error("Response appears to be truncated - missing closing bracket")
                raise HTTPException(
                    status_code=500,
                    detail="AI response was incomplete. Please try again.",
                )

            raise HTTPException(
                status_code=500, detail=f"Failed to parse AI response as JSON: {str(e)}"
            )

    async def _make_request(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_response: bool = False,
    ) -> Dict:
        """
        Make a chat completion request

        Args:
            messages: List of message dictionaries with 'role' and 'content'
            temperature: Controls randomness (0.0 to 2.0)
            max_tokens: Maximum tokens in response
            json_response: Ask the model for a JSON object

        Returns:
            API response dictionary

        Raises:
            HTTPException: If API request fails
        """
        if not self.is_configured():
            raise HTTPException(
                status_code=500,
                detail="AI service is not configured. Please check API key and model.",
            )

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            params["max_tokens"] = max_tokens
        if json_response:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
            return response.model_dump()

        except Exception as e:
            error_msg = str(e)
            logger.error(f"AI API request error: {error_msg}")

            # Map OpenAI SDK errors to appropriate HTTP exceptions
            if "timeout" in error_msg.lower() or "timed out" in error_msg.lower():
                raise HTTPException(
                    status_code=504, detail="AI service request timed out"
                )
            elif "rate limit" in error_msg.lower():
                raise HTTPException(status_code=429, detail="Rate limit exceeded")
            elif (
                "authentication" in error_msg.lower() or "api key" in error_msg.lower()
            ):
                raise HTTPException(status_code=401, detail="Invalid API key")
            else:
                raise HTTPException(
                    status_code=500,
                    detail=f"Failed to connect to AI service: {error_msg}",
                )

    def _message_content(self, response: Dict) -> str:
        try:
            content = response["choices"][0]["message"]["content"]
            return content.strip() if content else ""
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Failed to parse AI response: {str(e)}")
            raise HTTPException(
                status_code=500,
                detail=f"Failed to parse AI response. Model: {self.model}, Error: {str(e)}",
            )

    async def generate_completion(
        self,
        prompt: str,
        system_message: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_response: bool = False,
    ) -> str:
        """
        Generate a text completion from AI

        Args:
            prompt: The user prompt/question
            system_message: Optional system message to set context
            temperature: Controls randomness (0.0 to 2.0)
            max_tokens: Maximum tokens in response
            json_response: Ask the model for a JSON object

        Returns:
            Generated text response
        """
        messages = []

        if system_message:
            messages.append({"role": "system", "content": system_message})

        messages.append({"role": "user", "content": prompt})

        response = await self._make_request(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_response=json_response,
        )
        return self._message_content(response)
