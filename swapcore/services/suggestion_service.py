"""
Conversation starters from the text-generation service.

Calls Gemini's generateContent REST endpoint and expects a JSON array of
strings back. Any failure (no API key, HTTP error, unparseable reply)
falls back to three fixed sentences naming both skills.
"""

import json
import logging
from typing import List, Optional

import requests
from sqlalchemy.orm import Session

from swapcore.config import settings
from swapcore.crud import user as user_crud

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
You are an expert at fostering connections on a skill-sharing platform.
Two users have just matched.
- User A can teach "{user_skill}".
- User B can teach "{partner_skill}".

Generate three distinct, friendly, and engaging conversation starters for User A to send to User B.
The starters should be encouraging and focus on the mutual benefit of their skill swap.
Frame the response as a JSON array of strings. For example: ["starter 1", "starter 2", "starter 3"]
Do not include any other text or markdown formatting.
"""


def fallback_replies(user_skill: str, partner_skill: str) -> List[str]:
    return [
        f"Hey! I saw we matched. I'd love to learn {partner_skill} from you, "
        f"and happy to teach you {user_skill} in return!",
        f"Hi there! This seems like a perfect skill swap. "
        f"I'm really interested in your knowledge of {partner_skill}.",
        f"This is cool, we both have something the other wants to learn! "
        f"How did you get started with {partner_skill}?",
    ]


class SuggestionClient:
    """
    Thin client for the text-generation API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.SUGGESTION_TIMEOUT_SECONDS

    def generate(self, prompt: str) -> str:
        """
        Return the raw text of the first candidate.

        Raises:
            RuntimeError: If no API key is configured
            requests.RequestException: On transport or HTTP errors
        """
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")

        response = requests.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseMimeType": "application/json"},
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        return payload["candidates"][0]["content"]["parts"][0]["text"]


def suggest_replies(
    user_skill: str,
    partner_skill: str,
    client: Optional[SuggestionClient] = None,
) -> List[str]:
    client = client or SuggestionClient()
    prompt = PROMPT_TEMPLATE.format(user_skill=user_skill, partner_skill=partner_skill)
    try:
        suggestions = json.loads(client.generate(prompt).strip())
    except Exception as exc:
        logger.warning("Conversation starters unavailable, using fallback: %s", exc)
        return fallback_replies(user_skill, partner_skill)

    if (
        isinstance(suggestions, list)
        and suggestions
        and all(isinstance(s, str) for s in suggestions)
    ):
        return suggestions

    logger.warning("Conversation starters had an unexpected shape, using fallback")
    return fallback_replies(user_skill, partner_skill)


def _swap_skill_names(user, partner):
    """(skill user can teach partner, skill partner can teach user)."""
    partner_wants = {us.skill_id for us in partner.skills_to_learn}
    user_wants = {us.skill_id for us in user.skills_to_learn}

    user_skill = next(
        (us.name for us in user.skills_to_teach if us.skill_id in partner_wants),
        user.skills_to_teach[0].name if user.skills_to_teach else "a skill",
    )
    partner_skill = next(
        (us.name for us in partner.skills_to_teach if us.skill_id in user_wants),
        partner.skills_to_teach[0].name if partner.skills_to_teach else "a skill",
    )
    return user_skill, partner_skill


def starters_for(db: Session, user_id: int, partner_id: int) -> List[str]:
    user = user_crud.require_user(db, user_id)
    partner = user_crud.require_user(db, partner_id)
    user_skill, partner_skill = _swap_skill_names(user, partner)
    return suggest_replies(user_skill, partner_skill)
