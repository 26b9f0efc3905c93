# marketplace/pricing.py
"""
AI listing price suggestion.

One call to the Gemini generateContent endpoint; the model answers with JSON
{"suggestedPrice": number, "reasoning": string}. Any failure becomes an
UpstreamError whose message the caller shows as-is. No retries.
"""
import json
import logging

import requests
from django.conf import settings

from .exceptions import UpstreamError

logger = logging.getLogger(__name__)

PROMPT = """You are an expert in motorcycle valuation. Based on the
make, model, year, condition, and mileage of the motorcycle, suggest a
fair listing price. Also, provide a brief explanation of your reasoning.

Make: {make}
Model: {model}
Year: {year}
Condition: {condition}
Mileage: {km_driven} km

Answer with JSON only: {{"suggestedPrice": <number>, "reasoning": "<text>"}}"""


def _endpoint() -> str:
    base = getattr(settings, "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    return f"{base.rstrip('/')}/models/{settings.PRICE_SUGGESTION_MODEL}:generateContent"


def _parse(body: dict) -> dict:
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise UpstreamError("The AI returned an empty answer.")
    text = text.strip()
    if text.startswith("```"):
        # fenced block: drop the ``` / ```json lines
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        data = json.loads(text)
        price = float(data["suggestedPrice"])
        reasoning = str(data.get("reasoning") or "").strip()
    except (ValueError, KeyError, TypeError):
        raise UpstreamError("The AI answer could not be understood.")
    if price <= 0:
        raise UpstreamError("The AI did not suggest a usable price.")
    return {"suggested_price": int(round(price)), "reasoning": reasoning}


def suggest_price(*, make: str, model: str, year: int, condition: str, km_driven: int) -> dict:
    api_key = getattr(settings, "GEMINI_API_KEY", "")
    if not api_key:
        raise UpstreamError("Price suggestions are not configured.")

    prompt = PROMPT.format(make=make, model=model, year=year, condition=condition, km_driven=km_driven)
    payload = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"responseMimeType": "application/json"},
    }
    try:
        r = requests.post(
            _endpoint(),
            params={"key": api_key},
            json=payload,
            timeout=getattr(settings, "PRICE_SUGGESTION_TIMEOUT", 30),
        )
        r.raise_for_status()
        body = r.json()
    except requests.RequestException as exc:
        logger.error("Price suggestion request failed: %s", exc)
        raise UpstreamError("An unexpected error occurred while contacting the AI.") from exc
    except ValueError as exc:
        raise UpstreamError("The AI returned an invalid response.") from exc

    result = _parse(body)
    logger.info("Suggested %s for %s %s %s", result["suggested_price"], year, make, model)
    return result
