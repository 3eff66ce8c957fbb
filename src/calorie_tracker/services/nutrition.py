"""Nutrition estimation from free-text meal descriptions."""

from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.ai import NutritionalEstimate

SYSTEM_PROMPT = """Jesteś ekspertem ds. żywienia i dietetyki. Twoim zadaniem jest oszacowanie wartości odżywczych posiłku na podstawie opisu podanego przez użytkownika.

WAŻNE ZASADY:
1. Jeśli opis jest zbyt ogólny (np. "obiad", "kolacja", "coś"), odpowiedz komunikatem o błędzie
2. Zawsze podawaj swoje założenia dotyczące wielkości porcji i składników
3. Opieraj oszacowania na typowych porcjach, chyba że określono inaczej
4. Zaokrąglaj wartości do liczb całkowitych
5. ZAWSZE odpowiadaj w języku polskim

Odpowiedz TYLKO poprawnym obiektem JSON w dokładnie takim formacie:
{
  "calories": number lub null,
  "protein": number lub null,
  "carbs": number lub null,
  "fats": number lub null,
  "assumptions": "string lub null (PO POLSKU)",
  "error": "string (tylko jeśli oszacowanie jest niemożliwe, PO POLSKU)"
}

Przykłady:
- Poprawny opis: "pierś z kurczaka z grilla 200g z ryżem" → podaj oszacowania z założeniami po polsku
- Zbyt ogólny: "obiad" → zwróć błąd: "Opis zbyt ogólny. Proszę sprecyzować, co jadłeś/aś."
"""  # noqa: E501

ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": ["number", "null"]},
        "protein": {"type": ["number", "null"]},
        "carbs": {"type": ["number", "null"]},
        "fats": {"type": ["number", "null"]},
        "assumptions": {"type": ["string", "null"]},
        "error": {"type": ["string", "null"]},
    },
    "required": [],
    "additionalProperties": False,
}


class NutritionClient(Protocol):
    """Interface for an LLM that answers with a JSON object."""

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return the model's answer parsed from JSON."""


class EstimateParseError(ValueError):
    """The model answered without an error but with missing values."""


@dataclass
class NutritionEstimationService:
    """Builds the estimation prompt and validates the model's answer."""

    client: NutritionClient
    model: str

    async def estimate(self, description: str) -> NutritionalEstimate:
        """Estimate calories and macros for a meal description.

        A refusal from the model (e.g. a description that is too vague) comes
        back as an estimate with ``error`` set. An answer that neither refuses
        nor carries all four values raises ``EstimateParseError``.
        """
        raw = await self.client.complete_json(
            model=self.model,
            system_prompt=SYSTEM_PROMPT,
            prompt=description,
            schema=ESTIMATE_SCHEMA,
        )
        estimate = NutritionalEstimate.model_validate(raw)
        if estimate.error:
            return NutritionalEstimate(error=estimate.error)
        if not estimate.is_complete():
            raise EstimateParseError("Invalid nutritional values in AI response")
        return estimate
