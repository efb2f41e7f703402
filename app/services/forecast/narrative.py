"""Narrative port - optional text summary of a finished forecast run."""

from typing import Protocol

import httpx
from loguru import logger
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from app.models.forecast import ForecastRun
from settings import NARRATIVE_API_KEY, NARRATIVE_API_URL, NARRATIVE_MODEL, NARRATIVE_TIMEOUT

SYSTEM_PROMPT = (
    "You are a political analyst specialised in proportional-representation elections. "
    "Give a concise, objective reading of the forecast, highlighting trends, risks and opportunities."
)


class NarrativePort(Protocol):
    def summarize(self, run: ForecastRun) -> str: ...


def fallback_summary(run: ForecastRun) -> str:
    """Plain summary used when the narrative collaborator fails."""
    top = ", ".join(f"{r.entity_name} ({r.predicted_vote_share:.1f}%)" for r in run.party_results[:3])
    label = f' for scenario "{run.scenario_name}"' if run.scenario_name else ""
    return f"Forecast for {run.target_year}{label}. Top parties: {top or 'none'}."


def build_prompt(run: ForecastRun) -> str:
    lines = [
        f"Electoral forecast for {run.target_year}",
        f"Position: {run.position or 'all'}",
        f"Region: {run.state or 'national'}",
    ]
    if run.scenario_name:
        lines.append(f"Scenario: {run.scenario_name}")

    lines += ["", "Leading parties:"]
    for i, r in enumerate(run.party_results[:5], 1):
        lines.append(
            f"{i}. {r.entity_name}: {r.predicted_vote_share:.1f}% "
            f"(CI {r.vote_share_lower:.1f}%-{r.vote_share_upper:.1f}%), trend {r.trend_direction.value}"
        )

    if run.swing_regions:
        lines += ["", "Swing regions:"]
        for s in run.swing_regions[:3]:
            lines.append(
                f"- {s.region_name}: margin {s.margin_percent:.2f}% between {s.leading_entity} "
                f"and {s.challenging_entity}, volatility {s.volatility_score:.2f}"
            )

    lines += ["", "Write 2-3 paragraphs on the competitive picture, main risks and decisive regions."]
    return "\n".join(lines)


def _is_retryable_error(exc: BaseException) -> bool:
    """Network errors and 5xx responses."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class HttpNarrativeClient:
    """OpenAI-compatible chat completions client implementing NarrativePort."""

    def __init__(
        self,
        api_key: str | None = NARRATIVE_API_KEY,
        base_url: str = NARRATIVE_API_URL,
        model: str = NARRATIVE_MODEL,
        timeout: int = NARRATIVE_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self._model = model
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"} if api_key else {},
        )
        logger.debug("{}: model={}", self.__class__.__name__, model)

    def close(self) -> None:
        self._client.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    def _post(self, payload: dict) -> dict:
        resp = self._client.post("/chat/completions", json=payload)
        resp.raise_for_status()
        return resp.json()

    def summarize(self, run: ForecastRun) -> str:
        data = self._post(
            {
                "model": self._model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(run)},
                ],
                "max_tokens": 500,
            }
        )
        choices = data.get("choices") or []
        return (choices[0].get("message", {}).get("content") or "") if choices else ""
