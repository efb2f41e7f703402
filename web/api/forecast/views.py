"""Forecast API views - thin layer over services."""

from app.container import container
from app.errors import InsufficientHistoricalDataError
from app.models.forecast import (
    ExternalFactor,
    FactorImpact,
    ForecastRun,
    ModelParameters,
    PartyAdjustment,
    PollingPoint,
    ScenarioAdjustment,
)
from app.services.forecast import ForecastService
from web.api.errors import NotFoundError, ValidationError, validate_target_year

from .schemas import (
    CancelResponse,
    ForecastItem,
    ForecastRequest,
    ForecastRunResponse,
    SwingRegionItem,
)


def _scenario(request: ForecastRequest) -> ScenarioAdjustment:
    return ScenarioAdjustment(
        polling_data=[PollingPoint(**p.model_dump()) for p in request.polling_data],
        polling_weight=request.polling_weight,
        party_adjustments={k: PartyAdjustment(**v.model_dump()) for k, v in request.party_adjustments.items()},
        external_factors=[
            ExternalFactor(factor=f.factor, impact=FactorImpact(f.impact), magnitude=f.magnitude)
            for f in request.external_factors
        ],
    )


def _new_run(request: ForecastRequest) -> ForecastRun:
    validate_target_year(request.target_year)
    return ForecastService.create_run(
        name=request.name,
        target_year=request.target_year,
        state=request.state,
        position=request.position,
        parameters=ModelParameters(**request.parameters.model_dump()),
        scenario_name=request.scenario_name,
    )


def to_response(run: ForecastRun) -> ForecastRunResponse:
    return ForecastRunResponse(
        id=run.id,
        name=run.name,
        target_year=run.target_year,
        status=run.status.value,
        state=run.state,
        position=run.position,
        historical_years=run.historical_years,
        party_results=[ForecastItem(**r.to_dict()) for r in run.party_results],
        swing_regions=[SwingRegionItem(**s.to_dict()) for s in run.swing_regions],
        narrative=run.narrative,
        summary=run.summary,
        error=run.error,
    )


def start_forecast(request: ForecastRequest) -> ForecastRunResponse:
    """Queue a forecast on the background worker."""
    run = _new_run(request)
    container.worker.submit(run, request.historical_years, _scenario(request), request.base_year)
    return to_response(run)


def run_forecast(request: ForecastRequest) -> ForecastRunResponse:
    """Run a forecast synchronously."""
    run = _new_run(request)
    try:
        container.forecast.run(run, request.historical_years, _scenario(request), request.base_year)
    except InsufficientHistoricalDataError as e:
        raise ValidationError(e.message) from e
    return to_response(run)


def get_forecast(run_id: str) -> ForecastRunResponse:
    """Queued or running forecast from the worker, else the stored run."""
    run = container.worker.get(run_id)
    if run is not None:
        return to_response(run)
    data = container.results.get_run(run_id)
    if data is None:
        raise NotFoundError(f"Forecast run {run_id} not found")
    return ForecastRunResponse.model_validate(data)


def cancel_forecast(run_id: str) -> CancelResponse:
    if container.worker.get(run_id) is None:
        if container.results.get_run(run_id) is None:
            raise NotFoundError(f"Forecast run {run_id} not found")
        return CancelResponse(id=run_id, cancelled=False)
    return CancelResponse(id=run_id, cancelled=container.worker.cancel(run_id))
