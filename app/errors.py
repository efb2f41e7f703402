"""Domain errors raised by the apportionment and forecasting engines."""


class ElectoralError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "Electoral computation failed"):
        self.message = message
        super().__init__(self.message)


class InputValidationError(ElectoralError):
    """Request rejected before any computation."""


class InvalidScenarioError(InputValidationError):
    """Seats or vote totals make the scenario impossible to apportion."""


class DegenerateQuotientError(InputValidationError):
    """Electoral quotient evaluated to zero or less."""


class InsufficientDataError(ElectoralError):
    """Not enough input data to compute a result."""


class InsufficientHistoricalDataError(InsufficientDataError):
    """No historical records match the requested filters."""

    def __init__(self, message: str = "Insufficient historical data for forecast"):
        super().__init__(message)


class ForecastCancelledError(ElectoralError):
    """Forecast run was cancelled between party simulations."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        super().__init__(f"Forecast run {run_id} cancelled")
