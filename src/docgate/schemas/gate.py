"""Point-in-time view of a rate gate's permit accounting."""

from pydantic import BaseModel, ConfigDict, Field


class GateSnapshot(BaseModel):
    """Consistent snapshot of a RateGate, captured under the gate lock.

    Attributes:
        limit: Maximum tasks admitted per window.
        window: Refresh period in seconds.
        available_permits: Permits that can be taken without waiting.
        debt: Running tasks whose permits were already handed out again.
        in_flight: Tasks currently running under a permit.
        waiting: Callers currently parked on the permit queue.
        hot: Whether the refresh timer is running.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: int = Field(..., ge=1, description="Maximum tasks admitted per window")
    window: float = Field(..., gt=0, description="Refresh period in seconds")
    available_permits: int = Field(..., ge=0, description="Permits free right now")
    debt: int = Field(..., ge=0, description="Outstanding permit debt")
    in_flight: int = Field(default=0, ge=0, description="Tasks currently running")
    waiting: int = Field(default=0, ge=0, description="Callers queued for a permit")
    hot: bool = Field(..., description="Whether the refresh timer is running")

    @property
    def spent(self) -> int:
        """Permits currently out of the pool, as counted by the next tick."""
        return self.limit - self.available_permits

    @property
    def at_rest(self) -> bool:
        """Whether every permit is home and no debt is outstanding."""
        return self.available_permits == self.limit and self.debt == 0
