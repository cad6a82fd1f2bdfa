from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Immutable value object shared by every analysis record."""

    model_config = ConfigDict(frozen=True)
