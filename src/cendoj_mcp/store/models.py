"""Record model for the sentence store."""

from pydantic import BaseModel, ConfigDict


class Sentence(BaseModel):
    """One court ruling as published by CENDOJ."""

    model_config = ConfigDict(frozen=True)

    id: int
    sala: str
    juez: str
    cendoj_id: str
    resolucion: str = ""
