from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    """Wire record of the bidirectional protocol: ``{"type": ..., "params": ...}``.

    Only the outer shape is checked here; ``params`` is validated afterwards
    against the receiver's schema entry for ``type``.
    """

    type: str = Field(..., description="Message type name")
    params: Any = None
