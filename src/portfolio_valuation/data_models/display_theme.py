from __future__ import annotations

from typing import Literal
from pydantic import BaseModel

StatusColor = Literal["success", "error", "warning", "info"]


class PnLTheme(BaseModel):
    """Colour tokens used to render profit and loss figures.

    Values are opaque to this package; the defaults are the palette token
    names of the web front end.
    """

    positive: str = "success.main"
    negative: str = "error.main"
    neutral: str = "text.secondary"
