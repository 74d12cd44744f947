from typing import Optional

from schemas.general import CamelModel


class SettingsOut(CamelModel):
    aum: float


class SettingsUpdate(CamelModel):
    # non-positive values are ignored, not rejected
    aum: Optional[float] = None
