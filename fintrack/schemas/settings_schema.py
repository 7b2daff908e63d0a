from typing import Literal, Optional

from pydantic import BaseModel

Theme = Literal["light", "dark", "system"]


class UserSettingsUpdate(BaseModel, str_strip_whitespace=True):
    currency: Optional[str] = None
    theme: Optional[Theme] = None


class UserSettings(BaseModel):
    currency: str
    currency_symbol: str
    theme: Theme
