from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fintrack.database.connection import get_db
from fintrack.repositories import user_settings_crud
from fintrack.repositories.settings import settings
from fintrack.schemas import settings_schema, user_schema
from fintrack.security.user_security import get_current_user
from fintrack.utils.formatting import get_currency_info

settings_Router = APIRouter(prefix="/settings")


def _to_response(currency: str, theme: str):
    return {
        "currency": currency,
        "currency_symbol": get_currency_info(currency).symbol,
        "theme": theme,
    }


@settings_Router.get(
    "", response_model=settings_schema.UserSettings, tags=["settings"]
)
def get_user_settings(
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_settings = user_settings_crud.get_user_settings(db=db, user_id=user.user_id)
    if user_settings is None:
        return _to_response(settings.DEFAULT_CURRENCY, user_settings_crud.DEFAULT_THEME)
    return _to_response(user_settings.currency, user_settings.theme)


@settings_Router.put(
    "", response_model=settings_schema.UserSettings, tags=["settings"]
)
def update_user_settings(
    settings_update: settings_schema.UserSettingsUpdate,
    user: user_schema.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_settings = user_settings_crud.upsert_user_settings(
        db=db, user_id=user.user_id, settings_update=settings_update
    )
    return _to_response(user_settings.currency, user_settings.theme)
