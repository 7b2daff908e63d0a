from datetime import datetime

from sqlalchemy.orm import Session

from fintrack.models.model import UserSettings
from fintrack.repositories.settings import settings
from fintrack.schemas.settings_schema import UserSettingsUpdate

DEFAULT_THEME = "system"


def get_user_settings(db: Session, user_id: int):
    return db.query(UserSettings).filter(UserSettings.user_id == user_id).first()


def get_currency_code(db: Session, user_id: int) -> str:
    user_settings = get_user_settings(db=db, user_id=user_id)
    return user_settings.currency if user_settings else settings.DEFAULT_CURRENCY


def upsert_user_settings(db: Session, user_id: int, settings_update: UserSettingsUpdate):
    db_settings = get_user_settings(db=db, user_id=user_id)

    if db_settings is None:
        db_settings = UserSettings(
            user_id=user_id,
            currency=(settings_update.currency or settings.DEFAULT_CURRENCY).upper(),
            theme=settings_update.theme or DEFAULT_THEME,
        )
        db.add(db_settings)
    else:
        if settings_update.currency is not None:
            db_settings.currency = settings_update.currency.upper()
        if settings_update.theme is not None:
            db_settings.theme = settings_update.theme
        db_settings.updated_at = datetime.now()

    db.commit()
    db.refresh(db_settings)
    return db_settings
