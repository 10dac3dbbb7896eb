import logging

from lexiquiz_app.db_instance import db

from ..config import resolve_srs_config
from ..models import SrsConfigRecord
from ..schemas import SrsConfig

logger = logging.getLogger(__name__)


class SrsConfigService:
    """Reads and switches the active, versioned SRS parameter set."""

    @staticmethod
    def get_active() -> SrsConfig:
        """Resolve the active config once per request; falls back to defaults."""
        record = SrsConfigRecord.query.filter_by(is_active=True).order_by(SrsConfigRecord.config_id.desc()).first()
        config = resolve_srs_config(record)
        if record is not None and config.version != record.version:
            logger.warning("SRS config %s is invalid, using default %s", record.version, config.version)
        return config

    @staticmethod
    def activate(version: str, ease_min: float, ease_max: float, incorrect_ease_penalty: float) -> SrsConfig:
        """Store (or update) a config version and make it the only active one."""
        record = SrsConfigRecord.query.filter_by(version=version).first()
        if record is None:
            record = SrsConfigRecord(version=version)
            db.session.add(record)
        record.ease_min = ease_min
        record.ease_max = ease_max
        record.incorrect_ease_penalty = incorrect_ease_penalty

        SrsConfigRecord.query.filter(SrsConfigRecord.version != version).update({'is_active': False})
        record.is_active = True
        db.session.commit()
        logger.info("Activated SRS config %s", version)
        return resolve_srs_config(record)
