# File: lexiquiz_app/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# Thư mục gốc của dự án: lexiquiz_app/ nằm ngay dưới gốc repo
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "lexiquiz.db")


def _env_float(name, default):
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return float(value)


class Config:
    """Cấu hình ứng dụng LexiQuiz."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = os.environ.get('LOG_JSON', '0') == '1'

    # Quiz generation
    QUIZ_DEFAULT_COUNT = 10
    QUIZ_MAX_COUNT = 50
    QUIZ_DISTRACTOR_COUNT = 3
    QUIZ_DISTRACTOR_POOL_LIMIT = 500
    QUIZ_RECENT_ACCURACY_WINDOW = 20

    # Daily-review mix; lower accuracy never raises the new-item share
    SESSION_REVIEW_SHARE = 0.3
    SESSION_NEW_SHARE = 0.5
    SESSION_THROTTLE_THRESHOLD = _env_float('SESSION_THROTTLE_THRESHOLD', 0.6)
    SESSION_THROTTLED_NEW_SHARE = _env_float('SESSION_THROTTLED_NEW_SHARE', 0.2)
    SESSION_THROTTLED_REVIEW_SHARE = _env_float('SESSION_THROTTLED_REVIEW_SHARE', 0.4)
    SESSION_BOOST_THRESHOLD = _env_float('SESSION_BOOST_THRESHOLD', None)
    SESSION_BOOSTED_NEW_SHARE = _env_float('SESSION_BOOSTED_NEW_SHARE', 0.6)
    SESSION_BOOSTED_REVIEW_SHARE = _env_float('SESSION_BOOSTED_REVIEW_SHARE', 0.25)

    # Concurrent answer submissions for the same (user, item)
    SRS_WRITE_RETRIES = 3

    @classmethod
    def init_app(cls, app):
        """Khởi tạo các thư mục cần thiết."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
