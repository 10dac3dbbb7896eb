import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from lexiquiz_app import create_app, db
from lexiquiz_app.config import Config
from lexiquiz_app.models import Cluster, VocabularyItem


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    LOG_DIR = None
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded_items(app):
    """Six items in two clusters; odd ids (plus 3) carry audio."""
    animals = Cluster(cluster_id=1, name='animals')
    food = Cluster(cluster_id=2, name='food')
    rows = [
        VocabularyItem(item_id=1, source_text='犬', target_text='dog', transliteration='inu',
                       difficulty=1, part_of_speech='noun', audio_url='/audio/1.mp3', clusters=[animals]),
        VocabularyItem(item_id=2, source_text='猫', target_text='cat', transliteration='neko',
                       difficulty=1, part_of_speech='noun', clusters=[animals]),
        VocabularyItem(item_id=3, source_text='鳥', target_text='bird', transliteration='tori',
                       difficulty=2, part_of_speech='noun', audio_url='/audio/3.mp3', clusters=[animals]),
        VocabularyItem(item_id=4, source_text='食べる', target_text='eat', transliteration='taberu',
                       difficulty=2, part_of_speech='verb', clusters=[food]),
        VocabularyItem(item_id=5, source_text='飲む', target_text='drink', transliteration='nomu',
                       difficulty=3, part_of_speech='verb', audio_url='/audio/5.mp3', clusters=[food]),
        VocabularyItem(item_id=6, source_text='水', target_text='water', transliteration='mizu',
                       difficulty=1, part_of_speech='noun', clusters=[food]),
    ]
    db.session.add_all([animals, food, *rows])
    db.session.commit()
    return {row.item_id: row.target_text for row in rows}
