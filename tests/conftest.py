import mongomock
import pytest

from wordladder import create_app
from wordladder.config import TestingConfig
from wordladder.services.dictionary import WordDictionary
from wordladder.services.repository import PuzzleRepository

LADDER_WORDS = ["cat", "cot", "dot", "dog"]

SMALL_WORDS = {
    "3": ["cat", "cot", "cog", "dot", "dog", "hat", "hot", "hog", "bat", "bag"],
    "4": ["cold", "cord", "card", "ward", "warm", "word", "worm", "wore", "core", "care"],
    "5": ["stone", "store", "shore", "score", "scare", "stare", "spare", "share"],
    "6": ["better", "batter", "butter", "bitter", "setter", "letter", "latter", "fetter"],
    "7": ["sharper", "sharpen", "sharers", "shapers", "shaders", "shakers", "sharked"],
    "8": ["painting", "fainting", "tainting", "printing", "pointing", "painters", "sainting"],
}


@pytest.fixture
def ladder_dictionary():
    return WordDictionary(LADDER_WORDS)


@pytest.fixture
def dictionary():
    return WordDictionary(SMALL_WORDS)


@pytest.fixture
def repository():
    return PuzzleRepository(mongomock.MongoClient().db)


@pytest.fixture
def app(dictionary, repository):
    app = create_app(TestingConfig, dictionary=dictionary, repository=repository)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['word_ladder']
