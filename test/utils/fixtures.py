import os

import pytest
from chalice.test import Client

from app import app
from chalicelib.store import InMemoryCollectionStore, seed_demo_data, set_store
from chalicelib.utils.logger import log_message

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def store():
    store_ = InMemoryCollectionStore()
    seed_demo_data(store_)
    set_store(store_)
    yield store_
    set_store(None)


@pytest.fixture
def chalice_client(store):
    log_message(f'chalice_client stage = {os.environ.get("stage", "test")}')
    with Client(app, stage_name=os.environ.get('stage', 'test'), project_dir=PROJECT_DIR) as client:
        yield client
