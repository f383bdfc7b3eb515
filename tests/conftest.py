"""
Configuración de pytest para tests
"""
import os
from uuid import uuid4

# antes de importar la app: get_settings() lee el entorno al importarse
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_SERVICE_KEY", "test-service-key")

import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from petmatch.db import Datastore, get_db
from petmatch.main import app


@pytest.fixture
def datastore():
    """Datastore sobre una base en memoria, nueva en cada test"""
    client = AsyncMongoMockClient()
    return Datastore(client[f"petmatch_test_{uuid4().hex}"])


@pytest.fixture
async def client(datastore):
    """Cliente HTTP contra la app con el datastore en memoria inyectado"""
    app.dependency_overrides[get_db] = lambda: datastore
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def pet_data():
    return {"name": "Rex", "size": "medium", "energy": "high", "age": 2, "species": "dog"}


@pytest.fixture
async def pet(client, pet_data):
    r = await client.post("/pets", json=pet_data)
    assert r.status_code == 201
    return r.json()
