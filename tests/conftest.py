import os

# Keep the application engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import itertools
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from petbook.core.actor import PetActor, ProfessionalActor
from petbook.database import Base, build_engine, get_db
from petbook.models.pet import Pet
from petbook.models.user import User
from petbook.utils.time import utcnow

_ids = itertools.count(1)


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


# =============================================================================
# FACTORIES
# =============================================================================

@pytest.fixture
def make_user(db):
    def _make(account_type="user", full_name=None):
        n = next(_ids)
        user = User(
            id=f"user-{n}",
            email=f"user{n}@example.com",
            account_type=account_type,
            full_name=full_name or f"Person {n}",
            created_at=utcnow(),
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_pet(db):
    # Creation times are spaced so "first pet" is well defined
    clock = {"t": utcnow() - timedelta(days=1)}

    def _make(owner, name=None, species="dog"):
        n = next(_ids)
        clock["t"] += timedelta(seconds=1)
        pet = Pet(
            id=f"pet-{n}",
            user_id=owner.id,
            name=name or f"Pet {n}",
            species=species,
            created_at=clock["t"],
        )
        db.add(pet)
        db.commit()
        return pet

    return _make


@pytest.fixture
def guardian(make_user):
    return make_user(full_name="Ana Guardian")


@pytest.fixture
def other_guardian(make_user):
    return make_user(full_name="Bruno Guardian")


@pytest.fixture
def professional(make_user):
    return make_user(account_type="professional", full_name="Dr. Vet")


@pytest.fixture
def p1(make_pet, guardian):
    return make_pet(guardian, name="Rex")


@pytest.fixture
def p2(make_pet, other_guardian):
    return make_pet(other_guardian, name="Luna", species="cat")


@pytest.fixture
def actor1(p1):
    return PetActor(p1.id)


@pytest.fixture
def actor2(p2):
    return PetActor(p2.id)


@pytest.fixture
def pro_actor(professional):
    return ProfessionalActor(professional.id)


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def client(db):
    from petbook.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
