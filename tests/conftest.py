from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from database import create_db_and_tables, get_session
from models.category import Category
from models.review import Review
from services.backup_codec import category_to_backup, review_to_backup
from services.backup_service import BackupService, ProgressState
from services.category_store import CategoryStore
from services.file_service import AttachmentStore, get_attachment_store
from services.review_store import ReviewStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def category_store(session):
    return CategoryStore(session)


@pytest.fixture
def review_store(session):
    return ReviewStore(session)


@pytest.fixture
def attachments(tmp_path):
    return AttachmentStore(str(tmp_path / "attachments"))


@pytest.fixture
def backup_service(category_store, review_store, attachments):
    return BackupService(
        category_store,
        review_store,
        attachments,
        backup_state=ProgressState("backup"),
        restore_state=ProgressState("restore"),
    )


@pytest.fixture
def movies(category_store):
    return category_store.insert(Category(
        name="Movies",
        icon="movie",
        item1="Story",
        item2="Acting",
        created_date=datetime(2024, 5, 1, 10, 0, 0),
    ))


@pytest.fixture
def dune(review_store, movies):
    return review_store.insert(Review(
        name="Dune",
        favorite=True,
        category_id=movies.id,
        genre="SF",
        review="Sand everywhere.",
        item_score1=4.5,
        item_score2=5.0,
        created_date=datetime(2024, 5, 2, 12, 30, 0),
    ))


@pytest.fixture
def snapshot(category_store, review_store):
    """Current store contents as comparable backup records (photos not inlined)."""
    no_files = AttachmentStore("/nonexistent")

    def take():
        categories = [category_to_backup(category) for category in category_store.list_all()]
        reviews = [review_to_backup(review, no_files) for review in review_store.list_all()]
        for record in reviews:
            record.image_base64 = None
        return categories, reviews
    return take


@pytest.fixture
def client(session, attachments):
    from main import app

    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_attachment_store] = lambda: attachments
    yield TestClient(app)
    app.dependency_overrides.clear()
