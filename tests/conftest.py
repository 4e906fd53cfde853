"""
conftest.py
-----------
Shared pytest fixtures for Somewhere tests.

Provides fixtures for:
- Temporary home directories
- Database setup and teardown
- Store managers bound to one session
- A Commands facade on an initialized home
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from somewhere.commands import Commands
from somewhere.database.manager import SomewhereDB
from somewhere.database.managers import (
    ConfigManager,
    ItemManager,
    RelationManager,
    TagManager,
)


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def home_dir(tmp_dir):
    """Empty directory used as a Somewhere home."""
    home = tmp_dir / "home"
    home.mkdir()
    return home


@pytest.fixture
def outside_dir(tmp_dir):
    """Directory next to the home, for files that are not managed."""
    outside = tmp_dir / "outside"
    outside.mkdir()
    return outside


# ----- Database Fixtures -----

@pytest.fixture
def test_db(home_dir):
    """
    Create a test database.

    Returns a SomewhereDB instance with an initialized schema.
    """
    db = SomewhereDB(home_dir)
    db.initialize_schema()
    yield db
    db.dispose()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance."""
    return TagManager(db_session)


@pytest.fixture
def item_manager(db_session):
    """Create ItemManager instance."""
    return ItemManager(db_session)


@pytest.fixture
def relation_manager(db_session, tag_manager):
    """Create RelationManager sharing the TagManager."""
    return RelationManager(db_session, tags=tag_manager)


@pytest.fixture
def config_manager(db_session):
    """Create ConfigManager instance."""
    return ConfigManager(db_session)


# ----- Command Fixtures -----

@pytest.fixture
def commands(home_dir):
    """Commands facade on a freshly created home."""
    facade = Commands(home_dir)
    facade.new()
    yield facade
    facade.close()


@pytest.fixture
def write_file():
    """Factory writing a text file and returning its path."""

    def _write(path: Path, text: str = "content\n") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
