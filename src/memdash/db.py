from sqlmodel import SQLModel, create_engine, Session
from memdash.config import settings
from memdash.logging import logger

DATA_DIR = settings.DATA_DIR
DB_URL = settings.db_url

# The polling subscription reads from its own thread
engine = create_engine(DB_URL, echo=False, connect_args={"check_same_thread": False})

def init_db():
    if not DATA_DIR.exists():
        DATA_DIR.mkdir(parents=True, exist_ok=True)

    # Import models so SQLModel knows about them before create_all
    from memdash.models import memory  # noqa: F401

    logger.info(f"Initializing database at {DB_URL}")
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
