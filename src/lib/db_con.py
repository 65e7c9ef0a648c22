from sqlmodel import Session, SQLModel, create_engine

from src.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def get_session():
    with Session(engine) as session:
        yield session


def create_db_and_tables():
    # models must be imported so every table is registered on the metadata
    import src.api.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
