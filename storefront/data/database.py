# storefront/data/database.py
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.domain.errors import ConcurrentUpdate, StoreUnavailable
from storefront.utils.settings import DB_LOCK_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# execution option ustawiana przez unit_of_work na polaczeniu transakcji zapisu
WRITE_OPTION = "storefront_write"


class Base(DeclarativeBase):
    pass


class Store:
    """
    Handle na transakcyjny store: jeden engine + sessionmaker.
    Otwierany przy starcie procesu, zamykany przy shutdown (close).
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo, future=True, **self._engine_options(url))
        if self.engine.dialect.name == "sqlite":
            self._serialize_sqlite_writers()
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info(f"Store opened ({self.engine.dialect.name})")

    @staticmethod
    def _engine_options(url: str) -> dict:
        if url.startswith("sqlite"):
            options = {"connect_args": {"check_same_thread": False, "timeout": DB_LOCK_TIMEOUT_SECONDS}}
            if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
                # one shared connection, otherwise every session sees its own empty db
                options["poolclass"] = StaticPool
            return options
        return {
            "pool_pre_ping": True,
            "connect_args": {"options": f"-c lock_timeout={DB_LOCK_TIMEOUT_SECONDS * 1000}"},
        }

    def _serialize_sqlite_writers(self):
        #pysqlite odkłada BEGIN do pierwszego zapisu, dwa czytające writery robia wtedy deadlock
        #zapis (unit_of_work): BEGIN IMMEDIATE bierze write lock od razu, kolejne czekaja na busy timeout
        #odczyt: zwykly BEGIN, nie blokuje writerow

        @event.listens_for(self.engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            dbapi_connection.execute("PRAGMA foreign_keys=ON")

        @event.listens_for(self.engine, "begin")
        def _begin(conn):
            if conn.get_execution_options().get(WRITE_OPTION):
                conn.exec_driver_sql("BEGIN IMMEDIATE")
            else:
                conn.exec_driver_sql("BEGIN")

    def create_schema(self):
        # import modeli zeby zarejestrowac je w Base.metadata
        import storefront.data.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Tables ready: {sorted(Base.metadata.tables.keys())}")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except OperationalError as e:
            logger.error(f"Store ping failed: {e}")
            return False

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def close(self):
        self.engine.dispose()
        logger.info("Store closed")


def _store_error(e: DBAPIError):
    #IntegrityError - ktos nas wyprzedzil, OperationalError / zerwane polaczenie - store niedostepny
    if isinstance(e, IntegrityError):
        return ConcurrentUpdate("Rows were modified by a concurrent operation")
    if isinstance(e, OperationalError):
        return StoreUnavailable(str(e.orig))
    if e.connection_invalidated:
        return StoreUnavailable("Connection to the store was lost")
    return None


def _begin_write(db: Session):
    # otwarty odczyt konczymy, zapis zaczyna wlasna transakcje (na SQLite: BEGIN IMMEDIATE)
    if db.in_transaction() and not (db.new or db.dirty or db.deleted):
        db.rollback()
    if not db.in_transaction():
        db.connection(execution_options={WRITE_OPTION: True})


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Jedyne wyjscie operacji atomowej: commit przy sukcesie, pelny rollback w p.p.
    Bledy drivera zamieniane na StoreUnavailable / ConcurrentUpdate, nic nie jest zacommitowane.
    """
    try:
        _begin_write(db)
        yield db
        db.commit()
    except DBAPIError as e:
        db.rollback()
        error = _store_error(e)
        if error is None:
            raise
        logger.error(f"Store failure, transaction rolled back: {e.orig}")
        raise error from e
    except BaseException:
        db.rollback()
        raise


@contextmanager
def read_scope(db: Session) -> Iterator[Session]:
    """
    Odczyt doradczy: bez write locka, transakcja odczytu konczona zaraz po odczycie.
    Wewnatrz unit_of_work nie rusza transakcji wolajacego.
    """
    owns_transaction = not db.in_transaction() and not (db.new or db.dirty or db.deleted)
    try:
        yield db
    except DBAPIError as e:
        db.rollback()
        error = _store_error(e)
        if error is None:
            raise
        logger.error(f"Store failure during read: {e.orig}")
        raise error from e
    finally:
        if owns_transaction and db.in_transaction():
            db.rollback()


def get_db(request: Request) -> Iterator[Session]:
    with request.app.state.store.session() as db:
        yield db
