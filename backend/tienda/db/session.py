#backend/tienda/db/session.py
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from tienda.core.config import settings
import logging
import time

logger = logging.getLogger(__name__)

# Inicialización de engine con None
engine = None
SessionLocal = None

# Control de inicialización
_is_initialized = False


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignora ON DELETE CASCADE si no se activan las claves foráneas
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    """Crea el motor de base de datos con las opciones adecuadas para cada backend."""
    url_str = str(url)
    if url_str.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        db_engine = create_engine(url_str, echo=echo, **kwargs)
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
        return db_engine

    return create_engine(
        url_str,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_timeout=60,
        pool_recycle=1800,  # Reciclar conexiones cada 30 minutos
        pool_pre_ping=True,  # Verificar conexiones
        **kwargs,
    )


def init_db_connection(max_retries=5, initial_delay=1):
    """Inicializa la conexión a la base de datos con reintentos."""
    global engine, SessionLocal, _is_initialized

    if _is_initialized:
        return True

    retry_count = 0
    last_exception = None

    while retry_count < max_retries:
        try:
            engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)

            # Probar la conexión
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            logger.info(f"Conexión a la base de datos establecida (intento {retry_count + 1})")

            SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=engine,
            )

            # Crear las tablas en cualquier inicialización, también la perezosa de get_db
            from tienda.db.base import Base
            Base.metadata.create_all(bind=engine)
            logger.info("Tablas de base de datos creadas/verificadas")

            _is_initialized = True
            return True

        except Exception as e:
            retry_count += 1
            last_exception = e
            if engine is not None:
                engine.dispose()
                engine = None

            if retry_count < max_retries:
                wait_time = initial_delay * (2 ** (retry_count - 1))  # Exponential backoff
                logger.warning(f"Intento {retry_count}/{max_retries} fallido para conectar a la base de datos: {e}")
                logger.warning(f"Reintentando en {wait_time} segundos...")
                time.sleep(wait_time)

    logger.error(f"No se pudo conectar a la base de datos después de {max_retries} intentos: {last_exception}")
    return False


def close_db_connection():
    """Libera el pool de conexiones."""
    global engine, SessionLocal, _is_initialized

    if engine is not None:
        engine.dispose()
    engine = None
    SessionLocal = None
    _is_initialized = False
