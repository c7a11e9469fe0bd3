"""Database configuration and initialization."""
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base

# Create SQLAlchemy base
Base = declarative_base()

# Global engine, session factory and request-scoped session
engine = None
SessionLocal = None
db_session = None


def init_db(app):
    """Initialize database connection."""
    global engine, SessionLocal, db_session

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine_options = {
        'echo': app.config.get('SQLALCHEMY_ECHO', False),
        'pool_pre_ping': True,  # Enable connection health checks
    }
    if database_uri.startswith('sqlite'):
        # Checkout runs on its own connection, possibly from another thread
        engine_options['connect_args'] = {'check_same_thread': False}
    else:
        engine_options['pool_size'] = 10
        engine_options['max_overflow'] = 20

    engine = create_engine(database_uri, **engine_options)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db_session = scoped_session(SessionLocal)

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_tables():
    """Create every table known to the models."""
    from bellavibe import models  # noqa: F401 - registers mappers
    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drop every table known to the models."""
    from bellavibe import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def get_session():
    """Get request-scoped database session."""
    return db_session


def get_session_factory():
    """Get the factory used for standalone transactional sessions."""
    return SessionLocal
