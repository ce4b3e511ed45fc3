from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AbstractSQLModel(Base):
    __abstract__ = True
