# ORM records backing the knowledge store
# aceai/models/records.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    BigInteger,
    ForeignKey,
    JSON,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Bump together with a new entry in aceai.utils.db.MIGRATIONS
SCHEMA_VERSION = 2


class SchemaMeta(Base):
    __tablename__ = "schema_meta"
    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False)


class QuestionRecord(Base):
    __tablename__ = "questions"
    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)
    correct_answer = Column(JSON, nullable=True)
    explanation = Column(Text, default="")
    hint = Column(Text, nullable=True)
    code_snippet = Column(Text, nullable=True)
    source = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)

    # Secondary multi-value index: one row per tag
    tags = relationship(
        "QuestionTag",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionTag.position",
        lazy="selectin",
    )


class QuestionTag(Base):
    __tablename__ = "question_tags"
    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    tag = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("QuestionRecord", back_populates="tags")


class SyllabusRecord(Base):
    __tablename__ = "syllabuses"
    id = Column(String, primary_key=True)
    course_name = Column(String, nullable=False)
    description = Column(Text, default="")
    semester = Column(String, nullable=True)
    modules = Column(JSON, nullable=False, default=list)
    added_at = Column(BigInteger, nullable=False)
