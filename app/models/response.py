from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import Base

class Response(Base):
    """One respondent's submission. Never updated after creation."""
    __tablename__ = "response"

    id = Column(String, primary_key=True, index=True)
    form_id = Column(String, ForeignKey('form.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    form = relationship("Form", back_populates="responses")
    answers = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
    )

class Answer(Base):
    __tablename__ = "answer"

    id = Column(String, primary_key=True, index=True)
    response_id = Column(String, ForeignKey('response.id', ondelete='CASCADE'), nullable=False, index=True)
    question_id = Column(String, ForeignKey('question.id', ondelete='CASCADE'), nullable=False, index=True)
    value = Column(Text, nullable=False)  # JSON-encoded string or list of strings

    response = relationship("Response", back_populates="answers")
    question = relationship("Question")
