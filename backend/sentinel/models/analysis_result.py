from sqlalchemy import Column, DateTime, ForeignKey, JSON, Integer, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from sentinel.core.database import Base
from sentinel.core.types import GUID, generate_uuid


class AnalysisResult(Base):
    """
    Scored analysis of a project's test suite.

    Rows are append-only; readers take the most recent one.
    """
    __tablename__ = "analysis_results"

    __table_args__ = (
        Index('ix_analysis_results_project_created', 'project_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    coverage_level = Column(Integer, nullable=False, default=0)  # 0-100
    insights = Column(JSON, nullable=False, default=list)  # [{type, message, severity}]
    errors = Column(JSON, nullable=False, default=list)  # [{testId, message, suggestion}]
    recommendations = Column(JSON, nullable=False, default=list)  # [{title, description, priority}]

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="analysis_results")

    def __repr__(self):
        return f"<AnalysisResult {self.project_id} coverage={self.coverage_level}>"
