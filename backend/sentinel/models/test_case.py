from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, ForeignKey, JSON, Text, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from sentinel.core.database import Base
from sentinel.core.types import GUID, generate_uuid


class TestPriority(str, enum.Enum):
    __test__ = False

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TestStatus(str, enum.Enum):
    __test__ = False

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


class TestCase(Base):
    """A planned test scenario; input and expected output are free-form JSON"""
    __test__ = False
    __tablename__ = "test_cases"

    __table_args__ = (
        Index('ix_test_cases_project_created', 'project_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    input = Column(JSON, nullable=True)
    expected_output = Column(JSON, nullable=True)
    priority = Column(SQLEnum(TestPriority), default=TestPriority.MEDIUM, nullable=False)
    status = Column(SQLEnum(TestStatus), default=TestStatus.PENDING, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("Project", back_populates="test_cases")

    def __repr__(self):
        return f"<TestCase {self.title} [{self.status}]>"
