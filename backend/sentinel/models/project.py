from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from sentinel.core.database import Base
from sentinel.core.types import GUID, generate_uuid


class TestKind(str, enum.Enum):
    """Kind of test suite a project generates"""
    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"
    PERFORMANCE = "performance"


class WizardPhase(int, enum.Enum):
    """Wizard phases; the stored value only moves forward"""
    CONFIGURATION = 1
    GENERATION = 2
    ANALYSIS = 3


class Project(Base):
    """Test-planning project owned by a user"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_user_created', 'user_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    module_name = Column(String(255), nullable=False)
    test_kind = Column(SQLEnum(TestKind), default=TestKind.UNIT, nullable=False)

    # {expectedInputs, expectedOutputs, additionalParams}
    parameters = Column(JSON, nullable=True)

    current_phase = Column(Integer, default=WizardPhase.CONFIGURATION.value, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="projects")
    test_cases = relationship("TestCase", back_populates="project", cascade="all, delete-orphan")
    analysis_results = relationship("AnalysisResult", back_populates="project", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Project {self.name} phase={self.current_phase}>"
