from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User, UserRole  # noqa: F401
from backend.app.models.module import Module  # noqa: F401
from backend.app.models.student import Student  # noqa: F401
from backend.app.models.parent_link import ParentStudentLink  # noqa: F401
from backend.app.models.academic_data import AcademicData  # noqa: F401
from backend.app.models.report import Report  # noqa: F401
