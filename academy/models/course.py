"""
Course content models - courses, modules, lessons and quizzes
"""
from sqlalchemy import Column, String, Integer, Text, TIMESTAMP, ForeignKey, JSON, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from academy.database import Base
import uuid

LESSON_TYPES = ("video", "document", "quiz", "roleplay", "walkthrough")


class Course(Base):
    """
    Courses table - ordered by order_index
    """
    __tablename__ = "courses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    thumbnail_emoji = Column(String(16), default="📚")
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    modules = relationship(
        "Module",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Module.order_index",
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title={self.title})>"


class Module(Base):
    """
    Modules table - order_index is scoped to the course
    """
    __tablename__ = "modules"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)

    course = relationship("Course", back_populates="modules")
    lessons = relationship(
        "Lesson",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="Lesson.order_index",
    )

    def __repr__(self):
        return f"<Module(id={self.id}, title={self.title})>"


class Lesson(Base):
    """
    Lessons table - order_index is unique within the module
    """
    __tablename__ = "lessons"
    __table_args__ = (UniqueConstraint("module_id", "order_index", name="uq_lesson_order"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    module_id = Column(Uuid(as_uuid=True), ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # video | document | quiz | roleplay | walkthrough
    content_url = Column(Text)
    content_body = Column(Text)
    xp_value = Column(Integer, nullable=False, default=100)
    order_index = Column(Integer, nullable=False, default=0)

    module = relationship("Module", back_populates="lessons")
    quiz = relationship("Quiz", back_populates="lesson", uselist=False, cascade="all, delete-orphan")
    progress = relationship("LessonProgress", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Lesson(id={self.id}, type={self.type}, title={self.title})>"


class Quiz(Base):
    """
    Quizzes table - 1:1 with a quiz-type lesson.
    questions: [{"question": str, "options": [4 x str], "correct_index": int}]
    """
    __tablename__ = "quizzes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lesson_id = Column(Uuid(as_uuid=True), ForeignKey("lessons.id", ondelete="CASCADE"), unique=True, nullable=False)
    questions = Column(JSON, nullable=False)
    passing_score = Column(Integer, nullable=False, default=80)

    lesson = relationship("Lesson", back_populates="quiz")

    def __repr__(self):
        return f"<Quiz(id={self.id}, lesson_id={self.lesson_id}, passing_score={self.passing_score})>"
