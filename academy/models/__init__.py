"""
Database models package
"""
from academy.models.account import UserAccount, AuthSession
from academy.models.profile import Profile, XpAward
from academy.models.course import Course, Module, Lesson, Quiz
from academy.models.lesson_progress import LessonProgress
from academy.models.quiz_attempt import QuizAttempt
from academy.models.task import Task, UserTask
from academy.models.badge import UserBadge
from academy.models.daily_activity import DailyActivity

__all__ = [
    "UserAccount",
    "AuthSession",
    "Profile",
    "XpAward",
    "Course",
    "Module",
    "Lesson",
    "Quiz",
    "LessonProgress",
    "QuizAttempt",
    "Task",
    "UserTask",
    "UserBadge",
    "DailyActivity",
]
