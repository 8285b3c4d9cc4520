"""
Lesson gating rules
Decides which lessons a learner may open given their completed lessons
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleOutline:
    """A module's id and its lesson ids, already sorted by order_index"""
    id: Any
    lesson_ids: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class CourseOutline:
    """A course's modules, already sorted by order_index"""
    id: Any
    modules: Tuple[ModuleOutline, ...] = field(default_factory=tuple)

    def module_position(self, module_id: Any) -> int:
        for position, module in enumerate(self.modules):
            if module.id == module_id:
                return position
        return -1

    def all_lesson_ids(self) -> List[Any]:
        return [lesson_id for module in self.modules for lesson_id in module.lesson_ids]


def is_locked(
    course: CourseOutline,
    module_id: Any,
    lesson_index: int,
    completed_lesson_ids: Collection[Any]
) -> bool:
    """
    Check whether the lesson at lesson_index of module_id is locked

    Rules:
    - Inside a module, a lesson unlocks once the lesson before it is completed
    - The first lesson of a module unlocks once every lesson of the previous
      module is completed; the first module's first lesson is always open
    - An empty previous module counts as completed
    - Anything that does not resolve to a real lesson is locked
    """
    position = course.module_position(module_id)
    if position < 0:
        logger.warning(f"Gating check for unknown module {module_id} in course {course.id}")
        return True

    module = course.modules[position]
    if lesson_index < 0 or lesson_index >= len(module.lesson_ids):
        return True

    if lesson_index > 0:
        return module.lesson_ids[lesson_index - 1] not in completed_lesson_ids

    if position == 0:
        return False

    previous = course.modules[position - 1]
    return not all(lesson_id in completed_lesson_ids for lesson_id in previous.lesson_ids)


def locate_lesson(course: CourseOutline, lesson_id: Any) -> Tuple[Any, int]:
    """
    Find (module_id, lesson_index) for a lesson, or (None, -1) when absent
    """
    for module in course.modules:
        for index, candidate in enumerate(module.lesson_ids):
            if candidate == lesson_id:
                return module.id, index
    return None, -1


def is_lesson_locked(course: CourseOutline, lesson_id: Any, completed_lesson_ids: Collection[Any]) -> bool:
    """Gating check addressed by lesson id instead of position"""
    module_id, index = locate_lesson(course, lesson_id)
    if module_id is None:
        return True
    return is_locked(course, module_id, index, completed_lesson_ids)


def lesson_states(course: CourseOutline, completed_lesson_ids: Collection[Any]) -> Dict[Any, Dict[str, bool]]:
    """Locked and completed flags for every lesson in the course"""
    states = {}
    for module in course.modules:
        for index, lesson_id in enumerate(module.lesson_ids):
            states[lesson_id] = {
                "locked": is_locked(course, module.id, index, completed_lesson_ids),
                "completed": lesson_id in completed_lesson_ids,
            }
    return states


def course_progress(course: CourseOutline, completed_lesson_ids: Collection[Any]) -> int:
    """Rounded percentage of the course's lessons completed; 0 for an empty course"""
    lesson_ids = course.all_lesson_ids()
    if not lesson_ids:
        return 0
    done = sum(1 for lesson_id in lesson_ids if lesson_id in completed_lesson_ids)
    return int(100 * done / len(lesson_ids) + 0.5)


def is_course_complete(course: CourseOutline, completed_lesson_ids: Collection[Any]) -> bool:
    lesson_ids = course.all_lesson_ids()
    return bool(lesson_ids) and all(lesson_id in completed_lesson_ids for lesson_id in lesson_ids)
