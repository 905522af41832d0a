# models/roster.py

"""
The Roster is the central data object of the program and the single source of truth for student records.

Students are kept in insertion order (until `sort_by_id()` is called) and are unique by id.
Records live in a slot arena: each stored student occupies a numbered slot, and lookups return a
`RecordHandle` (slot index plus generation) instead of a bare reference. Deleting or clearing
bumps the slot's generation, so a handle to a removed record reports itself as stale rather than
silently pointing at something else.

Provides functions for adding, removing, updating, and finding students, recording scores, and
saving to and loading from the delimited text format implemented by `RosterCodec`.

Every mutator reports success as a boolean and logs the outcome. `ValidationError`, `OSError` and
`UnicodeDecodeError` are caught here and never escape to callers.
"""

from __future__ import annotations

from typing import Callable

import core.formatters as formatters
from core.logging_config import ComponentLogger, LogLevel, LogSettings
from models.codec import RosterCodec
from models.student import Student


class StaleHandleError(LookupError):
    """Raised when dereferencing a handle whose record has been removed."""


class RecordHandle:
    """
    A checkable reference to a student stored in a `Roster`.

    Handles stay valid across adds, updates, score changes, and sorting. They become stale
    once their record is deleted or the roster is cleared or reloaded.
    """

    def __init__(self, roster: Roster, slot: int, generation: int):
        self._roster = roster
        self._slot = slot
        self._generation = generation

    @property
    def slot(self) -> int:
        return self._slot

    @property
    def generation(self) -> int:
        return self._generation

    def is_valid(self) -> bool:
        return self._roster._slot_is_live(self._slot, self._generation)

    @property
    def record(self) -> Student:
        """
        The referenced student.

        Raises:
            StaleHandleError: If the record has been removed from the roster.
        """
        return self._roster.resolve(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordHandle):
            return NotImplemented

        return (
            self._roster is other._roster
            and self._slot == other._slot
            and self._generation == other._generation
        )

    def __hash__(self) -> int:
        return hash((id(self._roster), self._slot, self._generation))

    def __repr__(self) -> str:
        return f"RecordHandle(slot={self._slot}, generation={self._generation})"


class _Slot:
    __slots__ = ("student", "generation")

    def __init__(self):
        self.student: Student | None = None
        self.generation: int = 0


class Roster:

    def __init__(
        self,
        settings: LogSettings | None = None,
        level: LogLevel = LogLevel.INFO,
        codec: RosterCodec | None = None,
    ):
        self._settings: LogSettings = settings or LogSettings()
        self._logger = ComponentLogger("Roster", self._settings, level)
        self._codec: RosterCodec = codec or RosterCodec(self._settings, level)

        self._slots: list[_Slot] = []
        self._free_slots: list[int] = []
        # slot indices in display order
        self._order: list[int] = []

        self._logger.info("学生管理系统初始化完成")

    # === properties ===

    @property
    def settings(self) -> LogSettings:
        return self._settings

    @property
    def logger(self) -> ComponentLogger:
        return self._logger

    @property
    def codec(self) -> RosterCodec:
        return self._codec

    # === data accessors ===

    def count(self) -> int:
        return len(self._order)

    def get_all(self) -> tuple[Student, ...]:
        """
        Returns every stored student in storage order.

        Notes:
            - The elements are copies; mutate stored students through `RecordHandle.record`.
        """
        return tuple(self._student_at(slot).copy() for slot in self._order)

    def resolve(self, handle: RecordHandle) -> Student:
        """
        Dereferences a handle issued by this roster.

        Raises:
            StaleHandleError: If the handle's record is no longer stored.
        """
        if handle._roster is not self or not handle.is_valid():
            raise StaleHandleError(f"Stale record handle: {handle!r}")

        return self._student_at(handle.slot)

    # --- find methods ---

    def find_by_id(self, student_id: str) -> RecordHandle | None:
        slot = self._find_slot(student_id)

        return None if slot is None else self._handle_for(slot)

    def find_by_name(self, name: str) -> list[RecordHandle]:
        """
        Returns handles to every student whose name contains `name` (case-sensitive substring match).
        """
        return [
            self._handle_for(slot)
            for slot in self._order
            if name in self._student_at(slot).name
        ]

    def find_by_name_exact(self, name: str) -> list[RecordHandle]:
        return [
            self._handle_for(slot)
            for slot in self._order
            if self._student_at(slot).name == name
        ]

    def scores_report(self, student_id: str) -> str:
        """
        Produces the scores summary for one student.

        Returns:
            The id, name, per-subject scores (or the no-scores message), and average; or the
            not-found message if no student has `student_id`.
        """
        slot = self._find_slot(student_id)

        if slot is None:
            return formatters.NOT_FOUND_MESSAGE

        student = self._student_at(slot)

        return formatters.format_scores_report(
            student.id,
            student.name,
            student.scores,
            student.average_score(),
        )

    # === data manipulators ===

    # --- student manipulation ---

    def add(self, student: Student) -> bool:
        """
        Adds a copy of `student` to the end of the roster.

        Args:
            student (Student): The student to add. It is copied, never stored directly.

        Returns:
            True if the student was added.
            False if the student is incomplete or its id is already present.
        """
        if not student.is_valid():
            self._logger.warn("添加学生失败：学生信息不完整")
            return False

        if self._find_slot(student.id) is not None:
            self._logger.warn(f"添加学生失败：学号 {student.id} 已存在")
            return False

        slot = self._allocate(student.copy())
        self._order.append(slot)

        self._logger.info(f"成功添加学生：{student.id} - {student.name}")
        return True

    def delete(self, student_id: str) -> bool:
        """
        Removes the student with `student_id`.

        Returns:
            True if a student was removed, False if no student has that id.

        Notes:
            - Handles to the removed student become stale.
        """
        slot = self._find_slot(student_id)

        if slot is None:
            self._logger.warn(f"删除学生失败：学号 {student_id} 不存在")
            return False

        self._release(slot)

        self._logger.info(f"成功删除学生：{student_id}")
        return True

    def delete_candidate(self, candidates: list[RecordHandle], index: int) -> bool:
        """
        Deletes exactly the candidate at the 1-based `index`.

        Args:
            candidates (list[RecordHandle]): An ordered candidate list, e.g. from `find_by_name_exact()`.
            index (int): The 1-based position of the candidate to delete.

        Returns:
            True if the selected candidate was removed.
            False if the index is out of range or the candidate is no longer stored.
        """
        if not 1 <= index <= len(candidates):
            self._logger.warn("删除学生失败：无效的选择")
            return False

        handle = candidates[index - 1]

        if not handle.is_valid():
            self._logger.warn("删除学生失败：所选学生已不存在")
            return False

        return self.delete(handle.record.id)

    def delete_by_name(
        self,
        name: str,
        select: Callable[[list[Student]], int | None] | None = None,
    ) -> bool:
        """
        Removes a student by exact name, asking `select` to disambiguate duplicate names.

        Args:
            name (str): The exact name to match.
            select (Callable[[list[Student]], int | None] | None):
                - Called only when several students share `name`, with those students in storage order.
                - Returns the 1-based index of the student to delete, or None to cancel.

        Returns:
            True if a student was removed.
            False if no student has the name, the choice is cancelled or out of range,
            or several students match and no `select` callback was given.
        """
        candidates = self.find_by_name_exact(name)

        if not candidates:
            self._logger.warn(f"删除学生失败：姓名 {name} 不存在")
            return False

        if len(candidates) == 1:
            removed = self.delete(candidates[0].record.id)
            if removed:
                self._logger.info(f"成功删除学生：{name}")
            return removed

        if select is None:
            self._logger.warn(f"删除学生失败：存在 {len(candidates)} 个同名学生 {name}")
            return False

        choice = select([handle.record for handle in candidates])

        if choice is None:
            self._logger.warn("删除学生失败：已取消选择")
            return False

        removed = self.delete_candidate(candidates, choice)
        if removed:
            self._logger.info(f"成功删除学生：{name} (编号{choice})")
        return removed

    def update(self, student_id: str, new_student: Student) -> bool:
        """
        Replaces the stored student with `student_id` by a copy of `new_student`, in place.

        Args:
            student_id (str): The id of the student to replace.
            new_student (Student): The replacement record.

        Returns:
            True if the record was replaced.
            False if `student_id` is unknown, `new_student` is incomplete, or `new_student.id`
            already belongs to a different stored student.

        Notes:
            - The slot and its position are kept, so existing handles remain valid.
            - Changing the id is allowed as long as the new id is not taken.
        """
        slot = self._find_slot(student_id)

        if slot is None:
            self._logger.warn(f"修改学生失败：学号 {student_id} 不存在")
            return False

        if not new_student.is_valid():
            self._logger.warn("修改学生失败：新学生信息不完整")
            return False

        if new_student.id != student_id and self._find_slot(new_student.id) is not None:
            self._logger.warn(f"修改学生失败：学号 {new_student.id} 已存在")
            return False

        self._slots[slot].student = new_student.copy()

        self._logger.info(f"成功修改学生信息：{student_id}")
        return True

    def clear(self) -> None:
        for slot in self._order:
            self._release_slot(slot)
        self._order = []

        self._logger.info("清空所有学生数据")

    def sort_by_id(self) -> None:
        # plain string comparison, so "10" sorts before "9"
        self._order.sort(key=lambda slot: self._student_at(slot).id)

        self._logger.info("按学号排序完成")

    # --- score manipulation ---

    def set_score(self, student_id: str, subject: str, score: float) -> bool:
        """
        Records a score for the student with `student_id`.

        Returns:
            True if the score was recorded.
            False if the student is unknown or the subject or score is invalid.
        """
        slot = self._find_slot(student_id)

        if slot is None:
            self._logger.warn(f"设置成绩失败：学号 {student_id} 不存在")
            return False

        try:
            self._student_at(slot).set_score(subject, score)

        except (ValueError, TypeError) as e:
            self._logger.warn(f"设置成绩失败：{student_id} - {subject} ({e})")
            return False

        stored = self._student_at(slot).get_score(subject)

        self._logger.info(
            f"成功设置学生成绩：{student_id} - {subject} = {formatters.format_number(stored)}"
        )
        return True

    # === persistence and import ===

    def save(self, path: str) -> bool:
        """
        Writes the roster to `path` in storage order.

        Returns:
            True if the file was written, False if it could not be opened or written.
        """
        try:
            self._codec.write(path, self.get_all())

        except OSError as e:
            self._logger.error(f"无法打开文件进行保存：{path} ({e})")
            return False

        self._logger.info(f"成功保存数据到文件：{path}")
        return True

    def save_sorted(self, path: str) -> bool:
        """
        Sorts the roster by id in place, then writes it to `path`.

        Notes:
            - The sort is applied to the roster itself, not only to the file, and happens only
              if the file can be opened.
        """
        try:
            f = self._codec.open_for_write(path)

        except OSError as e:
            self._logger.error(f"无法打开文件进行保存：{path} ({e})")
            return False

        try:
            with f:
                self.sort_by_id()
                self._codec.write_to(f, self.get_all())

        except OSError as e:
            self._logger.error(f"无法写入文件：{path} ({e})")
            return False

        self._logger.info(f"成功保存Excel格式数据到文件：{path}")
        return True

    def load(self, path: str) -> bool:
        """
        Replaces the roster's contents with the students stored in `path`.

        Returns:
            True if at least one student was loaded.
            False if the file could not be read or no student was admitted.

        Notes:
            - Unreadable or undecodable files leave the roster untouched; otherwise the roster is cleared
              before any student from the file is admitted.
            - Malformed lines, invalid students, and duplicate ids are skipped with a warning.
        """
        try:
            result = self._codec.read(path)

        except (OSError, UnicodeDecodeError) as e:
            # undecodable bytes are treated like an unreadable file
            self._logger.error(f"无法读取文件进行加载：{path} ({e})")
            return False

        self.clear()

        loaded = 0
        skipped = result.skipped

        for student in result.students:
            if not student.is_valid():
                self._logger.warn(f"跳过无效学生数据：{student.id} - {student.name}")
                skipped += 1
                continue

            if self.add(student):
                loaded += 1
            else:
                skipped += 1

        if skipped > 0:
            self._logger.warn(
                f"从文件加载数据完成，成功加载 {loaded} 个学生，跳过 {skipped} 个无效数据：{path}"
            )
        else:
            self._logger.info(f"从文件加载了 {loaded} 个学生数据：{path}")

        return loaded > 0

    # === helper methods ===

    def _student_at(self, slot: int) -> Student:
        student = self._slots[slot].student
        if student is None:
            raise StaleHandleError(f"Slot {slot} is empty.")
        return student

    def _find_slot(self, student_id: str) -> int | None:
        for slot in self._order:
            if self._student_at(slot).id == student_id:
                return slot
        return None

    def _handle_for(self, slot: int) -> RecordHandle:
        return RecordHandle(self, slot, self._slots[slot].generation)

    def _slot_is_live(self, slot: int, generation: int) -> bool:
        return (
            0 <= slot < len(self._slots)
            and self._slots[slot].generation == generation
            and self._slots[slot].student is not None
        )

    def _allocate(self, student: Student) -> int:
        if self._free_slots:
            slot = self._free_slots.pop()
        else:
            self._slots.append(_Slot())
            slot = len(self._slots) - 1

        self._slots[slot].student = student
        return slot

    def _release_slot(self, slot: int) -> None:
        self._slots[slot].student = None
        self._slots[slot].generation += 1
        self._free_slots.append(slot)

    def _release(self, slot: int) -> None:
        self._order.remove(slot)
        self._release_slot(slot)

    # === dunder methods ===

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"Roster({self.count()} students)"
