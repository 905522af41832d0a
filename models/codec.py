# models/codec.py

"""
Reads and writes rosters as comma-delimited text.

File shape:

    学号,姓名,性别,班级,电话,邮箱,成绩信息
    2023010001,王芳,女,101,,,数学:92.5;英语:88
    2023010002,李雷,男,101,13912345678,lilei@example.com,无成绩

The last column is the scores blob: `subject:score` entries joined by `;`, or the
no-scores marker `无成绩` when a student has no scores. Fields are not quoted.

Decoding is tolerant: malformed lines and malformed score entries are skipped with a
warning and never abort the read. The caller decides which decoded students are
admitted; the codec only reports how many lines it had to skip.
"""

from __future__ import annotations

from typing import Iterable, Iterator, TextIO

from core.formatters import format_number
from core.logging_config import ComponentLogger, LogLevel, LogSettings
from models.student import Student, ValidationError

HEADER = "学号,姓名,性别,班级,电话,邮箱,成绩信息"
HEADER_MARKER = "学号"
NO_SCORES = "无成绩"
FIELD_COUNT = 7

FIELD_SEPARATOR = ","
ENTRY_SEPARATOR = ";"
SCORE_SEPARATOR = ":"


class DecodeResult:
    """
    The outcome of reading a roster file.

    Attributes:
        students (list[Student]): Students decoded from well-formed, valid lines, in file order.
        skipped (int): Number of lines that could not be decoded.
    """

    def __init__(self, students: list[Student] | None = None, skipped: int = 0):
        self.students: list[Student] = students or []
        self.skipped: int = skipped

    def __repr__(self) -> str:
        return f"DecodeResult(students={len(self.students)}, skipped={self.skipped})"


class RosterCodec:

    def __init__(
        self,
        settings: LogSettings,
        level: LogLevel = LogLevel.INFO,
    ):
        self._logger = ComponentLogger("RosterCodec", settings, level)

    @property
    def logger(self) -> ComponentLogger:
        return self._logger

    # === encoding ===

    @staticmethod
    def encode_scores(scores: dict[str, float]) -> str:
        if not scores:
            return NO_SCORES

        return ENTRY_SEPARATOR.join(
            f"{subject}{SCORE_SEPARATOR}{format_number(score)}"
            for subject, score in scores.items()
        )

    @staticmethod
    def encode_row(student: Student) -> str:
        return FIELD_SEPARATOR.join(
            [
                student.id,
                student.name,
                student.gender,
                student.class_id,
                student.phone,
                student.email,
                RosterCodec.encode_scores(student.scores),
            ]
        )

    def write(self, path: str, students: Iterable[Student]) -> None:
        """
        Writes the header and one row per student, overwriting `path`.

        Raises:
            OSError: If the file cannot be opened or written.

        Notes:
            - No atomic replacement is attempted; a failed write may leave a truncated file.
        """
        with self.open_for_write(path) as f:
            self.write_to(f, students)

    @staticmethod
    def open_for_write(path: str) -> TextIO:
        return open(path, "w", encoding="utf-8", newline="\n")

    def write_to(self, f: TextIO, students: Iterable[Student]) -> None:
        f.write(HEADER + "\n")

        for student in students:
            self._warn_on_separators(student)
            f.write(self.encode_row(student) + "\n")

    def _warn_on_separators(self, student: Student) -> None:
        # the format has no quoting, so such rows will not load back intact
        fields = (student.name, student.gender, student.class_id, student.phone, student.email)

        if any(FIELD_SEPARATOR in field or "\n" in field or "\r" in field for field in fields):
            self._logger.warn(f"学生信息包含分隔符，重新加载时将丢失：{student.id}")

        for subject in student.scores:
            if ENTRY_SEPARATOR in subject or SCORE_SEPARATOR in subject:
                self._logger.warn(f"科目名称包含分隔符，重新加载时将丢失：{student.id} - {subject}")

    # === decoding ===

    def decode_scores(self, blob: str) -> Iterator[tuple[str, float]]:
        """
        Yields (subject, score) pairs from a scores blob.

        Entries without a `:` or with a score that is not a number are skipped with a
        warning. Range checking is left to `Student.set_score()`.
        """
        if not blob or blob == NO_SCORES:
            return

        for entry in blob.split(ENTRY_SEPARATOR):
            subject, separator, score_str = entry.partition(SCORE_SEPARATOR)

            if not separator:
                self._logger.warn(f"跳过无效成绩：{entry}")
                continue

            try:
                score = float(score_str)

            except ValueError:
                self._logger.warn(f"跳过无效成绩：{subject}={score_str}")
                continue

            yield subject, score

    def decode_row(self, line: str) -> Student | None:
        """
        Builds a `Student` from one data line.

        Returns:
            The decoded `Student`, or None if the line is malformed or fails validation.
        """
        fields = line.split(FIELD_SEPARATOR, FIELD_COUNT - 1)

        if len(fields) != FIELD_COUNT:
            self._logger.warn(f"跳过格式错误的行：{line}")
            return None

        id, name, gender, class_id, phone, email, scores_blob = fields

        try:
            student = Student(id, name, gender, class_id, phone, email)

        except ValidationError as e:
            self._logger.warn(f"加载学生数据时跳过验证失败的数据：{id} - {name} ({e})")
            return None

        for subject, score in self.decode_scores(scores_blob):
            try:
                student.set_score(subject, score)

            except ValidationError:
                self._logger.warn(f"跳过无效成绩：{subject}={format_number(score)}")

        return student

    def read(self, path: str) -> DecodeResult:
        """
        Decodes every data line in `path`.

        The first line is skipped if it looks like the header (contains `学号`);
        otherwise it is decoded as data. Blank lines are ignored.

        Raises:
            OSError: If the file cannot be opened or read.
        """
        result = DecodeResult()

        # utf-8-sig also accepts files re-saved by spreadsheet programs
        with open(path, "r", encoding="utf-8-sig") as f:
            for line_number, raw_line in enumerate(f):
                line = raw_line.rstrip("\r\n")

                if line_number == 0 and HEADER_MARKER in line:
                    self._logger.info("检测到Excel表头，已跳过")
                    continue

                if not line:
                    continue

                student = self.decode_row(line)

                if student is None:
                    result.skipped += 1
                else:
                    result.students.append(student)

        return result
