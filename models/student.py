# models/student.py

"""
Represents a single student record: identity, contact info, and per-subject scores.

Every field is validated on construction and again whenever it is reassigned through
its property setter, so a `Student` can never hold a value that violates its grammar.

Includes functionality for:
- Validating id, name, gender, class id, phone, and email input
- Storing, reading, and averaging per-subject scores
- Cheap completeness checks used by the roster before admitting a record

Scores are internally represented as a dictionary mapping subject names to floats in
the closed range [0, 100]. Out-of-range assignments are rejected, never clamped.
"""

from __future__ import annotations

import re

GENDERS: tuple[str, str] = ("男", "女")

# ASCII digits only
ID_PATTERN = re.compile(r"^\d{10}$", re.ASCII)
PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$", re.ASCII)
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

MIN_SCORE = 0.0
MAX_SCORE = 100.0


class ValidationError(ValueError):
    """Raised when a field value does not match its grammar."""


class Student:

    def __init__(
        self,
        id: str,
        name: str,
        gender: str,
        class_id: str,
        phone: str = "",
        email: str = "",
    ):
        # validation order: id, name, gender, class_id, phone, email
        self._id: str = Student.validate_id(id)
        self._name: str = Student.validate_name(name)
        self._gender: str = Student.validate_gender(gender)
        self._class_id: str = Student.validate_class_id(class_id)
        self._phone: str = Student.validate_phone(phone) if phone else ""
        self._email: str = Student.validate_email(email) if email else ""
        self._scores: dict[str, float] = {}

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, id: str) -> None:
        self._id = Student.validate_id(id)

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Student.validate_name(name)

    @property
    def gender(self) -> str:
        return self._gender

    @gender.setter
    def gender(self, gender: str) -> None:
        self._gender = Student.validate_gender(gender)

    @property
    def class_id(self) -> str:
        return self._class_id

    @class_id.setter
    def class_id(self, class_id: str) -> None:
        self._class_id = Student.validate_class_id(class_id)

    @property
    def phone(self) -> str:
        return self._phone

    @phone.setter
    def phone(self, phone: str) -> None:
        self._phone = Student.validate_phone(phone) if phone else ""

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, email: str) -> None:
        self._email = Student.validate_email(email) if email else ""

    @property
    def scores(self) -> dict[str, float]:
        return self._scores.copy()

    def is_valid(self) -> bool:
        """
        Reports whether the required fields are present.

        Notes:
            - This is a completeness check only; formats are not re-validated here.
        """
        return bool(self._id and self._name and self._gender and self._class_id)

    def copy(self) -> Student:
        duplicate = Student(
            self._id,
            self._name,
            self._gender,
            self._class_id,
            self._phone,
            self._email,
        )
        duplicate._scores = self._scores.copy()

        return duplicate

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented

        return (
            self._id == other._id
            and self._name == other._name
            and self._gender == other._gender
            and self._class_id == other._class_id
            and self._phone == other._phone
            and self._email == other._email
            and self._scores == other._scores
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._name}, {self._gender}, {self._class_id}, {self._phone}, {self._email})"

    def __str__(self) -> str:
        return f"STUDENT: {self._name} - (ID: {self._id}, class: {self._class_id})"

    # === data accessors ===

    # --- score methods ---

    def get_score(self, subject: str) -> float | None:
        return self._scores.get(subject)

    def has_score(self, subject: str) -> bool:
        return subject in self._scores

    def average_score(self) -> float:
        """
        Returns the arithmetic mean of all recorded scores, or 0.0 if there are none.
        """
        if not self._scores:
            return 0.0

        return sum(self._scores.values()) / len(self._scores)

    # === data manipulators ===

    # --- score methods ---

    def set_score(self, subject: str, score: float) -> None:
        """
        Records a score for a subject, overwriting any previous value.

        Args:
            subject: The subject name. Must not be empty.
            score: The score, which must lie within [0, 100].

        Raises:
            ValidationError: If the subject is empty or the score is out of range.
        """
        if not subject:
            raise ValidationError("科目名不能为空")

        score = float(score)
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise ValidationError("成绩必须在0-100之间")

        self._scores[subject] = score

    # === data validators ===

    @staticmethod
    def validate_id(id: str) -> str:
        """
        Validates a student id.

        Args:
            id: The candidate id string.

        Returns:
            The id unchanged, if it consists of exactly ten decimal digits.

        Raises:
            ValidationError: If the id is empty or is not ten digits.
        """
        if not id:
            raise ValidationError("学号不能为空")
        if not ID_PATTERN.fullmatch(id):
            raise ValidationError("学号必须为10位数字")
        return id

    @staticmethod
    def validate_name(name: str) -> str:
        # length is counted in characters, not bytes
        if not name:
            raise ValidationError("姓名不能为空")
        if not 2 <= len(name) <= 20:
            raise ValidationError("姓名长度必须在2-20个字符之间")
        return name

    @staticmethod
    def validate_gender(gender: str) -> str:
        if gender not in GENDERS:
            raise ValidationError("性别必须为'男'或'女'")
        return gender

    @staticmethod
    def validate_class_id(class_id: str) -> str:
        if not class_id:
            raise ValidationError("班级号不能为空")
        if len(class_id) < 3:
            raise ValidationError("班级号格式不正确")
        return class_id

    @staticmethod
    def validate_phone(phone: str) -> str:
        if not PHONE_PATTERN.fullmatch(phone):
            raise ValidationError("手机号格式不正确（必须是11位数字）")
        return phone

    @staticmethod
    def validate_email(email: str) -> str:
        """
        Validates an email address of the form `local@domain.tld`.

        The domain must contain a dot and the top-level domain must be at least two
        letters. The input is not lowercased or stripped before matching.

        Raises:
            ValidationError: If the address does not match the expected shape.
        """
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError("邮箱格式不正确")
        return email
