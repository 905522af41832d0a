# cli/model_formatters.py

# anything that renders student records for the console
from textwrap import dedent

import core.formatters as formatters
from models.student import Student

# === student formatters ===


def format_student_multiline(student: Student) -> str:
    text = dedent(
        f"""\
        学号: {student.id}
        姓名: {student.name}
        性别: {student.gender}
        班级: {student.class_id}
        电话: {formatters.format_optional(student.phone)}
        邮箱: {formatters.format_optional(student.email)}"""
    )

    scores = student.scores

    if scores:
        lines = "\n".join(formatters.format_score_lines(scores))
        text += f"\n成绩:\n{lines}"

    return text


def format_roster_summary(students: tuple[Student, ...]) -> str:
    if not students:
        return "当前没有学生数据。"

    separator = "-" * 19
    blocks = [format_student_multiline(student) for student in students]

    return "\n".join(
        [
            "=== 学生信息列表 ===",
            f"总数：{len(students)}",
            separator,
            *(f"{block}\n{separator}" for block in blocks),
        ]
    )
