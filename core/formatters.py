# core/formatters.py

# all pure text utilities
# must never import from models!

from textwrap import dedent

NO_SCORES_MESSAGE = "该学生暂无成绩记录"
NOT_FOUND_MESSAGE = "学生不存在"
UNSET_FIELD = "未设置"

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


def format_number(value: float) -> str:
    # shortest round-tripping form, e.g. 92.5 -> "92.5", 90.0 -> "90"
    if float(value).is_integer():
        return str(int(value))

    return repr(float(value))


def format_optional(value: str) -> str:
    return value if value else UNSET_FIELD


# === score formatters ===


def format_score_lines(scores: dict[str, float], indent: str = "  ") -> list[str]:
    return [
        f"{indent}{subject}: {format_number(score)}" for subject, score in scores.items()
    ]


def format_scores_report(
    student_id: str,
    name: str,
    scores: dict[str, float],
    average: float,
) -> str:
    """
    Renders the scores summary for one student.

    Args:
        student_id: The student's id.
        name: The student's name.
        scores: Mapping of subject to score.
        average: The precomputed average over `scores`.

    Returns:
        A multi-line string: id, name, then either the no-scores message or the
        per-subject lines followed by the average.
    """
    header = dedent(
        f"""\
        学号: {student_id}
        姓名: {name}
        """
    )

    if not scores:
        return header + NO_SCORES_MESSAGE

    body = "\n".join(format_score_lines(scores))

    return f"{header}成绩列表:\n{body}\n平均分: {format_number(average)}"
