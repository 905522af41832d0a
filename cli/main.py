# cli/main.py

"""
Main menu for the student records CLI.

Every action collects input from the console, calls the `Roster` API, and prints a short
success or failure message. Diagnostics are logged by the roster itself.
"""

import sys
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.config as config
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from core.logging_config import LogSettings, setup_logging
from models.roster import Roster
from models.student import Student, ValidationError


def run_cli(roster: Roster, data_file: str) -> None:
    """
    Top-level loop with dispatch for the main menu.

    Args:
        roster (Roster): The active `Roster`.
        data_file (str): The file used by the save and load actions.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("学生信息管理系统")
    options = [
        ("添加学生", add_student),
        ("删除学生（按学号）", delete_student_by_id),
        ("删除学生（按姓名）", delete_student_by_name),
        ("查询学生（按学号）", find_student_by_id),
        ("查询学生（按姓名）", find_students_by_name),
        ("显示所有学生", show_all_students),
        ("设置学生成绩", set_student_score),
        ("查看学生成绩", show_scores_report),
        ("按学号排序", sort_students),
        ("保存数据到Excel文件", lambda r: save_roster(r, data_file)),
        ("加载数据", lambda r: load_roster(r, data_file)),
    ]
    zero_option = "退出系统"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            exit_program()

        elif callable(menu_response):
            menu_response(roster)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


# === student actions ===


def prompt_new_student() -> Student | None:
    """
    Collects the fields of a new `Student` from the console.

    Returns:
        A new `Student` object, or None if the user cancels or validation fails.
    """
    student_id = helpers.prompt_user_input_or_cancel("请输入学号（留空取消）: ")

    if student_id is MenuSignal.CANCEL:
        return None
    student_id = cast(str, student_id)

    name = helpers.prompt_user_input("请输入姓名: ")
    gender = helpers.prompt_user_input("请输入性别（男/女）: ")
    class_id = helpers.prompt_user_input("请输入班级: ")
    phone = helpers.prompt_user_input("请输入电话（可选）: ")
    email = helpers.prompt_user_input("请输入邮箱（可选）: ")

    try:
        return Student(student_id, name, gender, class_id, phone, email)

    except ValidationError as e:
        print(f"输入有误：{e}")
        return None


def add_student(roster: Roster) -> None:
    student = prompt_new_student()

    if student is None:
        return

    print("添加成功！" if roster.add(student) else "添加失败！")


def delete_student_by_id(roster: Roster) -> None:
    student_id = helpers.prompt_user_input("请输入要删除的学生学号: ")

    print("删除成功！" if roster.delete(student_id) else "删除失败！")


def delete_student_by_name(roster: Roster) -> None:
    name = helpers.prompt_user_input("请输入要删除的学生姓名: ")

    def select(candidates: list[Student]) -> int:
        return helpers.prompt_index_selection(
            candidates, model_formatters.format_student_multiline
        )

    print("删除成功！" if roster.delete_by_name(name, select) else "删除失败！")


def find_student_by_id(roster: Roster) -> None:
    student_id = helpers.prompt_user_input("请输入要查询的学生学号: ")

    handle = roster.find_by_id(student_id)

    if handle is None:
        print("学生不存在！")
        return

    print(model_formatters.format_student_multiline(handle.record))


def find_students_by_name(roster: Roster) -> None:
    """
    Shows students whose name matches exactly, falling back to a substring search.
    """
    name = helpers.prompt_user_input("请输入要查询的学生姓名: ")

    handles = roster.find_by_name_exact(name) or roster.find_by_name(name)

    if not handles:
        print("未找到匹配的学生！")
        return

    print(f"找到 {len(handles)} 个匹配的学生：")
    helpers.display_results(
        [handle.record for handle in handles],
        formatter=model_formatters.format_student_multiline,
    )


def show_all_students(roster: Roster) -> None:
    print(model_formatters.format_roster_summary(roster.get_all()))


def set_student_score(roster: Roster) -> None:
    student_id = helpers.prompt_user_input("请输入学生学号: ")
    subject = helpers.prompt_user_input("请输入科目名称: ")
    score_input = helpers.prompt_user_input("请输入成绩（0-100）: ")

    try:
        score = float(score_input)

    except ValueError:
        print("成绩必须是数字！")
        return

    print("设置成功！" if roster.set_score(student_id, subject, score) else "设置失败！")


def show_scores_report(roster: Roster) -> None:
    student_id = helpers.prompt_user_input("请输入学生学号: ")

    print(roster.scores_report(student_id))


def sort_students(roster: Roster) -> None:
    roster.sort_by_id()

    print("排序完成！")


# === persistence actions ===


def save_roster(roster: Roster, data_file: str) -> None:
    if roster.save_sorted(data_file):
        print("保存成功！数据已按学号排序并保存为Excel格式。")
    else:
        print("保存失败！")


def load_roster(roster: Roster, data_file: str) -> None:
    print("加载成功！" if roster.load(data_file) else "加载失败！")


def exit_program():
    """
    Displays a farewell message and terminates the CLI program.

    Raises:
        SystemExit: Always raised to immediately terminate execution.
    """
    print("感谢使用，再见！")

    raise SystemExit


def configure_console() -> None:
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8")


def main() -> None:
    configure_console()
    setup_logging()

    settings = LogSettings(config.get_log_level())
    roster = Roster(settings)

    run_cli(roster, config.get_data_file())


if __name__ == "__main__":
    main()
