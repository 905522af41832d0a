# tests/test_roster.py

import logging
import os
import tempfile

import pytest

from models.roster import Roster, StaleHandleError
from models.student import Student

# === student methods ===


def test_add_student(sample_roster, sample_student):
    assert sample_roster.add(sample_student)
    assert sample_roster.count() == 1

    handle = sample_roster.find_by_id(sample_student.id)
    assert handle is not None
    assert handle.record == sample_student


def test_add_stores_a_copy(sample_roster, sample_student):
    sample_roster.add(sample_student)
    sample_student.set_score("数学", 50)

    stored = sample_roster.find_by_id(sample_student.id).record
    assert not stored.has_score("数学")
    assert stored is not sample_student


def test_add_duplicate_id_fails(sample_roster, sample_student, caplog):
    duplicate = Student(sample_student.id, "张伟", "男", "202")

    assert sample_roster.add(sample_student)
    assert not sample_roster.add(duplicate)
    assert sample_roster.count() == 1
    assert "已存在" in caplog.text


def test_add_incomplete_student_fails(sample_roster, sample_student):
    sample_student._class_id = ""

    assert not sample_roster.add(sample_student)
    assert sample_roster.count() == 0


def test_delete_student(populated_roster, sample_student):
    handle = populated_roster.find_by_id(sample_student.id)

    assert populated_roster.delete(sample_student.id)
    assert populated_roster.find_by_id(sample_student.id) is None
    assert populated_roster.count() == 2
    assert not handle.is_valid()

    with pytest.raises(StaleHandleError):
        handle.record


def test_delete_missing_student(populated_roster, caplog):
    caplog.set_level(logging.WARNING)

    assert not populated_roster.delete("9999999999")
    assert populated_roster.count() == 3
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_handles_survive_other_mutations(populated_roster, sample_student, second_student):
    handle = populated_roster.find_by_id(second_student.id)

    populated_roster.delete(sample_student.id)
    populated_roster.add(Student("2023010009", "赵四", "男", "103"))
    populated_roster.sort_by_id()

    assert handle.is_valid()
    assert handle.record.id == second_student.id


def test_reused_slot_does_not_revive_stale_handle(sample_roster, sample_student, second_student):
    sample_roster.add(sample_student)
    stale = sample_roster.find_by_id(sample_student.id)

    sample_roster.delete(sample_student.id)
    sample_roster.add(second_student)

    fresh = sample_roster.find_by_id(second_student.id)
    assert fresh.slot == stale.slot
    assert not stale.is_valid()
    assert fresh.is_valid()


def test_find_by_name_substring(populated_roster):
    populated_roster.add(Student("2023010004", "王芳芳", "女", "103"))

    names = [h.record.name for h in populated_roster.find_by_name("王芳")]
    assert names == ["王芳", "王芳芳"]

    assert populated_roster.find_by_name("梅")[0].record.name == "韩梅梅"
    assert populated_roster.find_by_name("不存在") == []


def test_find_by_name_is_case_sensitive(sample_roster):
    sample_roster.add(Student("2023010001", "Alice", "女", "101"))

    assert len(sample_roster.find_by_name("Ali")) == 1
    assert sample_roster.find_by_name("ali") == []


def test_find_by_name_exact(populated_roster):
    populated_roster.add(Student("2023010004", "王芳芳", "女", "103"))

    matches = populated_roster.find_by_name_exact("王芳")
    assert [h.record.id for h in matches] == ["2023010001"]


def test_update_student(populated_roster, sample_student):
    replacement = Student(sample_student.id, "王芳", "女", "999", "13800000000")

    assert populated_roster.update(sample_student.id, replacement)

    stored = populated_roster.find_by_id(sample_student.id).record
    assert stored.class_id == "999"
    assert stored.phone == "13800000000"
    # position is preserved
    assert populated_roster.get_all()[0].id == sample_student.id


def test_update_missing_student(populated_roster, sample_student):
    assert not populated_roster.update("9999999999", sample_student)


def test_update_may_change_id_to_unused_value(populated_roster, sample_student):
    handle = populated_roster.find_by_id(sample_student.id)
    replacement = Student("2023019999", "王芳", "女", "101")

    assert populated_roster.update(sample_student.id, replacement)
    assert populated_roster.find_by_id(sample_student.id) is None
    assert handle.record.id == "2023019999"


def test_update_rejects_id_collision(populated_roster, sample_student, second_student):
    replacement = Student(second_student.id, "王芳", "女", "101")

    assert not populated_roster.update(sample_student.id, replacement)
    assert populated_roster.find_by_id(sample_student.id).record == sample_student


def test_update_rejects_incomplete_student(populated_roster, sample_student, caplog):
    caplog.set_level(logging.WARNING)
    replacement = Student(sample_student.id, "王芳", "女", "999")
    replacement._class_id = ""

    assert not populated_roster.update(sample_student.id, replacement)
    assert populated_roster.find_by_id(sample_student.id).record.class_id == "101"
    assert populated_roster.get_all()[0] == sample_student
    assert "新学生信息不完整" in caplog.text


def test_clear_invalidates_handles(populated_roster, sample_student):
    handle = populated_roster.find_by_id(sample_student.id)

    populated_roster.clear()

    assert populated_roster.count() == 0
    assert len(populated_roster) == 0
    assert populated_roster.get_all() == ()
    assert not handle.is_valid()


def test_sort_by_id_is_lexicographic(sample_roster):
    for student_id in ["2023010010", "2023010002", "2023010001"]:
        sample_roster.add(Student(student_id, "测试", "男", "101"))

    sample_roster.sort_by_id()

    assert [s.id for s in sample_roster.get_all()] == [
        "2023010001",
        "2023010002",
        "2023010010",
    ]


def test_get_all_preserves_insertion_order(sample_roster, second_student, sample_student):
    sample_roster.add(second_student)
    sample_roster.add(sample_student)

    assert [s.id for s in sample_roster.get_all()] == [
        second_student.id,
        sample_student.id,
    ]


def test_get_all_elements_are_detached(populated_roster, sample_student, second_student):
    first = populated_roster.get_all()[0]
    first.id = second_student.id
    first.set_score("数学", 10)

    assert [s.id for s in populated_roster.get_all()] == [
        sample_student.id,
        second_student.id,
        "2023010003",
    ]
    assert not populated_roster.find_by_id(sample_student.id).record.has_score("数学")


def test_handle_from_other_roster_is_rejected(populated_roster, sample_student, log_settings):
    other = Roster(log_settings)
    handle = populated_roster.find_by_id(sample_student.id)

    with pytest.raises(StaleHandleError):
        other.resolve(handle)


# --- delete by name ---


def test_delete_by_name_single_match(populated_roster, sample_student):
    assert populated_roster.delete_by_name("王芳")
    assert populated_roster.find_by_id(sample_student.id) is None


def test_delete_by_name_no_match(populated_roster):
    assert not populated_roster.delete_by_name("不存在")
    assert populated_roster.count() == 3


def test_delete_by_name_uses_selection(populated_roster):
    populated_roster.add(Student("2023010004", "王芳", "女", "103"))
    seen = []

    def select(candidates):
        seen.extend(s.id for s in candidates)
        return 2

    assert populated_roster.delete_by_name("王芳", select)
    assert seen == ["2023010001", "2023010004"]
    assert populated_roster.find_by_id("2023010004") is None
    assert populated_roster.find_by_id("2023010001") is not None


@pytest.mark.parametrize("choice", [0, 3, -1, None])
def test_delete_by_name_invalid_selection(populated_roster, choice):
    populated_roster.add(Student("2023010004", "王芳", "女", "103"))

    assert not populated_roster.delete_by_name("王芳", lambda _: choice)
    assert populated_roster.count() == 4


@pytest.mark.parametrize("choice", [0, 3, -1])
def test_delete_by_name_out_of_range_choice_warns(populated_roster, choice, caplog):
    caplog.set_level(logging.WARNING)
    populated_roster.add(Student("2023010004", "王芳", "女", "103"))

    assert not populated_roster.delete_by_name("王芳", lambda _: choice)
    assert "无效的选择" in caplog.text


def test_delete_by_name_ambiguous_without_selector(populated_roster):
    populated_roster.add(Student("2023010004", "王芳", "女", "103"))

    assert not populated_roster.delete_by_name("王芳")
    assert populated_roster.count() == 4


def test_delete_candidate(populated_roster):
    populated_roster.add(Student("2023010004", "王芳", "女", "103"))
    candidates = populated_roster.find_by_name_exact("王芳")

    assert populated_roster.delete_candidate(candidates, 1)
    assert populated_roster.find_by_id("2023010001") is None

    # the same candidate cannot be deleted twice
    assert not populated_roster.delete_candidate(candidates, 1)


# --- score methods ---


def test_set_score(populated_roster, sample_student):
    assert populated_roster.set_score(sample_student.id, "数学", 92.5)
    assert populated_roster.find_by_id(sample_student.id).record.get_score("数学") == 92.5


def test_set_score_failures_return_false(populated_roster, sample_student, caplog):
    caplog.set_level(logging.WARNING)

    assert not populated_roster.set_score("9999999999", "数学", 90)
    assert not populated_roster.set_score(sample_student.id, "", 90)
    assert not populated_roster.set_score(sample_student.id, "数学", 101)
    assert not populated_roster.set_score(sample_student.id, "数学", "abc")
    assert len(caplog.records) == 4


def test_set_score_accepts_numeric_string(populated_roster, sample_student, caplog):
    caplog.set_level(logging.INFO)

    assert populated_roster.set_score(sample_student.id, "数学", "90.0")
    assert populated_roster.find_by_id(sample_student.id).record.get_score("数学") == 90.0
    assert "数学 = 90" in caplog.text


def test_scores_report(populated_roster, sample_student, scored_student):
    populated_roster.set_score(sample_student.id, "数学", 92.5)

    report = populated_roster.scores_report(sample_student.id)
    assert report == "学号: 2023010001\n姓名: 王芳\n成绩列表:\n  数学: 92.5\n平均分: 92.5"

    report = populated_roster.scores_report(scored_student.id)
    assert "  数学: 80\n" in report
    assert report.endswith("平均分: 85")


def test_scores_report_without_scores(populated_roster, second_student):
    report = populated_roster.scores_report(second_student.id)

    assert report == "学号: 2023010002\n姓名: 李雷\n该学生暂无成绩记录"


def test_scores_report_missing_student(populated_roster):
    assert populated_roster.scores_report("9999999999") == "学生不存在"


def test_end_to_end_example(sample_roster):
    first = Student("2023010001", "王芳", "男", "101")

    assert sample_roster.add(Student("2023010002", "李雷", "男", "101"))
    assert sample_roster.add(first)
    assert sample_roster.set_score("2023010001", "数学", 92.5)

    report = sample_roster.scores_report("2023010001")
    assert "数学: 92.5" in report
    assert "平均分: 92.5" in report

    sample_roster.sort_by_id()
    assert [s.id for s in sample_roster.get_all()] == ["2023010001", "2023010002"]


# === persistence ===


def test_save_and_load_round_trip(populated_roster):
    originals = populated_roster.get_all()
    expected = [s.copy() for s in originals]

    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "students.csv")

        assert populated_roster.save(path)
        populated_roster.clear()
        assert populated_roster.load(path)

    assert list(populated_roster.get_all()) == expected
    assert populated_roster.find_by_id("2023010003").record.scores == {
        "数学": 80.0,
        "英语": 90.0,
    }


def test_save_sorted_sorts_roster_in_place(sample_roster, tmp_path):
    for student_id in ["2023010003", "2023010001", "2023010002"]:
        sample_roster.add(Student(student_id, "测试", "男", "101"))

    path = tmp_path / "students.csv"
    assert sample_roster.save_sorted(str(path))

    assert [s.id for s in sample_roster.get_all()] == [
        "2023010001",
        "2023010002",
        "2023010003",
    ]

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "学号,姓名,性别,班级,电话,邮箱,成绩信息"
    assert [line.split(",")[0] for line in lines[1:]] == [
        "2023010001",
        "2023010002",
        "2023010003",
    ]


def test_save_to_unwritable_path_fails(populated_roster, tmp_path, caplog):
    path = tmp_path / "missing_dir" / "students.csv"

    assert not populated_roster.save(str(path))
    assert not populated_roster.save_sorted(str(path))
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_save_sorted_leaves_order_when_file_cannot_open(sample_roster, tmp_path):
    for student_id in ["2023010003", "2023010001"]:
        sample_roster.add(Student(student_id, "测试", "男", "101"))

    assert not sample_roster.save_sorted(str(tmp_path / "missing_dir" / "x.csv"))
    assert [s.id for s in sample_roster.get_all()] == ["2023010003", "2023010001"]


def test_load_missing_file_keeps_roster(populated_roster, tmp_path, caplog):
    assert not populated_roster.load(str(tmp_path / "nope.csv"))
    assert populated_roster.count() == 3
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_load_undecodable_file_keeps_roster(populated_roster, tmp_path, caplog):
    path = tmp_path / "students.csv"
    path.write_bytes(
        "学号,姓名,性别,班级,电话,邮箱,成绩信息\n2023020001,周杰,男,201,,,无成绩\n".encode("gbk")
    )

    assert not populated_roster.load(str(path))
    assert populated_roster.count() == 3
    assert populated_roster.find_by_id("2023020001") is None
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_load_replaces_existing_records(populated_roster, tmp_path):
    path = tmp_path / "students.csv"
    path.write_text(
        "学号,姓名,性别,班级,电话,邮箱,成绩信息\n2023020001,周杰,男,201,,,无成绩\n",
        encoding="utf-8",
    )

    assert populated_roster.load(str(path))
    assert [s.id for s in populated_roster.get_all()] == ["2023020001"]


def test_load_skips_malformed_line(sample_roster, tmp_path, caplog):
    caplog.set_level(logging.WARNING)
    path = tmp_path / "students.csv"
    path.write_text(
        "\n".join(
            [
                "学号,姓名,性别,班级,电话,邮箱,成绩信息",
                "2023010001,王芳,女,101,,,数学:90",
                "2023010002,李雷,男,101",
                "2023010003,韩梅梅,女,102,,,无成绩",
                "2023010004,张伟,男,103,13912345678,zw@example.com,英语:75;数学:88",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    assert sample_roster.load(str(path))
    assert sample_roster.count() == 3
    assert "跳过格式错误的行" in caplog.text
    assert "跳过 1 个无效数据" in caplog.text


def test_load_skips_duplicate_ids(sample_roster, tmp_path):
    path = tmp_path / "students.csv"
    path.write_text(
        "2023010001,王芳,女,101,,,无成绩\n2023010001,李雷,男,101,,,无成绩\n",
        encoding="utf-8",
    )

    assert sample_roster.load(str(path))
    assert sample_roster.count() == 1
    assert sample_roster.get_all()[0].name == "王芳"


def test_load_with_no_valid_records_fails(populated_roster, tmp_path):
    path = tmp_path / "students.csv"
    path.write_text(
        "学号,姓名,性别,班级,电话,邮箱,成绩信息\nbad,row\n", encoding="utf-8"
    )

    assert not populated_roster.load(str(path))
    # the roster was cleared before admission
    assert populated_roster.count() == 0
