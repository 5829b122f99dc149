from decimal import Decimal

import pytest

from student_portal.data.frames import (
    GRADING_SCALE, CourseRecord, GradeBand, ResultAggregate, build_result_aggregate, cgpa,
    classify_grade, compute_sgpa, courses_frame, grade_point_for, sgpa_status,
)


def course(code, credit, gp, grade="B", title=None):
    return {"course_code": code, "course_title": title or f"Course {code}",
            "credit": credit, "grade": grade, "grade_point": gp}


SEMESTER = [
    course("CSE101", 3, 2.50, "C+"),
    course("CSE102", 1.5, 3.00, "B"),
    course("MAT101", 3, 2.50, "C+"),
    course("PHY102", 1.5, 2.75, "B-"),
    course("ENG101", 3, 2.50, "C+"),
]


class TestComputeSgpa:
    def test_empty(self):
        assert compute_sgpa([]) == "0.00"
        assert compute_sgpa(None) == "0.00"

    def test_zero_credit(self):
        assert compute_sgpa([course("X", 0, 4.0), course("Y", 0, 3.0)]) == "0.00"

    def test_weighted_mean(self):
        # 31.125 / 12
        assert compute_sgpa(SEMESTER) == "2.59"
        assert compute_sgpa([course("A", 3, 4.0), course("B", 3, 3.0)]) == "3.50"

    @pytest.mark.parametrize("gp,expected", [("2.675", "2.68"), ("2.665", "2.67"), ("2.664", "2.66")])
    def test_rounds_half_up(self, gp, expected):
        assert compute_sgpa([course("A", 1, gp)]) == expected

    def test_accepts_course_records_and_string_numbers(self):
        agg = build_result_aggregate("1", "Semester 1", [course("A", "3", "4.00")])
        assert compute_sgpa(agg.courses) == "4.00"
        assert compute_sgpa([course("A", "3.0", "3.25")]) == "3.25"


class TestBuildResultAggregate:
    def test_totals_and_order(self):
        agg = build_result_aggregate(123456, "Semester 2", SEMESTER)

        assert isinstance(agg, ResultAggregate)
        assert agg.student_id == "123456"
        assert agg.semester_label == "Semester 2"
        assert agg.total_credit == Decimal("12")
        assert agg.sgpa == "2.59"
        assert [c.course_code for c in agg.courses] == [c["course_code"] for c in SEMESTER]
        assert [c.sl for c in agg.courses] == [1, 2, 3, 4, 5]

    def test_does_not_dedupe(self):
        agg = build_result_aggregate("1", "S", [course("A", 3, 4.0), course("A", 3, 4.0)])
        assert len(agg.courses) == 2
        assert agg.total_credit == Decimal("6")

    def test_single_object_normalized(self):
        agg = build_result_aggregate("1", "Semester 1", course("CSE101", 3, 3.75, "A"))
        assert len(agg.courses) == 1
        c = agg.courses[0]
        assert c == CourseRecord(1, "CSE101", "Course CSE101", Decimal("3"), "A", Decimal("3.75"))
        assert agg.sgpa == "3.75"

    def test_empty(self):
        agg = build_result_aggregate("1", "Semester 1", [])
        assert agg.courses == []
        assert agg.total_credit == 0
        assert agg.sgpa == "0.00"
        assert agg.student_name == "Student"

    def test_missing_numbers_count_as_zero(self):
        agg = build_result_aggregate("1", "S", [{"course_code": "X", "grade": "F"}])
        assert agg.courses[0].credit == 0
        assert agg.sgpa == "0.00"


class TestClassifyGrade:
    @pytest.mark.parametrize("grade,band", [
        ("A+", GradeBand.A_TIER), ("A", GradeBand.A_TIER), ("A-", GradeBand.A_TIER),
        ("B+", GradeBand.B_TIER), ("B", GradeBand.B_TIER), ("B-", GradeBand.B_TIER),
        ("C+", GradeBand.C_TIER), ("C", GradeBand.C_TIER),
        ("D", GradeBand.D), ("F", GradeBand.F),
        (" b+ ", GradeBand.B_TIER),
    ])
    def test_known(self, grade, band):
        assert classify_grade(grade) is band

    @pytest.mark.parametrize("grade", ["", "E", "A++", "Pass", None, 4.0])
    def test_unknown(self, grade):
        assert classify_grade(grade) is GradeBand.UNKNOWN


def test_grading_scale_points():
    assert len(GRADING_SCALE) == 10
    assert grade_point_for("A+") == Decimal("4.00")
    assert grade_point_for("C") == Decimal("2.25")
    assert grade_point_for("Z") is None


@pytest.mark.parametrize("sgpa,status", [
    ("4.00", "Excellent"), ("3.75", "Excellent"), ("3.60", "Very Good"), ("3.25", "Good"),
    ("3.10", "Satisfactory"), ("2.00", "Pass"), ("1.99", "Needs Improvement"), ("0.00", "Needs Improvement"),
])
def test_sgpa_status(sgpa, status):
    assert sgpa_status(sgpa) == status


def test_cgpa_weights_all_courses():
    s1 = build_result_aggregate("1", "Semester 1", [course("A", 3, 4.0)])
    s2 = build_result_aggregate("1", "Semester 2", [course("B", 1, 2.0)])
    assert cgpa([s1, s2]) == "3.50"
    assert cgpa([]) == "0.00"


def test_courses_frame():
    df = courses_frame(build_result_aggregate("1", "S", SEMESTER[:2]))
    assert list(df.columns) == ["SL", "Code", "Title", "Credit", "Grade", "GP"]
    assert df["Code"].tolist() == ["CSE101", "CSE102"]
    assert df["Credit"].tolist() == ["3.00", "1.50"]
    assert courses_frame(build_result_aggregate("1", "S", [])).empty


def test_missing_grade_point_taken_from_scale():
    agg = build_result_aggregate("1", "S", [
        {"course_code": "A", "credit": 3, "grade": "A-"},
        {"course_code": "B", "credit": 3, "grade": "B+", "grade_point": ""},
        {"course_code": "C", "credit": 3, "grade": "?", "grade_point": None},
    ])
    assert [c.grade_point for c in agg.courses] == [Decimal("3.50"), Decimal("3.25"), Decimal("0")]
    assert agg.sgpa == "2.25"
