from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum

import pandas as pd

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

# marks, grade, grade point, remark
GRADING_SCALE = [
    ("80-100", "A+", Decimal("4.00"), "Outstanding"),
    ("75-79",  "A",  Decimal("3.75"), "Excellent"),
    ("70-74",  "A-", Decimal("3.50"), "Very Good"),
    ("65-69",  "B+", Decimal("3.25"), "Good"),
    ("60-64",  "B",  Decimal("3.00"), "Satisfactory"),
    ("55-59",  "B-", Decimal("2.75"), "Above Average"),
    ("50-54",  "C+", Decimal("2.50"), "Average"),
    ("45-49",  "C",  Decimal("2.25"), "Below Average"),
    ("40-44",  "D",  Decimal("2.00"), "Pass"),
    ("00-39",  "F",  Decimal("0.00"), "Fail"),
]
GRADE_POINTS = {g: gp for _, g, gp, _ in GRADING_SCALE}


class GradeBand(str, Enum):
    A_TIER = "A-tier"
    B_TIER = "B-tier"
    C_TIER = "C-tier"
    D = "D"
    F = "F"
    UNKNOWN = "Unknown"


_BANDS = {
    "A+": GradeBand.A_TIER, "A": GradeBand.A_TIER, "A-": GradeBand.A_TIER,
    "B+": GradeBand.B_TIER, "B": GradeBand.B_TIER, "B-": GradeBand.B_TIER,
    "C+": GradeBand.C_TIER, "C": GradeBand.C_TIER,
    "D": GradeBand.D,
    "F": GradeBand.F,
}


@dataclass(frozen=True)
class CourseRecord:
    sl: int
    course_code: str
    course_title: str
    credit: Decimal
    grade: str
    grade_point: Decimal


@dataclass(frozen=True)
class ResultAggregate:
    student_id: str
    semester_label: str
    courses: list[CourseRecord] = field(default_factory=list)
    total_credit: Decimal = ZERO
    sgpa: str = "0.00"
    student_name: str = "Student"


def _dec(x) -> Decimal:
    if x is None or isinstance(x, bool):
        return ZERO
    try:
        v = Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return v if v.is_finite() else ZERO


def _get(c, snake: str, camel: str):
    if isinstance(c, CourseRecord):
        return getattr(c, snake)
    if not isinstance(c, dict):
        return None
    return c.get(snake, c.get(camel))


def _fmt2(v: Decimal) -> str:
    return str(v.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _weighted(pairs) -> str:
    points = credits = ZERO
    for gp, cr in pairs:
        points += gp * cr
        credits += cr
    if credits == 0:
        return "0.00"
    return _fmt2(points / credits)


def compute_sgpa(courses) -> str:
    """Credit-weighted mean of grade points, as a 2-place string.

    Accepts CourseRecord objects or raw backend dicts (snake_case or camelCase).
    Empty input and zero total credit both give "0.00".
    """
    if not courses:
        return "0.00"
    return _weighted(
        (_dec(_get(c, "grade_point", "gradePoint")), _dec(_get(c, "credit", "credit"))) for c in courses
    )


def normalize_list(raw) -> list:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]


def to_course_record(raw, sl: int) -> CourseRecord:
    grade = str(_get(raw, "grade", "grade") or "")
    gp = _get(raw, "grade_point", "gradePoint")
    if gp is None or gp == "":
        # backend left the point out; fall back to the grading scale
        gp = grade_point_for(grade)
    return CourseRecord(
        sl=sl,
        course_code=str(_get(raw, "course_code", "courseCode") or ""),
        course_title=str(_get(raw, "course_title", "courseTitle") or ""),
        credit=_dec(_get(raw, "credit", "credit")),
        grade=grade,
        grade_point=_dec(gp),
    )


def build_result_aggregate(student_id, semester_label: str, raw_courses, student_name: str | None = None) -> ResultAggregate:
    courses = [to_course_record(c, i) for i, c in enumerate(normalize_list(raw_courses), start=1)]
    return ResultAggregate(
        student_id=str(student_id),
        semester_label=semester_label,
        courses=courses,
        total_credit=sum((c.credit for c in courses), ZERO),
        sgpa=compute_sgpa(courses),
        student_name=student_name or "Student",
    )


def classify_grade(grade) -> GradeBand:
    key = grade.strip().upper() if isinstance(grade, str) else None
    return _BANDS.get(key, GradeBand.UNKNOWN)


def grade_point_for(grade) -> Decimal | None:
    return GRADE_POINTS.get(grade.strip().upper()) if isinstance(grade, str) else None


def sgpa_status(sgpa) -> str:
    v = _dec(sgpa)
    if v >= Decimal("3.75"): return "Excellent"
    if v >= Decimal("3.50"): return "Very Good"
    if v >= Decimal("3.25"): return "Good"
    if v >= Decimal("3.00"): return "Satisfactory"
    if v >= Decimal("2.00"): return "Pass"
    return "Needs Improvement"


def cgpa(aggregates) -> str:
    """Cumulative GPA over several semesters, weighted by every course credit."""
    return _weighted((c.grade_point, c.credit) for a in (aggregates or []) for c in a.courses)


def courses_frame(aggregate: ResultAggregate) -> pd.DataFrame:
    cols = ["SL", "Code", "Title", "Credit", "Grade", "GP"]
    if aggregate is None or not aggregate.courses:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame(
        [[c.sl, c.course_code, c.course_title, _fmt2(c.credit), c.grade, _fmt2(c.grade_point)]
         for c in aggregate.courses],
        columns=cols,
    )

