"""
Synthetic values for the seed run.

Every function takes the random source explicitly so a seeded ``random.Random``
reproduces a run exactly. Names are the exception: they are derived from the
row index alone.
"""
import random
import string
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Sequence

from app.models.attendance import CLOCKED_STATUSES

# (ideogram, pinyin)
SURNAMES = (
    ("张", "zhang"), ("王", "wang"), ("李", "li"), ("赵", "zhao"), ("刘", "liu"),
    ("陈", "chen"), ("杨", "yang"), ("黄", "huang"), ("周", "zhou"), ("吴", "wu"),
    ("徐", "xu"), ("孙", "sun"), ("马", "ma"), ("朱", "zhu"), ("胡", "hu"),
    ("郭", "guo"), ("何", "he"), ("高", "gao"), ("林", "lin"), ("罗", "luo"),
    ("郑", "zheng"), ("梁", "liang"), ("谢", "xie"), ("宋", "song"), ("唐", "tang"),
    ("许", "xu"), ("韩", "han"), ("冯", "feng"), ("邓", "deng"), ("曹", "cao"),
    ("彭", "peng"), ("曾", "zeng"), ("肖", "xiao"), ("田", "tian"), ("董", "dong"),
    ("袁", "yuan"), ("潘", "pan"), ("于", "yu"), ("蒋", "jiang"), ("蔡", "cai"),
    ("余", "yu"), ("杜", "du"), ("叶", "ye"), ("程", "cheng"), ("苏", "su"),
    ("魏", "wei"), ("吕", "lv"), ("丁", "ding"), ("任", "ren"), ("沈", "shen"),
    ("姚", "yao"), ("卢", "lu"), ("姜", "jiang"), ("崔", "cui"), ("钟", "zhong"),
    ("谭", "tan"), ("陆", "lu"), ("汪", "wang"), ("范", "fan"), ("金", "jin"),
    ("石", "shi"), ("廖", "liao"), ("贾", "jia"), ("夏", "xia"), ("韦", "wei"),
    ("付", "fu"), ("方", "fang"), ("白", "bai"), ("邹", "zou"), ("孟", "meng"),
    ("熊", "xiong"), ("秦", "qin"), ("邱", "qiu"), ("江", "jiang"), ("尹", "yin"),
    ("薛", "xue"), ("闫", "yan"), ("段", "duan"), ("雷", "lei"), ("侯", "hou"),
    ("龙", "long"), ("史", "shi"), ("陶", "tao"), ("黎", "li"), ("贺", "he"),
    ("顾", "gu"), ("毛", "mao"), ("郝", "hao"), ("龚", "gong"), ("邵", "shao"),
    ("万", "wan"), ("钱", "qian"), ("严", "yan"), ("覃", "qin"), ("武", "wu"),
    ("戴", "dai"), ("莫", "mo"), ("孔", "kong"), ("向", "xiang"), ("汤", "tang"),
)

GIVEN_NAMES = (
    ("伟", "wei"), ("芳", "fang"), ("娜", "na"), ("秀英", "xiuying"), ("敏", "min"),
    ("静", "jing"), ("强", "qiang"), ("磊", "lei"), ("军", "jun"), ("洋", "yang"),
    ("勇", "yong"), ("艳", "yan"), ("杰", "jie"), ("娟", "juan"), ("涛", "tao"),
    ("明", "ming"), ("超", "chao"), ("秀兰", "xiulan"), ("霞", "xia"), ("平", "ping"),
    ("刚", "gang"), ("龙", "long"), ("飞", "fei"), ("宇", "yu"), ("宁", "ning"),
    ("峰", "feng"), ("鹏", "peng"), ("浩", "hao"), ("波", "bo"), ("辉", "hui"),
    ("斌", "bin"), ("晶", "jing"), ("莹", "ying"), ("雪", "xue"), ("霜", "shuang"),
    ("露", "lu"), ("雷", "lei"), ("霆", "ting"), ("晨", "chen"), ("曦", "xi"),
)

EMAIL_DOMAIN = "example.com"
_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


class PersonName(NamedTuple):
    surname: str
    given_name: str
    surname_pinyin: str
    given_name_pinyin: str


def generate_name(index: int = 0) -> PersonName:
    """
    Map an index onto the name tables.

    The quotient terms shift the offset on every wrap-around, so consecutive
    blocks of indexes do not repeat the same pairs.
    """
    s, g = len(SURNAMES), len(GIVEN_NAMES)
    si = (index % s + (index // s) % 5) % s
    gi = (index % g + (index // g) % 3) % g
    surname, surname_pinyin = SURNAMES[si]
    given, given_pinyin = GIVEN_NAMES[gi]
    return PersonName(surname, given, surname_pinyin, given_pinyin)


def generate_email(name: PersonName, index: int, rng: random.Random) -> str:
    # Not checked for collisions; the unique constraint on employees.email is the only guard
    suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{name.surname_pinyin}{name.given_name_pinyin}{index}_{suffix}@{EMAIL_DOMAIN}"


def generate_phone(rng: random.Random) -> str:
    return "1" + str(rng.randint(1_000_000_000, 9_999_999_999))


def random_date(rng: random.Random, start: date, end: date) -> date:
    if end <= start:
        return start
    return start + timedelta(days=rng.randint(0, (end - start).days))


def business_days(end: date, start_offset: int, stop_offset: int) -> list[date]:
    """Weekdays lying ``start_offset`` to ``stop_offset - 1`` days before ``end``, newest first."""
    days = []
    for offset in range(start_offset, stop_offset):
        day = end - timedelta(days=offset)
        if day.weekday() < 5:
            days.append(day)
    return days


class WeightedSampler:
    """
    Pick a label with probability proportional to its weight.

    Weights are expected to sum to 1.0. A uniform draw is matched against the
    running cumulative weight; if rounding leaves the draw above the final
    cumulative value, ``default`` is returned.
    """

    def __init__(self, choices: Sequence[tuple[str, float]], default: str | None = None):
        if not choices:
            raise ValueError("WeightedSampler needs at least one choice")
        total = sum(w for _, w in choices)
        if any(w < 0 for _, w in choices) or abs(total - 1.0) > 1e-6:
            raise ValueError(f"weights must be non-negative and sum to 1.0, got {total}")
        self.choices = tuple(choices)
        self.default = default if default is not None else self.choices[0][0]

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(label for label, _ in self.choices)

    def sample(self, rng: random.Random) -> str:
        draw = rng.random()
        cumulative = 0.0
        for label, weight in self.choices:
            cumulative += weight
            if draw <= cumulative:
                return label
        return self.default


EMPLOYEE_STATUS_SAMPLER = WeightedSampler(
    [("active", 0.70), ("resigned", 0.15), ("on_leave", 0.10), ("inactive", 0.05)],
    default="active",
)

ATTENDANCE_STATUS_SAMPLER = WeightedSampler(
    [
        ("present", 0.85),
        ("late", 0.05),
        ("early_leave", 0.03),
        ("absent", 0.04),
        ("sick_leave", 0.02),
        ("annual_leave", 0.01),
    ],
    default="present",
)


class ClockTimes(NamedTuple):
    check_in: time | None
    check_out: time | None
    overtime_hours: float


def generate_clock_times(rng: random.Random, status: str) -> ClockTimes:
    """
    Check-in between 08:00 and 13:59 (late arrivals shifted one hour), check-out
    8 to 10 hours after the check-in. Only present/late rows get times; 30% of
    those also get 1-4 hours of overtime.
    """
    if status not in CLOCKED_STATUSES:
        return ClockTimes(None, None, 0.0)

    base_hour = rng.randint(8, 12)
    in_hour = min(base_hour + 1, 13) if status == "late" else base_hour
    check_in = time(in_hour, rng.randint(0, 59))

    # latest check-in is 13:59, so check-out stays on the same day
    worked = timedelta(minutes=rng.randint(8 * 60, 10 * 60))
    check_out = (datetime.combine(date.min, check_in) + worked).time()

    overtime = round(rng.uniform(1, 4), 2) if rng.random() > 0.7 else 0.0
    return ClockTimes(check_in, check_out, overtime)
