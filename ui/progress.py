# ui/progress.py

from core.models import HabitStatus

STATUS_MARKS = {
    HabitStatus.DONE: "✅",
    HabitStatus.SKIPPED: "➖",
    HabitStatus.UNSET: "⬜️",
}


def progress_bar(percent: int, length: int = 12):
    """Генерирует текстовый progress bar (блоки)"""
    percent = max(0, min(percent, 100))
    done = int(length * percent // 100)
    todo = length - done
    return "█" * done + "░" * todo + f" {percent}%"


def status_mark(status: HabitStatus) -> str:
    return STATUS_MARKS[status]


def month_bar(percent: int, is_future: bool, length: int = 20):
    if is_future:
        return "·" * length + "   —"
    return progress_bar(percent, length)
