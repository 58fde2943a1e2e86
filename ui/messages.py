from datetime import date

from ui.progress import month_bar, progress_bar, status_mark


def habits_list_message(habits):
    if not habits:
        return "Привычек пока нет. Добавьте первую: dailygrid add \"Название\""
    return "Ваши привычки:\n" + "\n".join(
        [f"{idx + 1}. {habit.name}  [{habit.id}]" for idx, habit in enumerate(habits)]
    )


def day_message(day: date, habits, completions):
    """Отметки всех привычек за день"""
    key = day.isoformat()
    lines = [f"📅 {key}"]
    for habit in habits:
        lines.append(f"{status_mark(completions.get(key, habit.id))} {habit.name}")
    return "\n".join(lines)


def month_report_message(report):
    overall = report["overall"]
    quota = report["quota"]
    lines = [
        f"📊 {report['month'].strftime('%B %Y')}",
        f"Выполнено: {overall.completed_count} из {overall.eligible_count} ({quota['completed']}%)",
        progress_bar(overall.percentage, 24),
        "",
    ]

    if not report["habits"]:
        lines.append("Нет привычек для статистики")
        return "\n".join(lines)

    width = max(len(item["name"]) for item in report["habits"])
    for item in report["habits"]:
        lines.append(
            f"{item['name']:<{width}}  {item['completed_count']:>2}/{item['eligible_count']:<2} "
            + progress_bar(item["percentage"])
        )
    return "\n".join(lines)


def year_report_message(year: int, months):
    lines = [f"📈 {year}"]
    for month in months:
        lines.append(f"{month.name:<4} {month_bar(month.percentage, month.is_future)}")
    return "\n".join(lines)
