#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Command Line Interface
Трекер привычек: сервер состояния и консольный клиент

Версия: 1.0.0
Дата: 2025-07-02
"""

import argparse
import asyncio
import logging
import shlex
import sys
from typing import List, Optional

from config import ClientConfig, ConfigError, load_config
from core.store import HabitStore
from services.persistence import PersistenceGateway
from services.tracker_service import TrackerService
from ui import messages
from utils.datetime_utils import parse_date_key, parse_month_key
from utils.logger import setup_logger

logger = logging.getLogger(__name__)

MUTATING_COMMANDS = {"add", "rename", "delete", "cycle", "shell"}

SHELL_HELP = """Команды:
  add <name>                 добавить привычку
  rename <id> <name>         переименовать
  delete <id>                удалить
  cycle <id> [YYYY-MM-DD]    сменить статус (пусто -> ✅ -> ➖ -> пусто)
  undo                       отменить последнее действие
  day [YYYY-MM-DD]           отметки за день
  habits | report [YYYY-MM] | year [YYYY] | help | quit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dailygrid", description="Трекер ежедневных привычек")
    parser.add_argument('--verbose', action='store_true', help='Подробные логи')
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Запустить сервер состояния")
    serve.add_argument('--host', default=None, help='Host для запуска')
    serve.add_argument('--port', type=int, default=None, help='Port для запуска')
    serve.add_argument('--dev', action='store_true', help='Режим разработки')
    serve.add_argument('--reload', action='store_true', help='Автоперезагрузка')

    sub.add_parser("habits", help="Список привычек")

    add = sub.add_parser("add", help="Добавить привычку")
    add.add_argument("name")

    rename = sub.add_parser("rename", help="Переименовать привычку")
    rename.add_argument("habit_id")
    rename.add_argument("name")

    delete = sub.add_parser("delete", help="Удалить привычку")
    delete.add_argument("habit_id")

    cycle = sub.add_parser("cycle", help="Сменить статус привычки за день")
    cycle.add_argument("habit_id")
    cycle.add_argument("--date", type=parse_date_key, default=None, help="YYYY-MM-DD, по умолчанию сегодня")

    day = sub.add_parser("day", help="Отметки за день")
    day.add_argument("--date", type=parse_date_key, default=None)

    report = sub.add_parser("report", help="Статистика за месяц")
    report.add_argument("--month", type=parse_month_key, default=None, help="YYYY-MM")

    year = sub.add_parser("year", help="Статистика за год")
    year.add_argument("--year", type=int, default=None)

    sub.add_parser("shell", help="Интерактивный режим с undo")
    return parser


def _print(text: str) -> None:
    print(text, flush=True)


def unavailable_warning(base_url: str) -> str:
    return f"⚠️ Сервер {base_url} недоступен, показаны пустые данные"

# ===== КОМАНДЫ =====

def execute(service: TrackerService, command: str, args: List[str]) -> bool:
    """Выполнить одну команду клиента. False - команда не принята"""
    store = service.store

    if command == "habits":
        _print(messages.habits_list_message(store.habits))
    elif command == "add":
        habit = store.add_habit(" ".join(args))
        if habit is None:
            _print("Имя привычки не может быть пустым")
            return False
        _print(f"➕ {habit.name} [{habit.id}]")
    elif command == "rename":
        if len(args) < 2 or not store.rename_habit(args[0], " ".join(args[1:])):
            _print("Привычка не найдена или имя пустое")
            return False
        _print("✏️ Переименовано")
    elif command == "delete":
        if not args or not store.delete_habit(args[0]):
            _print("Привычка не найдена")
            return False
        _print("🗑 Удалено")
    elif command == "cycle":
        if not args:
            _print("Укажите id привычки")
            return False
        day = parse_date_key(args[1]) if len(args) > 1 else service.today()
        if store.cycle_status(day.isoformat(), args[0]) is None:
            _print("Привычка не найдена")
            return False
        _print(messages.day_message(day, store.habits, store.completions))
    elif command == "undo":
        if not store.undo():
            _print("Нечего отменять")
            return False
        _print("↩️ Отменено")
    elif command == "day":
        day = parse_date_key(args[0]) if args else service.today()
        _print(messages.day_message(day, store.habits, store.completions))
    elif command == "report":
        month = parse_month_key(args[0]) if args else None
        _print(messages.month_report_message(service.month_report(month)))
    elif command == "year":
        year = int(args[0]) if args else service.today().year
        _print(messages.year_report_message(year, service.year_report(year)))
    else:
        _print(f"Неизвестная команда: {command}\n{SHELL_HELP}")
        return False
    return True


def _command_args(args: argparse.Namespace) -> List[str]:
    if args.command == "add":
        return [args.name]
    if args.command == "rename":
        return [args.habit_id, args.name]
    if args.command == "delete":
        return [args.habit_id]
    if args.command == "cycle":
        return [args.habit_id] + ([args.date.isoformat()] if args.date else [])
    if args.command == "day":
        return [args.date.isoformat()] if args.date else []
    if args.command == "report":
        return [args.month.strftime("%Y-%m")] if args.month else []
    if args.command == "year":
        return [str(args.year)] if args.year else []
    return []


async def run_shell(service: TrackerService) -> None:
    loop = asyncio.get_running_loop()
    _print(SHELL_HELP)
    while True:
        try:
            line = await loop.run_in_executor(None, input, "dailygrid> ")
        except EOFError:
            break

        try:
            parts = shlex.split(line)
        except ValueError as e:
            _print(f"Ошибка разбора: {e}")
            continue
        if not parts:
            continue

        command, rest = parts[0], parts[1:]
        if command in ("quit", "exit"):
            break
        if command == "help":
            _print(SHELL_HELP)
            continue

        try:
            execute(service, command, rest)
        except ValueError as e:
            _print(f"Некорректный аргумент: {e}")


async def run_client(args: argparse.Namespace, cfg: ClientConfig) -> int:
    store = HabitStore(undo_capacity=cfg.tracker.undo_capacity)
    async with PersistenceGateway(cfg.api.base_url, timeout=cfg.api.request_timeout) as gateway:
        service = TrackerService(store, gateway, timezone=cfg.tracker.timezone)

        if not await service.hydrate():
            if args.command in MUTATING_COMMANDS:
                _print(f"❌ Сервер {cfg.api.base_url} недоступен, изменения не будут сохранены")
                return 1
            _print(unavailable_warning(cfg.api.base_url))

        if args.command == "shell":
            await run_shell(service)
            ok = True
        else:
            ok = execute(service, args.command, _command_args(args))

        await service.drain()
        if service.saves_failed:
            _print(f"⚠️ Не сохранено изменений: {service.saves_failed}")
            return 1
    return 0 if ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        from dashboard.app import run_dashboard
        run_dashboard(host=args.host, port=args.port, dev=args.dev or None, reload=args.reload)
        return 0

    try:
        cfg = load_config()
    except ConfigError as e:
        _print(f"❌ {e}")
        return 2

    level = "DEBUG" if args.verbose else cfg.logging.level.value
    if cfg.logging.log_to_file:
        setup_logger(str(cfg.logging.log_file), level=level, console=args.verbose)
    else:
        logging.basicConfig(level=level)

    return asyncio.run(run_client(args, cfg))


if __name__ == "__main__":
    sys.exit(main())
