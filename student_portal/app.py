from __future__ import annotations
import argparse
import getpass
import sys
from datetime import timedelta

import pandas as pd

from .api.client import APIClient
from .config import Settings, configure_logging, load_settings
from .data.frames import courses_frame, sgpa_status
from .routes import LOGIN, resolve_route
from .services.auth_service import AuthService
from .services.student_service import StudentService
from .state.store import FileSessionStore

RETRY_HINT = "Please try again or contact support if the issue persists."


class App:
    def __init__(self, settings: Settings | None = None, auth: AuthService | None = None,
                 students: StudentService | None = None, out=None):
        self.settings = settings or load_settings()
        if auth is None:
            client = APIClient(base_url=self.settings.api_base_url, timeout=self.settings.request_timeout)
            auth = AuthService(
                client, FileSessionStore(self.settings.session_file),
                max_age=timedelta(hours=self.settings.session_max_age_hours),
            )
        self.auth = auth
        self.students = students or StudentService(auth.client, auth)
        self.out = out or sys.stdout

    def echo(self, text=""):
        print(text, file=self.out)

    def fail(self, message) -> int:
        self.echo(f"Error: {message}")
        self.echo(RETRY_HINT)
        return 1

    def guard(self, route: str):
        """Return the signed-in user, or None after telling them to log in."""
        if resolve_route(route, self.auth) == LOGIN:
            self.echo("Not logged in. Run `student-portal login <student id>` first.")
            return None
        return self.auth.get_user_info()

    # ---- views ----
    def cmd_login(self, student_id: str, password: str | None = None) -> int:
        if resolve_route(LOGIN, self.auth) != LOGIN:
            self.echo(f"Already logged in as {self.auth.get_user_info().student_id}.")
            return 0
        if not (student_id or "").strip():
            self.echo("Student ID and password are required.")
            return 1
        password = password if password is not None else getpass.getpass("Password: ")
        if not password:
            self.echo("Student ID and password are required.")
            return 1
        res = self.auth.login(student_id.strip(), password)
        if not res["success"]:
            self.echo(res["message"])
            return 1
        self.echo(f"Welcome, {res['user'].student_id}.")
        return 0

    def cmd_logout(self) -> int:
        self.auth.logout()
        self.echo("Logged out.")
        return 0

    def cmd_whoami(self) -> int:
        user = self.guard("/dashboard")
        if user is None:
            return 1
        self.echo(f"Student ID: {user.student_id}")
        for label, v in (("Name", user.name), ("Email", user.email), ("Department", user.department)):
            if v:
                self.echo(f"{label}: {v}")
        return 0

    def _print_mapping(self, title: str, data):
        self.echo(title)
        if isinstance(data, dict):
            for k, v in data.items():
                self.echo(f"  {k}: {v if v not in (None, '') else '—'}")
        else:
            self.echo(f"  {data}")

    def cmd_profile(self) -> int:
        user = self.guard("/profile")
        if user is None:
            return 1
        personal = self.students.get_personal_info(user.student_id)
        if not personal["success"]:
            return self.fail(personal["message"])
        self._print_mapping("Personal information", personal["data"])
        academic = self.students.get_academic_info(user.student_id)
        if not academic["success"]:
            return self.fail(academic["message"])
        self._print_mapping("Academic information", academic["data"])
        return 0

    def cmd_payments(self) -> int:
        user = self.guard("/dashboard")
        if user is None:
            return 1
        res = self.students.get_payment_info(user.student_id)
        if not res["success"]:
            return self.fail(res["message"])
        self._print_mapping("Payments", res["data"])
        return 0

    def cmd_semesters(self) -> int:
        user = self.guard("/result")
        if user is None:
            return 1
        res = self.students.get_available_semesters(user.student_id)
        if not res["success"]:
            return self.fail(res["message"])
        if not res["data"]:
            self.echo("No semesters available.")
        for s in res["data"]:
            self.echo(f"{s.get('id')}\t{s.get('name', '')}")
        return 0

    def cmd_result(self, semester_id) -> int:
        user = self.guard("/result")
        if user is None:
            return 1
        res = self.students.get_semester_result(user.student_id, semester_id, student_name=user.name)
        if not res["success"]:
            return self.fail(res["message"])
        agg = res["data"]
        self.echo(f"{agg.student_name} ({agg.student_id}) - {agg.semester_label}")
        df = courses_frame(agg)
        if df.empty:
            self.echo("No courses found for this semester.")
        else:
            with pd.option_context("display.max_colwidth", 48, "display.width", 120):
                self.echo(df.to_string(index=False))
        self.echo(f"Total credit: {agg.total_credit}   SGPA: {agg.sgpa} ({sgpa_status(agg.sgpa)})")
        return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="student-portal", description="Student portal client")
    sub = p.add_subparsers(dest="command", required=True)
    lg = sub.add_parser("login", help="log in with student id (password is prompted)")
    lg.add_argument("student_id")
    sub.add_parser("logout", help="forget the saved session")
    sub.add_parser("whoami", help="show the logged-in student")
    sub.add_parser("profile", help="personal and academic information")
    sub.add_parser("payments", help="payment summary")
    sub.add_parser("semesters", help="list semesters with results")
    rs = sub.add_parser("result", help="semester result and SGPA")
    rs.add_argument("semester")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)
    app = App(settings)
    if args.command == "login":
        return app.cmd_login(args.student_id)
    if args.command == "result":
        return app.cmd_result(args.semester)
    return getattr(app, f"cmd_{args.command}")()
