from __future__ import annotations
import logging

from ..data.frames import build_result_aggregate, normalize_list
from ..errors import PortalError

log = logging.getLogger(__name__)


class StudentService:
    """Backend calls for one student. Failures come back as {"success": False, "message"}."""

    def __init__(self, api_client, auth=None):
        self.client = api_client
        self.auth = auth

    def _call(self, method, path, default_error, json=None):
        try:
            if self.auth is not None and self.auth.get_token():
                r = self.auth.authenticated_request(method, path, json=json)
                data = self.client.json_or_error(r, default_error)
            else:
                data = self.client.fetch_json(method, path, default_error, json=json)
        except PortalError as e:
            log.warning("%s %s: %s", method, path, e)
            return {"success": False, "message": str(e) or default_error}
        return {"success": True, "data": data}

    def get_payment_info(self, student_id):
        return self._call("GET", f"/students/{student_id}/payments", "Failed to fetch payment info")

    def get_payment_history(self, student_id):
        return self._call("GET", f"/students/{student_id}/payments/history", "Failed to fetch payment history")

    def make_payment(self, student_id, payment: dict):
        return self._call("POST", f"/students/{student_id}/payments", "Payment failed", json=payment)

    def get_personal_info(self, student_id):
        return self._call("GET", f"/students/{student_id}/personal", "Failed to fetch personal info")

    def get_academic_info(self, student_id):
        return self._call("GET", f"/students/{student_id}/academic", "Failed to fetch academic info")

    def get_available_semesters(self, student_id):
        res = self._call("GET", f"/students/{student_id}/semesters", "Failed to fetch available semesters")
        if res["success"]:
            res["data"] = [s for s in normalize_list(res["data"]) if isinstance(s, dict)]
        return res

    def get_semester_result(self, student_id, semester_id, student_name=None):
        res = self._call("GET", f"/students/{student_id}/results/{semester_id}", "Failed to fetch result data")
        if res["success"]:
            res["data"] = build_result_aggregate(
                student_id, f"Semester {semester_id}", res["data"], student_name=student_name
            )
        return res
