"""HTTP client for scripting against the expense tracker API.

Mirrors what the browser frontend does: register/login store the returned
token and every later call sends it as a bearer credential.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests

DEFAULT_BASE_URL = "http://localhost:3000"


class ApiError(RuntimeError):
    """Raised for non-2xx responses, carrying the server's ``error`` message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _clean(payload: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, date):
            value = value.isoformat()
        else:
            value = str(value) if key.endswith("_id") else value
        cleaned[key] = value
    return cleaned


class ExpenseClient:
    """Thin wrapper over the ``/api`` endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        session: Optional[Any] = None,
        timeout: float = 5,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, *, auth: bool = True, **kwargs: Any) -> Any:
        headers = {}
        if auth:
            if not self.token:
                raise ApiError(401, "No token found")
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )
        if response.status_code >= 400:
            try:
                message = response.json().get("error", "")
            except ValueError:
                message = response.text
            raise ApiError(response.status_code, str(message))
        if response.status_code == 204:
            return None
        return response.json()

    def health(self) -> Dict[str, str]:
        return self._request("GET", "/health", auth=False)

    # auth

    def register(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        payload = {"email": email, "password": password, "full_name": full_name}
        auth = self._request("POST", "/api/auth/register", auth=False, json=payload)
        self.token = auth["token"]
        return auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        auth = self._request("POST", "/api/auth/login", auth=False, json={"email": email, "password": password})
        self.token = auth["token"]
        return auth

    def logout(self) -> None:
        self.token = None

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/users/me")

    # categories

    def list_categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/categories")

    def create_category(self, name: str, color: Optional[str] = None, icon: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/api/categories", json=_clean({"name": name, "color": color, "icon": icon}))

    def get_category(self, category_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/categories/{category_id}")

    def update_category(self, category_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/api/categories/{category_id}", json=fields)

    def delete_category(self, category_id: str) -> None:
        self._request("DELETE", f"/api/categories/{category_id}")

    # expenses

    def list_expenses(
        self,
        start_date: Optional[date | str] = None,
        end_date: Optional[date | str] = None,
        category_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = _clean({"start_date": start_date, "end_date": end_date, "category_id": category_id})
        return self._request("GET", "/api/expenses", params=params)

    def create_expense(
        self,
        category_id: str,
        amount: Decimal | str,
        description: str,
        expense_date: date | str,
    ) -> Dict[str, Any]:
        payload = _clean(
            {
                "category_id": category_id,
                "amount": amount,
                "description": description,
                "expense_date": expense_date,
            }
        )
        return self._request("POST", "/api/expenses", json=payload)

    def get_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/expenses/{expense_id}")

    def update_expense(self, expense_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/api/expenses/{expense_id}", json=_clean(fields))

    def delete_expense(self, expense_id: str) -> None:
        self._request("DELETE", f"/api/expenses/{expense_id}")

    # summaries

    def monthly_summary(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/summaries/monthly")

    def category_summary(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/summaries/categories")
