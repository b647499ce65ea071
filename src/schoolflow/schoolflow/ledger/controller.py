from __future__ import annotations

from flask import Flask, request

from ..common.http import json_endpoint, ok
from ..container import Container
from ..core.constants import DEFAULT_TRANSACTION_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/transactions", methods=["GET"], endpoint="list_transactions")
    @json_endpoint
    def list_transactions():
        try:
            limit = int(request.args.get("limit", DEFAULT_TRANSACTION_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer")
        if limit <= 0:
            raise ValidationError("limit must be greater than zero")

        rows = container.repos.transactions.list_recent(limit)
        return ok({"transactions": [t.as_dict() for t in rows]})
