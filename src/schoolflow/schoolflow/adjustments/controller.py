from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok, optional_date
from ..container import Container
from ..core.exceptions import NotFoundError
from .service import AdjustmentLedger


def register(app: Flask, container: Container) -> None:
    ledgers = {
        "student": container.student_adjustments,
        "payroll": container.payroll_adjustments,
    }

    def _ledger(kind: str) -> AdjustmentLedger:
        ledger = ledgers.get(kind)
        if ledger is None:
            raise NotFoundError(f"Unknown adjustment kind {kind!r}")
        return ledger

    @app.route("/api/adjustments/<kind>", methods=["GET"], endpoint="list_adjustments")
    @json_endpoint
    def list_adjustments(kind: str):
        ledger = _ledger(kind)
        owner_id = request.args.get("owner_id", "").strip()
        pending_only = request.args.get("pending") in ("1", "true")
        if not owner_id:
            rows = ledger.list_all(pending_only=pending_only)
        elif pending_only:
            rows = ledger.pending_for(owner_id)
        else:
            rows = ledger.list_for(owner_id)
        return ok({"adjustments": [a.as_dict() for a in rows]})

    @app.route("/api/adjustments/<kind>", methods=["POST"], endpoint="record_adjustment")
    @json_endpoint
    def record_adjustment(kind: str):
        data = json_body()
        adj = _ledger(kind).record_pending(
            owner_id=data.get("owner_id", ""),
            type=data.get("type"),
            amount=data.get("amount"),
            description=data.get("description", ""),
            effective_date=optional_date(data.get("effective_date"), "Effective date"),
        )
        return ok({"adjustment": adj.as_dict()}, 201)

    @app.route("/api/adjustments/<kind>/<adjustment_id>", methods=["PATCH"], endpoint="edit_adjustment")
    @json_endpoint
    def edit_adjustment(kind: str, adjustment_id: str):
        data = json_body()
        adj = _ledger(kind).edit_pending(
            adjustment_id,
            type=data.get("type"),
            amount=data.get("amount"),
            description=data.get("description"),
            effective_date=optional_date(data.get("effective_date"), "Effective date"),
        )
        return ok({"adjustment": adj.as_dict()})

    @app.route("/api/adjustments/<kind>/<adjustment_id>", methods=["DELETE"], endpoint="delete_adjustment")
    @json_endpoint
    def delete_adjustment(kind: str, adjustment_id: str):
        _ledger(kind).delete_pending(adjustment_id)
        return ok({"deleted": adjustment_id})
